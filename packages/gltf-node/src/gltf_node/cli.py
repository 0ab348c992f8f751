# SPDX-License-Identifier: MIT
"""Command-line interface for inspecting and normalizing glTF nodes."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from gltf_node.document import load_document, read_nodes, save_document, write_nodes
from gltf_node.scene.node import Node


def _format_vector(values) -> str:
    return "(" + ", ".join(f"{v:.6g}" for v in values) + ")"


def _describe_node(index: int, node: Node, host: bool) -> list[str]:
    lines = [f"node {index}: {node.name or '<unnamed>'}"]
    for label, value in (
        ("camera", node.camera),
        ("mesh", node.mesh),
        ("skin", node.skin),
    ):
        if value is not None:
            lines.append(f"  {label}: {value}")
    if node.children:
        lines.append(f"  children: {node.children}")
    if node.weights:
        lines.append(f"  weights: {_format_vector(node.weights)}")

    if node.uses_trs:
        lines.append("  transform: trs")
        lines.append(f"    translation: {_format_vector(node.translation)}")
        lines.append(f"    rotation: {_format_vector(node.rotation)}")
        lines.append(f"    scale: {_format_vector(node.scale)}")
    else:
        lines.append("  transform: matrix")

    if host:
        trs = node.import_to_host_transform()
        lines.append(f"  host position: {_format_vector(trs.translation)}")
        lines.append(f"  host rotation: {_format_vector(trs.rotation)}")
        lines.append(f"  host scale: {_format_vector(trs.scale)}")
    return lines


def cmd_inspect(args: argparse.Namespace) -> int:
    document = load_document(args.input)
    nodes = read_nodes(document)
    if not nodes:
        print("No nodes")
        return 0
    for index, node in enumerate(nodes):
        print("\n".join(_describe_node(index, node, args.host)))
    return 0


def cmd_normalize(args: argparse.Namespace) -> int:
    document = load_document(args.input)
    nodes = read_nodes(document)
    write_nodes(document, nodes)
    args.output.parent.mkdir(parents=True, exist_ok=True)
    save_document(document, args.output, indent=args.indent)
    print(f"Wrote {len(nodes)} nodes to {args.output}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gltf-node",
        description="Inspect and normalize the nodes of a glTF document",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    inspect_parser = subparsers.add_parser(
        "inspect", help="Print each node's references and transform"
    )
    inspect_parser.add_argument(
        "input",
        type=Path,
        help="Input document (.gltf, .json, .msgpack)",
    )
    inspect_parser.add_argument(
        "--host",
        action="store_true",
        help="Also print the transform in the left-handed host convention",
    )
    inspect_parser.set_defaults(func=cmd_inspect)

    normalize_parser = subparsers.add_parser(
        "normalize", help="Rewrite nodes in canonical order without defaults"
    )
    normalize_parser.add_argument(
        "input",
        type=Path,
        help="Input document (.gltf, .json, .msgpack)",
    )
    normalize_parser.add_argument(
        "-o",
        "--output",
        type=Path,
        required=True,
        help="Output document path",
    )
    normalize_parser.add_argument(
        "--indent",
        type=int,
        default=None,
        help="JSON indentation (default: compact)",
    )
    normalize_parser.set_defaults(func=cmd_normalize)

    return parser


def main(argv: list[str] | None = None) -> int:
    """Run the gltf-node command line."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if not args.input.exists():
        print(f"Error: Input file not found: {args.input}", file=sys.stderr)
        return 1

    try:
        return args.func(args)
    except (ValueError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
