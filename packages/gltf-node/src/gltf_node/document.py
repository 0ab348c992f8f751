# SPDX-License-Identifier: MIT
"""Read and write nodes as JSON text, msgpack bytes and glTF documents."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

import msgpack
import numpy as np

from gltf_node.errors import FormatError
from gltf_node.io.msgpack_codec import decode_msgpack, encode_msgpack
from gltf_node.io.stream import PropertyReader, PropertyWriter
from gltf_node.scene.node import Node
from gltf_node.scene.transforms import Transform, combine_transforms, matrix_to_trs
from gltf_node.schema.context import DocumentContext
from gltf_node.schema.node_codec import deserialize_node, serialize_node

logger = logging.getLogger(__name__)

JSON_SUFFIXES = (".gltf", ".json")
MSGPACK_SUFFIXES = (".msgpack", ".mpk")


def node_from_dict(data: Any, context: DocumentContext | None = None) -> Node:
    """Parse a node from its decoded object.

    Args:
        data: Decoded node object
        context: Index resolution; defaults to an unchecked context

    Returns:
        The parsed node
    """
    reader = PropertyReader.from_value(data)
    reader.read_start_object()
    node = deserialize_node(context or DocumentContext(), reader)
    reader.expect_end()
    return node


def node_to_dict(node: Node) -> dict[str, Any]:
    """Emit a node as a plain dict in canonical property order."""
    writer = PropertyWriter()
    serialize_node(node, writer)
    return writer.result


def node_from_json(text: str | bytes, context: DocumentContext | None = None) -> Node:
    try:
        data = json.loads(text)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise FormatError(f"Invalid JSON: {e}") from e
    return node_from_dict(data, context)


def node_to_json(node: Node, indent: int | None = None) -> str:
    return json.dumps(node_to_dict(node), indent=indent)


def node_from_msgpack(data: bytes, context: DocumentContext | None = None) -> Node:
    return node_from_dict(decode_msgpack(data), context)


def node_to_msgpack(node: Node) -> bytes:
    return encode_msgpack(node_to_dict(node))


def read_nodes(document: Mapping[str, Any]) -> list[Node]:
    """Parse every entry of a glTF document's ``nodes`` array.

    References are checked against the document's own arrays.
    """
    context = DocumentContext.from_document(document)
    return [node_from_dict(data, context) for data in document.get("nodes") or []]


def write_nodes(document: dict[str, Any], nodes: Sequence[Node]) -> None:
    """Replace a glTF document's ``nodes`` array with the given nodes."""
    if nodes:
        document["nodes"] = [node_to_dict(node) for node in nodes]
    else:
        document.pop("nodes", None)


def load_document(path: Path) -> dict[str, Any]:
    """Load a glTF JSON (.gltf/.json) or msgpack (.msgpack/.mpk) document."""
    path = Path(path)
    suffix = path.suffix.lower()
    logger.info("Loading %s", path)

    if suffix in JSON_SUFFIXES:
        try:
            document = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise FormatError(f"Invalid JSON in {path}: {e}") from e
    elif suffix in MSGPACK_SUFFIXES:
        document = decode_msgpack(path.read_bytes())
    else:
        raise ValueError(f"Unsupported document type '{path.suffix}'")

    if not isinstance(document, dict):
        raise FormatError(f"Expected a top-level object in {path}")
    return document


def save_document(
    document: Mapping[str, Any], path: Path, indent: int | None = None
) -> None:
    """Save a document, choosing the encoding from the file suffix."""
    path = Path(path)
    suffix = path.suffix.lower()
    logger.info("Saving %s", path)

    if suffix in JSON_SUFFIXES:
        text = json.dumps(_json_value(document), indent=indent)
        path.write_text(text, encoding="utf-8")
    elif suffix in MSGPACK_SUFFIXES:
        path.write_bytes(encode_msgpack(dict(document)))
    else:
        raise ValueError(f"Unsupported document type '{path.suffix}'")


def _json_value(value: Any) -> Any:
    """Convert a document tree to values json can encode."""
    if isinstance(value, Mapping):
        return {key: _json_value(item) for key, item in value.items()}
    if isinstance(value, msgpack.ExtType):
        raise FormatError(f"msgpack extension type {value.code} has no JSON form")
    if isinstance(value, (list, tuple)):
        return [_json_value(item) for item in value]
    if isinstance(value, np.ndarray):
        return value.tolist()
    if isinstance(value, np.generic):
        return value.item()
    if isinstance(value, (bytes, bytearray)):
        raise FormatError("Binary data has no JSON form")
    return value


def world_transform(nodes: Sequence[Node], index: int) -> Transform:
    """Get the document-space transform of a node.

    Parents are found through the ``children`` lists. Shear produced by
    non-uniform parent scale is dropped at each level.

    Raises:
        FormatError: if an index is out of range, or the node has two parents
            or sits in a cycle
    """
    if not 0 <= index < len(nodes):
        raise FormatError(f"Node index {index} out of range for {len(nodes)} nodes")

    parents: dict[int, int] = {}
    for parent_index, node in enumerate(nodes):
        for child in node.children or []:
            if not 0 <= child < len(nodes):
                raise FormatError(f"Node {parent_index} has out-of-range child {child}")
            if child in parents:
                raise FormatError(f"Node {child} has more than one parent")
            parents[child] = parent_index

    # Collect transforms from this node up to its root
    chain = [index]
    while chain[-1] in parents:
        parent_index = parents[chain[-1]]
        if parent_index in chain:
            raise FormatError(f"Node hierarchy has a cycle through node {index}")
        chain.append(parent_index)

    world = Transform.identity()
    for i in reversed(chain):
        world = combine_transforms(world, matrix_to_trs(nodes[i].local_matrix()))
    return world
