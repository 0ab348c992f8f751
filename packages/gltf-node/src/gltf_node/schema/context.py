# SPDX-License-Identifier: MIT
"""Document-wide index resolution for node references."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from enum import Enum
from typing import Any

from gltf_node.errors import UnresolvedReferenceError


class ReferenceKind(Enum):
    """Top-level glTF arrays a node can reference, keyed by array name."""

    CAMERA = "cameras"
    MESH = "meshes"
    SKIN = "skins"
    NODE = "nodes"


class DocumentContext:
    """Resolves integer indices against the document's top-level arrays.

    Read-only while nodes are parsed; share it across threads only with
    external locking if anything mutates ``tables``.
    """

    def __init__(self, tables: Mapping[str, Sequence[Any]] | None = None):
        """Initialize the context.

        Args:
            tables: Mapping of array name (e.g. "meshes") to its entries.
                None disables range checks, so any non-negative index resolves.
        """
        self.tables = tables

    @classmethod
    def from_document(cls, document: Mapping[str, Any]) -> DocumentContext:
        """Build a context from a decoded glTF document."""
        return cls(
            {kind.value: document.get(kind.value) or [] for kind in ReferenceKind}
        )

    def resolve(self, kind: ReferenceKind, index: int) -> int:
        """Validate an index reference and return it.

        Raises:
            UnresolvedReferenceError: if the index is outside the table
        """
        if index < 0:
            raise UnresolvedReferenceError(kind.value, index)
        if self.tables is None:
            return index

        count = len(self.tables.get(kind.value) or [])
        if index >= count:
            raise UnresolvedReferenceError(kind.value, index, count)
        return index

    def lookup(self, kind: ReferenceKind, index: int) -> Any:
        """Return the entry an index refers to."""
        if self.tables is None:
            raise UnresolvedReferenceError(kind.value, index)
        self.resolve(kind, index)
        return self.tables[kind.value][index]
