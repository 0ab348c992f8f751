# SPDX-License-Identifier: MIT
"""Exceptions raised while reading glTF node documents."""

from __future__ import annotations


class FormatError(ValueError):
    """Malformed node document: bad shape, bad length, or truncated stream."""


class UnresolvedReferenceError(FormatError):
    """An index reference that does not resolve against the document."""

    def __init__(self, kind: str, index: int, count: int | None = None):
        self.kind = kind
        self.index = index
        self.count = count
        if count is None:
            message = f"Invalid {kind} index {index}"
        else:
            message = f"Invalid {kind} index {index} (document has {count})"
        super().__init__(message)
