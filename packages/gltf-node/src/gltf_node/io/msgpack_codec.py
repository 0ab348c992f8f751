# SPDX-License-Identifier: MIT
"""Msgpack encoding of node documents.

Documents are the same trees the JSON encoding holds. Binary values and
extension types are decoded as is; they have no JSON form and are rejected
when the tree is tokenized or saved as JSON.
"""

from __future__ import annotations

from typing import Any

import msgpack


def decode_msgpack(data: bytes) -> Any:
    """Decode msgpack data.

    Args:
        data: Raw msgpack bytes

    Returns:
        Decoded Python object (dict, list, etc.)
    """
    return msgpack.unpackb(data, raw=False)


def encode_msgpack(obj: Any) -> bytes:
    """Encode a plain document tree as msgpack bytes."""
    return msgpack.packb(obj, use_bin_type=True)
