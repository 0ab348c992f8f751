# SPDX-License-Identifier: MIT
"""Streaming reader/writer primitives and encodings for node documents."""

from .msgpack_codec import decode_msgpack, encode_msgpack
from .stream import PropertyReader, PropertyWriter, TokenType, tokenize

__all__ = [
    "PropertyReader",
    "PropertyWriter",
    "TokenType",
    "tokenize",
    "decode_msgpack",
    "encode_msgpack",
]
