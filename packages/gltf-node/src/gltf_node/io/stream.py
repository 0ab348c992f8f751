# SPDX-License-Identifier: MIT
"""Token-based property reader and writer for node documents.

The reader pulls ``(TokenType, value)`` pairs one at a time, the way a JSON
pull parser does. ``tokenize`` produces such a stream lazily from an already
decoded JSON or msgpack tree, so the same reader serves both encodings.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from enum import Enum
from typing import Any

import numpy as np

from gltf_node.errors import FormatError


class TokenType(Enum):
    """Kinds of tokens in a property stream."""

    START_OBJECT = "start_object"
    END_OBJECT = "end_object"
    START_ARRAY = "start_array"
    END_ARRAY = "end_array"
    PROPERTY_NAME = "property_name"
    INTEGER = "integer"
    FLOAT = "float"
    STRING = "string"
    BOOLEAN = "boolean"
    NULL = "null"


Token = tuple[TokenType, Any]

_NUMBER_TOKENS = (TokenType.INTEGER, TokenType.FLOAT)


def tokenize(value: Any) -> Iterator[Token]:
    """Yield tokens for a decoded document tree.

    Args:
        value: dicts, lists/tuples, numpy arrays and JSON scalars

    Raises:
        FormatError: for values with no document representation
    """
    if isinstance(value, dict):
        yield TokenType.START_OBJECT, None
        for key, item in value.items():
            if not isinstance(key, str):
                raise FormatError(f"Property names must be strings, got {key!r}")
            yield TokenType.PROPERTY_NAME, key
            yield from tokenize(item)
        yield TokenType.END_OBJECT, None
    elif isinstance(value, (list, tuple, np.ndarray)):
        if isinstance(value, np.ndarray):
            value = value.tolist()
        yield TokenType.START_ARRAY, None
        for item in value:
            yield from tokenize(item)
        yield TokenType.END_ARRAY, None
    elif value is None:
        yield TokenType.NULL, None
    elif isinstance(value, (bool, np.bool_)):
        yield TokenType.BOOLEAN, bool(value)
    elif isinstance(value, (int, np.integer)):
        yield TokenType.INTEGER, int(value)
    elif isinstance(value, (float, np.floating)):
        yield TokenType.FLOAT, float(value)
    elif isinstance(value, str):
        yield TokenType.STRING, value
    else:
        raise FormatError(f"Unsupported value of type {type(value).__name__}")


class PropertyReader:
    """Pull reader over a token stream."""

    def __init__(self, tokens: Iterable[Token]):
        """Initialize the reader.

        Args:
            tokens: Iterable of (TokenType, value) pairs, e.g. from tokenize()
        """
        self._tokens = iter(tokens)
        self.token_type: TokenType | None = None
        self.value: Any = None

    @classmethod
    def from_value(cls, value: Any) -> PropertyReader:
        """Create a reader over a decoded document tree."""
        return cls(tokenize(value))

    def read(self) -> bool:
        """Advance to the next token. Returns False at the end of the stream."""
        try:
            self.token_type, self.value = next(self._tokens)
        except StopIteration:
            self.token_type = None
            self.value = None
            return False
        return True

    def _require(self, expected: str) -> None:
        if not self.read():
            raise FormatError(f"Unexpected end of stream, expected {expected}")

    def _unexpected(self, expected: str) -> FormatError:
        return FormatError(f"Expected {expected}, got {self.token_type.value} token")

    def read_start_object(self) -> None:
        """Consume the start of an object."""
        self._require("an object")
        if self.token_type != TokenType.START_OBJECT:
            raise self._unexpected("an object")

    def read_property_name(self) -> str | None:
        """Read the next property name, or None once the object has ended."""
        self._require("a property name or end of object")
        if self.token_type == TokenType.END_OBJECT:
            return None
        if self.token_type != TokenType.PROPERTY_NAME:
            raise self._unexpected("a property name")
        return self.value

    def read_int(self) -> int:
        self._require("an integer")
        if self.token_type != TokenType.INTEGER:
            raise self._unexpected("an integer")
        return self.value

    def read_string(self) -> str:
        self._require("a string")
        if self.token_type != TokenType.STRING:
            raise self._unexpected("a string")
        return self.value

    def read_int_list(self) -> list[int]:
        """Read an array of integers."""
        self._read_start_array()
        values = []
        while True:
            self._require("an integer or end of array")
            if self.token_type == TokenType.END_ARRAY:
                return values
            if self.token_type != TokenType.INTEGER:
                raise self._unexpected("an integer")
            values.append(self.value)

    def read_float_list(self) -> list[float]:
        """Read an array of numbers as floats."""
        self._read_start_array()
        values = []
        while True:
            self._require("a number or end of array")
            if self.token_type == TokenType.END_ARRAY:
                return values
            if self.token_type not in _NUMBER_TOKENS:
                raise self._unexpected("a number")
            try:
                values.append(float(self.value))
            except OverflowError as e:
                raise FormatError(f"Number out of range: {self.value}") from e

    def read_float_array(self, count: int, name: str = "array") -> list[float]:
        """Read an array of exactly ``count`` numbers.

        Raises:
            FormatError: if the array holds any other number of elements
        """
        values = self.read_float_list()
        if len(values) != count:
            raise FormatError(
                f"Expected {count} values for '{name}', got {len(values)}"
            )
        return values

    def read_value(self) -> Any:
        """Read any value and return it as a plain Python object."""
        self._require("a value")
        return self._capture_current()

    def expect_end(self) -> None:
        """Check that the stream holds nothing after the current token."""
        if self.read():
            raise FormatError(
                f"Unexpected {self.token_type.value} token after end of document"
            )

    def _read_start_array(self) -> None:
        self._require("an array")
        if self.token_type != TokenType.START_ARRAY:
            raise self._unexpected("an array")

    def _capture_current(self) -> Any:
        if self.token_type == TokenType.START_OBJECT:
            obj = {}
            while (name := self.read_property_name()) is not None:
                obj[name] = self.read_value()
            return obj
        if self.token_type == TokenType.START_ARRAY:
            items = []
            while True:
                self._require("a value or end of array")
                if self.token_type == TokenType.END_ARRAY:
                    return items
                items.append(self._capture_current())
        if self.token_type in (TokenType.END_OBJECT, TokenType.END_ARRAY):
            raise self._unexpected("a value")
        if self.token_type == TokenType.PROPERTY_NAME:
            raise self._unexpected("a value")
        return self.value


class PropertyWriter:
    """Push writer that builds a plain document tree.

    Containers are attached to their parent as soon as they are started, so
    ``result`` is the same tree json.dumps or msgpack.packb will encode.
    """

    def __init__(self):
        self._stack: list[dict | list] = []
        self._names: list[str | None] = []
        self._result: Any = None
        self._has_result = False

    @property
    def result(self) -> Any:
        """The written tree. Only available once every container is closed."""
        if self._stack or not self._has_result:
            raise ValueError("Writer has unfinished output")
        return self._result

    def write_start_object(self) -> None:
        obj: dict[str, Any] = {}
        self._emit(obj)
        self._stack.append(obj)
        self._names.append(None)

    def write_end_object(self) -> None:
        self._pop(dict)

    def write_start_array(self) -> None:
        items: list[Any] = []
        self._emit(items)
        self._stack.append(items)
        self._names.append(None)

    def write_end_array(self) -> None:
        self._pop(list)

    def write_property_name(self, name: str) -> None:
        if not self._stack or not isinstance(self._stack[-1], dict):
            raise ValueError(f"Property name '{name}' written outside an object")
        self._names[-1] = name

    def write_value(self, value: int | float | str | bool | None) -> None:
        self._emit(value)

    def write_raw(self, value: Any) -> None:
        """Write an already-built value (object, array or scalar) as is."""
        self._emit(value)

    def _emit(self, value: Any) -> None:
        if not self._stack:
            if self._has_result:
                raise ValueError("Writer already holds a complete document")
            self._result = value
            self._has_result = True
            return

        top = self._stack[-1]
        if isinstance(top, list):
            top.append(value)
            return

        name = self._names[-1]
        if name is None:
            raise ValueError("Value written in an object without a property name")
        top[name] = value
        self._names[-1] = None

    def _pop(self, kind: type) -> None:
        if not self._stack or not isinstance(self._stack[-1], kind):
            raise ValueError(f"No open {kind.__name__} to close")
        self._stack.pop()
        self._names.pop()
