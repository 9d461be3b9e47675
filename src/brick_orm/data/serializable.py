"""Codecs for storing typed values in string columns.

A `SerializableType` pairs a Python type with a serialize/deserialize
function pair. A `SerializableValue` holds the serialized (possibly ``None``)
string and converts it on demand:

    >>> holder = SerializableValue.of(INTEGER, 42)
    >>> holder.serialized_value
    '42'
    >>> holder.get(INTEGER)
    42

Codecs are not validated: reading a value with the wrong codec fails in the
codec's ``deserialize`` and the error propagates to the caller.
"""

from __future__ import annotations

import json
import uuid
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Generic, TypeVar

T = TypeVar("T")

__all__ = [
    "SerializableType",
    "SerializableValue",
    "STRING",
    "INTEGER",
    "FLOAT",
    "BOOLEAN",
    "UUID",
    "DATETIME",
    "JSON",
]


@dataclass(frozen=True)
class SerializableType(Generic[T]):
    """A typed codec: ``serialize(T) -> str`` and ``deserialize(str) -> T``."""

    python_type: type[T]
    serializer: Callable[[T], str]
    deserializer: Callable[[str], T]

    def serialize(self, value: T) -> str:
        return self.serializer(value)

    def deserialize(self, value: str) -> T:
        return self.deserializer(value)

    def __repr__(self) -> str:
        return f"SerializableType({self.python_type.__name__})"


class SerializableValue:
    """Nullable serialized string that is read and written through a codec."""

    __slots__ = ("_value",)

    def __init__(self, serialized_value: str | None = None):
        self._value = serialized_value

    @classmethod
    def of(cls, codec: SerializableType[T], value: T | None) -> SerializableValue:
        """Build a holder storing ``value`` serialized with ``codec``."""
        holder = cls()
        holder.set(codec, value)
        return holder

    @property
    def serialized_value(self) -> str | None:
        return self._value

    def get(self, codec: SerializableType[T]) -> T | None:
        """Return the stored value decoded with ``codec`` (``None`` stays ``None``)."""
        if self._value is None:
            return None
        return codec.deserialize(self._value)

    def set(self, codec: SerializableType[T], value: T | None) -> None:
        """Store ``value`` encoded with ``codec`` (``None`` stores ``None``)."""
        if value is None:
            self._value = None
            return
        self._value = codec.serialize(value)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SerializableValue):
            return NotImplemented
        return self._value == other._value

    def __hash__(self) -> int:
        return hash(self._value)

    def __repr__(self) -> str:
        return f"SerializableValue({self._value!r})"


# --- stock codecs ---


def _parse_bool(value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in {"true", "1"}:
        return True
    if lowered in {"false", "0"}:
        return False
    raise ValueError(f"Not a boolean: {value!r}")


STRING: SerializableType[str] = SerializableType(str, str, str)
INTEGER: SerializableType[int] = SerializableType(int, str, int)
FLOAT: SerializableType[float] = SerializableType(float, repr, float)
BOOLEAN: SerializableType[bool] = SerializableType(
    bool, lambda v: "true" if v else "false", _parse_bool
)
UUID: SerializableType[uuid.UUID] = SerializableType(uuid.UUID, str, uuid.UUID)
DATETIME: SerializableType[datetime] = SerializableType(
    datetime, datetime.isoformat, datetime.fromisoformat
)
JSON: SerializableType[Any] = SerializableType(
    object, lambda v: json.dumps(v, sort_keys=True), json.loads
)
