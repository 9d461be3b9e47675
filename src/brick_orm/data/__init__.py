"""Typed values stored as nullable strings."""

from .serializable import (
    BOOLEAN,
    DATETIME,
    FLOAT,
    INTEGER,
    JSON,
    STRING,
    UUID,
    SerializableType,
    SerializableValue,
)

__all__ = [
    "BOOLEAN",
    "DATETIME",
    "FLOAT",
    "INTEGER",
    "JSON",
    "STRING",
    "UUID",
    "SerializableType",
    "SerializableValue",
]
