"""Column types that store typed values as nullable strings.

These types encapsulate the codec conversion so that entities expose typed
attributes while the database sees a plain ``VARCHAR``/``TEXT`` column.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, TypeVar

from sqlalchemy import String
from sqlalchemy.types import TypeDecorator

from brick_orm.data.serializable import SerializableType, SerializableValue

if TYPE_CHECKING:
    from sqlalchemy.engine.interfaces import Dialect

__all__ = ["CodecType", "SerializableValueType"]

T = TypeVar("T")


class SerializableValueType(TypeDecorator[SerializableValue]):  # pylint: disable=too-many-ancestors
    """Store a `SerializableValue` holder as its serialized string.

    A ``None`` attribute and a holder without a value both bind as ``NULL``;
    a ``NULL`` column loads as an empty holder so callers can always ``get``.
    """

    impl = String
    cache_ok = True

    def process_bind_param(
        self, value: SerializableValue | None, dialect: Dialect
    ) -> str | None:
        if value is None:
            return None
        return value.serialized_value

    def process_result_value(
        self, value: str | None, dialect: Dialect
    ) -> SerializableValue:
        return SerializableValue(value)

    def process_literal_param(
        self, value: SerializableValue | None, dialect: Dialect
    ) -> Any:
        return self.process_bind_param(value, dialect)

    @property
    def python_type(self) -> type[SerializableValue]:
        return SerializableValue


class CodecType(TypeDecorator[T]):  # pylint: disable=too-many-ancestors
    """Store an arbitrary typed attribute through a `SerializableType` codec.

    ``None`` binds as ``NULL`` and ``NULL`` loads as ``None``; any other value
    goes through the codec. The codec is not validated, so a codec that
    cannot read the stored text fails when the row is loaded.

    Example:
        ``settings: Mapped[dict] = mapped_column(CodecType(JSON))``
    """

    impl = String
    cache_ok = True

    def __init__(self, codec: SerializableType[T], *args: Any, **kwargs: Any):
        super().__init__(*args, **kwargs)
        self.codec = codec

    def process_bind_param(self, value: T | None, dialect: Dialect) -> str | None:
        return SerializableValue.of(self.codec, value).serialized_value

    def process_result_value(self, value: str | None, dialect: Dialect) -> T | None:
        return SerializableValue(value).get(self.codec)

    def process_literal_param(self, value: T | None, dialect: Dialect) -> Any:
        return self.process_bind_param(value, dialect)

    @property
    def python_type(self) -> type[T]:
        return self.codec.python_type
