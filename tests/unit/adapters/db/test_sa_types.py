"""Unit tests for the codec-backed column types.

Checks both the Python-side conversion hooks and a round trip through an
in-memory SQLite table, reading the raw column text to confirm what the
database actually stores.
"""

from sqlalchemy import select, text
from sqlalchemy.orm import Session

from brick_orm.adapters.db.sa_types import CodecType, SerializableValueType
from brick_orm.data.serializable import INTEGER, JSON, UUID, SerializableValue
from tests.fixtures.entities import Setting


def test_serializable_value_type_hooks():
    col_type = SerializableValueType()

    assert col_type.process_bind_param(None, None) is None
    assert col_type.process_bind_param(SerializableValue(None), None) is None
    assert col_type.process_bind_param(SerializableValue.of(INTEGER, 3), None) == "3"
    assert col_type.process_result_value(None, None) == SerializableValue(None)
    assert col_type.process_result_value("3", None).get(INTEGER) == 3
    assert col_type.python_type is SerializableValue


def test_codec_type_hooks():
    col_type = CodecType(JSON)

    assert col_type.process_bind_param(None, None) is None
    assert col_type.process_bind_param({"a": 1}, None) == '{"a": 1}'
    assert col_type.process_result_value(None, None) is None
    assert col_type.process_result_value("[1, 2]", None) == [1, 2]
    assert CodecType(UUID).python_type is UUID.python_type


def test_codec_type_keeps_string_length():
    assert CodecType(INTEGER, 12).impl.length == 12
    assert SerializableValueType(255).impl.length == 255


def test_columns_store_plain_text(sqlite_engine_memory):
    with Session(sqlite_engine_memory) as session:
        session.add(
            Setting(
                key="k",
                value=SerializableValue.of(INTEGER, 42),
                payload={"x": [1, 2]},
            )
        )
        session.commit()

    with sqlite_engine_memory.connect() as conn:
        raw = conn.execute(text("SELECT value, payload FROM setting")).one()
    assert tuple(raw) == ("42", '{"x": [1, 2]}')

    with Session(sqlite_engine_memory) as session:
        loaded = session.scalars(select(Setting)).one()
        assert loaded.value.get(INTEGER) == 42
        assert loaded.payload == {"x": [1, 2]}


def test_null_columns_load_as_empty_holder_and_none(sqlite_engine_memory):
    with Session(sqlite_engine_memory) as session:
        session.add(Setting(key="empty"))
        session.commit()

    with Session(sqlite_engine_memory) as session:
        loaded = session.get(Setting, "empty")
        assert loaded.value == SerializableValue(None)
        assert loaded.payload is None


def test_filter_on_codec_column(sqlite_engine_memory):
    """Bound parameters in WHERE clauses go through the codec as well."""
    with Session(sqlite_engine_memory) as session:
        session.add_all(
            [
                Setting(key="a", value=SerializableValue.of(INTEGER, 1)),
                Setting(key="b", value=SerializableValue.of(INTEGER, 2)),
            ]
        )
        session.commit()
        match = session.scalars(
            select(Setting).where(Setting.value == SerializableValue.of(INTEGER, 2))
        ).all()

    assert [s.key for s in match] == ["b"]
