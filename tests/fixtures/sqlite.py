"""sqlite-specific fixtures"""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path
from typing import TYPE_CHECKING

import pytest
from sqlalchemy.engine import URL

from brick_orm.adapters.database_context import SqlAlchemyDatabaseContext
from brick_orm.adapters.db.engine import make_engine
from brick_orm.config import DatabaseConfig

from tests.fixtures.entities import ENTITIES, MIGRATIONS_ROOT, Base

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

## adjust pylint to deal with fixtures
# pylint: disable=redefined-outer-name


@pytest.fixture
def sqlite_url(tmp_path: Path) -> str:
    """URL of a fresh, empty SQLite file under the test's temp dir.

    Worker threads each check out their own connection, so the facade needs
    a *file* database: every ``:memory:`` connection is a separate database.
    """
    return str(URL.create("sqlite+pysqlite", database=str(tmp_path / "test.db")))


@pytest.fixture
def sqlite_engine_memory() -> Iterator[Engine]:
    """In-memory SQLite engine with the test tables created from metadata.

    No migrations are run here.

    Yields:
        Engine: SQLAlchemy engine bound to an in-memory DB.
    """
    test_engine = make_engine("sqlite+pysqlite:///:memory:")
    Base.metadata.create_all(test_engine)
    yield test_engine
    Base.metadata.drop_all(test_engine)
    test_engine.dispose()


@pytest.fixture
def sqlite_engine_file(sqlite_url: str) -> Iterator[Engine]:
    """File-backed SQLite engine, unmigrated (per test).

    Yields:
        Engine: SQLAlchemy engine pointing at a temp file DB.
    """
    test_engine = make_engine(sqlite_url)
    try:
        yield test_engine
    finally:
        test_engine.dispose()


@pytest.fixture
def sqlite_config(sqlite_url: str) -> DatabaseConfig:
    """Configuration for a migrated SQLite file with a small pool."""
    return DatabaseConfig(
        dsn=sqlite_url, pool_size=4, migrations_path=MIGRATIONS_ROOT
    )


@pytest.fixture
def sqlite_context(
    sqlite_config: DatabaseConfig,
) -> Iterator[SqlAlchemyDatabaseContext]:
    """Database context over a migrated SQLite file, shut down after the test."""
    ctx = SqlAlchemyDatabaseContext(sqlite_config, ENTITIES)
    try:
        yield ctx
    finally:
        ctx.shutdown()
