"""Database engine factory and helpers.

This module centralizes creation of SQLAlchemy Engines and applies
backend-specific tuning:

- **Pool sizing**: a fixed-size connection pool (no overflow) sized from the
  configuration, so pool exhaustion blocks the worker holding the request.
- **SQLite**: adds connection PRAGMAs to enforce foreign keys, enable WAL,
  and tune durability/temporary storage.
- **Debug**: echoes SQL and attaches `StatementStatistics`.
- **Statement cache**: ``disable_second_level_cache`` turns off SQLAlchemy's
  compiled-statement cache, the only cache shared across sessions.

Use this module whenever you need an Engine so that all connections are
consistently configured.
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from sqlalchemy import create_engine, event
from sqlalchemy.engine import URL, make_url

if TYPE_CHECKING:
    from sqlite3 import Connection as SQLiteConnection

    from sqlalchemy.engine import Engine

    from brick_orm.config import DatabaseConfig

logger = logging.getLogger(__name__)

SQLITE_NAMES = {"sqlite", "sqlite+pysqlite"}
MEMORY_DATABASES = {None, "", ":memory:"}


def is_sqlite(url: str | URL) -> bool:
    """Return True if the given SQLAlchemy URL or string corresponds to SQLite.

    Args:
        url: A database URL string or SQLAlchemy :class:`URL`.

    Returns:
        bool: True if the backend is SQLite, otherwise False.
    """
    u = make_url(str(url)) if not isinstance(url, URL) else url
    return u.get_backend_name() in SQLITE_NAMES


def is_memory_sqlite(url: str | URL) -> bool:
    """Return True for an in-memory SQLite URL (one database per connection)."""
    u = make_url(str(url)) if not isinstance(url, URL) else url
    return is_sqlite(u) and u.database in MEMORY_DATABASES


def build_url(config: DatabaseConfig) -> URL:
    """Build the connection URL from a configuration.

    ``driver`` replaces the DBAPI part of the URL (``<backend>+<driver>``);
    ``username`` and ``password`` override the credentials in ``dsn``.
    """
    url = make_url(config.dsn)
    if config.driver:
        url = url.set(drivername=f"{url.get_backend_name()}+{config.driver}")
    if config.username is not None:
        url = url.set(username=config.username)
    if config.password is not None:
        url = url.set(password=config.password)
    return url


@dataclass
class StatisticsSnapshot:
    """Point-in-time statement statistics."""

    statements: int
    total_ms: float
    slowest_ms: float
    slowest_statement: str | None

    @property
    def mean_ms(self) -> float:
        return self.total_ms / self.statements if self.statements else 0.0


class StatementStatistics:
    """Counts executed statements and their durations for an engine.

    Attached by `make_engine` in debug mode through cursor-execute events.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._statements = 0
        self._total_ms = 0.0
        self._slowest_ms = 0.0
        self._slowest_statement: str | None = None

    def attach(self, engine: Engine) -> None:
        event.listen(engine, "before_cursor_execute", self._before_cursor_execute)
        event.listen(engine, "after_cursor_execute", self._after_cursor_execute)

    def _before_cursor_execute(  # pylint: disable=too-many-arguments,too-many-positional-arguments
        self, conn, cursor, statement, parameters, context, executemany
    ) -> None:
        conn.info.setdefault("brick_orm_query_start", []).append(time.perf_counter())

    def _after_cursor_execute(  # pylint: disable=too-many-arguments,too-many-positional-arguments
        self, conn, cursor, statement, parameters, context, executemany
    ) -> None:
        starts = conn.info.get("brick_orm_query_start")
        if not starts:
            return
        duration_ms = (time.perf_counter() - starts.pop()) * 1000
        with self._lock:
            self._statements += 1
            self._total_ms += duration_ms
            if duration_ms >= self._slowest_ms:
                self._slowest_ms = duration_ms
                self._slowest_statement = " ".join(statement.split())[:200]

    def snapshot(self) -> StatisticsSnapshot:
        with self._lock:
            return StatisticsSnapshot(
                statements=self._statements,
                total_ms=self._total_ms,
                slowest_ms=self._slowest_ms,
                slowest_statement=self._slowest_statement,
            )

    def log_summary(self, log: logging.Logger = logger) -> None:
        """Log a summary of the collected statistics at INFO level."""
        snap = self.snapshot()
        log.info(
            "Statements: %d, total %.2fms, mean %.2fms, slowest %.2fms",
            snap.statements,
            snap.total_ms,
            snap.mean_ms,
            snap.slowest_ms,
        )
        if snap.slowest_statement:
            log.info("Slowest statement: %s", snap.slowest_statement)


def make_engine(
    url: str | URL,
    *,
    echo: bool = False,
    pool_size: int | None = None,
    statement_cache: bool = True,
    statistics: StatementStatistics | None = None,
) -> Engine:
    """Create a SQLAlchemy Engine for the given URL.

    If the backend is SQLite, applies a set of PRAGMAs to improve safety and
    concurrency:
        - ``foreign_keys=ON`` (enforce referential integrity)
        - ``journal_mode=WAL`` (write-ahead logging for concurrency)
        - ``synchronous=NORMAL`` (balanced durability)
        - ``temp_store=MEMORY`` (reduce temp file I/O)

    Args:
        url: Database connection URL (str or :class:`URL`).
        echo: If True, log SQL statements.
        pool_size: Size of the connection pool; the pool does not overflow.
            ``None`` keeps SQLAlchemy's default pool.
        statement_cache: If False, disable the compiled-statement cache.
        statistics: Optional collector attached to the engine's cursor events.

    Returns:
        Engine: Configured SQLAlchemy Engine.
    """

    kwargs: dict[str, Any] = {"echo": echo}
    if pool_size is not None:
        kwargs["pool_size"] = pool_size
        # in-memory SQLite uses a per-thread pool which has no overflow
        if not is_memory_sqlite(url):
            kwargs["max_overflow"] = 0
    if not statement_cache:
        kwargs["query_cache_size"] = 0

    engine = create_engine(url, **kwargs)

    if is_sqlite(url):

        @event.listens_for(engine, "connect")
        def _sqlite_pragmas(dbapi_conn: SQLiteConnection, conn_record):  # type: ignore #pylint: disable=W0613
            cur = dbapi_conn.cursor()
            cur.execute("PRAGMA foreign_keys=ON;")
            cur.execute("PRAGMA journal_mode=WAL;")
            cur.execute("PRAGMA synchronous=NORMAL;")
            cur.execute("PRAGMA temp_store=MEMORY;")
            cur.close()

    if statistics is not None:
        statistics.attach(engine)

    return engine


def engine_from_config(
    config: DatabaseConfig, statistics: StatementStatistics | None = None
) -> Engine:
    """Create the Engine described by a `DatabaseConfig`."""
    engine = make_engine(
        build_url(config),
        echo=config.debug,
        pool_size=config.pool_size,
        statement_cache=not config.disable_second_level_cache,
        statistics=statistics,
    )
    logger.debug(
        "Created engine for %s (pool_size=%d, debug=%s, statement_cache=%s)",
        engine.url.render_as_string(hide_password=True),
        config.pool_size,
        config.debug,
        not config.disable_second_level_cache,
    )
    return engine
