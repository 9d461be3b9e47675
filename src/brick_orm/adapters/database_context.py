"""SQLAlchemy implementation of the asynchronous persistence facade.

`SqlAlchemyDatabaseContext` owns one Engine, one session factory and one
worker pool. Construction is synchronous and fails fast: the database must be
reachable, every registered entity must be mapped and pending migrations must
apply. After that each facade call is submitted to the worker pool and runs
in its own `SqlAlchemyUnitOfWork`:

1. open a session (checking a connection out of the pool, blocking the
   worker, never the caller, when the pool is exhausted),
2. run the operation,
3. commit (write operations) or detach the loaded objects (reads),
4. roll back anything left and close the session.

Entities come back detached with their loaded state
(``expire_on_commit=False``); relationships are only available if a fetch
plan loaded them.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import TYPE_CHECKING, Any, TypeVar

from sqlalchemy import inspect, select, text
from sqlalchemy.exc import ArgumentError, NoInspectionAvailable, SQLAlchemyError
from sqlalchemy.orm import Mapper, configure_mappers, sessionmaker

from brick_orm.interfaces.database_context import UNSET, DatabaseContext
from brick_orm.interfaces.errors import (
    ConfigurationError,
    ContextClosedError,
    DatabaseConnectionError,
    DatabaseOperationError,
    UnmappedEntityError,
)

from .db.engine import StatementStatistics, engine_from_config, is_memory_sqlite
from .db.fetch import load_planned, loader_options, resolve_plan
from .migrations import MigrationRunner
from .unit_of_work import SqlAlchemyUnitOfWork

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence
    from concurrent.futures import Future

    from sqlalchemy.orm import Session
    from sqlalchemy.sql.elements import ColumnElement

    from brick_orm.config import DatabaseConfig
    from brick_orm.interfaces.database_context import Criteria, FetchArg, Modifier

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")


class SqlAlchemyDatabaseContext(DatabaseContext):  # pylint: disable=too-many-instance-attributes
    """`DatabaseContext` backed by a SQLAlchemy Engine and ORM sessions.

    Args:
        config: Connection, pool and migration settings.
        entities: The mapped entity classes this context serves.
        max_workers: Worker threads; defaults to ``config.pool_size``.

    Raises:
        ConfigurationError: If the database URL is invalid or names an
            in-memory SQLite database.
        DatabaseConnectionError: If the database cannot be reached.
        UnmappedEntityError: If an entity class is not mapped.
        MigrationError: If pending migrations cannot be applied.
    """

    def __init__(
        self,
        config: DatabaseConfig,
        entities: Sequence[type],
        *,
        max_workers: int | None = None,
    ):
        self.config = config
        self.entities: tuple[type, ...] = tuple(entities)
        self.statistics = StatementStatistics() if config.debug else None
        self.applied_migrations: list[str] = []

        try:
            self.engine = engine_from_config(config, self.statistics)
        except ArgumentError as e:
            raise ConfigurationError(f"Invalid database URL: {e}") from e
        if is_memory_sqlite(self.engine.url):
            # each pooled connection would open its own empty database
            self.engine.dispose()
            raise ConfigurationError(
                "In-memory SQLite is not supported: every worker thread would "
                "see a separate database. Use a file-backed SQLite URL."
            )

        try:
            self._check_connection()
            self._register_entities()
            if config.migrations_path is not None:
                runner = MigrationRunner(
                    self.engine, config.migrations_path, config.dialect
                )
                self.applied_migrations = runner.run()
        except BaseException:
            self.engine.dispose()
            raise

        self.session_factory = sessionmaker(self.engine, expire_on_commit=False)
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers or config.pool_size,
            thread_name_prefix="brick-orm",
        )
        self._lock = threading.Lock()
        self._closed = False
        logger.info(
            "Database context ready: %s, %d entities, %d migration(s) applied",
            self.engine.url.render_as_string(hide_password=True),
            len(self.entities),
            len(self.applied_migrations),
        )

    # --- construction helpers ---

    def _check_connection(self) -> None:
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
        except SQLAlchemyError as e:
            url = self.engine.url.render_as_string(hide_password=True)
            logger.error("Cannot connect to %s: %s", url, e)
            raise DatabaseConnectionError(url) from e

    def _register_entities(self) -> None:
        for entity_type in self.entities:
            try:
                mapper = inspect(entity_type)
            except NoInspectionAvailable as e:
                raise UnmappedEntityError(entity_type) from e
            if not isinstance(mapper, Mapper):
                raise UnmappedEntityError(entity_type)
        configure_mappers()

    # --- unit of work plumbing ---

    def _submit(
        self, operation: str, work: Callable[[Session], R], *, commit: bool
    ) -> Future[R]:
        with self._lock:
            if self._closed:
                raise ContextClosedError
            return self._executor.submit(self._run, operation, work, commit)

    def _run(self, operation: str, work: Callable[[Session], R], commit: bool) -> R:
        try:
            with SqlAlchemyUnitOfWork(self.session_factory) as uow:
                result = work(uow.session)
                if commit:
                    uow.commit()
                else:
                    # keep loaded state; the rollback on exit would expire it
                    uow.session.expunge_all()
                return result
        except Exception as e:
            logger.exception("%s failed", operation)
            raise DatabaseOperationError(operation, e) from e

    # --- lookups ---

    def find(
        self, entity_type: type[T], ident: Any, *, fetch: FetchArg = None
    ) -> Future[T | None]:
        def work(session: Session) -> T | None:
            plan = resolve_plan(entity_type, fetch)
            return session.get(
                entity_type, ident, options=loader_options(entity_type, plan)
            )

        return self._submit("find", work, commit=False)

    def find_all(
        self,
        entity_type: type[T],
        *,
        modifier: Modifier[T] | None = None,
        fetch: FetchArg = None,
    ) -> Future[list[T]]:
        return self._submit(
            "find_all",
            self._select_work(entity_type, None, modifier, fetch),
            commit=False,
        )

    def find_all_where(
        self,
        entity_type: type[T],
        field_or_criteria: str | Criteria[T],
        value: Any = UNSET,
        *,
        fetch: FetchArg = None,
    ) -> Future[list[T]]:
        if callable(field_or_criteria):
            if value is not UNSET:
                raise TypeError("value is only accepted together with a field name")
            criteria = field_or_criteria
        else:
            if value is UNSET:
                raise TypeError(f"missing value for field {field_or_criteria!r}")
            criteria = _equals(field_or_criteria, value)

        return self._submit(
            "find_all_where",
            self._select_work(entity_type, criteria, None, fetch),
            commit=False,
        )

    def _select_work(
        self,
        entity_type: type[T],
        criteria: Criteria[T] | None,
        modifier: Modifier[T] | None,
        fetch: FetchArg,
    ) -> Callable[[Session], list[T]]:
        def work(session: Session) -> list[T]:
            plan = resolve_plan(entity_type, fetch)
            stmt = select(entity_type).options(*loader_options(entity_type, plan))
            if criteria is not None:
                stmt = stmt.where(criteria(entity_type))
            if modifier is not None:
                stmt = modifier(stmt, entity_type)
            return list(session.scalars(stmt).all())

        return work

    # --- writes ---

    def persist(self, *entities: object) -> Future[None]:
        def work(session: Session) -> None:
            session.add_all(entities)

        return self._submit("persist", work, commit=True)

    def merge(self, entity: T) -> Future[T]:
        def work(session: Session) -> T:
            return session.merge(entity)

        return self._submit("merge", work, commit=True)

    def remove(self, *entities: object) -> Future[None]:
        def work(session: Session) -> None:
            for entity in entities:
                # reattach detached instances before deleting them
                session.delete(session.merge(entity))

        return self._submit("remove", work, commit=True)

    def refresh(self, entity: T, *, fetch: FetchArg = None) -> Future[T]:
        def work(session: Session) -> T:
            entity_type = type(entity)
            plan = resolve_plan(entity_type, fetch)
            loader_options(entity_type, plan)  # validate before touching state
            session.add(entity)
            session.refresh(entity)
            load_planned(entity, plan)
            return entity

        return self._submit("refresh", work, commit=False)

    # --- escape hatches ---

    def with_session(self, operation: Callable[[Session], R]) -> Future[R]:
        return self._submit("with_session", operation, commit=False)

    def with_transaction(self, operation: Callable[[Session], R]) -> Future[R]:
        return self._submit("with_transaction", operation, commit=True)

    # --- lifecycle & diagnostics ---

    def log_statistics(self) -> None:
        """Log a summary of statement statistics (collected in debug mode only)."""
        if self.statistics is None:
            logger.info("Statement statistics are only collected in debug mode")
            return
        self.statistics.log_summary(logger)

    def shutdown(self, wait: bool = True) -> None:
        with self._lock:
            if self._closed:
                return
            self._closed = True
        self._executor.shutdown(wait=wait)
        self.engine.dispose()
        logger.info("Database context shut down")

    @property
    def closed(self) -> bool:
        return self._closed

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}"
            f"({self.engine.url.render_as_string(hide_password=True)!r})"
        )


def _equals(field: str, value: Any) -> Callable[[type], ColumnElement[bool]]:
    """Criteria comparing a mapped attribute with a value (``None`` → IS NULL)."""

    def criteria(entity_type: type) -> ColumnElement[bool]:
        if inspect(entity_type).attrs.get(field) is None:
            raise AttributeError(
                f"{entity_type.__qualname__} has no mapped attribute {field!r}"
            )
        return getattr(entity_type, field) == value

    return criteria
