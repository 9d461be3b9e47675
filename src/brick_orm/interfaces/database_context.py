"""Interface for the asynchronous persistence facade.

Defines `DatabaseContext`, the capability set every persistence backend
offers: lookups, criteria queries, persist/merge/remove and raw unit-of-work
access. Every operation is scheduled on a worker and returns a
`concurrent.futures.Future` immediately.

Failures inside a unit of work resolve the future with
`DatabaseOperationError`. A lookup that finds nothing resolves with ``None``;
the two are never conflated.
"""

from __future__ import annotations

import abc
from collections.abc import Callable, Iterable
from typing import TYPE_CHECKING, Any, TypeVar

if TYPE_CHECKING:
    from concurrent.futures import Future

    from sqlalchemy import Select
    from sqlalchemy.orm import Session
    from sqlalchemy.sql.elements import ColumnElement

    from .fetch_plan import FetchPlan

    FetchArg = FetchPlan | Iterable[str] | str | None

T = TypeVar("T")
R = TypeVar("R")

#: Builds a boolean SQL expression from the entity class, e.g.
#: ``lambda Person: Person.age >= 18``.
Criteria = Callable[[type[T]], "ColumnElement[bool]"]

#: Refines a ``SELECT`` for an entity class (ordering, limits, joins...).
Modifier = Callable[["Select[tuple[T]]", type[T]], "Select[tuple[T]]"]

UNSET: Any = object()


class DatabaseContext(abc.ABC):
    """Uniform asynchronous CRUD facade over a persistence backend."""

    # --- lookups ---

    @abc.abstractmethod
    def find(
        self, entity_type: type[T], ident: Any, *, fetch: FetchArg = None
    ) -> Future[T | None]:
        """Find an entity by primary key.

        Args:
            entity_type: The mapped entity class.
            ident: Primary key value (a tuple for composite keys).
            fetch: Relationships to load eagerly; defaults to the plan the
                entity class declares.

        Returns:
            Future[T | None]: Completes with the entity, or ``None`` if not found.
        """

    @abc.abstractmethod
    def find_all(
        self,
        entity_type: type[T],
        *,
        modifier: Modifier[T] | None = None,
        fetch: FetchArg = None,
    ) -> Future[list[T]]:
        """Find all entities of a type.

        No ordering is applied unless ``modifier`` adds one.

        Args:
            entity_type: The mapped entity class.
            modifier: Optional callable refining the ``SELECT`` statement.
            fetch: Relationships to load eagerly.

        Returns:
            Future[list[T]]: Completes with the matching entities.
        """

    @abc.abstractmethod
    def find_all_where(
        self,
        entity_type: type[T],
        field_or_criteria: str | Criteria[T],
        value: Any = UNSET,
        *,
        fetch: FetchArg = None,
    ) -> Future[list[T]]:
        """Find all entities matching a condition.

        Called as ``find_all_where(Person, "name", "a")`` it matches on field
        equality. Called with a callable, ``find_all_where(Person, criteria)``,
        the callable receives the entity class and returns a boolean SQL
        expression.

        Args:
            entity_type: The mapped entity class.
            field_or_criteria: A field name, or a criteria builder.
            value: The value to compare the field with (field form only).
            fetch: Relationships to load eagerly.

        Returns:
            Future[list[T]]: Completes with the matching entities.
        """

    # --- writes ---

    @abc.abstractmethod
    def persist(self, *entities: object) -> Future[None]:
        """Insert entities in a single unit of work (all or nothing)."""

    @abc.abstractmethod
    def merge(self, entity: T) -> Future[T]:
        """Reconcile a detached entity's state into the store.

        Returns:
            Future[T]: Completes with the managed instance carrying the merged state.
        """

    @abc.abstractmethod
    def remove(self, *entities: object) -> Future[None]:
        """Delete entities in a single unit of work (all or nothing)."""

    @abc.abstractmethod
    def refresh(self, entity: T, *, fetch: FetchArg = None) -> Future[T]:
        """Reload an entity's state, and the planned relationships, in place."""

    # --- escape hatches ---

    @abc.abstractmethod
    def with_session(self, operation: Callable[[Session], R]) -> Future[R]:
        """Run ``operation(session)`` in a unit of work that is rolled back afterwards."""

    @abc.abstractmethod
    def with_transaction(self, operation: Callable[[Session], R]) -> Future[R]:
        """Run ``operation(session)`` in a unit of work that commits on success."""

    # --- lifecycle ---

    @abc.abstractmethod
    def shutdown(self, wait: bool = True) -> None:
        """Stop accepting work and release pooled resources."""

    def __enter__(self) -> DatabaseContext:
        return self

    def __exit__(self, *args) -> None:
        self.shutdown()
