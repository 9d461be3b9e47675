"""Interfaces (application boundary) for brick-orm.

Defines the framework-facing contracts: the persistence facade, the unit of
work and the error taxonomy shared by adapters and callers.

Dependency rule: this package does not import from adapters, bootstrap or
entrypoints. It may be imported by `brick_orm.adapters`, `brick_orm.bootstrap`
and callers.
"""

from .database_context import DatabaseContext
from .errors import (
    BrickOrmError,
    ConfigurationError,
    ContextClosedError,
    DatabaseConnectionError,
    DatabaseOperationError,
    DatabaseUrlNotSetError,
    InvalidFetchPlan,
    MigrationError,
    UnmappedEntityError,
)
from .fetch_plan import FetchPlan
from .unit_of_work import AbstractUnitOfWork

__all__ = [
    "AbstractUnitOfWork",
    "BrickOrmError",
    "ConfigurationError",
    "ContextClosedError",
    "DatabaseConnectionError",
    "DatabaseContext",
    "DatabaseOperationError",
    "DatabaseUrlNotSetError",
    "FetchPlan",
    "InvalidFetchPlan",
    "MigrationError",
    "UnmappedEntityError",
]
