"""Build database contexts from configuration."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from brick_orm.adapters.database_context import SqlAlchemyDatabaseContext
from brick_orm.config import DatabaseConfig
from brick_orm.interfaces.errors import ConfigurationError

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping, Sequence

    from brick_orm.interfaces.database_context import DatabaseContext

    ContextFactory = Callable[..., DatabaseContext]

logger = logging.getLogger(__name__)

DEFAULT_BACKEND = "sqlalchemy"

#: Backend name → `DatabaseContext` implementation.
BACKENDS: Mapping[str, ContextFactory] = {
    DEFAULT_BACKEND: SqlAlchemyDatabaseContext,
}


def build_database_context(
    config: DatabaseConfig,
    entities: Sequence[type],
    *,
    backend: str = DEFAULT_BACKEND,
    max_workers: int | None = None,
) -> DatabaseContext:
    """Build a database context for the given backend.

    Raises:
        ConfigurationError: If ``backend`` is unknown.
    """
    try:
        factory = BACKENDS[backend]
    except KeyError as e:
        raise ConfigurationError(
            f"Unknown backend {backend!r}; expected one of {sorted(BACKENDS)}."
        ) from e
    logger.debug("Building %s database context for %d entities", backend, len(entities))
    return factory(config, entities, max_workers=max_workers)


def bootstrap(entities: Sequence[type], *, backend: str = DEFAULT_BACKEND) -> DatabaseContext:
    """Build a database context configured from ``BRICK_ORM_*`` environment variables."""
    return build_database_context(DatabaseConfig.from_env(), entities, backend=backend)
