"""Error definitions for brick-orm.

Startup errors (configuration, connectivity, migrations, entity registry) are
raised synchronously and prevent a facade from being built. Errors raised
inside a unit of work reach the caller through a failed future as
`DatabaseOperationError`.
"""

# ============================================================================
#                           General errors
# ============================================================================


class BrickOrmError(Exception):
    """Base class for brick-orm errors."""


# ============================================================================
#                   Startup (fatal) errors
# ============================================================================


class ConfigurationError(BrickOrmError):
    """Raised when a database configuration is invalid."""


class DatabaseUrlNotSetError(ConfigurationError):
    """Raised when the BRICK_ORM_DB_URL environment variable is not set."""

    def __init__(self) -> None:
        super().__init__("BRICK_ORM_DB_URL is not set.")


class DatabaseConnectionError(BrickOrmError):
    """Raised when the database cannot be reached at startup.

    Attributes:
        url (str): The database URL with its password redacted.
    """

    def __init__(self, url: str) -> None:
        super().__init__(f"Cannot connect to database at '{url}'.")
        self.url = url


class MigrationError(BrickOrmError):
    """Raised when pending schema migrations cannot be applied.

    Attributes:
        platform (str): The database platform whose migrations were selected.
    """

    def __init__(self, platform: str, reason: str) -> None:
        super().__init__(f"Migrations for '{platform}' failed: {reason}")
        self.platform = platform
        self.reason = reason


class UnmappedEntityError(BrickOrmError):
    """Raised when the entity registry contains a class that is not mapped."""

    def __init__(self, entity_type: type) -> None:
        super().__init__(
            f"{entity_type.__qualname__} is not a SQLAlchemy mapped class."
        )
        self.entity_type = entity_type


# ============================================================================
#                   Per-call errors
# ============================================================================


class InvalidFetchPlan(BrickOrmError):
    """Raised when a fetch plan names a relationship the entity does not have."""

    def __init__(self, entity_type: type, path: str) -> None:
        super().__init__(
            f"{entity_type.__qualname__} has no relationship path '{path}'."
        )
        self.entity_type = entity_type
        self.path = path


class DatabaseOperationError(BrickOrmError):
    """Raised (through a failed future) when a unit of work fails.

    The original exception is chained as ``__cause__``.

    Attributes:
        operation (str): The facade operation that failed (e.g. "persist").
    """

    def __init__(self, operation: str, cause: BaseException) -> None:
        super().__init__(f"{operation} failed: {type(cause).__name__}: {cause}")
        self.operation = operation


class ContextClosedError(BrickOrmError):
    """Raised when a database context is used after shutdown."""

    def __init__(self) -> None:
        super().__init__("Database context has been shut down.")
