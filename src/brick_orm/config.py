"""Configuration utilities for brick-orm.

This module holds the database configuration struct, its environment-variable
loader, and the Alembic configuration builder used by the migration runner
and the CLI.
"""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from importlib.resources import files
from pathlib import Path
from typing import TextIO

from alembic.config import Config

from brick_orm.interfaces.errors import ConfigurationError, DatabaseUrlNotSetError

ALEMBIC_URL_KEY = "sqlalchemy.url"  # pragma: no mutate
ALEMBIC_SCRIPT_LOCATION_KEY = "script_location"  # pragma: no mutate
ALEMBIC_VERSION_LOCATIONS_KEY = "version_locations"  # pragma: no mutate
ALEMBIC_PATH_SEPARATOR_KEY = "path_separator"  # pragma: no mutate

DEFAULT_POOL_SIZE = 15

ENV_PREFIX = "BRICK_ORM_"
DB_URL_ENV = f"{ENV_PREFIX}DB_URL"
MIGRATIONS_PATH_ENV = f"{ENV_PREFIX}MIGRATIONS_PATH"

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class DatabaseConfig:  # pylint: disable=too-many-instance-attributes
    """Connection and behaviour settings for a database context.

    Attributes:
        dsn: SQLAlchemy database URL.
        driver: Optional DBAPI driver, applied as ``<backend>+<driver>``.
        username: Optional user name overriding the one in ``dsn``.
        password: Optional password overriding the one in ``dsn``.
        pool_size: Number of pooled connections (and default worker count).
        debug: Echo SQL and collect statement statistics.
        dialect: Optional platform name used instead of the detected one
            when selecting the migration directory.
        disable_second_level_cache: Disable the shared compiled-statement cache.
        migrations_path: Root directory holding ``<platform>/`` migration folders.
    """

    dsn: str
    driver: str | None = None
    username: str | None = None
    password: str | None = None
    pool_size: int = DEFAULT_POOL_SIZE
    debug: bool = False
    dialect: str | None = None
    disable_second_level_cache: bool = False
    migrations_path: Path | None = None

    def __post_init__(self) -> None:
        if not self.dsn:
            raise ConfigurationError("dsn must not be empty.")
        if self.pool_size < 1:
            raise ConfigurationError(
                f"pool_size must be a positive integer, got {self.pool_size}."
            )

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> DatabaseConfig:
        """Build a configuration from ``BRICK_ORM_*`` environment variables.

        Args:
            environ: Mapping to read from; defaults to ``os.environ``.

        Returns:
            DatabaseConfig: The configuration described by the environment.

        Raises:
            DatabaseUrlNotSetError: If ``BRICK_ORM_DB_URL`` is not set.
            ConfigurationError: If ``BRICK_ORM_DB_POOL_SIZE`` is not an integer.
        """
        env = os.environ if environ is None else environ

        def opt(name: str) -> str | None:
            return env.get(f"{ENV_PREFIX}{name}") or None

        if not (dsn := env.get(DB_URL_ENV)):
            raise DatabaseUrlNotSetError
        pool_size = opt("DB_POOL_SIZE")
        try:
            size = int(pool_size) if pool_size is not None else DEFAULT_POOL_SIZE
        except ValueError as e:
            raise ConfigurationError(
                f"{ENV_PREFIX}DB_POOL_SIZE must be an integer, got {pool_size!r}."
            ) from e
        migrations = env.get(MIGRATIONS_PATH_ENV)
        return cls(
            dsn=dsn,
            driver=opt("DB_DRIVER"),
            username=opt("DB_USERNAME"),
            password=opt("DB_PASSWORD"),
            pool_size=size,
            debug=(opt("DB_DEBUG") or "").lower() in _TRUTHY,
            dialect=opt("DB_DIALECT"),
            disable_second_level_cache=(opt("DB_DISABLE_L2C") or "").lower()
            in _TRUTHY,
            migrations_path=Path(migrations) if migrations else None,
        )


def get_db_url() -> str:
    """Get the database URL from the environment.

    Returns:
        The value of the `BRICK_ORM_DB_URL` environment variable.

    Raises:
        DatabaseUrlNotSetError: If `BRICK_ORM_DB_URL` is not set.
    """
    if not (url := os.environ.get(DB_URL_ENV)):
        raise DatabaseUrlNotSetError
    return url


def build_alembic_config(
    db_url: str | None = None,
    version_location: Path | None = None,
    stdout: TextIO = sys.stdout,
) -> Config:
    """Build an Alembic `Config` object for a platform's migrations.

    Sets only Alembic "main" options:
    - `sqlalchemy.url` → the database URL you pass
    - `script_location` → brick-orm's packaged Alembic environment
    - `version_locations` → the directory holding the revision scripts

    Args:
        db_url: SQLAlchemy database URL. Can be `None` (default) when the
            caller hands Alembic a connection through ``config.attributes``
            or only reads scripts.
        version_location: Directory of revision scripts, typically
            ``<migrations root>/<platform>``.
        stdout: Text stream Alembic will write status lines to. Defaults to
            `sys.stdout`; override in tests to capture output.

    Returns:
        An `alembic.config.Config` pointing to the given migration scripts.
    """
    cfg = Config(stdout=stdout)
    if db_url is not None:
        # configparser interpolation treats "%" specially
        cfg.set_main_option(ALEMBIC_URL_KEY, db_url.replace("%", "%%"))
    cfg.set_main_option(
        ALEMBIC_SCRIPT_LOCATION_KEY,
        str(files("brick_orm.adapters.db.alembic")),
    )
    if version_location is not None:
        # read by alembic >= 1.16; paths may contain spaces or commas
        cfg.set_main_option(ALEMBIC_PATH_SEPARATOR_KEY, "os")
        cfg.set_main_option(ALEMBIC_VERSION_LOCATIONS_KEY, str(version_location))
    return cfg
