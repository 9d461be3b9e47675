"""Alembic environment for brick-orm.

One environment serves every platform: the revision scripts live in the
platform directory named by ``version_locations``, this script only wires
Alembic to a database.

Policy defaults:
  - compare_type=True (catch column type drift)
  - compare_server_default=True (catch server default drift)
  - render_as_batch=True on SQLite (safe ALTER TABLE emulation)
  - Connection precedence: ``config.attributes["connection"]`` (handed in by
    the migration runner) > `-x url=...` > config sqlalchemy.url > BRICK_ORM_DB_URL
"""

import os

from alembic import context
from sqlalchemy import engine_from_config, pool

# disable warning to deal with alembic context
# pylint: disable=no-member

config = context.config

# Entity metadata for 'autogenerate', handed in by the caller.
target_metadata = config.attributes.get("target_metadata")


def get_url() -> str:
    """Resolve DB URL with precedence: `-x url` > config > env."""

    # 1) `alembic -x url=...`
    xargs = context.get_x_argument(as_dictionary=True)
    url = xargs.get("url")

    # 2) programmatic config
    if not url:
        url = config.get_main_option("sqlalchemy.url")

    # 3) environment variable
    if not url:
        url = os.environ.get("BRICK_ORM_DB_URL")

    if not url:
        raise RuntimeError("Set BRICK_ORM_DB_URL to your database URL.")
    return url


def run_migrations_offline() -> None:
    """Run migrations in 'offline' mode.

    Configures the context with just a URL; calls to context.execute() emit
    the given string to the script output.
    """
    context.configure(
        url=get_url(),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        compare_type=True,
        compare_server_default=True,
    )

    with context.begin_transaction():
        context.run_migrations()


def _run_with_connection(connection) -> None:
    is_sqlite = connection.dialect.name == "sqlite"  # pylint: disable=R2004
    context.configure(
        connection=connection,
        target_metadata=target_metadata,
        compare_type=True,
        compare_server_default=True,
        render_as_batch=is_sqlite,  # needed for SQLite ALTER TABLE emulation
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Run migrations in 'online' mode.

    Reuses the caller's connection when one is provided (its transaction is
    owned by the caller); otherwise creates a throwaway Engine.
    """
    connection = config.attributes.get("connection")
    if connection is not None:
        _run_with_connection(connection)
        return

    connectable = engine_from_config(
        {"sqlalchemy.url": get_url()},
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )
    with connectable.begin() as conn:
        _run_with_connection(conn)


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
