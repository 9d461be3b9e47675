"""Platform-aware schema migrations on top of Alembic.

`MigrationRunner` picks the migration directory matching the live database
platform (``<migrations root>/<platform>/``) and replays every revision not
yet recorded in Alembic's version table. Runs are idempotent: a second run
against an up-to-date schema applies nothing.

There is no cross-process lock; run a single migrator per schema.
"""

from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import TYPE_CHECKING

from alembic import command
from alembic.runtime.migration import MigrationContext
from alembic.script import ScriptDirectory
from alembic.script.revision import RevisionError
from alembic.util.exc import CommandError
from sqlalchemy.exc import SQLAlchemyError

from brick_orm import config
from brick_orm.interfaces.errors import MigrationError

from .db.dialects import DialectName
from .db.engine import make_engine

if TYPE_CHECKING:
    from alembic.config import Config
    from sqlalchemy import MetaData
    from sqlalchemy.engine import URL, Connection, Engine

logger = logging.getLogger(__name__)


class MigrationRunner:
    """Apply the pending migrations for an engine's platform.

    Args:
        engine: Engine connected to the target database.
        migrations_root: Directory holding one sub-directory per platform.
        platform: Platform override; detected from a live connection when ``None``.
    """

    def __init__(
        self,
        engine: Engine,
        migrations_root: Path | str,
        platform: DialectName | str | None = None,
    ):
        self.engine = engine
        self.migrations_root = Path(migrations_root)
        self._platform = (
            DialectName.from_string(platform) if isinstance(platform, str) else platform
        )

    # --- platform & scripts ---

    @property
    def platform(self) -> DialectName:
        """The platform whose migrations apply, read from a live connection."""
        if self._platform is None:
            with self.engine.connect() as conn:
                self._platform = DialectName.from_sqlalchemy(conn)
        return self._platform

    @property
    def version_location(self) -> Path:
        return self.migrations_root / self.platform.value

    def alembic_config(self, connection: Connection | None = None) -> Config:
        """Alembic config pointing at this platform's scripts (and connection)."""
        cfg = config.build_alembic_config(
            version_location=self.version_location, stdout=io.StringIO()
        )
        if connection is not None:
            cfg.attributes["connection"] = connection
        return cfg

    def _scripts(self) -> ScriptDirectory:
        if not self.version_location.is_dir():
            raise MigrationError(
                self.platform.value,
                f"migration directory {self.version_location} does not exist",
            )
        return ScriptDirectory.from_config(self.alembic_config())

    # --- state ---

    def current(self) -> str | None:
        """Return the revision the database is at, or ``None`` if unmigrated."""
        with self.engine.connect() as conn:
            return MigrationContext.configure(conn).get_current_revision()

    def heads(self) -> tuple[str, ...]:
        return tuple(self._scripts().get_heads())

    def pending(self) -> list[str]:
        """Return the revisions not yet applied, oldest first."""
        scripts = self._scripts()
        current = self.current()
        revisions = scripts.iterate_revisions("heads", current or "base")
        return [rev.revision for rev in reversed(list(revisions))]

    # --- apply ---

    def run(self) -> list[str]:
        """Apply every pending revision in one transaction.

        Returns:
            list[str]: The revisions applied, oldest first (empty when up to date).

        Raises:
            MigrationError: If the directory is missing or a script fails.
        """
        platform = self.platform.value
        try:
            pending = self.pending()
            if not pending:
                logger.info("Schema for %s is up to date", platform)
                return []
            logger.info(
                "Applying %d migration(s) for %s from %s",
                len(pending),
                platform,
                self.version_location,
            )
            with self.engine.begin() as conn:
                command.upgrade(self.alembic_config(conn), "heads")
        except MigrationError:
            raise
        except (CommandError, RevisionError, SQLAlchemyError, OSError) as e:
            logger.error("Migrations for %s failed: %s", platform, e)
            raise MigrationError(platform, str(e)) from e
        logger.info("Applied migrations for %s: %s", platform, ", ".join(pending))
        return pending


def generate_migration(
    url: str | URL,
    migrations_root: Path | str,
    message: str,
    *,
    metadata: MetaData | None = None,
    autogenerate: bool = True,
) -> Path:
    """Write a new revision script for the URL's platform.

    The database is first brought up to date so that autogenerate only
    captures the difference between ``metadata`` and the migrated schema.

    Args:
        url: Database to diff against (its platform picks the directory).
        migrations_root: Root directory holding per-platform folders.
        message: Revision message.
        metadata: Entity metadata to compare with; required for autogenerate.
        autogenerate: Diff ``metadata`` against the schema; otherwise write an
            empty revision.

    Returns:
        Path: The generated script.

    Raises:
        MigrationError: If migrating or generating fails.
    """
    engine = make_engine(url)
    try:
        runner = MigrationRunner(engine, migrations_root)
        runner.version_location.mkdir(parents=True, exist_ok=True)
        if runner.heads():
            runner.run()
        with engine.begin() as conn:
            cfg = runner.alembic_config(conn)
            cfg.attributes["target_metadata"] = metadata
            try:
                script = command.revision(
                    cfg, message=message, autogenerate=autogenerate and metadata is not None
                )
            except CommandError as e:
                raise MigrationError(runner.platform.value, str(e)) from e
    finally:
        engine.dispose()
    if script is None or isinstance(script, list):
        raise MigrationError(
            runner.platform.value, "alembic did not produce a single revision"
        )
    logger.info("Generated migration %s", script.path)
    return Path(script.path)
