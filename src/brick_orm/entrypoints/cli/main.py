"""brick-orm CLI entry point.

Defines the top-level ``brick-orm`` command (via Click-Extra), configures
logging for the invocation and registers the ``db`` command group.

Examples
    $ brick-orm --version
    $ brick-orm -v db status --migrations dbmigrations
    $ brick-orm db upgrade --force
"""

import logging
from pathlib import Path
from typing import TYPE_CHECKING

import click
import click_extra as clickx
from platformdirs import user_log_dir

from brick_orm import __version__
from brick_orm.config import DatabaseConfig
from brick_orm.interfaces.errors import ConfigurationError
from brick_orm.logging import (
    config_console_handler,
    config_flight_recorder,
    log_startup,
)

from .db import db as db_group
from .helpers import parse_log_level

if TYPE_CHECKING:
    from logging import Handler

logger = logging.getLogger(__name__)


HELP = """brick-orm command-line interface.

    Manage the schema of databases used through brick-orm: inspect the
    migration state and apply the revisions written for the database's
    platform.
    """


def _default_log_path() -> Path:
    return Path(user_log_dir("brick-orm", appauthor=False, ensure_exists=True)) / "latest.log"


def _database_from_env() -> DatabaseConfig | None:
    """The environment's database settings, or None when they are unusable."""
    try:
        return DatabaseConfig.from_env()
    except ConfigurationError:
        return None


@clickx.extra_group(
    version=__version__,
    help=HELP,
    params=[
        clickx.ColorOption(show_envvar=True),
        clickx.TimerOption(show_envvar=True),
        clickx.ExtraVersionOption(),
    ],
)
@click.option(
    "--verbose",
    "-v",
    "verbose_count",
    count=True,
    default=0,
    help="Increase the default WARNING verbosity by one level per repetition.",
)
@click.option(
    "--quiet",
    "-q",
    "quiet_count",
    count=True,
    default=0,
    help="Decrease the default WARNING verbosity by one level per repetition.",
)
@click.option(
    "--debug/--no-debug",
    is_flag=True,
    default=False,
    help="Enable debug mode (DEBUG console output with source locations).",
)
@click.option(
    "--log-path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    envvar="BRICK_ORM_LOG_PATH",
    show_envvar=True,
    help="Flight recorder file (defaults to the user log directory).",
)
@click.option(
    "--flight-recorder/--no-flight-recorder",
    "flight_recorder",
    is_flag=True,
    default=True,
    show_envvar=True,
    help=(
        "Keep recent log records in memory at DEBUG granularity and write them "
        "to --log-path when a WARNING/ERROR occurs."
    ),
)
@click.option(
    "-L",
    "--logger-level",
    "logger_levels",
    multiple=True,
    callback=parse_log_level,
    default=("sqlalchemy=WARNING", "alembic=WARNING"),
    show_default=True,
    show_envvar=True,
    help=(
        "Set the minimum level of specific loggers (NAME=LEVEL). Repeatable, "
        "e.g. -L sqlalchemy.engine=INFO."
    ),
)
@clickx.pass_context
def brick_orm(  # pylint: disable=too-many-arguments,too-many-positional-arguments
    ctx: click.Context,
    verbose_count: int,
    quiet_count: int,
    debug: bool,
    log_path: Path | None,
    flight_recorder: bool,
    logger_levels: dict[str, int],
) -> None:
    """brick-orm command-line interface."""

    level = logging.WARNING - (10 * verbose_count) + (10 * quiet_count)
    level = max(logging.DEBUG, min(logging.CRITICAL, level))

    handlers: list[Handler] = [
        config_console_handler(
            level=level, debug_mode=debug, color=ctx.color is not False
        )
    ]

    if flight_recorder:
        log_path = log_path or _default_log_path()
        handlers.append(config_flight_recorder(path=log_path))

    # capture all levels; handlers filter
    logging.basicConfig(level=logging.DEBUG, handlers=handlers, force=True)

    for name, lvl in logger_levels.items():
        logging.getLogger(name).setLevel(lvl)

    log_startup(
        logger,
        app_version=__version__,
        level=level,
        handlers=handlers,
        log_path=log_path,
        flight_recorder=flight_recorder,
        logger_levels=logger_levels,
        database=_database_from_env(),
    )

    ctx.call_on_close(logging.shutdown)


brick_orm.add_command(db_group)
