"""BLOCKDIR CLI entry point.

Defines the top-level ``blockdir`` command (via Click-Extra) and wires the
subcommand groups:

- ``blockdir db``: forward-only schema management (upgrade/current/heads/...).
- ``blockdir files``: list, inspect, read and write files in a directory.

Logging is configured here and nowhere else: a Rich console handler whose
level follows ``-v``/``-q``, plus an optional flight recorder that dumps the
last DEBUG records to ``--log-path`` when something goes wrong.

Examples
    $ blockdir --version
    $ blockdir db upgrade --force
    $ blockdir -v files put segments_1 < segments_1
"""

import logging
from pathlib import Path
from typing import TYPE_CHECKING

import click
import click_extra as clickx
from platformdirs import user_log_dir

from blockdir import __version__
from blockdir.logging import config_console_handler, config_flight_recorder, log_startup

from .db import db as db_group
from .files import files as files_group
from .helpers.log_level_parser import parse_log_level

if TYPE_CHECKING:
    from logging import Handler

logger = logging.getLogger(__name__)

HELP = """BLOCKDIR command-line interface.

    BLOCKDIR stores the files of an index directory as fixed-size blocks in a
    column store: one row per file, one column per block, plus a small catalog
    row holding each file's length and modification time.
    """

BASE_LEVEL = logging.WARNING


def _effective_level(verbose_count: int, quiet_count: int) -> int:
    level = BASE_LEVEL - 10 * verbose_count + 10 * quiet_count
    return max(logging.DEBUG, min(logging.CRITICAL, level))


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
    help="Raise console verbosity one level above WARNING per repetition.",
)
@click.option(
    "--quiet",
    "-q",
    "quiet_count",
    count=True,
    default=0,
    help="Lower console verbosity one level below WARNING per repetition.",
)
@click.option(
    "--debug/--no-debug",
    default=False,
    help="Debug mode: DEBUG console output with timestamps and source paths.",
)
@click.option(
    "--log-path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=Path(user_log_dir("blockdir", appauthor=False, ensure_exists=True))
    / "latest.log",
    envvar="BLOCKDIR_LOG_PATH",
    show_default=True,
    show_envvar=True,
    help="File the flight recorder writes to.",
)
@click.option(
    "--flight-recorder-capacity",
    type=int,
    default=2000,
    hidden=True,
    envvar="BLOCKDIR_FLIGHT_RECORDER_CAPACITY",
    show_envvar=True,
    help="Number of log records the flight recorder keeps.",
)
@click.option(
    "--flight-recorder/--no-flight-recorder",
    default=True,
    show_envvar=True,
    help=(
        "Keep the last log records at DEBUG granularity in memory and write "
        "them to --log-path once a WARNING or ERROR is logged. Console "
        "verbosity is unaffected."
    ),
)
@click.option(
    "--force-flush/--no-force-flush",
    "force_flush",
    default=False,
    show_default=True,
    show_envvar=True,
    help="Also write the flight recorder buffer to --log-path on clean exit.",
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
        "Set the minimum level of a logger (NAME=LEVEL), for both console "
        "and flight recorder. Repeatable, e.g. -L blockdir.adapters=DEBUG."
    ),
)
@clickx.pass_context
def blockdir(  # pylint: disable=too-many-arguments, too-many-positional-arguments
    ctx: click.Context,
    verbose_count: int,
    quiet_count: int,
    debug: bool,
    log_path: Path,
    flight_recorder_capacity: int,
    flight_recorder: bool,
    force_flush: bool,
    logger_levels: dict[str, int],
) -> None:
    """BLOCKDIR command-line interface."""
    level = _effective_level(verbose_count, quiet_count)

    handlers: list[Handler] = [
        config_console_handler(
            level=level, debug_mode=debug, color=ctx.color is not False
        )
    ]
    if flight_recorder:
        handlers.append(
            config_flight_recorder(
                path=log_path,
                capacity=flight_recorder_capacity,
                flush_on_close=force_flush,
            )
        )

    # root captures everything; handlers filter
    logging.basicConfig(level=logging.DEBUG, handlers=handlers, force=True)
    for name, lvl in logger_levels.items():
        logging.getLogger(name).setLevel(lvl)

    log_startup(
        logger,
        app_version=__version__,
        level=logging.DEBUG if debug else level,
        handlers=handlers,
        log_path=log_path,
        flight_recorder=flight_recorder,
        logger_levels=logger_levels,
    )

    ctx.call_on_close(logging.shutdown)


blockdir.add_command(db_group)
blockdir.add_command(files_group)
