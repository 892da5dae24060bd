"""Logging setup for the BLOCKDIR command line.

Library modules only ever call ``logging.getLogger(__name__)``; nothing here
runs on import. The CLI wires two handlers onto the root logger:

- a Rich console handler on stderr whose level follows ``-v``/``-q``, and
- a "flight recorder": a `MemoryHandler` that keeps the last N records at
  DEBUG level and dumps them to a file once a WARNING (or worse) shows up.

Third-party records get a short ``[package]`` prefix on the console so block
traffic from BLOCKDIR stays easy to tell apart from SQLAlchemy chatter.
"""

from __future__ import annotations

import logging
import os
import platform
import sys
from logging.handlers import MemoryHandler
from pathlib import Path
from typing import TYPE_CHECKING, Literal, TypeAlias

import alembic
import sqlalchemy
from rich.console import Console
from rich.logging import RichHandler

if TYPE_CHECKING:
    from logging import Logger

    from blockdir.config import DirectorySettings

# pylint: disable=too-few-public-methods

PROJECT_PREFIX = "blockdir"

ColorSystem: TypeAlias = Literal["auto", "standard", "256", "truecolor", "windows"]


class ThirdPartyPrefixFilter(logging.Filter):
    """Set ``record.prefix`` to ``[package]`` for non-BLOCKDIR loggers.

    BLOCKDIR records get an empty prefix. The filter never drops a record.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        if record.name.startswith(PROJECT_PREFIX):
            record.prefix = ""
        else:
            record.prefix = f"[{record.name.split('.')[0]}]"
        return True


def config_console_handler(
    level: int = logging.INFO, debug_mode: bool = False, color: bool = True
) -> RichHandler:
    """Build the stderr console handler.

    Args:
        level: Minimum console level (forced to DEBUG in debug mode).
        debug_mode: Show timestamps, logger names and source paths.
        color: Disable to emit plain text (mirrors ``--no-color``).

    Returns:
        RichHandler: Handler ready to attach to the root logger.
    """
    color_system: ColorSystem | None = "auto" if color else None
    console = Console(color_system=color_system, stderr=True)

    if debug_mode:
        level = logging.DEBUG

    handler = RichHandler(
        level=level,
        console=console,
        rich_tracebacks=True,
        show_time=False,
        show_path=debug_mode,
        enable_link_path=debug_mode,
    )

    if debug_mode:
        handler.setFormatter(logging.Formatter("%(asctime)s %(name)s: %(message)s"))
    else:
        handler.setFormatter(logging.Formatter("%(prefix)s %(message)s"))
        handler.addFilter(ThirdPartyPrefixFilter())

    return handler


def config_flight_recorder(
    path: Path,
    capacity: int = 2000,
    flush_level: int = logging.WARNING,
    flush_on_close: bool = False,
) -> MemoryHandler:
    """Build the in-memory flight recorder.

    Args:
        path: File the buffered records are written to (truncated on open).
        capacity: Number of records kept in memory.
        flush_level: Level that triggers a dump of the buffer.
        flush_on_close: Also dump the buffer when logging shuts down.

    Returns:
        MemoryHandler: Buffering handler targeting a `FileHandler`.
    """
    file_handler = logging.FileHandler(path, mode="w", encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(
        logging.Formatter(
            "[%(asctime)s] [%(process)d:%(threadName)s] %(levelname)s "
            "%(name)s:%(lineno)d: %(message)s"
        )
    )

    return MemoryHandler(
        capacity=capacity,
        flushLevel=flush_level,
        target=file_handler,
        flushOnClose=flush_on_close,
    )


def log_startup(  # pylint: disable=too-many-arguments
    logger: Logger,
    *,
    app_version: str,
    level: int,
    handlers: list[logging.Handler],
    log_path: Path | None,
    flight_recorder: bool,
    logger_levels: dict[str, int],
) -> None:
    """Log a one-line INFO summary and DEBUG diagnostics about the process."""
    logger.info(
        "BLOCKDIR %s (console=%s, flight-recorder=%s)",
        app_version,
        logging.getLevelName(level),
        "ON" if flight_recorder else "OFF",
    )
    logger.debug("Python: %s", sys.version.split()[0])
    logger.debug("Platform: %s %s", platform.system(), platform.release())
    logger.debug("PID: %s", os.getpid())
    logger.debug("SQLAlchemy: %s, Alembic: %s", sqlalchemy.__version__, alembic.__version__)
    logger.debug("Handlers: %s", [type(h).__name__ for h in handlers])
    if flight_recorder:
        logger.debug("Flight recorder: %s", str(log_path) if log_path else "<none>")
    logger.debug(
        "Per-logger overrides: %s",
        {name: logging.getLevelName(lvl) for name, lvl in logger_levels.items()},
    )


def log_directory_settings(logger: Logger, settings: DirectorySettings) -> None:
    """Log the settings a directory is being opened with."""
    logger.info(
        "Opening %s/%s (block size %d bytes, cache %s)",
        settings.keyspace,
        settings.column_family,
        settings.block_size,
        f"{settings.cache_size} blocks" if settings.cache_size else "off",
    )
