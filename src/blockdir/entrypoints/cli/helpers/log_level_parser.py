"""Parse ``-L NAME=LEVEL`` options.

Values may be repeated (``-L blockdir.adapters=DEBUG -L sqlalchemy=INFO``) or
packed into one comma/space separated string, as they arrive from the
``BLOCKDIR_LOGGER_LEVEL`` environment variable.
"""

import logging
import re

import click

# Third-party loggers are quiet unless asked otherwise.
DEFAULT_LIB_LEVELS = {"sqlalchemy": logging.WARNING, "alembic": logging.WARNING}

SEPARATORS = re.compile(r"[,\s]+")


def _split_items(value: str | list[str] | tuple[str, ...]) -> list[str]:
    """Flatten one string or a sequence of strings into non-empty items."""
    values = [value] if isinstance(value, str) else list(value)
    return [item for v in values for item in SEPARATORS.split(v) if item]


def parse_log_level(
    ctx: click.Context,  # pylint: disable=unused-argument
    param: click.Parameter | None,  # pylint: disable=unused-argument
    value: str | list[str] | tuple[str, ...],
) -> dict[str, int]:
    """Click callback turning NAME=LEVEL items into a name -> level dict.

    The result starts from `DEFAULT_LIB_LEVELS`; later items win.

    Raises:
        click.BadParameter: If an item is not NAME=LEVEL or LEVEL is unknown.
    """
    levels = dict(DEFAULT_LIB_LEVELS)
    for item in _split_items(value):
        name, sep, level_str = item.partition("=")
        if not sep or not name.strip():
            raise click.BadParameter(f"Expected NAME=LEVEL, got {item!r}")
        level = logging.getLevelName(level_str.strip().upper())
        if not isinstance(level, int):
            raise click.BadParameter(f"Invalid log level: {level_str}")
        levels[name.strip()] = level
    return levels
