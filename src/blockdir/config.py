"""Configuration utilities for BLOCKDIR.

Settings come from the environment so the same code runs under the CLI, in
tests, and embedded in another application:

| Variable                 | Setting          | Default    |
|--------------------------|------------------|------------|
| `BLOCKDIR_DB_URL`        | column store URL | (required) |
| `BLOCKDIR_KEYSPACE`      | keyspace         | `blockdir` |
| `BLOCKDIR_COLUMN_FAMILY` | column family    | `index`    |
| `BLOCKDIR_BLOCK_SIZE`    | block size       | `16384`    |
| `BLOCKDIR_CACHE_SIZE`    | cache capacity   | `64`       |
"""

from __future__ import annotations

import os
import sys
from collections.abc import Mapping
from dataclasses import dataclass
from importlib.resources import files
from typing import TextIO

from alembic.config import Config

ALEMBIC_URL_KEY = "sqlalchemy.url"  # pragma: no mutate
ALEMBIC_SCRIPT_LOCATION_KEY = "script_location"  # pragma: no mutate

DB_URL_ENV = "BLOCKDIR_DB_URL"
KEYSPACE_ENV = "BLOCKDIR_KEYSPACE"
COLUMN_FAMILY_ENV = "BLOCKDIR_COLUMN_FAMILY"
BLOCK_SIZE_ENV = "BLOCKDIR_BLOCK_SIZE"
CACHE_SIZE_ENV = "BLOCKDIR_CACHE_SIZE"

DEFAULT_KEYSPACE = "blockdir"
DEFAULT_COLUMN_FAMILY = "index"
DEFAULT_BLOCK_SIZE = 16 * 1024
DEFAULT_CACHE_SIZE = 64


class DatabaseUrlNotSetError(Exception):
    """Raised when the BLOCKDIR_DB_URL environment variable is not set."""


class InvalidSettingsError(ValueError):
    """Raised when directory settings are out of range or unparsable."""


@dataclass(frozen=True)
class DirectorySettings:
    """Construction parameters of a block directory.

    Attributes:
        keyspace: Keyspace (namespace) in the column store.
        column_family: Column family holding block rows; the catalog uses
            ``<column_family>.meta``.
        block_size: Block capacity in bytes (> 0).
        cache_size: Block cache capacity in blocks (>= 0; 0 disables caching).
    """

    keyspace: str = DEFAULT_KEYSPACE
    column_family: str = DEFAULT_COLUMN_FAMILY
    block_size: int = DEFAULT_BLOCK_SIZE
    cache_size: int = DEFAULT_CACHE_SIZE

    def __post_init__(self) -> None:
        if not self.keyspace.strip():
            raise InvalidSettingsError("keyspace must be non-empty")
        if not self.column_family.strip():
            raise InvalidSettingsError("column_family must be non-empty")
        if self.block_size < 1:
            raise InvalidSettingsError("block_size must be >= 1")
        if self.cache_size < 0:
            raise InvalidSettingsError("cache_size must be >= 0")

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> DirectorySettings:
        """Build settings from `BLOCKDIR_*` variables, falling back to defaults.

        Args:
            environ: Mapping to read instead of `os.environ` (for tests).

        Raises:
            InvalidSettingsError: If a value is malformed or out of range.
        """
        env = os.environ if environ is None else environ
        return cls(
            keyspace=env.get(KEYSPACE_ENV, DEFAULT_KEYSPACE),
            column_family=env.get(COLUMN_FAMILY_ENV, DEFAULT_COLUMN_FAMILY),
            block_size=_int_setting(env, BLOCK_SIZE_ENV, DEFAULT_BLOCK_SIZE),
            cache_size=_int_setting(env, CACHE_SIZE_ENV, DEFAULT_CACHE_SIZE),
        )


def _int_setting(env: Mapping[str, str], key: str, default: int) -> int:
    if not (raw := env.get(key, "").strip()):
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise InvalidSettingsError(f"{key} must be an integer, got {raw!r}") from e


def get_db_url() -> str:
    """Get the database URL from the environment.

    Returns:
        The value of the `BLOCKDIR_DB_URL` environment variable.

    Raises:
        DatabaseUrlNotSetError: If `BLOCKDIR_DB_URL` is not set.
    """
    if not (url := os.environ.get(DB_URL_ENV)):
        raise DatabaseUrlNotSetError
    return url


def build_alembic_config(
    db_url: str | None = None, stdout: TextIO = sys.stdout
) -> Config:
    """Build an Alembic `Config` object for BLOCKDIR's migrations.

    Args:
        db_url: SQLAlchemy database URL (e.g., `sqlite:///blocks.db`). Can be
            `None` only where Alembic won't need to connect to the DB.
        stdout: Text stream Alembic will write status lines to.

    Returns:
        An `alembic.config.Config` pointing to BLOCKDIR's migration scripts.
    """
    cfg = Config(stdout=stdout)
    if db_url is not None:
        cfg.set_main_option(ALEMBIC_URL_KEY, db_url)
    cfg.set_main_option(
        ALEMBIC_SCRIPT_LOCATION_KEY,
        str(files("blockdir.adapters.db.alembic")),
    )
    return cfg
