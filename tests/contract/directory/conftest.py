"""Pytest fixtures for BlockDirectory contract tests.

- **directory**: A `BlockDirectory` with block size 10 and a 10-block cache,
  already holding an empty ``sampleFile``. Parametrized over the column store
  backends (memory, in-memory SQLite, migrated SQLite file) plus one memory
  directory without a cache. Timestamps come from the `clock` fixture.
"""

from __future__ import annotations

from collections.abc import Iterator

import pytest

from blockdir.adapters.column_store import MemoryColumnStore, SqlAlchemyColumnStore
from blockdir.bootstrap import build_directory
from blockdir.config import DirectorySettings
from blockdir.directory import BlockDirectory

SAMPLE_FILE = "sampleFile"
BLOCK_SIZE = 10

SETTINGS = DirectorySettings(
    keyspace="lucene1", column_family="index", block_size=BLOCK_SIZE, cache_size=10
)


@pytest.fixture(params=["memory", "memory_uncached", "sql_memory", "sql_file"])
def directory(request: pytest.FixtureRequest, clock) -> Iterator[BlockDirectory]:
    """Return a fresh directory holding an empty `SAMPLE_FILE`."""
    settings = SETTINGS
    match request.param:
        case "memory":
            store = MemoryColumnStore(settings.keyspace)
        case "memory_uncached":
            store = MemoryColumnStore(settings.keyspace)
            settings = DirectorySettings("lucene1", "index", BLOCK_SIZE, 0)
        case "sql_memory":
            engine = request.getfixturevalue("sqlite_engine_memory")
            store = SqlAlchemyColumnStore(engine, settings.keyspace)
        case "sql_file":
            engine = request.getfixturevalue("sqlite_engine_file")
            store = SqlAlchemyColumnStore(engine, settings.keyspace)
        case _:
            raise ValueError(f"unknown store type: {request.param}")

    directory = build_directory(store, settings, clock=clock)
    directory.create_output(SAMPLE_FILE).close()
    yield directory
    directory.close()
