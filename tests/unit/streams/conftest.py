"""Fixtures wiring streams to an in-memory catalog and block store."""

from __future__ import annotations

import pytest

from blockdir.adapters.block_store import ColumnBlockStore
from blockdir.adapters.catalog import ColumnCatalog
from blockdir.adapters.column_store import MemoryColumnStore

# pylint: disable=redefined-outer-name

BLOCK_SIZE = 10


@pytest.fixture
def column_store() -> MemoryColumnStore:
    return MemoryColumnStore("lucene1")


@pytest.fixture
def catalog(column_store, clock) -> ColumnCatalog:
    return ColumnCatalog(column_store, "index.meta", clock=clock)


@pytest.fixture
def blocks(column_store) -> ColumnBlockStore:
    return ColumnBlockStore(column_store, "index", BLOCK_SIZE)
