"""Pytest fixtures for ColumnStore contract tests.

Provided fixtures
-----------------
- **store**: Parametrized backend factory returning a **fresh**
  `ColumnStore` bound to keyspace ``lucene1``:
    - ``"memory"``: `MemoryColumnStore`
    - ``"sql_memory"``: `SqlAlchemyColumnStore` over in-memory SQLite
      (tables from ``metadata.create_all``)
    - ``"sql_file"``: `SqlAlchemyColumnStore` over a temp-file SQLite
      database migrated with Alembic
- **sibling**: A second store over the same backing data but keyspace
  ``lucene2``, for isolation checks.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from blockdir.adapters.column_store import MemoryColumnStore, SqlAlchemyColumnStore

if TYPE_CHECKING:
    from blockdir.interfaces.column_store import ColumnStore

# pylint: disable=redefined-outer-name

KEYSPACE = "lucene1"
OTHER_KEYSPACE = "lucene2"


def _make(kind: str, request: pytest.FixtureRequest, keyspace: str) -> ColumnStore:
    match kind:
        case "memory":
            shared = request.getfixturevalue("memory_keyspaces")
            return MemoryColumnStore(keyspace, shared)
        case "sql_memory":
            engine = request.getfixturevalue("sqlite_engine_memory")
            return SqlAlchemyColumnStore(engine, keyspace)
        case "sql_file":
            engine = request.getfixturevalue("sqlite_engine_file")
            return SqlAlchemyColumnStore(engine, keyspace)
        case _:
            raise ValueError(f"unknown store type: {kind}")


@pytest.fixture
def memory_keyspaces() -> dict:
    """Backing map shared by every memory store of one test."""
    return {}


@pytest.fixture(params=["memory", "sql_memory", "sql_file"])
def store(request: pytest.FixtureRequest) -> ColumnStore:
    """Return a fresh column store for the requested backend."""
    return _make(request.param, request, KEYSPACE)


@pytest.fixture
def sibling(request: pytest.FixtureRequest, store: ColumnStore) -> ColumnStore:
    """A store over the same data as `store` in another keyspace."""
    kind = request.node.callspec.params["store"]
    return _make(kind, request, OTHER_KEYSPACE)
