"""In-memory column store backend.

This module provides a tiny, dependency-free `ColumnStore` meant for
**tests**, examples, and local development. Rows are kept entirely in RAM
and there is no persistence across process restarts.

Key behaviors
-------------
- **Copy in, copy out**: values are copied to `bytes` on insert and rows are
  returned as fresh dicts, so callers never alias the store's state.
- **Thread-safety**: every access happens under an `RLock`, giving the
  single-key read-after-write consistency the port requires.
- **Keyspaces**: several `MemoryColumnStore` objects may share one backing
  `MemoryKeyspaces` map to mimic several clients of the same cluster.

Typical usage
-------------
    store = MemoryColumnStore("lucene1")
    store.insert("index", "segments", {"BLOCK-0": b"..."})
    store.get("index", "segments", "BLOCK-0")  # b"..."
"""

from __future__ import annotations

import threading
from collections.abc import Iterable, Mapping

from blockdir.interfaces.column_store import ColumnStore

__all__ = ["MemoryColumnStore", "MemoryKeyspaces"]

# keyspace -> family -> row -> column -> value
MemoryKeyspaces = dict[str, dict[str, dict[str, dict[str, bytes]]]]


class MemoryColumnStore(ColumnStore):
    """`ColumnStore` backed by nested dicts.

    Args:
        keyspace: Keyspace this store is bound to.
        keyspaces: Optional shared backing map. Stores built over the same map
            see each other's writes.
    """

    def __init__(self, keyspace: str, keyspaces: MemoryKeyspaces | None = None):
        self._keyspace = keyspace
        self._keyspaces: MemoryKeyspaces = {} if keyspaces is None else keyspaces
        self._lock = threading.RLock()

    @property
    def keyspace(self) -> str:
        return self._keyspace

    # ---- ColumnStore ----

    def get(self, family: str, row: str, column: str) -> bytes | None:
        with self._lock:
            return self._family(family).get(row, {}).get(column)

    def get_row(self, family: str, row: str) -> dict[str, bytes]:
        with self._lock:
            return dict(self._family(family).get(row, {}))

    def insert(self, family: str, row: str, columns: Mapping[str, bytes]) -> None:
        if not columns:
            return
        with self._lock:
            target = self._family(family, create=True).setdefault(row, {})
            target.update({name: bytes(value) for name, value in columns.items()})

    def remove(
        self, family: str, row: str, columns: Iterable[str] | None = None
    ) -> None:
        with self._lock:
            rows = self._family(family)
            if row not in rows:
                return
            if columns is None:
                del rows[row]
                return
            for name in columns:
                rows[row].pop(name, None)
            if not rows[row]:
                # a row without columns does not exist
                del rows[row]

    def row_keys(self, family: str) -> list[str]:
        with self._lock:
            return sorted(self._family(family))

    # ---- internals ----

    def _family(
        self, family: str, create: bool = False
    ) -> dict[str, dict[str, bytes]]:
        if create:
            return self._keyspaces.setdefault(self._keyspace, {}).setdefault(
                family, {}
            )
        return self._keyspaces.get(self._keyspace, {}).get(family, {})
