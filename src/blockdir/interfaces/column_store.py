"""Column store port.

The remote store BLOCKDIR persists into is modelled after a wide-column
database: a keyspace holds column families, a column family holds rows, and
a row holds named columns whose values are opaque bytes.

    keyspace → column family → row key → column name → bytes

Contract
--------
- A `ColumnStore` instance is bound to one keyspace at construction.
- `get` returns ``None`` for a missing column; `get_row` returns an empty
  mapping for a missing row. Absence is never an error.
- `insert` upserts the given columns and leaves other columns untouched.
- `remove` deletes the given columns, or the whole row when `columns` is
  ``None``. Removing something absent is a no-op.
- Single-key read-after-write consistency: once `insert` returns, a `get` of
  the same (family, row, column) sees the new value.
- Transport failures surface as `StoreUnavailableError`; adapters never retry.
"""

import abc
from collections.abc import Iterable, Mapping

# --- Exceptions to standardize adapter behavior ---


class ColumnStoreError(Exception):
    """Base class for column store errors."""


class StoreUnavailableError(ColumnStoreError):
    """Operational/timeout/connection errors; callers may retry."""


class ColumnStore(abc.ABC):
    """Keyspace-bound access to rows of named columns."""

    @property
    @abc.abstractmethod
    def keyspace(self) -> str:
        """Name of the keyspace this store is bound to."""

    @abc.abstractmethod
    def get(self, family: str, row: str, column: str) -> bytes | None:
        """Return the value of one column, or ``None`` if it is absent."""

    @abc.abstractmethod
    def get_row(self, family: str, row: str) -> dict[str, bytes]:
        """Return every column of `row` (empty if the row is absent)."""

    @abc.abstractmethod
    def insert(self, family: str, row: str, columns: Mapping[str, bytes]) -> None:
        """Upsert `columns` into `row`, creating the row if needed."""

    @abc.abstractmethod
    def remove(
        self, family: str, row: str, columns: Iterable[str] | None = None
    ) -> None:
        """Delete `columns` from `row`, or the whole row if `columns` is ``None``."""

    @abc.abstractmethod
    def row_keys(self, family: str) -> list[str]:
        """Return the keys of all rows in `family`, sorted."""

    def close(self) -> None:  # noqa: B027
        """Release connections held by the store. Safe to call repeatedly."""
