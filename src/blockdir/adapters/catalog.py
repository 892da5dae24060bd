"""Column-family backed metadata catalog.

Each file has one descriptor row in the catalog family (by default the block
family name plus ``.meta``), keyed by file name, with three columns:

| column       | value (VInt, see `blockdir.domain.codec`)   |
|--------------|---------------------------------------------|
| `length`     | payload length in bytes                     |
| `modified`   | milliseconds since the Unix epoch (UTC)     |
| `block_size` | block capacity fixed at creation            |

The family is kept apart from block content so listing files never scans
block rows. Timestamps come from an injectable clock and are truncated to
whole milliseconds, the precision they are stored with.

Every write stores the complete descriptor. A `delete` racing a `touch` or a
flush can therefore bring the entry back, but it never leaves a row that
`list` shows while `exists` and `stat` deny it.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import replace
from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING

from blockdir.domain.codec import ByteReader, decode_vuint, encode_vuint
from blockdir.domain.errors import FileNotFound, MalformedEncoding
from blockdir.interfaces.catalog import Catalog, FileEntry

if TYPE_CHECKING:
    from blockdir.interfaces.column_store import ColumnStore

__all__ = ["ColumnCatalog", "CATALOG_FAMILY_SUFFIX", "utc_now"]

logger = logging.getLogger(__name__)

CATALOG_FAMILY_SUFFIX = ".meta"

LENGTH_COLUMN = "length"
MODIFIED_COLUMN = "modified"
BLOCK_SIZE_COLUMN = "block_size"
DESCRIPTOR_COLUMNS = (LENGTH_COLUMN, MODIFIED_COLUMN, BLOCK_SIZE_COLUMN)

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def utc_now() -> datetime:
    """Default catalog clock."""
    return datetime.now(timezone.utc)


def to_millis(dt: datetime) -> int:
    """Whole milliseconds between the Unix epoch and `dt`."""
    return (dt - EPOCH) // timedelta(milliseconds=1)


def from_millis(ms: int) -> datetime:
    """Inverse of `to_millis`."""
    return EPOCH + timedelta(milliseconds=ms)


class ColumnCatalog(Catalog):
    """`Catalog` stored as descriptor rows in a `ColumnStore` family.

    Args:
        store: Column store the descriptors are persisted in.
        family: Column family holding one descriptor row per file.
        clock: Returns the current UTC time; defaults to `utc_now`.
    """

    def __init__(
        self,
        store: ColumnStore,
        family: str,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._store = store
        self._family = family
        self._clock = clock

    def list(self) -> list[str]:
        return self._store.row_keys(self._family)

    def exists(self, name: str) -> bool:
        return self._store.get(self._family, name, LENGTH_COLUMN) is not None

    def stat(self, name: str) -> FileEntry:
        row = self._store.get_row(self._family, name)
        if not row:
            raise FileNotFound(name)
        return self._decode(name, row)

    def create(self, name: str, block_size: int) -> FileEntry:
        entry = FileEntry(
            name=name,
            length=0,
            last_modified=self._now(),
            block_size=block_size,
        )
        self._store.insert(self._family, name, self._encode(entry))
        logger.info("created %s (block size %d)", name, block_size)
        return entry

    def touch(self, name: str) -> None:
        entry = self.stat(name)
        self._store.insert(
            self._family, name, self._encode(replace(entry, last_modified=self._now()))
        )

    def update_after_write(self, name: str, new_length: int) -> None:
        if new_length < 0:
            raise ValueError("new_length must be >= 0")
        entry = self.stat(name)
        updated = replace(entry, length=new_length, last_modified=self._now())
        self._store.insert(self._family, name, self._encode(updated))
        logger.debug("recorded %s length=%d", name, new_length)

    def delete(self, name: str) -> None:
        self._require(name)
        self._store.remove(self._family, name)
        logger.info("deleted %s", name)

    def close(self) -> None:
        self._store.close()

    # ---- internals ----

    def _now(self) -> datetime:
        return from_millis(to_millis(self._clock()))

    def _require(self, name: str) -> None:
        if not self.exists(name):
            raise FileNotFound(name)

    @staticmethod
    def _encode(entry: FileEntry) -> dict[str, bytes]:
        return {
            LENGTH_COLUMN: encode_vuint(entry.length),
            MODIFIED_COLUMN: encode_vuint(to_millis(entry.last_modified)),
            BLOCK_SIZE_COLUMN: encode_vuint(entry.block_size),
        }

    @staticmethod
    def _decode(name: str, row: dict[str, bytes]) -> FileEntry:
        missing = [column for column in DESCRIPTOR_COLUMNS if column not in row]
        if missing:
            raise MalformedEncoding(f"descriptor of '{name}' lacks {missing}")
        length, modified, block_size = (
            decode_vuint(ByteReader(row[column])) for column in DESCRIPTOR_COLUMNS
        )
        return FileEntry(
            name=name,
            length=length,
            last_modified=from_millis(modified),
            block_size=block_size,
        )
