"""Metadata catalog port.

The catalog is the single source of truth for what files exist and how long
they are. It records one `FileEntry` per file name.

Contract overview
-----------------
- `list()` returns a sorted snapshot of all names.
- `length`, `modified`, `stat`, `touch`, `update_after_write` and `delete`
  raise `FileNotFound` for unknown names.
- `create` inserts a fresh entry or fully resets an existing one to length 0.
  Dropping the old blocks of a reset file is the caller's job (the directory
  owns both the catalog and the block store).
- Every mutation except `delete` stamps `last_modified` with the catalog
  clock.
"""

from __future__ import annotations

import abc
from dataclasses import dataclass
from datetime import datetime, timedelta


@dataclass(frozen=True, slots=True)
class FileEntry:
    """Catalog record for one file.

    Attributes:
        name: Unique file name within the directory.
        length: Exact payload length in bytes (never block-padded).
        last_modified: UTC tz-aware time of the last create/flush/touch.
        block_size: Block capacity fixed when the file was created.
    """

    name: str
    length: int
    last_modified: datetime
    block_size: int

    def __post_init__(self) -> None:
        if self.length < 0:
            raise ValueError("length must be >= 0")
        if self.block_size < 1:
            raise ValueError("block_size must be >= 1")
        if (
            self.last_modified.tzinfo is None
            or self.last_modified.utcoffset() != timedelta(0)
        ):
            raise ValueError("last_modified must be UTC tz-aware")


class Catalog(abc.ABC):
    """Per-file length, modification time and block size."""

    @abc.abstractmethod
    def list(self) -> list[str]:
        """Return the names of all files, sorted."""

    @abc.abstractmethod
    def stat(self, name: str) -> FileEntry:
        """Return the entry for `name`.

        Raises:
            FileNotFound: If `name` is absent.
        """

    @abc.abstractmethod
    def create(self, name: str, block_size: int) -> FileEntry:
        """Insert or reset the entry for `name` to length 0, modified now."""

    @abc.abstractmethod
    def touch(self, name: str) -> None:
        """Set the modification time of `name` to now.

        Raises:
            FileNotFound: If `name` is absent.
        """

    @abc.abstractmethod
    def update_after_write(self, name: str, new_length: int) -> None:
        """Record a flushed length for `name` and stamp it modified now.

        Raises:
            FileNotFound: If `name` was deleted meanwhile.
        """

    @abc.abstractmethod
    def delete(self, name: str) -> None:
        """Remove the entry for `name`.

        Raises:
            FileNotFound: If `name` is absent.
        """

    @abc.abstractmethod
    def exists(self, name: str) -> bool:
        """Return True if `name` has an entry."""

    def close(self) -> None:  # noqa: B027
        """Release resources held by the catalog. Safe to call repeatedly."""

    # --- Convenience methods (non-abstract) ---

    def length(self, name: str) -> int:
        """Return the recorded length of `name` in bytes."""
        return self.stat(name).length

    def modified(self, name: str) -> datetime:
        """Return the last modification time of `name` (UTC)."""
        return self.stat(name).last_modified
