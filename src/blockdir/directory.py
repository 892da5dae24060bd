"""Directory facade.

`BlockDirectory` is the filesystem-like entry point the rest of an
application uses. It owns a `Catalog` and a `BlockStore` and lends them to
the streams it opens.

Operations
----------
- `list_all`, `file_exists`, `file_length`, `file_modified`, `stat_file`:
  catalog queries. Store failures propagate; `file_exists` never turns an
  error into ``False``.
- `touch_file`: stamps the modification time; content is untouched.
- `delete_file`: drops the catalog entry, then the blocks.
- `create_output`: truncate-and-replace. Old blocks are deleted and the entry
  reset to length 0 before a fresh `OutputStream` is returned; creating
  output never appends.
- `open_input`: snapshot reader over the current flushed content.
- `close`: releases the block cache and the store handle. Idempotent; any
  other call afterwards raises `DirectoryClosed`.

Example
-------
    with BlockDirectory(catalog, blocks) as directory:
        with directory.create_output("sampleFile") as out:
            out.write_string("0123456789A")
        with directory.open_input("sampleFile") as inp:
            assert inp.read_string() == "0123456789A"
"""

from __future__ import annotations

import logging
from types import TracebackType
from typing import TYPE_CHECKING

from blockdir.domain.errors import DirectoryClosed
from blockdir.streams import InputStream, OutputStream

if TYPE_CHECKING:
    from datetime import datetime

    from blockdir.interfaces.block_store import BlockStore
    from blockdir.interfaces.catalog import Catalog, FileEntry

logger = logging.getLogger(__name__)


class BlockDirectory:
    """A directory of named files stored as fixed-size blocks.

    Args:
        catalog: Source of truth for names, lengths and modification times.
        blocks: Store for file content. Its `block_size` is given to every
            file created through this directory.
    """

    def __init__(self, catalog: Catalog, blocks: BlockStore) -> None:
        self._catalog = catalog
        self._blocks = blocks
        self._closed = False

    @property
    def block_size(self) -> int:
        """Block size given to newly created files."""
        return self._blocks.block_size

    @property
    def closed(self) -> bool:
        """True once `close()` has been called."""
        return self._closed

    # ---- queries ----

    def list_all(self) -> list[str]:
        """Names of all files, sorted."""
        self._ensure_open()
        return self._catalog.list()

    def file_exists(self, name: str) -> bool:
        """True if `name` is in the catalog."""
        self._ensure_open()
        return self._catalog.exists(name)

    def file_length(self, name: str) -> int:
        """Flushed length of `name` in bytes."""
        self._ensure_open()
        return self._catalog.length(name)

    def file_modified(self, name: str) -> datetime:
        """Last modification time of `name` (UTC)."""
        self._ensure_open()
        return self._catalog.modified(name)

    def stat_file(self, name: str) -> FileEntry:
        """Full catalog entry of `name`."""
        self._ensure_open()
        return self._catalog.stat(name)

    # ---- mutations ----

    def touch_file(self, name: str) -> None:
        """Set the modification time of `name` to now."""
        self._ensure_open()
        self._catalog.touch(name)

    def delete_file(self, name: str) -> None:
        """Delete `name` and all of its blocks.

        Raises:
            FileNotFound: If `name` is absent.
        """
        self._ensure_open()
        self._catalog.delete(name)
        self._blocks.delete_blocks(name)

    def create_output(self, name: str) -> OutputStream:
        """Create (or truncate) `name` and return a writer positioned at 0."""
        self._ensure_open()
        self._blocks.delete_blocks(name)
        self._catalog.create(name, self._blocks.block_size)
        return OutputStream(name, self._catalog, self._blocks)

    def open_input(self, name: str) -> InputStream:
        """Open a reader over the flushed content of `name`.

        Raises:
            FileNotFound: If `name` is absent.
        """
        self._ensure_open()
        return InputStream(name, self._catalog, self._blocks)

    # ---- lifecycle ----

    def close(self) -> None:
        """Release the cache and the store handle. Further calls are no-ops."""
        if self._closed:
            return
        self._closed = True
        try:
            self._blocks.close()
        finally:
            self._catalog.close()
        logger.debug("directory closed")

    def _ensure_open(self) -> None:
        if self._closed:
            raise DirectoryClosed("directory is closed")

    def __enter__(self) -> BlockDirectory:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()
