"""Sequential block writer.

Lifecycle:
  1) Obtain via `BlockDirectory.create_output(name)`
  2) `write_*()` zero or more times, `flush()` whenever the catalog should
     catch up
  3) `close()` (or leave a ``with`` block), which flushes one last time

Invariants:
  - At most one partial block is buffered; its length always equals the
    cursor's in-block offset.
  - Full blocks are stored as soon as they fill, at the next sequential index.
  - `length()` counts every byte accepted so far, flushed or not.
  - A failed block write rolls the buffer and cursor back to the last byte
    that was accepted, so `length()` never counts bytes that were lost.
"""

from __future__ import annotations

import logging
from types import TracebackType
from typing import TYPE_CHECKING

from blockdir.domain.codec import (
    encode_int32,
    encode_int64,
    encode_string,
    encode_vuint,
)
from blockdir.domain.cursor import BlockCursor
from blockdir.domain.errors import StreamClosed

if TYPE_CHECKING:
    from blockdir.interfaces.block_store import BlockStore
    from blockdir.interfaces.catalog import Catalog

logger = logging.getLogger(__name__)


class OutputStream:
    """Writes one file as a run of fixed-size blocks.

    Args:
        name: File being written. Its catalog entry must already exist.
        catalog: Catalog updated on flush/close.
        blocks: Block store receiving full and partial blocks. Its
            `block_size` is the block size of the file.
    """

    def __init__(self, name: str, catalog: Catalog, blocks: BlockStore) -> None:
        self._name = name
        self._catalog = catalog
        self._blocks = blocks
        self._cursor = BlockCursor(blocks.block_size)
        self._buffer = bytearray()
        self._closed = False

    @property
    def name(self) -> str:
        """Name of the file being written."""
        return self._name

    @property
    def closed(self) -> bool:
        """True once `close()` has completed."""
        return self._closed

    def length(self) -> int:
        """Total bytes written so far, independent of flushing."""
        return self._cursor.position

    def tell(self) -> int:
        """Current file pointer; always equal to `length()`."""
        return self._cursor.position

    # ---- writing ----

    def write_bytes(self, data: bytes) -> None:
        """Append `data`, storing every block that fills up.

        Raises:
            StreamClosed: If the stream is closed.
        """
        self._ensure_open()
        view = memoryview(data)
        consumed = 0
        for segment in self._cursor.segments(len(view)):
            self._buffer += view[consumed : consumed + segment.size]
            if segment.end == self._cursor.block_size:
                try:
                    self._blocks.put_block(
                        self._name, segment.block_index, bytes(self._buffer)
                    )
                except BaseException:
                    del self._buffer[-segment.size :]
                    raise
                self._buffer.clear()
            self._cursor = self._cursor.advance(segment.size)
            consumed += segment.size

    def write_byte(self, value: int) -> None:
        """Append a single byte (0..255)."""
        self.write_bytes(bytes((value,)))

    def write_vuint(self, value: int) -> None:
        """Append `value` as a VInt."""
        self.write_bytes(encode_vuint(value))

    def write_int(self, value: int) -> None:
        """Append a signed 32-bit big-endian integer."""
        self.write_bytes(encode_int32(value))

    def write_long(self, value: int) -> None:
        """Append a signed 64-bit big-endian integer."""
        self.write_bytes(encode_int64(value))

    def write_string(self, value: str) -> None:
        """Append `value` as a VInt length followed by its UTF-8 bytes."""
        self.write_bytes(encode_string(value))

    # ---- persistence ----

    def flush(self) -> None:
        """Store the partial block (if any) and record the length in the catalog.

        The stream stays open; later writes keep filling, and eventually
        overwrite, the same partial block.

        Raises:
            StreamClosed: If the stream is closed.
            FileNotFound: If the file was deleted while the stream was open.
        """
        self._ensure_open()
        if self._buffer:
            self._blocks.put_block(
                self._name, self._cursor.block_index, bytes(self._buffer)
            )
        self._catalog.update_after_write(self._name, self._cursor.position)
        logger.debug("flushed %s at %d bytes", self._name, self._cursor.position)

    def close(self) -> None:
        """Flush and close. Further calls are no-ops.

        If the final flush fails the stream stays open, so the caller may
        retry `close()` or abandon the stream.
        """
        if self._closed:
            return
        self.flush()
        self._closed = True
        self._buffer.clear()

    def _ensure_open(self) -> None:
        if self._closed:
            raise StreamClosed(f"output stream for '{self._name}' is closed")

    # ---- context manager ----

    def __enter__(self) -> OutputStream:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def __repr__(self) -> str:
        state = "closed" if self._closed else "open"
        return f"<OutputStream {self._name!r} length={self.length()} {state}>"
