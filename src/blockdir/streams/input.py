"""Sequential block reader.

An `InputStream` snapshots the catalog entry when it is opened: the length
it reads up to and the block size the file was written with. Later flushes by
a writer on the same name are not observed (last flush wins; a reader opened
earlier keeps its stale snapshot).

Blocks are fetched lazily, one at a time, as the cursor crosses block
boundaries; the most recently loaded block is kept so sequential small reads
do not hit the store repeatedly.
"""

from __future__ import annotations

import logging
from types import TracebackType
from typing import TYPE_CHECKING

from blockdir.domain.codec import (
    decode_int32,
    decode_int64,
    decode_string,
    decode_vuint,
)
from blockdir.domain.cursor import BlockCursor
from blockdir.domain.errors import EndOfFile, MissingBlock, StreamClosed

if TYPE_CHECKING:
    from blockdir.interfaces.block_store import BlockStore
    from blockdir.interfaces.catalog import Catalog

logger = logging.getLogger(__name__)


class InputStream:
    """Reads one file across its blocks.

    Args:
        name: File to read.
        catalog: Catalog providing the length and block size snapshot.
        blocks: Block store the content is read from.

    Raises:
        FileNotFound: If `name` is not in the catalog.
    """

    def __init__(self, name: str, catalog: Catalog, blocks: BlockStore) -> None:
        entry = catalog.stat(name)
        self._name = name
        self._blocks = blocks
        self._length = entry.length
        self._cursor = BlockCursor(entry.block_size)
        self._block_index: int | None = None
        self._block = b""
        self._closed = False

    @property
    def name(self) -> str:
        """Name of the file being read."""
        return self._name

    @property
    def closed(self) -> bool:
        """True once `close()` has been called."""
        return self._closed

    @property
    def remaining(self) -> int:
        """Bytes left between the cursor and the snapshotted length."""
        return self._length - self._cursor.position

    def length(self) -> int:
        """Total file length snapshotted at open time."""
        return self._length

    def tell(self) -> int:
        """Current read position."""
        return self._cursor.position

    def seek(self, position: int) -> None:
        """Move the cursor to `position`.

        Raises:
            StreamClosed: If the stream is closed.
            ValueError: If `position` is outside ``[0, length()]``.
        """
        self._ensure_open()
        if not 0 <= position <= self._length:
            raise ValueError(
                f"position {position} outside file '{self._name}' of {self._length} bytes"
            )
        self._cursor = self._cursor.seek(position)

    # ---- reading ----

    def read_bytes(self, n: int) -> bytes:
        """Return the next `n` bytes.

        The cursor only moves when the whole read succeeds.

        Raises:
            StreamClosed: If the stream is closed.
            ValueError: If `n` is negative.
            EndOfFile: If fewer than `n` bytes remain.
            MissingBlock: If the store lost a block inside the file's length.
        """
        self._ensure_open()
        if n < 0:
            raise ValueError("n must be >= 0")
        if n > self.remaining:
            raise EndOfFile(n, self.remaining)

        out = bytearray()
        for segment in self._cursor.segments(n):
            block = self._load(segment.block_index)
            if len(block) < segment.end:
                raise MissingBlock(self._name, segment.block_index)
            out += block[segment.start : segment.end]
        self._cursor = self._cursor.advance(n)
        return bytes(out)

    def read_byte(self) -> int:
        """Return the next byte as an int (0..255)."""
        return self.read_bytes(1)[0]

    def read_vuint(self) -> int:
        """Return the next VInt."""
        return decode_vuint(self)

    def read_int(self) -> int:
        """Return the next signed 32-bit big-endian integer."""
        return decode_int32(self)

    def read_long(self) -> int:
        """Return the next signed 64-bit big-endian integer."""
        return decode_int64(self)

    def read_string(self) -> str:
        """Return the next length-prefixed UTF-8 string.

        Raises:
            EndOfFile: If the stream is exhausted before the length prefix.
            MalformedEncoding: If the prefix declares more bytes than remain,
                or the bytes are not valid UTF-8.
        """
        return decode_string(self)

    def close(self) -> None:
        """Release the cursor. Further calls are no-ops."""
        self._closed = True
        self._block = b""
        self._block_index = None

    # ---- internals ----

    def _ensure_open(self) -> None:
        if self._closed:
            raise StreamClosed(f"input stream for '{self._name}' is closed")

    def _load(self, index: int) -> bytes:
        if index != self._block_index:
            self._block = self._blocks.get_block(self._name, index)
            self._block_index = index
            logger.debug("loaded %s[%d]", self._name, index)
        return self._block

    # ---- context manager ----

    def __enter__(self) -> InputStream:
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
        return (
            f"<InputStream {self._name!r} at {self.tell()}/{self._length} {state}>"
        )
