"""Block cursor arithmetic.

A file of ``length`` bytes stored in blocks of ``block_size`` bytes occupies
blocks ``0 .. ceil(length / block_size) - 1``; block ``i`` starts at byte
``i * block_size``. `BlockCursor` is an immutable position in such a file.
Streams hold one and replace it after every read or write, so the boundary
arithmetic lives here and can be tested without any store.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, replace


@dataclass(frozen=True, slots=True)
class Segment:
    """A contiguous slice ``[start, end)`` of one block."""

    block_index: int
    start: int
    end: int

    @property
    def size(self) -> int:
        """Number of bytes covered by the segment."""
        return self.end - self.start


@dataclass(frozen=True, slots=True)
class BlockCursor:
    """Byte position in a block-chunked file.

    Attributes:
        block_size: Capacity of every block in bytes (> 0).
        position: Absolute byte offset from the start of the file (>= 0).
    """

    block_size: int
    position: int = 0

    def __post_init__(self) -> None:
        if self.block_size < 1:
            raise ValueError("block_size must be >= 1")
        if self.position < 0:
            raise ValueError("position must be >= 0")

    @property
    def block_index(self) -> int:
        """Index of the block holding the byte at `position`."""
        return self.position // self.block_size

    @property
    def offset(self) -> int:
        """Offset of `position` inside its block."""
        return self.position % self.block_size

    @property
    def room(self) -> int:
        """Bytes left in the current block before the next boundary."""
        return self.block_size - self.offset

    def advance(self, n: int) -> BlockCursor:
        """Return a cursor `n` bytes further on."""
        if n < 0:
            raise ValueError("cannot advance by a negative amount")
        return replace(self, position=self.position + n)

    def seek(self, position: int) -> BlockCursor:
        """Return a cursor at `position` with the same block size."""
        return replace(self, position=position)

    def segments(self, n: int) -> Iterator[Segment]:
        """Split the next `n` bytes into per-block segments.

        Example:
            With ``block_size=10`` and ``position=8``, ``segments(14)`` yields
            ``(0, 8, 10)``, ``(1, 0, 10)`` and ``(2, 0, 2)``.
        """
        if n < 0:
            raise ValueError("n must be >= 0")
        cursor = self
        while n > 0:
            take = min(n, cursor.room)
            yield Segment(cursor.block_index, cursor.offset, cursor.offset + take)
            cursor = cursor.advance(take)
            n -= take


def block_count(length: int, block_size: int) -> int:
    """Number of blocks needed to hold `length` bytes."""
    return -(-length // block_size)
