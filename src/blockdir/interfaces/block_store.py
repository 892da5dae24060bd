"""Block store port.

A block store keeps the content of every file as a run of fixed-capacity
blocks addressed by ``(file name, block index)``.

Contract
--------
- `get_block` returns the stored bytes, or ``b""`` when the block was never
  written. Absence is not an error; whether a read runs past the end of a
  file is decided from the catalog length, not from block absence.
- `put_block` creates or overwrites one block. A payload longer than
  `block_size` is a programming error and raises `InvalidBlockSize`.
- `delete_blocks` drops every block of a file and is idempotent.
"""

import abc

from blockdir.domain.errors import InvalidBlockSize


class BlockStore(abc.ABC):
    """Fixed-capacity blocks keyed by file name and block index."""

    @property
    @abc.abstractmethod
    def block_size(self) -> int:
        """Maximum number of bytes in one block."""

    @abc.abstractmethod
    def get_block(self, name: str, index: int) -> bytes:
        """Return block `index` of file `name`, or ``b""`` if never written."""

    @abc.abstractmethod
    def put_block(self, name: str, index: int, data: bytes) -> None:
        """Store `data` as block `index` of file `name`.

        Raises:
            InvalidBlockSize: If ``len(data) > block_size``.
            ValueError: If `index` is negative.
        """

    @abc.abstractmethod
    def delete_blocks(self, name: str) -> None:
        """Delete every block of file `name`; no-op if it has none."""

    def close(self) -> None:  # noqa: B027
        """Release resources held by the store. Safe to call repeatedly."""

    # --- Convenience methods (non-abstract) ---

    def check_block(self, index: int, data: bytes) -> None:
        """Validate a block before it is stored.

        Raises:
            InvalidBlockSize: If ``len(data) > block_size``.
            ValueError: If `index` is negative.
        """
        if index < 0:
            raise ValueError("block index must be >= 0")
        if len(data) > self.block_size:
            raise InvalidBlockSize(len(data), self.block_size)
