"""Domain-layer error definitions.

Every error raised by the storage engine derives from `BlockDirError`, so
callers can catch the whole family at once. Store transport failures are
defined next to the column store port (see `blockdir.interfaces.column_store`).
"""

# ============================================================================
#                           General errors
# ============================================================================


class BlockDirError(Exception):
    """Base class for BLOCKDIR errors."""


class FileNotFound(BlockDirError):
    """Raised when a file name is absent from the catalog."""

    def __init__(self, name: str) -> None:
        super().__init__(f"File '{name}' does not exist.")
        self.name = name


class DirectoryClosed(BlockDirError):
    """Raised when a closed directory is used."""


# ============================================================================
#                           Encoding errors
# ============================================================================


class MalformedEncoding(BlockDirError):
    """Raised when a varint or length-prefixed string cannot be decoded."""


# ============================================================================
#                           Block errors
# ============================================================================


class InvalidBlockSize(BlockDirError):
    """Raised when a block larger than the configured block size is stored."""

    def __init__(self, size: int, block_size: int) -> None:
        super().__init__(
            f"Block of {size} bytes exceeds the block size of {block_size} bytes."
        )
        self.size = size
        self.block_size = block_size


class MissingBlock(BlockDirError):
    """Raised when a block inside a file's length is absent or truncated."""

    def __init__(self, name: str, index: int) -> None:
        super().__init__(f"Block {index} of file '{name}' is missing or truncated.")
        self.name = name
        self.index = index


# ============================================================================
#                           Stream errors
# ============================================================================


class StreamClosed(BlockDirError):
    """Raised when a stream is used after `close()`."""


class EndOfFile(BlockDirError):
    """Raised when a read asks for more bytes than remain in the stream."""

    def __init__(self, requested: int, remaining: int) -> None:
        super().__init__(
            f"Cannot read {requested} bytes; only {remaining} remain before end of file."
        )
        self.requested = requested
        self.remaining = remaining
