"""Primitive wire encodings used by the file streams.

The formats are bit-exact with the historical Lucene primitives:

- **VInt**: a non-negative integer in groups of 7 bits, least-significant
  group first. Every byte but the last has its high bit (0x80) set.
- **String**: the UTF-8 bytes of the string, prefixed by their length as a
  VInt.
- **Int / Long**: 4 / 8 byte big-endian two's complement integers.

Decoders read from any `ByteSource`: an object whose `read_bytes(n)` returns
exactly `n` bytes or raises `EndOfFile`. Input streams satisfy the protocol,
and `ByteReader` adapts an in-memory `bytes` object.

Examples:
    ```py
    >>> encode_vuint(300)
    b'\\xac\\x02'
    >>> decode_string(ByteReader(encode_string("héllo")))
    'héllo'
    ```
"""

from __future__ import annotations

from typing import Protocol

from .errors import EndOfFile, MalformedEncoding

__all__ = [
    "ByteReader",
    "ByteSource",
    "MAX_VUINT_BYTES",
    "decode_int32",
    "decode_int64",
    "decode_string",
    "decode_vuint",
    "encode_int32",
    "encode_int64",
    "encode_string",
    "encode_vuint",
]

CONTINUATION_BIT = 0x80
PAYLOAD_MASK = 0x7F
PAYLOAD_BITS = 7

UINT_WIDTH = 64
MAX_VUINT = (1 << UINT_WIDTH) - 1
MAX_VUINT_BYTES = -(-UINT_WIDTH // PAYLOAD_BITS)  # ceil(64 / 7) == 10


class ByteSource(Protocol):  # pylint: disable=too-few-public-methods
    """Anything that can hand out exactly `n` bytes or raise `EndOfFile`."""

    def read_bytes(self, n: int) -> bytes:
        """Return the next `n` bytes."""


class ByteReader:
    """`ByteSource` over an in-memory byte string."""

    def __init__(self, data: bytes) -> None:
        self._data = bytes(data)
        self._position = 0

    @property
    def remaining(self) -> int:
        """Number of bytes not yet consumed."""
        return len(self._data) - self._position

    def read_bytes(self, n: int) -> bytes:
        if n < 0:
            raise ValueError("n must be >= 0")
        if n > self.remaining:
            raise EndOfFile(n, self.remaining)
        chunk = self._data[self._position : self._position + n]
        self._position += n
        return chunk


# ============================================================================
#                               VInt
# ============================================================================


def encode_vuint(n: int) -> bytes:
    """Encode a non-negative integer as a VInt.

    Args:
        n: Value in ``[0, 2**64 - 1]``.

    Returns:
        bytes: Between 1 and `MAX_VUINT_BYTES` bytes.

    Raises:
        ValueError: If `n` is negative or wider than 64 bits.
    """
    if n < 0:
        raise ValueError(f"cannot encode negative value {n} as a VInt")
    if n > MAX_VUINT:
        raise ValueError(f"value {n} does not fit in {UINT_WIDTH} bits")

    out = bytearray()
    while n > PAYLOAD_MASK:
        out.append((n & PAYLOAD_MASK) | CONTINUATION_BIT)
        n >>= PAYLOAD_BITS
    out.append(n)
    return bytes(out)


def decode_vuint(reader: ByteSource) -> int:
    """Decode one VInt from `reader`.

    Raises:
        EndOfFile: If the source is exhausted before the first byte.
        MalformedEncoding: If the source ends mid-value, or the continuation
            chain runs past `MAX_VUINT_BYTES` bytes or 64 bits.
    """
    value = 0
    for i in range(MAX_VUINT_BYTES):
        try:
            (byte,) = reader.read_bytes(1)
        except EndOfFile as e:
            if i == 0:
                raise
            raise MalformedEncoding("VInt truncated by end of input") from e
        value |= (byte & PAYLOAD_MASK) << (PAYLOAD_BITS * i)
        if not byte & CONTINUATION_BIT:
            if value > MAX_VUINT:
                raise MalformedEncoding(f"VInt does not fit in {UINT_WIDTH} bits")
            return value
    raise MalformedEncoding(
        f"VInt continuation chain exceeds {MAX_VUINT_BYTES} bytes"
    )


# ============================================================================
#                               Strings
# ============================================================================


def encode_string(s: str) -> bytes:
    """Encode `s` as a VInt byte length followed by its UTF-8 bytes."""
    payload = s.encode("utf-8")
    return encode_vuint(len(payload)) + payload


def decode_string(reader: ByteSource) -> str:
    """Decode one length-prefixed UTF-8 string from `reader`.

    Raises:
        EndOfFile: If the source is exhausted before the length prefix.
        MalformedEncoding: If fewer bytes remain than the prefix declares, or
            the bytes are not valid UTF-8.
    """
    size = decode_vuint(reader)
    try:
        payload = reader.read_bytes(size)
    except EndOfFile as e:
        raise MalformedEncoding(
            f"string prefix declares {size} bytes but only {e.remaining} remain"
        ) from e
    try:
        return payload.decode("utf-8")
    except UnicodeDecodeError as e:
        raise MalformedEncoding(f"string is not valid UTF-8: {e.reason}") from e


# ============================================================================
#                           Fixed-width integers
# ============================================================================


def encode_int32(n: int) -> bytes:
    """Encode a signed 32-bit integer, big-endian."""
    return n.to_bytes(4, "big", signed=True)


def decode_int32(reader: ByteSource) -> int:
    """Decode a signed 32-bit big-endian integer."""
    return int.from_bytes(reader.read_bytes(4), "big", signed=True)


def encode_int64(n: int) -> bytes:
    """Encode a signed 64-bit integer, big-endian."""
    return n.to_bytes(8, "big", signed=True)


def decode_int64(reader: ByteSource) -> int:
    """Decode a signed 64-bit big-endian integer."""
    return int.from_bytes(reader.read_bytes(8), "big", signed=True)
