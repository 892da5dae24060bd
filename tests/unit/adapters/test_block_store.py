"""Unit tests for the column-backed block store and its LRU cache."""

from __future__ import annotations

import threading

import pytest

from blockdir.adapters.block_store import (
    CachingBlockStore,
    ColumnBlockStore,
    block_column,
)
from blockdir.adapters.column_store import MemoryColumnStore
from blockdir.domain.errors import InvalidBlockSize
from blockdir.interfaces.block_store import BlockStore
from blockdir.interfaces.column_store import StoreUnavailableError

# pylint: disable=redefined-outer-name

FAMILY = "index"


class RecordingBlockStore(BlockStore):
    """Delegating block store that counts reads and can be told to fail."""

    def __init__(self, inner: BlockStore) -> None:
        self.inner = inner
        self.reads: list[tuple[str, int]] = []
        self.fail_writes = False
        self.closed = False

    @property
    def block_size(self) -> int:
        return self.inner.block_size

    def get_block(self, name: str, index: int) -> bytes:
        self.reads.append((name, index))
        return self.inner.get_block(name, index)

    def put_block(self, name: str, index: int, data: bytes) -> None:
        if self.fail_writes:
            raise StoreUnavailableError("store is down")
        self.inner.put_block(name, index, data)

    def delete_blocks(self, name: str) -> None:
        if self.fail_writes:
            raise StoreUnavailableError("store is down")
        self.inner.delete_blocks(name)

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def column_store() -> MemoryColumnStore:
    return MemoryColumnStore("lucene1")


@pytest.fixture
def blocks(column_store) -> ColumnBlockStore:
    return ColumnBlockStore(column_store, FAMILY, block_size=10)


@pytest.fixture
def recording(blocks) -> RecordingBlockStore:
    return RecordingBlockStore(blocks)


# ============================================================================
#                           ColumnBlockStore
# ============================================================================


def test_blocks_are_columns_of_the_file_row(blocks, column_store):
    blocks.put_block("_0.cfs", 0, b"0123456789")
    blocks.put_block("_0.cfs", 1, b"AB")
    assert column_store.get_row(FAMILY, "_0.cfs") == {
        "BLOCK-0": b"0123456789",
        "BLOCK-1": b"AB",
    }


def test_block_column_name():
    assert block_column(0) == "BLOCK-0"
    assert block_column(17) == "BLOCK-17"


def test_absent_block_is_empty(blocks):
    assert blocks.get_block("nope", 0) == b""


def test_put_overwrites(blocks):
    blocks.put_block("f", 0, b"old")
    blocks.put_block("f", 0, b"new")
    assert blocks.get_block("f", 0) == b"new"


def test_oversized_block_rejected(blocks):
    with pytest.raises(InvalidBlockSize):
        blocks.put_block("f", 0, b"x" * 11)
    assert blocks.get_block("f", 0) == b""


def test_negative_index_rejected(blocks):
    with pytest.raises(ValueError):
        blocks.put_block("f", -1, b"x")


def test_delete_blocks_is_idempotent(blocks):
    blocks.put_block("f", 0, b"x")
    blocks.delete_blocks("f")
    blocks.delete_blocks("f")
    assert blocks.get_block("f", 0) == b""


def test_delete_blocks_leaves_other_files(blocks):
    blocks.put_block("a", 0, b"a")
    blocks.put_block("b", 0, b"b")
    blocks.delete_blocks("a")
    assert blocks.get_block("b", 0) == b"b"


def test_block_size_must_be_positive(column_store):
    with pytest.raises(ValueError):
        ColumnBlockStore(column_store, FAMILY, block_size=0)


# ============================================================================
#                           CachingBlockStore
# ============================================================================


def test_second_read_is_served_from_cache(recording):
    recording.put_block("f", 0, b"abc")
    cache = CachingBlockStore(recording, capacity=4)
    assert cache.get_block("f", 0) == b"abc"
    assert cache.get_block("f", 0) == b"abc"
    assert recording.reads == [("f", 0)]
    assert (cache.stats.hits, cache.stats.misses) == (1, 1)
    assert ("f", 0) in cache


def test_absent_blocks_are_not_cached(recording):
    cache = CachingBlockStore(recording, capacity=4)
    assert cache.get_block("f", 0) == b""
    assert cache.get_block("f", 0) == b""
    assert len(recording.reads) == 2
    assert len(cache) == 0


def test_least_recently_used_is_evicted(recording):
    for i in range(3):
        recording.put_block("f", i, bytes([i]))
    cache = CachingBlockStore(recording, capacity=2)
    cache.get_block("f", 0)
    cache.get_block("f", 1)
    cache.get_block("f", 0)  # 1 is now least recently used
    cache.get_block("f", 2)
    assert ("f", 0) in cache
    assert ("f", 1) not in cache
    assert ("f", 2) in cache
    assert cache.stats.evictions == 1
    assert len(cache) == cache.capacity


def test_put_invalidates_cached_block(recording):
    cache = CachingBlockStore(recording, capacity=4)
    cache.put_block("f", 0, b"old")
    cache.get_block("f", 0)
    cache.put_block("f", 0, b"new")
    assert ("f", 0) not in cache
    assert cache.get_block("f", 0) == b"new"


def test_failed_put_still_invalidates(recording):
    cache = CachingBlockStore(recording, capacity=4)
    cache.put_block("f", 0, b"old")
    cache.get_block("f", 0)
    recording.fail_writes = True
    with pytest.raises(StoreUnavailableError):
        cache.put_block("f", 0, b"new")
    assert ("f", 0) not in cache


def test_delete_invalidates_every_block_of_the_file(recording):
    cache = CachingBlockStore(recording, capacity=8)
    for i in range(3):
        cache.put_block("f", i, b"x")
        cache.get_block("f", i)
    cache.put_block("g", 0, b"y")
    cache.get_block("g", 0)
    cache.delete_blocks("f")
    assert len(cache) == 1
    assert ("g", 0) in cache
    assert cache.get_block("f", 0) == b""


def test_close_clears_and_closes_inner(recording):
    cache = CachingBlockStore(recording, capacity=2)
    cache.put_block("f", 0, b"x")
    cache.get_block("f", 0)
    cache.close()
    assert len(cache) == 0
    assert recording.closed


def test_cache_reports_inner_block_size(recording):
    assert CachingBlockStore(recording, capacity=1).block_size == 10


def test_capacity_must_be_positive(recording):
    with pytest.raises(ValueError):
        CachingBlockStore(recording, capacity=0)


class PausingBlockStore(ColumnBlockStore):
    """Column block store whose next load stops after reading, until released."""

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.loaded = threading.Event()
        self.release = threading.Event()
        self.pause_next = False

    def get_block(self, name: str, index: int) -> bytes:
        data = super().get_block(name, index)
        if self.pause_next:
            self.pause_next = False
            self.loaded.set()
            assert self.release.wait(timeout=5)
        return data


def test_load_overlapping_a_rewrite_does_not_cache_old_bytes(column_store):
    inner = PausingBlockStore(column_store, FAMILY, block_size=10)
    cache = CachingBlockStore(inner, capacity=4)
    cache.put_block("f", 0, b"old-bytes")
    inner.pause_next = True
    results: list[bytes] = []
    reader = threading.Thread(target=lambda: results.append(cache.get_block("f", 0)))
    reader.start()
    assert inner.loaded.wait(timeout=5)

    cache.delete_blocks("f")
    cache.put_block("f", 0, b"new-bytes")
    inner.release.set()
    reader.join(timeout=5)

    assert results == [b"old-bytes"]
    assert ("f", 0) not in cache
    assert inner.get_block("f", 0) == b"new-bytes"
    assert cache.get_block("f", 0) == b"new-bytes"


def test_load_after_invalidation_is_cached_again(recording):
    cache = CachingBlockStore(recording, capacity=4)
    cache.put_block("f", 0, b"x")
    cache.delete_blocks("g")
    assert cache.get_block("f", 0) == b"x"
    assert ("f", 0) in cache
