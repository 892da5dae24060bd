"""Block store adapters.

Exports
-------
- ColumnBlockStore: Keeps every file's blocks as columns of one row in a
  column family. Row key = file name, column = ``BLOCK-<index>``.
- CachingBlockStore: Read-through LRU decorator around any `BlockStore`.
- CacheStats: Hit/miss/eviction counters reported by the cache.

Layout
------
With column family ``index``, the blocks of file ``_0.cfs`` live at::

    index / _0.cfs / BLOCK-0
    index / _0.cfs / BLOCK-1
    ...

Deleting a file's blocks is therefore a single row removal.
"""

from __future__ import annotations

import logging
import threading
from collections import OrderedDict
from dataclasses import dataclass
from typing import TYPE_CHECKING

from blockdir.interfaces.block_store import BlockStore

if TYPE_CHECKING:
    from blockdir.interfaces.column_store import ColumnStore

__all__ = ["BLOCK_COLUMN_PREFIX", "CacheStats", "CachingBlockStore", "ColumnBlockStore"]

logger = logging.getLogger(__name__)

BLOCK_COLUMN_PREFIX = "BLOCK-"


def block_column(index: int) -> str:
    """Column name holding block `index`."""
    return f"{BLOCK_COLUMN_PREFIX}{index}"


class ColumnBlockStore(BlockStore):
    """`BlockStore` over a `ColumnStore` column family.

    Args:
        store: Column store the blocks are persisted in.
        family: Column family holding one row per file.
        block_size: Maximum block payload in bytes.
    """

    def __init__(self, store: ColumnStore, family: str, block_size: int) -> None:
        if block_size < 1:
            raise ValueError("block_size must be >= 1")
        self._store = store
        self._family = family
        self._block_size = block_size

    @property
    def block_size(self) -> int:
        return self._block_size

    def get_block(self, name: str, index: int) -> bytes:
        data = self._store.get(self._family, name, block_column(index))
        logger.debug(
            "get %s[%d] -> %s",
            name,
            index,
            "absent" if data is None else f"{len(data)} bytes",
        )
        return b"" if data is None else data

    def put_block(self, name: str, index: int, data: bytes) -> None:
        self.check_block(index, data)
        logger.debug("put %s[%d] (%d bytes)", name, index, len(data))
        self._store.insert(self._family, name, {block_column(index): bytes(data)})

    def delete_blocks(self, name: str) -> None:
        logger.debug("delete blocks of %s", name)
        self._store.remove(self._family, name)

    def close(self) -> None:
        self._store.close()


@dataclass
class CacheStats:
    """Counters of a `CachingBlockStore`."""

    hits: int = 0
    misses: int = 0
    evictions: int = 0


class CachingBlockStore(BlockStore):
    """Bounded LRU cache in front of another `BlockStore`.

    - `get_block` serves cached blocks and caches what it loads. Absent
      blocks (``b""``) are not cached.
    - `put_block` and `delete_blocks` write through to the inner store and
      then invalidate the matching entries, even when the inner call fails.
    - At most `capacity` blocks are held; the least recently used is evicted.

    Loads run outside the lock. Every invalidation bumps a generation
    counter, and a load only fills the cache if no invalidation happened
    while it was in flight, so a slow read can never put bytes back that a
    concurrent write has replaced.

    A cold or disabled cache never changes what callers observe, only how
    often the inner store is asked.
    """

    def __init__(self, inner: BlockStore, capacity: int) -> None:
        if capacity < 1:
            raise ValueError("capacity must be >= 1")
        self._inner = inner
        self._capacity = capacity
        self._blocks: OrderedDict[tuple[str, int], bytes] = OrderedDict()
        self._generation = 0
        self._lock = threading.RLock()
        self.stats = CacheStats()

    @property
    def block_size(self) -> int:
        return self._inner.block_size

    @property
    def capacity(self) -> int:
        """Maximum number of cached blocks."""
        return self._capacity

    def __len__(self) -> int:
        with self._lock:
            return len(self._blocks)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._blocks

    # ---- BlockStore ----

    def get_block(self, name: str, index: int) -> bytes:
        key = (name, index)
        with self._lock:
            if key in self._blocks:
                self._blocks.move_to_end(key)
                self.stats.hits += 1
                return self._blocks[key]
            self.stats.misses += 1
            generation = self._generation

        data = self._inner.get_block(name, index)
        if data:
            with self._lock:
                if generation != self._generation:
                    logger.debug(
                        "not caching %s[%d]: invalidated during load", name, index
                    )
                    return data
                self._blocks[key] = data
                self._blocks.move_to_end(key)
                self._evict()
        return data

    def put_block(self, name: str, index: int, data: bytes) -> None:
        try:
            self._inner.put_block(name, index, data)
        finally:
            with self._lock:
                self._generation += 1
                self._blocks.pop((name, index), None)

    def delete_blocks(self, name: str) -> None:
        try:
            self._inner.delete_blocks(name)
        finally:
            with self._lock:
                self._generation += 1
                for key in [k for k in self._blocks if k[0] == name]:
                    del self._blocks[key]

    def close(self) -> None:
        with self._lock:
            self._blocks.clear()
        self._inner.close()

    # ---- internals ----

    def _evict(self) -> None:
        while len(self._blocks) > self._capacity:
            (name, index), _ = self._blocks.popitem(last=False)
            self.stats.evictions += 1
            logger.debug("evicted %s[%d] from block cache", name, index)
