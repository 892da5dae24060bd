"""Build block directories from settings."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

from blockdir import config
from blockdir.adapters.block_store import CachingBlockStore, ColumnBlockStore
from blockdir.adapters.catalog import CATALOG_FAMILY_SUFFIX, ColumnCatalog, utc_now
from blockdir.adapters.column_store import MemoryColumnStore, SqlAlchemyColumnStore
from blockdir.adapters.db.engine import make_engine
from blockdir.directory import BlockDirectory

if TYPE_CHECKING:
    from datetime import datetime

    from blockdir.adapters.column_store.memory import MemoryKeyspaces
    from blockdir.interfaces.block_store import BlockStore
    from blockdir.interfaces.column_store import ColumnStore

logger = logging.getLogger(__name__)


def build_directory(
    store: ColumnStore,
    settings: config.DirectorySettings,
    clock: Callable[[], datetime] = utc_now,
) -> BlockDirectory:
    """Wire a directory over an existing column store.

    Blocks go to ``settings.column_family``; descriptors go to the same name
    with the catalog suffix. A positive ``cache_size`` puts an LRU cache in
    front of the block store.
    """
    blocks: BlockStore = ColumnBlockStore(
        store, settings.column_family, settings.block_size
    )
    if settings.cache_size:
        blocks = CachingBlockStore(blocks, settings.cache_size)
    catalog = ColumnCatalog(
        store, settings.column_family + CATALOG_FAMILY_SUFFIX, clock=clock
    )
    logger.debug(
        "built directory %s/%s over %s",
        store.keyspace,
        settings.column_family,
        type(store).__name__,
    )
    return BlockDirectory(catalog, blocks)


def open_directory(
    settings: config.DirectorySettings | None = None, url: str | None = None
) -> BlockDirectory:
    """Open a directory backed by the SQL column store.

    Args:
        settings: Directory settings; read from the environment if omitted.
        url: Database URL; `BLOCKDIR_DB_URL` if omitted.

    Raises:
        DatabaseUrlNotSetError: If no URL is given or configured.
        InvalidSettingsError: If the environment holds malformed settings.
    """
    settings = settings or config.DirectorySettings.from_env()
    engine = make_engine(url or config.get_db_url())
    store = SqlAlchemyColumnStore(engine, settings.keyspace, dispose_engine=True)
    return build_directory(store, settings)


def open_memory_directory(
    settings: config.DirectorySettings | None = None,
    keyspaces: MemoryKeyspaces | None = None,
) -> BlockDirectory:
    """Open a directory over an in-memory column store.

    Directories opened over the same `keyspaces` map share their files.
    """
    settings = settings or config.DirectorySettings()
    return build_directory(MemoryColumnStore(settings.keyspace, keyspaces), settings)
