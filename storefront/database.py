"""
Database Module

Store construction and startup initialization.
"""

import logging
from typing import Optional, Tuple

from .config import BACKENDS, Settings
from .storage import MemoryStore, SnapshotManager, SQLiteStore, Store, StorageError

logger = logging.getLogger(__name__)


def create_store(settings: Settings) -> Tuple[Store, Optional[SnapshotManager]]:
    """
    Build the store selected by ``settings.store_backend``.

    Returns:
        Tuple of (store, snapshot manager or None)

    Raises:
        StorageError: If the backend name is unknown
    """
    backend = settings.store_backend

    if backend == 'sqlite':
        logger.info(f"Database path: {settings.database_path}")
        return SQLiteStore(settings.database_path, log_statements=settings.log_sql), None

    if backend == 'memory':
        store = MemoryStore(log_statements=settings.log_sql)
        snapshots = SnapshotManager(
            store,
            settings.snapshot_path,
            interval=settings.snapshot_interval
        )
        logger.info(f"In-memory database, snapshot path: {settings.snapshot_path}")
        return store, snapshots

    raise StorageError(f"Unknown store backend {backend!r} (expected one of {', '.join(BACKENDS)})")


async def init_database(store: Store, snapshots: Optional[SnapshotManager] = None):
    """
    Open the store, load any snapshot and make sure the schema exists.

    Raises:
        StorageError: If any step fails
    """
    await store.open()

    if snapshots:
        await snapshots.load()

    await store.init_schema()

    stats = await store.stats()
    logger.info(f"Database stats: {stats['shops']} shops, {stats['products']} products")
