"""
Database initialization script.

Creates the schema for the configured backend, reports row counts and exits
non-zero if anything fails.
"""

import asyncio
import logging
import sys

from .config import get_settings
from .database import create_store, init_database
from .storage import StorageError

logger = logging.getLogger(__name__)


async def _initialize() -> dict:
    settings = get_settings()
    store, snapshots = create_store(settings)
    try:
        await init_database(store, snapshots)
        stats = await store.stats()
        if snapshots:
            if not await snapshots.flush():
                raise StorageError(f"Could not write snapshot {snapshots.path}")
        return stats
    finally:
        await store.close()


def main():
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    try:
        stats = asyncio.run(_initialize())
    except StorageError as e:
        logger.error(f"Database initialization failed: {e}")
        sys.exit(1)

    logger.info(
        f"Database initialization complete: "
        f"{stats['shops']} shops, {stats['products']} products"
    )


if __name__ == "__main__":
    main()
