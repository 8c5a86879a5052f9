"""
Snapshot Manager

Persists a MemoryStore to a snapshot file.

The snapshot is loaded once at startup, flushed on a fixed interval while
there are unflushed writes, flushed right after every successful write and
once more on shutdown. A failed flush is logged and retried on the next
tick; writes made since the last successful flush are lost if the process
dies before then.
"""

import asyncio
import logging
import os
from pathlib import Path
from typing import Optional

from .errors import StorageError
from .statements import Statement
from .store import MemoryStore

logger = logging.getLogger(__name__)


class SnapshotManager:
    """
    Bridges an in-memory store to durable storage.

    Only talks to the store through ``copy_to`` and ``restore_from``.
    """

    def __init__(self, store: MemoryStore, path: Path, interval: float = 5.0):
        self.store = store
        self.path = Path(path)
        self.interval = interval

        self._flush_lock = asyncio.Lock()
        self._flush_task: Optional[asyncio.Task] = None
        self._running = False
        # Writes seen vs. writes covered by the last successful flush
        self._write_seq = 0
        self._flushed_seq = 0

        self.flush_count = 0
        self.failure_count = 0

    @property
    def dirty(self) -> bool:
        return self._write_seq != self._flushed_seq

    async def load(self) -> bool:
        """
        Load the snapshot file into the store if it exists.

        Returns:
            True if a snapshot was loaded

        Raises:
            StorageError: If the snapshot exists but cannot be read
        """
        if not self.path.exists():
            logger.info(f"No snapshot at {self.path}, starting empty")
            return False

        await self.store.restore_from(self.path)
        logger.info(f"Snapshot loaded from {self.path}")
        return True

    async def start(self):
        """Hook into store writes and start the periodic flush loop."""
        self.store.add_write_listener(self.notify_write)
        self._running = True
        self._flush_task = asyncio.create_task(self._flush_loop())
        logger.info(f"Snapshot flush every {self.interval}s to {self.path}")

    async def shutdown(self):
        """Stop the flush loop and write a final snapshot."""
        self._running = False

        if self._flush_task:
            self._flush_task.cancel()
            try:
                await self._flush_task
            except asyncio.CancelledError:
                pass
            self._flush_task = None

        if self.store.is_open:
            await self.flush()

    async def notify_write(self, statement: Statement):
        """Write listener: mark state dirty and flush immediately."""
        self._write_seq += 1
        await self.flush()

    async def _flush_loop(self):
        """Periodic flush of unflushed writes."""
        while self._running:
            await asyncio.sleep(self.interval)
            if self.dirty:
                await self.flush()

    async def flush(self) -> bool:
        """
        Write the full store state to the snapshot file.

        Copies to a temporary file first and renames it over the snapshot
        so readers never see a partial file.

        Returns:
            True if the snapshot was written
        """
        async with self._flush_lock:
            tmp_path = self.path.with_name(self.path.name + '.tmp')
            # Writes landing mid-copy stay dirty
            covered = self._write_seq
            try:
                self.path.parent.mkdir(parents=True, exist_ok=True)
                if tmp_path.exists():
                    tmp_path.unlink()
                await self.store.copy_to(tmp_path)
                os.replace(tmp_path, self.path)
            except (OSError, StorageError) as e:
                self.failure_count += 1
                logger.error(f"Snapshot flush to {self.path} failed: {e}")
                return False

            self._flushed_seq = covered
            self.flush_count += 1
            logger.debug(f"Snapshot written to {self.path}")
            return True
