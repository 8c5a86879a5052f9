"""
Store

Async SQLite-backed store for shops and products.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Awaitable, Callable, Dict, List, Optional, Sequence

import aiosqlite

from .errors import ConstraintViolation, NotInitialized, StorageError
from .statements import SCHEMA, Statement

logger = logging.getLogger(__name__)

WriteListener = Callable[[Statement], Awaitable[None]]


@dataclass
class QueryResult:
    """Outcome of a single statement."""
    rows: List[Dict[str, Any]] = field(default_factory=list)
    inserted_id: Optional[int] = None
    changes: int = 0

    def first(self) -> Optional[Dict[str, Any]]:
        return self.rows[0] if self.rows else None


class Store:
    """
    Owns one aiosqlite connection and runs statements against it.

    All statements of a connection execute on a single aiosqlite worker
    thread. Writes and their commit are additionally serialized by an
    asyncio lock so that snapshot copies only ever see committed state.
    """

    def __init__(self, database: str, log_statements: bool = False):
        self.database = database
        self.log_statements = log_statements
        self._conn: Optional[aiosqlite.Connection] = None
        self._write_lock = asyncio.Lock()
        self._write_listeners: List[WriteListener] = []

    @property
    def is_open(self) -> bool:
        return self._conn is not None

    async def open(self):
        """Open the underlying connection."""
        if self._conn is not None:
            return

        try:
            self._conn = await aiosqlite.connect(self.database)
            self._conn.row_factory = aiosqlite.Row
            await self._conn.execute("PRAGMA foreign_keys = ON")
            await self._configure(self._conn)
        except aiosqlite.Error as e:
            await self.close()
            raise StorageError(f"Cannot open database {self.database}: {e}") from e

        logger.info(f"Store opened: {self.database}")

    async def _configure(self, conn: aiosqlite.Connection):
        """Backend specific connection setup."""

    async def close(self):
        """Close the underlying connection."""
        if self._conn is None:
            return

        conn, self._conn = self._conn, None
        try:
            await conn.close()
        except aiosqlite.Error as e:
            logger.warning(f"Error while closing store: {e}")
        logger.info(f"Store closed: {self.database}")

    def add_write_listener(self, listener: WriteListener):
        """Register a coroutine awaited after every successful write."""
        self._write_listeners.append(listener)

    def _connection(self) -> aiosqlite.Connection:
        if self._conn is None:
            raise NotInitialized("Store has not been opened")
        return self._conn

    async def init_schema(self):
        """Create tables and indexes. Safe to call repeatedly."""
        conn = self._connection()
        async with self._write_lock:
            try:
                await conn.executescript(SCHEMA)
                await conn.commit()
            except aiosqlite.Error as e:
                raise StorageError(f"Schema setup failed: {e}") from e

        logger.info("Database schema ready")

    async def execute(self, statement: Statement, params: Sequence[Any] = ()) -> QueryResult:
        """
        Run one statement.

        Args:
            statement: Statement to run
            params: Positional parameters bound to the statement

        Returns:
            QueryResult with rows for reads, inserted_id/changes for writes

        Raises:
            NotInitialized: If the store is not open
            ConstraintViolation: If a uniqueness or foreign-key rule is broken
            StorageError: For any other engine failure
        """
        conn = self._connection()
        params = tuple(params)

        if self.log_statements:
            logger.info(f"SQL {statement.name}: {' '.join(statement.sql.split())} {params}")

        if statement.is_read:
            try:
                async with conn.execute(statement.sql, params) as cursor:
                    rows = await cursor.fetchall()
            except (aiosqlite.Error, OverflowError) as e:
                raise StorageError(f"{statement.name} failed: {e}") from e
            return QueryResult(rows=[dict(row) for row in rows])

        async with self._write_lock:
            try:
                cursor = await conn.execute(statement.sql, params)
                await conn.commit()
            except aiosqlite.IntegrityError as e:
                await self._rollback(conn)
                raise ConstraintViolation(str(e)) from e
            except (aiosqlite.Error, OverflowError) as e:
                await self._rollback(conn)
                raise StorageError(f"{statement.name} failed: {e}") from e

            result = QueryResult(
                inserted_id=cursor.lastrowid if statement.is_insert else None,
                changes=cursor.rowcount
            )
            await cursor.close()

        for listener in self._write_listeners:
            await listener(statement)

        return result

    async def _rollback(self, conn: aiosqlite.Connection):
        """Roll back a failed write without masking the original error."""
        try:
            await conn.rollback()
        except aiosqlite.Error as e:
            logger.warning(f"Rollback failed: {e}")

    async def stats(self) -> Dict[str, int]:
        """Row counts per collection."""
        shops = await self.execute(Statement.COUNT_SHOPS)
        products = await self.execute(Statement.COUNT_PRODUCTS)
        return {
            'shops': shops.first()['count'],
            'products': products.first()['count']
        }


class SQLiteStore(Store):
    """Store persisted directly to a SQLite database file."""

    def __init__(self, path: Path, log_statements: bool = False):
        self.path = Path(path)
        super().__init__(str(self.path), log_statements=log_statements)

    async def open(self):
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageError(f"Cannot create data directory {self.path.parent}: {e}") from e
        await super().open()

    async def _configure(self, conn: aiosqlite.Connection):
        await conn.execute("PRAGMA journal_mode = WAL")


class MemoryStore(Store):
    """
    Store held entirely in memory.

    Durability comes from a SnapshotManager copying the whole database
    to disk with ``copy_to`` and reading it back with ``restore_from``.
    """

    def __init__(self, log_statements: bool = False):
        super().__init__(":memory:", log_statements=log_statements)

    async def copy_to(self, path: Path):
        """Write a point-in-time copy of the whole database to ``path``."""
        conn = self._connection()
        async with self._write_lock:
            try:
                async with aiosqlite.connect(str(path)) as target:
                    await conn.backup(target)
            except aiosqlite.Error as e:
                raise StorageError(f"Snapshot copy to {path} failed: {e}") from e

    async def restore_from(self, path: Path):
        """Replace the in-memory database with the contents of ``path``."""
        conn = self._connection()
        async with self._write_lock:
            try:
                async with aiosqlite.connect(str(path)) as source:
                    await source.execute("PRAGMA schema_version")
                    await source.backup(conn)
            except aiosqlite.Error as e:
                raise StorageError(f"Snapshot restore from {path} failed: {e}") from e
