"""
SQLite implementation of the local key-value store.

A single ``kv_store`` table on one aiosqlite connection; writes are
serialized with a lock so overlapping coroutines never interleave a
commit.
"""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

import aiosqlite

from quotewire.config import get_logger
from quotewire.core.exceptions import StorageError
from quotewire.core.interfaces.key_value_store import IKeyValueStore

logger = get_logger(__name__)

_SCHEMA = """
CREATE TABLE IF NOT EXISTS kv_store (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL,
    updated_at TEXT NOT NULL DEFAULT (datetime('now'))
)
"""


class SQLiteKeyValueStore(IKeyValueStore):
    """Persistent key-value store backed by a local SQLite file."""

    def __init__(self, db_path: Path, busy_timeout: int = 30000):
        self.db_path = Path(db_path)
        self.busy_timeout = busy_timeout
        self._conn: aiosqlite.Connection | None = None
        self._lock = asyncio.Lock()

    async def initialize(self) -> None:
        """Open the connection and create the table if needed."""
        async with self._lock:
            if self._conn is not None:
                return

            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            try:
                conn = await aiosqlite.connect(self.db_path)
                await conn.execute("PRAGMA journal_mode=WAL")
                await conn.execute("PRAGMA synchronous=NORMAL")
                await conn.execute(f"PRAGMA busy_timeout={self.busy_timeout}")
                await conn.execute(_SCHEMA)
                await conn.commit()
            except aiosqlite.Error as e:
                raise StorageError("initialize", str(e)) from e

            self._conn = conn
            logger.info("kv_store_initialized", db_path=str(self.db_path))

    async def close(self) -> None:
        async with self._lock:
            if self._conn is not None:
                await self._conn.close()
                self._conn = None
                logger.info("kv_store_closed")

    async def _connection(self) -> aiosqlite.Connection:
        if self._conn is None:
            await self.initialize()
        assert self._conn is not None
        return self._conn

    @asynccontextmanager
    async def _write(self, operation: str) -> AsyncIterator[aiosqlite.Connection]:
        """Serialized write; commits on success, rolls back on failure."""
        conn = await self._connection()
        async with self._lock:
            try:
                yield conn
                await conn.commit()
            except aiosqlite.Error as e:
                await conn.rollback()
                raise StorageError(operation, str(e)) from e

    async def get_item(self, key: str) -> str | None:
        conn = await self._connection()
        try:
            cursor = await conn.execute("SELECT value FROM kv_store WHERE key = ?", (key,))
            row = await cursor.fetchone()
        except aiosqlite.Error as e:
            raise StorageError("get_item", str(e)) from e
        return row[0] if row else None

    async def set_item(self, key: str, value: str) -> None:
        async with self._write("set_item") as conn:
            await conn.execute(
                """
                INSERT INTO kv_store (key, value, updated_at)
                VALUES (?, ?, datetime('now'))
                ON CONFLICT(key) DO UPDATE SET
                    value = excluded.value,
                    updated_at = excluded.updated_at
                """,
                (key, value),
            )

    async def remove_item(self, key: str) -> None:
        async with self._write("remove_item") as conn:
            await conn.execute("DELETE FROM kv_store WHERE key = ?", (key,))

    async def multi_remove(self, keys: list[str]) -> None:
        if not keys:
            return
        async with self._write("multi_remove") as conn:
            await conn.executemany("DELETE FROM kv_store WHERE key = ?", [(k,) for k in keys])

    async def keys(self) -> list[str]:
        conn = await self._connection()
        try:
            cursor = await conn.execute("SELECT key FROM kv_store ORDER BY key")
            rows = await cursor.fetchall()
        except aiosqlite.Error as e:
            raise StorageError("keys", str(e)) from e
        return [row[0] for row in rows]
