"""SQLite queue store with per-operation connections and WAL mode."""

from __future__ import annotations

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from pathlib import Path
from typing import TYPE_CHECKING

import aiosqlite

from lavalink_session.domain.music.entities import QueueSnapshot
from lavalink_session.domain.music.repository import QueueStore
from lavalink_session.domain.shared.constants import QueueStoreSchemes, SQLPragmas
from lavalink_session.domain.shared.messages import LogTemplates
from lavalink_session.domain.shared.types import utcnow

if TYPE_CHECKING:
    from lavalink_session.config.settings import QueueSettings

logger = logging.getLogger(__name__)


class SQLiteQueueStore(QueueStore):
    """Stores one JSON snapshot per guild in a ``queue_snapshots`` table."""

    def __init__(self, url: str, settings: QueueSettings | None = None) -> None:
        if url.startswith("sqlite:///"):
            self._db_path = url[10:]  # Remove "sqlite:///"
        else:
            self._db_path = url

        self._initialized = False
        self._keepalive_conn: aiosqlite.Connection | None = None
        self._busy_timeout = settings.busy_timeout_ms if settings else 5000
        self._connection_timeout = settings.connection_timeout_s if settings else 10

    @property
    def db_path(self) -> str:
        return self._db_path

    async def initialize(self) -> None:
        if self._initialized:
            return

        if self._db_path != QueueStoreSchemes.MEMORY_DB:
            Path(self._db_path).parent.mkdir(parents=True, exist_ok=True)

        # Keep one connection alive for in-memory DBs; otherwise the shared
        # in-memory DB is destroyed once the last connection closes.
        if self._db_path == QueueStoreSchemes.MEMORY_DB and self._keepalive_conn is None:
            self._keepalive_conn = await self._connect()

        async with self.transaction() as conn:
            await conn.execute(
                """
                CREATE TABLE IF NOT EXISTS queue_snapshots (
                    guild_id TEXT PRIMARY KEY,
                    snapshot_json TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
                """
            )

        self._initialized = True
        logger.info(LogTemplates.QUEUE_STORE_INITIALIZED, self._db_path)

    async def _connect(self) -> aiosqlite.Connection:
        # SQLite ":memory:" is per-connection, so use a shared URI to allow
        # multiple connections to see the same in-memory database.
        if self._db_path == QueueStoreSchemes.MEMORY_DB:
            db_path = QueueStoreSchemes.MEMORY_SHARED_URI
            uri = True
        else:
            db_path = self._db_path
            uri = False

        conn = await aiosqlite.connect(db_path, uri=uri, timeout=self._connection_timeout)
        conn.row_factory = aiosqlite.Row

        await conn.execute(SQLPragmas.JOURNAL_MODE_WAL)
        await conn.execute(SQLPragmas.BUSY_TIMEOUT.format(timeout=self._busy_timeout))
        return conn

    @asynccontextmanager
    async def transaction(self) -> AsyncGenerator[aiosqlite.Connection, None]:
        """Connection with auto-commit on success and rollback on error."""
        conn = await self._connect()
        try:
            yield conn
            await conn.commit()
        except Exception:
            await conn.rollback()
            raise
        finally:
            await conn.close()

    async def get(self, guild_id: str) -> QueueSnapshot | None:
        await self.initialize()
        async with self.transaction() as conn:
            cursor = await conn.execute(
                "SELECT snapshot_json FROM queue_snapshots WHERE guild_id = ?", (guild_id,)
            )
            row = await cursor.fetchone()

        if row is None:
            return None
        return QueueSnapshot.model_validate_json(row["snapshot_json"])

    async def set(self, guild_id: str, snapshot: QueueSnapshot) -> None:
        await self.initialize()
        async with self.transaction() as conn:
            await conn.execute(
                """
                INSERT INTO queue_snapshots (guild_id, snapshot_json, updated_at)
                VALUES (?, ?, ?)
                ON CONFLICT(guild_id) DO UPDATE SET
                    snapshot_json = excluded.snapshot_json,
                    updated_at = excluded.updated_at
                """,
                (guild_id, snapshot.model_dump_json(), utcnow().isoformat()),
            )

    async def delete(self, guild_id: str) -> bool:
        await self.initialize()
        async with self.transaction() as conn:
            cursor = await conn.execute(
                "DELETE FROM queue_snapshots WHERE guild_id = ?", (guild_id,)
            )
            deleted = cursor.rowcount > 0
        return deleted

    async def count(self) -> int:
        await self.initialize()
        async with self.transaction() as conn:
            cursor = await conn.execute("SELECT COUNT(*) AS count FROM queue_snapshots")
            row = await cursor.fetchone()
        return row["count"] if row else 0

    async def close(self) -> None:
        """Close the keepalive connection of an in-memory store."""
        if self._keepalive_conn is not None:
            try:
                await self._keepalive_conn.close()
            finally:
                self._keepalive_conn = None
        self._initialized = False
        logger.info(LogTemplates.QUEUE_STORE_CLOSED)
