"""Tests for the in-memory and SQLite queue stores."""

import pytest
import pytest_asyncio

from lavalink_session.config.settings import QueueSettings
from lavalink_session.domain.music.entities import QueueSnapshot, Track, TrackInfo
from lavalink_session.domain.music.queue import Queue
from lavalink_session.domain.music.repository import QueueSaver
from lavalink_session.infrastructure.persistence.memory_store import InMemoryQueueStore
from lavalink_session.infrastructure.persistence.sqlite_store import SQLiteQueueStore


def make_snapshot(guild_id: str = "1") -> QueueSnapshot:
    return QueueSnapshot(
        guild_id=guild_id,
        current=Track(encoded="cur", info=TrackInfo(title="Current", duration=1000)),
        tracks=[Track(encoded="next", info=TrackInfo(title="Next"), requester="user-1")],
        previous=[Track(encoded="prev")],
    )


@pytest_asyncio.fixture
async def sqlite_store(tmp_path):
    store = SQLiteQueueStore(f"sqlite:///{tmp_path / 'queues.db'}", QueueSettings())
    await store.initialize()
    yield store
    await store.close()


class TestInMemoryQueueStore:
    @pytest.mark.asyncio
    async def test_set_get_delete(self):
        store = InMemoryQueueStore()
        snapshot = make_snapshot()

        await store.set("1", snapshot)

        assert await store.get("1") == snapshot
        assert await store.count() == 1
        assert await store.delete("1") is True
        assert await store.delete("1") is False
        assert await store.get("1") is None

    @pytest.mark.asyncio
    async def test_returns_copies(self):
        store = InMemoryQueueStore()
        await store.set("1", make_snapshot())

        loaded = await store.get("1")
        loaded.tracks.clear()

        assert len((await store.get("1")).tracks) == 1


class TestSQLiteQueueStore:
    """Tests for the SQLite queue store."""

    @pytest.mark.asyncio
    async def test_round_trip(self, sqlite_store):
        snapshot = make_snapshot()

        await sqlite_store.set("1", snapshot)
        loaded = await sqlite_store.get("1")

        assert loaded == snapshot
        assert loaded.tracks[0].requester == "user-1"

    @pytest.mark.asyncio
    async def test_set_replaces_snapshot(self, sqlite_store):
        await sqlite_store.set("1", make_snapshot())
        await sqlite_store.set("1", QueueSnapshot(guild_id="1"))

        loaded = await sqlite_store.get("1")
        assert loaded.tracks == []
        assert await sqlite_store.count() == 1

    @pytest.mark.asyncio
    async def test_missing_snapshot(self, sqlite_store):
        assert await sqlite_store.get("404") is None
        assert await sqlite_store.delete("404") is False

    @pytest.mark.asyncio
    async def test_delete(self, sqlite_store):
        await sqlite_store.set("1", make_snapshot())
        assert await sqlite_store.delete("1") is True
        assert await sqlite_store.count() == 0

    @pytest.mark.asyncio
    async def test_queue_restores_from_sqlite(self, sqlite_store):
        """Should restore a queue saved through the SQLite store."""
        saver = QueueSaver(sqlite_store)
        queue = Queue("1", saver)
        await queue.add([Track(encoded="a"), Track(encoded="b")])
        await queue.track_end()

        restored = Queue("1", saver)
        await restored.restore()

        assert restored.current.encoded == "a"
        assert [t.encoded for t in restored.tracks] == ["b"]

    @pytest.mark.asyncio
    async def test_in_memory_database(self):
        store = SQLiteQueueStore("sqlite:///:memory:")
        try:
            await store.set("1", make_snapshot())
            assert (await store.get("1")).current.encoded == "cur"
        finally:
            await store.close()

    def test_db_path(self, tmp_path):
        path = tmp_path / "q.db"
        assert SQLiteQueueStore(f"sqlite:///{path}").db_path == str(path)
