"""In-memory implementation of the queue store."""

from __future__ import annotations

from lavalink_session.domain.music.entities import QueueSnapshot
from lavalink_session.domain.music.repository import QueueStore


class InMemoryQueueStore(QueueStore):
    def __init__(self) -> None:
        self._snapshots: dict[str, QueueSnapshot] = {}

    async def get(self, guild_id: str) -> QueueSnapshot | None:
        snapshot = self._snapshots.get(guild_id)
        return snapshot.model_copy(deep=True) if snapshot else None

    async def set(self, guild_id: str, snapshot: QueueSnapshot) -> None:
        self._snapshots[guild_id] = snapshot.model_copy(deep=True)

    async def delete(self, guild_id: str) -> bool:
        return self._snapshots.pop(guild_id, None) is not None

    async def count(self) -> int:
        return len(self._snapshots)
