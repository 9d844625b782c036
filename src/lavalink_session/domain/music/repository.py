"""
Queue Persistence Interfaces

Abstract base class defining the contract of the queue store, plus the
saver that binds one store to the queues of a manager. Implementations
live in the infrastructure layer.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from lavalink_session.domain.music.entities import QueueSnapshot
from lavalink_session.domain.shared.constants import PlayerConstants
from lavalink_session.domain.shared.messages import LogTemplates

logger = logging.getLogger(__name__)


class QueueStore(ABC):
    """Abstract store for queue snapshots, keyed by session key.

    Implementations may use in-memory storage, SQLite, Redis, etc.
    Failures are not swallowed; they propagate to whoever mutated the queue.
    """

    @abstractmethod
    async def get(self, guild_id: str) -> QueueSnapshot | None:
        """Retrieve the stored snapshot for a session.

        Args:
            guild_id: The session key.

        Returns:
            The snapshot if found, None otherwise.
        """
        ...

    @abstractmethod
    async def set(self, guild_id: str, snapshot: QueueSnapshot) -> None:
        """Store a snapshot, replacing any previous one.

        Args:
            guild_id: The session key.
            snapshot: The queue state to store.
        """
        ...

    @abstractmethod
    async def delete(self, guild_id: str) -> bool:
        """Delete the snapshot of a session.

        Args:
            guild_id: The session key.

        Returns:
            True if a snapshot was deleted, False if none existed.
        """
        ...


class QueueSaver:
    """Persistence adapter handed to every queue of a manager."""

    def __init__(
        self, store: QueueStore, *, max_previous_tracks: int = PlayerConstants.MAX_PREVIOUS_TRACKS
    ) -> None:
        self._store = store
        self.max_previous_tracks = max_previous_tracks

    @property
    def store(self) -> QueueStore:
        return self._store

    async def save(self, guild_id: str, snapshot: QueueSnapshot) -> None:
        await self._store.set(guild_id, snapshot)
        logger.debug(LogTemplates.QUEUE_SAVED, guild_id, len(snapshot.tracks))

    async def load(self, guild_id: str) -> QueueSnapshot | None:
        return await self._store.get(guild_id)

    async def delete(self, guild_id: str) -> bool:
        return await self._store.delete(guild_id)
