"""Dependency Injection Container

Builds the queue store, node pool, event bus and player manager from
``Settings``. Components are created on first access and cached.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from ..domain.shared.constants import QueueStoreSchemes
from ..utils.logging import setup_logging

logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from ..application.interfaces.gateway import ShardSender
    from ..application.services.manager import PlayerManager
    from ..domain.music.repository import QueueSaver, QueueStore
    from ..domain.shared.events import EventBus
    from ..infrastructure.lavalink.node_manager import NodeManager
    from ..infrastructure.search.bandcamp import BandcampSearchSource
    from .settings import Settings


@dataclass
class Container:
    """Dependency injection container.

    Components are lazily initialized when first accessed.
    """

    settings: Settings
    shard_sender: ShardSender
    _instances: dict[str, Any] = field(default_factory=dict)

    def _get_or_create(self, key: str, factory: Any) -> Any:
        if key not in self._instances:
            self._instances[key] = factory()
            logger.debug("Container created %s", key)
        return self._instances[key]

    @property
    def queue_store(self) -> QueueStore:
        def factory() -> QueueStore:
            url = self.settings.queue.store_url
            if url.startswith(QueueStoreSchemes.SQLITE):
                from ..infrastructure.persistence.sqlite_store import SQLiteQueueStore

                return SQLiteQueueStore(url, self.settings.queue)

            from ..infrastructure.persistence.memory_store import InMemoryQueueStore

            return InMemoryQueueStore()

        return self._get_or_create("queue_store", factory)

    @property
    def queue_saver(self) -> QueueSaver:
        from ..domain.music.repository import QueueSaver

        return self._get_or_create(
            "queue_saver",
            lambda: QueueSaver(
                self.queue_store, max_previous_tracks=self.settings.queue.max_previous_tracks
            ),
        )

    @property
    def node_manager(self) -> NodeManager:
        def factory() -> NodeManager:
            from ..infrastructure.lavalink.node_manager import NodeManager

            manager = NodeManager()
            for node_settings in self.settings.nodes:
                manager.create_node(node_settings)
            return manager

        return self._get_or_create("node_manager", factory)

    @property
    def event_bus(self) -> EventBus:
        from ..domain.shared.events import EventBus

        return self._get_or_create("event_bus", EventBus)

    @property
    def bandcamp_search(self) -> BandcampSearchSource:
        from ..infrastructure.search.bandcamp import BandcampSearchSource

        return self._get_or_create("bandcamp_search", BandcampSearchSource)

    @property
    def player_manager(self) -> PlayerManager:
        def factory() -> PlayerManager:
            from ..application.services.manager import PlayerManager

            return PlayerManager(
                player_settings=self.settings.player,
                node_pool=self.node_manager,
                queue_saver=self.queue_saver,
                shard_sender=self.shard_sender,
                events=self.event_bus,
                search_sources=[self.bandcamp_search],
            )

        return self._get_or_create("player_manager", factory)

    async def close(self) -> None:
        """Release network clients and the queue store."""
        if "player_manager" in self._instances:
            await self.player_manager.destroy_all()
        if "node_manager" in self._instances:
            await self.node_manager.close()
        if "bandcamp_search" in self._instances:
            await self.bandcamp_search.close()
        store = self._instances.get("queue_store")
        close = getattr(store, "close", None)
        if close is not None:
            await close()
        self._instances.clear()


def create_container(settings: Settings, shard_sender: ShardSender) -> Container:
    """Factory function to create a configured container with logging set up."""
    setup_logging(settings.log_level)
    return Container(settings=settings, shard_sender=shard_sender)
