from types import SimpleNamespace
from typing import Any
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio

from lavalink_session.application.interfaces.gateway import ShardSender
from lavalink_session.application.interfaces.node_client import LavalinkNodeClient, NodePool
from lavalink_session.domain.music.entities import Track, TrackInfo

# ============================================================================
# Node Fakes
# ============================================================================


class FakeNode(LavalinkNodeClient):
    """Node client recording every request instead of sending it."""

    def __init__(self, node_id: str = "node-1", regions: tuple[str, ...] = ()) -> None:
        self._id = node_id
        self._options = SimpleNamespace(id=node_id, regions=tuple(regions))
        self.updates: list[tuple[str, dict[str, Any], bool]] = []
        self.destroyed_players: list[str] = []
        self.requests: list[str] = []
        self.load_response: Any = {"loadType": "empty", "data": {}}

    @property
    def id(self) -> str:
        return self._id

    @property
    def options(self) -> SimpleNamespace:
        return self._options

    @property
    def last_payload(self) -> dict[str, Any]:
        return self.updates[-1][1]

    async def update_player(
        self, guild_id: str, player_options: dict[str, Any], *, no_replace: bool = False
    ) -> dict[str, Any]:
        self.updates.append((guild_id, player_options, no_replace))
        return {}

    async def destroy_player(self, guild_id: str) -> None:
        self.destroyed_players.append(guild_id)

    async def make_request(self, path: str) -> Any:
        self.requests.append(path)
        return self.load_response


class FakeNodePool(NodePool):
    """Pool whose nodes are already in least-used order."""

    def __init__(self, nodes: list[FakeNode]) -> None:
        self.nodes = list(nodes)

    @property
    def least_used_nodes(self) -> list[FakeNode]:
        return list(self.nodes)

    def get_node(self, node_id: str) -> FakeNode | None:
        return next((n for n in self.nodes if n.id == node_id), None)


# ============================================================================
# Domain Fixtures
# ============================================================================


@pytest.fixture
def track_factory():
    """Build tracks with sensible defaults."""

    def make(
        identifier: str = "abc",
        *,
        duration: int = 180000,
        seekable: bool = True,
        stream: bool = False,
        title: str | None = None,
    ) -> Track:
        return Track(
            encoded=f"enc-{identifier}",
            info=TrackInfo(
                identifier=identifier,
                title=title or f"Track {identifier}",
                author="Artist",
                duration=duration,
                is_seekable=seekable,
                is_stream=stream,
            ),
        )

    return make


@pytest.fixture
def queue_store():
    from lavalink_session.infrastructure.persistence.memory_store import InMemoryQueueStore

    return InMemoryQueueStore()


@pytest.fixture
def queue_saver(queue_store):
    from lavalink_session.domain.music.repository import QueueSaver

    return QueueSaver(queue_store)


# ============================================================================
# Player Fixtures
# ============================================================================


@pytest.fixture
def node():
    return FakeNode()


@pytest.fixture
def node_pool(node):
    return FakeNodePool([node])


@pytest.fixture
def node_factory():
    return FakeNode


@pytest.fixture
def node_pool_factory():
    """Build a pool from nodes given in least-used order."""

    def make(*nodes: FakeNode) -> FakeNodePool:
        return FakeNodePool(list(nodes))

    return make


@pytest.fixture
def shard_sender():
    return AsyncMock(spec=ShardSender)


@pytest.fixture
def event_bus():
    from lavalink_session.domain.shared.events import EventBus

    return EventBus()


@pytest.fixture
def player_settings():
    from lavalink_session.config.settings import PlayerSettings

    return PlayerSettings()


@pytest.fixture
def manager_factory(node_pool, queue_saver, shard_sender, event_bus, player_settings):
    """Create a manager; settings and pool may be overridden per test."""
    from lavalink_session.application.services.manager import PlayerManager
    from lavalink_session.config.settings import PlayerSettings

    def make(settings: PlayerSettings | None = None, pool: NodePool | None = None, **kwargs):
        return PlayerManager(
            player_settings=settings or player_settings,
            node_pool=pool or node_pool,
            queue_saver=queue_saver,
            shard_sender=shard_sender,
            events=event_bus,
            **kwargs,
        )

    return make


@pytest.fixture
def manager(manager_factory):
    return manager_factory()


@pytest_asyncio.fixture
async def player(manager):
    """Player for guild 123 with a voice channel configured."""
    return await manager.create_player(guild_id="123", voice_channel_id="456")
