"""
Unit Tests for PlayerManager and node selection

Tests for:
- select_node / select_node_from_pool region handling
- PlayerManager session table
"""

import pytest

from lavalink_session.application.services.node_selector import (
    select_node,
    select_node_from_pool,
)
from lavalink_session.domain.music.entities import PlayerOptions
from lavalink_session.domain.shared.exceptions import ConstructionError, NoNodeAvailableError


class TestSelectNode:
    """Unit tests for region-aware node selection."""

    def test_empty_pool_fails(self):
        with pytest.raises(NoNodeAvailableError) as exc_info:
            select_node([])
        assert isinstance(exc_info.value, ConstructionError)

    def test_least_used_without_hint(self, node_factory):
        first, second = node_factory("a"), node_factory("b")
        assert select_node([first, second]) is first

    def test_prefers_node_serving_region(self, node_factory):
        first = node_factory("a", regions=("us-east",))
        second = node_factory("b", regions=("eu-west",))
        assert select_node([first, second], "eu-west") is second

    def test_region_fallback_to_least_used(self, node_factory):
        """Should fall back to the globally least used node, not fail."""
        first = node_factory("a", regions=("us-east",))
        second = node_factory("b", regions=("eu-west",))
        assert select_node([first, second], "brazil") is first

    def test_pinned_node(self, node_factory, node_pool_factory):
        first, second = node_factory("a"), node_factory("b")
        pool = node_pool_factory(first, second)

        assert select_node_from_pool(pool, pinned="b") is second
        assert select_node_from_pool(pool, pinned="missing") is first


class TestPlayerManager:
    """Unit tests for the manager's session table."""

    @pytest.mark.asyncio
    async def test_create_registers_player(self, manager):
        player = await manager.create_player(PlayerOptions(guild_id=123))

        assert manager.get_player(123) is player
        assert manager.get_player("123") is player
        assert list(manager.players) == ["123"]

    @pytest.mark.asyncio
    async def test_create_reuses_existing_player(self, manager):
        first = await manager.create_player(guild_id="1")
        second = await manager.create_player(guild_id="1", volume=50)

        assert first is second

    @pytest.mark.asyncio
    async def test_create_uses_region_hint(self, manager_factory, node_factory, node_pool_factory):
        us, eu = node_factory("us", regions=("us-east",)), node_factory("eu", regions=("eu-west",))
        manager = manager_factory(pool=node_pool_factory(us, eu))

        player = await manager.create_player(guild_id="1", vc_region="eu-west")

        assert player.node is eu

    def test_delete_unknown_player(self, manager):
        assert manager.delete_player("404") is False

    @pytest.mark.asyncio
    async def test_destroy_all(self, manager, shard_sender, node):
        await manager.create_player(guild_id="1", voice_channel_id="10")
        await manager.create_player(guild_id="2")

        assert await manager.destroy_all() == 2

        assert manager.players == {}
        assert sorted(node.destroyed_players) == ["1", "2"]
        # only the player with a voice channel is disconnected
        assert shard_sender.send_to_shard.await_count == 1

    def test_register_search_source(self, manager):
        class Source:
            prefix = "bcsearch"

            async def search(self, query):
                return {}

        source = Source()
        manager.register_search_source(source)
        assert manager.search_sources["bcsearch"] is source
