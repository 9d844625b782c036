"""Player Manager - keyed registry of sessions and their shared collaborators."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from ...domain.music.entities import PlayerOptions
from ...domain.music.repository import QueueSaver
from ...domain.shared.events import EventBus
from ...domain.shared.messages import LogTemplates
from .player import Player

if TYPE_CHECKING:
    from ...config.settings import PlayerSettings
    from ..interfaces.gateway import ShardSender
    from ..interfaces.node_client import NodePool
    from ..interfaces.search_source import SearchSource

logger = logging.getLogger(__name__)


class PlayerManager:
    """Owns the session table and hands every player its collaborators.

    The session table is a plain dict: create, lookup and delete are not
    synchronized, matching the one-caller-per-session contract of players.
    """

    def __init__(
        self,
        *,
        player_settings: PlayerSettings,
        node_pool: NodePool,
        queue_saver: QueueSaver,
        shard_sender: ShardSender,
        events: EventBus | None = None,
        search_sources: list[SearchSource] | None = None,
    ) -> None:
        self.player_settings = player_settings
        self.node_pool = node_pool
        self.queue_saver = queue_saver
        self.shard_sender = shard_sender
        self.events = events or EventBus()
        self.search_sources: dict[str, SearchSource] = {}
        self._players: dict[str, Player] = {}

        for source in search_sources or []:
            self.register_search_source(source)

    @property
    def players(self) -> dict[str, Player]:
        return dict(self._players)

    def register_search_source(self, source: SearchSource) -> None:
        self.search_sources[source.prefix] = source

    def get_player(self, guild_id: str | int) -> Player | None:
        return self._players.get(str(guild_id))

    async def create_player(
        self, options: PlayerOptions | None = None, **kwargs: Any
    ) -> Player:
        """Return the existing player of the guild, or create and register one.

        Raises:
            NoNodeAvailableError: If no node can own the session.
        """
        options = options or PlayerOptions(**kwargs)

        existing = self._players.get(options.guild_id)
        if existing is not None:
            logger.debug(LogTemplates.PLAYER_ALREADY_EXISTS, options.guild_id)
            return existing

        player = await Player.create(options, self)
        self._players[player.guild_id] = player
        return player

    def delete_player(self, guild_id: str | int) -> bool:
        return self._players.pop(str(guild_id), None) is not None

    async def destroy_all(self, disconnect: bool = True) -> int:
        """Destroy every registered player and return how many were destroyed."""
        players = list(self._players.values())
        for player in players:
            await player.destroy(disconnect=disconnect and bool(player.options.voice_channel_id))
        return len(players)
