"""HTTP client for the REST control protocol of a remote audio node."""

from __future__ import annotations

import logging
from typing import Any

import httpx
from pydantic import BaseModel, ConfigDict, Field

from lavalink_session.application.interfaces.node_client import LavalinkNodeClient
from lavalink_session.config.settings import NodeSettings
from lavalink_session.domain.shared.constants import HTTPHeaders, NodeEndpoints
from lavalink_session.domain.shared.exceptions import NodeRequestError
from lavalink_session.domain.shared.messages import ErrorMessages

logger = logging.getLogger(__name__)


class NodeStats(BaseModel):
    """Load figures reported by a node's stats endpoint."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    players: int = 0
    playing_players: int = Field(default=0, alias="playingPlayers")
    uptime: int = 0
    cpu_lavalink_load: float = 0.0

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> NodeStats:
        cpu = payload.get("cpu") or {}
        return cls(
            players=payload.get("players") or 0,
            playingPlayers=payload.get("playingPlayers") or 0,
            uptime=payload.get("uptime") or 0,
            cpu_lavalink_load=cpu.get("lavalinkLoad") or 0.0,
        )

    @property
    def load_key(self) -> tuple[int, float]:
        return (self.players, self.cpu_lavalink_load)


class LavalinkNode(LavalinkNodeClient):
    """REST client of one node, addressing players through its session id."""

    def __init__(
        self, settings: NodeSettings, client: httpx.AsyncClient | None = None
    ) -> None:
        self._settings = settings
        self._client = client or httpx.AsyncClient(
            base_url=settings.base_url + NodeEndpoints.VERSION_PREFIX,
            timeout=settings.request_timeout_s,
        )
        self._owns_client = client is None
        self.session_id: str | None = settings.session_id
        self.stats = NodeStats()
        self.connected = True

    @property
    def id(self) -> str:
        return self._settings.id

    @property
    def options(self) -> NodeSettings:
        return self._settings

    def _headers(self) -> dict[str, str]:
        return {
            HTTPHeaders.AUTHORIZATION: self._settings.authorization.get_secret_value(),
            HTTPHeaders.CONTENT_TYPE: HTTPHeaders.JSON,
        }

    def _player_path(self, guild_id: str) -> str:
        if not self.session_id:
            raise NodeRequestError(self.id, ErrorMessages.NODE_NO_SESSION.format(node_id=self.id))
        return NodeEndpoints.PLAYER.format(session_id=self.session_id, guild_id=guild_id)

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json: Any = None,
    ) -> httpx.Response:
        try:
            response = await self._client.request(
                method, path, params=params, json=json, headers=self._headers()
            )
        except httpx.HTTPError as e:
            raise NodeRequestError(
                self.id, ErrorMessages.NODE_REQUEST_FAILED.format(node_id=self.id, error=e)
            ) from e

        if response.is_error:
            raise NodeRequestError(
                self.id,
                ErrorMessages.NODE_BAD_STATUS.format(
                    node_id=self.id, method=method, path=path, status=response.status_code
                ),
                status_code=response.status_code,
            )
        return response

    async def update_player(
        self,
        guild_id: str,
        player_options: dict[str, Any],
        *,
        no_replace: bool = False,
    ) -> dict[str, Any]:
        response = await self._request(
            "PATCH",
            self._player_path(guild_id),
            params={"noReplace": str(no_replace).lower()},
            json=player_options,
        )
        return response.json() if response.content else {}

    async def destroy_player(self, guild_id: str) -> None:
        await self._request("DELETE", self._player_path(guild_id))

    async def make_request(self, path: str) -> Any:
        response = await self._request("GET", path)
        return response.json() if response.content else None

    async def fetch_stats(self) -> NodeStats:
        """Refresh ``stats`` from the node's stats endpoint."""
        payload = await self.make_request(NodeEndpoints.STATS)
        self.stats = NodeStats.from_payload(payload or {})
        return self.stats

    async def close(self) -> None:
        if self._owns_client:
            await self._client.aclose()
