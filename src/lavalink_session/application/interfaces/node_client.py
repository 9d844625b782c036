"""Port interfaces for remote audio nodes and the pool that owns them."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Any, Protocol


class NodeOptionsLike(Protocol):
    id: str
    regions: Sequence[str]


class LavalinkNodeClient(ABC):
    """Interface for the REST control protocol of one remote audio node."""

    @property
    @abstractmethod
    def id(self) -> str:
        ...

    @property
    @abstractmethod
    def options(self) -> NodeOptionsLike:
        """Static node options; ``options.regions`` lists the served voice regions."""
        ...

    @abstractmethod
    async def update_player(
        self,
        guild_id: str,
        player_options: dict[str, Any],
        *,
        no_replace: bool = False,
    ) -> dict[str, Any]:
        """Send a player update and wait for the node to acknowledge it."""
        ...

    @abstractmethod
    async def destroy_player(self, guild_id: str) -> None:
        """Tell the node to discard the player of a session."""
        ...

    @abstractmethod
    async def make_request(self, path: str) -> Any:
        """GET a node endpoint and return the decoded JSON body."""
        ...


class NodePool(ABC):
    """Interface for the registry owning the lifetime of all nodes."""

    @property
    @abstractmethod
    def least_used_nodes(self) -> list[LavalinkNodeClient]:
        """Connected nodes ordered by ascending load."""
        ...

    @abstractmethod
    def get_node(self, node_id: str) -> LavalinkNodeClient | None:
        ...
