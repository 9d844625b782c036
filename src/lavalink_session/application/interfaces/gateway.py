"""Port interface for the real-time gateway directive sender."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class ShardSender(ABC):
    """Interface for delivering gateway directives on the shard owning a guild."""

    @abstractmethod
    async def send_to_shard(self, guild_id: str, directive: dict[str, Any]) -> None:
        """Deliver ``directive`` (e.g. an op 4 voice state update)."""
        ...
