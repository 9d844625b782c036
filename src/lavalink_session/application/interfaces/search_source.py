"""Port interface for search sources that do not go through a node."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class SearchSource(ABC):
    """Interface for search plugins registered on the manager by prefix.

    ``search`` returns a raw, search-shaped mapping (``loadType``, ``data``,
    ``pluginInfo``) that the normalizer turns into a SearchResult. Failures
    should be reported as a ``loadType="error"`` response, not raised.
    """

    @property
    @abstractmethod
    def prefix(self) -> str:
        """Source prefix this plugin answers for, e.g. ``bcsearch``."""
        ...

    @abstractmethod
    async def search(self, query: str) -> dict[str, Any]:
        ...
