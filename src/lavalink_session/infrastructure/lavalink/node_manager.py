"""Node pool ordering connected nodes by load."""

from __future__ import annotations

import logging

from lavalink_session.application.interfaces.node_client import NodePool
from lavalink_session.config.settings import NodeSettings
from lavalink_session.domain.shared.messages import LogTemplates
from lavalink_session.infrastructure.lavalink.node import LavalinkNode

logger = logging.getLogger(__name__)


class NodeManager(NodePool):
    def __init__(self) -> None:
        self._nodes: dict[str, LavalinkNode] = {}

    @property
    def nodes(self) -> list[LavalinkNode]:
        return list(self._nodes.values())

    @property
    def least_used_nodes(self) -> list[LavalinkNode]:
        """Connected nodes, fewest players first, then lowest CPU load."""
        connected = [n for n in self._nodes.values() if n.connected]
        return sorted(connected, key=lambda n: n.stats.load_key)

    def get_node(self, node_id: str) -> LavalinkNode | None:
        return self._nodes.get(node_id)

    def add_node(self, node: LavalinkNode) -> LavalinkNode:
        self._nodes[node.id] = node
        logger.info(LogTemplates.NODE_ADDED, node.id)
        return node

    def create_node(self, settings: NodeSettings) -> LavalinkNode:
        return self.add_node(LavalinkNode(settings))

    async def remove_node(self, node_id: str) -> bool:
        node = self._nodes.pop(node_id, None)
        if node is None:
            return False
        await node.close()
        logger.info(LogTemplates.NODE_REMOVED, node_id)
        return True

    async def refresh_stats(self) -> None:
        """Refresh the load figures of every node."""
        for node in self._nodes.values():
            await node.fetch_stats()

    async def close(self) -> None:
        for node in list(self._nodes.values()):
            await node.close()
        self._nodes.clear()
