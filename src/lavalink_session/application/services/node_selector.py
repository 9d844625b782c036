"""Region-aware selection of the node that owns a new session."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from ...domain.shared.exceptions import NoNodeAvailableError
from ...domain.shared.messages import ErrorMessages, LogTemplates
from ..interfaces.node_client import LavalinkNodeClient, NodePool

logger = logging.getLogger(__name__)


def select_node(
    nodes: Sequence[LavalinkNodeClient], region_hint: str | None = None
) -> LavalinkNodeClient:
    """Pick the least used node, preferring nodes that serve ``region_hint``.

    ``nodes`` must already be ordered by ascending load. When no node
    advertises the region, the globally least used node is returned.

    Raises:
        NoNodeAvailableError: If ``nodes`` is empty.
    """
    if not nodes:
        raise NoNodeAvailableError(ErrorMessages.NO_NODE_AVAILABLE)

    if region_hint:
        in_region = [n for n in nodes if region_hint in (n.options.regions or ())]
        if in_region:
            logger.debug(LogTemplates.NODE_SELECTED, in_region[0].id, region_hint)
            return in_region[0]
        logger.debug(LogTemplates.NODE_REGION_FALLBACK, region_hint, nodes[0].id)

    return nodes[0]


def select_node_from_pool(
    pool: NodePool, region_hint: str | None = None, pinned: str | None = None
) -> LavalinkNodeClient:
    """Resolve a pinned node id from the pool, else fall back to ``select_node``."""
    if pinned:
        node = pool.get_node(pinned)
        if node is not None:
            logger.debug(LogTemplates.NODE_PINNED, node.id)
            return node
    return select_node(pool.least_used_nodes, region_hint)
