"""
Application Interfaces (Ports)

Abstract interfaces that define contracts between the application
layer and infrastructure adapters.
"""

from lavalink_session.application.interfaces.gateway import ShardSender
from lavalink_session.application.interfaces.node_client import LavalinkNodeClient, NodePool
from lavalink_session.application.interfaces.search_source import SearchSource

__all__ = [
    "LavalinkNodeClient",
    "NodePool",
    "ShardSender",
    "SearchSource",
]
