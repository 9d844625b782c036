"""
Shared Domain Kernel

Contains exceptions and events shared across the session layers.
"""

from lavalink_session.domain.shared.events import EventBus, PlayerCreated, PlayerDestroyed
from lavalink_session.domain.shared.exceptions import (
    ConstructionError,
    DomainError,
    PreconditionError,
    StateConflictError,
    TransportError,
    ValidationError,
)

__all__ = [
    "DomainError",
    "ConstructionError",
    "ValidationError",
    "StateConflictError",
    "PreconditionError",
    "TransportError",
    "EventBus",
    "PlayerCreated",
    "PlayerDestroyed",
]
