# ruff: noqa: N999
"""
Domain Layer

Contains pure session logic organized by bounded contexts:
- shared/: Cross-cutting constants, types, events and exceptions
- music/: Track, queue, search normalization and playback payload rules
"""

from lavalink_session.domain.shared.exceptions import DomainError

__all__ = [
    "DomainError",
]
