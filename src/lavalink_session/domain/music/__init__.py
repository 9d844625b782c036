"""
Music Bounded Context

Domain logic for tracks, search results, queues and play payloads.
"""

from lavalink_session.domain.music.entities import (
    PlayerOptions,
    PlaylistInfo,
    QueueSnapshot,
    SearchResult,
    Track,
    TrackInfo,
)
from lavalink_session.domain.music.normalizer import build_track, normalize_search
from lavalink_session.domain.music.playback import PlayOptions
from lavalink_session.domain.music.queue import Queue
from lavalink_session.domain.music.repository import QueueSaver, QueueStore
from lavalink_session.domain.music.value_objects import (
    LoadType,
    PlaybackState,
    RepeatMode,
    VoiceState,
)

__all__ = [
    # Entities
    "Track",
    "TrackInfo",
    "PlaylistInfo",
    "SearchResult",
    "PlayerOptions",
    "QueueSnapshot",
    "Queue",
    # Value Objects
    "RepeatMode",
    "LoadType",
    "PlaybackState",
    "VoiceState",
    "PlayOptions",
    # Repository
    "QueueStore",
    "QueueSaver",
    # Normalization
    "build_track",
    "normalize_search",
]
