"""Immutable value objects for the music bounded context."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, StrEnum


class RepeatMode(StrEnum):
    """Repeat mode settings for queue playback."""

    OFF = "off"
    TRACK = "track"  # Repeat current track
    QUEUE = "queue"  # Re-append finished tracks to the queue

    @classmethod
    def parse(cls, value: object) -> RepeatMode | None:
        """Return the matching mode, or None for anything outside the closed set."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value)
            except ValueError:
                return None
        return None


class LoadType(StrEnum):
    """Closed classification of a normalized search response."""

    TRACK = "track"
    PLAYLIST = "playlist"
    SEARCH = "search"
    EMPTY = "empty"
    ERROR = "error"

    @classmethod
    def parse(cls, value: object) -> LoadType:
        """Map a raw ``loadType`` onto the closed set; unknown shapes are ``EMPTY``."""
        if isinstance(value, str):
            try:
                return cls(value)
            except ValueError:
                return cls.EMPTY
        return cls.EMPTY


class PlaybackState(Enum):
    """Observable player state.

    State transitions:
    - IDLE -> PLAYING (play)
    - PLAYING -> PAUSED (pause)
    - PAUSED -> PLAYING (resume)
    - PLAYING / PAUSED -> IDLE (queue exhausted)
    - Any -> DESTROYED (destroy, terminal)
    """

    IDLE = "idle"
    PLAYING = "playing"
    PAUSED = "paused"
    DESTROYED = "destroyed"


@dataclass(frozen=True)
class VoiceState:
    """Voice endpoint/session/token triple mirrored from the real-time gateway."""

    endpoint: str | None = None
    session_id: str | None = None
    token: str | None = None
