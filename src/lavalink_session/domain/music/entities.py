"""Core domain entities for the music bounded context."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_serializer

from lavalink_session.domain.music.value_objects import LoadType
from lavalink_session.domain.shared.types import (
    DurationMs,
    NonNegativeInt,
    RegionCode,
    SessionKey,
    SnowflakeStr,
)

_JSON_SCALARS = (str, int, float, bool, type(None), dict, list)


class TrackInfo(BaseModel):
    """Node-reported metadata of a playable item."""

    model_config = ConfigDict(frozen=True)

    identifier: str | None = None
    title: str | None = None
    author: str | None = None
    duration: DurationMs = 0
    artwork_url: str | None = None
    uri: str | None = None
    source_name: str | None = None
    is_seekable: bool = False
    is_stream: bool = False
    isrc: str | None = None


class Track(BaseModel):
    """Immutable descriptor of a playable item.

    ``encoded`` is the node-specific payload and is never interpreted
    here. Tracks built by search plugins that bypass the node carry
    ``encoded=None`` until they are resolved.
    """

    model_config = ConfigDict(frozen=True)

    encoded: str | None = None
    info: TrackInfo = Field(default_factory=TrackInfo)
    plugin_info: dict[str, Any] = Field(default_factory=dict)
    user_data: dict[str, Any] = Field(default_factory=dict)
    requester: Any = None

    @field_serializer("requester", when_used="json")
    def _serialize_requester(self, requester: Any) -> Any:
        if isinstance(requester, _JSON_SCALARS):
            return requester
        return str(requester)

    @property
    def is_resolved(self) -> bool:
        return self.encoded is not None

    @property
    def duration(self) -> int:
        return self.info.duration

    @property
    def display_title(self) -> str:
        title = self.info.title or "Unknown title"
        if self.info.author:
            return f"{title} - {self.info.author}"
        return title


class PlaylistInfo(BaseModel):
    """Playlist metadata assembled from a ``playlist`` search response."""

    model_config = ConfigDict(frozen=True)

    name: str | None = None
    author: str | None = None
    thumbnail: str | None = None
    uri: str | None = None
    selected_track: Track | None = None
    duration: NonNegativeInt = 0


class SearchResult(BaseModel):
    """Uniform envelope over every search response shape."""

    model_config = ConfigDict(frozen=True)

    load_type: LoadType
    exception: Any = None
    plugin_info: dict[str, Any] = Field(default_factory=dict)
    playlist: PlaylistInfo | None = None
    tracks: list[Track] = Field(default_factory=list)

    @property
    def is_error(self) -> bool:
        return self.load_type == LoadType.ERROR

    @property
    def is_empty(self) -> bool:
        return not self.tracks


class PlayerOptions(BaseModel):
    """Identifiers and toggles of one session, immutable after construction."""

    model_config = ConfigDict(frozen=True)

    guild_id: SessionKey
    voice_channel_id: SnowflakeStr | None = None
    text_channel_id: SnowflakeStr | None = None
    node: str | None = None
    vc_region: RegionCode | None = None
    volume: float | None = None
    self_deaf: bool = True
    self_mute: bool = False
    apply_volume_as_filter: bool | None = None


class QueueSnapshot(BaseModel):
    """Serializable state of a queue handed to the queue store."""

    guild_id: SessionKey
    current: Track | None = None
    tracks: list[Track] = Field(default_factory=list)
    previous: list[Track] = Field(default_factory=list)
