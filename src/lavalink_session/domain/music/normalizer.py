"""Normalization of raw node payloads into tracks and search results.

Everything in this module is total: malformed upstream payloads degrade
to ``None``/``0``/empty values and never raise. Validation of caller input
lives in :mod:`lavalink_session.domain.music.playback` instead.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable, Mapping, Sequence
from typing import Any

from lavalink_session.domain.music.entities import PlaylistInfo, SearchResult, Track, TrackInfo
from lavalink_session.domain.music.value_objects import LoadType
from lavalink_session.domain.shared.messages import LogTemplates

logger = logging.getLogger(__name__)

Accessor = Callable[[Any], Any]


def field_path(*keys: str) -> Accessor:
    """Accessor walking nested mappings, None as soon as a level is missing."""

    def access(obj: Any) -> Any:
        for key in keys:
            if not isinstance(obj, Mapping):
                return None
            obj = obj.get(key)
        return obj

    access.__name__ = ".".join(keys)
    return access


def first_present(obj: Any, chain: Sequence[Accessor]) -> Any:
    """Evaluate accessors in order and return the first non-empty value."""
    for accessor in chain:
        value = accessor(obj)
        if value is not None and value != "":
            return value
    return None


# Playlist fields are resolved against the response's ``data`` object.
PLAYLIST_NAME_CHAIN: tuple[Accessor, ...] = (
    field_path("info", "name"),
    field_path("pluginInfo", "name"),
)
PLAYLIST_AUTHOR_CHAIN: tuple[Accessor, ...] = (
    field_path("info", "author"),
    field_path("pluginInfo", "author"),
)
PLAYLIST_URI_CHAIN: tuple[Accessor, ...] = (
    field_path("info", "url"),
    field_path("info", "uri"),
    field_path("info", "link"),
    field_path("pluginInfo", "url"),
    field_path("pluginInfo", "uri"),
    field_path("pluginInfo", "link"),
)
PLAYLIST_THUMBNAIL_CHAIN: tuple[Accessor, ...] = (
    field_path("info", "artworkUrl"),
    field_path("pluginInfo", "artworkUrl"),
)
# Last thumbnail fallback, resolved against the raw selected track.
SELECTED_TRACK_ARTWORK_CHAIN: tuple[Accessor, ...] = (
    field_path("info", "artworkUrl"),
    field_path("info", "pluginInfo", "artworkUrl"),
    field_path("pluginInfo", "artworkUrl"),
)
# Nodes report the duration as ``length``; plugin-built tracks use ``duration``.
TRACK_DURATION_CHAIN: tuple[Accessor, ...] = (
    field_path("duration"),
    field_path("length"),
)

NO_SELECTED_TRACK = -1


def _as_str(value: Any) -> str | None:
    if isinstance(value, str) and value:
        return value
    return None


def _as_ms(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int | float):
        return 0
    if isinstance(value, float) and not math.isfinite(value):
        return 0
    return max(0, int(value))


def _as_bool(value: Any) -> bool:
    return value if isinstance(value, bool) else False


def _as_dict(value: Any) -> dict[str, Any]:
    return dict(value) if isinstance(value, Mapping) else {}


def _track_info(info: Any) -> TrackInfo:
    return TrackInfo(
        identifier=_as_str(field_path("identifier")(info)),
        title=_as_str(field_path("title")(info)),
        author=_as_str(field_path("author")(info)),
        duration=_as_ms(first_present(info, TRACK_DURATION_CHAIN)),
        artwork_url=_as_str(field_path("artworkUrl")(info)),
        uri=_as_str(field_path("uri")(info)),
        source_name=_as_str(field_path("sourceName")(info)),
        is_seekable=_as_bool(field_path("isSeekable")(info)),
        is_stream=_as_bool(field_path("isStream")(info)),
        isrc=_as_str(field_path("isrc")(info)),
    )


def build_track(raw: Any, requester: Any = None) -> Track:
    """Build a playable track from a raw node-reported track object."""
    info = field_path("info")(raw)
    plugin_info = field_path("pluginInfo")(raw)
    if plugin_info is None:
        plugin_info = field_path("pluginInfo")(info)

    return Track(
        encoded=_as_str(field_path("encoded")(raw)),
        info=_track_info(info),
        plugin_info=_as_dict(plugin_info),
        user_data=_as_dict(field_path("userData")(raw)),
        requester=requester,
    )


def build_unresolved_track(info: Mapping[str, Any], requester: Any = None) -> Track:
    """Build a track from plain metadata, without an encoded payload."""
    return Track(
        encoded=None,
        info=_track_info(info),
        plugin_info=_as_dict(field_path("pluginInfo")(info)),
        requester=requester,
    )


def _selected_index(data: Any, track_count: int) -> int | None:
    selected = field_path("info", "selectedTrack")(data)
    if isinstance(selected, bool) or not isinstance(selected, int | float):
        return None
    if isinstance(selected, float) and not selected.is_integer():
        return None
    if selected == NO_SELECTED_TRACK:
        return None
    index = int(selected)
    if 0 <= index < track_count:
        return index
    return None


def _raw_tracks(load_type: LoadType, data: Any) -> list[Any]:
    if load_type == LoadType.PLAYLIST:
        tracks = field_path("tracks")(data)
        return list(tracks) if isinstance(tracks, list) else []
    if load_type == LoadType.TRACK:
        return [data] if isinstance(data, Mapping) else []
    if load_type == LoadType.SEARCH:
        if isinstance(data, list):
            return list(data)
        return [data] if isinstance(data, Mapping) else []
    return []


def _playlist(data: Any, raw_tracks: list[Any], requester: Any) -> PlaylistInfo:
    index = _selected_index(data, len(raw_tracks))
    selected_raw = raw_tracks[index] if index is not None else None

    thumbnail = first_present(data, PLAYLIST_THUMBNAIL_CHAIN)
    if thumbnail is None and selected_raw is not None:
        thumbnail = first_present(selected_raw, SELECTED_TRACK_ARTWORK_CHAIN)

    return PlaylistInfo(
        name=_as_str(first_present(data, PLAYLIST_NAME_CHAIN)),
        author=_as_str(first_present(data, PLAYLIST_AUTHOR_CHAIN)),
        thumbnail=_as_str(thumbnail),
        uri=_as_str(first_present(data, PLAYLIST_URI_CHAIN)),
        selected_track=build_track(selected_raw, requester) if selected_raw is not None else None,
        duration=sum(
            _as_ms(first_present(field_path("info")(t), TRACK_DURATION_CHAIN))
            for t in raw_tracks
        ),
    )


def normalize_search(raw: Any, requester: Any = None) -> SearchResult:
    """Normalize a raw loadtracks/search-plugin response into a SearchResult."""
    if not isinstance(raw, Mapping):
        logger.debug(LogTemplates.SEARCH_MALFORMED, type(raw).__name__)
        return SearchResult(load_type=LoadType.EMPTY)

    load_type = LoadType.parse(raw.get("loadType"))
    data = raw.get("data")
    raw_tracks = _raw_tracks(load_type, data)

    return SearchResult(
        load_type=load_type,
        exception=data if load_type == LoadType.ERROR else None,
        plugin_info=_as_dict(raw.get("pluginInfo")),
        playlist=_playlist(data, raw_tracks, requester) if load_type == LoadType.PLAYLIST else None,
        tracks=[build_track(t, requester) for t in raw_tracks],
    )
