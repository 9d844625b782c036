"""Playback rules: volume derivation, play option validation and payload building.

These functions are pure; dispatching the resulting payloads to a node is
the player's job. Every validation failure raises before anything is sent.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any

from lavalink_session.domain.music.entities import Track
from lavalink_session.domain.shared.constants import PayloadKeys, PlayerConstants
from lavalink_session.domain.shared.exceptions import InvalidPlayOptionError
from lavalink_session.domain.shared.messages import ErrorMessages


@dataclass
class PlayOptions:
    """Caller options of ``Player.play``; unset fields keep the player defaults.

    ``track`` and ``no_replace`` steer the player and are never part of the
    update payload body.
    """

    track: Track | None = None
    encoded_track: str | None = None
    identifier: str | None = None
    position: Any = None
    end_time: Any = None
    paused: bool | None = None
    volume: Any = None
    filters: dict[str, Any] | None = None
    voice: dict[str, Any] | None = None
    no_replace: bool = False
    extra: dict[str, Any] = field(default_factory=dict)

    def overrides(self) -> dict[str, Any]:
        """Wire-named payload fields the caller supplied explicitly."""
        supplied = {
            PayloadKeys.ENCODED_TRACK: self.encoded_track,
            PayloadKeys.IDENTIFIER: self.identifier,
            PayloadKeys.POSITION: self.position,
            PayloadKeys.END_TIME: self.end_time,
            PayloadKeys.PAUSED: self.paused,
            PayloadKeys.VOLUME: self.volume,
            PayloadKeys.FILTERS: self.filters,
            PayloadKeys.VOICE: self.voice,
        }
        overrides = {key: value for key, value in supplied.items() if value is not None}
        overrides.update(self.extra)
        overrides.pop(PayloadKeys.TRACK, None)
        overrides.pop(PayloadKeys.NO_REPLACE, None)
        return overrides


def coerce_number(value: Any) -> float | None:
    """Numeric value of ``value``, or None when it is not a (non-NaN) number."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int | float):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    return None if math.isnan(number) else number


def clamp_volume(volume: float) -> float:
    return max(min(volume, PlayerConstants.MAX_VOLUME), PlayerConstants.MIN_VOLUME)


def clamp_position(position: float, duration: int) -> float:
    return max(min(position, duration), 0)


def floor_hundredths(value: float) -> float:
    return math.floor(value * 100) / 100


def decrement_volume(
    volume: float, decrementer: float | None, *, ignore_decrementer: bool = False
) -> float:
    if decrementer and not ignore_decrementer:
        return volume * decrementer
    return volume


def derive_lavalink_volume(
    volume: float, decrementer: float | None, *, ignore_decrementer: bool = False
) -> float:
    """Wire-level volume for a user-facing volume, floored to 0.01."""
    return floor_hundredths(
        decrement_volume(volume, decrementer, ignore_decrementer=ignore_decrementer)
    )


def volume_payload(lavalink_volume: float, *, as_filter: bool) -> dict[str, Any]:
    """Update payload for a volume change, either as a field or as a filter."""
    if as_filter:
        return {PayloadKeys.FILTERS: {PayloadKeys.VOLUME: lavalink_volume / 100}}
    return {PayloadKeys.VOLUME: lavalink_volume}


def latency_seconds(elapsed_ms: float) -> float:
    """Round-trip latency in seconds with two decimals, rounding halves up."""
    return math.floor(elapsed_ms / 10 + 0.5) / 100


def _is_invalid_number(value: Any) -> bool:
    return value is not None and coerce_number(value) is None


def validate_play_payload(payload: dict[str, Any], track: Track) -> None:
    """Raise InvalidPlayOptionError for out-of-range play payload fields.

    Range checks against the track duration are skipped for live streams
    and unresolved tracks, whose duration is not a meaningful bound.
    """
    duration = track.info.duration
    bounded = track.is_resolved and not track.info.is_stream

    position = payload.get(PayloadKeys.POSITION)
    if _is_invalid_number(position):
        raise InvalidPlayOptionError(ErrorMessages.PLAY_POSITION_OUT_OF_RANGE, field="position")
    if position is not None:
        position = coerce_number(position)
        if position < 0 or (bounded and position >= duration):
            raise InvalidPlayOptionError(
                ErrorMessages.PLAY_POSITION_OUT_OF_RANGE, field="position"
            )

    volume = payload.get(PayloadKeys.VOLUME)
    if _is_invalid_number(volume) or (volume is not None and coerce_number(volume) < 0):
        raise InvalidPlayOptionError(ErrorMessages.PLAY_VOLUME_NEGATIVE, field="volume")

    end_time = payload.get(PayloadKeys.END_TIME)
    if _is_invalid_number(end_time):
        raise InvalidPlayOptionError(ErrorMessages.PLAY_END_TIME_OUT_OF_RANGE, field="end_time")
    if end_time is not None:
        end_time = coerce_number(end_time)
        if end_time < 0 or (bounded and end_time >= duration):
            raise InvalidPlayOptionError(
                ErrorMessages.PLAY_END_TIME_OUT_OF_RANGE, field="end_time"
            )

    if position is not None and end_time is not None and end_time < position:
        raise InvalidPlayOptionError(
            ErrorMessages.PLAY_END_TIME_BEFORE_POSITION, field="end_time"
        )


def build_play_payload(
    track: Track, lavalink_volume: float, options: PlayOptions, *, as_filter: bool = False
) -> dict[str, Any]:
    """Merge player defaults with the caller's overrides and validate the result.

    With ``as_filter`` the session carries its volume as a filter, so the
    payload never holds a top-level ``volume``: the default is left out
    and a caller override is moved into ``filters.volume``.
    """
    payload: dict[str, Any] = {PayloadKeys.ENCODED_TRACK: track.encoded}
    if not as_filter:
        payload[PayloadKeys.VOLUME] = lavalink_volume
    payload[PayloadKeys.POSITION] = 0

    overrides = options.overrides()
    if PayloadKeys.IDENTIFIER in overrides and PayloadKeys.ENCODED_TRACK not in overrides:
        # a node rejects updates carrying both an encoded track and an identifier
        del payload[PayloadKeys.ENCODED_TRACK]
    payload.update(overrides)

    validate_play_payload(payload, track)

    if as_filter and PayloadKeys.VOLUME in payload:
        volume = coerce_number(payload.pop(PayloadKeys.VOLUME))
        filters = dict(payload.get(PayloadKeys.FILTERS) or {})
        filters.setdefault(PayloadKeys.VOLUME, volume / 100)
        payload[PayloadKeys.FILTERS] = filters
    return payload
