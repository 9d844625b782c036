"""Tests for play payload building, validation and volume derivation."""

import math

import pytest

from lavalink_session.domain.music.entities import Track, TrackInfo
from lavalink_session.domain.music.playback import (
    PlayOptions,
    build_play_payload,
    clamp_position,
    clamp_volume,
    coerce_number,
    derive_lavalink_volume,
    latency_seconds,
    volume_payload,
)
from lavalink_session.domain.shared.exceptions import InvalidPlayOptionError, ValidationError


@pytest.fixture
def track():
    return Track(encoded="QAAA", info=TrackInfo(duration=180000, is_seekable=True))


class TestCoerceNumber:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [(5, 5.0), (2.5, 2.5), ("42", 42.0), (" 7 ", 7.0)],
    )
    def test_numbers(self, value, expected):
        assert coerce_number(value) == expected

    @pytest.mark.parametrize("value", [None, "abc", math.nan, True, [], {}])
    def test_not_numbers(self, value):
        assert coerce_number(value) is None


class TestVolumeDerivation:
    @pytest.mark.parametrize(("volume", "expected"), [(-10, 0), (0, 0), (250, 250), (900, 500)])
    def test_clamp_volume(self, volume, expected):
        assert clamp_volume(volume) == expected

    def test_decrementer_applied_and_floored(self):
        assert derive_lavalink_volume(75, 0.5) == 37.5
        assert derive_lavalink_volume(33.337, None) == 33.33

    def test_decrementer_ignored(self):
        assert derive_lavalink_volume(75, 0.5, ignore_decrementer=True) == 75

    def test_volume_payload_shapes(self):
        """Should carry volume either as a field or as a filter, never both."""
        assert volume_payload(80, as_filter=False) == {"volume": 80}
        assert volume_payload(80, as_filter=True) == {"filters": {"volume": 0.8}}

    def test_clamp_position(self):
        assert clamp_position(-50, 180000) == 0
        assert clamp_position(200000, 180000) == 180000


class TestLatency:
    @pytest.mark.parametrize(("elapsed_ms", "expected"), [(0, 0.0), (4, 0.0), (5, 0.01), (1234, 1.23)])
    def test_rounds_to_hundredths_of_a_second(self, elapsed_ms, expected):
        assert latency_seconds(elapsed_ms) == expected


class TestBuildPlayPayload:
    """Unit tests for build_play_payload."""

    def test_defaults(self, track):
        payload = build_play_payload(track, 100, PlayOptions())
        assert payload == {"encodedTrack": "QAAA", "volume": 100, "position": 0}

    def test_overrides_replace_defaults(self, track):
        payload = build_play_payload(
            track, 100, PlayOptions(position=1000, end_time=5000, paused=True, volume=50)
        )
        assert payload == {
            "encodedTrack": "QAAA",
            "volume": 50,
            "position": 1000,
            "endTime": 5000,
            "paused": True,
        }

    def test_track_and_no_replace_never_forwarded(self, track):
        options = PlayOptions(track=track, no_replace=True, extra={"track": 1, "noReplace": 1})
        payload = build_play_payload(track, 100, options)
        assert "track" not in payload
        assert "noReplace" not in payload

    def test_identifier_drops_default_encoded_track(self, track):
        payload = build_play_payload(track, 100, PlayOptions(identifier="dQw4w9WgXcQ"))
        assert payload["identifier"] == "dQw4w9WgXcQ"
        assert "encodedTrack" not in payload

    def test_position_zero_is_valid(self, track):
        assert build_play_payload(track, 100, PlayOptions(position=0))["position"] == 0

    @pytest.mark.parametrize("position", [180000, 200000, -1, math.nan, "soon"])
    def test_invalid_position(self, track, position):
        with pytest.raises(InvalidPlayOptionError) as exc_info:
            build_play_payload(track, 100, PlayOptions(position=position))
        assert exc_info.value.field == "position"

    @pytest.mark.parametrize("volume", [-1, math.nan, "loud"])
    def test_invalid_volume(self, track, volume):
        with pytest.raises(InvalidPlayOptionError, match="volume"):
            build_play_payload(track, 100, PlayOptions(volume=volume))

    @pytest.mark.parametrize("end_time", [180000, -5, math.nan])
    def test_invalid_end_time(self, track, end_time):
        with pytest.raises(InvalidPlayOptionError, match="end_time"):
            build_play_payload(track, 100, PlayOptions(end_time=end_time))

    def test_end_time_before_position(self, track):
        with pytest.raises(ValidationError, match="bigger than"):
            build_play_payload(track, 100, PlayOptions(position=5000, end_time=1000))

    def test_stream_positions_are_not_bounded_by_duration(self):
        stream = Track(encoded="LIVE", info=TrackInfo(duration=0, is_stream=True))
        assert build_play_payload(stream, 100, PlayOptions(position=5000))["position"] == 5000

    def test_unresolved_positions_are_not_bounded_by_duration(self):
        unresolved = Track(info=TrackInfo(title="Song"))
        payload = build_play_payload(unresolved, 100, PlayOptions(identifier="https://x.test/a"))
        assert payload == {"identifier": "https://x.test/a", "volume": 100, "position": 0}


class TestFilterModePayload:
    """Unit tests for build_play_payload with the volume carried as a filter."""

    def test_default_volume_left_out(self, track):
        payload = build_play_payload(track, 150, PlayOptions(), as_filter=True)
        assert payload == {"encodedTrack": "QAAA", "position": 0}

    def test_volume_override_moves_into_filters(self, track):
        payload = build_play_payload(track, 100, PlayOptions(volume=80), as_filter=True)
        assert "volume" not in payload
        assert payload["filters"] == {"volume": 0.8}

    def test_caller_filter_volume_wins(self, track):
        options = PlayOptions(volume=80, filters={"volume": 0.5})
        payload = build_play_payload(track, 100, options, as_filter=True)
        assert payload["filters"] == {"volume": 0.5}

    def test_negative_override_still_rejected(self, track):
        with pytest.raises(InvalidPlayOptionError):
            build_play_payload(track, 100, PlayOptions(volume=-1), as_filter=True)
