"""Tests for the Bandcamp search source."""

import httpx
import pytest

from lavalink_session.domain.music.normalizer import normalize_search
from lavalink_session.domain.music.value_objects import LoadType
from lavalink_session.infrastructure.search.bandcamp import BandcampSearchSource

AUTOCOMPLETE_RESPONSE = {
    "results": [
        {
            "type": "t",
            "id": 42,
            "name": "Night Drive",
            "band_name": "Synth Band",
            "url": "https://synthband.bandcamp.com/track/night-drive",
            "img": "https://f4.bcbits.com/img/a1.jpg",
        },
        {"type": "a", "id": 7, "name": "Album", "band_name": "Synth Band"},
        {"type": "t", "name": "No Id", "url": "https://x.bandcamp.com/track/no-id"},
    ]
}


def make_source(handler) -> BandcampSearchSource:
    return BandcampSearchSource(httpx.AsyncClient(transport=httpx.MockTransport(handler)))


class TestBandcampSearchSource:
    """Tests for BandcampSearchSource.search."""

    def test_prefix(self):
        assert make_source(lambda r: httpx.Response(200)).prefix == "bcsearch"

    @pytest.mark.asyncio
    async def test_search_keeps_tracks_only(self):
        requests = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(200, json=AUTOCOMPLETE_RESPONSE)

        raw = await make_source(handler).search("night drive")

        assert requests[0].url.host == "bandcamp.com"
        assert requests[0].url.params["q"] == "night drive"
        assert raw["loadType"] == "search"
        assert len(raw["data"]) == 2
        assert raw["data"][0]["info"]["identifier"] == "42"
        assert raw["data"][1]["info"]["identifier"] == "no-id"

    @pytest.mark.asyncio
    async def test_results_normalize_to_unresolved_tracks(self):
        raw = await make_source(
            lambda r: httpx.Response(200, json=AUTOCOMPLETE_RESPONSE)
        ).search("night drive")

        result = normalize_search(raw, requester="user-1")

        track = result.tracks[0]
        assert track.info.title == "Night Drive"
        assert track.info.author == "Synth Band"
        assert track.info.source_name == "bandcamp"
        assert track.requester == "user-1"
        assert not track.is_resolved

    @pytest.mark.asyncio
    async def test_no_results(self):
        raw = await make_source(lambda r: httpx.Response(200, json={"results": []})).search("x")
        assert raw["loadType"] == "empty"
        assert raw["data"] == []

    @pytest.mark.asyncio
    async def test_http_error_becomes_error_envelope(self):
        """Should report failures in the response rather than raise."""
        raw = await make_source(lambda r: httpx.Response(503)).search("x")

        result = normalize_search(raw)

        assert result.load_type == LoadType.ERROR
        assert result.exception["cause"] == "HTTPStatusError"
        assert result.tracks == []

    @pytest.mark.asyncio
    async def test_invalid_json_becomes_error_envelope(self):
        raw = await make_source(lambda r: httpx.Response(200, text="<html>")).search("x")
        assert raw["loadType"] == "error"
