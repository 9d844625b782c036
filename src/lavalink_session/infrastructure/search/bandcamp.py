"""Bandcamp search source querying the public autocomplete API directly."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from lavalink_session.application.interfaces.search_source import SearchSource
from lavalink_session.domain.shared.constants import HTTPHeaders, LoadTypes, SearchPlatforms
from lavalink_session.domain.shared.messages import LogTemplates

logger = logging.getLogger(__name__)

BANDCAMP_AUTOCOMPLETE_URL = "https://bandcamp.com/api/nusearch/2/autocomplete"
BANDCAMP_USER_AGENT = "android-async-http/1.4.1 (http://loopj.com/android-async-http)"
BANDCAMP_TIMEOUT: float = 10.0

# autocomplete result type of a single track
_TRACK_RESULT_TYPE = "t"


def _track_from_result(item: dict[str, Any]) -> dict[str, Any]:
    url = item.get("url") or item.get("uri")
    identifier = str(item["id"]) if item.get("id") else None
    if identifier is None and isinstance(url, str):
        identifier = url.rstrip("/").rsplit("/", 1)[-1]

    return {
        "encoded": None,
        "info": {
            "identifier": identifier,
            "title": item.get("name"),
            "author": item.get("band_name"),
            "uri": url,
            "artworkUrl": item.get("img"),
            "sourceName": "bandcamp",
            "isSeekable": True,
            "isStream": False,
        },
    }


class BandcampSearchSource(SearchSource):
    """Builds unresolved tracks from Bandcamp's autocomplete results.

    Failures are reported in the response rather than raised.
    """

    def __init__(self, client: httpx.AsyncClient | None = None) -> None:
        self._client = client or httpx.AsyncClient(timeout=BANDCAMP_TIMEOUT)
        self._owns_client = client is None

    @property
    def prefix(self) -> str:
        return SearchPlatforms.BANDCAMP

    async def search(self, query: str) -> dict[str, Any]:
        try:
            response = await self._client.get(
                BANDCAMP_AUTOCOMPLETE_URL,
                params={"q": query},
                headers={
                    HTTPHeaders.USER_AGENT: BANDCAMP_USER_AGENT,
                    HTTPHeaders.COOKIE: "$Version=1",
                },
            )
            response.raise_for_status()
            payload = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(LogTemplates.SEARCH_SOURCE_FAILED, self.prefix, query, exc_info=True)
            return {
                "loadType": LoadTypes.ERROR,
                "data": {"message": str(e), "severity": "common", "cause": type(e).__name__},
                "pluginInfo": {},
            }

        results = payload.get("results") if isinstance(payload, dict) else None
        tracks = [
            _track_from_result(item)
            for item in results or []
            if isinstance(item, dict) and item.get("type") == _TRACK_RESULT_TYPE
        ]
        return {
            "loadType": LoadTypes.SEARCH if tracks else LoadTypes.EMPTY,
            "data": tracks,
            "pluginInfo": {},
        }

    async def close(self) -> None:
        if self._owns_client:
            await self._client.aclose()
