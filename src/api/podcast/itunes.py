"""
iTunes directory client - async access to the public Search and Lookup APIs.
Returns raw result mappings; normalization happens in api.podcast.normalize.
"""

from __future__ import annotations

from collections.abc import Mapping, MutableMapping
from typing import Any

import aiohttp

from utils.get_logger import get_logger

logger = get_logger(__name__)


class ITunesAPIError(Exception):
    """Raised when the directory answers with something other than a result envelope."""


# ---------------------------
# Async API client
# ---------------------------


class ITunesClient:
    """
    Thin async client for the iTunes Search and Lookup APIs.

    Each call is a single attempt: no retries, no caching, no rate limiting.
    Results come back as raw mappings for the normalizers to reshape.
    """

    BASE_URL = "https://itunes.apple.com"

    def __init__(
        self,
        base_url: str | None = None,
        session: aiohttp.ClientSession | None = None,
        user_agent: str = "podcast-insights/1.0",
        timeout_seconds: float = 10,
    ):
        self.base_url = (base_url or self.BASE_URL).rstrip("/")
        self._external_session = session is not None
        self._session = session
        self._user_agent = user_agent
        self._timeout = aiohttp.ClientTimeout(total=timeout_seconds)

    def _headers(self) -> dict[str, str]:
        return {
            "User-Agent": self._user_agent,
            "Accept": "application/json",
        }

    async def __aenter__(self) -> ITunesClient:
        await self._ensure_session()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def _ensure_session(self) -> aiohttp.ClientSession:
        if self._session is None:
            self._session = aiohttp.ClientSession(timeout=self._timeout)
        return self._session

    async def close(self) -> None:
        if self._session and not self._external_session:
            await self._session.close()
            self._session = None

    async def _get(self, path: str, params: Mapping[str, Any]) -> list[Mapping[str, Any]]:
        """
        GET a directory endpoint and return its `results` list.

        Raises:
            aiohttp.ClientResponseError: On non-2xx responses
            aiohttp.ClientError: On connection failures
            ITunesAPIError: When the body is not a JSON result envelope
        """
        session = await self._ensure_session()

        url = f"{self.base_url}{path}"
        logger.debug(f"GET {url} params={dict(params)}")

        async with session.get(
            url, params=dict(params), headers=self._headers(), timeout=self._timeout
        ) as resp:
            resp.raise_for_status()
            # iTunes serves JSON as text/javascript
            try:
                data = await resp.json(content_type=None)
            except ValueError as e:
                raise ITunesAPIError(f"Invalid JSON from {url}: {e}") from e

        if not isinstance(data, Mapping):
            raise ITunesAPIError(f"Unexpected payload from {url}: {type(data).__name__}")

        results = data.get("results") or []
        if not isinstance(results, list):
            raise ITunesAPIError(f"Unexpected results field from {url}: {type(results).__name__}")
        return [item for item in results if isinstance(item, Mapping)]

    # ---------- Public methods ----------

    async def search(
        self,
        term: str,
        entity: str = "podcast",
        limit: int = 50,
        country: str | None = None,
        media: str = "podcast",
    ) -> list[Mapping[str, Any]]:
        """Search the directory by term."""
        params: MutableMapping[str, Any] = {
            "term": term,
            "media": media,
            "entity": entity,
            "limit": limit,
        }
        if country:
            params["country"] = country
        return await self._get("/search", params)

    async def lookup(
        self, collection_id: str | int, entity: str = "podcastEpisode", limit: int = 200
    ) -> list[Mapping[str, Any]]:
        """
        Look up a podcast by collection ID. The first result is the podcast
        itself, followed by up to `limit` of its episodes, newest first.
        """
        params = {"id": str(collection_id), "entity": entity, "limit": limit}
        return await self._get("/lookup", params)
