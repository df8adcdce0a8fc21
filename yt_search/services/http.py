"""Async HTTP transport for YouTube pages and the youtubei API."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from yt_search.core.errors import ErrorCode, YtSearchError, classify_transport_error
from yt_search.core.options import ClientSettings

logger = logging.getLogger("yt_search")


class HttpClient:
    """GET page text and POST JSON, raising classified YtSearchErrors.

    A fresh ``httpx.AsyncClient`` is opened per request so that a client
    can be shared by independent pagination sessions without lifecycle
    coupling. Pass ``transport`` (e.g. ``httpx.MockTransport``) to
    substitute the network in tests.

    Args:
        settings: Locale, user agent, and timeout. Defaults are loaded
            from the environment / yt_search.yaml when omitted.
        transport: Optional httpx transport override.
    """

    def __init__(
        self,
        settings: ClientSettings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.settings = settings if settings is not None else ClientSettings()
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            transport=self._transport,
            timeout=self.settings.timeout,
            follow_redirects=True,
            headers={"User-Agent": self.settings.user_agent},
        )

    async def get_text(
        self,
        url: str,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> str:
        """Fetch a page and return its body as text."""
        logger.debug("GET %s params=%s", url, params)
        try:
            async with self._client() as client:
                response = await client.get(url, params=params, headers=headers)
                response.raise_for_status()
                return response.text
        except httpx.HTTPError as exc:
            raise classify_transport_error(exc, {"url": url, "params": params}) from exc

    async def post_json(
        self,
        url: str,
        body: dict[str, Any],
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        """POST a JSON body and return the decoded JSON response."""
        logger.debug("POST %s params=%s", url, params)
        try:
            async with self._client() as client:
                response = await client.post(url, json=body, params=params, headers=headers)
                response.raise_for_status()
        except httpx.HTTPError as exc:
            raise classify_transport_error(exc, {"url": url, "body": body}) from exc

        try:
            return response.json()
        except ValueError as exc:
            raise YtSearchError(
                ErrorCode.PARSE_ERROR,
                "YouTube API response was not valid JSON.",
                {"url": url, "original_error": exc},
            ) from exc
