# Copyright (c) 2026 Pointmatic
#
# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Error taxonomy for yt-search."""

from __future__ import annotations

from contextlib import contextmanager
from enum import Enum
from typing import Any, Iterator

import httpx


class ErrorCode(str, Enum):
    INVALID_QUERY = "INVALID_QUERY"
    INVALID_TYPE = "INVALID_TYPE"
    INVALID_SORT = "INVALID_SORT"
    INVALID_LIMIT = "INVALID_LIMIT"
    INVALID_PLAYLIST = "INVALID_PLAYLIST"
    INVALID_VIDEO = "INVALID_VIDEO"
    INVALID_URL = "INVALID_URL"
    PARSE_ERROR = "PARSE_ERROR"
    NO_RESULTS = "NO_RESULTS"
    NO_PLAYLIST_RESULTS = "NO_PLAYLIST_RESULTS"
    YOUTUBE_ERROR = "YOUTUBE_ERROR"
    RATE_LIMIT = "RATE_LIMIT"
    YOUTUBE_UNAVAILABLE = "YOUTUBE_UNAVAILABLE"
    NETWORK_UNAVAILABLE = "NETWORK_UNAVAILABLE"
    UNKNOWN = "UNKNOWN"


class YtSearchError(Exception):
    """Raised for every failure surfaced by yt-search.

    Args:
        code: Machine-readable error kind.
        message: Human-readable description.
        metadata: Call context (inputs, HTTP status, original error).
    """

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        metadata: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.code = ErrorCode(code)
        self.message = message
        self.metadata = metadata or {}

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"

    def __repr__(self) -> str:
        return f"YtSearchError({self.code.value!r}, {self.message!r})"


class PageAdvanceError(RuntimeError):
    """Raised when next_page() is called twice or on a superseded page."""


def classify_transport_error(exc: Exception, context: dict[str, Any]) -> YtSearchError:
    """Map an httpx failure to a YtSearchError.

    Connectivity problems become NETWORK_UNAVAILABLE, HTTP 429 becomes
    RATE_LIMIT, HTTP 5xx becomes YOUTUBE_UNAVAILABLE, everything else is
    UNKNOWN. The original exception is kept under ``original_error``.
    """
    if isinstance(exc, httpx.TransportError):
        return YtSearchError(
            ErrorCode.NETWORK_UNAVAILABLE,
            "Network unavailable",
            {**context, "original_error": exc},
        )

    if isinstance(exc, httpx.HTTPStatusError):
        status = exc.response.status_code
        if status == 429:
            return YtSearchError(
                ErrorCode.RATE_LIMIT,
                "YouTube rate limit exceeded",
                {**context, "status": status, "original_error": exc},
            )
        if status >= 500:
            return YtSearchError(
                ErrorCode.YOUTUBE_UNAVAILABLE,
                "YouTube service unavailable",
                {**context, "status": status, "original_error": exc},
            )
        return YtSearchError(
            ErrorCode.UNKNOWN,
            f"Unexpected HTTP status {status} from YouTube",
            {**context, "status": status, "original_error": exc},
        )

    return YtSearchError(
        ErrorCode.UNKNOWN,
        "Unknown error occurred during network request",
        {**context, "original_error": exc},
    )


@contextmanager
def unexpected_errors(operation: str, context: dict[str, Any]) -> Iterator[None]:
    """Re-raise anything that is not already a YtSearchError as UNKNOWN."""
    try:
        yield
    except YtSearchError:
        raise
    except Exception as exc:
        raise YtSearchError(
            ErrorCode.UNKNOWN,
            f"Unexpected failure during {operation}: {exc}",
            {**context, "original_error": exc},
        ) from exc
