"""Locate and decode JSON blobs embedded in YouTube HTML."""

from __future__ import annotations

import json
import re
from typing import Any

from yt_search.core.constants import CONTINUATION_RENDERER
from yt_search.core.errors import ErrorCode, YtSearchError
from yt_search.utils.tree import dig, joined_runs

# Only the assignment prefix is matched; the object body is found by
# brace-counting in _balanced_object().
# Handles: var ytInitialData = {...};
#          window["ytInitialData"] = {...};
#          ytInitialData = {...};
INITIAL_DATA_RE = re.compile(r'(?:var\s+|window\["|)ytInitialData(?:"\])?\s*=\s*')
INITIAL_PLAYER_RE = re.compile(r'(?:var\s+|window\["|)ytInitialPlayerResponse(?:"\])?\s*=\s*')

_API_KEY_MARKERS = ('"INNERTUBE_API_KEY":"', '"innertubeApiKey":"')
_CLIENT_VERSION_MARKERS = ('"INNERTUBE_CLIENT_VERSION":"', '"clientVersion":"')

_SCAN_LIMIT = 10_000_000


def _balanced_object(text: str, start: int) -> str | None:
    """Return the ``{...}`` span starting at ``start``, honoring JSON strings."""
    if start >= len(text) or text[start] != "{":
        return None

    depth = 0
    in_string = False
    escape = False
    limit = min(len(text), start + _SCAN_LIMIT)

    for i in range(start, limit):
        ch = text[i]

        if escape:
            escape = False
            continue

        if ch == "\\":
            if in_string:
                escape = True
            continue

        if ch == '"':
            in_string = not in_string
            continue

        if in_string:
            continue

        if ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return text[start : i + 1]

    return None


def extract_json(text: str, marker: re.Pattern[str], context: dict[str, Any]) -> dict[str, Any]:
    """Decode the JSON object assigned right after ``marker`` in ``text``.

    Raises:
        YtSearchError: PARSE_ERROR when the marker is absent or the object
            is unbalanced or not valid JSON.
    """
    match = marker.search(text or "")
    if match is None:
        raise YtSearchError(
            ErrorCode.PARSE_ERROR,
            f"Failed to locate {marker.pattern!r} in YouTube response.",
            context,
        )

    span = _balanced_object(text, match.end())
    if span is None:
        raise YtSearchError(
            ErrorCode.PARSE_ERROR,
            "Embedded YouTube data is truncated or malformed.",
            context,
        )

    try:
        data = json.loads(span)
    except json.JSONDecodeError as exc:
        raise YtSearchError(
            ErrorCode.PARSE_ERROR,
            "Embedded YouTube data is not valid JSON.",
            {**context, "original_error": exc},
        ) from exc

    if not isinstance(data, dict):
        raise YtSearchError(ErrorCode.PARSE_ERROR, "Embedded YouTube data is not an object.", context)
    return data


def _value_after(text: str, markers: tuple[str, ...]) -> str | None:
    for marker in markers:
        _, found, rest = text.partition(marker)
        if found:
            value = rest.split('"', 1)[0]
            if value:
                return value
    return None


def scrape_session_tokens(text: str, default_client_version: str) -> tuple[str, str]:
    """Pull the innertube API key and client version out of page text."""
    api_key = _value_after(text, _API_KEY_MARKERS) or ""
    client_version = _value_after(text, _CLIENT_VERSION_MARKERS) or default_client_version
    return api_key, client_version


def continuation_token(items: list[Any]) -> str | None:
    """Find the continuation token carried by a continuationItemRenderer."""
    for item in items:
        renderer = dig(item, CONTINUATION_RENDERER)
        if not renderer:
            continue
        token = dig(renderer, "continuationEndpoint", "continuationCommand", "token")
        if token:
            return token
        commands = dig(renderer, "continuationEndpoint", "commandExecutorCommand", "commands", default=[])
        for command in commands:
            token = dig(command, "continuationCommand", "token")
            if token:
                return token
    return None


def parse_alerts(alerts: list[Any]) -> list[tuple[str, str]]:
    """Reduce alert renderers to ``(type, message)`` pairs.

    ``alertRenderer`` defaults to ERROR and ``alertWithButtonRenderer`` to
    INFO when the type is missing.
    """
    parsed: list[tuple[str, str]] = []
    for alert in alerts or []:
        if dig(alert, "alertRenderer"):
            renderer = alert["alertRenderer"]
            runs = dig(renderer, "text", "runs", default=[])
            message = " ".join(str(r.get("text", "")) for r in runs if isinstance(r, dict))
            parsed.append((renderer.get("type") or "ERROR", message or "Unknown playlist error."))
        elif dig(alert, "alertWithButtonRenderer"):
            renderer = alert["alertWithButtonRenderer"]
            message = joined_runs(renderer, "text")
            parsed.append((renderer.get("type") or "INFO", message or "Unknown playlist info."))
        else:
            parsed.append(("UNKNOWN", "Unrecognized alert format."))
    return parsed
