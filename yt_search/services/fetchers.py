"""Raw fetchers: one network call per YouTube surface, parsed to a sub-tree."""

from __future__ import annotations

import logging
from typing import Any

from yt_search.core.constants import (
    BROWSE_API_URL,
    CONTENT_RENDERERS,
    ITEM_SECTION_RENDERER,
    PLAYABILITY_OK,
    PLAYLIST_URL,
    PLAYLIST_VIDEO_RENDERER,
    SEARCH_API_URL,
    SEARCH_URL,
    SORT_FILTERS,
    TYPE_FILTERS,
    WATCH_URL,
)
from yt_search.core.errors import ErrorCode, YtSearchError
from yt_search.core.logging import log_event
from yt_search.core.models import (
    ContinuationCursor,
    RawContinuationChunk,
    RawPlaylistChunk,
    RawSearchChunk,
    RawVideoDetails,
)
from yt_search.core.options import SearchOptions
from yt_search.services.extract import (
    INITIAL_DATA_RE,
    INITIAL_PLAYER_RE,
    continuation_token,
    extract_json,
    parse_alerts,
    scrape_session_tokens,
)
from yt_search.services.http import HttpClient
from yt_search.utils.formatting import parse_count
from yt_search.utils.tree import dig

logger = logging.getLogger("yt_search")


def search_filter(options: SearchOptions) -> str:
    """Pick the "sp" filter token for a content type and sort order."""
    if options.sort_order == "relevance":
        return TYPE_FILTERS[options.content_type]
    return SORT_FILTERS[options.content_type][options.sort_order]


def _section_matches(section: dict[str, Any], renderer_keys: tuple[str, ...]) -> bool:
    contents = dig(section, ITEM_SECTION_RENDERER, "contents", default=[])
    return any(isinstance(item, dict) and key in item for item in contents for key in renderer_keys)


async def fetch_search(http: HttpClient, query: str, options: SearchOptions) -> RawSearchChunk:
    """Fetch the first chunk of search results for ``query``.

    Raises:
        YtSearchError: PARSE_ERROR if the page has no embedded data,
            NO_RESULTS if no section holds the requested kind of item.
    """
    params = {"app": "desktop", "search_query": query, "hl": http.settings.hl, "gl": http.settings.gl}
    sp = search_filter(options)
    if sp:
        params["sp"] = sp

    html = await http.get_text(SEARCH_URL, params=params)
    context = {"query": query, "options": options.model_dump()}
    initial_data = extract_json(html, INITIAL_DATA_RE, context)

    sections = dig(
        initial_data,
        "contents", "twoColumnSearchResultsRenderer", "primaryContents", "sectionListRenderer", "contents",
        default=[],
    )
    renderer_keys = CONTENT_RENDERERS[options.content_type]
    section = next((s for s in sections if _section_matches(s, renderer_keys)), None)
    if section is None:
        raise YtSearchError(ErrorCode.NO_RESULTS, "No results were found.", context)

    api_key, client_version = scrape_session_tokens(html, http.settings.default_client_version)
    cursor = ContinuationCursor(
        token=continuation_token(sections),
        api_key=api_key,
        client_version=client_version,
    )
    items = dig(section, ITEM_SECTION_RENDERER, "contents", default=[])
    estimated = parse_count(initial_data.get("estimatedResults"))

    log_event(
        logging.DEBUG,
        f"Fetched {len(items)} search items",
        target=query,
        event="chunk_fetched",
        chunk=0,
        details=f"estimated_results={estimated} has_token={not cursor.exhausted}",
    )
    return RawSearchChunk(items=items, cursor=cursor, estimated_results=estimated)


async def fetch_playlist(http: HttpClient, playlist_id: str) -> RawPlaylistChunk:
    """Fetch a playlist page: header block plus the first chunk of videos.

    Raises:
        YtSearchError: YOUTUBE_ERROR on an ERROR alert, PARSE_ERROR if the
            page cannot be parsed, NO_PLAYLIST_RESULTS if it lists no videos.
    """
    params = {"app": "desktop", "list": playlist_id, "hl": http.settings.hl, "gl": http.settings.gl}
    html = await http.get_text(PLAYLIST_URL, params=params)
    context = {"playlist_id": playlist_id}
    initial_data = extract_json(html, INITIAL_DATA_RE, context)

    alerts = parse_alerts(initial_data.get("alerts") or [])
    for alert_type, message in alerts:
        if alert_type == "ERROR":
            raise YtSearchError(ErrorCode.YOUTUBE_ERROR, message, {**context, "alerts": alerts})
    for alert_type, message in alerts:
        log_event(
            logging.WARNING,
            f"Playlist {playlist_id}: {message}",
            target=playlist_id,
            event="playlist_alert",
            details=alert_type,
        )

    tabs = dig(initial_data, "contents", "twoColumnBrowseResultsRenderer", "tabs")
    if not isinstance(tabs, list):
        raise YtSearchError(ErrorCode.PARSE_ERROR, "Playlist page has an unexpected layout.", context)

    sections = dig(tabs, 0, "tabRenderer", "content", "sectionListRenderer", "contents", default=[])
    contents: list[dict[str, Any]] = []
    for section in sections:
        for content in dig(section, ITEM_SECTION_RENDERER, "contents", default=[]):
            listing = dig(content, "playlistVideoListRenderer", "contents")
            if listing:
                contents = listing
                break
        if contents:
            break

    videos = [item for item in contents if isinstance(item, dict) and PLAYLIST_VIDEO_RENDERER in item]
    if not videos:
        raise YtSearchError(ErrorCode.NO_PLAYLIST_RESULTS, "No videos found in playlist.", context)

    api_key, client_version = scrape_session_tokens(html, http.settings.default_client_version)
    cursor = ContinuationCursor(
        token=continuation_token(contents),
        api_key=api_key,
        client_version=client_version,
    )
    header = dig(initial_data, "header", "pageHeaderRenderer", default={})

    log_event(
        logging.DEBUG,
        f"Fetched {len(videos)} playlist videos",
        target=playlist_id,
        event="chunk_fetched",
        chunk=0,
        details=f"has_token={not cursor.exhausted}",
    )
    return RawPlaylistChunk(items=videos, cursor=cursor, header=header)


async def fetch_video(http: HttpClient, video_id: str) -> RawVideoDetails:
    """Fetch a watch page and return the four raw detail sources.

    Raises:
        YtSearchError: PARSE_ERROR if either blob is missing, YOUTUBE_ERROR
            if the playability status is not OK.
    """
    settings = http.settings
    params = {"app": "desktop", "v": video_id, "hl": settings.hl, "gl": settings.gl}
    headers = {
        "Accept": "text/html",
        "Accept-Language": f"{settings.hl}-{settings.gl}",
    }
    html = await http.get_text(WATCH_URL, params=params, headers=headers)
    context = {"video_id": video_id}

    initial_data = extract_json(html, INITIAL_DATA_RE, context)
    player = extract_json(html, INITIAL_PLAYER_RE, context)

    playability = player.get("playabilityStatus") or {}
    if playability.get("status") != PLAYABILITY_OK:
        reason = (
            playability.get("reason")
            or dig(playability, "messages", 0)
            or "Video is not available (private, unavailable, or invalid)."
        )
        raise YtSearchError(
            ErrorCode.YOUTUBE_ERROR, str(reason), {**context, "playability_status": playability}
        )

    contents = dig(
        initial_data, "contents", "twoColumnWatchNextResults", "results", "results", "contents", default=[]
    )
    primary = next((c["videoPrimaryInfoRenderer"] for c in contents if "videoPrimaryInfoRenderer" in c), {})
    secondary = next(
        (c["videoSecondaryInfoRenderer"] for c in contents if "videoSecondaryInfoRenderer" in c), {}
    )

    return RawVideoDetails(
        video_details=player.get("videoDetails") or {},
        microformat=dig(player, "microformat", "playerMicroformatRenderer", default={}),
        primary_info=primary,
        secondary_info=secondary,
    )


def _continuation_body(http: HttpClient, cursor: ContinuationCursor) -> dict[str, Any]:
    return {
        "context": {
            "client": {
                "utcOffsetMinutes": 0,
                "gl": http.settings.gl,
                "hl": http.settings.hl,
                "clientName": "WEB",
                "clientVersion": cursor.client_version,
            },
            "user": {},
            "request": {},
        },
        "continuation": cursor.token,
    }


async def _fetch_continuation(
    http: HttpClient, url: str, cursor: ContinuationCursor, actions_key: str
) -> list[dict[str, Any]]:
    if cursor.exhausted:
        raise ValueError("Cannot fetch a continuation from an exhausted cursor")
    data = await http.post_json(
        url,
        _continuation_body(http, cursor),
        params={"key": cursor.api_key, "prettyPrint": "false"} if cursor.api_key else {"prettyPrint": "false"},
        headers={"Content-Type": "application/json"},
    )
    if not isinstance(data, dict):
        raise YtSearchError(ErrorCode.PARSE_ERROR, "Unexpected continuation response.", {"url": url})

    for action in data.get(actions_key) or []:
        items = dig(action, "appendContinuationItemsAction", "continuationItems")
        if items is not None:
            return items
    raise YtSearchError(
        ErrorCode.PARSE_ERROR,
        "Continuation response carried no continuation items.",
        {"url": url, "response_keys": list(data)},
    )


async def fetch_search_continuation(http: HttpClient, cursor: ContinuationCursor) -> RawContinuationChunk:
    """Fetch the next chunk of search results for ``cursor``."""
    raw = await _fetch_continuation(http, SEARCH_API_URL, cursor, "onResponseReceivedCommands")

    items: list[dict[str, Any]] = []
    for entry in raw:
        section = dig(entry, ITEM_SECTION_RENDERER, "contents")
        if section is not None:
            items.extend(section)
    return RawContinuationChunk(items=items, token=continuation_token(raw))


async def fetch_playlist_continuation(http: HttpClient, cursor: ContinuationCursor) -> RawContinuationChunk:
    """Fetch the next chunk of playlist videos for ``cursor``."""
    raw = await _fetch_continuation(http, BROWSE_API_URL, cursor, "onResponseReceivedActions")

    videos = [item for item in raw if isinstance(item, dict) and PLAYLIST_VIDEO_RENDERER in item]
    return RawContinuationChunk(items=videos, token=continuation_token(raw))
