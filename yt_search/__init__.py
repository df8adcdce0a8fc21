"""yt-search: YouTube search, playlist listing, and video details without an API key."""

__version__ = "0.1.0"

from collections.abc import Mapping
from typing import Any

from yt_search.core.errors import ErrorCode, PageAdvanceError, YtSearchError
from yt_search.core.models import PlaylistPage, SearchPage, VideoDetails
from yt_search.core.options import ClientSettings, SearchOptions
from yt_search.services.http import HttpClient


async def search(
    query: str,
    options: SearchOptions | Mapping[str, Any] | None = None,
    *,
    http: HttpClient | None = None,
) -> SearchPage:
    """Search YouTube and return the first page of results.

    Follow-up pages come from ``await page.next_page()``, which returns
    None once every result has been delivered.

    Args:
        query: Search text. Must be non-blank.
        options: ``SearchOptions`` or a mapping with ``content_type``,
            ``sort_order`` and ``page_size``; other keys are rejected. Uses
            defaults if not provided.
        http: HTTP collaborator. A default client is built if not provided.

    Returns:
        SearchPage with per-kind result lists and pagination metadata.

    Raises:
        YtSearchError: On any fetch or parse failure. Invalid input is
            also reported this way, when the returned coroutine is awaited
            and before any request is made; calling without awaiting
            raises nothing.
    """
    from yt_search.core.errors import unexpected_errors
    from yt_search.core.options import validate_query, validate_search_options
    from yt_search.core.pagination import SearchSession
    from yt_search.services.fetchers import fetch_search

    query = validate_query(query, ErrorCode.INVALID_QUERY, "search query")
    opts = validate_search_options(options)
    if http is None:
        http = HttpClient()

    with unexpected_errors("search", {"query": query, "options": opts.model_dump()}):
        first = await fetch_search(http, query, opts)
        session = SearchSession(http, query, opts, first)
    page = await session.next_page()
    if page is None:
        raise YtSearchError(ErrorCode.NO_RESULTS, "No results were found.", {"query": query})
    return page


async def list_playlist_videos(
    playlist_id: str,
    page_size: int = 100,
    *,
    http: HttpClient | None = None,
) -> PlaylistPage:
    """List the videos of a playlist, one page at a time.

    Args:
        playlist_id: Playlist ID (the ``list=`` URL parameter).
        page_size: Videos per page, 10 to 100.
        http: HTTP collaborator. A default client is built if not provided.

    Returns:
        PlaylistPage with playlist info, videos, and pagination metadata.

    Raises:
        YtSearchError: INVALID_PLAYLIST or INVALID_LIMIT when awaited with
            bad arguments, before any request is made. Fetch and parse
            failures, and an empty playlist, raise on await as well.
    """
    from yt_search.core.constants import PLAYLIST_PAGE_SIZE_RANGE
    from yt_search.core.errors import unexpected_errors
    from yt_search.core.options import validate_page_size, validate_query
    from yt_search.core.pagination import PlaylistSession
    from yt_search.services.fetchers import fetch_playlist

    playlist_id = validate_query(playlist_id, ErrorCode.INVALID_PLAYLIST, "playlist ID")
    page_size = validate_page_size(page_size, PLAYLIST_PAGE_SIZE_RANGE)
    if http is None:
        http = HttpClient()

    with unexpected_errors("playlist listing", {"playlist_id": playlist_id}):
        first = await fetch_playlist(http, playlist_id)
        session = PlaylistSession(http, playlist_id, page_size, first)
    page = await session.next_page()
    if page is None:
        raise YtSearchError(
            ErrorCode.NO_PLAYLIST_RESULTS, "No videos found in playlist.", {"playlist_id": playlist_id}
        )
    return page


async def get_video_details(video_id: str, *, http: HttpClient | None = None) -> VideoDetails:
    """Fetch the details of a single video from its watch page.

    A blank ``video_id`` raises YtSearchError (INVALID_VIDEO) once the
    coroutine is awaited, before any request is made.
    """
    from yt_search.core.errors import unexpected_errors
    from yt_search.core.options import validate_query
    from yt_search.services.fetchers import fetch_video
    from yt_search.services.normalizers import normalize_video_details

    video_id = validate_query(video_id, ErrorCode.INVALID_VIDEO, "video ID")
    if http is None:
        http = HttpClient()

    with unexpected_errors("video details", {"video_id": video_id}):
        raw = await fetch_video(http, video_id)
        return normalize_video_details(raw, video_id)


__all__ = [
    "__version__",
    "search",
    "list_playlist_videos",
    "get_video_details",
    "ClientSettings",
    "ErrorCode",
    "HttpClient",
    "PageAdvanceError",
    "PlaylistPage",
    "SearchOptions",
    "SearchPage",
    "VideoDetails",
    "YtSearchError",
]
