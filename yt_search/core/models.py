# Copyright (c) 2026 Pointmatic
#
# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Pydantic data models for yt-search."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, PrivateAttr

from yt_search.core.errors import PageAdvanceError


class Thumbnail(BaseModel):
    url: str = ""
    width: int = 0
    height: int = 0


class Author(BaseModel):
    name: str
    url: str
    logo: str | None = None
    verified: bool | None = None
    is_artist: bool | None = None


class VideoResult(BaseModel):
    kind: Literal["video"] = "video"
    id: str
    title: str
    image: str
    thumbnail: Thumbnail
    view_count: int = 0
    short_view_count: str = "0"
    duration: str = "0:00"
    seconds: int = 0
    author: Author | None = None
    url: str
    published_at: str = ""
    is_live: bool = False


class ChannelResult(BaseModel):
    kind: Literal["channel"] = "channel"
    id: str
    title: str
    image: str
    thumbnail: Thumbnail
    description: str = ""
    subscriber_count: str = "0"
    url: str
    verified: bool = False
    is_artist: bool = False


class PlaylistResult(BaseModel):
    kind: Literal["playlist"] = "playlist"
    content_type: str = "videos"
    id: str
    title: str
    image: str
    thumbnail: Thumbnail
    video_count: int = 0
    author: Author | None = None
    url: str


class PlaylistVideo(BaseModel):
    kind: Literal["video"] = "video"
    id: str
    index: str = ""
    title: str
    image: str
    thumbnail: Thumbnail
    views: str = ""
    duration: str = "0:00"
    seconds: int = 0
    author: Author | None = None
    url: str
    published_at: str = ""


class PlaylistInfo(BaseModel):
    id: str
    title: str = ""
    description: str = ""
    thumbnail: Thumbnail
    image: str = ""
    author: Author | None = None
    video_count: str = "0"
    views_count: str = "0"
    expected_pages: int = 0


class ChannelInfo(BaseModel):
    id: str = ""
    name: str = ""
    url: str = ""
    avatar: str = ""
    subscribers: str = ""
    verified: bool = False
    is_artist: bool = False


class VideoDetails(BaseModel):
    id: str
    title: str = ""
    description: str = ""
    duration: str = "0:00"
    seconds: int = 0
    views: int = 0
    views_short: str = "0"
    upload_date: str = ""
    thumbnail: Thumbnail
    image: str = ""
    channel: ChannelInfo
    likes: int = 0
    likes_short: str = "0"
    is_live: bool = False
    is_private: bool = False
    is_unlisted: bool = False
    category: str = ""
    url: str
    allow_ratings: bool = False
    keywords: list[str] = []


# --- Raw fetcher results ---


class ContinuationCursor(BaseModel):
    """Upstream continuation token plus the session credentials it needs."""

    model_config = ConfigDict(frozen=True)

    token: str | None = None
    api_key: str = ""
    client_version: str = ""

    @property
    def exhausted(self) -> bool:
        return self.token is None


class RawSearchChunk(BaseModel):
    items: list[dict[str, Any]]
    cursor: ContinuationCursor
    estimated_results: int = 0


class RawPlaylistChunk(BaseModel):
    items: list[dict[str, Any]]
    cursor: ContinuationCursor
    header: dict[str, Any] = {}


class RawContinuationChunk(BaseModel):
    items: list[dict[str, Any]]
    token: str | None = None


class RawVideoDetails(BaseModel):
    video_details: dict[str, Any] = {}
    microformat: dict[str, Any] = {}
    primary_info: dict[str, Any] = {}
    secondary_info: dict[str, Any] = {}


# --- Pages ---


class SearchMetadata(BaseModel):
    estimated_pages: int = 0
    estimated_results: int = 0
    has_next_page: bool = False
    yt_page: int = 0
    yt_page_size: int = 0
    user_page: int = 0
    user_page_size: int = 0
    content_type: str
    sort_order: str
    query: str
    result_range: tuple[int, int] = (0, 0)


class PlaylistMetadata(BaseModel):
    yt_page: int = 0
    yt_page_size: int = 0
    user_page: int = 0
    user_page_size: int = 0
    has_next_page: bool = False
    total_videos: int = 0
    result_range: tuple[int, int] = (0, 0)
    expected_pages: int = 0


class SearchPage(BaseModel):
    videos: list[VideoResult] = []
    channels: list[ChannelResult] = []
    playlists: list[PlaylistResult] = []
    movies: list[VideoResult] = []
    lives: list[VideoResult] = []
    metadata: SearchMetadata

    _session: Any = PrivateAttr(default=None)
    _number: int = PrivateAttr(default=0)
    _advanced: bool = PrivateAttr(default=False)

    def bind(self, session: Any, number: int) -> SearchPage:
        self._session = session
        self._number = number
        return self

    @property
    def items(self) -> list[VideoResult | ChannelResult | PlaylistResult]:
        """All records on this page, bucket by bucket."""
        return [*self.videos, *self.channels, *self.playlists, *self.movies, *self.lives]

    async def next_page(self) -> SearchPage | None:
        """Advance the session; None once every result has been delivered."""
        session = _claim_advance(self, self._session)
        try:
            return await session.next_page()
        except Exception:
            self._advanced = False
            raise


class PlaylistPage(BaseModel):
    playlist: PlaylistInfo
    videos: list[PlaylistVideo] = []
    metadata: PlaylistMetadata

    _session: Any = PrivateAttr(default=None)
    _number: int = PrivateAttr(default=0)
    _advanced: bool = PrivateAttr(default=False)

    def bind(self, session: Any, number: int) -> PlaylistPage:
        self._session = session
        self._number = number
        return self

    async def next_page(self) -> PlaylistPage | None:
        """Advance the session; None once every video has been delivered."""
        session = _claim_advance(self, self._session)
        try:
            return await session.next_page()
        except Exception:
            self._advanced = False
            raise


def _claim_advance(page: SearchPage | PlaylistPage, session: Any) -> Any:
    """Allow a page to advance its session exactly once, and only if current."""
    if session is None:
        raise PageAdvanceError("Page is not attached to a pagination session")
    if page._advanced:
        raise PageAdvanceError("next_page() was already called on this page")
    if page._number != session.pages_emitted:
        raise PageAdvanceError("Page has been superseded by a later page")
    page._advanced = True
    return session
