# Copyright (c) 2026 Pointmatic
#
# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Cursor-driven pagination sessions for search and playlist results.

A session owns the raw-item buffers and the continuation cursor for one
paging run. Upstream chunks are pulled lazily until the buffer can fill a
user page (or the cursor runs out), then exactly ``page_size`` items are
sliced off in upstream order and normalized.

Raw items are routed into one stream per output bucket ("videos",
"channels", ...). Each stream keeps its own consumed offset; items carry
an upstream sequence number so a mixed page is assembled in the order
YouTube returned it and never exceeds the requested size.
"""

from __future__ import annotations

import logging
import math
from typing import Any, Awaitable, Callable

from yt_search.core.constants import (
    CONTENT_STREAMS,
    PLAYLIST_CHUNK_SIZE,
    PLAYLIST_VIDEO_RENDERER,
    SEARCH_CHUNK_SIZE,
    STREAM_RENDERERS,
)
from yt_search.core.errors import unexpected_errors
from yt_search.core.logging import log_event
from yt_search.core.models import (
    ContinuationCursor,
    PlaylistMetadata,
    PlaylistPage,
    RawContinuationChunk,
    RawPlaylistChunk,
    RawSearchChunk,
    SearchMetadata,
    SearchPage,
)
from yt_search.core.options import SearchOptions
from yt_search.services import fetchers
from yt_search.services.http import HttpClient
from yt_search.services.normalizers import (
    normalize_channel,
    normalize_playlist,
    normalize_playlist_info,
    normalize_playlist_video,
    normalize_video,
)
from yt_search.utils.formatting import parse_count

logger = logging.getLogger("yt_search")

ContinuationFetcher = Callable[[HttpClient, ContinuationCursor], Awaitable[RawContinuationChunk]]

_STREAM_NORMALIZERS: dict[str, Callable[[dict[str, Any]], Any]] = {
    "videos": normalize_video,
    "channels": normalize_channel,
    "playlists": normalize_playlist,
    "movies": normalize_video,
    "lives": normalize_video,
    "playlist_videos": normalize_playlist_video,
}


class _Stream:
    """Append-only buffer of raw renderers for one output bucket."""

    def __init__(self, name: str, renderer_key: str) -> None:
        self.name = name
        self.renderer_key = renderer_key
        self.normalize = _STREAM_NORMALIZERS[name]
        self.buffer: list[tuple[int, dict[str, Any]]] = []
        self.consumed = 0

    @property
    def pending(self) -> int:
        return len(self.buffer) - self.consumed

    def next_seq(self) -> int | None:
        if self.pending <= 0:
            return None
        return self.buffer[self.consumed][0]

    def pop(self) -> Any:
        _, raw = self.buffer[self.consumed]
        self.consumed += 1
        return self.normalize(raw)


class _Session:
    """Shared buffering and cursor logic for the pagination engines."""

    def __init__(
        self,
        http: HttpClient,
        cursor: ContinuationCursor,
        fetch_next: ContinuationFetcher,
        streams: list[_Stream],
        page_size: int,
        target: str,
    ) -> None:
        self.http = http
        self.cursor = cursor
        self.page_size = page_size
        self.target = target
        self.streams = streams
        self.chunks_fetched = 0
        self.pages_emitted = 0
        self.delivered = 0
        self._fetch_next = fetch_next
        self._seq = 0

    @property
    def pending(self) -> int:
        return sum(stream.pending for stream in self.streams)

    @property
    def has_more(self) -> bool:
        return self.pending > 0 or not self.cursor.exhausted

    def _ingest(self, items: list[dict[str, Any]]) -> None:
        for item in items:
            if not isinstance(item, dict):
                continue
            for stream in self.streams:
                raw = item.get(stream.renderer_key)
                if isinstance(raw, dict):
                    stream.buffer.append((self._seq, raw))
                    self._seq += 1
                    break

    async def _fill(self) -> None:
        """Pull continuation chunks until a full page is buffered."""
        while self.pending < self.page_size and not self.cursor.exhausted:
            chunk = await self._fetch_next(self.http, self.cursor)
            self.chunks_fetched += 1
            self._ingest(chunk.items)

            token = chunk.token
            if token is not None and token == self.cursor.token:
                logger.warning("Continuation token repeated for %s; treating as exhausted", self.target)
                token = None
            self.cursor = self.cursor.model_copy(update={"token": token})

            log_event(
                logging.DEBUG,
                f"Fetched continuation chunk {self.chunks_fetched} ({len(chunk.items)} items)",
                target=self.target,
                event="chunk_fetched",
                page=self.pages_emitted + 1,
                chunk=self.chunks_fetched,
                details=f"pending={self.pending} exhausted={self.cursor.exhausted}",
            )

    def _take(self) -> dict[str, list[Any]]:
        """Slice up to page_size pending items, oldest first, across streams."""
        picked: dict[str, list[Any]] = {stream.name: [] for stream in self.streams}
        for _ in range(self.page_size):
            candidates = [(s.next_seq(), s) for s in self.streams if s.next_seq() is not None]
            if not candidates:
                break
            _, stream = min(candidates, key=lambda pair: pair[0])
            picked[stream.name].append(stream.pop())
        return picked

    async def _advance(self) -> tuple[dict[str, list[Any]], tuple[int, int]] | None:
        await self._fill()
        picked = self._take()
        count = sum(len(items) for items in picked.values())
        if count == 0:
            return None

        start = self.delivered
        self.delivered += count
        self.pages_emitted += 1
        log_event(
            logging.DEBUG,
            f"Emitted page {self.pages_emitted} ({count} items)",
            target=self.target,
            event="page_emitted",
            page=self.pages_emitted,
            chunk=self.chunks_fetched,
            details=f"range={start}-{self.delivered}",
        )
        return picked, (start, self.delivered)


class SearchSession(_Session):
    """Pagination state for one search query.

    The sort order is baked into the first request's filter token and is
    fixed for the life of the session.
    """

    def __init__(self, http: HttpClient, query: str, options: SearchOptions, first: RawSearchChunk) -> None:
        streams = [_Stream(name, STREAM_RENDERERS[name]) for name in CONTENT_STREAMS[options.content_type]]
        super().__init__(
            http,
            first.cursor,
            fetchers.fetch_search_continuation,
            streams,
            options.page_size,
            query,
        )
        self.query = query
        self.options = options
        self.estimated_results = first.estimated_results
        self._ingest(first.items)

    async def next_page(self) -> SearchPage | None:
        """Build the next page, or return None when the results are exhausted."""
        if not self.has_more:
            return None
        with unexpected_errors("search pagination", {"query": self.query}):
            advanced = await self._advance()
        if advanced is None:
            return None
        picked, result_range = advanced

        metadata = SearchMetadata(
            estimated_pages=math.ceil(self.estimated_results / SEARCH_CHUNK_SIZE),
            estimated_results=self.estimated_results,
            has_next_page=self.has_more,
            yt_page=self.chunks_fetched,
            yt_page_size=SEARCH_CHUNK_SIZE,
            user_page=self.pages_emitted,
            user_page_size=self.page_size,
            content_type=self.options.content_type,
            sort_order=self.options.sort_order,
            query=self.query,
            result_range=result_range,
        )
        return SearchPage(**picked, metadata=metadata).bind(self, self.pages_emitted)


class PlaylistSession(_Session):
    """Pagination state for one playlist's videos."""

    def __init__(self, http: HttpClient, playlist_id: str, page_size: int, first: RawPlaylistChunk) -> None:
        super().__init__(
            http,
            first.cursor,
            fetchers.fetch_playlist_continuation,
            [_Stream("playlist_videos", PLAYLIST_VIDEO_RENDERER)],
            page_size,
            playlist_id,
        )
        self.playlist_id = playlist_id
        self.info = normalize_playlist_info(first.header, playlist_id, page_size)
        self._ingest(first.items)

    async def next_page(self) -> PlaylistPage | None:
        """Build the next page, or return None when the playlist is exhausted."""
        if not self.has_more:
            return None
        with unexpected_errors("playlist pagination", {"playlist_id": self.playlist_id}):
            advanced = await self._advance()
        if advanced is None:
            return None
        picked, result_range = advanced

        metadata = PlaylistMetadata(
            yt_page=self.chunks_fetched,
            yt_page_size=PLAYLIST_CHUNK_SIZE,
            user_page=self.pages_emitted,
            user_page_size=self.page_size,
            has_next_page=self.has_more,
            total_videos=parse_count(self.info.video_count),
            result_range=result_range,
            expected_pages=self.info.expected_pages,
        )
        return PlaylistPage(
            playlist=self.info.model_copy(deep=True),
            videos=picked["playlist_videos"],
            metadata=metadata,
        ).bind(self, self.pages_emitted)
