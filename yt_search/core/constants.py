# Copyright (c) 2026 Pointmatic
#
# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""URLs, filter tokens, and renderer vocabulary for YouTube pages."""

from __future__ import annotations

BASE_URL = "https://www.youtube.com"
WATCH_URL = f"{BASE_URL}/watch"
SEARCH_URL = f"{BASE_URL}/results"
PLAYLIST_URL = f"{BASE_URL}/playlist"
SEARCH_API_URL = f"{BASE_URL}/youtubei/v1/search"
BROWSE_API_URL = f"{BASE_URL}/youtubei/v1/browse"
IMAGE_BASE_URL = "https://i.ytimg.com/vi"
DEFAULT_IMAGE_NAME = "hqdefault.jpg"

DEFAULT_CLIENT_VERSION = "2.20250911.00.00"
DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/139.0.0.0 Safari/537.36"
)

CONTENT_TYPES = ("video", "channel", "playlist", "movie", "live", "any")
SORT_ORDERS = ("relevance", "upload_date", "view_count", "rating")

SEARCH_PAGE_SIZE_RANGE = (10, 50)
PLAYLIST_PAGE_SIZE_RANGE = (10, 100)
DEFAULT_SEARCH_PAGE_SIZE = 20
DEFAULT_PLAYLIST_PAGE_SIZE = 100

# Approximate number of items YouTube returns per chunk.
SEARCH_CHUNK_SIZE = 20
PLAYLIST_CHUNK_SIZE = 100

# "sp" filter tokens used when sorting by relevance.
TYPE_FILTERS: dict[str, str] = {
    "video": "EgIQAQ==",
    "channel": "EgIQAg==",
    "playlist": "EgIQAw==",
    "movie": "EgIQBA==",
    "live": "EgJAAQ==",
    "any": "",
}

# "sp" filter tokens per content type and non-default sort order.
SORT_FILTERS: dict[str, dict[str, str]] = {
    "video": {
        "upload_date": "CAISAhAB",
        "view_count": "CAMSAhAB",
        "rating": "CAESAhAB",
    },
    "channel": {
        "upload_date": "CAISAhAC",
        "view_count": "CAMSAhAC",
        "rating": "CAESAhAC",
    },
    "playlist": {
        "upload_date": "CAISAhAD",
        "view_count": "CAMSAhAD",
        "rating": "CAESAhAD",
    },
    "movie": {
        "upload_date": "CAISAhAE",
        "view_count": "CAMSAhAE",
        "rating": "CAESAhAE",
    },
    "live": {
        "upload_date": "CAISAkAB",
        "view_count": "CAMSAkAB",
        "rating": "CAESAkAB",
    },
    "any": {
        "upload_date": "CAI=",
        "view_count": "CAM=",
        "rating": "CAE=",
    },
}

VIDEO_RENDERER = "videoRenderer"
CHANNEL_RENDERER = "channelRenderer"
PLAYLIST_RENDERER = "lockupViewModel"
PLAYLIST_VIDEO_RENDERER = "playlistVideoRenderer"
CONTINUATION_RENDERER = "continuationItemRenderer"
ITEM_SECTION_RENDERER = "itemSectionRenderer"

# Renderer keys that identify a result section for each content type.
CONTENT_RENDERERS: dict[str, tuple[str, ...]] = {
    "video": (VIDEO_RENDERER,),
    "channel": (CHANNEL_RENDERER,),
    "playlist": (PLAYLIST_RENDERER,),
    "movie": (VIDEO_RENDERER,),
    "live": (VIDEO_RENDERER,),
    "any": (VIDEO_RENDERER, CHANNEL_RENDERER, PLAYLIST_RENDERER),
}

# Page buckets filled for each content type, in output order.
CONTENT_STREAMS: dict[str, tuple[str, ...]] = {
    "video": ("videos",),
    "channel": ("channels",),
    "playlist": ("playlists",),
    "movie": ("movies",),
    "live": ("lives",),
    "any": ("videos", "channels", "playlists"),
}

STREAM_RENDERERS: dict[str, str] = {
    "videos": VIDEO_RENDERER,
    "channels": CHANNEL_RENDERER,
    "playlists": PLAYLIST_RENDERER,
    "movies": VIDEO_RENDERER,
    "lives": VIDEO_RENDERER,
}

# Substrings that appear in serialized badge JSON when a flag is set.
BADGE_MARKERS: dict[str, dict[str, str]] = {
    "video": {
        "verified": "VERIFIED",
        "artist": "ARTIST",
        "live": "LIVE_NOW",
    },
    "channel": {
        "verified": "CHECK_CIRCLE_THICK",
        "artist": "AUDIO_BADGE",
    },
    "playlist": {
        "verified": "CHECK_CIRCLE_FILLED",
        "artist": "AUDIO_BADGE",
    },
    "owner": {
        "verified": "VERIFIED",
        "artist": "OFFICIAL_ARTIST_BADGE",
    },
}

# Suffix words for a playlist's item count, in priority order.
PLAYLIST_COUNT_PATTERNS = (r"\d[\d,]* videos?", r"\d[\d,]* lessons?", r"\d[\d,]* episodes?")

PLAYABILITY_OK = "OK"
