"""Map raw YouTube renderer objects to normalized records.

Every function here is total: missing optional fields fall back to
defaults instead of raising, since YouTube's renderer schema shifts
without notice.
"""

from __future__ import annotations

import math
import re
from typing import Any

from yt_search.core.constants import (
    BADGE_MARKERS,
    BASE_URL,
    DEFAULT_IMAGE_NAME,
    IMAGE_BASE_URL,
    PLAYLIST_COUNT_PATTERNS,
    PLAYLIST_URL,
    WATCH_URL,
)
from yt_search.core.errors import YtSearchError
from yt_search.core.models import (
    Author,
    ChannelInfo,
    ChannelResult,
    PlaylistInfo,
    PlaylistResult,
    PlaylistVideo,
    RawVideoDetails,
    Thumbnail,
    VideoDetails,
    VideoResult,
)
from yt_search.utils.formatting import (
    duration_to_seconds,
    humanize_date,
    normalize_url,
    parse_count,
    seconds_to_duration,
    shorten_number,
)
from yt_search.utils.tree import dig, find_first_matching, first_present, has_badge, joined_runs

_LIKES_RE = re.compile(r"along with ([\d,]+) other|^([\d,]+) likes?$", re.IGNORECASE)


def _absolute(path: Any) -> str:
    """Resolve a channel path against the YouTube origin."""
    if not path or not isinstance(path, str):
        return BASE_URL
    if path.startswith("http://") or path.startswith("https://"):
        return path
    if not path.startswith("/"):
        path = "/" + path
    return BASE_URL + path


def _safe_image(url: Any) -> str:
    if not url or not isinstance(url, str):
        return ""
    try:
        return normalize_url(url)
    except YtSearchError:
        return ""


def _int(value: Any) -> int:
    try:
        return int(value or 0)
    except (TypeError, ValueError):
        return 0


def _thumbnail(entry: Any) -> Thumbnail:
    if not isinstance(entry, dict):
        return Thumbnail()
    return Thumbnail(
        url=str(entry.get("url") or ""),
        width=_int(entry.get("width")),
        height=_int(entry.get("height")),
    )


def _video_image(video_id: str) -> str:
    return f"{IMAGE_BASE_URL}/{video_id}/{DEFAULT_IMAGE_NAME}"


def _endpoint_url(node: Any) -> str | None:
    """Channel path from a navigation endpoint (canonical path first)."""
    return first_present(
        node,
        ("navigationEndpoint", "browseEndpoint", "canonicalBaseUrl"),
        ("navigationEndpoint", "commandMetadata", "webCommandMetadata", "url"),
    )


def _title(renderer: dict[str, Any]) -> str:
    return str(first_present(renderer, ("title", "runs", 0, "text"), ("title", "simpleText"), default=""))


def normalize_video(renderer: dict[str, Any]) -> VideoResult:
    """Normalize a ``videoRenderer`` from search results."""
    video_id = str(renderer.get("videoId") or "")
    markers = BADGE_MARKERS["video"]

    view_count = parse_count(
        first_present(
            renderer,
            ("viewCountText", "simpleText"),
            ("viewCountText", "runs", 0, "text"),
            default="0",
        )
    )
    duration = str(dig(renderer, "lengthText", "simpleText", default="0:00"))

    owner = dig(renderer, "ownerText", "runs", 0) or dig(renderer, "longBylineText", "runs", 0)
    badges = renderer.get("ownerBadges")
    author = None
    if isinstance(owner, dict) and owner.get("text"):
        author = Author(
            name=str(owner["text"]),
            url=_absolute(_endpoint_url(owner)),
            logo=_safe_image(
                dig(
                    renderer,
                    "channelThumbnailSupportedRenderers",
                    "channelThumbnailWithLinkRenderer",
                    "thumbnail",
                    "thumbnails",
                    0,
                    "url",
                )
            )
            or None,
            verified=has_badge(badges, markers["verified"]),
            is_artist=has_badge(badges, markers["artist"]),
        )

    is_live = has_badge(renderer.get("badges"), markers["live"]) or has_badge(
        renderer.get("thumbnailOverlays"), markers["live"]
    )

    return VideoResult(
        id=video_id,
        title=_title(renderer),
        image=_video_image(video_id),
        thumbnail=_thumbnail(dig(renderer, "thumbnail", "thumbnails", 0)),
        view_count=view_count,
        short_view_count=shorten_number(view_count),
        duration=duration,
        seconds=duration_to_seconds(duration),
        author=author,
        url=f"{WATCH_URL}?v={video_id}",
        published_at=str(dig(renderer, "publishedTimeText", "simpleText", default="")),
        is_live=is_live,
    )


def normalize_channel(renderer: dict[str, Any]) -> ChannelResult:
    """Normalize a ``channelRenderer`` from search results."""
    markers = BADGE_MARKERS["channel"]
    badges = renderer.get("ownerBadges")

    thumbnail = _thumbnail(dig(renderer, "thumbnail", "thumbnails", 0))
    thumbnail = thumbnail.model_copy(update={"url": _safe_image(thumbnail.url)})

    # The handle ("@name") sits in subscriberCountText and the subscriber
    # count in videoCountText on current layouts.
    count_text = str(
        first_present(
            renderer,
            ("videoCountText", "simpleText"),
            ("subscriberCountText", "simpleText"),
            default="0 subscribers",
        )
    )

    return ChannelResult(
        id=str(renderer.get("channelId") or ""),
        title=_title(renderer),
        image=thumbnail.url,
        thumbnail=thumbnail,
        description=joined_runs(renderer, "descriptionSnippet"),
        subscriber_count=count_text.replace(" subscribers", ""),
        url=_absolute(_endpoint_url(renderer)),
        verified=has_badge(badges, markers["verified"]),
        is_artist=has_badge(badges, markers["artist"]),
    )


def normalize_playlist(lockup: dict[str, Any]) -> PlaylistResult:
    """Normalize a ``lockupViewModel`` playlist card from search results."""
    playlist_id = str(lockup.get("contentId") or "")
    markers = BADGE_MARKERS["playlist"]
    content_image = lockup.get("contentImage") or {}
    metadata = lockup.get("metadata") or {}

    source = first_present(
        content_image,
        ("collectionThumbnailViewModel", "primaryThumbnail", "thumbnailViewModel", "image", "sources", 0),
        ("thumbnailViewModel", "image", "sources", 0),
    )
    thumbnail = _thumbnail(source)

    count_text = None
    for pattern in PLAYLIST_COUNT_PATTERNS:
        count_text = find_first_matching(content_image, pattern)
        if count_text:
            break

    author_text = dig(
        metadata,
        "lockupMetadataViewModel", "metadata", "contentMetadataViewModel", "metadataRows", 0, "metadataParts", 0, "text",
    )
    author = None
    if isinstance(author_text, dict) and author_text.get("content"):
        command = dig(author_text, "commandRuns", 0, "onTap", "innertubeCommand", default={})
        author = Author(
            name=str(author_text["content"]),
            url=_absolute(
                first_present(
                    command,
                    ("browseEndpoint", "canonicalBaseUrl"),
                    ("commandMetadata", "webCommandMetadata", "url"),
                )
            ),
            verified=find_first_matching(metadata, markers["verified"]) is not None,
            is_artist=find_first_matching(metadata, markers["artist"]) is not None,
        )

    content_type = re.sub(r"[^a-zA-Z ]", "", count_text or "").strip() or "videos"

    return PlaylistResult(
        content_type=content_type,
        id=playlist_id,
        title=str(dig(metadata, "lockupMetadataViewModel", "title", "content", default="")),
        image=_safe_image(thumbnail.url),
        thumbnail=thumbnail,
        video_count=parse_count(count_text),
        author=author,
        url=f"{PLAYLIST_URL}?list={playlist_id}",
    )


def normalize_playlist_video(renderer: dict[str, Any]) -> PlaylistVideo:
    """Normalize a ``playlistVideoRenderer`` from a playlist page."""
    video_id = str(renderer.get("videoId") or "")
    duration = str(dig(renderer, "lengthText", "simpleText", default="0:00"))

    owner = dig(renderer, "shortBylineText", "runs", 0)
    author = None
    if isinstance(owner, dict) and owner.get("text"):
        author = Author(name=str(owner["text"]), url=_absolute(_endpoint_url(owner)))

    watch_path = dig(renderer, "navigationEndpoint", "commandMetadata", "webCommandMetadata", "url")
    if not watch_path:
        playlist_id = dig(renderer, "navigationEndpoint", "watchEndpoint", "playlistId")
        watch_path = f"/watch?v={video_id}" + (f"&list={playlist_id}" if playlist_id else "")

    return PlaylistVideo(
        id=video_id,
        index=str(dig(renderer, "index", "simpleText", default="")),
        title=_title(renderer) or "Untitled",
        image=_video_image(video_id),
        thumbnail=_thumbnail(dig(renderer, "thumbnail", "thumbnails", 0)),
        views=str(dig(renderer, "videoInfo", "runs", 0, "text", default="")),
        duration=duration,
        seconds=duration_to_seconds(duration),
        author=author,
        url=_absolute(watch_path),
        published_at=str(dig(renderer, "videoInfo", "runs", 2, "text", default="")),
    )


def normalize_playlist_info(header: dict[str, Any], playlist_id: str, page_size: int) -> PlaylistInfo:
    """Normalize a playlist ``pageHeaderRenderer``.

    ``expected_pages`` is the number of user pages of ``page_size`` needed
    to cover the advertised video count.
    """
    view_model = dig(header, "content", "pageHeaderViewModel", default={})
    rows = dig(view_model, "metadata", "contentMetadataViewModel", "metadataRows", default=[])
    avatar_stack = dig(rows, 0, "metadataParts", 0, "avatarStack", "avatarStackViewModel", default={})
    hero = dig(view_model, "heroImage", "contentPreviewImageViewModel", "image", "sources", 0)

    video_count = str(dig(rows, 1, "metadataParts", 1, "text", "content", default="0"))
    video_count = re.sub(r" videos?$", "", video_count)
    views_count = str(dig(rows, 1, "metadataParts", 2, "text", "content", default="0"))
    views_count = re.sub(r" views?$", "", views_count)

    author = None
    author_name = dig(avatar_stack, "text", "content")
    if author_name:
        author = Author(
            name=re.sub(r"^by ", "", str(author_name)),
            url=_absolute(
                dig(avatar_stack, "text", "commandRuns", 0, "onTap", "innertubeCommand", "browseEndpoint", "canonicalBaseUrl")
            ),
            logo=_safe_image(dig(avatar_stack, "avatars", 0, "avatarViewModel", "image", "sources", 0, "url")) or None,
        )

    total = parse_count(video_count)
    thumbnail = _thumbnail(hero)
    return PlaylistInfo(
        id=playlist_id,
        title=str(
            first_present(
                header,
                ("pageTitle",),
                ("content", "pageHeaderViewModel", "title", "dynamicTextViewModel", "text", "content"),
                default="",
            )
        ),
        description=str(
            dig(view_model, "description", "descriptionPreviewViewModel", "description", "content", default="")
        ),
        thumbnail=thumbnail,
        image=thumbnail.url,
        author=author,
        video_count=video_count,
        views_count=views_count,
        expected_pages=math.ceil(total / page_size) if page_size > 0 else 0,
    )


# Candidate (source, path) lists per VideoDetails field, tried in order.
_DETAIL_FIELDS: dict[str, tuple[tuple[str, tuple[str | int, ...]], ...]] = {
    "title": (
        ("primary_info", ("title", "runs", 0, "text")),
        ("video_details", ("title",)),
        ("microformat", ("title", "simpleText")),
    ),
    "description": (
        ("video_details", ("shortDescription",)),
        ("microformat", ("description", "simpleText")),
        ("secondary_info", ("attributedDescription", "content")),
    ),
    "length_seconds": (
        ("video_details", ("lengthSeconds",)),
        ("microformat", ("lengthSeconds",)),
    ),
    "views": (
        ("video_details", ("viewCount",)),
        ("microformat", ("viewCount",)),
        ("primary_info", ("viewCount", "videoViewCountRenderer", "viewCount", "simpleText")),
    ),
    "publish_date": (
        ("microformat", ("publishDate",)),
        ("microformat", ("uploadDate",)),
    ),
    "date_text": (("primary_info", ("dateText", "simpleText")),),
    "thumbnail": (
        ("video_details", ("thumbnail", "thumbnails", -1)),
        ("microformat", ("thumbnail", "thumbnails", 0)),
    ),
    "channel_id": (
        ("video_details", ("channelId",)),
        ("microformat", ("externalChannelId",)),
    ),
    "channel_name": (
        ("secondary_info", ("owner", "videoOwnerRenderer", "title", "runs", 0, "text")),
        ("video_details", ("author",)),
        ("microformat", ("ownerChannelName",)),
    ),
    "channel_path": (
        ("secondary_info", ("owner", "videoOwnerRenderer", "navigationEndpoint", "browseEndpoint", "canonicalBaseUrl")),
        ("microformat", ("ownerProfileUrl",)),
    ),
    "channel_avatar": (("secondary_info", ("owner", "videoOwnerRenderer", "thumbnail", "thumbnails", -1, "url")),),
    "subscribers": (("secondary_info", ("owner", "videoOwnerRenderer", "subscriberCountText", "simpleText")),),
    "is_live": (
        ("microformat", ("liveBroadcastDetails", "isLiveNow")),
        ("video_details", ("isLive",)),
    ),
    "is_private": (("video_details", ("isPrivate",)),),
    "is_unlisted": (("microformat", ("isUnlisted",)),),
    "category": (("microformat", ("category",)),),
    "allow_ratings": (("video_details", ("allowRatings",)),),
    "keywords": (("video_details", ("keywords",)),),
}


def _detail(sources: dict[str, dict[str, Any]], field: str, default: Any = None) -> Any:
    for source, path in _DETAIL_FIELDS[field]:
        value = dig(sources.get(source), *path)
        if value not in (None, "", [], {}):
            return value
    return default


def _likes(primary_info: dict[str, Any]) -> int:
    actions = primary_info.get("videoActions") if isinstance(primary_info, dict) else None
    text = find_first_matching(actions, _LIKES_RE)
    if text is None:
        return 0
    match = _LIKES_RE.search(text)
    return parse_count(match.group(1) or match.group(2)) if match else 0


def normalize_video_details(raw: RawVideoDetails, video_id: str) -> VideoDetails:
    """Merge the four watch-page sources into one VideoDetails record."""
    sources = {
        "video_details": raw.video_details,
        "microformat": raw.microformat,
        "primary_info": raw.primary_info,
        "secondary_info": raw.secondary_info,
    }
    video_id = str(dig(raw.video_details, "videoId", default=video_id))

    duration = seconds_to_duration(_detail(sources, "length_seconds", 0))
    views = parse_count(_detail(sources, "views", "0"))
    likes = _likes(raw.primary_info)

    upload_date = humanize_date(_detail(sources, "publish_date")) or str(_detail(sources, "date_text", ""))

    owner = dig(raw.secondary_info, "owner", "videoOwnerRenderer", default={})
    owner_badges = owner.get("badges")
    markers = BADGE_MARKERS["owner"]
    channel_id = str(_detail(sources, "channel_id", ""))
    channel_path = _detail(sources, "channel_path") or (f"/channel/{channel_id}" if channel_id else "")

    channel = ChannelInfo(
        id=channel_id,
        name=str(_detail(sources, "channel_name", "")),
        url=_absolute(channel_path) if channel_path else "",
        avatar=_safe_image(_detail(sources, "channel_avatar")),
        subscribers=str(_detail(sources, "subscribers", "")).replace(" subscribers", ""),
        verified=has_badge(owner_badges, markers["verified"])
        or has_badge(owner_badges, BADGE_MARKERS["channel"]["verified"]),
        is_artist=has_badge(owner_badges, markers["artist"])
        or has_badge(owner_badges, BADGE_MARKERS["channel"]["artist"]),
    )

    keywords = _detail(sources, "keywords", [])
    return VideoDetails(
        id=video_id,
        title=str(_detail(sources, "title", "")),
        description=str(_detail(sources, "description", "")),
        duration=duration,
        seconds=duration_to_seconds(duration),
        views=views,
        views_short=shorten_number(views),
        upload_date=upload_date,
        thumbnail=_thumbnail(_detail(sources, "thumbnail")),
        image=_video_image(video_id),
        channel=channel,
        likes=likes,
        likes_short=shorten_number(likes),
        is_live=bool(_detail(sources, "is_live", False)),
        is_private=bool(_detail(sources, "is_private", False)),
        is_unlisted=bool(_detail(sources, "is_unlisted", False)),
        category=str(_detail(sources, "category", "")),
        url=f"{WATCH_URL}?v={video_id}",
        allow_ratings=bool(_detail(sources, "allow_ratings", False)),
        keywords=[str(k) for k in keywords] if isinstance(keywords, list) else [],
    )
