"""Builders for YouTube page fixtures and a counting mock transport."""

from __future__ import annotations

import json
from typing import Any

import httpx

from yt_search.core.options import ClientSettings
from yt_search.services.http import HttpClient

API_KEY = "test-api-key"
CLIENT_VERSION = "2.20250101.00.00"


# --- Renderers ---


def video_renderer(
    video_id: str,
    title: str | None = None,
    views: str = "1,234 views",
    length: str = "4:13",
    channel: str = "Some Channel",
    verified: bool = False,
    live: bool = False,
) -> dict[str, Any]:
    renderer: dict[str, Any] = {
        "videoId": video_id,
        "title": {"runs": [{"text": title or f"Video {video_id}"}]},
        "thumbnail": {
            "thumbnails": [{"url": f"https://i.ytimg.com/vi/{video_id}/hq720.jpg?sqp=abc", "width": 720, "height": 404}]
        },
        "viewCountText": {"simpleText": views},
        "lengthText": {"simpleText": length},
        "publishedTimeText": {"simpleText": "2 years ago"},
        "ownerText": {
            "runs": [
                {
                    "text": channel,
                    "navigationEndpoint": {"browseEndpoint": {"canonicalBaseUrl": "/@somechannel"}},
                }
            ]
        },
        "channelThumbnailSupportedRenderers": {
            "channelThumbnailWithLinkRenderer": {
                "thumbnail": {"thumbnails": [{"url": "//yt3.ggpht.com/avatar=s68?x=1"}]}
            }
        },
    }
    if verified:
        renderer["ownerBadges"] = [{"metadataBadgeRenderer": {"style": "BADGE_STYLE_TYPE_VERIFIED"}}]
    if live:
        renderer["badges"] = [{"metadataBadgeRenderer": {"style": "BADGE_STYLE_TYPE_LIVE_NOW"}}]
    return renderer


def video_item(video_id: str, **kwargs: Any) -> dict[str, Any]:
    return {"videoRenderer": video_renderer(video_id, **kwargs)}


def channel_renderer(channel_id: str, title: str = "A Channel", verified: bool = False) -> dict[str, Any]:
    renderer: dict[str, Any] = {
        "channelId": channel_id,
        "title": {"simpleText": title},
        "thumbnail": {"thumbnails": [{"url": "//yt3.ggpht.com/chan=s88?q=1", "width": 88, "height": 88}]},
        "descriptionSnippet": {"runs": [{"text": "About "}, {"text": "this channel"}]},
        "subscriberCountText": {"simpleText": "@achannel"},
        "videoCountText": {"simpleText": "1.2M subscribers"},
        "navigationEndpoint": {"browseEndpoint": {"canonicalBaseUrl": "/@achannel"}},
    }
    if verified:
        renderer["ownerBadges"] = [{"metadataBadgeRenderer": {"icon": {"iconType": "CHECK_CIRCLE_THICK"}}}]
    return renderer


def channel_item(channel_id: str, **kwargs: Any) -> dict[str, Any]:
    return {"channelRenderer": channel_renderer(channel_id, **kwargs)}


def playlist_lockup(playlist_id: str, title: str = "A Playlist", count: str = "12 videos") -> dict[str, Any]:
    return {
        "contentId": playlist_id,
        "contentType": "LOCKUP_CONTENT_TYPE_PLAYLIST",
        "contentImage": {
            "collectionThumbnailViewModel": {
                "primaryThumbnail": {
                    "thumbnailViewModel": {
                        "image": {"sources": [{"url": "https://i.ytimg.com/vi/abc/hqdefault.jpg?sqp=1", "width": 480, "height": 270}]},
                        "overlays": [
                            {
                                "thumbnailOverlayBadgeViewModel": {
                                    "thumbnailBadges": [{"thumbnailBadgeViewModel": {"text": count}}]
                                }
                            }
                        ],
                    }
                }
            }
        },
        "metadata": {
            "lockupMetadataViewModel": {
                "title": {"content": title},
                "metadata": {
                    "contentMetadataViewModel": {
                        "metadataRows": [
                            {
                                "metadataParts": [
                                    {
                                        "text": {
                                            "content": "Playlist Owner",
                                            "commandRuns": [
                                                {
                                                    "onTap": {
                                                        "innertubeCommand": {
                                                            "browseEndpoint": {"canonicalBaseUrl": "/@owner"}
                                                        }
                                                    }
                                                }
                                            ],
                                        }
                                    }
                                ]
                            }
                        ]
                    }
                },
            }
        },
    }


def playlist_item(playlist_id: str, **kwargs: Any) -> dict[str, Any]:
    return {"lockupViewModel": playlist_lockup(playlist_id, **kwargs)}


def playlist_video_renderer(video_id: str, index: int = 1, playlist_id: str = "PLtest") -> dict[str, Any]:
    return {
        "videoId": video_id,
        "index": {"simpleText": str(index)},
        "title": {"runs": [{"text": f"Track {index}"}]},
        "thumbnail": {"thumbnails": [{"url": f"https://i.ytimg.com/vi/{video_id}/default.jpg", "width": 120, "height": 90}]},
        "lengthText": {"simpleText": "3:05"},
        "shortBylineText": {
            "runs": [{"text": "Uploader", "navigationEndpoint": {"browseEndpoint": {"canonicalBaseUrl": "/@uploader"}}}]
        },
        "videoInfo": {"runs": [{"text": "10K views"}, {"text": " • "}, {"text": "1 year ago"}]},
        "navigationEndpoint": {
            "commandMetadata": {"webCommandMetadata": {"url": f"/watch?v={video_id}&list={playlist_id}&index={index}"}}
        },
    }


def playlist_video_item(video_id: str, index: int = 1) -> dict[str, Any]:
    return {"playlistVideoRenderer": playlist_video_renderer(video_id, index)}


def continuation_item(token: str) -> dict[str, Any]:
    return {"continuationItemRenderer": {"continuationEndpoint": {"continuationCommand": {"token": token}}}}


# --- Pages ---


def html_page(initial_data: dict[str, Any], player: dict[str, Any] | None = None) -> str:
    parts = [
        "<html><head><script>",
        f'ytcfg.set({{"INNERTUBE_API_KEY":"{API_KEY}","INNERTUBE_CLIENT_VERSION":"{CLIENT_VERSION}"}});',
        "</script></head><body><script>",
        f"var ytInitialData = {json.dumps(initial_data)};",
        "</script>",
    ]
    if player is not None:
        parts.append(f"<script>var ytInitialPlayerResponse = {json.dumps(player)};</script>")
    parts.append("</body></html>")
    return "".join(parts)


def search_data(items: list[dict[str, Any]], token: str | None = None, estimated: str = "100") -> dict[str, Any]:
    sections: list[dict[str, Any]] = [{"itemSectionRenderer": {"contents": items}}]
    if token:
        sections.append(continuation_item(token))
    return {
        "estimatedResults": estimated,
        "contents": {
            "twoColumnSearchResultsRenderer": {
                "primaryContents": {"sectionListRenderer": {"contents": sections}}
            }
        },
    }


def search_continuation(items: list[dict[str, Any]], token: str | None = None) -> dict[str, Any]:
    continuation_items: list[dict[str, Any]] = [{"itemSectionRenderer": {"contents": items}}]
    if token:
        continuation_items.append(continuation_item(token))
    return {
        "onResponseReceivedCommands": [
            {"appendContinuationItemsAction": {"continuationItems": continuation_items}}
        ]
    }


def playlist_header(title: str = "My Playlist", count: str = "250 videos", views: str = "1,000 views") -> dict[str, Any]:
    return {
        "pageTitle": title,
        "content": {
            "pageHeaderViewModel": {
                "description": {"descriptionPreviewViewModel": {"description": {"content": "Best tracks"}}},
                "heroImage": {
                    "contentPreviewImageViewModel": {
                        "image": {"sources": [{"url": "https://i.ytimg.com/vi/hero/hqdefault.jpg", "width": 480, "height": 270}]}
                    }
                },
                "metadata": {
                    "contentMetadataViewModel": {
                        "metadataRows": [
                            {
                                "metadataParts": [
                                    {
                                        "avatarStack": {
                                            "avatarStackViewModel": {
                                                "text": {
                                                    "content": "by Someone",
                                                    "commandRuns": [
                                                        {
                                                            "onTap": {
                                                                "innertubeCommand": {
                                                                    "browseEndpoint": {"canonicalBaseUrl": "/@someone"}
                                                                }
                                                            }
                                                        }
                                                    ],
                                                },
                                                "avatars": [
                                                    {"avatarViewModel": {"image": {"sources": [{"url": "https://yt3.ggpht.com/someone=s48"}]}}}
                                                ],
                                            }
                                        }
                                    }
                                ]
                            },
                            {
                                "metadataParts": [
                                    {"text": {"content": "Playlist"}},
                                    {"text": {"content": count}},
                                    {"text": {"content": views}},
                                ]
                            },
                        ]
                    }
                },
            }
        },
    }


def playlist_data(
    videos: list[dict[str, Any]],
    token: str | None = None,
    header: dict[str, Any] | None = None,
    alerts: list[dict[str, Any]] | None = None,
) -> dict[str, Any]:
    contents = list(videos)
    if token:
        contents.append(continuation_item(token))
    data: dict[str, Any] = {
        "contents": {
            "twoColumnBrowseResultsRenderer": {
                "tabs": [
                    {
                        "tabRenderer": {
                            "content": {
                                "sectionListRenderer": {
                                    "contents": [
                                        {
                                            "itemSectionRenderer": {
                                                "contents": [{"playlistVideoListRenderer": {"contents": contents}}]
                                            }
                                        }
                                    ]
                                }
                            }
                        }
                    }
                ]
            }
        },
        "header": {"pageHeaderRenderer": header if header is not None else playlist_header()},
    }
    if alerts is not None:
        data["alerts"] = alerts
    return data


def playlist_continuation(videos: list[dict[str, Any]], token: str | None = None) -> dict[str, Any]:
    items = list(videos)
    if token:
        items.append(continuation_item(token))
    return {"onResponseReceivedActions": [{"appendContinuationItemsAction": {"continuationItems": items}}]}


def alert(message: str, alert_type: str | None = "ERROR") -> dict[str, Any]:
    renderer: dict[str, Any] = {"text": {"runs": [{"text": message}]}}
    if alert_type is not None:
        renderer["type"] = alert_type
    return {"alertRenderer": renderer}


def player_response(video_id: str = "dQw4w9WgXcQ", status: str = "OK", reason: str | None = None) -> dict[str, Any]:
    playability: dict[str, Any] = {"status": status}
    if reason is not None:
        playability["reason"] = reason
    return {
        "playabilityStatus": playability,
        "videoDetails": {
            "videoId": video_id,
            "title": "Never Gonna Give You Up",
            "lengthSeconds": "213",
            "keywords": ["rick astley", "80s"],
            "channelId": "UCuAXFkgsw1L7xaCfnd5JJOw",
            "shortDescription": "The official video",
            "viewCount": "1500000000",
            "author": "Rick Astley",
            "isPrivate": False,
            "isLive": False,
            "allowRatings": True,
            "thumbnail": {
                "thumbnails": [
                    {"url": "https://i.ytimg.com/vi/x/default.jpg", "width": 120, "height": 90},
                    {"url": "https://i.ytimg.com/vi/x/maxresdefault.jpg", "width": 1280, "height": 720},
                ]
            },
        },
        "microformat": {
            "playerMicroformatRenderer": {
                "publishDate": "2009-10-24T23:57:33-07:00",
                "category": "Music",
                "isUnlisted": False,
                "ownerProfileUrl": "http://www.youtube.com/@RickAstleyYT",
            }
        },
    }


def watch_data(subscribers: str = "4.2M subscribers", likes: str = "18,000,000") -> dict[str, Any]:
    return {
        "contents": {
            "twoColumnWatchNextResults": {
                "results": {
                    "results": {
                        "contents": [
                            {
                                "videoPrimaryInfoRenderer": {
                                    "title": {"runs": [{"text": "Rick Astley - Never Gonna Give You Up"}]},
                                    "dateText": {"simpleText": "Oct 25, 2009"},
                                    "videoActions": {
                                        "menuRenderer": {
                                            "topLevelButtons": [
                                                {
                                                    "likeButtonViewModel": {
                                                        "accessibilityText": f"like this video along with {likes} other people"
                                                    }
                                                }
                                            ]
                                        }
                                    },
                                }
                            },
                            {
                                "videoSecondaryInfoRenderer": {
                                    "owner": {
                                        "videoOwnerRenderer": {
                                            "title": {"runs": [{"text": "Rick Astley"}]},
                                            "navigationEndpoint": {"browseEndpoint": {"canonicalBaseUrl": "/@RickAstleyYT"}},
                                            "thumbnail": {"thumbnails": [{"url": "https://yt3.ggpht.com/rick=s88"}]},
                                            "subscriberCountText": {"simpleText": subscribers},
                                            "badges": [
                                                {"metadataBadgeRenderer": {"style": "BADGE_STYLE_TYPE_VERIFIED_ARTIST", "icon": {"iconType": "OFFICIAL_ARTIST_BADGE"}}}
                                            ],
                                        }
                                    }
                                }
                            },
                        ]
                    }
                }
            }
        }
    }


# --- Transport ---


class FakeYouTube:
    """Serves canned pages by URL path and continuation responses by token.

    Every request is recorded, so tests can assert how many network calls
    were made and which continuation tokens were sent.
    """

    def __init__(
        self,
        pages: dict[str, str] | None = None,
        continuations: dict[str, dict[str, Any]] | None = None,
        status: int = 200,
    ) -> None:
        self.pages = pages or {}
        self.continuations = continuations or {}
        self.status = status
        self.requests: list[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.status != 200:
            return httpx.Response(self.status)
        if request.method == "GET":
            html = self.pages.get(request.url.path)
            if html is None:
                return httpx.Response(404)
            return httpx.Response(200, text=html)
        body = json.loads(request.content)
        data = self.continuations.get(body.get("continuation"))
        if data is None:
            return httpx.Response(404)
        return httpx.Response(200, json=data)

    def client(self) -> HttpClient:
        return HttpClient(ClientSettings(), transport=httpx.MockTransport(self.handler))

    @property
    def calls(self) -> int:
        return len(self.requests)

    @property
    def posted_tokens(self) -> list[str]:
        return [json.loads(r.content)["continuation"] for r in self.requests if r.method == "POST"]
