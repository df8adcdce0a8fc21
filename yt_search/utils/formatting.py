"""Duration, count, URL, and date formatting helpers."""

from __future__ import annotations

import math
from datetime import datetime
from urllib.parse import urlsplit, urlunsplit

from yt_search.core.errors import ErrorCode, YtSearchError

_SUFFIXES = ("", "K", "M", "B", "T")


def duration_to_seconds(text: str | None) -> int:
    """Convert "mm:ss" or "hh:mm:ss" text to seconds; 0 if malformed."""
    if not text:
        return 0
    total = 0
    for position, part in enumerate(reversed(text.strip().split(":"))):
        part = part.strip()
        if not part.isdecimal():
            return 0
        total += int(part) * 60**position
    return total


def seconds_to_duration(seconds: float | int | str | None) -> str:
    """Format seconds as "m:ss" or "h:mm:ss"."""
    try:
        value = float(seconds)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return "0:00"
    if math.isnan(value) or math.isinf(value) or value < 0:
        return "0:00"

    total = int(value)
    h, rem = divmod(total, 3600)
    m, s = divmod(rem, 60)
    if h:
        return f"{h}:{m:02d}:{s:02d}"
    return f"{m}:{s:02d}"


def shorten_number(n: int | float) -> str:
    """Shorten a count: 999 -> "999", 1500 -> "1.5K", 1000000 -> "1M"."""
    if n < 1000:
        return str(int(n))

    magnitude = min(int(math.log10(n) // 3), len(_SUFFIXES) - 1)
    scaled = round(n / 1000**magnitude, 1)
    if scaled >= 1000 and magnitude < len(_SUFFIXES) - 1:
        magnitude += 1
        scaled = round(n / 1000**magnitude, 1)

    text = f"{scaled:.1f}"
    if text.endswith(".0"):
        text = text[:-2]
    return text + _SUFFIXES[magnitude]


def normalize_url(text: str) -> str:
    """Return an absolute https URL with query string and fragment removed.

    Raises:
        YtSearchError: INVALID_URL when the text cannot be parsed as a URL.
    """
    raw = (text or "").strip()
    if raw.startswith("//"):
        raw = "https:" + raw
    elif "://" not in raw:
        raw = "https://" + raw

    try:
        parts = urlsplit(raw)
        host = parts.hostname
    except ValueError as exc:
        raise YtSearchError(
            ErrorCode.INVALID_URL, f"Invalid URL: {text!r}", {"url": text, "original_error": exc}
        ) from exc

    if not host:
        raise YtSearchError(ErrorCode.INVALID_URL, f"Invalid URL: {text!r}", {"url": text})

    return urlunsplit(("https", parts.netloc, parts.path, "", ""))


def humanize_date(iso_text: str | None, style: str = "long") -> str:
    """Render an ISO-8601 date for display; "" when it cannot be parsed.

    Styles: "long" (October 25, 2009), "medium" (Oct 25, 2009),
    "short" (10/25/2009), "iso" (2009-10-25).
    """
    if not iso_text or not isinstance(iso_text, str):
        return ""
    try:
        dt = datetime.fromisoformat(iso_text.strip().replace("Z", "+00:00"))
    except ValueError:
        return ""

    if style == "long":
        return f"{dt:%B} {dt.day}, {dt.year}"
    if style == "medium":
        return f"{dt:%b} {dt.day}, {dt.year}"
    if style == "short":
        return f"{dt.month}/{dt.day}/{dt.year}"
    if style == "iso":
        return dt.date().isoformat()
    return ""


def parse_count(text: str | None) -> int:
    """Extract the digits from a count label ("1,234 views" -> 1234)."""
    digits = "".join(ch for ch in str(text or "") if ch.isdecimal())
    return int(digits) if digits else 0
