# Copyright (c) 2026 Pointmatic
#
# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Structured logging setup (console + JSONL).

Every record carries the fetch it belongs to: ``target`` (query, playlist
ID, or video ID), and for paginated fetches the user-facing ``page``
number and the upstream ``chunk`` index (0 is the initial HTML page,
1.. are continuation responses).
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler


LOGGER_NAME = "yt_search"

# Fields copied from ``extra`` into each JSONL record, in output order.
EVENT_FIELDS = ("target", "event", "page", "chunk", "details", "error")

_console = Console(stderr=True)


class JsonlFormatter(logging.Formatter):
    """Formats log records as single-line JSON objects."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
        }
        for field in EVENT_FIELDS:
            entry[field] = getattr(record, field, None)
        if record.getMessage():
            entry["message"] = record.getMessage()
        return json.dumps(entry, default=str)


class JsonlFileHandler(logging.FileHandler):
    """File handler that uses JsonlFormatter by default."""

    def __init__(self, path: Path) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        super().__init__(str(path), mode="a", encoding="utf-8")
        self.setFormatter(JsonlFormatter())


def setup_logging(*, verbose: bool = False, jsonl_path: Path | None = None) -> logging.Logger:
    """Configure and return the yt_search logger.

    The library itself never calls this; applications (and the CLI) do.
    httpx logs one INFO line per request, so it is held at WARNING unless
    ``verbose`` is set.

    Args:
        verbose: If True, set level to DEBUG; otherwise INFO.
        jsonl_path: If provided, also write structured JSONL logs to this file.

    Returns:
        The configured 'yt_search' logger.
    """
    level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger(LOGGER_NAME)
    logger.handlers.clear()
    logger.setLevel(level)
    logging.getLogger("httpx").setLevel(logging.DEBUG if verbose else logging.WARNING)

    rich_handler = RichHandler(
        console=_console,
        show_time=verbose,
        show_path=verbose,
        rich_tracebacks=True,
        markup=False,
    )
    rich_handler.setLevel(level)
    logger.addHandler(rich_handler)

    if jsonl_path is not None:
        jsonl_handler = JsonlFileHandler(jsonl_path)
        jsonl_handler.setLevel(logging.DEBUG)
        logger.addHandler(jsonl_handler)

    return logger


def log_event(
    level: int,
    message: str,
    *,
    target: str | None = None,
    event: str | None = None,
    page: int | None = None,
    chunk: int | None = None,
    details: str | None = None,
    error: str | None = None,
) -> None:
    """Log a structured fetch or pagination event."""
    logging.getLogger(LOGGER_NAME).log(
        level,
        message,
        extra={
            "target": target,
            "event": event,
            "page": page,
            "chunk": chunk,
            "details": details,
            "error": error,
        },
    )
