# Copyright (c) 2026 Pointmatic
#
# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""CLI entry point for yt-search."""

from __future__ import annotations

import asyncio
import logging
import sys
from pathlib import Path

import click
from rich.console import Console

from yt_search import __version__, get_video_details, list_playlist_videos, search
from yt_search.core.constants import CONTENT_TYPES, SORT_ORDERS
from yt_search.core.errors import YtSearchError
from yt_search.core.logging import LOGGER_NAME, setup_logging
from yt_search.core.options import ClientSettings
from yt_search.services.http import HttpClient


# Exit codes
EXIT_OK = 0
EXIT_ERROR = 1

_stdout = Console()


def _pages_option(fn):
    return click.option(
        "--pages",
        type=click.IntRange(min=0),
        default=1,
        show_default=True,
        help="Number of pages to print (0 = all).",
    )(fn)


def _emit(payload: dict) -> None:
    _stdout.print_json(data=payload)


async def _print_pages(first, pages: int) -> None:
    """Print up to ``pages`` pages starting at ``first`` (0 walks to the end)."""
    page = first
    printed = 0
    while page is not None:
        _emit(page.model_dump(mode="json"))
        printed += 1
        if pages and printed >= pages:
            break
        page = await page.next_page()


def _run(coro) -> None:
    """Run a command coroutine and map YtSearchError to exit code 1."""
    log = logging.getLogger(LOGGER_NAME)
    try:
        asyncio.run(coro)
    except YtSearchError as exc:
        log.error("%s", exc)
        sys.exit(EXIT_ERROR)


@click.group()
@click.version_option(version=__version__, prog_name="yt_search")
@click.option("--verbose", is_flag=True, default=None, help="Verbose console output.")
@click.option("--log-file", type=click.Path(path_type=Path), default=None, help="Also write JSONL logs here.")
@click.pass_context
def cli(ctx: click.Context, verbose: bool | None, log_file: Path | None) -> None:
    """Search YouTube, list playlists, and fetch video details."""
    overrides = {} if verbose is None else {"verbose": verbose}
    settings = ClientSettings(**overrides)
    setup_logging(verbose=settings.verbose, jsonl_path=log_file)
    ctx.obj = HttpClient(settings)


@cli.command("search")
@click.argument("query")
@click.option("--type", "content_type", type=click.Choice(CONTENT_TYPES), default="video", show_default=True)
@click.option("--sort", "sort_order", type=click.Choice(SORT_ORDERS), default="relevance", show_default=True)
@click.option("--limit", "page_size", type=int, default=20, show_default=True, help="Results per page.")
@_pages_option
@click.pass_obj
def search_cmd(http: HttpClient, query, content_type, sort_order, page_size, pages):
    """Search YouTube for QUERY."""
    options = {"content_type": content_type, "sort_order": sort_order, "page_size": page_size}

    async def main() -> None:
        first = await search(query, options, http=http)
        await _print_pages(first, pages)

    _run(main())


@cli.command("playlist")
@click.argument("playlist_id")
@click.option("--limit", "page_size", type=int, default=100, show_default=True, help="Videos per page.")
@_pages_option
@click.pass_obj
def playlist_cmd(http: HttpClient, playlist_id, page_size, pages):
    """List the videos of PLAYLIST_ID."""

    async def main() -> None:
        first = await list_playlist_videos(playlist_id, page_size, http=http)
        await _print_pages(first, pages)

    _run(main())


@cli.command("video")
@click.argument("video_id")
@click.pass_obj
def video_cmd(http: HttpClient, video_id):
    """Show the details of VIDEO_ID."""

    async def main() -> None:
        details = await get_video_details(video_id, http=http)
        _emit(details.model_dump(mode="json"))

    _run(main())


if __name__ == "__main__":
    cli()
