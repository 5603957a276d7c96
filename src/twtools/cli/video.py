"""twtools video: download the video of a tweet.

Usage:
  twtools video https://twitter.com/user/status/1234567890
  twtools video 1234567890 -o my_video.mp4
  twtools video https://x.com/user/status/1234567890 --ytdlp
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from twtools.cache.store import ObjectCache
from twtools.cli.common import (
    CacheDirOption,
    echo_json,
    err_console,
    make_client,
    parse_tweet_ref,
    reported_errors,
    resolve_config,
)
from twtools.video import fetch_video


def video_cmd(
    ref: Annotated[
        str,
        typer.Argument(metavar="TWEET", help="Tweet ID or full URL."),
    ],
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Output file path (default: video_<id>.mp4)."),
    ] = None,
    ytdlp: Annotated[
        bool,
        typer.Option("--ytdlp", help="Force yt-dlp (e.g. for age-restricted content)."),
    ] = False,
    cache_dir: CacheDirOption = None,
) -> None:
    """Download the best-quality video of a tweet."""
    tweet_id = parse_tweet_ref(ref)
    cfg = resolve_config(cache_dir)
    target = output if output is not None else Path(f"video_{tweet_id}.mp4")

    with reported_errors():
        if ytdlp:
            err_console.print("[dim]Downloading with yt-dlp…[/]")
        result = fetch_video(
            tweet_id,
            target,
            cache=ObjectCache(cfg.cache.dir),
            client=make_client(cfg),
            use_ytdlp=ytdlp,
        )

    if result.method == "ytdlp" and not ytdlp:
        err_console.print("[yellow]No video in API response, used yt-dlp.[/]")
    echo_json(result.to_dict(), indent=None)
