"""twtools archive: archive a tweet with all media.

Idempotent: a tweet that already has metadata.json is not fetched again
unless --force is given.

Usage:
  twtools archive https://twitter.com/user/status/1234567890
  twtools archive 1234567890 --dir ./my-archive
  twtools archive https://x.com/user/status/1234567890 --force
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from twtools.cache.archive import ArchiveManager
from twtools.cli.common import (
    CacheDirOption,
    echo_json,
    err_console,
    make_client,
    parse_tweet_ref,
    reported_errors,
    resolve_config,
)


def _report_download(kind: str, filename: str) -> None:
    err_console.print(f"  [dim]↓ Downloading {kind}:[/] {filename}")


def archive_cmd(
    ref: Annotated[
        str,
        typer.Argument(metavar="TWEET", help="Tweet ID or full URL."),
    ],
    dest: Annotated[
        Path | None,
        typer.Option("--dir", help="Custom output directory (default: <cache>/archives/<id>)."),
    ] = None,
    force: Annotated[
        bool,
        typer.Option("--force", help="Re-archive even if already archived."),
    ] = False,
    cache_dir: CacheDirOption = None,
) -> None:
    """Archive a tweet (raw JSON, formatted JSON, media, metadata)."""
    tweet_id = parse_tweet_ref(ref)
    cfg = resolve_config(cache_dir)
    manager = ArchiveManager(
        cfg.cache.dir,
        client=make_client(cfg),
        user_agent=cfg.http.user_agent,
        timeout=cfg.http.timeout,
        on_download=_report_download,
    )

    with reported_errors():
        result = manager.archive(tweet_id, force=force, destination=dest)

    if result.cached:
        err_console.print(f"[dim]↷ Already archived: {result.metadata.archive_dir}[/]")
    else:
        err_console.print(
            f"[green]✓[/] Archived {tweet_id}  ({len(result.metadata.media_files)} media files)"
        )
    echo_json(result.to_dict(), indent=None)
