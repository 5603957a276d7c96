"""twtools cache CLI commands.

Commands:
  twtools cache stats          count cached tweets and archives
  twtools cache clear <tweet>  drop the cached raw document for one tweet
"""

from __future__ import annotations

from typing import Annotated

import typer

from twtools.cache.store import ObjectCache
from twtools.cli.common import (
    CacheDirOption,
    echo_json,
    parse_tweet_ref,
    reported_errors,
    resolve_config,
)

cache_app = typer.Typer(
    name="cache",
    help="Inspect and clear the local tweet cache.",
    add_completion=False,
)


@cache_app.command("stats")
def cache_stats_cmd(cache_dir: CacheDirOption = None) -> None:
    """Show cache location and counts."""
    cfg = resolve_config(cache_dir)
    with reported_errors():
        stats = ObjectCache(cfg.cache.dir).stats()
    echo_json(stats.to_dict())


@cache_app.command("clear")
def cache_clear_cmd(
    ref: Annotated[
        str,
        typer.Argument(metavar="TWEET", help="Tweet ID or full URL."),
    ],
    cache_dir: CacheDirOption = None,
) -> None:
    """Remove the cached raw document for one tweet (archives are kept)."""
    tweet_id = parse_tweet_ref(ref)
    cfg = resolve_config(cache_dir)
    with reported_errors():
        removed = ObjectCache(cfg.cache.dir).evict(tweet_id)
    echo_json({"success": True, "tweet_id": tweet_id, "removed": removed}, indent=None)
