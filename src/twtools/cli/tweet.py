"""twtools tweet: fetch one tweet as JSON.

Usage:
  twtools tweet 1629307668568633344
  twtools tweet https://x.com/user/status/1629307668568633344 --raw
  twtools tweet 1629307668568633344 --force     # bypass cache
"""

from __future__ import annotations

from typing import Annotated

import typer

from twtools.cache.store import ObjectCache
from twtools.cli.common import (
    CacheDirOption,
    echo_json,
    make_client,
    parse_tweet_ref,
    reported_errors,
    resolve_config,
)
from twtools.syndication.formatter import format_tweet


def tweet_cmd(
    ref: Annotated[
        str,
        typer.Argument(metavar="TWEET", help="Tweet ID or full URL."),
    ],
    force: Annotated[
        bool,
        typer.Option("--force", help="Bypass cache and fetch fresh data."),
    ] = False,
    raw: Annotated[
        bool,
        typer.Option("--raw", help="Output the raw API response (not formatted)."),
    ] = False,
    cache_dir: CacheDirOption = None,
) -> None:
    """Fetch tweet data from the syndication API (cached)."""
    tweet_id = parse_tweet_ref(ref)
    cfg = resolve_config(cache_dir)
    cache = ObjectCache(cfg.cache.dir)

    with reported_errors():
        document = None if force else cache.get(tweet_id)
        if document is None:
            document = make_client(cfg).fetch_tweet(tweet_id)
            cache.put(tweet_id, document)

        echo_json(document if raw else format_tweet(document).to_dict())
