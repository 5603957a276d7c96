"""Shared CLI plumbing: stderr console, config resolution, error reporting."""

from __future__ import annotations

import json
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Annotated, Any

import typer
from rich.console import Console

from twtools.cli.errors import (
    err_config,
    err_fetch_failed,
    err_invalid_tweet_ref,
    err_io,
    err_malformed_response,
    err_tweet_not_found,
    err_ytdlp_failed,
)
from twtools.config import ConfigError, TwtoolsConfig, load_config
from twtools.http import FetchError
from twtools.syndication.client import (
    MalformedResponseError,
    SyndicationClient,
    TweetNotFoundError,
    extract_tweet_id,
)
from twtools.video import YtDlpError

# Progress and errors only; stdout carries nothing but JSON.
err_console = Console(stderr=True)

CacheDirOption = Annotated[
    Path | None,
    typer.Option("--cache-dir", help="Cache root (default: ~/.cache/twitter-tools)."),
]


def resolve_config(cache_dir: Path | None) -> TwtoolsConfig:
    """Load layered config and apply the --cache-dir flag on top."""
    try:
        cfg = load_config()
    except ConfigError as exc:
        err_console.print(err_config(str(exc)))
        raise typer.Exit(1)
    if cache_dir is not None:
        cfg.cache.dir = cache_dir
    return cfg


def make_client(cfg: TwtoolsConfig) -> SyndicationClient:
    return SyndicationClient(user_agent=cfg.http.user_agent, timeout=cfg.http.timeout)


def parse_tweet_ref(ref: str) -> str:
    """Tweet ID from an ID-or-URL argument; exits 1 on junk input."""
    try:
        return extract_tweet_id(ref)
    except ValueError:
        err_console.print(err_invalid_tweet_ref(ref))
        raise typer.Exit(1)


def echo_json(data: Any, indent: int | None = 2) -> None:
    typer.echo(json.dumps(data, indent=indent, ensure_ascii=False))


@contextmanager
def reported_errors() -> Iterator[None]:
    """Turn domain errors into a rich message on stderr plus exit code 1."""
    try:
        yield
    except TweetNotFoundError as exc:
        err_console.print(err_tweet_not_found(exc.tweet_id))
        raise typer.Exit(1)
    except FetchError as exc:
        err_console.print(err_fetch_failed(exc.url, exc.status, exc.reason))
        raise typer.Exit(1)
    except MalformedResponseError as exc:
        err_console.print(err_malformed_response(str(exc)))
        raise typer.Exit(1)
    except YtDlpError as exc:
        err_console.print(err_ytdlp_failed(str(exc)))
        raise typer.Exit(1)
    except OSError as exc:
        err_console.print(err_io(str(exc.filename or ""), exc.strerror or str(exc)))
        raise typer.Exit(1)
    except ValueError as exc:
        err_console.print(f"[red]Error:[/] {exc}")
        raise typer.Exit(1)
