"""Tests for twtools rich error messages."""

from __future__ import annotations

import pytest

from twtools.cli.errors import (
    err_config,
    err_fetch_failed,
    err_invalid_tweet_ref,
    err_io,
    err_malformed_response,
    err_tweet_not_found,
    err_ytdlp_failed,
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _has_action(msg: str) -> bool:
    """Every error must contain a cause AND an actionable instruction."""
    lower = msg.lower()
    return any(kw in lower for kw in ["use", "install:", "check", "run ", "fix", "retry"])


ALL_MESSAGES = [
    err_invalid_tweet_ref("hello"),
    err_tweet_not_found("999999999"),
    err_fetch_failed("https://cdn.syndication.twimg.com/tweet-result", 500, "Internal Server Error"),
    err_malformed_response("Empty response for tweet: 1"),
    err_ytdlp_failed("yt-dlp not found on PATH."),
    err_config("http.timeout must be > 0"),
    err_io("/root/.cache/twitter-tools", "Permission denied"),
]


@pytest.mark.parametrize("msg", ALL_MESSAGES)
def test_every_message_has_action(msg: str) -> None:
    assert _has_action(msg)


@pytest.mark.parametrize("msg", ALL_MESSAGES)
def test_every_message_is_marked_error(msg: str) -> None:
    assert msg.startswith("[red]Error:[/]")


def test_invalid_ref_echoes_input() -> None:
    assert "'hello'" in err_invalid_tweet_ref("hello")


def test_not_found_contains_id() -> None:
    assert "Tweet not found: 999999999" in err_tweet_not_found("999999999")


def test_fetch_failed_with_status() -> None:
    msg = err_fetch_failed("https://x", 500, "Internal Server Error")
    assert "500 Internal Server Error" in msg


def test_fetch_failed_connection_error() -> None:
    msg = err_fetch_failed("https://x", None, "timed out")
    assert "timed out" in msg
    assert "None" not in msg


def test_ytdlp_install_hint() -> None:
    assert "pip install yt-dlp" in err_ytdlp_failed("yt-dlp not found on PATH.")


def test_io_suggests_cache_dir() -> None:
    assert "--cache-dir" in err_io("/x", "Permission denied")


def test_io_names_path_without_assuming_write() -> None:
    msg = err_io("/root/.cache/twitter-tools/objects", "Permission denied")
    assert "I/O error on '/root/.cache/twitter-tools/objects'" in msg
    assert "Could not write" not in msg


def test_io_without_path() -> None:
    assert "I/O error: Disk quota exceeded" in err_io("", "Disk quota exceeded")
