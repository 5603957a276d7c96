"""twtools rich error messages: actionable feedback.

Every error shown to the user must contain:
  1. What went wrong (clear cause)
  2. The exact action the user should take to fix it

Messages go to stderr; stdout is reserved for JSON output.

Usage:
    from twtools.cli.errors import err_tweet_not_found
    err_console.print(err_tweet_not_found("123"))
    raise typer.Exit(1)
"""

from __future__ import annotations


def err_invalid_tweet_ref(ref: str) -> str:
    """Argument is neither a numeric ID nor a tweet URL."""
    return (
        f"[red]Error:[/] Could not extract tweet ID from: '{ref}'\n"
        "  Use a numeric ID or a URL like https://x.com/<user>/status/<id>"
    )


def err_tweet_not_found(tweet_id: str) -> str:
    """Lookup answered 404: deleted, protected, or mistyped."""
    return (
        f"[red]Error:[/] Tweet not found: {tweet_id}\n"
        "  Check the ID; deleted and protected tweets are not available."
    )


def err_fetch_failed(url: str, status: int | None, reason: str) -> str:
    """Non-404 HTTP failure or connection error."""
    detail = f"{status} {reason}" if status is not None else reason
    return (
        f"[red]Error:[/] Failed to fetch '{url}': {detail}\n"
        "  Nothing was retried. Run the command again once the endpoint responds."
    )


def err_malformed_response(message: str) -> str:
    """Lookup body was empty or not JSON."""
    return (
        f"[red]Error:[/] {message}\n"
        "  The syndication endpoint returned no usable data.\n"
        "  Retry later or use:  twtools video <id> --ytdlp"
    )


def err_ytdlp_failed(message: str) -> str:
    """yt-dlp fallback unavailable or failed."""
    return (
        f"[red]Error:[/] {message}\n"
        "  Install:  pip install yt-dlp  (the yt-dlp binary must be on PATH)"
    )


def err_config(message: str) -> str:
    """Config file could not be used."""
    return (
        f"[red]Error:[/] Invalid configuration: {message}\n"
        "  Fix ~/.twtools/config.yaml or twtools.yaml in the current directory."
    )


def err_io(path: str, message: str) -> str:
    """Local read/write failure in the cache or archive directory."""
    target = f" on '{path}'" if path else ""
    return (
        f"[red]Error:[/] I/O error{target}: {message}\n"
        "  Check permissions or use:  --cache-dir <writable dir>"
    )
