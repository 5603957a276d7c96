"""twtools CLI entry point."""

from __future__ import annotations

import importlib.metadata
from typing import Annotated

import typer

from twtools.cli.archive import archive_cmd
from twtools.cli.cache import cache_app
from twtools.cli.tweet import tweet_cmd
from twtools.cli.video import video_cmd


def _installed_version() -> str:
    try:
        return importlib.metadata.version("twtools")
    except importlib.metadata.PackageNotFoundError:
        return "dev"


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"twtools {_installed_version()}")
        raise typer.Exit()


app = typer.Typer(
    name="twtools",
    help=(
        "twtools: fetch, cache, and archive tweets.\n\n"
        "  twtools tweet    Tweet as JSON (formatted or raw), cached locally.\n"
        "  twtools archive  Idempotent archive: JSON + media + metadata marker."
    ),
    add_completion=False,
)


@app.callback()
def main_callback(
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            callback=_version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = False,
) -> None:
    """twtools: fetch, cache, and archive tweets."""


app.command("tweet")(tweet_cmd)
app.command("archive")(archive_cmd)
app.command("video")(video_cmd)
app.add_typer(cache_app, name="cache")


@app.command("version")
def version_cmd() -> None:
    """Show the installed twtools version."""
    typer.echo(f"twtools {_installed_version()}")


if __name__ == "__main__":
    app()
