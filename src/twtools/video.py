"""Single-video download: direct MP4 from the syndication document, or yt-dlp.

Security requirements:
- shell=False always (no command injection).
- yt-dlp receives the canonical tweet URL, never user-supplied text.
"""

from __future__ import annotations

import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable

from twtools.cache.store import ObjectCache
from twtools.http import download_file
from twtools.syndication.client import SyndicationClient, tweet_url
from twtools.syndication.formatter import best_video_url

_YTDLP = "yt-dlp"


class YtDlpError(RuntimeError):
    """yt-dlp is not installed or exited with an error."""


@dataclass
class VideoResult:
    path: Path
    method: str  # direct | ytdlp
    size: int | None = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"success": True, "path": str(self.path)}
        if self.size is not None:
            out["size"] = self.size
        out["method"] = self.method
        return out


def download_with_ytdlp(url: str, output: Path) -> Path:
    """Run ``yt-dlp <url> -o <output>`` (shell=False). Raises YtDlpError on failure."""
    if shutil.which(_YTDLP) is None:
        raise YtDlpError("yt-dlp not found on PATH.")
    try:
        subprocess.run(
            [_YTDLP, url, "-o", str(output), "--no-warnings"],
            shell=False,
            check=True,
            capture_output=True,
            text=True,
        )
    except subprocess.CalledProcessError as exc:
        raise YtDlpError(f"yt-dlp failed for {url}: {(exc.stderr or '').strip()}") from None
    return output


def fetch_video(
    tweet_id: str,
    output: Path,
    cache: ObjectCache,
    client: SyndicationClient,
    use_ytdlp: bool = False,
    download: Callable[..., Any] | None = None,
    ytdlp: Callable[[str, Path], Path] | None = None,
) -> VideoResult:
    """Download the best video of *tweet_id* to *output*.

    The raw document is read from (or stored into) *cache*. When it holds no
    MP4 variant, or *use_ytdlp* is set, yt-dlp is used instead.
    """
    download = download if download is not None else download_file
    ytdlp = ytdlp if ytdlp is not None else download_with_ytdlp
    output = output.resolve()

    if use_ytdlp:
        ytdlp(tweet_url(tweet_id), output)
        return VideoResult(path=output, method="ytdlp")

    document = cache.get(tweet_id)
    if document is None:
        document = client.fetch_tweet(tweet_id)
        cache.put(tweet_id, document)

    video_url = best_video_url(document)
    if video_url is None:
        ytdlp(tweet_url(tweet_id), output)
        return VideoResult(path=output, method="ytdlp")

    output.parent.mkdir(parents=True, exist_ok=True)
    download(
        video_url,
        output,
        headers={"User-Agent": client.user_agent},
        timeout=client.timeout,
    )
    return VideoResult(path=output, method="direct", size=output.stat().st_size)
