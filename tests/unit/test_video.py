"""Tests for single-video download (direct MP4 or yt-dlp fallback)."""

from __future__ import annotations

import subprocess
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from conftest import VIDEO_720, FakeClient
from twtools.cache.store import ObjectCache
from twtools.video import YtDlpError, download_with_ytdlp, fetch_video


def _fake_ytdlp():
    calls: list[tuple[str, Path]] = []

    def run(url: str, output: Path) -> Path:
        calls.append((url, output))
        output.write_bytes(b"ytdlp")
        return output

    return run, calls


def test_direct_download_best_variant(tmp_path, cache_root, fake_client, fake_download):
    out = tmp_path / "clip.mp4"
    result = fetch_video("42", out, ObjectCache(cache_root), fake_client, download=fake_download)

    assert result.method == "direct"
    assert fake_download.urls == [VIDEO_720]
    assert result.size == len(VIDEO_720.encode())
    assert result.to_dict() == {"success": True, "path": str(out.resolve()), "size": result.size, "method": "direct"}


def test_direct_download_caches_document(tmp_path, cache_root, fake_client, fake_download):
    cache = ObjectCache(cache_root)
    fetch_video("42", tmp_path / "a.mp4", cache, fake_client, download=fake_download)
    fetch_video("42", tmp_path / "b.mp4", cache, fake_client, download=fake_download)
    assert fake_client.calls == ["42"]


def test_no_video_falls_back_to_ytdlp(tmp_path, cache_root, fake_download):
    client = FakeClient({"7": {"id_str": "7", "text": "no video here"}})
    ytdlp, calls = _fake_ytdlp()

    result = fetch_video("7", tmp_path / "v.mp4", ObjectCache(cache_root), client, download=fake_download, ytdlp=ytdlp)

    assert result.method == "ytdlp"
    assert calls == [("https://twitter.com/i/status/7", (tmp_path / "v.mp4").resolve())]
    assert fake_download.calls == []
    assert "size" not in result.to_dict()


def test_force_ytdlp_skips_lookup(tmp_path, cache_root, fake_client, fake_download):
    ytdlp, calls = _fake_ytdlp()
    result = fetch_video(
        "42", tmp_path / "v.mp4", ObjectCache(cache_root), fake_client,
        use_ytdlp=True, download=fake_download, ytdlp=ytdlp,
    )
    assert result.method == "ytdlp"
    assert fake_client.calls == []
    assert len(calls) == 1


def test_ytdlp_missing_binary():
    with patch("twtools.video.shutil.which", return_value=None):
        with pytest.raises(YtDlpError, match="not found"):
            download_with_ytdlp("https://twitter.com/i/status/1", Path("out.mp4"))


def test_ytdlp_runs_without_shell(tmp_path):
    with patch("twtools.video.shutil.which", return_value="/usr/bin/yt-dlp"), patch(
        "twtools.video.subprocess.run", return_value=MagicMock(returncode=0)
    ) as run:
        download_with_ytdlp("https://twitter.com/i/status/1", tmp_path / "o.mp4")

    args, kwargs = run.call_args
    assert args[0][:2] == ["yt-dlp", "https://twitter.com/i/status/1"]
    assert kwargs["shell"] is False


def test_ytdlp_failure_raises(tmp_path):
    err = subprocess.CalledProcessError(1, ["yt-dlp"], stderr="ERROR: Unsupported URL")
    with patch("twtools.video.shutil.which", return_value="/usr/bin/yt-dlp"), patch(
        "twtools.video.subprocess.run", side_effect=err
    ):
        with pytest.raises(YtDlpError, match="Unsupported URL"):
            download_with_ytdlp("https://twitter.com/i/status/1", tmp_path / "o.mp4")
