"""Shared pytest fixtures."""

from __future__ import annotations

import copy
from pathlib import Path

import pytest

from twtools.http import FetchError

PHOTO_URL = "https://pbs.twimg.com/media/photo0.jpg"
THUMB_URL = "https://pbs.twimg.com/ext_tw_video_thumb/1/pu/img/thumb1.jpg"
VIDEO_360 = "https://video.twimg.com/ext_tw_video/1/pu/vid/640x360/low.mp4"
VIDEO_720 = "https://video.twimg.com/ext_tw_video/1/pu/vid/1280x720/high.mp4"


def tweet_42() -> dict:
    """Tweet with one photo and one video (360p@500kbps, 720p@1200kbps)."""
    return {
        "id_str": "42",
        "text": "Launch day! " + "x" * 150,
        "created_at": "2023-02-25T01:23:45.000Z",
        "user": {
            "name": "Jack",
            "screen_name": "jack",
            "profile_image_url_https": "https://pbs.twimg.com/profile_images/jack.jpg",
            "verified": False,
            "is_blue_verified": True,
        },
        "favorite_count": 120,
        "reply_count": 7,
        "quote_count": 3,
        "mediaDetails": [
            {"type": "photo", "media_url_https": PHOTO_URL},
            {
                "type": "video",
                "media_url_https": THUMB_URL,
                "video_info": {
                    "variants": [
                        {"content_type": "video/mp4", "bitrate": 500_000, "url": VIDEO_360},
                        {"content_type": "application/x-mpegURL", "url": "https://video.twimg.com/pl.m3u8"},
                        {"content_type": "video/mp4", "bitrate": 1_200_000, "url": VIDEO_720},
                    ]
                },
            },
        ],
    }


class FakeClient:
    """Stands in for SyndicationClient; records every lookup."""

    user_agent = "twtools-tests"
    timeout = None

    def __init__(self, documents: dict[str, dict] | None = None) -> None:
        self.documents = documents or {}
        self.calls: list[str] = []
        self.error: Exception | None = None

    def fetch_tweet(self, tweet_id: str) -> dict:
        self.calls.append(tweet_id)
        if self.error is not None:
            raise self.error
        return copy.deepcopy(self.documents[tweet_id])


class FakeDownload:
    """Stands in for http.download_file; writes the URL as the file body."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, Path]] = []
        self.fail_on: str | None = None

    def __call__(self, url: str, dest: Path, headers=None, timeout=None) -> Path:
        self.calls.append((url, Path(dest)))
        if url == self.fail_on:
            raise FetchError(url, 500, "Internal Server Error")
        Path(dest).write_bytes(url.encode("utf-8"))
        return Path(dest)

    @property
    def urls(self) -> list[str]:
        return [u for u, _ in self.calls]


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Keep the real ~/.twtools config and TWTOOLS_* env vars out of tests."""
    monkeypatch.setattr("twtools.config._GLOBAL_CONFIG_PATH", tmp_path / "no-global" / "config.yaml")
    monkeypatch.delenv("TWTOOLS_CACHE_DIR", raising=False)
    monkeypatch.delenv("TWTOOLS_USER_AGENT", raising=False)


@pytest.fixture
def cache_root(tmp_path) -> Path:
    return tmp_path / "cache"


@pytest.fixture
def fake_client() -> FakeClient:
    return FakeClient({"42": tweet_42()})


@pytest.fixture
def fake_download() -> FakeDownload:
    return FakeDownload()
