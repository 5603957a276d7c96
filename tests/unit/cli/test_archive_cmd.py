"""Tests for twtools archive command."""

from __future__ import annotations

import http.client
import json
from unittest.mock import MagicMock, patch

import pytest

from typer.testing import CliRunner

from conftest import THUMB_URL, tweet_42
from twtools.cache.store import ObjectCache
from twtools.cli.main import app
from twtools.syndication.client import TweetNotFoundError

runner = CliRunner()


def _invoke(args, client, download):
    with patch("twtools.cli.archive.make_client", return_value=client), patch(
        "twtools.cache.archive.download_file", download
    ):
        return runner.invoke(app, args)


def _last_json(output: str) -> dict:
    return json.loads(output.strip().splitlines()[-1])


def test_archive_fresh(cache_root, fake_client, fake_download):
    result = _invoke(["archive", "42", "--cache-dir", str(cache_root)], fake_client, fake_download)

    assert result.exit_code == 0
    data = _last_json(result.stdout)
    assert data["success"] is True
    assert data["cached"] is False
    assert data["tweet_id"] == "42"
    assert data["media_files"] == ["media_0.jpg", "media_1_thumb.jpg", "media_1.mp4"]
    assert (cache_root / "archives" / "42" / "metadata.json").exists()


def test_archive_second_run_is_cached(cache_root, fake_client, fake_download):
    args = ["archive", "42", "--cache-dir", str(cache_root)]
    first = _last_json(_invoke(args, fake_client, fake_download).stdout)
    second = _last_json(_invoke(args, fake_client, fake_download).stdout)

    assert second["cached"] is True
    assert second["archived_at"] == first["archived_at"]
    assert second["media_files"] == first["media_files"]
    assert fake_client.calls == ["42"]
    assert len(fake_download.calls) == 3


def test_archive_force(cache_root, fake_client, fake_download):
    args = ["archive", "42", "--cache-dir", str(cache_root)]
    _invoke(args, fake_client, fake_download)
    result = _invoke(args + ["--force"], fake_client, fake_download)

    assert _last_json(result.stdout)["cached"] is False
    assert fake_client.calls == ["42", "42"]


def test_archive_custom_dir(tmp_path, cache_root, fake_client, fake_download):
    dest = tmp_path / "my-archive"
    result = _invoke(
        ["archive", "42", "--dir", str(dest), "--cache-dir", str(cache_root)], fake_client, fake_download
    )

    assert result.exit_code == 0
    assert _last_json(result.stdout)["archive_dir"] == str(dest.resolve())
    assert (dest / "metadata.json").exists()
    assert (dest / "object_formatted.json").exists()


def test_archive_download_failure_exits_1(cache_root, fake_client, fake_download):
    fake_download.fail_on = THUMB_URL
    result = _invoke(["archive", "42", "--cache-dir", str(cache_root)], fake_client, fake_download)

    assert result.exit_code == 1
    assert "500" in result.output
    assert not (cache_root / "archives" / "42" / "metadata.json").exists()


def test_archive_not_found_exits_1(cache_root, fake_client, fake_download):
    fake_client.error = TweetNotFoundError("999999999")
    result = _invoke(["archive", "999999999", "--cache-dir", str(cache_root)], fake_client, fake_download)

    assert result.exit_code == 1
    assert "Tweet not found" in result.output


@pytest.mark.parametrize(
    "error",
    [ConnectionResetError(104, "Connection reset by peer"), http.client.IncompleteRead(b"abc", 100)],
)
def test_archive_connection_dropped_reports_network_failure(cache_root, fake_client, error):
    ObjectCache(cache_root).put("42", tweet_42())
    response = MagicMock()
    response.read.side_effect = error
    opener = MagicMock()
    opener.open.return_value = response

    with patch("twtools.cli.archive.make_client", return_value=fake_client), patch(
        "twtools.http.urllib.request.build_opener", return_value=opener
    ):
        result = runner.invoke(app, ["archive", "42", "--cache-dir", str(cache_root)])

    assert result.exit_code == 1
    assert not isinstance(result.exception, http.client.IncompleteRead)
    assert "Failed to fetch" in result.output
    assert "I/O error" not in result.output
    assert not (cache_root / "archives" / "42" / "metadata.json").exists()
