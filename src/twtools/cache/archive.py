"""Archive manager: one self-contained, idempotent bundle per tweet.

Layout:
  <root>/archives/<id>/
      object.json              raw document copy
      object_formatted.json    formatted projection
      media_<n>.<ext>          photo, or video thumbnail as media_<n>_thumb.<ext>
      media_<n>.mp4            best-bitrate MP4 of a video / animated_gif
      metadata.json            archive record; its presence == "archived"

The metadata marker is the only completeness signal. It is written last and
atomically, so an interrupted run leaves an unmarked directory that the next
call rebuilds from scratch. With a destination override the bundle goes to
that directory (marker copy included) and the canonical marker is still
written under ``<root>/archives/<id>/``.
"""

from __future__ import annotations

import enum
import re
import urllib.parse
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from pathlib import Path, PurePosixPath
from typing import Any, Callable

from twtools.cache.store import ARCHIVES_DIR, ObjectCache
from twtools.cache.writer import read_json, write_json
from twtools.config import DEFAULT_USER_AGENT
from twtools.http import download_file
from twtools.syndication.client import SyndicationClient, tweet_url
from twtools.syndication.formatter import format_tweet
from twtools.syndication.models import MediaItem, RawTweet

OBJECT_FILE = "object.json"
FORMATTED_FILE = "object_formatted.json"
METADATA_FILE = "metadata.json"

_DEFAULT_EXT = "jpg"
_EXT_RE = re.compile(r"^[a-z0-9]{1,5}$")
_PREVIEW_CHARS = 100


class ArchiveState(enum.Enum):
    ABSENT = "absent"
    COMPLETE = "complete"


@dataclass
class ArchiveMetadata:
    """Contents of metadata.json.

    ``text_preview`` holds the first 100 code points of the tweet text.
    Tweets heavy in emoji or other astral characters may therefore get a
    longer preview than a UTF-16 based slice would give.
    """

    tweet_id: str
    source_url: str
    archived_at: str
    archive_dir: str
    media_files: list[str] = field(default_factory=list)
    user: str | None = None
    text_preview: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ArchiveMetadata:
        return cls(
            tweet_id=str(data["tweet_id"]),
            source_url=str(data.get("source_url", "")),
            archived_at=str(data.get("archived_at", "")),
            archive_dir=str(data.get("archive_dir", "")),
            media_files=list(data.get("media_files") or []),
            user=data.get("user"),
            text_preview=data.get("text_preview"),
        )


@dataclass
class ArchiveResult:
    """Outcome of ArchiveManager.archive().

    ``cached`` is True when an existing archive was returned without any
    network access; failures raise instead of returning.
    """

    metadata: ArchiveMetadata
    cached: bool

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": True,
            "cached": self.cached,
            "tweet_id": self.metadata.tweet_id,
            "archive_dir": self.metadata.archive_dir,
            "archived_at": self.metadata.archived_at,
            "media_files": list(self.metadata.media_files),
        }


@dataclass
class PlannedDownload:
    index: int
    kind: str  # photo | thumbnail | video
    url: str
    filename: str


# ------------------------------------------------------------------
# Media naming
# ------------------------------------------------------------------


def media_extension(url: str, default: str = _DEFAULT_EXT) -> str:
    """Extension of the URL path (query ignored), or *default* if absent or odd."""
    suffix = PurePosixPath(urllib.parse.urlparse(url).path).suffix.lstrip(".").lower()
    return suffix if _EXT_RE.match(suffix) else default


def plan_downloads(media: list[MediaItem]) -> list[PlannedDownload]:
    """Assign every download its filename before anything is fetched.

    ``<n>`` is the item's position in *media*. A video without MP4 variants
    keeps its index and yields only the thumbnail.
    """
    plan: list[PlannedDownload] = []
    for index, item in enumerate(media):
        if item.type == "photo":
            if item.url:
                plan.append(
                    PlannedDownload(index, "photo", item.url, f"media_{index}.{media_extension(item.url)}")
                )
        elif item.is_video:
            if item.thumbnail:
                ext = media_extension(item.thumbnail)
                plan.append(
                    PlannedDownload(index, "thumbnail", item.thumbnail, f"media_{index}_thumb.{ext}")
                )
            if item.variants:
                plan.append(PlannedDownload(index, "video", item.variants[0].url, f"media_{index}.mp4"))
    return plan


# ------------------------------------------------------------------
# Manager
# ------------------------------------------------------------------


class ArchiveManager:
    """Create and look up tweet archives under ``<root>/archives``.

    Args:
        root: Cache root shared with the ObjectCache.
        client: Lookup client used on cache misses and forced refreshes.
        download: ``download(url, dest, headers=..., timeout=...)``; defaults
            to :func:`twtools.http.download_file`.
        user_agent: Sent with every media download.
        timeout: Per-request timeout for media downloads (None = urllib default).
        on_download: Called as ``on_download(kind, filename)`` before each download.
    """

    def __init__(
        self,
        root: Path | str,
        client: SyndicationClient | None = None,
        download: Callable[..., Any] | None = None,
        user_agent: str = DEFAULT_USER_AGENT,
        timeout: float | None = None,
        on_download: Callable[[str, str], None] | None = None,
    ) -> None:
        self.root = Path(root)
        self.cache = ObjectCache(self.root)
        self.client = client if client is not None else SyndicationClient(user_agent, timeout)
        self._download = download if download is not None else download_file
        self.user_agent = user_agent
        self.timeout = timeout
        self.on_download = on_download

    def archive_dir(self, tweet_id: str) -> Path:
        return self.root / ARCHIVES_DIR / tweet_id

    def marker_path(self, tweet_id: str) -> Path:
        return self.archive_dir(tweet_id) / METADATA_FILE

    def is_archived(self, tweet_id: str) -> bool:
        return self.marker_path(tweet_id).exists()

    def state(self, tweet_id: str) -> ArchiveState:
        return ArchiveState.COMPLETE if self.is_archived(tweet_id) else ArchiveState.ABSENT

    def get_metadata(self, tweet_id: str) -> ArchiveMetadata | None:
        """Read the archive record, or None if missing or unreadable."""
        data = read_json(self.marker_path(tweet_id))
        if not isinstance(data, dict):
            return None
        try:
            return ArchiveMetadata.from_dict(data)
        except KeyError:
            return None

    def load_document(self, tweet_id: str, force: bool = False) -> dict[str, Any]:
        """Return the raw document, fetching and caching it on a miss or when forced."""
        document = None if force else self.cache.get(tweet_id)
        if document is None:
            document = self.client.fetch_tweet(tweet_id)
            self.cache.put(tweet_id, document)
        return document

    def archive(
        self,
        tweet_id: str,
        force: bool = False,
        destination: Path | str | None = None,
    ) -> ArchiveResult:
        """Archive *tweet_id* with all its media.

        Without *force*, an existing archive is returned untouched and nothing
        is fetched. Any fetch or download failure propagates and leaves no
        marker behind, so the next call redoes everything.
        """
        if not force:
            existing = self.get_metadata(tweet_id)
            if existing is not None:
                return ArchiveResult(metadata=existing, cached=True)

        raw = RawTweet.from_dict(self.load_document(tweet_id, force=force))
        formatted = format_tweet(raw)

        out_dir = Path(destination).resolve() if destination else self.archive_dir(tweet_id).resolve()
        out_dir.mkdir(parents=True, exist_ok=True)

        media_files: list[str] = []
        headers = {"User-Agent": self.user_agent}
        for planned in plan_downloads(formatted.media):
            if self.on_download is not None:
                self.on_download(planned.kind, planned.filename)
            self._download(planned.url, out_dir / planned.filename, headers=headers, timeout=self.timeout)
            media_files.append(planned.filename)

        write_json(out_dir / OBJECT_FILE, raw.to_dict())
        write_json(out_dir / FORMATTED_FILE, formatted.to_dict())

        metadata = ArchiveMetadata(
            tweet_id=tweet_id,
            source_url=tweet_url(tweet_id),
            archived_at=_utc_now_iso(),
            archive_dir=str(out_dir),
            media_files=media_files,
            user=formatted.user.screen_name,
            text_preview=formatted.text[:_PREVIEW_CHARS] if formatted.text is not None else None,
        )

        marker = self.marker_path(tweet_id)
        if out_dir / METADATA_FILE != marker.resolve():
            write_json(out_dir / METADATA_FILE, metadata.to_dict())
        # Canonical marker goes last: this is what flips is_archived().
        write_json(marker, metadata.to_dict())

        return ArchiveResult(metadata=metadata, cached=False)


def _utc_now_iso() -> str:
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")
