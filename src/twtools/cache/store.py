"""Object cache: raw tweet documents keyed by tweet ID.

Layout:
  <root>/objects/<id>.json

No TTL, no versioning, no locking. Re-fetching overwrites the slot; two
concurrent writers for the same ID race and the last one wins.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from twtools.cache.writer import read_json, write_json

OBJECTS_DIR = "objects"
ARCHIVES_DIR = "archives"


@dataclass
class CacheStats:
    cache_dir: Path
    cached_tweets: int
    archived_tweets: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "cache_dir": str(self.cache_dir),
            "cached_tweets": self.cached_tweets,
            "archived_tweets": self.archived_tweets,
        }


class ObjectCache:
    """File-per-ID store for raw documents under ``<root>/objects``."""

    def __init__(self, root: Path | str) -> None:
        self.root = Path(root)
        self.objects_dir = self.root / OBJECTS_DIR

    def path_for(self, object_id: str) -> Path:
        return self.objects_dir / f"{object_id}.json"

    def get(self, object_id: str) -> dict[str, Any] | None:
        """Return the stored document, or None if absent or unreadable."""
        data = read_json(self.path_for(object_id))
        return data if isinstance(data, dict) else None

    def put(self, object_id: str, document: dict[str, Any]) -> Path:
        """Store *document* for *object_id*, replacing any previous value."""
        return write_json(self.path_for(object_id), document)

    def evict(self, object_id: str) -> bool:
        """Remove the slot for *object_id*. Returns False if there was none."""
        try:
            self.path_for(object_id).unlink()
        except FileNotFoundError:
            return False
        return True

    def stats(self) -> CacheStats:
        """Count cached documents and archive directories."""
        cached = 0
        if self.objects_dir.is_dir():
            cached = sum(1 for p in self.objects_dir.glob("*.json") if p.is_file())

        archives_dir = self.root / ARCHIVES_DIR
        archived = 0
        if archives_dir.is_dir():
            archived = sum(1 for p in archives_dir.iterdir() if p.is_dir())

        return CacheStats(cache_dir=self.root, cached_tweets=cached, archived_tweets=archived)
