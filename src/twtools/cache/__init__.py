"""twtools on-disk cache: raw object store and tweet archives."""

from twtools.cache.archive import (
    ArchiveManager,
    ArchiveMetadata,
    ArchiveResult,
    ArchiveState,
    media_extension,
    plan_downloads,
)
from twtools.cache.store import CacheStats, ObjectCache
from twtools.cache.writer import read_json, write_json

__all__ = [
    "ArchiveManager",
    "ArchiveMetadata",
    "ArchiveResult",
    "ArchiveState",
    "CacheStats",
    "ObjectCache",
    "media_extension",
    "plan_downloads",
    "read_json",
    "write_json",
]
