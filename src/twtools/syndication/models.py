"""Typed views over syndication API documents."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

VIDEO_TYPES = frozenset({"video", "animated_gif"})


@dataclass
class RawTweet:
    """A tweet document as returned by the syndication endpoint.

    Only the fields the projection reads are lifted out; everything else
    stays in ``data``, which is stored and re-serialised verbatim.
    """

    id_str: str | None
    text: str | None
    created_at: str | None
    user: dict[str, Any]
    favorite_count: int | None = None
    reply_count: int | None = None
    quote_count: int | None = None
    media_details: list[dict[str, Any]] = field(default_factory=list)
    video: dict[str, Any] | None = None
    quoted_tweet: dict[str, Any] | None = None
    in_reply_to_status_id_str: str | None = None
    in_reply_to_screen_name: str | None = None
    data: dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RawTweet:
        return cls(
            id_str=data.get("id_str"),
            text=data.get("text"),
            created_at=data.get("created_at"),
            user=data.get("user") or {},
            favorite_count=data.get("favorite_count"),
            reply_count=data.get("reply_count"),
            quote_count=data.get("quote_count"),
            media_details=data.get("mediaDetails") or [],
            video=data.get("video"),
            quoted_tweet=data.get("quoted_tweet"),
            in_reply_to_status_id_str=data.get("in_reply_to_status_id_str"),
            in_reply_to_screen_name=data.get("in_reply_to_screen_name"),
            data=data,
        )

    def to_dict(self) -> dict[str, Any]:
        return self.data


@dataclass
class VideoVariant:
    url: str
    bitrate: int | None = None

    def to_dict(self) -> dict[str, Any]:
        return {"url": self.url, "bitrate": self.bitrate}


@dataclass
class MediaItem:
    """One entry of the projection's media list.

    Photos carry ``url``; video-like items carry ``thumbnail`` and
    ``variants`` (MP4 only, best bitrate first).
    """

    type: str
    url: str | None = None
    thumbnail: str | None = None
    variants: list[VideoVariant] = field(default_factory=list)

    @property
    def is_video(self) -> bool:
        return self.type in VIDEO_TYPES

    def to_dict(self) -> dict[str, Any]:
        if self.type == "photo":
            return {"type": "photo", "url": self.url}
        return {
            "type": self.type,
            "thumbnail": self.thumbnail,
            "variants": [v.to_dict() for v in self.variants],
        }


@dataclass
class FormattedUser:
    name: str | None = None
    screen_name: str | None = None
    profile_image: str | None = None
    verified: bool | None = None


@dataclass
class Metrics:
    favorites: int | None = None
    replies: int | None = None
    quotes: int | None = None


@dataclass
class FormattedTweet:
    """Display-oriented projection of a RawTweet (see format_tweet)."""

    id: str | None
    url: str
    text: str | None
    created_at: str | None
    user: FormattedUser
    metrics: Metrics
    media: list[MediaItem] = field(default_factory=list)
    has_video: bool = False
    quoted_tweet: dict[str, Any] | None = None
    reply_to: dict[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "id": self.id,
            "url": self.url,
            "text": self.text,
            "created_at": self.created_at,
            "user": {
                "name": self.user.name,
                "screen_name": self.user.screen_name,
                "profile_image": self.user.profile_image,
                "verified": self.user.verified,
            },
            "metrics": {
                "favorites": self.metrics.favorites,
                "replies": self.metrics.replies,
                "quotes": self.metrics.quotes,
            },
            "media": [m.to_dict() for m in self.media],
            "has_video": self.has_video,
        }
        if self.quoted_tweet is not None:
            out["quoted_tweet"] = self.quoted_tweet
        if self.reply_to is not None:
            out["reply_to"] = self.reply_to
        return out
