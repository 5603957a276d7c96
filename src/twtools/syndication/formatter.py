"""Projection of raw syndication documents into a compact, display-friendly shape.

Media handling:
  photo                   → {type, url}
  video / animated_gif    → {type, thumbnail, variants}; MP4 variants only,
                            highest bitrate first (missing bitrate sorts as 0)
  top-level ``video``     → appended as a video item when mediaDetails had none
"""

from __future__ import annotations

from typing import Any

from twtools.syndication.models import (
    VIDEO_TYPES,
    FormattedTweet,
    FormattedUser,
    MediaItem,
    Metrics,
    RawTweet,
    VideoVariant,
)

_MP4 = "video/mp4"


def _mp4_variants(variants: list[dict[str, Any]], type_key: str, url_key: str) -> list[VideoVariant]:
    """Keep MP4 variants and sort them best bitrate first.

    ``mediaDetails`` uses ``content_type``/``url``; the alternate ``video``
    block uses ``type``/``src``.
    """
    mp4s = [v for v in variants if v.get(type_key) == _MP4]
    mp4s.sort(key=lambda v: v.get("bitrate") or 0, reverse=True)
    return [VideoVariant(url=v.get(url_key), bitrate=v.get("bitrate")) for v in mp4s]


def format_tweet(tweet: RawTweet | dict[str, Any]) -> FormattedTweet:
    """Build the formatted projection of *tweet*."""
    if isinstance(tweet, dict):
        tweet = RawTweet.from_dict(tweet)

    user = tweet.user
    formatted = FormattedTweet(
        id=tweet.id_str,
        url=f"https://twitter.com/{user.get('screen_name')}/status/{tweet.id_str}",
        text=tweet.text,
        created_at=tweet.created_at,
        user=FormattedUser(
            name=user.get("name"),
            screen_name=user.get("screen_name"),
            profile_image=user.get("profile_image_url_https"),
            verified=user.get("verified") or user.get("is_blue_verified"),
        ),
        metrics=Metrics(
            favorites=tweet.favorite_count,
            replies=tweet.reply_count,
            quotes=tweet.quote_count,
        ),
    )

    for media in tweet.media_details:
        kind = media.get("type")
        if kind == "photo":
            formatted.media.append(MediaItem(type="photo", url=media.get("media_url_https")))
        elif kind in VIDEO_TYPES:
            formatted.has_video = True
            variants = (media.get("video_info") or {}).get("variants") or []
            formatted.media.append(
                MediaItem(
                    type=kind,
                    thumbnail=media.get("media_url_https"),
                    variants=_mp4_variants(variants, "content_type", "url"),
                )
            )

    if tweet.video and tweet.video.get("variants"):
        formatted.has_video = True
        mp4s = _mp4_variants(tweet.video["variants"], "type", "src")
        if mp4s and not any(m.type == "video" for m in formatted.media):
            formatted.media.append(
                MediaItem(type="video", thumbnail=tweet.video.get("poster"), variants=mp4s)
            )

    if tweet.quoted_tweet:
        quoted = tweet.quoted_tweet
        formatted.quoted_tweet = {
            "id": quoted.get("id_str"),
            "text": quoted.get("text"),
            "user": (quoted.get("user") or {}).get("screen_name"),
        }

    if tweet.in_reply_to_status_id_str:
        formatted.reply_to = {
            "tweet_id": tweet.in_reply_to_status_id_str,
            "user": tweet.in_reply_to_screen_name,
        }

    return formatted


def best_video_url(tweet: RawTweet | dict[str, Any]) -> str | None:
    """Return the highest-bitrate MP4 URL of the first video in *tweet*, or None."""
    if isinstance(tweet, dict):
        tweet = RawTweet.from_dict(tweet)

    for media in tweet.media_details:
        if media.get("type") in VIDEO_TYPES:
            variants = (media.get("video_info") or {}).get("variants") or []
            mp4s = _mp4_variants(variants, "content_type", "url")
            if mp4s:
                return mp4s[0].url

    if tweet.video and tweet.video.get("variants"):
        mp4s = _mp4_variants(tweet.video["variants"], "type", "src")
        if mp4s:
            return mp4s[0].url

    return None
