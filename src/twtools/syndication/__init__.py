"""Twitter syndication endpoint: lookup client, document models, projection."""

from twtools.syndication.client import (
    MalformedResponseError,
    SyndicationClient,
    TweetNotFoundError,
    extract_tweet_id,
    get_token,
    tweet_url,
)
from twtools.syndication.formatter import best_video_url, format_tweet
from twtools.syndication.models import FormattedTweet, MediaItem, RawTweet, VideoVariant

__all__ = [
    "FormattedTweet",
    "MalformedResponseError",
    "MediaItem",
    "RawTweet",
    "SyndicationClient",
    "TweetNotFoundError",
    "VideoVariant",
    "best_video_url",
    "extract_tweet_id",
    "format_tweet",
    "get_token",
    "tweet_url",
]
