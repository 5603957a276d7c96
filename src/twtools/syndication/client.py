"""Twitter syndication API client.

Uses the undocumented embed endpoint (cdn.syndication.twimg.com/tweet-result);
no authentication required. The endpoint expects a ``token`` derived from the
tweet ID, computed the same way the embed widget does it.
"""

from __future__ import annotations

import json
import math
import re
import urllib.parse
from typing import Any, Callable

from twtools.config import DEFAULT_USER_AGENT
from twtools.http import FetchError, fetch_bytes

SYNDICATION_URL = "https://cdn.syndication.twimg.com/tweet-result"

_DIGITS = "0123456789abcdefghijklmnopqrstuvwxyz"
_TOKEN_STRIP_RE = re.compile(r"(0+|\.)")
_ID_RE = re.compile(r"^\d+$")
_URL_PATTERNS = (
    re.compile(r"(?:twitter\.com|x\.com)/\w+/status/(\d+)"),
    re.compile(r"(?:twitter\.com|x\.com)/i/web/status/(\d+)"),
)


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class TweetNotFoundError(FetchError):
    """The lookup endpoint answered 404 for this tweet ID."""

    def __init__(self, tweet_id: str, url: str = SYNDICATION_URL) -> None:
        self.tweet_id = tweet_id
        super().__init__(url, 404, "Not Found", message=f"Tweet not found: {tweet_id}")


class MalformedResponseError(ValueError):
    """The lookup endpoint returned an empty or unparsable body."""

    def __init__(self, tweet_id: str, detail: str) -> None:
        self.tweet_id = tweet_id
        super().__init__(f"{detail} for tweet: {tweet_id}")


# ---------------------------------------------------------------------------
# IDs and tokens
# ---------------------------------------------------------------------------


def extract_tweet_id(ref: str) -> str:
    """Return the tweet ID in *ref*, which may be a bare ID or a tweet URL.

    Raises:
        ValueError: If no ID can be found.
    """
    ref = ref.strip()
    if _ID_RE.match(ref):
        return ref

    for pattern in _URL_PATTERNS:
        match = pattern.search(ref)
        if match:
            return match.group(1)

    raise ValueError(f"Could not extract tweet ID from: {ref}")


def tweet_url(tweet_id: str) -> str:
    """Canonical, user-agnostic URL for *tweet_id*."""
    return f"https://twitter.com/i/status/{tweet_id}"


def _to_radix_string(value: float, radix: int = 36) -> str:
    """Render *value* in *radix* with the shortest fraction that round-trips.

    Mirrors how JavaScript's ``Number.prototype.toString(radix)`` renders
    non-integral numbers, which is what the embed widget's token relies on.
    """
    if value < 0:
        return "-" + _to_radix_string(-value, radix)

    integer = math.floor(value)
    fraction = value - integer
    # Half the distance to the next double: digits below this are noise.
    delta = max(math.nextafter(0.0, 1.0), 0.5 * (math.nextafter(value, math.inf) - value))

    frac_digits: list[int] = []
    if fraction >= delta:
        while True:
            fraction *= radix
            delta *= radix
            digit = int(fraction)
            frac_digits.append(digit)
            fraction -= digit
            if fraction > 0.5 or (fraction == 0.5 and digit & 1):
                if fraction + delta > 1:
                    # Round up, carrying into earlier digits and then the integer part.
                    while True:
                        if not frac_digits:
                            integer += 1
                            break
                        last = frac_digits.pop()
                        if last + 1 < radix:
                            frac_digits.append(last + 1)
                            break
                    break
            if fraction < delta:
                break

    n = int(integer)
    int_digits = ""
    while True:
        n, rem = divmod(n, radix)
        int_digits = _DIGITS[rem] + int_digits
        if n == 0:
            break

    if not frac_digits:
        return int_digits
    return int_digits + "." + "".join(_DIGITS[d] for d in frac_digits)


def get_token(tweet_id: str) -> str:
    """Token expected by the syndication endpoint for *tweet_id*."""
    raw = _to_radix_string((int(tweet_id) / 1e15) * math.pi, 36)
    return _TOKEN_STRIP_RE.sub("", raw)


# ---------------------------------------------------------------------------
# Client
# ---------------------------------------------------------------------------


class SyndicationClient:
    """Fetch raw tweet documents from the syndication endpoint.

    One request per call; no retries and no caching (see ObjectCache).
    """

    def __init__(
        self,
        user_agent: str = DEFAULT_USER_AGENT,
        timeout: float | None = None,
        fetch: Callable[..., bytes] = fetch_bytes,
    ) -> None:
        self.user_agent = user_agent
        self.timeout = timeout
        self._fetch = fetch

    def lookup_url(self, tweet_id: str) -> str:
        query = urllib.parse.urlencode({"id": tweet_id, "token": get_token(tweet_id)})
        return f"{SYNDICATION_URL}?{query}"

    def fetch_tweet(self, tweet_id: str) -> dict[str, Any]:
        """Return the raw document for *tweet_id*.

        Raises:
            TweetNotFoundError: The endpoint answered 404.
            FetchError: Any other non-success status or connection failure.
            MalformedResponseError: The body is empty or not a JSON object.
        """
        url = self.lookup_url(tweet_id)
        headers = {"User-Agent": self.user_agent, "Accept": "application/json"}
        try:
            body = self._fetch(url, headers=headers, timeout=self.timeout)
        except FetchError as exc:
            if exc.status == 404:
                raise TweetNotFoundError(tweet_id, url) from exc
            raise

        text = body.decode("utf-8", errors="replace").strip()
        if not text:
            raise MalformedResponseError(tweet_id, "Empty response")

        try:
            document = json.loads(text)
        except json.JSONDecodeError as exc:
            raise MalformedResponseError(tweet_id, f"Unparsable response ({exc.msg})") from exc

        if not isinstance(document, dict):
            raise MalformedResponseError(tweet_id, "Unexpected response shape")
        return document
