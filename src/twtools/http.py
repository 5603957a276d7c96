"""Plain HTTP GET helpers used for the tweet lookup and every media download.

- Allowed URL schemes: https:// and http:// only.
- Max redirects: 5.
- No retries; any non-2xx status raises FetchError.
- Timeout is whatever the caller passes (None keeps urllib's default).
"""

from __future__ import annotations

import http.client
import urllib.error
import urllib.parse
import urllib.request
from pathlib import Path

from twtools.config import DEFAULT_USER_AGENT

_MAX_REDIRECTS = 5
_ALLOWED_SCHEMES = {"https", "http"}
_READ_BLOCK = 64 * 1024


class FetchError(RuntimeError):
    """Raised for a non-success HTTP status or a connection-level failure.

    Attributes:
        url: The URL that was requested.
        status: HTTP status code, or None when no response was received.
        reason: Status text or the underlying connection error.
    """

    def __init__(self, url: str, status: int | None, reason: str, message: str | None = None) -> None:
        self.url = url
        self.status = status
        self.reason = reason
        if message is None:
            if status is None:
                message = f"Failed to fetch '{url}': {reason}"
            else:
                message = f"Failed to fetch '{url}': {status} {reason}"
        super().__init__(message)


def _validate_scheme(url: str) -> None:
    parsed = urllib.parse.urlparse(url)
    if parsed.scheme not in _ALLOWED_SCHEMES:
        raise ValueError(
            f"Unsupported URL scheme '{parsed.scheme}'. Only https:// and http:// are allowed."
        )


def _open(
    url: str,
    headers: dict[str, str] | None,
    timeout: float | None,
) -> http.client.HTTPResponse:
    """Validate *url* and open it, translating urllib errors into FetchError."""
    _validate_scheme(url)
    request = urllib.request.Request(url, headers={"User-Agent": DEFAULT_USER_AGENT, **(headers or {})})
    opener = urllib.request.build_opener(_LimitedRedirectHandler(_MAX_REDIRECTS))

    kwargs = {} if timeout is None else {"timeout": timeout}
    try:
        return opener.open(request, **kwargs)
    except urllib.error.HTTPError as exc:
        raise FetchError(url, exc.code, str(exc.reason)) from exc
    except urllib.error.URLError as exc:
        raise FetchError(url, None, str(exc.reason)) from exc


def fetch_bytes(
    url: str,
    headers: dict[str, str] | None = None,
    timeout: float | None = None,
) -> bytes:
    """GET *url* and return the full response body.

    Raises:
        ValueError: If the URL scheme is not http(s).
        FetchError: On a non-2xx status or a connection failure.
    """
    response = _open(url, headers, timeout)
    try:
        return _read(response, url)
    finally:
        response.close()


def download_file(
    url: str,
    dest: Path,
    headers: dict[str, str] | None = None,
    timeout: float | None = None,
) -> Path:
    """Stream *url* into *dest*, overwriting any existing file.

    The destination's parent directory must already exist. A connection
    dropped mid-body raises FetchError; errors writing *dest* propagate as-is.
    """
    response = _open(url, headers, timeout)
    try:
        with open(dest, "wb") as fh:
            while block := _read(response, url, _READ_BLOCK):
                fh.write(block)
    finally:
        response.close()
    return dest


def _read(response: http.client.HTTPResponse, url: str, amt: int | None = None) -> bytes:
    """Read from *response*, translating socket-level failures into FetchError."""
    try:
        return response.read() if amt is None else response.read(amt)
    except (OSError, http.client.HTTPException) as exc:
        raise FetchError(url, None, str(exc)) from exc


class _LimitedRedirectHandler(urllib.request.HTTPRedirectHandler):
    """Raise an error after more than *max_redirects* redirects."""

    def __init__(self, max_redirects: int) -> None:
        self._max_redirects = max_redirects
        self._count = 0

    def redirect_request(self, req, fp, code, msg, headers, newurl):
        self._count += 1
        if self._count > self._max_redirects:
            raise FetchError(
                req.full_url,
                code,
                msg,
                message=f"Too many redirects (>{self._max_redirects}) for URL '{req.full_url}'.",
            )
        return super().redirect_request(req, fp, code, msg, headers, newurl)
