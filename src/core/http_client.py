"""HTTP client used by the fetch proxy.

Separated from parsing so it can be swapped (e.g., requests, httpx) later.
One attempt per call; no retry and no caching.
"""

from __future__ import annotations

import logging
import urllib.error
import urllib.request
from typing import Optional
from urllib.parse import urlsplit

from config import settings

_log = logging.getLogger(__name__)


class HttpError(RuntimeError):
    pass


class InvalidInput(HttpError):
    """The URL is missing, malformed or uses a disallowed scheme."""


class UpstreamError(HttpError):
    """The remote server answered with a non-success status."""

    def __init__(self, status: int, reason: str, url: str | None = None):
        super().__init__(f"Failed to fetch: {status} {reason}")
        self.status = status
        self.reason = reason
        self.url = url


class TransportError(HttpError):
    """The network call itself failed."""


def validate_url(url: object) -> str:
    if not url or not isinstance(url, str):
        raise InvalidInput("Invalid URL provided")
    try:
        parts = urlsplit(url.strip())
        # Accessing port validates it
        parts.port
    except ValueError as e:
        raise InvalidInput("Invalid URL format") from e
    if not parts.scheme:
        raise InvalidInput("Invalid URL format")
    if parts.scheme.lower() not in settings.ALLOWED_SCHEMES:
        raise InvalidInput("Only HTTP and HTTPS URLs are allowed")
    if not parts.netloc:
        raise InvalidInput("Invalid URL format")
    return url.strip()


def browser_headers(user_agent: Optional[str] = None) -> dict[str, str]:
    return {
        "User-Agent": user_agent or settings.DEFAULT_USER_AGENT,
        "Accept": settings.DEFAULT_ACCEPT,
        "Accept-Language": settings.DEFAULT_ACCEPT_LANGUAGE,
        "Connection": "keep-alive",
        "Upgrade-Insecure-Requests": "1",
    }


def fetch(
    url: str,
    *,
    user_agent: Optional[str] = None,
    timeout: Optional[float] = None,
) -> str:
    """GET ``url`` with browser-like headers and return the body as text."""
    url = validate_url(url)
    timeout = timeout if timeout is not None else settings.DEFAULT_TIMEOUT
    req = urllib.request.Request(url, headers=browser_headers(user_agent), method="GET")
    kwargs = {"timeout": timeout} if timeout is not None else {}
    _log.debug("GET %s", url)
    try:
        with urllib.request.urlopen(req, **kwargs) as resp:
            content_bytes = resp.read()
            charset = resp.headers.get_content_charset() or "utf-8"
    except urllib.error.HTTPError as e:
        raise UpstreamError(e.code, str(e.reason or ""), url) from e
    except (urllib.error.URLError, OSError) as e:
        raise TransportError(f"Failed to fetch page: {e}") from e
    try:
        return content_bytes.decode(charset, errors="replace")
    except LookupError:
        return content_bytes.decode("utf-8", errors="replace")
