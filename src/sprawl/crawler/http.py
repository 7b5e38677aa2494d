"""HTTP fetcher for crawling."""

from __future__ import annotations

import atexit
import logging
import threading
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING

import httpx

from sprawl.config import DEFAULT_USER_AGENT

from .errors import FetchError, FetchTimeoutError, HTTPStatusError, InvalidURLError, NetworkError

if TYPE_CHECKING:
    from sprawl.config import CrawlConfig

DEFAULT_HEADERS = {
    "User-Agent": DEFAULT_USER_AGENT,
}

# connect also bounds the TLS handshake; pool bounds the wait for a free connection
DEFAULT_TIMEOUT = httpx.Timeout(10.0, connect=5.0, pool=5.0)

# Wall-clock budget for a whole request, body included
DEFAULT_REQUEST_TIMEOUT = 10.0

DEFAULT_LIMITS = httpx.Limits(
    max_connections=100,
    max_keepalive_connections=100,
    keepalive_expiry=5.0,
)

logger = logging.getLogger(__name__)

_client: httpx.Client | None = None
_client_lock = threading.Lock()
_request_timeout = DEFAULT_REQUEST_TIMEOUT


@dataclass(frozen=True)
class Page:
    """Raw result of a successful fetch."""

    url: str
    content: bytes
    status_code: int = 200
    content_type: str | None = None


def _build_client(
    headers: dict[str, str],
    timeout: httpx.Timeout,
    limits: httpx.Limits,
) -> httpx.Client:
    return httpx.Client(
        headers=headers,
        timeout=timeout,
        limits=limits,
        follow_redirects=True,
    )


def get_client() -> httpx.Client:
    """Get or create the shared HTTP client (thread-safe)."""
    global _client
    if _client is None:
        with _client_lock:
            # Double-check after acquiring lock
            if _client is None:
                _client = _build_client(DEFAULT_HEADERS, DEFAULT_TIMEOUT, DEFAULT_LIMITS)
    return _client


def configure(config: CrawlConfig) -> httpx.Client:
    """Replace the shared client with one built from ``config``.

    Args:
        config: Crawl configuration carrying timeouts, pool size and user agent

    Returns:
        The new shared client
    """
    global _client, _request_timeout
    timeout = httpx.Timeout(
        config.timeout,
        connect=config.connect_timeout,
        pool=config.connect_timeout,
    )
    limits = httpx.Limits(
        max_connections=config.pool_size,
        max_keepalive_connections=config.pool_size,
        keepalive_expiry=config.keepalive_expiry,
    )
    client = _build_client({"User-Agent": config.user_agent}, timeout, limits)
    with _client_lock:
        old, _client = _client, client
        _request_timeout = config.timeout
    if old is not None:
        old.close()
    logger.debug(
        f"HTTP client configured: timeout={config.timeout}s "
        f"connect={config.connect_timeout}s pool={config.pool_size}"
    )
    return client


def fetch(url: str) -> Page:
    """
    Fetch a URL with the shared client.

    Args:
        url: The URL to fetch

    Returns:
        The fetched page

    Raises:
        FetchError: Classified as timeout, network, status or invalid URL
    """
    client = get_client()
    budget = _request_timeout
    deadline = time.monotonic() + budget
    try:
        with client.stream("GET", url) as response:
            response.raise_for_status()
            chunks: list[bytes] = []
            for chunk in response.iter_bytes():
                chunks.append(chunk)
                if time.monotonic() > deadline:
                    raise FetchTimeoutError(url, f"exceeded overall timeout of {budget}s")
            status_code = response.status_code
            content_type = response.headers.get("content-type")
    except httpx.TimeoutException as e:
        raise FetchTimeoutError(url, f"timed out ({type(e).__name__})") from e
    except httpx.HTTPStatusError as e:
        raise HTTPStatusError(url, e.response.status_code) from e
    except (httpx.InvalidURL, httpx.UnsupportedProtocol) as e:
        raise InvalidURLError(url, str(e)) from e
    except httpx.TransportError as e:
        raise NetworkError(url, str(e) or type(e).__name__) from e
    except httpx.HTTPError as e:
        raise FetchError(url, str(e)) from e

    return Page(
        url=url,
        content=b"".join(chunks),
        status_code=status_code,
        content_type=content_type,
    )


def close() -> None:
    """Close the HTTP client."""
    global _client
    with _client_lock:
        if _client is not None:
            _client.close()
            _client = None


# Register cleanup handler for automatic cleanup on exit
atexit.register(close)
