"""Error taxonomy for the crawl engine."""

from __future__ import annotations


class CrawlError(Exception):
    """Base class for all crawler errors."""


class FetchError(CrawlError):
    """A page could not be fetched."""

    def __init__(self, url: str, message: str) -> None:
        super().__init__(f"{url}: {message}")
        self.url = url


class NetworkError(FetchError):
    """Connection refused, DNS failure or other transport-level failure."""


class FetchTimeoutError(NetworkError):
    """The request timed out at some stage (connect, read, write or pool)."""


class HTTPStatusError(FetchError):
    """The server answered with a non-2xx status."""

    def __init__(self, url: str, status_code: int) -> None:
        super().__init__(url, f"HTTP {status_code}")
        self.status_code = status_code


class InvalidURLError(FetchError):
    """The URL cannot be requested at all."""


class ParseError(CrawlError):
    """Fetched content is malformed or not HTML."""

    def __init__(self, url: str, message: str) -> None:
        super().__init__(f"{url}: {message}")
        self.url = url


class FatalIOError(CrawlError):
    """A file required by the run could not be read."""

    def __init__(self, path: str, message: str) -> None:
        super().__init__(f"{path}: {message}")
        self.path = path
