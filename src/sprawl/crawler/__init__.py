"""Sprawl crawl engine."""

from .errors import (
    CrawlError,
    FetchError,
    NetworkError,
    FetchTimeoutError,
    HTTPStatusError,
    InvalidURLError,
    ParseError,
    FatalIOError,
)
from .http import Page, get_client, configure, fetch, close
from .links import is_crawlable_href, extract_links, extract_page_links
from .store import ClaimStore
from .scheduler import CrawlPhase, CrawlState, CrawlStats, Crawler, crawl
from .report import Reporter, StreamReporter, NullReporter
from .validate import ValidationResult, load_snapshot, validate

__all__ = [
    # Errors
    "CrawlError",
    "FetchError",
    "NetworkError",
    "FetchTimeoutError",
    "HTTPStatusError",
    "InvalidURLError",
    "ParseError",
    "FatalIOError",
    # HTTP client
    "Page",
    "get_client",
    "configure",
    "fetch",
    "close",
    # Links
    "is_crawlable_href",
    "extract_links",
    "extract_page_links",
    # Engine
    "ClaimStore",
    "CrawlPhase",
    "CrawlState",
    "CrawlStats",
    "Crawler",
    "crawl",
    # Reporting / validation
    "Reporter",
    "StreamReporter",
    "NullReporter",
    "ValidationResult",
    "load_snapshot",
    "validate",
]
