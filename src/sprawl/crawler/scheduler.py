"""Concurrent crawl engine.

A single seed is expanded into a traversal of every reachable URL. Workers
pull candidate URLs from a shared frontier queue, claim them through the
:class:`ClaimStore`, and only a successful claim leads to a fetch. The visit
cap is enforced in the same critical section as the claim, so the number of
claimed URLs never exceeds it.
"""

from __future__ import annotations

import enum
import logging
import queue
import threading
from collections import defaultdict
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable

from sprawl.config import CrawlConfig

from .errors import (
    CrawlError,
    FetchError,
    FetchTimeoutError,
    HTTPStatusError,
    InvalidURLError,
    NetworkError,
    ParseError,
)
from .http import Page, fetch
from .links import extract_page_links
from .report import NullReporter, Reporter, StreamReporter
from .store import ClaimStore

if TYPE_CHECKING:
    from collections.abc import Iterable

logger = logging.getLogger(__name__)

Fetcher = Callable[[str], Page]
Extractor = Callable[[Page], set[str]]


class CrawlPhase(enum.Enum):
    IDLE = "idle"
    RUNNING = "running"
    TERMINAL = "terminal"


def _error_kind(error: CrawlError) -> str:
    """Short label used to group failures in the crawl summary."""
    if isinstance(error, FetchTimeoutError):
        return "timeout"
    if isinstance(error, NetworkError):
        return "network"
    if isinstance(error, HTTPStatusError):
        return str(error.status_code)
    if isinstance(error, InvalidURLError):
        return "invalid_url"
    if isinstance(error, ParseError):
        return "parse"
    return "fetch"


@dataclass
class CrawlStats:
    """Statistics collected during a crawl for summary output."""

    pages_fetched: int = 0
    pages_failed: int = 0
    links_discovered: int = 0
    claimed: int = 0
    cap_reached: bool = False
    error_counts: dict[str, int] = field(default_factory=lambda: defaultdict(int))
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    def record_page(self, link_count: int) -> None:
        with self._lock:
            self.pages_fetched += 1
            self.links_discovered += link_count

    def record_error(self, kind: str) -> None:
        with self._lock:
            self.pages_failed += 1
            self.error_counts[kind] += 1


class CrawlState:
    """Claim counter, cap and terminal flag shared by all workers.

    The cap is checked under the same lock as the claim itself. Whichever
    claim brings the count up to the cap flips the state to terminal; from
    then on every claim is refused.
    """

    def __init__(self, store: ClaimStore, cap: int | None = None) -> None:
        self.store = store
        self.cap = cap
        self._lock = threading.Lock()
        self._terminal = threading.Event()
        self._phase = CrawlPhase.IDLE
        self.cap_reached = False

    @property
    def phase(self) -> CrawlPhase:
        return self._phase

    @property
    def is_terminal(self) -> bool:
        return self._terminal.is_set()

    @property
    def claimed(self) -> int:
        return self.store.size()

    def start(self) -> None:
        with self._lock:
            if self._phase is not CrawlPhase.IDLE:
                raise RuntimeError(f"Crawl already {self._phase.value}")
            self._phase = CrawlPhase.RUNNING

    def claim_seed(self, url: str) -> None:
        """Claim the seed regardless of the cap."""
        with self._lock:
            self.store.try_claim(url)
            self._check_cap()

    def claim(self, url: str) -> bool:
        """Atomically claim ``url`` unless it is taken or the crawl is terminal."""
        with self._lock:
            if self._terminal.is_set():
                return False
            if not self.store.try_claim(url, limit=self.cap):
                return False
            self._check_cap()
            return True

    def finish(self) -> None:
        """Enter the terminal phase once the frontier is exhausted."""
        with self._lock:
            self._enter_terminal()

    def _check_cap(self) -> None:
        if self.cap is not None and self.store.size() >= self.cap:
            if not self._terminal.is_set():
                self.cap_reached = True
                logger.info(f"Visit cap of {self.cap} reached, no further URLs will be claimed")
            self._enter_terminal()

    def _enter_terminal(self) -> None:
        if self._terminal.is_set():
            return
        self._phase = CrawlPhase.TERMINAL
        self._terminal.set()


class Crawler:
    """Bounded pool of worker threads traversing the link graph from one seed."""

    def __init__(
        self,
        config: CrawlConfig | None = None,
        reporter: Reporter | None = None,
        fetcher: Fetcher | None = None,
        extractor: Extractor | None = None,
    ) -> None:
        self.config = config or CrawlConfig()
        if self.config.workers <= 0:
            raise ValueError(f"workers must be positive, got {self.config.workers}")
        if reporter is None:
            reporter = StreamReporter() if self.config.report else NullReporter()
        self.reporter = reporter
        self._fetch = fetcher or fetch
        self._extract = extractor or extract_page_links

        self.store = ClaimStore()
        self.state = CrawlState(self.store, self.config.max_visits)
        self.stats = CrawlStats()
        # None is the stop sentinel for workers
        self._frontier: queue.Queue[str | None] = queue.Queue()

    def run(self, seed_url: str) -> CrawlStats:
        """
        Crawl from ``seed_url`` until the frontier is exhausted or the cap is hit.

        Args:
            seed_url: The starting URL

        Returns:
            Statistics for the run
        """
        seed_url = seed_url.strip()
        self.state.start()
        self.state.claim_seed(seed_url)
        logger.info(
            f"Crawl started from {seed_url} "
            f"(cap={self.config.max_visits or 'none'}, workers={self.config.workers})"
        )

        self._process(seed_url)

        workers = [
            threading.Thread(target=self._work, name=f"sprawl-worker-{i}", daemon=True)
            for i in range(self.config.workers)
        ]
        for worker in workers:
            worker.start()

        # Every queued URL, including ones queued by workers, is done or drained
        self._frontier.join()

        for _ in workers:
            self._frontier.put(None)
        for worker in workers:
            worker.join()

        self.state.finish()
        self.stats.claimed = self.state.claimed
        self.stats.cap_reached = self.state.cap_reached
        logger.info(
            f"Crawl complete: {self.stats.claimed} URLs claimed, "
            f"{self.stats.pages_fetched} fetched, {self.stats.pages_failed} failed"
        )
        return self.stats

    def _work(self) -> None:
        while True:
            url = self._frontier.get()
            try:
                if url is None:
                    return
                if self.state.claim(url):
                    self._process(url)
            finally:
                self._frontier.task_done()

    def _process(self, url: str) -> None:
        """Run one crawl task; nothing it raises may escape a worker."""
        try:
            self._enqueue(self._visit(url))
        except Exception:
            logger.exception(f"Unexpected error while crawling {url}")
            self.stats.record_error("unexpected")

    def _visit(self, url: str) -> set[str]:
        """Fetch, extract and report one claimed URL; failures yield no links."""
        logger.debug(f"Crawling: {url}")
        try:
            page = self._fetch(url)
            links = self._extract(page)
        except FetchError as e:
            logger.warning(f"Failed to fetch {url}: {e}")
            self.stats.record_error(_error_kind(e))
            return set()
        except ParseError as e:
            logger.warning(f"Failed to parse {url}: {e}")
            self.stats.record_error(_error_kind(e))
            return set()

        self.stats.record_page(len(links))
        self.reporter.report(url, sorted(links))
        return links

    def _enqueue(self, links: Iterable[str]) -> None:
        if self.state.is_terminal:
            return
        for link in links:
            # Pre-filter only; the claim decides
            if link not in self.store:
                self._frontier.put(link)


def crawl(
    seed_url: str,
    max_visits: int | None = None,
    workers: int | None = None,
    reporter: Reporter | None = None,
) -> frozenset[str]:
    """
    Crawl from a seed URL with default configuration.

    Args:
        seed_url: The starting URL
        max_visits: Maximum number of URLs to claim (None for unbounded)
        workers: Number of worker threads
        reporter: Receiver of (parent URL, links) events

    Returns:
        Set of URLs claimed during the crawl
    """
    if workers is None:
        config = CrawlConfig(max_visits=max_visits)
    else:
        config = CrawlConfig(max_visits=max_visits, workers=workers)
    crawler = Crawler(config, reporter=reporter)
    crawler.run(seed_url)
    return crawler.store.snapshot()
