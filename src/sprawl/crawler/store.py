"""Concurrency-safe store of claimed URLs."""

from __future__ import annotations

import threading


class ClaimStore:
    """Set of URLs claimed for fetching.

    URLs are only ever added. ``try_claim`` is the single way to add one and
    performs the membership check and the insert in one critical section, so
    concurrent callers for the same URL get exactly one ``True``.
    """

    def __init__(self) -> None:
        self._claimed: set[str] = set()
        self._lock = threading.Lock()

    def try_claim(self, url: str, limit: int | None = None) -> bool:
        """Claim ``url`` if nobody has yet.

        Args:
            url: The URL to claim
            limit: Refuse the claim when this many URLs are already held

        Returns:
            True if this call recorded the URL, False otherwise
        """
        with self._lock:
            if url in self._claimed:
                return False
            if limit is not None and len(self._claimed) >= limit:
                return False
            self._claimed.add(url)
            return True

    def size(self) -> int:
        """Number of URLs claimed so far."""
        with self._lock:
            return len(self._claimed)

    def snapshot(self) -> frozenset[str]:
        """Immutable copy of the claimed URLs."""
        with self._lock:
            return frozenset(self._claimed)

    def __len__(self) -> int:
        return self.size()

    def __contains__(self, url: object) -> bool:
        with self._lock:
            return url in self._claimed
