"""Reporting of crawl progress to the operator."""

from __future__ import annotations

import sys
import threading
from typing import TYPE_CHECKING, Protocol, TextIO

if TYPE_CHECKING:
    from collections.abc import Iterable


class Reporter(Protocol):
    """Consumer of (parent URL, discovered links) events."""

    def report(self, parent_url: str, links: Iterable[str]) -> None: ...


class StreamReporter:
    """Write each parent URL followed by its links, one tab-indented per line.

    A parent and its links are written under one lock so output from
    concurrent workers never interleaves within a block.
    """

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream
        self._lock = threading.Lock()

    @property
    def stream(self) -> TextIO:
        """Target stream; defaults to whatever ``sys.stdout`` is at write time."""
        return self._stream if self._stream is not None else sys.stdout

    def report(self, parent_url: str, links: Iterable[str]) -> None:
        lines = [parent_url]
        lines.extend(f"\t{link}" for link in links)
        block = "\n".join(lines) + "\n"
        with self._lock:
            self.stream.write(block)
            self.stream.flush()


class NullReporter:
    """Discard all events (validation mode)."""

    def report(self, parent_url: str, links: Iterable[str]) -> None:
        pass
