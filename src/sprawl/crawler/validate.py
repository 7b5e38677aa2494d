"""Comparison of a crawl result against a stored snapshot of URLs."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from sprawl.config import VALIDATION_THRESHOLD

from .errors import FatalIOError

if TYPE_CHECKING:
    from collections.abc import Collection, Sequence

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of comparing claimed URLs with a snapshot."""

    matched: int
    total: int
    threshold: float

    @property
    def required(self) -> float:
        return self.threshold * self.total

    @property
    def passed(self) -> bool:
        return self.matched >= self.required


def load_snapshot(path: str | Path) -> list[str]:
    """
    Read a snapshot file with one URL per line.

    Args:
        path: Path of the snapshot file

    Returns:
        URLs in file order, blank lines skipped

    Raises:
        FatalIOError: If the file cannot be read
    """
    try:
        text = Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise FatalIOError(str(path), f"cannot read snapshot: {e}") from e

    urls = [line.strip() for line in text.splitlines()]
    urls = [url for url in urls if url]
    logger.debug(f"Loaded {len(urls)} snapshot URLs from {path}")
    return urls


def validate(
    claimed: Collection[str],
    snapshot: Sequence[str],
    threshold: float = VALIDATION_THRESHOLD,
) -> ValidationResult:
    """
    Count snapshot URLs present in the claimed set.

    Args:
        claimed: URLs claimed by the crawl
        snapshot: URLs from a previous crawl
        threshold: Fraction of snapshot URLs that must be present to pass

    Returns:
        The validation outcome
    """
    matched = sum(1 for url in snapshot if url in claimed)
    result = ValidationResult(matched=matched, total=len(snapshot), threshold=threshold)
    logger.info(
        f"Validation matched {result.matched}/{result.total} "
        f"(required {result.required:.0f})"
    )
    return result
