"""Runtime configuration for sprawl.

Defaults live here and can be overridden with ``SPRAWL_*`` environment
variables or a ``.env`` file in the working directory. The CLI applies its
flags on top of whatever this module resolves.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field, replace

from dotenv import find_dotenv, load_dotenv

load_dotenv(find_dotenv(usecwd=True), override=False)

VALIDATION_SEED_URL = "http://www.rescale.com"
VALIDATION_MAX_VISITS = 5000
VALIDATION_THRESHOLD = 0.20
DEFAULT_SNAPSHOT_PATH = "./validationURLs.txt"

DEFAULT_USER_AGENT = "sprawl/0.1.0"


def _env_int(name: str, default: int | None) -> int | None:
    value = os.environ.get(name)
    if not value:
        return default
    return int(value)


def _env_float(name: str, default: float) -> float:
    value = os.environ.get(name)
    if not value:
        return default
    return float(value)


@dataclass
class CrawlConfig:
    """Settings for one crawl run."""

    # Crawl limits; None means unbounded
    max_visits: int | None = field(
        default_factory=lambda: _env_int("SPRAWL_MAX_VISITS", None)
    )
    workers: int = field(default_factory=lambda: _env_int("SPRAWL_WORKERS", 16))

    # HTTP
    timeout: float = field(default_factory=lambda: _env_float("SPRAWL_TIMEOUT", 10.0))
    connect_timeout: float = field(
        default_factory=lambda: _env_float("SPRAWL_CONNECT_TIMEOUT", 5.0)
    )
    keepalive_expiry: float = 5.0
    pool_size: int = field(default_factory=lambda: _env_int("SPRAWL_POOL_SIZE", 100))
    user_agent: str = field(
        default_factory=lambda: os.environ.get("SPRAWL_USER_AGENT", DEFAULT_USER_AGENT)
    )

    # Reporting / validation
    report: bool = True
    snapshot_path: str = field(
        default_factory=lambda: os.environ.get("SPRAWL_SNAPSHOT_PATH", DEFAULT_SNAPSHOT_PATH)
    )
    validation_threshold: float = VALIDATION_THRESHOLD

    def __post_init__(self) -> None:
        if self.max_visits is not None and self.max_visits <= 0:
            raise ValueError(f"max_visits must be positive, got {self.max_visits}")
        if self.workers <= 0:
            raise ValueError(f"workers must be positive, got {self.workers}")

    def validation(self) -> CrawlConfig:
        """Return the configuration used by validation mode."""
        return replace(self, max_visits=VALIDATION_MAX_VISITS, report=False)
