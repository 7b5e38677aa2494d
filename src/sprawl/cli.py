"""
Command-line interface for the crawler.
"""
from __future__ import annotations

import argparse
import logging
import sys

from sprawl.config import VALIDATION_SEED_URL, CrawlConfig
from sprawl.crawler import http
from sprawl.crawler.errors import FatalIOError
from sprawl.crawler.scheduler import Crawler, CrawlStats
from sprawl.crawler.validate import load_snapshot, validate

VALIDATE_COMMAND = "validate"

logger = logging.getLogger(__name__)


def parse_max_visits(value: str | None) -> int | None:
    """Parse the optional cap; anything but a positive integer means unbounded."""
    if value is None:
        return None
    try:
        n = int(value)
    except ValueError:
        return None
    return n if n > 0 else None


def print_summary(stats: CrawlStats) -> None:
    """Print crawl summary to stderr."""
    sys.stderr.write("=" * 50 + "\n")
    sys.stderr.write("CRAWL SUMMARY\n")
    sys.stderr.write("=" * 50 + "\n\n")

    sys.stderr.write(f"URLs claimed:         {stats.claimed}\n")
    sys.stderr.write(f"Pages fetched:        {stats.pages_fetched}\n")
    sys.stderr.write(f"Pages failed:         {stats.pages_failed}\n")
    sys.stderr.write(f"Links discovered:     {stats.links_discovered}\n")
    sys.stderr.write(f"Visit cap reached:    {'yes' if stats.cap_reached else 'no'}\n\n")

    if stats.error_counts:
        sys.stderr.write("Errors by type:\n")
        for error_type, count in sorted(stats.error_counts.items()):
            label = f"HTTP {error_type}" if error_type.isdigit() else error_type
            sys.stderr.write(f"  {label}: {count}\n")
    else:
        sys.stderr.write("No errors encountered.\n")

    sys.stderr.write("\n")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="crawl",
        description=(
            "Crawl outbound links starting from a URL. "
            f"Pass '{VALIDATE_COMMAND}' as the URL to run the self-check."
        ),
    )
    parser.add_argument("seed_url", help="Start URL (e.g. https://example.com) or 'validate'")
    parser.add_argument(
        "max_visits",
        nargs="?",
        help="Maximum number of URLs to visit (default: unbounded)",
    )
    parser.add_argument("--workers", type=int, help="Number of concurrent workers (default: 16)")
    parser.add_argument("--timeout", type=float, help="Overall request timeout in seconds (default: 10)")
    parser.add_argument("--user-agent", help="User-Agent header")
    parser.add_argument("--snapshot", help="Snapshot file used by validation mode")
    parser.add_argument("--verbose", action="store_true", help="Debug logging and a crawl summary")
    parser.add_argument("--quiet", action="store_true", help="Only log warnings and errors")
    return parser


def configure_logging(verbose: bool, quiet: bool) -> None:
    level = logging.INFO
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        stream=sys.stderr,
    )
    # Per-request lines from httpx are only wanted when debugging
    logging.getLogger("httpx").setLevel(logging.DEBUG if verbose else logging.WARNING)


def build_config(args: argparse.Namespace) -> CrawlConfig:
    config = CrawlConfig()
    max_visits = parse_max_visits(args.max_visits)
    if max_visits is not None:
        config.max_visits = max_visits
    if args.workers is not None:
        if args.workers <= 0:
            raise ValueError(f"--workers must be positive, got {args.workers}")
        config.workers = args.workers
    if args.timeout is not None:
        config.timeout = args.timeout
    if args.user_agent:
        config.user_agent = args.user_agent
    if args.snapshot:
        config.snapshot_path = args.snapshot
    return config


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the crawler CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose, args.quiet)

    try:
        config = build_config(args)
    except ValueError as e:
        parser.error(str(e))

    validating = args.seed_url == VALIDATE_COMMAND
    snapshot: list[str] = []
    if validating:
        print("Validating the webcrawler\n")
        config = config.validation()
        seed_url = VALIDATION_SEED_URL
        try:
            snapshot = load_snapshot(config.snapshot_path)
        except FatalIOError as e:
            logger.error(f"Validation aborted: {e}")
            return 1
    else:
        seed_url = args.seed_url
        print(f"Starting crawling from the initial URL: {seed_url}\n")

    http.configure(config)
    try:
        crawler = Crawler(config)
        stats = crawler.run(seed_url)
    finally:
        http.close()

    if args.verbose:
        print_summary(stats)

    if validating:
        result = validate(crawler.store.snapshot(), snapshot, config.validation_threshold)
        if result.passed:
            print("Webcrawler validated successfully on a sample result set!")
        else:
            print(f"valid count against {result.total} URLs: {result.matched}")
            print(
                "Webcrawler result are not valid :( \n"
                "This might be due to some external factors as well, maybe try again?"
            )

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
