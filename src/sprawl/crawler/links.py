"""Hyperlink extraction from fetched pages."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from bs4 import BeautifulSoup
from bs4.builder import ParserRejectedMarkup

from .errors import ParseError

if TYPE_CHECKING:
    from .http import Page

logger = logging.getLogger(__name__)

HTML_CONTENT_TYPES = ("text/html", "application/xhtml+xml")

# Leading bytes inspected when sniffing for binary content
SNIFF_LENGTH = 1024


def is_crawlable_href(value: str) -> bool:
    """
    Decide whether an href value is an absolute http(s) link worth following.

    Accepts values longer than six characters with ``http`` somewhere in the
    first six. This is an approximation: ``xhttp:...`` passes too.

    Args:
        value: The raw attribute value

    Returns:
        True if the link should be followed
    """
    return len(value) > 6 and "http" in value[:6]


def _collect_duplicate(attrs: dict, key: str, value: str) -> None:
    """Keep every value of a repeated href in document order; other attributes keep the first."""
    if key != "href":
        return
    existing = attrs[key]
    if isinstance(existing, list):
        existing.append(value)
    else:
        attrs[key] = [existing, value]


def extract_links(content: bytes, source_url: str) -> set[str]:
    """
    Extract absolute http(s) links from ``<a href>`` elements.

    Args:
        content: The raw page body
        source_url: URL the content was fetched from; excluded from the result

    Returns:
        Distinct link targets found on the page

    Raises:
        ParseError: If the parser rejects the markup
    """
    try:
        soup = BeautifulSoup(content, "html.parser", on_duplicate_attribute=_collect_duplicate)
    except ParserRejectedMarkup as e:
        raise ParseError(source_url, f"markup rejected: {e}") from e

    links: set[str] = set()
    for anchor in soup.find_all("a"):
        hrefs = anchor.attrs.get("href")
        if hrefs is None:
            continue
        if isinstance(hrefs, str):
            hrefs = [hrefs]
        for value in hrefs:
            if is_crawlable_href(value):
                links.add(value.strip())
                break

    links.discard(source_url)
    return links


def _is_html(content_type: str | None) -> bool:
    if not content_type:
        # Undeclared content is parsed like the server said HTML
        return True
    media_type = content_type.split(";", 1)[0].strip().lower()
    return media_type in HTML_CONTENT_TYPES


def extract_page_links(page: Page) -> set[str]:
    """
    Extract links from a fetched page after checking it is HTML.

    Args:
        page: The fetched page

    Returns:
        Distinct link targets found on the page

    Raises:
        ParseError: If the page is not HTML or cannot be parsed
    """
    if not _is_html(page.content_type):
        raise ParseError(page.url, f"not HTML ({page.content_type})")
    if b"\x00" in page.content[:SNIFF_LENGTH]:
        raise ParseError(page.url, "binary content")

    links = extract_links(page.content, page.url)
    logger.debug(f"Extracted {len(links)} links from {page.url}")
    return links
