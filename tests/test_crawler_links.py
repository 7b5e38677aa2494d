"""Tests for crawler.links module."""

from unittest import mock

import pytest
from bs4.builder import ParserRejectedMarkup

from sprawl.crawler import links as links_module
from sprawl.crawler.errors import ParseError
from sprawl.crawler.http import Page


class TestIsCrawlableHref:
    """Tests for is_crawlable_href function."""

    def test_absolute_http(self):
        """Absolute http and https links should be followed."""
        assert links_module.is_crawlable_href("http://a.com")
        assert links_module.is_crawlable_href("https://a.com/page")

    def test_relative_rejected(self):
        """Relative and fragment links should be skipped."""
        assert not links_module.is_crawlable_href("/relative")
        assert not links_module.is_crawlable_href("#top")
        assert not links_module.is_crawlable_href("mailto:someone@example.com")

    def test_too_short(self):
        """Values of six characters or fewer should be skipped."""
        assert not links_module.is_crawlable_href("http:/")
        assert links_module.is_crawlable_href("http://")

    def test_case_sensitive(self):
        """Upper-case schemes should not match."""
        assert not links_module.is_crawlable_href("HTTP://A.COM")

    def test_loose_prefix_match(self):
        """Anything with http in the first six characters passes."""
        assert links_module.is_crawlable_href("xhttp://a.com")
        assert not links_module.is_crawlable_href("ftp://http.example.com")


class TestExtractLinks:
    """Tests for extract_links function."""

    def test_extract_absolute_links_only(self):
        """Should keep absolute links and drop relative and self links."""
        html = b"""
        <html>
            <body>
                <a href="http://a.com">A</a>
                <a href="/relative">Relative</a>
                <a href="http://source.com">Self</a>
            </body>
        </html>
        """

        result = links_module.extract_links(html, "http://source.com")

        assert result == {"http://a.com"}

    def test_deduplicates(self):
        """Repeated links on one page should appear once."""
        html = b"""
        <a href="https://example.com/page">One</a>
        <a href="https://example.com/page">Two</a>
        <a href="https://example.com/other">Three</a>
        """

        result = links_module.extract_links(html, "https://example.com")

        assert result == {"https://example.com/page", "https://example.com/other"}

    def test_trims_whitespace(self):
        """Enclosing whitespace should be removed from link values."""
        html = b'<a href="  https://example.com/spaced  ">Spaced</a>'

        result = links_module.extract_links(html, "https://example.com")

        assert result == {"https://example.com/spaced"}

    def test_first_duplicate_href_wins(self):
        """Only the first matching href on an element should be taken."""
        html = b'<a href="http://first.com" href="http://second.com">x</a>'

        result = links_module.extract_links(html, "http://src.com")

        assert result == {"http://first.com"}

    def test_duplicate_href_skips_non_matching_first(self):
        """A non-matching first href should not hide a later matching one."""
        html = b'<a href="/relative" href="http://second.com" href="http://third.com">x</a>'

        result = links_module.extract_links(html, "http://src.com")

        assert result == {"http://second.com"}

    def test_trimmed_self_link_removed(self):
        """A self link wrapped in whitespace should still be suppressed."""
        html = b'<a href=" http://source.com ">Self</a>'

        result = links_module.extract_links(html, "http://source.com")

        assert result == set()

    def test_ignore_anchors_without_href(self):
        """Anchors without href and non-anchor elements should be ignored."""
        html = b"""
        <a name="top">No href</a>
        <link href="https://example.com/style.css">
        <div href="https://example.com/div">Div</div>
        <a href="https://example.com/valid">Valid</a>
        """

        result = links_module.extract_links(html, "https://example.com")

        assert result == {"https://example.com/valid"}

    def test_textually_distinct_urls_kept(self):
        """URLs are compared as strings with no canonicalization."""
        html = b"""
        <a href="https://example.com/page">One</a>
        <a href="https://example.com/page/">Two</a>
        <a href="https://EXAMPLE.com/page">Three</a>
        """

        result = links_module.extract_links(html, "https://example.com")

        assert len(result) == 3

    def test_empty_content(self):
        """Empty content should yield no links."""
        assert links_module.extract_links(b"", "https://example.com") == set()

    def test_malformed_markup_still_parses(self):
        """Unclosed tags should not prevent extraction."""
        html = b'<html><body><div><a href="https://example.com/x">x<p>'

        result = links_module.extract_links(html, "https://example.com")

        assert result == {"https://example.com/x"}

    @mock.patch("sprawl.crawler.links.BeautifulSoup")
    def test_rejected_markup_raises_parse_error(self, mock_soup):
        """Markup the parser rejects should raise ParseError."""
        mock_soup.side_effect = ParserRejectedMarkup("bad markup")

        with pytest.raises(ParseError) as exc_info:
            links_module.extract_links(b"<<<", "https://example.com")

        assert exc_info.value.url == "https://example.com"


class TestExtractPageLinks:
    """Tests for extract_page_links function."""

    def test_html_page(self):
        """HTML pages should be parsed."""
        page = Page(
            url="https://example.com",
            content=b'<a href="https://example.com/a">A</a>',
            content_type="text/html; charset=utf-8",
        )

        assert links_module.extract_page_links(page) == {"https://example.com/a"}

    def test_xhtml_page(self):
        """XHTML pages should be parsed."""
        page = Page(
            url="https://example.com",
            content=b'<a href="https://example.com/a">A</a>',
            content_type="application/xhtml+xml",
        )

        assert links_module.extract_page_links(page) == {"https://example.com/a"}

    def test_missing_content_type(self):
        """Pages without a declared type should be parsed."""
        page = Page(url="https://example.com", content=b'<a href="https://b.com/x">B</a>')

        assert links_module.extract_page_links(page) == {"https://b.com/x"}

    def test_non_html_page(self):
        """Non-HTML content types should raise ParseError."""
        page = Page(
            url="https://example.com/file.pdf",
            content=b"%PDF-1.4",
            content_type="application/pdf",
        )

        with pytest.raises(ParseError):
            links_module.extract_page_links(page)

    def test_binary_content(self):
        """Binary bodies served as HTML should raise ParseError."""
        page = Page(
            url="https://example.com/blob",
            content=b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR",
            content_type="text/html",
        )

        with pytest.raises(ParseError):
            links_module.extract_page_links(page)
