# File: tests/test_resolver.py
import pytest

from sitemap_builder.crawler.resolver import resolve_url


@pytest.mark.parametrize(
    "href",
    [
        "https://a.com/",
        "https://a.com/x/y?q=1#frag",
        "http://other.org/path",
        "mailto:someone@a.com",
    ],
)
def test_absolute_href_unchanged(href):
    assert resolve_url("https://base.test/dir/", href) == href


@pytest.mark.parametrize(
    "base,href,expected",
    [
        ("https://a.com/x/", "../y", "https://a.com/y"),
        ("https://a.com", "/about", "https://a.com/about"),
        ("https://a.com/x/page", "other", "https://a.com/x/other"),
        ("https://a.com/x/page", "?q=2", "https://a.com/x/page?q=2"),
        ("https://a.com/x/page", "#top", "https://a.com/x/page#top"),
        ("https://a.com/x/page", "//cdn.a.com/lib.js", "https://cdn.a.com/lib.js"),
    ],
)
def test_relative_resolution(base, href, expected):
    assert resolve_url(base, href) == expected


def test_empty_href_returns_base():
    assert resolve_url("https://a.com/x/page", "") == "https://a.com/x/page"


def test_unparseable_href_returned_verbatim():
    href = "http://[broken/path"
    assert resolve_url("https://a.com/", href) == href


def test_unusable_base_returns_href():
    assert resolve_url("http://[broken", "/about") == "/about"
