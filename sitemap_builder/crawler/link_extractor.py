"""
Link extraction from a parsed HTML tree.
"""
from __future__ import annotations

from typing import Iterator, List, Set

from bs4.element import NavigableString, PageElement, PreformattedString, Tag

from sitemap_builder.crawler.models import Link
from sitemap_builder.crawler.resolver import resolve_url

__all__ = ("extract_links", "is_internal", "link_text")


def _walk(root: PageElement) -> Iterator[PageElement]:
    """Pre-order traversal in document order."""
    stack: List[PageElement] = [root]
    while stack:
        node = stack.pop()
        yield node
        if isinstance(node, Tag):
            stack.extend(reversed(node.contents))


def _is_text(node: PageElement) -> bool:
    # Comment, CData, Doctype, ProcessingInstruction are PreformattedString
    return isinstance(node, NavigableString) and not isinstance(node, PreformattedString)


def link_text(tag: Tag) -> str:
    """Concatenated descendant text of *tag* with whitespace collapsed."""
    raw = "".join(str(node) for node in _walk(tag) if _is_text(node))
    return " ".join(raw.split())


def is_internal(href: str, base_domain: str) -> bool:
    """
    Root-relative hrefs and hrefs starting with *base_domain* are internal.

    This is a plain string prefix test, so ``https://a.com.evil.com`` passes
    for ``https://a.com`` and ``//cdn.host/x`` counts as root-relative.
    """
    return href.startswith("/") or href.startswith(base_domain)


def extract_links(root: PageElement, base_domain: str) -> List[Link]:
    """
    Extract internal links from the tree under *root*.

    Root-relative hrefs are resolved against *base_domain*. Links are unique
    by href within one call, the first anchor in document order wins.
    """
    seen: Set[str] = set()
    links: List[Link] = []
    for node in _walk(root):
        if not isinstance(node, Tag) or node.name != "a":
            continue
        href = node.get("href")
        if not isinstance(href, str) or not is_internal(href, base_domain):
            continue
        if href.startswith("/"):
            href = resolve_url(base_domain, href)
        if href in seen:
            continue
        seen.add(href)
        links.append(Link(href=href, text=link_text(node)))
    return links
