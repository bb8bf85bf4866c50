"""
Fetcher module: one GET per crawl step, strict status check, HTML parsing.
"""
from __future__ import annotations

import asyncio
import logging
from http import HTTPStatus
from typing import Union

from aiohttp import ClientError, ClientSession, ClientTimeout
from bs4 import BeautifulSoup, ParserRejectedMarkup

from sitemap_builder.config import CrawlConfig
from sitemap_builder.errors import FetchError, ParseError

__all__ = ("Fetcher", "parse_document", "HTML_TYPES")

HTML_TYPES = ("text/html", "application/xhtml+xml")


def parse_document(markup: Union[str, bytes], url: str = "") -> BeautifulSoup:
    """Parse *markup* into a tree; the first of duplicated attributes is kept."""
    try:
        return BeautifulSoup(markup, "html.parser", on_duplicate_attribute="ignore")
    except ParserRejectedMarkup as exc:
        raise ParseError(url, str(exc)) from exc


class Fetcher:
    """Fetches and parses single pages over a shared session."""

    def __init__(self, session: ClientSession, config: CrawlConfig) -> None:
        self.session = session
        self.config = config
        self._timeout = ClientTimeout(total=config.timeout)
        self.logger = logging.getLogger("SitemapBuilder")

    async def fetch(self, url: str) -> BeautifulSoup:
        """
        Fetch *url* and return its parsed document.

        Raises FetchError on transport failure, any status other than 200 OK
        or a non-HTML content type; ParseError if the body cannot be parsed.
        """
        try:
            async with self.session.get(url, timeout=self._timeout) as resp:
                if resp.status != HTTPStatus.OK:
                    raise FetchError(url, f"received status code {resp.status}")
                mime = resp.headers.get("Content-Type", "").split(";", 1)[0].strip().lower()
                if mime and mime not in HTML_TYPES:
                    raise FetchError(url, f"unsupported content type {mime}")
                body = await resp.read()
        except asyncio.TimeoutError as exc:
            raise FetchError(url, f"timed out after {self.config.timeout} s") from exc
        except (ClientError, ValueError) as exc:
            raise FetchError(url, str(exc) or type(exc).__name__) from exc
        self.logger.debug("GET %s -> %d bytes", url, len(body))
        return parse_document(body, url)
