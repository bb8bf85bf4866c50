from __future__ import annotations

import asyncio
import logging
import time
from typing import Dict, List, Optional, Sequence, Set, Union
from urllib.parse import urlsplit

from aiohttp import ClientSession
from bs4 import BeautifulSoup

from sitemap_builder.config import CrawlConfig
from sitemap_builder.crawler.fetcher import Fetcher
from sitemap_builder.crawler.link_extractor import extract_links
from sitemap_builder.crawler.models import CrawlNode, CrawlResult, FetchFailure, Link
from sitemap_builder.errors import FetchError, InputError

__all__ = ("SitemapCrawler",)


class SitemapCrawler:
    """
    Level-synchronous BFS crawler.

    All nodes of one depth are fetched concurrently, then their links are
    merged in frontier order, so the output is the same as a sequential BFS:
    level order, ties broken by discovery order.
    """

    def __init__(self, config: CrawlConfig, fetcher: Optional[Fetcher] = None) -> None:
        self.config = config
        self.fetcher = fetcher
        self.session: Optional[ClientSession] = None
        self.failures: List[FetchFailure] = []
        self.completed: bool = True
        self.duration: float = 0.0
        self.max_depth: int = config.max_depth
        self.logger = logging.getLogger("SitemapBuilder")
        self._semaphore = asyncio.Semaphore(config.concurrency)
        self._prefetched: Dict[str, BeautifulSoup] = {}
        self._limit_reported = False

    async def __aenter__(self) -> SitemapCrawler:
        if self.fetcher is None:
            self.session = ClientSession(
                headers={"User-Agent": self.config.user_agent},
                raise_for_status=False,
            )
            self.fetcher = Fetcher(self.session, self.config)
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self.session and not self.session.closed:
            await self.session.close()

    async def fetch_seed(self, url: str) -> Link:
        """
        Fetch the seed page; failure here is fatal and propagates.

        The parsed document is kept and reused when the crawl expands the root.
        """
        document = await self._require_fetcher().fetch(url)
        self._prefetched[url] = document
        title = document.find("title")
        text = " ".join(title.get_text().split()) if title else ""
        return Link(href=url, text=text)

    async def crawl(self, seeds: Sequence[Link], max_depth: int) -> List[Link]:
        """
        Crawl from ``seeds[0]`` down to *max_depth* and return the links found.

        Only the first seed is the BFS root; the rest are ignored. Every
        dequeued node is part of the result even if fetching it fails, nodes
        at *max_depth* are never fetched.
        """
        if not seeds:
            raise InputError("no links to traverse")
        if max_depth < 0:
            raise InputError(f"max_depth must be >= 0, got {max_depth}")
        if len(seeds) > 1:
            self.logger.warning(
                "Only the first of %d seed links is crawled: %s", len(seeds), seeds[0].href
            )
        fetcher = self._require_fetcher()

        root = seeds[0]
        self.logger.info("Start crawl: %s (max depth %d)", root.href, max_depth)
        start = time.monotonic()
        loop = asyncio.get_running_loop()
        deadline = None if self.config.crawl_timeout is None else loop.time() + self.config.crawl_timeout

        self.failures = []
        self.completed = True
        self.max_depth = max_depth
        self._limit_reported = False
        visited: Set[str] = {root.href}
        frontier: List[CrawlNode] = [CrawlNode(root, 0)]
        results: List[Link] = []
        depth = 0

        while frontier:
            results.extend(node.link for node in frontier)
            if depth >= max_depth:
                break
            try:
                outcomes = await self._fetch_level(fetcher, frontier, deadline)
            except asyncio.TimeoutError:
                self.completed = False
                self.logger.warning(
                    "Crawl deadline of %.1f s exceeded at depth %d, returning %d links",
                    self.config.crawl_timeout,
                    depth,
                    len(results),
                )
                break

            next_frontier: List[CrawlNode] = []
            for node, outcome in zip(frontier, outcomes):
                # failures are recorded in frontier order, not completion order
                if isinstance(outcome, FetchFailure):
                    self.failures.append(outcome)
                    continue
                for neighbor in extract_links(outcome, self._base_domain(node, root)):
                    # no await between check and insert: atomic on the event loop
                    if neighbor.href in visited:
                        continue
                    if len(visited) >= self.config.max_urls:
                        self._report_limit()
                        continue
                    visited.add(neighbor.href)
                    next_frontier.append(CrawlNode(neighbor, node.depth + 1))
            self.logger.debug("Depth %d done, %d new links", depth, len(next_frontier))
            frontier = next_frontier
            depth += 1

        self.duration = time.monotonic() - start
        self.logger.info(
            "Finished: %d links in %.2f s, %d pages skipped",
            len(results),
            self.duration,
            len(self.failures),
        )
        return results

    def result(self, links: List[Link]) -> CrawlResult:
        """Wrap crawl output with failures and run statistics."""
        return CrawlResult(
            seed_url=links[0].href if links else str(self.config.seed_url),
            max_depth=self.max_depth,
            links=list(links),
            failures=list(self.failures),
            completed=self.completed,
            duration=self.duration,
        )

    async def _fetch_level(
        self, fetcher: Fetcher, nodes: List[CrawlNode], deadline: Optional[float]
    ) -> List[Union[BeautifulSoup, FetchFailure]]:
        gathered = asyncio.gather(*(self._expand(fetcher, node) for node in nodes))
        if deadline is None:
            return await gathered
        remaining = max(0.0, deadline - asyncio.get_running_loop().time())
        return await asyncio.wait_for(gathered, timeout=remaining)

    async def _expand(self, fetcher: Fetcher, node: CrawlNode) -> Union[BeautifulSoup, FetchFailure]:
        url = node.link.href
        prefetched = self._prefetched.pop(url, None)
        if prefetched is not None:
            return prefetched
        async with self._semaphore:
            try:
                return await fetcher.fetch(url)
            except FetchError as exc:
                self.logger.warning("Failed to fetch %s: %s", url, exc.reason)
                return FetchFailure(url=url, depth=node.depth, reason=str(exc))

    def _base_domain(self, node: CrawlNode, root: Link) -> str:
        if self.config.scope == "origin":
            parts = urlsplit(root.href)
            return f"{parts.scheme}://{parts.netloc}/"
        return node.link.href

    def _report_limit(self) -> None:
        if not self._limit_reported:
            self._limit_reported = True
            self.logger.warning("URL limit of %d reached, further links dropped", self.config.max_urls)

    def _require_fetcher(self) -> Fetcher:
        if self.fetcher is None:
            raise RuntimeError("Session not initialized")
        return self.fetcher
