# File: sitemap_builder/engine.py
"""sitemap_builder.engine: Оркестрация обхода и построения карты сайта."""

from __future__ import annotations

import asyncio
from typing import Tuple

from sitemap_builder.config import CrawlConfig
from sitemap_builder.crawler.crawler import SitemapCrawler
from sitemap_builder.crawler.models import CrawlResult
from sitemap_builder.logger import logger
from sitemap_builder.sitemap import encode_sitemap

__all__ = ["start_crawl", "build_sitemap"]


async def start_crawl(cfg: CrawlConfig) -> CrawlResult:
    """
    Загружает стартовую страницу и выполняет BFS-обход от неё.

    Ошибка загрузки стартовой страницы фатальна (FetchError/ParseError
    пробрасываются вызывающему), ошибки на остальных страницах только
    логируются и попадают в CrawlResult.failures.
    """
    seed_url = str(cfg.seed_url)
    async with SitemapCrawler(cfg) as crawler:
        seed = await crawler.fetch_seed(seed_url)
        links = await crawler.crawl([seed], cfg.max_depth)
    return crawler.result(links)


def build_sitemap(cfg: CrawlConfig) -> Tuple[str, CrawlResult]:
    """Синхронный фасад: обход и сериализация XML за один вызов."""
    logger.info("Building sitemap for %s", cfg.seed_url)
    result = asyncio.run(start_crawl(cfg))
    return encode_sitemap(result.links), result
