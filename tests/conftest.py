# File: tests/conftest.py
from collections.abc import AsyncIterator
from typing import Dict, List, Union

import pytest
from aiohttp import web

from sitemap_builder.config import CrawlConfig
from sitemap_builder.crawler.fetcher import parse_document
from sitemap_builder.errors import FetchError

#: page body, an HTTP status for an error response, or an error to raise
PageSpec = Union[str, int, FetchError]


class FakeFetcher:
    """In-memory fetcher: serves HTML by URL and records every request."""

    def __init__(self, pages: Dict[str, PageSpec]) -> None:
        self.pages = pages
        self.calls: List[str] = []

    async def fetch(self, url: str):
        self.calls.append(url)
        page = self.pages.get(url, 404)
        if isinstance(page, FetchError):
            raise page
        if isinstance(page, int):
            raise FetchError(url, f"received status code {page}")
        return parse_document(page, url)


def make_config(seed_url: str = "https://x.test/", **kwargs) -> CrawlConfig:
    """Return a CrawlConfig with test-friendly defaults."""
    params = dict(seed_url=seed_url, max_depth=1, timeout=2.0, user_agent="TestAgent/1.0")
    params.update(kwargs)
    return CrawlConfig(**params)


def serve_app_routes(pages: Dict[str, PageSpec], hits: Dict[str, int]) -> web.Application:
    """Build an aiohttp app serving *pages*; counts requests per path in *hits*."""
    app = web.Application()

    def handler_for(path: str, page: PageSpec):
        async def handle(_):
            hits[path] = hits.get(path, 0) + 1
            if isinstance(page, int):
                return web.Response(status=page)
            return web.Response(text=page, content_type="text/html")

        return handle

    for path, page in pages.items():
        app.router.add_get(path, handler_for(path, page))
    return app


async def serve_app(app: web.Application, port: int) -> AsyncIterator[str]:
    """Start *app* on *port*, yield base URL, ensure cleanup."""
    runner = web.AppRunner(app)
    await runner.setup()
    site = web.TCPSite(runner, "localhost", port)
    await site.start()
    try:
        yield f"http://localhost:{port}"
    finally:
        await runner.cleanup()


@pytest.fixture()
def x_test_site() -> Dict[str, PageSpec]:
    """Seed linking to /a and /b, /a linking further to /c."""
    return {
        "https://x.test/": '<html><body><a href="/a">A</a> <a href="/b">B</a></body></html>',
        "https://x.test/a": '<a href="/c">C</a>',
        "https://x.test/b": "<p>leaf</p>",
        "https://x.test/c": "<p>deep</p>",
    }
