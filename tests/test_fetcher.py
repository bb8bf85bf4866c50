# File: tests/test_fetcher.py
import asyncio

import pytest
from aiohttp import ClientSession, web
from bs4 import BeautifulSoup

from conftest import make_config, serve_app
from sitemap_builder.crawler.fetcher import Fetcher, parse_document
from sitemap_builder.errors import FetchError, ParseError


def build_app(seen_agents: list) -> web.Application:
    app = web.Application()

    async def ok(request):
        seen_agents.append(request.headers.get("User-Agent"))
        return web.Response(text='<a href="/x">X</a>', content_type="text/html")

    async def created(_):
        return web.Response(status=201, text="<p>created</p>", content_type="text/html")

    async def redirect(_):
        raise web.HTTPFound("/ok")

    async def pdf(_):
        return web.Response(body=b"%PDF-1.4", content_type="application/pdf")

    async def slow(_):
        await asyncio.sleep(2)
        return web.Response(text="<p>late</p>", content_type="text/html")

    app.router.add_get("/ok", ok)
    app.router.add_get("/created", created)
    app.router.add_get("/redirect", redirect)
    app.router.add_get("/file.pdf", pdf)
    app.router.add_get("/slow", slow)
    return app


@pytest.mark.asyncio()
async def test_fetch_variants(unused_tcp_port: int):
    agents: list = []
    async for base in serve_app(build_app(agents), unused_tcp_port):
        config = make_config(f"{base}/", timeout=0.5, user_agent="TestAgent/1.0")
        async with ClientSession(headers={"User-Agent": config.user_agent}) as session:
            fetcher = Fetcher(session, config)

            document = await fetcher.fetch(f"{base}/ok")
            assert isinstance(document, BeautifulSoup)
            assert document.find("a")["href"] == "/x"
            assert agents == ["TestAgent/1.0"]

            # redirects are followed by the HTTP stack
            document = await fetcher.fetch(f"{base}/redirect")
            assert document.find("a") is not None

            # only 200 OK is accepted, even for other 2xx codes
            with pytest.raises(FetchError, match="status code 201"):
                await fetcher.fetch(f"{base}/created")

            with pytest.raises(FetchError, match="status code 404"):
                await fetcher.fetch(f"{base}/nope")

            with pytest.raises(FetchError, match="content type"):
                await fetcher.fetch(f"{base}/file.pdf")

            with pytest.raises(FetchError, match="timed out"):
                await fetcher.fetch(f"{base}/slow")


@pytest.mark.asyncio()
async def test_fetch_connection_error(unused_tcp_port: int):
    config = make_config()
    async with ClientSession() as session:
        fetcher = Fetcher(session, config)
        with pytest.raises(FetchError) as info:
            await fetcher.fetch(f"http://localhost:{unused_tcp_port}/")
    assert not isinstance(info.value, ParseError)
    assert info.value.url == f"http://localhost:{unused_tcp_port}/"


@pytest.mark.asyncio()
async def test_fetch_invalid_url():
    async with ClientSession() as session:
        fetcher = Fetcher(session, make_config())
        with pytest.raises(FetchError):
            await fetcher.fetch("not a url")


def test_parse_document_rejected_markup(monkeypatch):
    import sitemap_builder.crawler.fetcher as fetcher_module
    from bs4 import ParserRejectedMarkup

    def reject(*args, **kwargs):
        raise ParserRejectedMarkup("broken")

    monkeypatch.setattr(fetcher_module, "BeautifulSoup", reject)
    with pytest.raises(ParseError) as info:
        parse_document("<html>", "https://x.test/")
    assert isinstance(info.value, FetchError)
    assert "https://x.test/" in str(info.value)


def test_parse_document_bytes():
    document = parse_document('<meta charset="utf-8"><a href="/x">Привет</a>'.encode("utf-8"))
    assert document.find("a").get_text() == "Привет"
