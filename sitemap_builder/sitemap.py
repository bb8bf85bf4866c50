"""sitemap_builder.sitemap: Сериализация найденных ссылок в XML по протоколу sitemaps.org."""

from __future__ import annotations

from pathlib import Path
from typing import Sequence, Union

from lxml import etree

from sitemap_builder.crawler.models import Link
from sitemap_builder.errors import EncodingError

__all__ = ("SITEMAP_NS", "XML_DECLARATION", "encode_sitemap", "write_sitemap")

SITEMAP_NS = "http://www.sitemaps.org/schemas/sitemap/0.9"
XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>\n'


def _q(tag: str) -> str:
    return f"{{{SITEMAP_NS}}}{tag}"


def encode_sitemap(links: Sequence[Link]) -> str:
    """Строит документ <urlset> с одним <url><loc> на ссылку, в порядке входа.

    Текст ссылок отбрасывается, в <loc> попадает только href.

    Raises:
        EncodingError: если href нельзя представить в XML.

    Пример:
    ```python
    from sitemap_builder.crawler.models import Link
    from sitemap_builder.sitemap import encode_sitemap

    print(encode_sitemap([Link("https://example.com/")]))
    ```
    """
    root = etree.Element(_q("urlset"), nsmap={None: SITEMAP_NS})
    try:
        for link in links:
            url = etree.SubElement(root, _q("url"))
            etree.SubElement(url, _q("loc")).text = link.href
        body = etree.tostring(root, encoding="unicode", pretty_print=True)
    except (ValueError, etree.LxmlError) as exc:
        raise EncodingError(f"marshaling XML: {exc}") from exc
    return XML_DECLARATION + body


def write_sitemap(document: str, path: Union[str, Path]) -> Path:
    """Сохраняет закодированную карту сайта в UTF-8 по указанному пути."""
    output = Path(path)
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(document, encoding="utf-8")
    return output
