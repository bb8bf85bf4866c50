"""sitemap_builder.errors: Иерархия исключений построителя карты сайта."""

from __future__ import annotations

__all__ = ("SitemapBuilderError", "InputError", "FetchError", "ParseError", "EncodingError")


class SitemapBuilderError(Exception):
    """Базовое исключение пакета."""


class InputError(SitemapBuilderError):
    """Некорректные входные данные обхода (пустой набор стартовых ссылок, глубина < 0)."""


class FetchError(SitemapBuilderError):
    """Страница не получена: ошибка запроса, сети или статус, отличный от 200 OK."""

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"fetching URL {url}: {reason}")
        self.url = url
        self.reason = reason


class ParseError(FetchError):
    """Тело ответа не удалось разобрать как HTML."""

    def __init__(self, url: str, reason: str) -> None:
        SitemapBuilderError.__init__(self, f"parsing HTML from {url}: {reason}")
        self.url = url
        self.reason = reason


class EncodingError(SitemapBuilderError):
    """Ошибка сериализации XML карты сайта."""
