"""
Модуль для загрузки и валидации конфигурации построителя карты сайта.
Используется Pydantic для описания схемы и проверки данных.
"""
from __future__ import annotations

import errno
import json
import os
from pathlib import Path
from typing import Any, Literal, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, HttpUrl

#: Протокол sitemaps.org допускает не более 50 000 URL в одном файле.
SITEMAP_URL_LIMIT = 50_000

DEFAULT_USER_AGENT = "Mozilla/5.0 (compatible; SitemapBuilder/1.0)"


class CrawlConfig(BaseModel):
    """Конфигурация для одного запуска обхода."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    seed_url: HttpUrl = Field(..., description="Стартовый URL обхода.")
    max_depth: int = Field(3, ge=0, description="Максимальная глубина обхода ссылок.")
    timeout: float = Field(10.0, gt=0, description="Таймаут на один запрос (секунд).")
    user_agent: str = Field(DEFAULT_USER_AGENT, min_length=1, description="Заголовок User-Agent.")
    concurrency: int = Field(4, ge=1, description="Число одновременных запросов в пределах уровня.")
    crawl_timeout: Optional[float] = Field(None, gt=0, description="Таймаут всего обхода (секунд).")
    max_urls: int = Field(
        SITEMAP_URL_LIMIT, ge=1, le=SITEMAP_URL_LIMIT, description="Жесткий лимит по числу URL."
    )
    scope: Literal["page", "origin"] = Field(
        "page",
        description="Граница внутренних ссылок: URL текущей страницы или origin стартового URL.",
    )


_DEFAULT_CFG = Path("configs/default.yaml")


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ValueError(f"Неправильный YAML в {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Верхний уровень YAML должен быть mapping, получено {type(data).__name__}")
    return data


def _read_json(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8")) or {}
    except json.JSONDecodeError as exc:
        raise ValueError(f"Неправильный JSON в {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Верхний уровень JSON должен быть mapping, получено {type(data).__name__}")
    return data


def _read_file(path: Path) -> dict[str, Any]:
    suffix = path.suffix.lower()
    if suffix in (".yaml", ".yml"):
        return _read_yaml(path)
    if suffix == ".json":
        return _read_json(path)
    raise ValueError(f"Неподдерживаемый формат конфига: {suffix}")


def load_config(path: Union[str, Path, None] = None, **overrides: Any) -> CrawlConfig:
    """
    Читает YAML или JSON, накладывает overrides и возвращает проверенный CrawlConfig.

    Без явного пути используется configs/default.yaml, если он существует;
    иначе конфигурация строится только из overrides. Значения None в overrides
    игнорируются. Отсутствие явно указанного файла -> FileNotFoundError.
    """
    data: dict[str, Any] = {}
    if path is None:
        if _DEFAULT_CFG.is_file():
            data = _read_file(_DEFAULT_CFG)
    else:
        path_obj = Path(path).expanduser().resolve()
        if not path_obj.is_file():
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(path_obj))
        data = _read_file(path_obj)

    data.update({key: value for key, value in overrides.items() if value is not None})
    return CrawlConfig(**data)
