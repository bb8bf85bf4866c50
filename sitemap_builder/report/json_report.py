# sitemap_builder/report/json_report.py

"""
Генерация JSON-отчёта об обходе.

Сериализация объекта CrawlResult в файл.
"""
from pathlib import Path

from sitemap_builder.crawler.models import CrawlResult


def render_json(result: CrawlResult, output_path: Path | str, pretty: bool = True) -> Path:
    """
    Сохраняет отчёт об обходе в формате JSON по указанному пути.

    :param result: объект CrawlResult с данными обхода
    :param output_path: путь к JSON-файлу
    :param pretty: форматировать с отступом 2
    :return: Path сохранённого файла
    """
    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(result.json(pretty=pretty), encoding="utf-8")
    return output
