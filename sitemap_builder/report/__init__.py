"""sitemap_builder.report: Отчёты об обходе, используемые CLI и тестами."""

from sitemap_builder.report.json_report import render_json

__all__ = ["render_json"]
