#!/usr/bin/env python3
"""
Точка входа для построения карты сайта через командную строку.

Команды:
  build     Обойти сайт и вывести/сохранить sitemap.xml
  config    Показать текущую конфигурацию

Общие опции:
  --config PATH       Путь к YAML/JSON-конфигу (default: configs/default.yaml, если есть)
  --url URL           Стартовый URL (override seed_url)
  --depth INT         Макс. глубина обхода (override max_depth)
  --log-level LEVEL   Уровень логирования (DEBUG, INFO, ...)
  --log-file PATH     Файл для логов (stderr, если не указан)
  --log-format FORMAT Формат логирования

Команда build опции:
  --output PATH       Сохранить sitemap в файл вместо stdout
  --report PATH       Сохранить JSON-отчёт об обходе
  --pretty            Преформатировать JSON-отчёт (отступ 2)
  --crawl-timeout SEC Таймаут всего обхода (секунд)

Дополнительно:
  --version, -v       Показать версию

Пример:
  sitemap-builder --url https://example.com --depth 2 build --output sitemap.xml
"""
import sys
from pathlib import Path

import click
from pydantic import ValidationError

from sitemap_builder import __version__
from sitemap_builder.config import load_config
from sitemap_builder.engine import build_sitemap
from sitemap_builder.errors import SitemapBuilderError
from sitemap_builder.logger import DEFAULT_FORMAT, init_logging
from sitemap_builder.report import render_json
from sitemap_builder.sitemap import write_sitemap

CONTEXT_SETTINGS = dict(help_option_names=["--help"])


def print_error(message: str):
    click.secho(message, fg='red', err=True)
    sys.exit(1)


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', '-v', message='SitemapBuilder, version %(version)s')
@click.option(
    '--config', '-c', 'config_path',
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help='Путь к файлу конфигурации YAML/JSON.'
)
@click.option('--url', '-u', 'seed_url', default=None, help='Стартовый URL (override seed_url)')
@click.option(
    '--depth', '-d', 'max_depth',
    type=click.IntRange(min=0),
    default=None,
    help='Макс. глубина обхода (override max_depth)'
)
@click.option(
    '--log-level', 'log_level',
    default='INFO', show_default=True,
    type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']),
    help='Уровень логирования'
)
@click.option(
    '--log-file', 'log_file',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Путь к файлу логов (stderr, если не указан)'
)
@click.option(
    '--log-format', 'log_format',
    default=DEFAULT_FORMAT,
    show_default=True,
    help='Строка формата для логов'
)
@click.pass_context
def cli(ctx, config_path, seed_url, max_depth, log_level, log_file, log_format):
    """Группа команд SitemapBuilder CLI."""
    init_logging(
        level=log_level,
        log_file=str(log_file) if log_file else None,
        log_format=log_format
    )
    ctx.ensure_object(dict)
    ctx.obj['config_path'] = config_path
    ctx.obj['overrides'] = {'seed_url': seed_url, 'max_depth': max_depth}


def _load(ctx, **extra):
    try:
        return load_config(ctx.obj['config_path'], **ctx.obj['overrides'], **extra)
    except (ValidationError, ValueError, TypeError, OSError) as e:
        print_error(f'Ошибка загрузки конфигурации: {e}')


@cli.command('build', context_settings=CONTEXT_SETTINGS)
@click.option(
    '--output', '-o', 'output',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Сохранить sitemap в файл'
)
@click.option(
    '--report', '-r', 'report',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Сохранить JSON-отчёт об обходе'
)
@click.option(
    '--pretty', is_flag=True,
    help='Преформатировать JSON-отчёт (отступ 2)'
)
@click.option(
    '--crawl-timeout', 'crawl_timeout',
    type=float,
    default=None,
    help='Таймаут всего обхода (секунд)'
)
@click.pass_context
def build(ctx, output, report, pretty, crawl_timeout):
    """Обойти сайт и сгенерировать sitemap.xml."""
    cfg = _load(ctx, crawl_timeout=crawl_timeout)
    click.echo(f'Crawling {cfg.seed_url} (max depth {cfg.max_depth})', err=True)
    try:
        document, result = build_sitemap(cfg)
    except SitemapBuilderError as e:
        print_error(f'Ошибка при построении карты сайта: {e}')

    if not result.completed:
        click.secho('Обход прерван по таймауту, карта сайта неполная', fg='yellow', err=True)

    if output:
        try:
            saved = write_sitemap(document, output)
            click.echo(f'Sitemap: {saved} ({len(result.links)} URLs)', err=True)
        except OSError as e:
            print_error(f'Ошибка при сохранении карты сайта: {e}')
    else:
        click.echo(document, nl=False)

    if report:
        try:
            saved_report = render_json(result, report, pretty=pretty)
            click.echo(f'JSON report: {saved_report}', err=True)
        except OSError as e:
            print_error(f'Ошибка при сохранении JSON: {e}')


@cli.command('config', context_settings=CONTEXT_SETTINGS)
@click.pass_context
def show_config(ctx):
    """Показать текущую конфигурацию в JSON."""
    cfg = _load(ctx)
    click.echo(cfg.model_dump_json(indent=2))


if __name__ == "__main__":
    cli()
