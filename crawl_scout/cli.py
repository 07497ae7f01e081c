# === FILE: crawl_scout/cli.py ===
#!/usr/bin/env python3
"""
Точка входа CrawlScout для командной строки.

Команды:
  serve     Запустить HTTP-сервис (/api/scrape, /api/crawl, /api/events)
  crawl     Обойти сайт в ширину от URL и вывести/сохранить отчёт
  scrape    Извлечь метаданные одной страницы
  config    Показать текущую конфигурацию

Общие опции:
  --config PATH       Путь к YAML/JSON-конфигу (default: configs/default.yaml, если есть)
  --log-level LEVEL   Уровень логирования (DEBUG, INFO, ...)
  --log-file PATH     Файл для логов (только stderr, если не указан)
  --log-format FORMAT Формат логирования

Дополнительно:
  --version, -v       Показать версию CrawlScout

Пример:
  crawl-scout crawl https://example.com --max-pages 10 --max-depth 2 --json crawl.json
"""
import json
import sys
from pathlib import Path

import click
from pydantic import ValidationError

from crawl_scout import __version__
from crawl_scout.api import run_server
from crawl_scout.config import (
    DEFAULT_DEPTH,
    DEFAULT_PAGES,
    CrawlRequest,
    ScrapeRequest,
    load_config,
)
from crawl_scout.engine import Engine
from crawl_scout.logger import DEFAULT_FORMAT, init_logging
from crawl_scout.report import render_html, render_json
from crawl_scout.utils import InvalidUrlError

CONTEXT_SETTINGS = dict(help_option_names=["--help"])


def print_error(message: str):
    click.secho(message, fg='red', err=True)
    sys.exit(1)


def _echo_json(data, pretty: bool) -> None:
    click.echo(json.dumps(data, ensure_ascii=False, indent=2 if pretty else None))


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', '-v', message='CrawlScout, version %(version)s')
@click.option(
    '--config', '-c', 'config_path',
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help='Путь к файлу конфигурации YAML/JSON.'
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
    help='Путь к файлу логов (только stderr, если не указан)'
)
@click.option(
    '--log-format', 'log_format',
    default=DEFAULT_FORMAT,
    help='Строка формата для логов'
)
@click.pass_context
def cli(ctx, config_path, log_level, log_file, log_format):
    """Группа команд CrawlScout CLI."""
    init_logging(
        level=log_level,
        log_file=str(log_file) if log_file else None,
        log_format=log_format
    )
    try:
        cfg = load_config(config_path)
    except (OSError, ValueError, TypeError) as e:
        print_error(f'Ошибка загрузки конфигурации: {e}')
    ctx.ensure_object(dict)
    ctx.obj['config'] = cfg


@cli.command('serve', context_settings=CONTEXT_SETTINGS)
@click.option('--host', default=None, help='Адрес (override host из конфига)')
@click.option('--port', '-p', type=click.IntRange(1, 65535), default=None, help='Порт (override port)')
@click.pass_context
def serve(ctx, host, port):
    """Запустить HTTP-сервис."""
    run_server(ctx.obj['config'], host=host, port=port)


@cli.command('crawl', context_settings=CONTEXT_SETTINGS)
@click.argument('url')
@click.option('--max-pages', '-n', type=int, default=DEFAULT_PAGES, show_default=True,
              help='Макс. число страниц (1..20)')
@click.option('--max-depth', '-d', type=int, default=DEFAULT_DEPTH, show_default=True,
              help='Макс. глубина обхода (0..3)')
@click.option('--same-domain/--any-domain', default=True, show_default=True,
              help='Переходить только по ссылкам того же хоста')
@click.option(
    '--json', '-j', 'json_output',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Сохранить JSON-отчёт в файл'
)
@click.option(
    '--html', '-h', 'html_output',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Сохранить HTML-отчёт в файл'
)
@click.option(
    '--template', '-t', 'template_dir',
    default=None,
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help='Папка с Jinja2-шаблоном crawl_report.html.j2 (по умолчанию встроенный)'
)
@click.option('--pretty', is_flag=True, help='Преформатировать JSON-вывод (отступ 2)')
@click.pass_context
def crawl(ctx, url, max_pages, max_depth, same_domain, json_output, html_output, template_dir, pretty):
    """Обойти сайт начиная с URL."""
    cfg = ctx.obj['config']
    try:
        request = CrawlRequest(url=url, max_pages=max_pages, max_depth=max_depth, same_domain=same_domain)
    except ValidationError:
        print_error(f'Некорректный URL: {url}')

    try:
        result = Engine(cfg.fetcher).start_crawl(request)
    except InvalidUrlError as e:
        print_error(f'Некорректный URL: {e}')
    except Exception as e:
        print_error(f'Ошибка при обходе: {e}')

    # Если не сохраняем в файл — печатаем в stdout
    if not json_output and not html_output:
        _echo_json(result.to_dict(), pretty)
        return

    if json_output:
        try:
            saved_json = render_json(result, json_output)
            click.echo(f'JSON report: {saved_json}')
        except OSError as e:
            print_error(f'Ошибка при сохранении JSON: {e}')

    if html_output:
        try:
            saved_html = render_html(result, template_dir, html_output)
            click.echo(f'HTML report: {saved_html}')
        except Exception as e:
            print_error(f'Ошибка при сохранении HTML: {e}')


@cli.command('scrape', context_settings=CONTEXT_SETTINGS)
@click.argument('url')
@click.option(
    '--json', '-j', 'json_output',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Сохранить JSON-отчёт в файл'
)
@click.option('--pretty', is_flag=True, help='Преформатировать JSON-вывод (отступ 2)')
@click.pass_context
def scrape(ctx, url, json_output, pretty):
    """Извлечь метаданные одной страницы."""
    cfg = ctx.obj['config']
    try:
        request = ScrapeRequest(url=url)
    except ValidationError:
        print_error(f'Некорректный URL: {url}')

    try:
        report = Engine(cfg.fetcher).start_scrape(request.url)
    except Exception as e:
        print_error(f'Ошибка при загрузке страницы: {e}')

    if json_output:
        try:
            click.echo(f'JSON report: {render_json(report, json_output)}')
        except OSError as e:
            print_error(f'Ошибка при сохранении JSON: {e}')
    else:
        _echo_json(report.to_dict(), pretty)

    if report.fetch_failed:
        sys.exit(1)


@cli.command('config', context_settings=CONTEXT_SETTINGS)
@click.pass_context
def show_config(ctx):
    """Показать текущую конфигурацию в JSON."""
    cfg = ctx.obj['config']
    click.echo(cfg.model_dump_json(indent=2))


if __name__ == "__main__":
    cli()
