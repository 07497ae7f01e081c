# File: crawl_scout/report/html_report.py
"""crawl_scout.report.html_report: Генерация HTML-отчёта об обходе с помощью Jinja2."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional, Union

from jinja2 import Environment, FileSystemLoader, select_autoescape

from crawl_scout.crawler.models import CrawlResult
from crawl_scout.utils import is_http_url

TEMPLATE_NAME = "crawl_report.html.j2"
DEFAULT_TEMPLATE_DIR = Path(__file__).parent / "templates"


def render_html(
    result: CrawlResult,
    template_dir: Optional[Union[Path, str]],
    output_path: Union[Path, str],
) -> Path:
    """Рендерит HTML-отчёт из шаблона и сохраняет его по указанному пути.

    Args:
        result: объект CrawlResult.
        template_dir: директория с шаблоном ``crawl_report.html.j2``;
            None — встроенный шаблон пакета.
        output_path: путь к итоговому HTML-файлу.

    Returns:
        Path до сохранённого HTML-файла.
    """
    template_dir = Path(template_dir) if template_dir else DEFAULT_TEMPLATE_DIR
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    env = Environment(
        loader=FileSystemLoader(str(template_dir)),
        autoescape=select_autoescape(["html", "xml", "j2"]),
    )
    # only http(s) URLs become links: javascript: and data: stay text
    env.tests["http_url"] = is_http_url
    template = env.get_template(TEMPLATE_NAME)

    context: dict[str, Any] = result.to_dict()
    context["failed"] = sum(1 for page in result.pages if page.error)

    html_content = template.render(**context)
    output_path.write_text(html_content, encoding="utf-8")

    return output_path
