# File: crawl_scout/report/__init__.py
"""crawl_scout.report: Запись отчётов (JSON и HTML), используется CLI."""

from crawl_scout.report.html_report import render_html
from crawl_scout.report.json_report import render_json, report_to_dict

__all__ = ["render_json", "render_html", "report_to_dict"]
