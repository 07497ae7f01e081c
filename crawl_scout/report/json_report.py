# crawl_scout/report/json_report.py

"""
Генерация JSON-отчёта для проекта CrawlScout.

Сериализация CrawlResult / ScrapeReport (или готового dict) в файл.
"""
import json
from pathlib import Path
from typing import Any, Dict, Union


def report_to_dict(report: Any) -> Dict[str, Any]:
    """Приводит отчёт к dict: объекты с ``to_dict()`` сериализуются, dict возвращается как есть."""
    if isinstance(report, dict):
        return report
    to_dict = getattr(report, "to_dict", None)
    if to_dict is None:
        raise TypeError(f"Cannot serialize {type(report).__name__} as a report")
    return to_dict()


def render_json(report: Any, output_path: Union[Path, str], *, pretty: bool = True) -> Path:
    """
    Сохраняет отчёт report в формате JSON по указанному пути.

    :param report: CrawlResult, ScrapeReport или dict
    :param output_path: путь к JSON-файлу
    :param pretty: отступ 2 пробела
    :return: Path сохранённого файла

    Пример:
    ```python
    from crawl_scout.report.json_report import render_json
    report_path = render_json(result, 'reports/crawl.json')
    print(f"JSON report saved to: {report_path}")
    ```
    """
    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)

    data = report_to_dict(report)

    with output.open('w', encoding='utf-8') as f:
        json.dump(data, f, ensure_ascii=False, indent=2 if pretty else None)

    return output
