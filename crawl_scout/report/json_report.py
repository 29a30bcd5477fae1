# crawl_scout/report/json_report.py

"""
JSON report generation for CrawlScout.

Serializes a CrawlReport into a file.
"""
from pathlib import Path

from crawl_scout.aggregator import CrawlReport


def render_json(report: CrawlReport, output_path: Path | str, *, pretty: bool = True) -> Path:
    """
    Save *report* as JSON at *output_path*.

    :param report: CrawlReport of a finished crawl
    :param output_path: path of the JSON file
    :param pretty: indent the output
    :return: Path of the saved file

    Example:
    ```python
    from crawl_scout.report.json_report import render_json
    report_path = render_json(report, 'reports/crawl.json')
    ```
    """
    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(report.json(pretty=pretty), encoding="utf-8")
    return output
