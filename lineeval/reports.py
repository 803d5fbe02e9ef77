"""Generate evaluation reports in various formats.

This module provides:
1. generate_cli_report() - Terminal-friendly table output
2. write_csv() - Two-row CSV (metric names, values)
3. generate_json_report() / save_json_report() - JSON in the DIVA services
   output format
"""

from __future__ import annotations

import csv
import json
import logging
from pathlib import Path
from typing import Any

from tabulate import tabulate

from lineeval.metrics import MetricId, Results

logger = logging.getLogger(__name__)

MIME_TYPE = "text/plain"


def generate_cli_report(
    results: Results,
    title: str = "Line Segmentation Evaluation",
) -> str:
    """Generate a CLI-friendly report with tables.

    Args:
        results: Metrics to report
        title: Report title

    Returns:
        Formatted string for terminal output
    """
    lines = []
    lines.append("=" * 60)
    lines.append(title)
    lines.append("=" * 60)
    lines.append("")

    if MetricId.FILENAME in results:
        lines.append(f"File: {results[MetricId.FILENAME]}")
        lines.append("")

    rows = []
    for metric, value in results.numeric_items():
        if isinstance(value, int):
            rows.append([metric.value, str(value)])
        else:
            rows.append([metric.value, f"{value:.4f}"])

    lines.append(
        tabulate(rows, headers=["Metric", "Value"], tablefmt="simple", disable_numparse=True)
    )
    lines.append("")
    return "\n".join(lines)


def write_csv(results: Results, output_path: Path) -> None:
    """Write results as a CSV file with a header row and a value row.

    Args:
        results: Metrics to write
        output_path: Path to write CSV file
    """
    with open(output_path, "w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow([metric.value for metric in results])
        writer.writerow(list(results.values()))
    logger.debug("wrote %s", output_path)


def generate_json_report(results: Results, gt_filename: str) -> dict[str, Any]:
    """Generate a JSON-serializable report.

    Every numeric metric becomes a ``{"number": {...}}`` entry; the ground
    truth file name is appended as a ``{"text": {...}}`` entry.

    Args:
        results: Metrics to report
        gt_filename: Name of the ground truth file that was evaluated against

    Returns:
        Dictionary suitable for JSON serialization
    """
    output: list[dict[str, Any]] = [
        {"number": {"name": metric.value, "value": value, "mime-type": MIME_TYPE}}
        for metric, value in results.numeric_items()
    ]
    output.append({"text": {"name": "gtFilename", "value": gt_filename, "mime-type": MIME_TYPE}})
    return {"output": output}


def save_json_report(results: Results, output_path: Path, gt_filename: str) -> None:
    """Save JSON report to file.

    Args:
        results: Metrics to report
        output_path: Path to write JSON file
        gt_filename: Name of the ground truth file
    """
    report = generate_json_report(results, gt_filename)
    with open(output_path, "w", encoding="utf-8") as f:
        json.dump(report, f, indent=2)
    logger.debug("wrote %s", output_path)
