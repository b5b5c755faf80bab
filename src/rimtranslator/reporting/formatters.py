"""Output formatters for batch reports."""

from __future__ import annotations

import csv
import io
import json
from pathlib import Path

from rimtranslator.reporting.report import BatchReport


def to_json(report: BatchReport, indent: int = 2) -> str:
    """Format report as JSON string."""
    return json.dumps(report.to_dict(), indent=indent, default=str)


def to_markdown(report: BatchReport) -> str:
    """Format report as Markdown."""
    lines = [
        "# Translation Report",
        "",
        "| Field | Value |",
        "|-------|-------|",
        f"| Input | `{report.input_directory}` |",
        f"| Backend | {report.backend} |",
        f"| Model | {report.model} |",
        f"| Languages | {len(report.languages)} |",
        f"| Dry run | {report.dry_run} |",
        "",
        "## Statistics",
        "",
        "| Metric | Count |",
        "|--------|-------|",
        f"| Units | {report.total_units} |",
        f"| Translated | {report.units_translated} |",
        f"| Failed | {report.units_failed} |",
        f"| From cache | {report.cache_hits} |",
        f"| Tokens | {report.total_tokens} |",
        f"| Duration | {report.duration_seconds:.1f}s |",
    ]

    if report.failures:
        lines.extend([
            "",
            "## Failures",
            "",
        ])
        for failure in report.failures:
            lines.append(
                f"- `{failure['source']}` -> {failure['language']}: {failure['message']}"
            )

    return "\n".join(lines) + "\n"


def to_csv(report: BatchReport) -> str:
    """Format report failures as CSV, one row per failed unit."""
    output = io.StringIO()
    writer = csv.DictWriter(output, fieldnames=["source", "language", "message"])
    writer.writeheader()
    writer.writerows(report.failures)
    return output.getvalue()


def save_report(report: BatchReport, path: str | Path) -> None:
    """Save report to file, auto-detecting format from extension."""
    path = Path(path)
    suffix = path.suffix.lower()

    if suffix == ".json":
        content = to_json(report)
    elif suffix in (".md", ".markdown"):
        content = to_markdown(report)
    elif suffix == ".csv":
        content = to_csv(report)
    else:
        content = to_json(report)

    path.write_text(content, encoding="utf-8")
