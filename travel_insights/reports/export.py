"""
Export helpers for stored reports.

All functions write to disk and return the written ``Path``.

``flatten_report_for_export()`` turns a report's nested category payloads
into one flat row per leaf value, so the CSV loads directly in a
spreadsheet without unpivoting.
"""

from __future__ import annotations

import csv
import json
from pathlib import Path
from typing import Any

from travel_insights.models.report import ReportDocument

CSV_FIELDNAMES = ["report_id", "title", "category", "metric", "value"]


def export_to_csv(
    records: list[dict],
    path: Path,
    fieldnames: list[str] | None = None,
) -> Path:
    """Write ``records`` to a UTF-8 CSV file.

    Args:
        records:    List of row dicts.
        path:       Destination file path (parent dirs created if missing).
        fieldnames: Column order.  If None, uses the keys of the first record.

    Returns:
        ``path`` as written.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    if not records:
        path.write_text("", encoding="utf-8")
        return path
    cols = fieldnames or list(records[0].keys())
    with path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=cols, extrasaction="ignore")
        writer.writeheader()
        writer.writerows(records)
    return path


def export_report_json(document: ReportDocument, path: Path) -> Path:
    """Write the full report document as pretty-printed JSON."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(document.model_dump_json(indent=2), encoding="utf-8")
    return path


def flatten_report_for_export(document: ReportDocument) -> list[dict]:
    """Flatten a report into ``report_id/title/category/metric/value`` rows.

    Nested keys are joined with ``.`` and list positions with ``[i]``, e.g.
    ``region_stats[0].travel_count``.  Categories appear in request order.
    """
    rows: list[dict] = []
    for category in document.requested_categories:
        payload = document.metrics_by_category.get(category.value)
        if payload is None:
            continue
        for metric, value in _flatten(payload, ""):
            rows.append(
                {
                    "report_id": document.report_id if document.report_id is not None else "",
                    "title":     document.title,
                    "category":  category.value,
                    "metric":    metric,
                    "value":     value,
                }
            )
    return rows


def export_report_csv(document: ReportDocument, path: Path) -> Path:
    """Write the flattened report rows as CSV."""
    return export_to_csv(flatten_report_for_export(document), path, CSV_FIELDNAMES)


def _flatten(value: Any, prefix: str) -> list[tuple[str, Any]]:
    if isinstance(value, dict):
        out: list[tuple[str, Any]] = []
        for key, child in value.items():
            out.extend(_flatten(child, f"{prefix}.{key}" if prefix else str(key)))
        return out
    if isinstance(value, list):
        out = []
        for i, child in enumerate(value):
            out.extend(_flatten(child, f"{prefix}[{i}]"))
        return out
    return [(prefix, value)]
