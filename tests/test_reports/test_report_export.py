"""Tests for travel_insights/reports/export.py."""

from __future__ import annotations

import csv
import json
from datetime import datetime, timezone

import pytest

from travel_insights.models.report import ReportDocument, ReportPeriod
from travel_insights.reports.export import (
    CSV_FIELDNAMES,
    export_report_csv,
    export_report_json,
    export_to_csv,
    flatten_report_for_export,
)
from travel_insights.taxonomy.content_taxonomy import ReportCategory, ReportType


@pytest.fixture
def document() -> ReportDocument:
    return ReportDocument(
        report_id=7,
        report_type=ReportType.WEEKLY,
        title="Weekly Report - 2025-01-01 ~ 2025-01-07",
        period=ReportPeriod(
            start=datetime(2025, 1, 1, tzinfo=timezone.utc),
            end=datetime(2025, 1, 7, 12, tzinfo=timezone.utc),
        ),
        generated_at=datetime(2025, 1, 7, 12, tzinfo=timezone.utc),
        requested_categories=[ReportCategory.COST, ReportCategory.PREDICTIONS],
        metrics_by_category={
            "cost": {
                "total_cost": 12.5,
                "cost_optimization": {"suggestions": ["cache"], "potential_savings": 0},
            },
        },
    )


class TestFlattenReport:
    def test_rows(self, document):
        rows = flatten_report_for_export(document)
        metrics = {r["metric"]: r["value"] for r in rows}
        assert metrics == {
            "total_cost": 12.5,
            "cost_optimization.suggestions[0]": "cache",
            "cost_optimization.potential_savings": 0,
        }
        assert all(r["category"] == "cost" for r in rows)
        assert all(r["report_id"] == 7 for r in rows)

    def test_omitted_categories_skipped(self, document):
        rows = flatten_report_for_export(document)
        assert "predictions" not in {r["category"] for r in rows}


class TestExportFiles:
    def test_csv(self, document, tmp_path):
        path = export_report_csv(document, tmp_path / "out" / "report.csv")
        with path.open(encoding="utf-8") as f:
            reader = csv.DictReader(f)
            assert reader.fieldnames == CSV_FIELDNAMES
            rows = list(reader)
        assert len(rows) == 3
        assert rows[0]["metric"] == "total_cost"

    def test_json(self, document, tmp_path):
        path = export_report_json(document, tmp_path / "report.json")
        data = json.loads(path.read_text(encoding="utf-8"))
        assert data["report_id"] == 7
        assert data["metrics_by_category"]["cost"]["total_cost"] == 12.5

    def test_empty_csv(self, tmp_path):
        path = export_to_csv([], tmp_path / "empty.csv")
        assert path.read_text(encoding="utf-8") == ""
