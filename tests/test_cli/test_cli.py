"""
End-to-end tests for the travel-insights CLI against a temporary database.

Logging setup is patched out so the root logger is left untouched.
"""

from __future__ import annotations

import json

import pytest
from typer.testing import CliRunner

from travel_insights import cli

runner = CliRunner()


@pytest.fixture(autouse=True)
def _no_logging_setup(monkeypatch):
    monkeypatch.setattr(cli, "_configure_logging", lambda config: None)


@pytest.fixture
def db_path(tmp_path) -> str:
    path = str(tmp_path / "cli.db")
    result = runner.invoke(cli.app, ["init-db", "--db-path", path])
    assert result.exit_code == 0, result.output
    return path


class TestStandalone:
    def test_score(self):
        result = runner.invoke(cli.app, ["score", "100", "5", "0"])
        assert result.exit_code == 0
        assert result.output.strip() == "2"

    def test_project_origin(self):
        result = runner.invoke(cli.app, ["project", "1260000000", "380000000"])
        assert result.exit_code == 0
        assert "lat=38.000000 lng=126.000000" in result.output

    def test_validate_config(self):
        result = runner.invoke(cli.app, ["validate-config"])
        assert result.exit_code == 0
        assert "[OK] Config is valid." in result.output


class TestReports:
    def test_generate_list_export(self, db_path, tmp_path):
        result = runner.invoke(
            cli.app, ["generate-report", "weekly", "--db-path", db_path]
        )
        assert result.exit_code == 0, result.output
        assert "[OK] Report saved." in result.output
        # no registered users, so no growth prediction
        assert "Omitted:  predictions" in result.output

        listed = runner.invoke(cli.app, ["list-reports", "--db-path", db_path])
        assert "Weekly Report" in listed.output

        out_dir = tmp_path / "exports"
        exported = runner.invoke(
            cli.app,
            ["export-report", "1", "--format", "json", "--output-dir", str(out_dir),
             "--db-path", db_path],
        )
        assert exported.exit_code == 0, exported.output
        data = json.loads((out_dir / "report_1.json").read_text(encoding="utf-8"))
        assert "time_series" in data["metrics_by_category"]

    def test_custom_without_dates_rejected(self, db_path):
        result = runner.invoke(
            cli.app, ["generate-report", "custom", "-c", "cost", "--db-path", db_path]
        )
        assert result.exit_code == 1

    def test_export_unknown_report(self, db_path):
        result = runner.invoke(cli.app, ["export-report", "99", "--db-path", db_path])
        assert result.exit_code == 1

    def test_list_empty(self, db_path):
        result = runner.invoke(cli.app, ["list-reports", "--db-path", db_path])
        assert "No reports stored." in result.output


class TestRecommend:
    def test_empty_catalog(self, db_path):
        result = runner.invoke(
            cli.app, ["recommend", "--date", "2025-07-01", "--db-path", db_path]
        )
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["season"] == "summer"
        assert data["region_based"] == []


class TestPetStats:
    def test_empty_catalog(self, db_path):
        result = runner.invoke(cli.app, ["pet-stats", "--db-path", db_path])
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["total_pet_friendly"] == 0
        assert data["popular"] == []
