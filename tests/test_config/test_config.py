"""Tests for travel_insights/config.py — TOML loading, local and env overrides, validation."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from travel_insights.config import RecommendationConfig, load_config


def _write(path: Path, text: str) -> Path:
    path.write_text(text, encoding="utf-8")
    return path


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for var in ("TRAVEL_INSIGHTS_DB_PATH", "TRAVEL_INSIGHTS_LOG_LEVEL", "TRAVEL_INSIGHTS_DEBUG"):
        monkeypatch.delenv(var, raising=False)


class TestLoadConfig:
    def test_default_file(self):
        config = load_config()
        assert config.recommendations.limit == 10
        assert config.recommendations.seasonal_content_types["winter"] == ["12", "32", "39"]
        assert config.reports.prediction_history_days == 90

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "nope.toml")

    def test_partial_file_uses_defaults(self, tmp_path):
        path = _write(tmp_path / "app.toml", "[recommendations]\nlimit = 5\n")
        config = load_config(path)
        assert config.recommendations.limit == 5
        assert config.reports.weekly_window_days == 7

    def test_local_overrides(self, tmp_path):
        path = _write(tmp_path / "app.toml", "[reports]\nmonthly_window_days = 30\n")
        _write(tmp_path / "local.toml", "[reports]\nmonthly_window_days = 28\n")
        assert load_config(path).reports.monthly_window_days == 28

    def test_env_overrides(self, tmp_path, monkeypatch):
        path = _write(tmp_path / "app.toml", "[logging]\nlevel = \"INFO\"\n")
        monkeypatch.setenv("TRAVEL_INSIGHTS_DB_PATH", ":memory:")
        monkeypatch.setenv("TRAVEL_INSIGHTS_LOG_LEVEL", "debug")
        monkeypatch.setenv("TRAVEL_INSIGHTS_DEBUG", "yes")
        config = load_config(path)
        assert config.database.db_path == ":memory:"
        assert config.logging.level == "DEBUG"
        assert config.debug is True

    def test_invalid_value_rejected(self, tmp_path):
        path = _write(tmp_path / "app.toml", "[recommendations]\nlimit = 0\n")
        with pytest.raises(ValidationError):
            load_config(path)


class TestSeasonTable:
    def test_unknown_season_rejected(self):
        with pytest.raises(ValidationError, match="monsoon"):
            RecommendationConfig(seasonal_content_types={
                "spring": [], "summer": [], "autumn": [], "winter": [], "monsoon": [],
            })

    def test_missing_season_rejected(self):
        with pytest.raises(ValidationError):
            RecommendationConfig(seasonal_content_types={"spring": ["12"]})
