"""
Application configuration management.

Load order (each layer overrides the previous):
  1. ``config/default.toml``      — committed static defaults
  2. ``config/local.toml``        — optional local overrides (gitignored)
  3. ``.env``                     — local secrets and env overrides (gitignored)
  4. Environment variables        — ``TRAVEL_INSIGHTS_*`` prefix

Entry point: ``load_config(config_path=None) -> AppConfig``

The report aggregator, the recommendation engine and every CLI command
receive an ``AppConfig`` section — never raw dicts or scattered env lookups.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, field_validator

# ── Sub-config models ─────────────────────────────────────────────────────────


class DatabaseConfig(BaseModel):
    """SQLite database connection settings."""

    model_config = ConfigDict(frozen=True)

    db_path: str = "data/db/travel_insights.db"
    wal_mode: bool = True
    busy_timeout_ms: int = 5000


class LoggingConfig(BaseModel):
    """Logging output settings."""

    model_config = ConfigDict(frozen=True)

    level: str = "INFO"
    log_file: str = "data/logs/travel_insights.log"
    json_format: bool = False

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        valid = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid:
            raise ValueError(f"Log level must be one of {sorted(valid)}, got '{v}'.")
        return v.upper()


_SEASONS = ("spring", "summer", "autumn", "winter")


class RecommendationConfig(BaseModel):
    """Recommendation list settings.

    ``seasonal_content_types`` is the season → content-type affinity table
    used by the seasonal strategy.  Content-type codes follow the catalog
    API (12 tourist site, 14 cultural facility, 15 festival, 32 lodging,
    39 restaurant).  An entity also matches when one of its tags equals a
    listed value.
    """

    model_config = ConfigDict(frozen=True)

    limit: int = 10
    seasonal_content_types: dict[str, list[str]] = {
        "spring": ["12", "14", "15"],
        "summer": ["12", "32"],
        "autumn": ["12", "14", "15"],
        "winter": ["12", "32", "39"],
    }

    @field_validator("limit")
    @classmethod
    def validate_limit(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"limit must be >= 1, got {v}.")
        return v

    @field_validator("seasonal_content_types")
    @classmethod
    def validate_seasons(cls, v: dict[str, list[str]]) -> dict[str, list[str]]:
        unknown = set(v) - set(_SEASONS)
        if unknown:
            raise ValueError(
                f"Unknown season(s) {sorted(unknown)}. Must be among {list(_SEASONS)}."
            )
        missing = set(_SEASONS) - set(v)
        if missing:
            raise ValueError(f"Season affinity table is missing {sorted(missing)}.")
        return v


class ReportConfig(BaseModel):
    """Report generation settings."""

    model_config = ConfigDict(frozen=True)

    weekly_window_days: int = 7
    monthly_window_days: int = 30
    output_dir: str = "data/outputs/reports"
    prediction_history_days: int = 90
    prediction_horizon_days: int = 30
    min_prediction_history_days: int = 7

    @field_validator(
        "weekly_window_days",
        "monthly_window_days",
        "prediction_history_days",
        "prediction_horizon_days",
        "min_prediction_history_days",
    )
    @classmethod
    def validate_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"Window lengths must be >= 1 day, got {v}.")
        return v


class AppConfig(BaseModel):
    """Complete application configuration — the single source of truth.

    Constructed by ``load_config()`` which merges TOML + .env.
    """

    model_config = ConfigDict(frozen=True)

    database: DatabaseConfig = DatabaseConfig()
    logging: LoggingConfig = LoggingConfig()
    recommendations: RecommendationConfig = RecommendationConfig()
    reports: ReportConfig = ReportConfig()
    debug: bool = False


# ── Loader ────────────────────────────────────────────────────────────────────

_PROJECT_ROOT = Path(__file__).parent.parent


def _find_project_root() -> Path:
    """Walk up from this file to find the project root (contains pyproject.toml)."""
    candidate = Path(__file__).parent
    for _ in range(5):
        if (candidate / "pyproject.toml").exists():
            return candidate
        candidate = candidate.parent
    return _PROJECT_ROOT


def load_config(config_path: Optional[Path] = None) -> AppConfig:
    """Load and merge application configuration.

    Args:
        config_path: Explicit path to a TOML config file. Defaults to
            ``<project_root>/config/default.toml``.

    Returns:
        Fully validated ``AppConfig`` instance.

    Raises:
        FileNotFoundError: If the specified ``config_path`` does not exist.
        pydantic.ValidationError: If merged config values fail validation.
    """
    root = _find_project_root()

    load_dotenv(dotenv_path=root / ".env", override=False)

    if config_path is None:
        config_path = root / "config" / "default.toml"

    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(
            f"Config file not found: {config_path}\n"
            "Create config/default.toml or pass --config."
        )

    with open(config_path, "rb") as f:
        raw: dict[str, Any] = tomllib.load(f)

    local_config_path = config_path.parent / "local.toml"
    if local_config_path.exists():
        with open(local_config_path, "rb") as f:
            local_raw: dict[str, Any] = tomllib.load(f)
        raw = _deep_merge(raw, local_raw)

    raw = _apply_env_overrides(raw)

    return _build_app_config(raw)


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge ``override`` into ``base``."""
    result = dict(base)
    for key, val in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(val, dict):
            result[key] = _deep_merge(result[key], val)
        else:
            result[key] = val
    return result


def _apply_env_overrides(raw: dict[str, Any]) -> dict[str, Any]:
    """Apply TRAVEL_INSIGHTS_* env vars to the raw config dict.

    Supported overrides:
      TRAVEL_INSIGHTS_DB_PATH    → raw["database"]["db_path"]
      TRAVEL_INSIGHTS_LOG_LEVEL  → raw["logging"]["level"]
      TRAVEL_INSIGHTS_DEBUG      → raw["debug"]
    """
    if db_path := os.environ.get("TRAVEL_INSIGHTS_DB_PATH"):
        raw.setdefault("database", {})["db_path"] = db_path

    if log_level := os.environ.get("TRAVEL_INSIGHTS_LOG_LEVEL"):
        raw.setdefault("logging", {})["level"] = log_level

    if debug := os.environ.get("TRAVEL_INSIGHTS_DEBUG"):
        raw["debug"] = debug.lower() in ("1", "true", "yes")

    return raw


def _build_app_config(raw: dict[str, Any]) -> AppConfig:
    """Map raw TOML dict to ``AppConfig`` model structure."""
    project = raw.pop("project", {})

    return AppConfig(
        database=DatabaseConfig(**raw.get("database", {})),
        logging=LoggingConfig(**raw.get("logging", {})),
        recommendations=RecommendationConfig(**raw.get("recommendations", {})),
        reports=ReportConfig(**raw.get("reports", {})),
        debug=raw.get("debug", project.get("debug", False)),
    )
