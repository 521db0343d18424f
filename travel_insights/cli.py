"""
travel-insights — CLI entry point.

All commands follow this pattern:
  1. Load ``AppConfig`` via ``load_config()``.
  2. Configure logging.
  3. Validate inputs.
  4. Execute action (DB init, report generation, recommendation, ...).
  5. Report result to stdout; errors go to stderr with exit code 1.

Install and run::

    pip install -e .
    travel-insights --help
    travel-insights init-db
    travel-insights validate-config
    travel-insights generate-report weekly --category time_series --category cost
    travel-insights generate-report custom --start-date 2025-01-01 --end-date 2025-01-07
    travel-insights list-reports
    travel-insights export-report 3 --format csv
    travel-insights recommend --user u-1 --region 39
    travel-insights pet-stats
    travel-insights project 1260000000 380000000
    travel-insights score 100 5 0
"""

from __future__ import annotations

import json
from datetime import date
from pathlib import Path
from typing import Optional

import typer

app = typer.Typer(
    name="travel-insights",
    help="Travel portal analytics: composite reports and pet-friendly recommendations.",
    add_completion=False,
)


# ── Helpers ───────────────────────────────────────────────────────────────────

def _load_config_or_exit(config_path: Optional[str] = None):
    """Load AppConfig, printing a friendly error and exiting on failure."""
    from travel_insights.config import load_config

    try:
        cfg_path = Path(config_path) if config_path else None
        return load_config(cfg_path)
    except FileNotFoundError as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)
    except Exception as exc:
        typer.echo(f"[ERROR] Config validation failed: {exc}", err=True)
        raise typer.Exit(code=1)


def _configure_logging(config):
    """Set up logging from config."""
    from travel_insights.utils.logging import configure_logging
    configure_logging(config.logging)


def _open_db(config, db_path: Optional[str]):
    from travel_insights.db.connection import connection_from_config

    database = config.database
    if db_path:
        database = database.model_copy(update={"db_path": db_path})
    return connection_from_config(database)


def _parse_date(value: Optional[str], flag: str) -> Optional[date]:
    if value is None:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError as exc:
        typer.echo(f"[ERROR] Invalid {flag} '{value}': {exc}", err=True)
        raise typer.Exit(code=1)


_DB_OPTION = typer.Option(None, "--db-path", help="Override DB path from config.")
_CONFIG_OPTION = typer.Option(None, "--config", help="Path to TOML config file.")


# ── Commands ──────────────────────────────────────────────────────────────────

@app.command("init-db")
def init_db(
    db_path: Optional[str] = _DB_OPTION,
    config_path: Optional[str] = _CONFIG_OPTION,
) -> None:
    """Initialize the SQLite database and apply the full schema.

    Safe to run multiple times — all DDL uses IF NOT EXISTS.
    """
    from travel_insights.db.schema import ALL_TABLE_NAMES, apply_schema

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    target_path = db_path or config.database.db_path
    typer.echo(f"Initializing database at: {target_path}")

    with _open_db(config, db_path) as conn:
        apply_schema(conn)

    typer.echo(f"  Tables: {len(ALL_TABLE_NAMES)} created/verified.")
    typer.echo("[OK] Database ready.")


@app.command("validate-config")
def validate_config(
    config_path: Optional[str] = _CONFIG_OPTION,
    show_full: bool = typer.Option(False, "--full", help="Print the full config as JSON."),
) -> None:
    """Validate the configuration file and print parsed values.

    Exits with code 1 if the config fails validation.
    """
    config = _load_config_or_exit(config_path)

    typer.echo("Configuration validated successfully.")
    typer.echo("")
    typer.echo(f"  Database path:      {config.database.db_path}")
    typer.echo(f"  Recommendation cap: {config.recommendations.limit}")
    typer.echo(f"  Weekly window:      {config.reports.weekly_window_days} days")
    typer.echo(f"  Monthly window:     {config.reports.monthly_window_days} days")
    typer.echo(f"  Report output dir:  {config.reports.output_dir}")
    typer.echo(f"  Log level:          {config.logging.level}")
    typer.echo(f"  Debug mode:         {config.debug}")

    if show_full:
        typer.echo("")
        typer.echo("Full config (JSON):")
        typer.echo(json.dumps(config.model_dump(), indent=2, default=str))

    typer.echo("")
    typer.echo("[OK] Config is valid.")


@app.command("generate-report")
def generate_report(
    report_type: str = typer.Argument(..., help="daily, weekly, monthly or custom."),
    categories: Optional[list[str]] = typer.Option(
        None,
        "--category",
        "-c",
        help="Category to include (repeatable). Default: all categories.",
    ),
    start_date: Optional[str] = typer.Option(None, "--start-date", help="Custom start (YYYY-MM-DD)."),
    end_date: Optional[str] = typer.Option(None, "--end-date", help="Custom end (YYYY-MM-DD)."),
    db_path: Optional[str] = _DB_OPTION,
    config_path: Optional[str] = _CONFIG_OPTION,
) -> None:
    """Generate and store a composite report.

    Categories whose statistics fail are left out of the report and listed
    as omitted.  Exits 1 if the request is invalid or the report cannot be
    stored.
    """
    from pydantic import ValidationError

    from travel_insights.db.repositories.report_repo import ReportRepository
    from travel_insights.errors import ReportPersistenceError
    from travel_insights.models.report import ReportRequest
    from travel_insights.reports.aggregator import ReportAggregator
    from travel_insights.stats import build_sources
    from travel_insights.taxonomy.content_taxonomy import ReportCategory

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    try:
        request = ReportRequest(
            report_type=report_type,
            categories=categories or list(ReportCategory),
            start_date=_parse_date(start_date, "--start-date"),
            end_date=_parse_date(end_date, "--end-date"),
        )
    except ValidationError as exc:
        typer.echo(f"[ERROR] Invalid report request:\n{exc}", err=True)
        raise typer.Exit(code=1)

    try:
        with _open_db(config, db_path) as conn:
            aggregator = ReportAggregator(
                build_sources(conn, config.reports), ReportRepository(conn), config.reports
            )
            document = aggregator.generate(request)
    except ReportPersistenceError as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)

    typer.echo(f"Report {document.report_id}: {document.title}")
    typer.echo(f"  Included: {', '.join(document.metrics_by_category) or '(none)'}")
    if document.omitted_categories:
        typer.echo(f"  Omitted:  {', '.join(c.value for c in document.omitted_categories)}")
    typer.echo("[OK] Report saved.")


@app.command("list-reports")
def list_reports(
    limit: int = typer.Option(20, "--limit", min=1, help="Maximum reports to list."),
    db_path: Optional[str] = _DB_OPTION,
    config_path: Optional[str] = _CONFIG_OPTION,
) -> None:
    """List stored reports, most recent first."""
    from travel_insights.db.repositories.report_repo import ReportRepository

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    with _open_db(config, db_path) as conn:
        reports = ReportRepository(conn).list_reports(limit)

    if not reports:
        typer.echo("No reports stored.")
        return
    for doc in reports:
        typer.echo(
            f"  #{doc.report_id:<5} {doc.generated_at:%Y-%m-%d %H:%M}  {doc.title}"
            f"  [{', '.join(doc.metrics_by_category)}]"
        )


@app.command("export-report")
def export_report(
    report_id: int = typer.Argument(..., help="Stored report id."),
    fmt: str = typer.Option("json", "--format", help="json or csv."),
    output_dir: Optional[str] = typer.Option(None, "--output-dir", help="Override output dir."),
    db_path: Optional[str] = _DB_OPTION,
    config_path: Optional[str] = _CONFIG_OPTION,
) -> None:
    """Export a stored report's data to a JSON or flat CSV file."""
    from travel_insights.db.repositories.report_repo import ReportRepository
    from travel_insights.errors import ReportNotFoundError
    from travel_insights.reports.export import export_report_csv, export_report_json

    if fmt not in ("json", "csv"):
        typer.echo(f"[ERROR] Unknown format '{fmt}'. Use json or csv.", err=True)
        raise typer.Exit(code=1)

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    try:
        with _open_db(config, db_path) as conn:
            document = ReportRepository(conn).get_report(report_id)
    except ReportNotFoundError as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)

    out_dir = Path(output_dir or config.reports.output_dir)
    target = out_dir / f"report_{report_id}.{fmt}"
    if fmt == "json":
        path = export_report_json(document, target)
    else:
        path = export_report_csv(document, target)
    typer.echo(f"[OK] Wrote {path}")


@app.command("recommend")
def recommend(
    user_id: Optional[str] = typer.Option(None, "--user", help="User id for similar-to-bookmarks."),
    region: Optional[str] = typer.Option(None, "--region", help="Restrict to one area code."),
    on_date: Optional[str] = typer.Option(None, "--date", help="Date that picks the season."),
    db_path: Optional[str] = _DB_OPTION,
    config_path: Optional[str] = _CONFIG_OPTION,
) -> None:
    """Print pet-friendly recommendations as JSON."""
    from travel_insights.db.repositories.catalog_repo import CatalogRepository
    from travel_insights.recommendations.engine import RecommendationEngine

    config = _load_config_or_exit(config_path)
    _configure_logging(config)
    today = _parse_date(on_date, "--date")

    with _open_db(config, db_path) as conn:
        engine = RecommendationEngine(CatalogRepository(conn), config.recommendations)
        result = engine.recommend(user_id=user_id, region_code=region, today=today)

    typer.echo(result.model_dump_json(indent=2))


@app.command("pet-stats")
def pet_stats(
    db_path: Optional[str] = _DB_OPTION,
    config_path: Optional[str] = _CONFIG_OPTION,
) -> None:
    """Print pet-friendly catalog statistics as JSON."""
    from travel_insights.db.repositories.catalog_repo import CatalogRepository
    from travel_insights.stats.pet_friendly import pet_friendly_statistics

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    with _open_db(config, db_path) as conn:
        stats = pet_friendly_statistics(CatalogRepository(conn))

    typer.echo(json.dumps(stats, indent=2, ensure_ascii=False))


@app.command("project")
def project_cmd(
    map_x: int = typer.Argument(..., help="Fixed-point x (degrees x 1e7)."),
    map_y: int = typer.Argument(..., help="Fixed-point y (degrees x 1e7)."),
) -> None:
    """Project a stored grid coordinate to latitude/longitude."""
    from travel_insights.geo.projection import project

    coord = project(map_x, map_y)
    typer.echo(f"lat={coord.lat:.6f} lng={coord.lng:.6f}")


@app.command("score")
def score_cmd(
    views: int = typer.Argument(..., min=0),
    bookmarks: int = typer.Argument(..., min=0),
    shares: int = typer.Argument(..., min=0),
) -> None:
    """Print the popularity score for a set of engagement counters."""
    from travel_insights.recommendations.scorer import popularity_score

    typer.echo(str(popularity_score(views, bookmarks, shares)))


if __name__ == "__main__":
    app()
