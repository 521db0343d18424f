"""
Performance statistics: API response times, page loads, web vitals and
per-endpoint error rates over the report period.

Percentiles use the nearest-rank-below rule on the sorted sample:
``p95 = sorted[int(n * 0.95)]``, ``median = sorted[n // 2]``.
"""

from __future__ import annotations

from collections import Counter
from typing import Any, Iterable

from travel_insights.db.repositories.activity_repo import ActivityRepository
from travel_insights.models.report import ReportPeriod
from travel_insights.stats.base import StatisticSource
from travel_insights.taxonomy.content_taxonomy import ReportCategory

UNKNOWN_ENDPOINT = "unknown"


def summarize(values: Iterable[float]) -> dict[str, float]:
    """Average, median, p95, p99, min, max and count; all zero for no values."""
    ordered = sorted(values)
    n = len(ordered)
    if n == 0:
        return {"average": 0, "median": 0, "p95": 0, "p99": 0, "min": 0, "max": 0, "count": 0}
    return {
        "average": sum(ordered) / n,
        "median":  ordered[n // 2],
        "p95":     ordered[int(n * 0.95)],
        "p99":     ordered[int(n * 0.99)],
        "min":     ordered[0],
        "max":     ordered[-1],
        "count":   n,
    }


def _values(metrics: list[dict], metric_type: str, metric_name: str) -> list[float]:
    return [
        float(m["value"])
        for m in metrics
        if m["metric_type"] == metric_type and m["metric_name"] == metric_name
    ]


def error_rates(metrics: list[dict], errors: list[dict]) -> list[dict[str, Any]]:
    """Errors per API request, by endpoint (percent)."""
    error_counts = Counter(e["endpoint"] or UNKNOWN_ENDPOINT for e in errors)
    request_counts = Counter(
        m["endpoint"] or UNKNOWN_ENDPOINT for m in metrics if m["metric_type"] == "api_response"
    )
    rates: list[dict[str, Any]] = []
    for endpoint in sorted(set(error_counts) | set(request_counts)):
        errs = error_counts.get(endpoint, 0)
        total = request_counts.get(endpoint, 0)
        rates.append(
            {
                "endpoint":       None if endpoint == UNKNOWN_ENDPOINT else endpoint,
                "error_count":    errs,
                "total_requests": total,
                "error_rate":     errs / total * 100 if total > 0 else 0.0,
            }
        )
    return rates


class PerformanceSource(StatisticSource):
    category = ReportCategory.PERFORMANCE

    def __init__(self, repo: ActivityRepository) -> None:
        self.repo = repo

    def _collect(self, period: ReportPeriod) -> dict[str, Any]:
        metrics = self.repo.metrics(period.start, period.end)
        errors = self.repo.errors(period.start, period.end)
        return {
            "api_response_stats": summarize(_values(metrics, "api_response", "api_response_time")),
            "page_load_stats":    summarize(_values(metrics, "page_load", "page_load_time")),
            "web_vitals": {
                name: summarize(_values(metrics, "web_vital", name))
                for name in ("lcp", "fid", "cls")
            },
            "error_rates": error_rates(metrics, errors),
        }
