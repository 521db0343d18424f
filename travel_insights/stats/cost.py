"""
Third-party API cost analysis over the report period.

Savings rules:
  - Map API spend above 10,000: suggest stronger map caching, 30% saving.
  - More than 1,000,000 database API requests: suggest query caching.
  - More than 10,000 tourism content API calls: suggest response caching.
"""

from __future__ import annotations

from collections import defaultdict
from typing import Any

from travel_insights.db.repositories.activity_repo import ActivityRepository
from travel_insights.models.report import ReportPeriod
from travel_insights.stats.base import StatisticSource
from travel_insights.taxonomy.content_taxonomy import ReportCategory

MAP_COST_THRESHOLD = 10_000
MAP_SAVINGS_RATIO = 0.3
DB_REQUEST_THRESHOLD = 1_000_000
CONTENT_API_CALL_THRESHOLD = 10_000


def breakdown(logs: list[dict]) -> list[dict[str, Any]]:
    """Totals per (service, operation), in first-seen order."""
    acc: dict[tuple[str, str], dict[str, float]] = defaultdict(
        lambda: {"units": 0.0, "cost": 0.0, "count": 0}
    )
    for log in logs:
        stats = acc[(log["service_name"], log["operation_type"])]
        stats["units"] += float(log["units"] or 0)
        stats["cost"] += float(log["total_cost"] or 0)
        stats["count"] += 1
    return [
        {
            "service_name":   service,
            "operation_type": operation,
            "total_units":    s["units"],
            "total_cost":     s["cost"],
            "average_cost":   s["cost"] / s["count"] if s["count"] else 0.0,
            "count":          int(s["count"]),
        }
        for (service, operation), s in acc.items()
    ]


def monthly_trends(logs: list[dict]) -> list[dict[str, Any]]:
    """Total cost per ``YYYY-MM`` month, ascending."""
    by_month: dict[str, list[dict]] = defaultdict(list)
    for log in logs:
        by_month[log["created_at"][:7]].append(log)
    return [
        {
            "month":         month,
            "total_cost":    sum(float(l["total_cost"] or 0) for l in month_logs),
            "service_costs": breakdown(month_logs),
        }
        for month, month_logs in sorted(by_month.items())
    ]


def optimization(services: list[dict[str, Any]]) -> dict[str, Any]:
    suggestions: list[str] = []
    savings = 0.0

    map_cost = sum(s["total_cost"] for s in services if s["service_name"] == "naver_map")
    if map_cost > MAP_COST_THRESHOLD:
        suggestions.append(
            f"Map API spend is high ({map_cost:,.0f}). Stronger map tile caching could cut it."
        )
        savings += map_cost * MAP_SAVINGS_RATIO

    db_requests = sum(
        s["count"]
        for s in services
        if s["service_name"] == "supabase" and s["operation_type"] == "api_request"
    )
    if db_requests > DB_REQUEST_THRESHOLD:
        suggestions.append(
            f"Database API requests are high ({db_requests:,}). Optimize queries and cache results."
        )

    content_calls = sum(s["count"] for s in services if s["service_name"] == "tour_api")
    if content_calls > CONTENT_API_CALL_THRESHOLD:
        suggestions.append(
            f"Tourism content API calls are high ({content_calls:,}). Cache responses to speed them up."
        )

    return {"suggestions": suggestions, "potential_savings": savings}


class CostSource(StatisticSource):
    category = ReportCategory.COST

    def __init__(self, repo: ActivityRepository) -> None:
        self.repo = repo

    def _collect(self, period: ReportPeriod) -> dict[str, Any]:
        logs = self.repo.api_usage(period.start, period.end)
        services = breakdown(logs)
        return {
            "total_cost":        sum(s["total_cost"] for s in services),
            "service_breakdown": services,
            "monthly_trends":    monthly_trends(logs),
            "cost_optimization": optimization(services),
        }
