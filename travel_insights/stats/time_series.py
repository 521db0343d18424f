"""
Daily time series: sign-ups, views, bookmarks and reviews per UTC day.
"""

from __future__ import annotations

from typing import Any

from travel_insights.db.repositories.activity_repo import ActivityRepository
from travel_insights.models.report import ReportPeriod
from travel_insights.stats.base import StatisticSource
from travel_insights.taxonomy.content_taxonomy import ReportCategory
from travel_insights.utils.time_utils import date_range


def daily_series(repo: ActivityRepository, period: ReportPeriod) -> list[dict[str, Any]]:
    """One row per day of ``period`` (days without events report zeros)."""
    users = repo.daily_counts("users", period.start, period.end)
    views = repo.daily_counts("user_activity", period.start, period.end, activity_type="view")
    bookmarks = repo.daily_counts("bookmarks", period.start, period.end)
    reviews = repo.daily_counts("reviews", period.start, period.end)

    rows: list[dict[str, Any]] = []
    for day in date_range(period.start.date(), period.end.date()):
        key = day.isoformat()
        rows.append(
            {
                "date":      key,
                "users":     users.get(key, 0),
                "views":     views.get(key, 0),
                "bookmarks": bookmarks.get(key, 0),
                "reviews":   reviews.get(key, 0),
            }
        )
    return rows


class TimeSeriesSource(StatisticSource):
    category = ReportCategory.TIME_SERIES

    def __init__(self, repo: ActivityRepository) -> None:
        self.repo = repo

    def _collect(self, period: ReportPeriod) -> dict[str, Any]:
        series = daily_series(self.repo, period)
        return {
            "daily": series,
            "totals": {
                key: sum(row[key] for row in series)
                for key in ("users", "views", "bookmarks", "reviews")
            },
        }
