"""
User behavior analytics over the report period.

  session_analysis     Activities of one user less than 30 minutes apart
                       form one session; bounce = single-event session.
  journey_analysis     Top 20 viewed paths (``/travels/<entity_id>``).
  segment_analysis     New vs existing users and active vs inactive users,
                       both relative to the 30 days before the period end.
  conversion_analysis  Share of viewers who also bookmarked / reviewed.
"""

from __future__ import annotations

from collections import Counter
from datetime import datetime, timedelta
from typing import Any

from travel_insights.db.repositories.activity_repo import ActivityRepository
from travel_insights.models.report import ReportPeriod
from travel_insights.stats.base import StatisticSource
from travel_insights.taxonomy.content_taxonomy import ReportCategory
from travel_insights.utils.time_utils import parse_db_timestamp

SESSION_GAP = timedelta(minutes=30)
SEGMENT_WINDOW = timedelta(days=30)
TOP_PATHS = 20


def _pct(part: int, whole: int) -> float:
    return part / whole * 100 if whole > 0 else 0.0


def session_analysis(activities: list[dict]) -> dict[str, Any]:
    """Session count, mean duration (seconds), mean events and bounce rate.

    Args:
        activities: Activity rows ordered by ``created_at``; anonymous rows
            (no ``user_id``) are ignored.
    """
    # user_id -> list of [start, end, events]
    sessions: dict[str, list[list[Any]]] = {}
    for a in activities:
        if not a["user_id"]:
            continue
        ts = parse_db_timestamp(a["created_at"])
        user_sessions = sessions.setdefault(a["user_id"], [])
        if user_sessions and ts - user_sessions[-1][1] < SESSION_GAP:
            user_sessions[-1][1] = ts
            user_sessions[-1][2] += 1
        else:
            user_sessions.append([ts, ts, 1])

    flat = [s for user_sessions in sessions.values() for s in user_sessions]
    total = len(flat)
    duration = sum((end - start).total_seconds() for start, end, _ in flat)
    events = sum(n for _, _, n in flat)
    bounces = sum(1 for _, _, n in flat if n == 1)
    return {
        "total_sessions":           total,
        "average_session_duration": duration / total if total else 0.0,
        "average_page_views":       events / total if total else 0.0,
        "bounce_rate":              _pct(bounces, total),
    }


def journey_analysis(activities: list[dict]) -> list[dict[str, Any]]:
    counts = Counter(
        f"/travels/{a['entity_id']}" if a["entity_id"] else "/"
        for a in activities
        if a["activity_type"] == "view"
    )
    total = sum(counts.values())
    return [
        {"path": path, "count": n, "percentage": _pct(n, total)}
        for path, n in counts.most_common(TOP_PATHS)
    ]


def segment_analysis(
    users: list[dict], active_ids: set[str], as_of: datetime
) -> list[dict[str, Any]]:
    cutoff = as_of - SEGMENT_WINDOW
    total = len(users)
    new = sum(1 for u in users if parse_db_timestamp(u["created_at"]) >= cutoff)
    active = sum(1 for u in users if u["user_id"] in active_ids)
    counts = {
        "new (last 30 days)":    new,
        "existing":              total - new,
        "active (last 30 days)": active,
        "inactive":              total - active,
    }
    return [
        {"segment": name, "count": n, "percentage": _pct(n, total)}
        for name, n in counts.items()
    ]


def conversion_analysis(
    viewers: set[str], bookmarkers: set[str], reviewers: set[str]
) -> list[dict[str, Any]]:
    rows: list[dict[str, Any]] = []
    for name, converted in (("view_to_bookmark", bookmarkers), ("view_to_review", reviewers)):
        conversions = len(viewers & converted)
        rows.append(
            {
                "conversion_type": name,
                "visitors":        len(viewers),
                "conversions":     conversions,
                "conversion_rate": _pct(conversions, len(viewers)),
            }
        )
    return rows


class UserBehaviorSource(StatisticSource):
    category = ReportCategory.USER_BEHAVIOR

    def __init__(self, repo: ActivityRepository) -> None:
        self.repo = repo

    def _collect(self, period: ReportPeriod) -> dict[str, Any]:
        activities = self.repo.activities(period.start, period.end)
        viewers = {
            a["user_id"] for a in activities if a["user_id"] and a["activity_type"] == "view"
        }
        users = self.repo.users_created(period.end)
        active_ids = self.repo.active_user_ids(period.end - SEGMENT_WINDOW, period.end)
        return {
            "session_analysis":    session_analysis(activities),
            "journey_analysis":    journey_analysis(activities),
            "segment_analysis":    segment_analysis(users, active_ids, period.end),
            "conversion_analysis": conversion_analysis(
                viewers,
                self.repo.bookmarking_user_ids(period.start, period.end),
                self.repo.reviewing_user_ids(period.start, period.end),
            ),
        }
