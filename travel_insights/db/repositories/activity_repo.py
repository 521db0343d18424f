"""
Repository for users, user activity, performance metrics, error logs and
API usage logs — the raw event tables the statistic sources read.

Range queries take inclusive ``start``/``end`` datetimes and compare the
stored fixed-width timestamp strings.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Literal, Optional

from travel_insights.db.repositories.base import BaseRepository
from travel_insights.utils.time_utils import to_db_timestamp, utcnow

logger = logging.getLogger(__name__)

ActivityType = Literal["view", "bookmark", "share"]
MetricType = Literal["api_response", "page_load", "web_vital", "db_query"]
ErrorType = Literal["api_error", "page_error", "db_error", "other"]
ServiceName = Literal["vercel", "supabase", "naver_map", "tour_api", "clerk"]

# Tables holding a per-row created_at that daily_counts() may aggregate.
_COUNTABLE_TABLES = frozenset({"users", "bookmarks", "reviews", "user_activity"})


class ActivityRepository(BaseRepository):
    """Read/write access to the event tables behind report statistics."""

    # ── Writes ────────────────────────────────────────────────────────────────

    def insert_user(self, user_id: str, created_at: Optional[datetime] = None) -> None:
        """Register a user; re-registering an existing id is a no-op."""
        self.execute(
            "INSERT OR IGNORE INTO users (user_id, created_at) VALUES (?, ?);",
            (user_id, to_db_timestamp(created_at or utcnow())),
        )

    def record_activity(
        self,
        user_id: Optional[str],
        entity_id: str,
        activity_type: ActivityType,
        created_at: Optional[datetime] = None,
    ) -> int:
        """Record one view/bookmark/share event and return its id."""
        self.execute(
            """
            INSERT INTO user_activity (user_id, entity_id, activity_type, created_at)
            VALUES (?, ?, ?, ?);
            """,
            (user_id, entity_id, activity_type, to_db_timestamp(created_at or utcnow())),
        )
        return self.last_insert_rowid()

    def insert_metric(
        self,
        metric_type: MetricType,
        metric_name: str,
        value: float,
        endpoint: Optional[str] = None,
        unit: str = "ms",
        created_at: Optional[datetime] = None,
    ) -> int:
        """Record one performance measurement and return its id."""
        self.execute(
            """
            INSERT INTO performance_metrics (metric_type, metric_name, endpoint, value, unit, created_at)
            VALUES (?, ?, ?, ?, ?, ?);
            """,
            (metric_type, metric_name, endpoint, value, unit,
             to_db_timestamp(created_at or utcnow())),
        )
        return self.last_insert_rowid()

    def insert_error(
        self,
        error_type: ErrorType,
        error_message: str,
        endpoint: Optional[str] = None,
        user_id: Optional[str] = None,
        created_at: Optional[datetime] = None,
    ) -> int:
        """Record one application error and return its id."""
        self.execute(
            """
            INSERT INTO error_logs (error_type, error_message, endpoint, user_id, created_at)
            VALUES (?, ?, ?, ?, ?);
            """,
            (error_type, error_message, endpoint, user_id,
             to_db_timestamp(created_at or utcnow())),
        )
        return self.last_insert_rowid()

    def insert_api_usage(
        self,
        service_name: ServiceName,
        operation_type: str,
        units: float = 1,
        cost_per_unit: float = 0,
        endpoint: Optional[str] = None,
        created_at: Optional[datetime] = None,
    ) -> int:
        """Record one third-party API call; ``total_cost = units * cost_per_unit``."""
        self.execute(
            """
            INSERT INTO api_usage_logs (
                service_name, operation_type, endpoint,
                cost_per_unit, units, total_cost, created_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?);
            """,
            (service_name, operation_type, endpoint, cost_per_unit, units,
             units * cost_per_unit, to_db_timestamp(created_at or utcnow())),
        )
        return self.last_insert_rowid()

    # ── Range queries ─────────────────────────────────────────────────────────

    def daily_counts(
        self,
        table: str,
        start: datetime,
        end: datetime,
        activity_type: Optional[ActivityType] = None,
    ) -> dict[str, int]:
        """Count rows per UTC day (``YYYY-MM-DD``) whose ``created_at`` is in range.

        Args:
            table: One of ``users``, ``bookmarks``, ``reviews``, ``user_activity``.
            start: Inclusive lower bound.
            end: Inclusive upper bound.
            activity_type: Filter for ``user_activity`` rows.

        Returns:
            Day → count; days without rows are absent.

        Raises:
            ValueError: If ``table`` is not a countable table.
        """
        if table not in _COUNTABLE_TABLES:
            raise ValueError(f"Cannot count rows of table '{table}'.")

        sql = (
            f"SELECT substr(created_at, 1, 10) AS day, COUNT(*) AS n FROM {table} "
            "WHERE created_at >= ? AND created_at <= ?"
        )
        params: tuple = (to_db_timestamp(start), to_db_timestamp(end))
        if activity_type is not None:
            sql += " AND activity_type = ?"
            params += (activity_type,)
        sql += " GROUP BY day;"
        return {r["day"]: int(r["n"]) for r in self.fetchall(sql, params)}

    def activities(self, start: datetime, end: datetime) -> list[dict]:
        """User activity rows in range, oldest first."""
        rows = self.fetchall(
            """
            SELECT user_id, entity_id, activity_type, created_at FROM user_activity
            WHERE created_at >= ? AND created_at <= ?
            ORDER BY created_at, activity_id;
            """,
            (to_db_timestamp(start), to_db_timestamp(end)),
        )
        return [dict(r) for r in rows]

    def metrics(self, start: datetime, end: datetime) -> list[dict]:
        rows = self.fetchall(
            """
            SELECT metric_type, metric_name, endpoint, value FROM performance_metrics
            WHERE created_at >= ? AND created_at <= ?
            ORDER BY metric_id;
            """,
            (to_db_timestamp(start), to_db_timestamp(end)),
        )
        return [dict(r) for r in rows]

    def errors(self, start: datetime, end: datetime) -> list[dict]:
        rows = self.fetchall(
            """
            SELECT error_type, endpoint FROM error_logs
            WHERE created_at >= ? AND created_at <= ?
            ORDER BY error_id;
            """,
            (to_db_timestamp(start), to_db_timestamp(end)),
        )
        return [dict(r) for r in rows]

    def api_usage(self, start: datetime, end: datetime) -> list[dict]:
        rows = self.fetchall(
            """
            SELECT service_name, operation_type, units, total_cost, created_at
            FROM api_usage_logs
            WHERE created_at >= ? AND created_at <= ?
            ORDER BY usage_id;
            """,
            (to_db_timestamp(start), to_db_timestamp(end)),
        )
        return [dict(r) for r in rows]

    def users_created(self, until: datetime) -> list[dict]:
        """``user_id``/``created_at`` of every user registered up to ``until``."""
        rows = self.fetchall(
            "SELECT user_id, created_at FROM users WHERE created_at <= ? ORDER BY created_at;",
            (to_db_timestamp(until),),
        )
        return [dict(r) for r in rows]

    def first_user_created_at(self) -> Optional[str]:
        row = self.fetchone("SELECT MIN(created_at) AS first FROM users;")
        return row["first"] if row else None

    def active_user_ids(self, start: datetime, end: datetime) -> set[str]:
        rows = self.fetchall(
            """
            SELECT DISTINCT user_id FROM user_activity
            WHERE user_id IS NOT NULL AND created_at >= ? AND created_at <= ?;
            """,
            (to_db_timestamp(start), to_db_timestamp(end)),
        )
        return {r["user_id"] for r in rows}

    def bookmarking_user_ids(self, start: datetime, end: datetime) -> set[str]:
        rows = self.fetchall(
            "SELECT DISTINCT user_id FROM bookmarks WHERE created_at >= ? AND created_at <= ?;",
            (to_db_timestamp(start), to_db_timestamp(end)),
        )
        return {r["user_id"] for r in rows}

    def reviewing_user_ids(self, start: datetime, end: datetime) -> set[str]:
        rows = self.fetchall(
            """
            SELECT DISTINCT user_id FROM reviews
            WHERE user_id IS NOT NULL AND created_at >= ? AND created_at <= ?;
            """,
            (to_db_timestamp(start), to_db_timestamp(end)),
        )
        return {r["user_id"] for r in rows}
