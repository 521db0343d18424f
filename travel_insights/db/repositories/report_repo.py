"""
Repository for generated reports.

Reports are insert-only: a regenerated report for the same period is a new
row.  ``ReportRepository`` satisfies ``reports.aggregator.ReportStore``.
"""

from __future__ import annotations

import json
import logging
import sqlite3

from travel_insights.db.repositories.base import BaseRepository
from travel_insights.errors import ReportNotFoundError
from travel_insights.models.report import ReportDocument, ReportPeriod
from travel_insights.utils.time_utils import parse_db_timestamp, to_db_timestamp

logger = logging.getLogger(__name__)


class ReportRepository(BaseRepository):
    """Read/write access to ``reports``."""

    def insert_report(self, document: ReportDocument) -> int:
        """Insert a report and return its ``report_id``.

        Args:
            document: The ``ReportDocument`` to persist (its ``report_id`` is ignored).

        Returns:
            The newly assigned ``report_id``.
        """
        self.execute(
            """
            INSERT INTO reports (
                report_type, title, period_start, period_end,
                categories, report_data, generated_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?);
            """,
            (
                document.report_type.value,
                document.title,
                to_db_timestamp(document.period.start),
                to_db_timestamp(document.period.end),
                json.dumps([c.value for c in document.requested_categories]),
                json.dumps(document.metrics_by_category, default=str),
                to_db_timestamp(document.generated_at),
            ),
        )
        report_id = self.last_insert_rowid()
        logger.debug("Inserted report %d (%s)", report_id, document.title)
        return report_id

    def get_report(self, report_id: int) -> ReportDocument:
        """Fetch one report.

        Raises:
            ReportNotFoundError: If no report has ``report_id``.
        """
        row = self.fetchone("SELECT * FROM reports WHERE report_id = ?;", (report_id,))
        if row is None:
            raise ReportNotFoundError(report_id)
        return _row_to_report(row)

    def list_reports(self, limit: int = 20) -> list[ReportDocument]:
        """Most recently generated reports first."""
        rows = self.fetchall(
            "SELECT * FROM reports ORDER BY generated_at DESC, report_id DESC LIMIT ?;",
            (limit,),
        )
        return [_row_to_report(r) for r in rows]


def _row_to_report(row: sqlite3.Row) -> ReportDocument:
    return ReportDocument(
        report_id=row["report_id"],
        report_type=row["report_type"],
        title=row["title"],
        period=ReportPeriod(
            start=parse_db_timestamp(row["period_start"]),
            end=parse_db_timestamp(row["period_end"]),
        ),
        generated_at=parse_db_timestamp(row["generated_at"]),
        requested_categories=json.loads(row["categories"]),
        metrics_by_category=json.loads(row["report_data"]),
    )
