"""
Report period resolution and titles.

  daily    today 00:00:00 → today 23:59:59
  weekly   start of day ``weekly_window_days`` ago → now
  monthly  start of day ``monthly_window_days`` ago → now
  custom   ``start_date`` 00:00:00 → ``end_date`` 23:59:59
"""

from __future__ import annotations

from datetime import datetime, timedelta

from travel_insights.config import ReportConfig
from travel_insights.models.report import ReportPeriod, ReportRequest
from travel_insights.taxonomy.content_taxonomy import REPORT_TYPE_NAMES, ReportType
from travel_insights.utils.time_utils import as_utc, end_of_day, start_of_day


def resolve_period(request: ReportRequest, now: datetime, config: ReportConfig) -> ReportPeriod:
    """Return the time window a report covers.

    Args:
        request: Validated report request.
        now:     Current time; a naive value is taken as UTC.
        config:  Window lengths for weekly/monthly reports.

    Returns:
        ``ReportPeriod`` with ``start <= end``.
    """
    now = as_utc(now)
    if request.report_type == ReportType.DAILY:
        return ReportPeriod(start=start_of_day(now), end=end_of_day(now))

    if request.report_type == ReportType.WEEKLY:
        start = start_of_day(now - timedelta(days=config.weekly_window_days))
        return ReportPeriod(start=start, end=now)

    if request.report_type == ReportType.MONTHLY:
        start = start_of_day(now - timedelta(days=config.monthly_window_days))
        return ReportPeriod(start=start, end=now)

    # ReportRequest guarantees both dates for custom reports.
    assert request.start_date is not None and request.end_date is not None
    return ReportPeriod(start=start_of_day(request.start_date), end=end_of_day(request.end_date))


def build_title(report_type: ReportType, period: ReportPeriod) -> str:
    """E.g. ``"Weekly Report - 2025-01-01 ~ 2025-01-07"``."""
    return (
        f"{REPORT_TYPE_NAMES[report_type]} Report - "
        f"{period.start.date().isoformat()} ~ {period.end.date().isoformat()}"
    )
