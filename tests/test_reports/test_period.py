"""Tests for report period resolution, titles and request validation."""

from __future__ import annotations

from datetime import date, datetime, timezone

import pytest
from pydantic import ValidationError

from travel_insights.config import ReportConfig
from travel_insights.models.report import ReportPeriod, ReportRequest
from travel_insights.reports.period import build_title, resolve_period
from travel_insights.taxonomy.content_taxonomy import ReportCategory, ReportType

NOW = datetime(2025, 1, 7, 15, 30, 0, tzinfo=timezone.utc)
CATS = [ReportCategory.TIME_SERIES]


def _request(report_type: ReportType, **kwargs) -> ReportRequest:
    return ReportRequest(report_type=report_type, categories=CATS, **kwargs)


class TestResolvePeriod:
    def test_daily(self):
        period = resolve_period(_request(ReportType.DAILY), NOW, ReportConfig())
        assert period.start == datetime(2025, 1, 7, 0, 0, 0, tzinfo=timezone.utc)
        assert period.end == datetime(2025, 1, 7, 23, 59, 59, tzinfo=timezone.utc)

    def test_weekly(self):
        period = resolve_period(_request(ReportType.WEEKLY), NOW, ReportConfig())
        assert period.start == datetime(2024, 12, 31, 0, 0, 0, tzinfo=timezone.utc)
        assert period.end == NOW

    def test_monthly(self):
        period = resolve_period(_request(ReportType.MONTHLY), NOW, ReportConfig())
        assert period.start == datetime(2024, 12, 8, 0, 0, 0, tzinfo=timezone.utc)
        assert period.end == NOW

    def test_monthly_window_configurable(self):
        cfg = ReportConfig(monthly_window_days=28)
        period = resolve_period(_request(ReportType.MONTHLY), NOW, cfg)
        assert period.start.date() == date(2024, 12, 10)

    def test_naive_now_taken_as_utc(self):
        naive = datetime(2025, 1, 7, 15, 30, 0)
        period = resolve_period(_request(ReportType.WEEKLY), naive, ReportConfig())
        assert period.end == NOW
        assert period.start.tzinfo is not None

    def test_custom_normalized_to_day_bounds(self):
        req = _request(
            ReportType.CUSTOM, start_date=date(2025, 1, 1), end_date=date(2025, 1, 3)
        )
        period = resolve_period(req, NOW, ReportConfig())
        assert period.start == datetime(2025, 1, 1, 0, 0, 0, tzinfo=timezone.utc)
        assert period.end == datetime(2025, 1, 3, 23, 59, 59, tzinfo=timezone.utc)

    def test_custom_single_day(self):
        req = _request(ReportType.CUSTOM, start_date=date(2025, 1, 1), end_date=date(2025, 1, 1))
        period = resolve_period(req, NOW, ReportConfig())
        assert period.start < period.end


class TestBuildTitle:
    def test_weekly_title(self):
        period = ReportPeriod(
            start=datetime(2025, 1, 1, tzinfo=timezone.utc),
            end=datetime(2025, 1, 7, 23, 59, 59, tzinfo=timezone.utc),
        )
        assert build_title(ReportType.WEEKLY, period) == "Weekly Report - 2025-01-01 ~ 2025-01-07"

    def test_custom_title(self):
        period = ReportPeriod(
            start=datetime(2025, 2, 1, tzinfo=timezone.utc),
            end=datetime(2025, 2, 1, 23, 59, 59, tzinfo=timezone.utc),
        )
        assert build_title(ReportType.CUSTOM, period) == "Custom Report - 2025-02-01 ~ 2025-02-01"


class TestReportRequestValidation:
    def test_custom_requires_both_dates(self):
        with pytest.raises(ValidationError):
            _request(ReportType.CUSTOM, start_date=date(2025, 1, 1))
        with pytest.raises(ValidationError):
            _request(ReportType.CUSTOM)

    def test_custom_rejects_reversed_dates(self):
        with pytest.raises(ValidationError):
            _request(ReportType.CUSTOM, start_date=date(2025, 1, 5), end_date=date(2025, 1, 1))

    def test_requires_a_category(self):
        with pytest.raises(ValidationError):
            ReportRequest(report_type=ReportType.DAILY, categories=[])

    def test_rejects_unknown_category(self):
        with pytest.raises(ValidationError):
            ReportRequest(report_type=ReportType.DAILY, categories=["weather"])

    def test_rejects_unknown_report_type(self):
        with pytest.raises(ValidationError):
            ReportRequest(report_type="hourly", categories=CATS)

    def test_duplicate_categories_collapsed(self):
        req = ReportRequest(
            report_type=ReportType.DAILY,
            categories=["cost", "time_series", "cost"],
        )
        assert req.categories == [ReportCategory.COST, ReportCategory.TIME_SERIES]

    def test_period_rejects_reversed(self):
        with pytest.raises(ValidationError):
            ReportPeriod(start=NOW, end=datetime(2020, 1, 1, tzinfo=timezone.utc))
