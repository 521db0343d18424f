"""Tests for catalog and report vocabularies — seasons, names, enum integrity."""

from __future__ import annotations

import pytest

from travel_insights.taxonomy.content_taxonomy import (
    AREA_NAMES,
    CONTENT_TYPE_NAMES,
    ContentType,
    ReportCategory,
    ReportType,
    Season,
    area_name,
    content_type_name,
    season_for_month,
)


class TestSeasonForMonth:
    @pytest.mark.parametrize(
        "month, season",
        [
            (1, Season.WINTER), (2, Season.WINTER), (3, Season.SPRING),
            (5, Season.SPRING), (6, Season.SUMMER), (8, Season.SUMMER),
            (9, Season.AUTUMN), (11, Season.AUTUMN), (12, Season.WINTER),
        ],
    )
    def test_mapping(self, month, season):
        assert season_for_month(month) == season

    @pytest.mark.parametrize("month", [0, 13, -1])
    def test_out_of_range(self, month):
        with pytest.raises(ValueError):
            season_for_month(month)


class TestNames:
    def test_every_content_type_named(self):
        for member in ContentType:
            assert member in CONTENT_TYPE_NAMES, f"ContentType.{member.name} has no name"

    def test_known_codes(self):
        assert content_type_name("32") == "Lodging"
        assert area_name("39") == "Jeju"

    def test_unknown_codes(self):
        assert content_type_name("99") == "Other"
        assert area_name(None) == "Other"

    def test_area_codes_unique_names(self):
        names = list(AREA_NAMES.values())
        assert len(names) == len(set(names))


class TestReportEnums:
    def test_categories(self):
        assert {c.value for c in ReportCategory} == {
            "time_series", "region_type", "performance",
            "cost", "user_behavior", "predictions",
        }

    def test_report_types(self):
        assert [t.value for t in ReportType] == ["daily", "weekly", "monthly", "custom"]
