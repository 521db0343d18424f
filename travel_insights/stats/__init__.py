"""
Statistic sources, one per report category.

``build_sources(conn, config)`` wires every source to one SQLite connection
for ``reports.aggregator.ReportAggregator``.
"""

from __future__ import annotations

import sqlite3

from travel_insights.config import ReportConfig
from travel_insights.db.repositories.activity_repo import ActivityRepository
from travel_insights.db.repositories.catalog_repo import CatalogRepository
from travel_insights.stats.base import StatisticSource
from travel_insights.stats.cost import CostSource
from travel_insights.stats.performance import PerformanceSource
from travel_insights.stats.predictions import PredictionSource
from travel_insights.stats.region_type import RegionTypeSource
from travel_insights.stats.time_series import TimeSeriesSource
from travel_insights.stats.user_behavior import UserBehaviorSource
from travel_insights.taxonomy.content_taxonomy import ReportCategory


def build_sources(
    conn: sqlite3.Connection, config: ReportConfig
) -> dict[ReportCategory, StatisticSource]:
    activity = ActivityRepository(conn)
    catalog = CatalogRepository(conn)
    sources: list[StatisticSource] = [
        TimeSeriesSource(activity),
        RegionTypeSource(catalog),
        PerformanceSource(activity),
        CostSource(activity),
        UserBehaviorSource(activity),
        PredictionSource(activity, config),
    ]
    return {s.category: s for s in sources}
