"""
Catalog engagement grouped by region (area code), by content type and by
the (region, content type) pair.

Counters are cumulative, so the grouping reflects the catalog as of report
generation; the period is not applied.
"""

from __future__ import annotations

from collections import defaultdict
from typing import Any, Callable, Optional

from travel_insights.db.repositories.catalog_repo import CatalogRepository
from travel_insights.models.report import ReportPeriod
from travel_insights.stats.base import StatisticSource
from travel_insights.taxonomy.content_taxonomy import (
    ReportCategory,
    area_name,
    content_type_name,
)

POPULAR_PER_GROUP = 10


def group_engagement(
    rows: list[dict],
    key: str,
    namer: Callable[[Optional[str]], str],
) -> list[dict[str, Any]]:
    """Aggregate entity rows by ``key``.

    Args:
        rows:  Rows from ``CatalogRepository.engagement_rows()``.
        key:   ``"area_code"`` or ``"content_type"``.
        namer: Code → display name.

    Returns:
        Groups sorted by ``travel_count`` descending (stable); each lists its
        top entities by views + bookmarks.
    """
    grouped: dict[str, list[dict]] = defaultdict(list)
    for row in rows:
        grouped[row[key] or "unknown"].append(row)

    groups: list[dict[str, Any]] = []
    for code, members in grouped.items():
        popular = sorted(
            members, key=lambda r: r["view_count"] + r["bookmark_count"], reverse=True
        )[:POPULAR_PER_GROUP]
        groups.append(
            {
                "code":           code,
                "name":           namer(None if code == "unknown" else code),
                "travel_count":   len(members),
                "view_count":     sum(r["view_count"] for r in members),
                "bookmark_count": sum(r["bookmark_count"] for r in members),
                "review_count":   sum(r["review_count"] for r in members),
                "popular_travels": [
                    {
                        "entity_id":      r["entity_id"],
                        "title":          r["title"],
                        "view_count":     r["view_count"],
                        "bookmark_count": r["bookmark_count"],
                    }
                    for r in popular
                ],
            }
        )
    groups.sort(key=lambda g: g["travel_count"], reverse=True)
    return groups


def region_type_combinations(rows: list[dict]) -> list[dict[str, Any]]:
    """Aggregate entity rows by (area code, content type).

    Rows missing either code are left out.  Sorted by ``travel_count``
    descending (stable).
    """
    grouped: dict[tuple[str, str], list[dict]] = defaultdict(list)
    for row in rows:
        if row["area_code"] and row["content_type"]:
            grouped[(row["area_code"], row["content_type"])].append(row)

    combinations = [
        {
            "area_code":      area,
            "area_name":      area_name(area),
            "content_type":   ctype,
            "type_name":      content_type_name(ctype),
            "travel_count":   len(members),
            "view_count":     sum(r["view_count"] for r in members),
            "bookmark_count": sum(r["bookmark_count"] for r in members),
            "review_count":   sum(r["review_count"] for r in members),
        }
        for (area, ctype), members in grouped.items()
    ]
    combinations.sort(key=lambda c: c["travel_count"], reverse=True)
    return combinations


class RegionTypeSource(StatisticSource):
    category = ReportCategory.REGION_TYPE

    def __init__(self, repo: CatalogRepository) -> None:
        self.repo = repo

    def _collect(self, period: ReportPeriod) -> dict[str, Any]:
        rows = self.repo.engagement_rows()
        return {
            "region_stats": group_engagement(rows, "area_code", area_name),
            "type_stats":   group_engagement(rows, "content_type", content_type_name),
            "region_type_combinations": region_type_combinations(rows),
        }
