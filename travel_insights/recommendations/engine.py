"""
Recommendation engine: fetches catalog inputs and builds the three lists.

Flow of one ``recommend()`` call:

  Step 1 — Entities:  pet-friendly catalog entities (optionally one region).
  Step 2 — Inputs:    engagement counters, pet-friendly reviews and, when a
                      user id is given, the user's bookmarks among them.
  Step 3 — Score:     ``ranker.build_scored_entities``.
  Step 4 — Rank:      user-based, region-based and seasonal lists.

Failure isolation
-----------------
- Any fetch that raises:  logged at WARNING, treated as "no data".
- Any strategy that raises:  logged, only that list is empty.
- No user id:  the user-based list is empty; the other two are unaffected.

The data source is injected (``CatalogSource``); the engine holds no client
or connection of its own.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Callable, Optional, Protocol, Sequence, TypeVar

from travel_insights.config import RecommendationConfig
from travel_insights.models.catalog import CatalogEntity, EngagementCounters, Review
from travel_insights.models.recommendation import RecommendationCandidate, RecommendationSet
from travel_insights.recommendations.ranker import (
    build_scored_entities,
    rank_region_based,
    rank_seasonal,
    rank_user_based,
)
from travel_insights.taxonomy.content_taxonomy import season_for_month
from travel_insights.utils.time_utils import utcnow

logger = logging.getLogger(__name__)

T = TypeVar("T")


class CatalogSource(Protocol):
    """Read access to the catalog data the engine ranks over."""

    def pet_friendly_entities(self, region_code: Optional[str] = None) -> list[CatalogEntity]:
        ...

    def engagement_counters(self, entity_ids: Sequence[str]) -> list[EngagementCounters]:
        ...

    def pet_friendly_reviews(self, entity_ids: Sequence[str]) -> list[Review]:
        ...

    def bookmarked_entity_ids(self, user_id: str, entity_ids: Sequence[str]) -> list[str]:
        ...


class RecommendationEngine:
    """Builds pet-friendly recommendation lists.

    Args:
        source: Catalog data source.
        config: Recommendation settings (list cap, seasonal affinity table).
    """

    def __init__(self, source: CatalogSource, config: RecommendationConfig) -> None:
        self.source = source
        self.config = config

    def recommend(
        self,
        user_id: Optional[str] = None,
        region_code: Optional[str] = None,
        today: Optional[date] = None,
    ) -> RecommendationSet:
        """Compute the user-based, region-based and seasonal lists.

        Args:
            user_id:     Signed-in user; ``None`` empties the user-based list.
            region_code: Restrict every list to one area code.
            today:       Date used to pick the season (defaults to today, UTC).

        Returns:
            ``RecommendationSet`` with each list capped at ``config.limit``.
        """
        today = today or utcnow().date()
        season = season_for_month(today.month)
        limit = self.config.limit

        entities = self._fetch(
            "pet_friendly_entities", lambda: self.source.pet_friendly_entities(region_code)
        )
        if not entities:
            logger.info("No pet-friendly entities (region=%s).", region_code)
            return RecommendationSet(season=season)

        ids = [e.entity_id for e in entities]
        counters = self._fetch("engagement_counters", lambda: self.source.engagement_counters(ids))
        reviews = self._fetch("pet_friendly_reviews", lambda: self.source.pet_friendly_reviews(ids))
        bookmarks: list[str] = []
        if user_id:
            bookmarks = self._fetch(
                "bookmarked_entity_ids",
                lambda: self.source.bookmarked_entity_ids(user_id, ids),
            )

        scored = build_scored_entities(entities, counters, reviews)

        result = RecommendationSet(
            user_based=self._strategy(
                "user_based", lambda: rank_user_based(scored, bookmarks, limit)
            ),
            region_based=self._strategy(
                "region_based", lambda: rank_region_based(scored, limit)
            ),
            seasonal=self._strategy(
                "seasonal",
                lambda: rank_seasonal(
                    scored, season, self.config.seasonal_content_types, limit
                ),
            ),
            season=season,
        )
        logger.info(
            "Recommendations | user=%d region=%d seasonal=%d | season=%s",
            len(result.user_based),
            len(result.region_based),
            len(result.seasonal),
            season.value,
        )
        return result

    # ── Isolation helpers ─────────────────────────────────────────────────────

    @staticmethod
    def _fetch(name: str, fn: Callable[[], list[T]]) -> list[T]:
        try:
            return list(fn())
        except Exception as exc:
            logger.warning("Fetch %s failed, treating as no data: %s", name, exc)
            return []

    @staticmethod
    def _strategy(
        name: str, fn: Callable[[], list[RecommendationCandidate]]
    ) -> list[RecommendationCandidate]:
        try:
            return fn()
        except Exception as exc:
            logger.error("Strategy %s failed: %s", name, exc)
            return []
