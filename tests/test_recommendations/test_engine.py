"""
Tests for travel_insights/recommendations/engine.py.

What we test
------------
RecommendationEngine.recommend() over the seeded SQLite catalog:
  - Without a user: empty user-based list, non-empty region/seasonal lists.
  - With a user: similar-to-bookmark list excludes bookmarked entities.
  - Non-pet-friendly entities never appear.
  - Region filter restricts every list.
  - Season follows the supplied date.
  - Ratings and review counts are attached to candidates.
  - Lists are capped at the configured limit.

Failure isolation (fake source):
  - A raising fetch is treated as no data, other lists still computed.
  - A raising entity fetch yields three empty lists.
  - A raising strategy empties only its own list.
"""

from __future__ import annotations

from datetime import date

import pytest

from travel_insights.config import RecommendationConfig
from travel_insights.db.repositories.catalog_repo import CatalogRepository
from travel_insights.models.catalog import CatalogEntity, EngagementCounters
from travel_insights.recommendations import engine as engine_module
from travel_insights.recommendations.engine import RecommendationEngine
from travel_insights.taxonomy.content_taxonomy import Season

WINTER_DAY = date(2025, 1, 7)
SUMMER_DAY = date(2025, 7, 7)


def _ids(candidates) -> list[str]:
    return [c.entity_id for c in candidates]


@pytest.fixture
def engine(seeded_catalog) -> RecommendationEngine:
    return RecommendationEngine(CatalogRepository(seeded_catalog), RecommendationConfig())


# ── Against the seeded catalog ────────────────────────────────────────────────

class TestRecommendSeeded:
    def test_no_user_empties_only_user_based(self, engine):
        result = engine.recommend(today=WINTER_DAY)
        assert result.user_based == []
        assert result.region_based
        assert result.seasonal

    def test_region_based_order(self, engine):
        result = engine.recommend(today=WINTER_DAY)
        assert _ids(result.region_based) == ["D", "B", "C", "A"]
        assert [c.popularity_score for c in result.region_based] == [50, 3, 2, 0]

    def test_user_based_excludes_bookmarked(self, engine):
        result = engine.recommend(user_id="u1", today=WINTER_DAY)
        assert _ids(result.user_based) == ["B", "C"]
        assert "A" not in _ids(result.user_based)

    def test_unknown_user_has_no_user_based(self, engine):
        assert engine.recommend(user_id="ghost", today=WINTER_DAY).user_based == []

    def test_not_pet_friendly_never_recommended(self, engine):
        result = engine.recommend(user_id="u1", today=WINTER_DAY)
        for lst in (result.user_based, result.region_based, result.seasonal):
            assert "E" not in _ids(lst)

    def test_winter_seasonal(self, engine):
        result = engine.recommend(today=WINTER_DAY)
        assert result.season == Season.WINTER
        assert _ids(result.seasonal) == ["B", "C", "A"]
        assert all(c.reason_tag == "good for winter" for c in result.seasonal)

    def test_summer_seasonal(self, engine):
        result = engine.recommend(today=SUMMER_DAY)
        assert result.season == Season.SUMMER
        assert _ids(result.seasonal) == ["C", "A"]

    def test_region_filter(self, engine):
        result = engine.recommend(user_id="u1", region_code="1", today=WINTER_DAY)
        assert _ids(result.region_based) == ["B", "A"]
        assert _ids(result.user_based) == ["B"]
        assert all(c.area_code == "1" for c in result.seasonal)

    def test_ratings_attached(self, engine):
        result = engine.recommend(today=WINTER_DAY)
        by_id = {c.entity_id: c for c in result.region_based}
        assert (by_id["B"].average_rating, by_id["B"].review_count) == (4.5, 2)
        # C only has a non-pet review
        assert (by_id["C"].average_rating, by_id["C"].review_count) == (0.0, 0)

    def test_limit(self, seeded_catalog):
        engine = RecommendationEngine(
            CatalogRepository(seeded_catalog), RecommendationConfig(limit=2)
        )
        result = engine.recommend(today=WINTER_DAY)
        assert len(result.region_based) == 2
        assert len(result.seasonal) == 2


# ── Failure isolation ─────────────────────────────────────────────────────────

class _FakeSource:
    def __init__(self, fail: set[str] | None = None) -> None:
        self.fail = fail or set()

    def _check(self, name: str) -> None:
        if name in self.fail:
            raise RuntimeError(f"{name} unavailable")

    def pet_friendly_entities(self, region_code=None):
        self._check("entities")
        return [
            CatalogEntity(entity_id="A", area_code="1", content_type="12", pet_friendly=True),
            CatalogEntity(entity_id="B", area_code="1", content_type="14", pet_friendly=True),
        ]

    def engagement_counters(self, entity_ids):
        self._check("counters")
        return [EngagementCounters(entity_id="B", view_count=500)]

    def pet_friendly_reviews(self, entity_ids):
        self._check("reviews")
        return []

    def bookmarked_entity_ids(self, user_id, entity_ids):
        self._check("bookmarks")
        return ["A"]


class TestFailureIsolation:
    def test_counters_failure_is_no_data(self):
        engine = RecommendationEngine(_FakeSource({"counters"}), RecommendationConfig())
        result = engine.recommend(user_id="u", today=WINTER_DAY)
        assert _ids(result.region_based) == ["A", "B"]
        assert all(c.popularity_score == 0 for c in result.region_based)
        assert _ids(result.user_based) == ["B"]

    def test_bookmarks_failure_empties_user_based(self):
        engine = RecommendationEngine(_FakeSource({"bookmarks"}), RecommendationConfig())
        result = engine.recommend(user_id="u", today=WINTER_DAY)
        assert result.user_based == []
        assert _ids(result.region_based) == ["B", "A"]

    def test_entities_failure_empties_everything(self):
        engine = RecommendationEngine(_FakeSource({"entities"}), RecommendationConfig())
        result = engine.recommend(user_id="u", today=WINTER_DAY)
        assert (result.user_based, result.region_based, result.seasonal) == ([], [], [])
        assert result.season == Season.WINTER

    def test_strategy_failure_empties_only_its_list(self, monkeypatch):
        def boom(*args, **kwargs):
            raise ValueError("bad affinity table")

        monkeypatch.setattr(engine_module, "rank_seasonal", boom)
        engine = RecommendationEngine(_FakeSource(), RecommendationConfig())
        result = engine.recommend(user_id="u", today=WINTER_DAY)
        assert result.seasonal == []
        assert result.region_based
        assert result.user_based
