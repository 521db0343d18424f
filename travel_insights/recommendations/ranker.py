"""
Recommendation ranker: couples catalog entities with their engagement and
review data, then builds the three ranked recommendation lists.

Usage flow
----------
1. build_scored_entities(entities, counters, reviews)
   -> list[ScoredEntity]  (one per entity, in catalog order)

2. rank_user_based(scored, bookmarked_ids, limit)
   rank_region_based(scored, limit)
   rank_seasonal(scored, season, affinity, limit)
   -> list[RecommendationCandidate]  (each capped at ``limit``)

All sorts are stable, so entities with equal keys keep catalog order.
Nothing here does I/O; ``engine.RecommendationEngine`` fetches the inputs.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from typing import Iterable, Mapping

from travel_insights.models.catalog import CatalogEntity, EngagementCounters, Review
from travel_insights.models.recommendation import RecommendationCandidate
from travel_insights.recommendations.scorer import average_pet_rating, popularity_score
from travel_insights.taxonomy.content_taxonomy import Season

REASON_USER_BASED = "similar to your bookmarks"
REASON_REGION_BASED = "popular in this region"


def seasonal_reason(season: Season) -> str:
    return f"good for {season.value}"


@dataclass(frozen=True)
class ScoredEntity:
    """A catalog entity with its derived ranking inputs.

    Attributes:
        entity:          The catalog entity.
        score:           Popularity score (0–100).
        average_rating:  Mean pet-friendly rating, one decimal.
        review_count:    Pet-friendly reviews with a rating.
        bookmark_count:  Bookmark counter (0 when no counters row).
    """

    entity:         CatalogEntity
    score:          int
    average_rating: float
    review_count:   int
    bookmark_count: int

    def to_candidate(self, reason_tag: str) -> RecommendationCandidate:
        e = self.entity
        return RecommendationCandidate(
            entity_id=e.entity_id,
            title=e.title,
            image=e.image,
            area_code=e.area_code,
            content_type=e.content_type,
            map_x=e.map_x,
            map_y=e.map_y,
            average_rating=self.average_rating,
            review_count=self.review_count,
            bookmark_count=self.bookmark_count,
            popularity_score=self.score,
            reason_tag=reason_tag,
        )


def build_scored_entities(
    entities: Iterable[CatalogEntity],
    counters: Iterable[EngagementCounters],
    reviews:  Iterable[Review],
) -> list[ScoredEntity]:
    """Score every entity from its counters and pet-friendly reviews.

    Entities without a counters row score 0; entities without qualifying
    reviews report ``average_rating = 0.0`` and are kept.

    Args:
        entities: Pet-friendly catalog entities, in catalog order.
        counters: Engagement counters; at most one row per entity is used.
        reviews:  Reviews for the entities (any flags; filtered here).

    Returns:
        One ``ScoredEntity`` per distinct entity id, in input order.
    """
    counters_by_id: dict[str, EngagementCounters] = {}
    for c in counters:
        counters_by_id.setdefault(c.entity_id, c)

    reviews_by_id: dict[str, list[Review]] = defaultdict(list)
    for r in reviews:
        reviews_by_id[r.entity_id].append(r)

    scored: list[ScoredEntity] = []
    seen: set[str] = set()
    for entity in entities:
        if entity.entity_id in seen:
            continue
        seen.add(entity.entity_id)

        c = counters_by_id.get(entity.entity_id)
        views, bookmarks, shares = (
            (c.view_count, c.bookmark_count, c.share_count) if c else (0, 0, 0)
        )
        avg, count = average_pet_rating(reviews_by_id.get(entity.entity_id, []))
        scored.append(
            ScoredEntity(
                entity=entity,
                score=popularity_score(views, bookmarks, shares),
                average_rating=avg,
                review_count=count,
                bookmark_count=bookmarks,
            )
        )
    return scored


def _by_score(scored: Iterable[ScoredEntity]) -> list[ScoredEntity]:
    return sorted(scored, key=lambda s: s.score, reverse=True)


def rank_user_based(
    scored:         list[ScoredEntity],
    bookmarked_ids: Iterable[str],
    limit:          int,
) -> list[RecommendationCandidate]:
    """Entities similar to the user's pet-friendly bookmarks.

    A candidate shares ``area_code`` or ``content_type`` with at least one
    bookmarked entity and is not itself bookmarked.  Bookmarks outside the
    scored (pet-friendly) set are ignored.

    Returns:
        Up to ``limit`` candidates by popularity score descending; empty
        when the user has no pet-friendly bookmarks.
    """
    bookmarked = set(bookmarked_ids)
    liked = [s.entity for s in scored if s.entity.entity_id in bookmarked]
    if not liked:
        return []

    areas = {e.area_code for e in liked if e.area_code}
    types = {e.content_type for e in liked if e.content_type}

    matches = [
        s for s in scored
        if s.entity.entity_id not in bookmarked
        and (
            (s.entity.area_code is not None and s.entity.area_code in areas)
            or (s.entity.content_type is not None and s.entity.content_type in types)
        )
    ]
    return [s.to_candidate(REASON_USER_BASED) for s in _by_score(matches)[:limit]]


def rank_region_based(scored: list[ScoredEntity], limit: int) -> list[RecommendationCandidate]:
    """Most popular entities; equal scores break by review count descending."""
    ranked = sorted(scored, key=lambda s: (s.score, s.review_count), reverse=True)
    return [s.to_candidate(REASON_REGION_BASED) for s in ranked[:limit]]


def rank_seasonal(
    scored:   list[ScoredEntity],
    season:   Season,
    affinity: Mapping[str, list[str]],
    limit:    int,
) -> list[RecommendationCandidate]:
    """Entities whose content type or a tag is listed for ``season``.

    Args:
        scored:   Scored entities.
        season:   Current season.
        affinity: Season name -> content-type codes (or tags) considered a match.
        limit:    List cap.
    """
    wanted = set(affinity.get(season.value, []))
    # No content type means no type match; such an entity can still match by tag.
    matches = [
        s for s in scored
        if (s.entity.content_type is not None and s.entity.content_type in wanted)
        or any(tag in wanted for tag in s.entity.tags)
    ]
    reason = seasonal_reason(season)
    return [s.to_candidate(reason) for s in _by_score(matches)[:limit]]
