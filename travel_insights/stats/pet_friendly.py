"""
Pet-friendly catalog statistics.

  area_stats / type_stats  Pet-friendly entity count per area code and per
                           content type, with the mean pet rating and the
                           number of rated pet reviews behind it.
  popular                  Top 10 pet-friendly entities by popularity score
                           (ties: more pet reviews first).
  average_satisfaction     Mean of every pet rating in the catalog.

Scores and averages come from ``recommendations.scorer`` so these numbers
match what the recommendation lists show.  This is a catalog snapshot, not a
report category; ``travel-insights pet-stats`` prints it.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Any, Callable, Optional

from travel_insights.models.catalog import CatalogEntity
from travel_insights.recommendations.engine import CatalogSource
from travel_insights.recommendations.ranker import build_scored_entities
from travel_insights.recommendations.scorer import round_half_up
from travel_insights.taxonomy.content_taxonomy import area_name, content_type_name

logger = logging.getLogger(__name__)

TOP_POPULAR = 10


def _mean_rating(ratings: list[int]) -> float:
    return round_half_up(sum(ratings) / len(ratings)) if ratings else 0.0


def _rating_groups(
    entities: list[CatalogEntity],
    ratings_by_id: dict[str, list[int]],
    key: str,
    namer: Callable[[Optional[str]], str],
) -> list[dict[str, Any]]:
    grouped: dict[str, dict[str, Any]] = {}
    for entity in entities:
        code = getattr(entity, key) or "unknown"
        group = grouped.setdefault(code, {"count": 0, "ratings": []})
        group["count"] += 1
        group["ratings"].extend(ratings_by_id.get(entity.entity_id, []))

    groups = [
        {
            "code":           code,
            "name":           namer(None if code == "unknown" else code),
            "count":          g["count"],
            "average_rating": _mean_rating(g["ratings"]),
            "total_reviews":  len(g["ratings"]),
        }
        for code, g in grouped.items()
    ]
    groups.sort(key=lambda g: g["count"], reverse=True)
    return groups


def pet_friendly_statistics(source: CatalogSource) -> dict[str, Any]:
    """Summarize the pet-friendly part of the catalog.

    Args:
        source: Catalog data source (``CatalogRepository`` in production).

    Returns:
        Dict with ``total_pet_friendly``, ``area_stats``, ``type_stats``,
        ``popular``, ``average_satisfaction`` and ``total_pet_reviews``.
    """
    entities = source.pet_friendly_entities()
    ids = [e.entity_id for e in entities]
    counters = source.engagement_counters(ids) if ids else []
    reviews = source.pet_friendly_reviews(ids) if ids else []

    ratings_by_id: dict[str, list[int]] = defaultdict(list)
    for r in reviews:
        if r.pet_friendly_experience and r.pet_friendly_rating is not None:
            ratings_by_id[r.entity_id].append(r.pet_friendly_rating)
    views_by_id = {c.entity_id: c.view_count for c in counters}

    scored = build_scored_entities(entities, counters, reviews)
    popular = sorted(scored, key=lambda s: (s.score, s.review_count), reverse=True)
    all_ratings = [rating for ratings in ratings_by_id.values() for rating in ratings]

    logger.info(
        "Pet-friendly statistics | entities=%d pet_reviews=%d", len(entities), len(all_ratings)
    )
    return {
        "total_pet_friendly": len(scored),
        "area_stats":  _rating_groups(entities, ratings_by_id, "area_code", area_name),
        "type_stats":  _rating_groups(entities, ratings_by_id, "content_type", content_type_name),
        "popular": [
            {
                "entity_id":        s.entity.entity_id,
                "title":            s.entity.title,
                "view_count":       views_by_id.get(s.entity.entity_id, 0),
                "bookmark_count":   s.bookmark_count,
                "review_count":     s.review_count,
                "average_rating":   s.average_rating,
                "popularity_score": s.score,
            }
            for s in popular[:TOP_POPULAR]
        ],
        "average_satisfaction": _mean_rating(all_ratings),
        "total_pet_reviews":    len(all_ratings),
    }
