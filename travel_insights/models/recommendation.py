"""
Recommendation output models.

``RecommendationCandidate`` is one ranked entry; ``RecommendationSet`` holds
the three independently ranked lists.  Both are ephemeral: recomputed per
request and never persisted.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from travel_insights.taxonomy.content_taxonomy import Season


class RecommendationCandidate(BaseModel):
    """A catalog entity ranked for one recommendation list.

    Attributes:
        entity_id: Catalog content id.
        title: Display title.
        image: Primary image URL, or ``None``.
        area_code: Region code, if known.
        content_type: Content-type code, if known.
        map_x: Fixed-point grid x (see ``geo.projection.project``).
        map_y: Fixed-point grid y.
        average_rating: Mean pet-friendly rating, one decimal; 0.0 with no reviews.
        review_count: Number of pet-friendly reviews with a rating.
        bookmark_count: Bookmark counter.
        popularity_score: Popularity score in [0, 100].
        reason_tag: Why the entity is in this list.
    """

    model_config = ConfigDict(frozen=True)

    entity_id: str
    title: str
    image: Optional[str] = None
    area_code: Optional[str] = None
    content_type: Optional[str] = None
    map_x: Optional[int] = None
    map_y: Optional[int] = None
    average_rating: float = 0.0
    review_count: int = 0
    bookmark_count: int = 0
    popularity_score: int = Field(default=0, ge=0, le=100)
    reason_tag: str


class RecommendationSet(BaseModel):
    """The three recommendation lists for one request."""

    model_config = ConfigDict(frozen=True)

    user_based: list[RecommendationCandidate] = Field(default_factory=list)
    region_based: list[RecommendationCandidate] = Field(default_factory=list)
    seasonal: list[RecommendationCandidate] = Field(default_factory=list)
    season: Season
