"""
Catalog-side input models: entities, engagement counters, reviews, coordinates.

These are the already-fetched collections the recommendation engine and the
statistic sources work over.  All models are frozen — the core never
mutates its inputs.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class CatalogEntity(BaseModel):
    """A catalog item (tourist site, camping ground, ...).

    Attributes:
        entity_id: Stable content id from the catalog API.
        title: Display title.
        image: Primary image URL, or ``None``.
        area_code: Region code, or ``None`` when the catalog has none.
        content_type: Content-type code (see ``ContentType``), or ``None``.
        map_x: Fixed-point longitude-like grid coordinate (scaled by 1e7).
        map_y: Fixed-point latitude-like grid coordinate (scaled by 1e7).
        pet_friendly: Whether pets are allowed.
        tags: Free-form catalog tags.
    """

    model_config = ConfigDict(frozen=True)

    entity_id: str
    title: str = "Untitled"
    image: Optional[str] = None
    area_code: Optional[str] = None
    content_type: Optional[str] = None
    map_x: Optional[int] = None
    map_y: Optional[int] = None
    pet_friendly: bool = False
    tags: list[str] = Field(default_factory=list)

    @field_validator("entity_id")
    @classmethod
    def validate_entity_id(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("entity_id must not be empty.")
        return v.strip()


class EngagementCounters(BaseModel):
    """Raw engagement counters attached to one entity."""

    model_config = ConfigDict(frozen=True)

    entity_id: str
    view_count: int = Field(default=0, ge=0)
    bookmark_count: int = Field(default=0, ge=0)
    share_count: int = Field(default=0, ge=0)


class Review(BaseModel):
    """A user review of an entity.

    ``pet_friendly_rating`` (1–5) is only meaningful when
    ``pet_friendly_experience`` is set.
    """

    model_config = ConfigDict(frozen=True)

    entity_id: str
    rating: Optional[int] = Field(default=None, ge=1, le=5)
    pet_friendly_experience: bool = False
    pet_friendly_rating: Optional[int] = Field(default=None, ge=1, le=5)


class ProjectedCoordinate(BaseModel):
    """Geographic coordinate in degrees, 6-decimal precision."""

    model_config = ConfigDict(frozen=True)

    lat: float
    lng: float
