"""
Shared pytest fixtures for the travel-insights test suite.

Provides:
  - ``in_memory_db``: A fresh in-memory SQLite connection with the full
    schema applied.  Created anew for each test that requests it.
  - ``seeded_catalog``: ``in_memory_db`` plus a small pet-friendly catalog,
    counters, reviews and one user's bookmarks.
  - Sample domain object factories for use in multiple test modules.
"""

from __future__ import annotations

import sqlite3
from datetime import datetime, timezone
from typing import Generator

import pytest

from travel_insights.db.repositories.activity_repo import ActivityRepository
from travel_insights.db.repositories.catalog_repo import CatalogRepository
from travel_insights.db.schema import apply_schema
from travel_insights.models.catalog import CatalogEntity, EngagementCounters, Review

FIXED_NOW = datetime(2025, 1, 7, 12, 0, 0, tzinfo=timezone.utc)


# ── Database fixture ──────────────────────────────────────────────────────────

@pytest.fixture
def in_memory_db() -> Generator[sqlite3.Connection, None, None]:
    """Yield a fresh in-memory SQLite connection with the full schema applied.

    Foreign key enforcement is ON.  Connection is closed after the test.
    """
    conn = sqlite3.connect(":memory:")
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON;")
    apply_schema(conn)
    yield conn
    conn.close()


# ── Sample domain object factories ────────────────────────────────────────────

def make_entity(
    entity_id: str,
    area_code: str | None = "1",
    content_type: str | None = "12",
    pet_friendly: bool = True,
    tags: list[str] | None = None,
) -> CatalogEntity:
    return CatalogEntity(
        entity_id=entity_id,
        title=f"Place {entity_id}",
        image=f"https://img.example/{entity_id}.jpg",
        area_code=area_code,
        content_type=content_type,
        map_x=1_270_000_000,
        map_y=375_000_000,
        pet_friendly=pet_friendly,
        tags=tags or [],
    )


@pytest.fixture
def sample_entity() -> CatalogEntity:
    """A valid pet-friendly ``CatalogEntity``."""
    return make_entity("100")


@pytest.fixture
def seeded_catalog(in_memory_db) -> sqlite3.Connection:
    """Catalog of five entities; user ``u1`` bookmarked ``A``.

      A  area 1, type 12  views 10                 (bookmarked by u1)
      B  area 1, type 39  views 50, bookmarks 20   score 3
      C  area 2, type 12  views 100, bookmarks 5   score 2
      D  area 3, type 38  views 5000               score 50
      E  area 1, type 12  not pet-friendly
    """
    catalog = CatalogRepository(in_memory_db)
    activity = ActivityRepository(in_memory_db)

    entities = [
        make_entity("A", "1", "12"),
        make_entity("B", "1", "39"),
        make_entity("C", "2", "12"),
        make_entity("D", "3", "38"),
        make_entity("E", "1", "12", pet_friendly=False),
    ]
    counters = [
        EngagementCounters(entity_id="A", view_count=10),
        EngagementCounters(entity_id="B", view_count=50, bookmark_count=20),
        EngagementCounters(entity_id="C", view_count=100, bookmark_count=5),
        EngagementCounters(entity_id="D", view_count=5000),
        EngagementCounters(entity_id="E", view_count=9000),
    ]
    for e in entities:
        catalog.upsert_entity(e)
    for c in counters:
        catalog.upsert_counters(c)

    activity.insert_user("u1", created_at=datetime(2024, 12, 1, tzinfo=timezone.utc))
    catalog.add_bookmark("u1", "A", created_at=datetime(2025, 1, 2, tzinfo=timezone.utc))

    catalog.insert_review(
        Review(entity_id="B", rating=5, pet_friendly_experience=True, pet_friendly_rating=5)
    )
    catalog.insert_review(
        Review(entity_id="B", rating=4, pet_friendly_experience=True, pet_friendly_rating=4)
    )
    catalog.insert_review(Review(entity_id="C", rating=3))
    in_memory_db.commit()
    return in_memory_db
