"""
Repository for catalog entities, engagement counters, reviews and bookmarks.

``CatalogRepository`` satisfies ``recommendations.engine.CatalogSource``.
"""

from __future__ import annotations

import json
import logging
import sqlite3
from datetime import datetime
from typing import Optional, Sequence

from travel_insights.db.repositories.base import BaseRepository
from travel_insights.models.catalog import CatalogEntity, EngagementCounters, Review
from travel_insights.utils.time_utils import to_db_timestamp, utcnow

logger = logging.getLogger(__name__)


class CatalogRepository(BaseRepository):
    """Read/write access to ``travels``, ``travel_stats``, ``reviews`` and ``bookmarks``."""

    # ── Writes ────────────────────────────────────────────────────────────────

    def upsert_entity(self, entity: CatalogEntity) -> None:
        """Insert or replace a catalog entity.

        Args:
            entity: The ``CatalogEntity`` to persist.
        """
        self.execute(
            """
            INSERT INTO travels (
                entity_id, title, image, area_code, content_type,
                map_x, map_y, pet_friendly, tags
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
            ON CONFLICT(entity_id) DO UPDATE SET
                title        = excluded.title,
                image        = excluded.image,
                area_code    = excluded.area_code,
                content_type = excluded.content_type,
                map_x        = excluded.map_x,
                map_y        = excluded.map_y,
                pet_friendly = excluded.pet_friendly,
                tags         = excluded.tags;
            """,
            (
                entity.entity_id,
                entity.title,
                entity.image,
                entity.area_code,
                entity.content_type,
                entity.map_x,
                entity.map_y,
                int(entity.pet_friendly),
                json.dumps(entity.tags),
            ),
        )

    def upsert_counters(self, counters: EngagementCounters) -> None:
        """Insert or replace the engagement counters of one entity."""
        self.execute(
            """
            INSERT INTO travel_stats (entity_id, view_count, bookmark_count, share_count, updated_at)
            VALUES (?, ?, ?, ?, ?)
            ON CONFLICT(entity_id) DO UPDATE SET
                view_count     = excluded.view_count,
                bookmark_count = excluded.bookmark_count,
                share_count    = excluded.share_count,
                updated_at     = excluded.updated_at;
            """,
            (
                counters.entity_id,
                counters.view_count,
                counters.bookmark_count,
                counters.share_count,
                to_db_timestamp(utcnow()),
            ),
        )

    def insert_review(
        self,
        review: Review,
        user_id: Optional[str] = None,
        created_at: Optional[datetime] = None,
    ) -> int:
        """Insert a review and return its ``review_id``."""
        self.execute(
            """
            INSERT INTO reviews (
                entity_id, user_id, rating, pet_friendly_experience,
                pet_friendly_rating, created_at
            ) VALUES (?, ?, ?, ?, ?, ?);
            """,
            (
                review.entity_id,
                user_id,
                review.rating,
                int(review.pet_friendly_experience),
                review.pet_friendly_rating,
                to_db_timestamp(created_at or utcnow()),
            ),
        )
        return self.last_insert_rowid()

    def add_bookmark(
        self,
        user_id: str,
        entity_id: str,
        created_at: Optional[datetime] = None,
    ) -> None:
        """Bookmark ``entity_id`` for ``user_id``; a repeat bookmark is a no-op."""
        self.execute(
            """
            INSERT OR IGNORE INTO bookmarks (user_id, entity_id, created_at)
            VALUES (?, ?, ?);
            """,
            (user_id, entity_id, to_db_timestamp(created_at or utcnow())),
        )

    # ── CatalogSource ─────────────────────────────────────────────────────────

    def pet_friendly_entities(self, region_code: Optional[str] = None) -> list[CatalogEntity]:
        """Pet-friendly entities in insertion order, optionally for one area code."""
        if region_code:
            rows = self.fetchall(
                "SELECT * FROM travels WHERE pet_friendly = 1 AND area_code = ? ORDER BY rowid;",
                (region_code,),
            )
        else:
            rows = self.fetchall("SELECT * FROM travels WHERE pet_friendly = 1 ORDER BY rowid;")
        return [_row_to_entity(r) for r in rows]

    def engagement_counters(self, entity_ids: Sequence[str]) -> list[EngagementCounters]:
        rows = self.fetchall_in(
            "SELECT * FROM travel_stats WHERE entity_id IN ({placeholders});",
            entity_ids,
        )
        return [
            EngagementCounters(
                entity_id=r["entity_id"],
                view_count=r["view_count"],
                bookmark_count=r["bookmark_count"],
                share_count=r["share_count"],
            )
            for r in rows
        ]

    def pet_friendly_reviews(self, entity_ids: Sequence[str]) -> list[Review]:
        """Reviews marking a pet-friendly experience with a pet rating."""
        rows = self.fetchall_in(
            """
            SELECT * FROM reviews
            WHERE entity_id IN ({placeholders})
              AND pet_friendly_experience = 1
              AND pet_friendly_rating IS NOT NULL
            ORDER BY review_id;
            """,
            entity_ids,
        )
        return [_row_to_review(r) for r in rows]

    def bookmarked_entity_ids(self, user_id: str, entity_ids: Sequence[str]) -> list[str]:
        rows = self.fetchall_in(
            """
            SELECT entity_id FROM bookmarks
            WHERE entity_id IN ({placeholders}) AND user_id = ?
            ORDER BY bookmark_id;
            """,
            entity_ids,
            (user_id,),
        )
        return [r["entity_id"] for r in rows]

    # ── Statistics queries ────────────────────────────────────────────────────

    def engagement_rows(self) -> list[dict]:
        """One row per catalog entity with counters and its review count.

        Entities without a ``travel_stats`` row report zero counters.
        """
        rows = self.fetchall(
            """
            SELECT t.entity_id, t.title, t.area_code, t.content_type,
                   COALESCE(s.view_count, 0)     AS view_count,
                   COALESCE(s.bookmark_count, 0) AS bookmark_count,
                   (SELECT COUNT(*) FROM reviews r WHERE r.entity_id = t.entity_id)
                                                 AS review_count
            FROM travels t
            LEFT JOIN travel_stats s ON s.entity_id = t.entity_id
            ORDER BY t.rowid;
            """
        )
        return [dict(r) for r in rows]

    def get_entity(self, entity_id: str) -> Optional[CatalogEntity]:
        row = self.fetchone("SELECT * FROM travels WHERE entity_id = ?;", (entity_id,))
        return _row_to_entity(row) if row else None


# ── Row mappers ───────────────────────────────────────────────────────────────


def _row_to_entity(row: sqlite3.Row) -> CatalogEntity:
    return CatalogEntity(
        entity_id=row["entity_id"],
        title=row["title"],
        image=row["image"],
        area_code=row["area_code"],
        content_type=row["content_type"],
        map_x=row["map_x"],
        map_y=row["map_y"],
        pet_friendly=bool(row["pet_friendly"]),
        tags=json.loads(row["tags"] or "[]"),
    )


def _row_to_review(row: sqlite3.Row) -> Review:
    return Review(
        entity_id=row["entity_id"],
        rating=row["rating"],
        pet_friendly_experience=bool(row["pet_friendly_experience"]),
        pet_friendly_rating=row["pet_friendly_rating"],
    )
