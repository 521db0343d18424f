"""
SQLite schema DDL — all CREATE TABLE and CREATE INDEX statements.

All statements use ``IF NOT EXISTS`` so ``apply_schema()`` is idempotent.

Every timestamp column holds a ``YYYY-MM-DDTHH:MM:SSZ`` string (see
``utils.time_utils.to_db_timestamp``) so range filters compare as text.

Table creation order respects foreign key dependencies:
  1. users                (no FKs)
  2. travels              (no FKs)
  3. travel_stats         (→ travels)
  4. reviews              (→ travels, users)
  5. bookmarks            (→ users, travels)
  6. user_activity        (→ users)
  7. performance_metrics  (no FKs)
  8. error_logs           (→ users)
  9. api_usage_logs       (no FKs)
  10. reports             (no FKs)
"""

from __future__ import annotations

import logging
import sqlite3

logger = logging.getLogger(__name__)

_NOW = "(strftime('%Y-%m-%dT%H:%M:%SZ', 'now'))"

# ── DDL statements ─────────────────────────────────────────────────────────────

_DDL_USERS = f"""
CREATE TABLE IF NOT EXISTS users (
    user_id     TEXT PRIMARY KEY,
    created_at  TEXT NOT NULL DEFAULT {_NOW}
);
CREATE INDEX IF NOT EXISTS idx_users_created ON users (created_at);
"""

_DDL_TRAVELS = f"""
CREATE TABLE IF NOT EXISTS travels (
    entity_id     TEXT    PRIMARY KEY,
    title         TEXT    NOT NULL,
    image         TEXT,
    area_code     TEXT,
    content_type  TEXT,
    map_x         INTEGER,
    map_y         INTEGER,
    pet_friendly  INTEGER NOT NULL DEFAULT 0,
    tags          TEXT    NOT NULL DEFAULT '[]',
    created_at    TEXT    NOT NULL DEFAULT {_NOW}
);
CREATE INDEX IF NOT EXISTS idx_travels_pet_area ON travels (pet_friendly, area_code);
"""

_DDL_TRAVEL_STATS = f"""
CREATE TABLE IF NOT EXISTS travel_stats (
    entity_id       TEXT    PRIMARY KEY REFERENCES travels(entity_id) ON DELETE CASCADE,
    view_count      INTEGER NOT NULL DEFAULT 0 CHECK (view_count >= 0),
    bookmark_count  INTEGER NOT NULL DEFAULT 0 CHECK (bookmark_count >= 0),
    share_count     INTEGER NOT NULL DEFAULT 0 CHECK (share_count >= 0),
    updated_at      TEXT    NOT NULL DEFAULT {_NOW}
);
"""

_DDL_REVIEWS = f"""
CREATE TABLE IF NOT EXISTS reviews (
    review_id                INTEGER PRIMARY KEY AUTOINCREMENT,
    entity_id                TEXT    NOT NULL REFERENCES travels(entity_id) ON DELETE CASCADE,
    user_id                  TEXT    REFERENCES users(user_id) ON DELETE SET NULL,
    rating                   INTEGER CHECK (rating BETWEEN 1 AND 5),
    pet_friendly_experience  INTEGER NOT NULL DEFAULT 0,
    pet_friendly_rating      INTEGER CHECK (pet_friendly_rating BETWEEN 1 AND 5),
    created_at               TEXT    NOT NULL DEFAULT {_NOW}
);
CREATE INDEX IF NOT EXISTS idx_reviews_entity  ON reviews (entity_id);
CREATE INDEX IF NOT EXISTS idx_reviews_created ON reviews (created_at);
"""

_DDL_BOOKMARKS = f"""
CREATE TABLE IF NOT EXISTS bookmarks (
    bookmark_id  INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id      TEXT    NOT NULL REFERENCES users(user_id) ON DELETE CASCADE,
    entity_id    TEXT    NOT NULL REFERENCES travels(entity_id) ON DELETE CASCADE,
    created_at   TEXT    NOT NULL DEFAULT {_NOW},
    UNIQUE (user_id, entity_id)
);
CREATE INDEX IF NOT EXISTS idx_bookmarks_created ON bookmarks (created_at);
"""

_DDL_USER_ACTIVITY = f"""
CREATE TABLE IF NOT EXISTS user_activity (
    activity_id    INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id        TEXT    REFERENCES users(user_id) ON DELETE CASCADE,
    entity_id      TEXT    NOT NULL,
    activity_type  TEXT    NOT NULL CHECK (activity_type IN ('view', 'bookmark', 'share')),
    created_at     TEXT    NOT NULL DEFAULT {_NOW}
);
CREATE INDEX IF NOT EXISTS idx_user_activity_created ON user_activity (created_at);
CREATE INDEX IF NOT EXISTS idx_user_activity_user    ON user_activity (user_id, created_at);
"""

_DDL_PERFORMANCE_METRICS = f"""
CREATE TABLE IF NOT EXISTS performance_metrics (
    metric_id    INTEGER PRIMARY KEY AUTOINCREMENT,
    metric_type  TEXT    NOT NULL CHECK (metric_type IN ('api_response', 'page_load', 'web_vital', 'db_query')),
    metric_name  TEXT    NOT NULL,
    endpoint     TEXT,
    value        REAL    NOT NULL,
    unit         TEXT    NOT NULL DEFAULT 'ms',
    created_at   TEXT    NOT NULL DEFAULT {_NOW}
);
CREATE INDEX IF NOT EXISTS idx_performance_metrics_created ON performance_metrics (created_at);
"""

_DDL_ERROR_LOGS = f"""
CREATE TABLE IF NOT EXISTS error_logs (
    error_id       INTEGER PRIMARY KEY AUTOINCREMENT,
    error_type     TEXT    NOT NULL CHECK (error_type IN ('api_error', 'page_error', 'db_error', 'other')),
    error_message  TEXT    NOT NULL,
    endpoint       TEXT,
    user_id        TEXT    REFERENCES users(user_id) ON DELETE SET NULL,
    created_at     TEXT    NOT NULL DEFAULT {_NOW}
);
CREATE INDEX IF NOT EXISTS idx_error_logs_created ON error_logs (created_at);
"""

_DDL_API_USAGE_LOGS = f"""
CREATE TABLE IF NOT EXISTS api_usage_logs (
    usage_id        INTEGER PRIMARY KEY AUTOINCREMENT,
    service_name    TEXT    NOT NULL CHECK (service_name IN ('vercel', 'supabase', 'naver_map', 'tour_api', 'clerk')),
    operation_type  TEXT    NOT NULL,
    endpoint        TEXT,
    cost_per_unit   REAL    NOT NULL DEFAULT 0,
    units           REAL    NOT NULL DEFAULT 1,
    total_cost      REAL    NOT NULL DEFAULT 0,
    created_at      TEXT    NOT NULL DEFAULT {_NOW}
);
CREATE INDEX IF NOT EXISTS idx_api_usage_logs_created ON api_usage_logs (created_at);
"""

_DDL_REPORTS = f"""
CREATE TABLE IF NOT EXISTS reports (
    report_id     INTEGER PRIMARY KEY AUTOINCREMENT,
    report_type   TEXT    NOT NULL CHECK (report_type IN ('daily', 'weekly', 'monthly', 'custom')),
    title         TEXT    NOT NULL,
    period_start  TEXT    NOT NULL,
    period_end    TEXT    NOT NULL,
    categories    TEXT    NOT NULL,
    report_data   TEXT    NOT NULL,
    generated_at  TEXT    NOT NULL,
    created_at    TEXT    NOT NULL DEFAULT {_NOW}
);
CREATE INDEX IF NOT EXISTS idx_reports_generated ON reports (generated_at DESC);
"""

_ALL_DDL = [
    _DDL_USERS,
    _DDL_TRAVELS,
    _DDL_TRAVEL_STATS,
    _DDL_REVIEWS,
    _DDL_BOOKMARKS,
    _DDL_USER_ACTIVITY,
    _DDL_PERFORMANCE_METRICS,
    _DDL_ERROR_LOGS,
    _DDL_API_USAGE_LOGS,
    _DDL_REPORTS,
]

# Table names for introspection / tests
ALL_TABLE_NAMES = [
    "users",
    "travels",
    "travel_stats",
    "reviews",
    "bookmarks",
    "user_activity",
    "performance_metrics",
    "error_logs",
    "api_usage_logs",
    "reports",
]


def apply_schema(conn: sqlite3.Connection) -> None:
    """Apply all DDL statements to ``conn``.

    Idempotent — safe to call on an already-initialized database.

    Args:
        conn: An open ``sqlite3.Connection`` (FK enforcement should be ON).
    """
    logger.debug("Applying schema to database...")

    for ddl in _ALL_DDL:
        for statement in _split_ddl(ddl):
            conn.execute(statement)

    conn.commit()
    logger.info("Schema applied: %d tables, indexes created/verified.", len(ALL_TABLE_NAMES))


def _split_ddl(ddl: str) -> list[str]:
    """Split a multi-statement DDL block on semicolons."""
    return [s.strip() for s in ddl.split(";") if s.strip()]


def get_existing_tables(conn: sqlite3.Connection) -> list[str]:
    """Return the table names present in the database, sorted.

    SQLite's internal ``sqlite_sequence`` table is excluded.
    """
    rows = conn.execute(
        "SELECT name FROM sqlite_master WHERE type='table' "
        "AND name NOT LIKE 'sqlite_%' ORDER BY name;"
    ).fetchall()
    return [row["name"] for row in rows]
