"""
Base repository providing shared SQLite execution helpers.

All repositories inherit from ``BaseRepository`` and receive a
``sqlite3.Connection`` at construction time.  The connection is opened and
managed by the caller (typically via ``get_connection()``).

Design:
  - No ORM — all SQL is explicit and lives in repository methods.
  - Repositories speak Pydantic models or plain dict rows, never cursors.
  - ``row_factory = sqlite3.Row`` (set by ``get_connection()``) gives
    dict-like row access throughout.
"""

from __future__ import annotations

import logging
import sqlite3
from typing import Any, Optional, Sequence

logger = logging.getLogger(__name__)

# SQLite's default limit on host parameters per statement is 999 on older builds.
MAX_IN_PARAMS = 900


class BaseRepository:
    """Shared SQL execution helpers for all repository classes.

    Attributes:
        conn: The active ``sqlite3.Connection``.
    """

    def __init__(self, conn: sqlite3.Connection) -> None:
        self.conn = conn

    def execute(
        self,
        sql: str,
        params: tuple[Any, ...] | dict[str, Any] = (),
    ) -> sqlite3.Cursor:
        """Execute a single SQL statement.

        Args:
            sql: SQL string with ``?`` or ``:name`` placeholders.
            params: Positional tuple or named dict of parameters.

        Returns:
            The resulting ``sqlite3.Cursor``.
        """
        logger.debug("SQL: %s | params: %s", sql.strip(), params)
        return self.conn.execute(sql, params)

    def fetchone(
        self,
        sql: str,
        params: tuple[Any, ...] | dict[str, Any] = (),
    ) -> Optional[sqlite3.Row]:
        """Execute a query and return the first row, or ``None``."""
        return self.execute(sql, params).fetchone()

    def fetchall(
        self,
        sql: str,
        params: tuple[Any, ...] | dict[str, Any] = (),
    ) -> list[sqlite3.Row]:
        """Execute a query and return all rows."""
        return self.execute(sql, params).fetchall()

    def fetchall_in(
        self,
        sql_template: str,
        ids: Sequence[Any],
        extra_params: tuple[Any, ...] = (),
    ) -> list[sqlite3.Row]:
        """Run a query with an ``IN (...)`` list, chunked under the parameter limit.

        Args:
            sql_template: SQL containing one ``{placeholders}`` marker for the
                ``IN`` list; ``extra_params`` bind AFTER the id list.
            ids: Values for the ``IN`` list.  An empty list returns no rows.
            extra_params: Further positional parameters.

        Returns:
            Rows from all chunks, in chunk order.
        """
        rows: list[sqlite3.Row] = []
        for i in range(0, len(ids), MAX_IN_PARAMS):
            chunk = list(ids[i : i + MAX_IN_PARAMS])
            sql = sql_template.format(placeholders=", ".join("?" * len(chunk)))
            rows.extend(self.fetchall(sql, (*chunk, *extra_params)))
        return rows

    def last_insert_rowid(self) -> int:
        """Return the rowid of the last successful INSERT."""
        row = self.fetchone("SELECT last_insert_rowid() AS rowid;")
        assert row is not None
        return int(row["rowid"])
