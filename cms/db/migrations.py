"""Database initialisation.

``init_db(conn)`` is idempotent — safe to call on an existing database.
"""

from __future__ import annotations

import sqlite3

import structlog

from cms.config import settings

logger = structlog.get_logger(__name__)


def _read_schema() -> str:
    """Load the bundled schema.sql."""
    return settings.schema_path.read_text(encoding="utf-8")


def init_db(conn: sqlite3.Connection) -> None:
    """Create the ``collections`` and ``entries`` tables and their indexes.

    Every DDL statement uses ``IF NOT EXISTS`` so calling this function
    multiple times on the same database is safe.

    Args:
        conn: An open, configured SQLite connection.
    """
    # executescript() issues an implicit COMMIT first, which is fine for DDL.
    conn.executescript(_read_schema())
    logger.debug("database_initialised")


def table_names(conn: sqlite3.Connection) -> set[str]:
    """Return the names of all user tables in the database."""
    rows = conn.execute(
        "SELECT name FROM sqlite_master WHERE type = 'table' AND name NOT LIKE 'sqlite_%'"
    ).fetchall()
    return {r[0] for r in rows}
