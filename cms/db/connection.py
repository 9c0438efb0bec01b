"""Opening and configuring the SQLite database.

Usage::

    from cms.db.connection import get_connection

    conn = get_connection()
    init_db(conn)

The returned connection is the storage handle every store function takes as
its first argument.
"""

from __future__ import annotations

import sqlite3
from pathlib import Path
from typing import Optional

from cms.config import settings


def get_connection(db_path: Optional[Path | str] = None) -> sqlite3.Connection:
    """Open the CMS database.

    Each connection is set up the same way:
    1. Enable ``PRAGMA foreign_keys = ON`` (entries cascade with their collection).
    2. Switch to WAL journal mode for concurrent readers.

    Args:
        db_path: Database file to open instead of ``settings.db_path``.
            Pass ``":memory:"`` for a throwaway database.

    Returns:
        A connection whose rows are :class:`sqlite3.Row`, so store code reads
        columns by name.
    """
    path = db_path or settings.db_path

    # The workspace may not exist yet on a first run.
    if str(path) != ":memory:":
        Path(path).parent.mkdir(parents=True, exist_ok=True)

    # Shared across FastAPI's worker threads; SQLite serialises the writes.
    conn = sqlite3.connect(str(path), check_same_thread=False)
    conn.row_factory = sqlite3.Row

    conn.execute("PRAGMA foreign_keys = ON")
    conn.execute("PRAGMA journal_mode = WAL")

    return conn
