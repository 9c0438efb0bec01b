"""Database layer package.

Public re-exports so callers can write::

    from cms.db import get_connection, init_db
    from cms.db import collections, entries
"""

from cms.db.connection import get_connection
from cms.db.migrations import init_db
from cms.db import collections, entries

__all__ = ["get_connection", "init_db", "collections", "entries"]
