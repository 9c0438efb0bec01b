"""Request-scoped access to the shared database connection."""

from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from typing import Iterator

from fastapi import Request


@contextmanager
def locked_db(request: Request) -> Iterator[sqlite3.Connection]:
    """Hold the app's DB lock for the duration of a handler.

    Every request shares one connection, and a ``with conn:`` block commits or
    rolls back whatever is pending on it, so no two handlers may use it at the
    same time.
    """
    state = request.app.state
    with state.db_lock:
        yield state.db
