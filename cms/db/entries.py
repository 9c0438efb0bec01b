"""CRUD operations for the ``entries`` table.

Every function is scoped to a :class:`~cms.db.models.Collection`: an entry is
only ever visible through the collection that owns it.  Entry data is written
exclusively as the cleaned output of
:func:`~cms.content.validation.validate_entry_data`.
"""

from __future__ import annotations

import json
import math
import sqlite3
from time import time
from typing import Any, Mapping, Optional

import structlog

from cms.content.query import build_query
from cms.content.validation import validate_entry_data
from cms.db.models import Collection, Entry
from cms.errors import NotFoundError, ValidationError

logger = structlog.get_logger(__name__)

FILTER_PREFIX = "filter."
UPDATABLE_FIELDS = frozenset({"data", "status"})


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _row_to_entry(row: sqlite3.Row) -> Entry:
    return Entry(
        id=row["id"],
        collection_id=row["collection_id"],
        data=json.loads(row["data"] or "{}"),
        status=row["status"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def _normalise_status(status: Any) -> str:
    return "published" if status == "published" else "draft"


def extract_filters(query: Mapping[str, Any]) -> dict[str, Any]:
    """Pick the ``filter.<field>`` parameters out of a raw query mapping."""
    return {
        key[len(FILTER_PREFIX):]: value
        for key, value in query.items()
        if key.startswith(FILTER_PREFIX)
    }


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def list_entries(
    conn: sqlite3.Connection,
    collection: Collection,
    query: Optional[Mapping[str, Any]] = None,
) -> dict[str, Any]:
    """Return one page of a collection's entries plus pagination metadata.

    Args:
        conn: Open DB connection.
        collection: The owning collection.
        query: Raw query parameters: ``status``, ``sort``, ``page``,
            ``per_page`` and any number of ``filter.<field>`` keys.

    Returns:
        ``{"data": [Entry, ...], "pagination": {"page", "per_page", "total",
        "total_pages"}}``.
    """
    query = query or {}
    built = build_query(
        status=query.get("status"),
        filters=extract_filters(query),
        sort=query.get("sort"),
        page=query.get("page"),
        per_page=query.get("per_page"),
    )

    predicate = " AND ".join(["e.collection_id = ?", *built.conditions])
    params = [collection.id, *built.params]

    total = conn.execute(
        f"SELECT COUNT(*) FROM entries e WHERE {predicate}",  # noqa: S608
        params,
    ).fetchone()[0]

    rows = conn.execute(
        f"""
        SELECT e.* FROM entries e
        WHERE {predicate}
        {built.order_clause}
        LIMIT ? OFFSET ?
        """,  # noqa: S608
        [*params, built.limit, built.offset],
    ).fetchall()

    return {
        "data": [_row_to_entry(r) for r in rows],
        "pagination": {
            "page": built.current_page,
            "per_page": built.limit,
            "total": total,
            "total_pages": math.ceil(total / built.limit),
        },
    }


def get_entry(conn: sqlite3.Connection, collection: Collection, entry_id: int) -> Entry:
    """Fetch one entry of *collection*.

    Raises:
        NotFoundError: If the entry does not exist or belongs to another
            collection.
    """
    row = conn.execute(
        "SELECT * FROM entries WHERE id = ? AND collection_id = ?",
        (entry_id, collection.id),
    ).fetchone()
    if row is None:
        raise NotFoundError(f'Entry with id {entry_id} not found in "{collection.name}"')
    return _row_to_entry(row)


def create_entry(
    conn: sqlite3.Connection,
    collection: Collection,
    data: Optional[Mapping[str, Any]] = None,
    status: Optional[str] = None,
) -> Entry:
    """Validate *data* against the collection's fields and insert an entry.

    ``status`` is ``"published"`` only when passed exactly; anything else
    creates a draft.

    Raises:
        ValidationError: The data does not satisfy the field definitions.
    """
    cleaned = validate_entry_data(collection.fields, data if data is not None else {})
    now = int(time())

    with conn:
        cursor = conn.execute(
            """
            INSERT INTO entries (collection_id, data, status, created_at, updated_at)
            VALUES (?, ?, ?, ?, ?)
            """,
            (collection.id, json.dumps(cleaned), _normalise_status(status), now, now),
        )

    logger.info("entry_created", collection=collection.slug, entry_id=cursor.lastrowid)
    return get_entry(conn, collection, cursor.lastrowid)


def update_entry(
    conn: sqlite3.Connection,
    collection: Collection,
    entry_id: int,
    **changes: Any,
) -> Entry:
    """Apply a partial update to an entry.

    Only ``data`` (re-validated in full) and ``status`` are accepted, and only
    the ones actually passed are written.  ``updated_at`` is always refreshed.

    Raises:
        NotFoundError: If the entry is not part of *collection*.
        ValidationError: Unknown keys or invalid data.
    """
    existing = get_entry(conn, collection, entry_id)

    unknown = set(changes) - UPDATABLE_FIELDS
    if unknown:
        raise ValidationError(f"Cannot update field(s): {', '.join(sorted(unknown))}")

    data = existing.data
    if "data" in changes:
        data = validate_entry_data(collection.fields, changes["data"])
    status = existing.status
    if "status" in changes:
        status = _normalise_status(changes["status"])

    with conn:
        conn.execute(
            """
            UPDATE entries SET data = ?, status = ?, updated_at = ?
            WHERE id = ? AND collection_id = ?
            """,
            (json.dumps(data), status, int(time()), entry_id, collection.id),
        )

    logger.info("entry_updated", collection=collection.slug, entry_id=entry_id)
    return get_entry(conn, collection, entry_id)


def delete_entry(conn: sqlite3.Connection, collection: Collection, entry_id: int) -> None:
    """Delete one entry of *collection*.

    Raises:
        NotFoundError: If the entry is not part of *collection*.
    """
    get_entry(conn, collection, entry_id)
    with conn:
        conn.execute(
            "DELETE FROM entries WHERE id = ? AND collection_id = ?",
            (entry_id, collection.id),
        )
    logger.info("entry_deleted", collection=collection.slug, entry_id=entry_id)
