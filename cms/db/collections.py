"""CRUD operations for the ``collections`` table.

A collection's ``fields`` column holds its JSON field-definition list.  The
list is checked with :func:`~cms.content.schema.validate_field_definitions`
whenever it is written; existing entries are never re-validated.
"""

from __future__ import annotations

import json
import re
import sqlite3
from time import time
from typing import Any, Optional

import structlog

from cms.content.schema import validate_field_definitions
from cms.db.models import Collection
from cms.errors import ConflictError, NotFoundError, ValidationError

logger = structlog.get_logger(__name__)

UPDATABLE_FIELDS = frozenset({"name", "description", "fields"})


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def slugify(text: str) -> str:
    """Turn a collection name into its URL slug (``"Blog Posts!!"`` -> ``"blog-posts"``)."""
    slug = text.lower().strip()
    slug = re.sub(r"[^\w\s-]", "", slug, flags=re.ASCII)
    slug = re.sub(r"[\s_]+", "-", slug)
    slug = re.sub(r"-+", "-", slug)
    return slug.strip("-")


def _row_to_collection(row: sqlite3.Row) -> Collection:
    return Collection(
        id=row["id"],
        name=row["name"],
        slug=row["slug"],
        description=row["description"],
        fields=json.loads(row["fields"] or "[]"),
        created_at=row["created_at"],
        updated_at=row["updated_at"],
        entry_count=row["entry_count"] if "entry_count" in row.keys() else None,
    )


def _clean_name(name: Any) -> str:
    if not isinstance(name, str) or not name.strip():
        raise ValidationError("Collection name is required")
    return name.strip()


def _slug_for(name: str) -> str:
    slug = slugify(name)
    if not slug:
        raise ValidationError("Collection name must contain at least one letter or digit")
    return slug


def _ensure_slug_free(conn: sqlite3.Connection, slug: str, exclude_id: Optional[int] = None) -> None:
    row = conn.execute(
        "SELECT id FROM collections WHERE slug = ? AND id IS NOT ?",
        (slug, exclude_id),
    ).fetchone()
    if row is not None:
        raise ConflictError(f'A collection with slug "{slug}" already exists')


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def list_collections(conn: sqlite3.Connection) -> list[Collection]:
    """Return every collection with its entry count, newest first."""
    rows = conn.execute(
        """
        SELECT c.*, COUNT(e.id) AS entry_count
        FROM collections c
        LEFT JOIN entries e ON e.collection_id = c.id
        GROUP BY c.id
        ORDER BY c.created_at DESC, c.id DESC
        """
    ).fetchall()
    return [_row_to_collection(r) for r in rows]


def get_collection(conn: sqlite3.Connection, collection_id: int) -> Collection:
    """Fetch a collection by id.

    Raises:
        NotFoundError: If no collection has this id.
    """
    row = conn.execute(
        "SELECT * FROM collections WHERE id = ?", (collection_id,)
    ).fetchone()
    if row is None:
        raise NotFoundError(f"Collection with id {collection_id} not found")
    return _row_to_collection(row)


def get_collection_by_slug(conn: sqlite3.Connection, slug: str) -> Collection:
    """Fetch a collection by slug.

    Raises:
        NotFoundError: If no collection has this slug.
    """
    row = conn.execute(
        "SELECT * FROM collections WHERE slug = ?", (slug,)
    ).fetchone()
    if row is None:
        raise NotFoundError(f'Collection "{slug}" not found')
    return _row_to_collection(row)


def create_collection(
    conn: sqlite3.Connection,
    name: Any,
    description: Optional[str] = None,
    fields: Any = None,
) -> Collection:
    """Insert a new collection and return it.

    Args:
        conn: Open DB connection.
        name: Display name; the slug is derived from it.
        description: Free text, stored as ``""`` when omitted.
        fields: Field-definition list.  Validated when given, ``[]`` otherwise.

    Raises:
        ValidationError: Blank name or invalid field definitions.
        ConflictError: Another collection already derives the same slug.
    """
    clean_name = _clean_name(name)
    if fields is not None:
        validate_field_definitions(fields)

    slug = _slug_for(clean_name)
    _ensure_slug_free(conn, slug)

    now = int(time())
    try:
        with conn:
            cursor = conn.execute(
                """
                INSERT INTO collections (name, slug, description, fields, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (clean_name, slug, description or "", json.dumps(fields or []), now, now),
            )
    except sqlite3.IntegrityError as exc:
        # Lost a race with a concurrent insert, or the name itself is taken.
        raise ConflictError(f'A collection named "{clean_name}" already exists') from exc

    logger.info("collection_created", collection_id=cursor.lastrowid, slug=slug)
    return get_collection(conn, cursor.lastrowid)


def update_collection(conn: sqlite3.Connection, collection_id: int, **changes: Any) -> Collection:
    """Apply a partial update to a collection.

    Only the keyword arguments actually passed are written: ``name``
    (re-derives and re-checks the slug), ``description`` and ``fields``
    (re-validated in full).  ``updated_at`` is always refreshed.

    Raises:
        NotFoundError: If ``collection_id`` does not exist.
        ValidationError: Unknown keys, a blank name or invalid fields.
        ConflictError: The new name derives a slug that is already taken.
    """
    existing = get_collection(conn, collection_id)

    unknown = set(changes) - UPDATABLE_FIELDS
    if unknown:
        raise ValidationError(f"Cannot update field(s): {', '.join(sorted(unknown))}")

    updates: dict[str, Any] = {}
    if "name" in changes:
        updates["name"] = _clean_name(changes["name"])
        updates["slug"] = _slug_for(updates["name"])
        if updates["slug"] != existing.slug:
            _ensure_slug_free(conn, updates["slug"], exclude_id=collection_id)
    if "description" in changes:
        updates["description"] = changes["description"] or ""
    if "fields" in changes:
        validate_field_definitions(changes["fields"])
        updates["fields"] = json.dumps(changes["fields"])

    updates["updated_at"] = int(time())
    set_clause = ", ".join(f"{col} = ?" for col in updates)
    values = list(updates.values()) + [collection_id]

    try:
        with conn:
            conn.execute(
                f"UPDATE collections SET {set_clause} WHERE id = ?", values  # noqa: S608
            )
    except sqlite3.IntegrityError as exc:
        raise ConflictError(f'A collection named "{updates.get("name")}" already exists') from exc

    logger.info("collection_updated", collection_id=collection_id, changed=sorted(changes))
    return get_collection(conn, collection_id)


def delete_collection(conn: sqlite3.Connection, collection_id: int) -> None:
    """Delete a collection and (via CASCADE) all of its entries.

    Raises:
        NotFoundError: If ``collection_id`` does not exist.
    """
    get_collection(conn, collection_id)
    with conn:
        conn.execute("DELETE FROM collections WHERE id = ?", (collection_id,))
    logger.info("collection_deleted", collection_id=collection_id)
