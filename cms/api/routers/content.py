"""Entry endpoints, addressed by collection slug.

Routes
------
GET    /{slug}          List entries (status, filter.<field>, sort, page, per_page)
GET    /{slug}/{id}     Fetch a single entry
POST   /{slug}          Create an entry (data, status)
PUT    /{slug}/{id}     Partially update an entry
DELETE /{slug}/{id}     Delete an entry
"""

from __future__ import annotations

from typing import Any, Optional

from fastapi import APIRouter, Request, Response
from pydantic import BaseModel

from cms.api.deps import locked_db
from cms.db.collections import get_collection_by_slug
from cms.db.entries import (
    create_entry,
    delete_entry,
    get_entry,
    list_entries,
    update_entry,
)

router = APIRouter()


# ---------------------------------------------------------------------------
# Pydantic schemas
# ---------------------------------------------------------------------------

class EntryWrite(BaseModel):
    # Untyped so non-object data gets the validator's error, not a 422.
    data: Any = None
    status: Optional[str] = None


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.get("/{slug}")
def list_all(slug: str, request: Request) -> dict[str, Any]:
    """Return one page of entries together with the collection's schema."""
    with locked_db(request) as conn:
        collection = get_collection_by_slug(conn, slug)
        result = list_entries(conn, collection, dict(request.query_params))
    return {
        "collection": collection.summary(),
        "data": [e.to_dict() for e in result["data"]],
        "pagination": result["pagination"],
    }


@router.get("/{slug}/{entry_id}")
def get_one(slug: str, entry_id: int, request: Request) -> dict[str, Any]:
    """Fetch a single entry of the collection."""
    with locked_db(request) as conn:
        collection = get_collection_by_slug(conn, slug)
        entry = get_entry(conn, collection, entry_id)
    return {
        "collection": collection.summary(description=False),
        "data": entry.to_dict(),
    }


@router.post("/{slug}", status_code=201)
def create(slug: str, body: EntryWrite, request: Request) -> dict[str, Any]:
    """Validate and store a new entry."""
    with locked_db(request) as conn:
        collection = get_collection_by_slug(conn, slug)
        entry = create_entry(conn, collection, data=body.data, status=body.status)
    return {"data": entry.to_dict()}


@router.put("/{slug}/{entry_id}")
def update(slug: str, entry_id: int, body: EntryWrite, request: Request) -> dict[str, Any]:
    """Overwrite ``data`` and/or ``status`` when supplied."""
    with locked_db(request) as conn:
        collection = get_collection_by_slug(conn, slug)
        entry = update_entry(conn, collection, entry_id, **body.model_dump(exclude_unset=True))
    return {"data": entry.to_dict()}


@router.delete("/{slug}/{entry_id}")
def remove(slug: str, entry_id: int, request: Request) -> Response:
    """Delete a single entry."""
    with locked_db(request) as conn:
        collection = get_collection_by_slug(conn, slug)
        delete_entry(conn, collection, entry_id)
    return Response(status_code=204)
