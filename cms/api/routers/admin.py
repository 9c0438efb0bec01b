"""Collection management endpoints.

Routes
------
GET    /collections         List all collections with their entry counts
GET    /collections/{id}    Fetch a single collection
POST   /collections         Create a collection (name, description, fields)
PUT    /collections/{id}    Partially update a collection
DELETE /collections/{id}    Delete a collection and all of its entries
"""

from __future__ import annotations

from typing import Any, Optional

from fastapi import APIRouter, Request, Response
from pydantic import BaseModel, ConfigDict, Field

from cms.api.deps import locked_db
from cms.db.collections import (
    create_collection,
    delete_collection,
    get_collection,
    list_collections,
    update_collection,
)

router = APIRouter()


# ---------------------------------------------------------------------------
# Pydantic schemas
# ---------------------------------------------------------------------------

class CollectionWrite(BaseModel):
    """Body for create and update.

    ``fields`` stays untyped so malformed lists reach the field-definition
    validator, which reports problems by list index.
    """

    model_config = ConfigDict(populate_by_name=True)

    name: Optional[str] = None
    description: Optional[str] = None
    field_list: Any = Field(default=None, alias="fields")

    def changes(self) -> dict[str, Any]:
        """Only the attributes present in the request body."""
        supplied = self.model_dump(exclude_unset=True)
        if "field_list" in supplied:
            supplied["fields"] = supplied.pop("field_list")
        return supplied


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.get("/collections")
def list_all(request: Request) -> dict[str, Any]:
    """Return all collections, newest first."""
    with locked_db(request) as conn:
        return {"data": [c.to_dict() for c in list_collections(conn)]}


@router.get("/collections/{collection_id}")
def get_one(collection_id: int, request: Request) -> dict[str, Any]:
    """Fetch a single collection by id."""
    with locked_db(request) as conn:
        return {"data": get_collection(conn, collection_id).to_dict()}


@router.post("/collections", status_code=201)
def create(body: CollectionWrite, request: Request) -> dict[str, Any]:
    """Create a collection after validating its field definitions."""
    with locked_db(request) as conn:
        collection = create_collection(
            conn,
            name=body.name,
            description=body.description,
            fields=body.field_list,
        )
    return {"data": collection.to_dict()}


@router.put("/collections/{collection_id}")
def update(collection_id: int, body: CollectionWrite, request: Request) -> dict[str, Any]:
    """Overwrite only the attributes supplied in the body."""
    with locked_db(request) as conn:
        collection = update_collection(conn, collection_id, **body.changes())
    return {"data": collection.to_dict()}


@router.delete("/collections/{collection_id}")
def remove(collection_id: int, request: Request) -> Response:
    """Delete a collection; its entries go with it."""
    with locked_db(request) as conn:
        delete_collection(conn, collection_id)
    return Response(status_code=204)
