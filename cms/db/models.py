"""Dataclass models representing DB rows.

These are plain Python objects – not ORM models.  The DB layer serialises /
deserialises to and from these types.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Optional


@dataclass
class Collection:
    id: int
    name: str
    slug: str
    description: str
    fields: list[dict[str, Any]]
    created_at: int
    updated_at: int
    entry_count: Optional[int] = None

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        if self.entry_count is None:
            del data["entry_count"]
        return data

    def summary(self, *, description: bool = True) -> dict[str, Any]:
        """The collection block returned alongside entry payloads."""
        data: dict[str, Any] = {"id": self.id, "name": self.name, "slug": self.slug}
        if description:
            data["description"] = self.description
        data["fields"] = self.fields
        return data


@dataclass
class Entry:
    id: int
    collection_id: int
    data: dict[str, Any] = field(default_factory=dict)
    status: str = "draft"
    created_at: int = 0
    updated_at: int = 0

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
