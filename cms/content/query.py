"""Translate list-query parameters into SQL fragments and bound values.

:func:`build_query` does no I/O.  The entry store splices its output into a
``COUNT(*)`` query and a page query that share the same predicates, so
``params`` is ordered exactly like the ``?`` placeholders in ``conditions``.
Entries are addressed through the table alias ``e``.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

from cms.errors import ErrorCollector

DEFAULT_PER_PAGE = 20
MAX_PER_PAGE = 100
SORTABLE_COLUMNS = ("created_at", "updated_at", "id", "status")
DEFAULT_ORDER = "ORDER BY e.created_at DESC, e.id DESC"

# Filter names are spliced into the JSON path literal, so they are held to a
# plain identifier shape.
_FILTER_NAME = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")
_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


@dataclass
class BuiltQuery:
    conditions: list[str] = field(default_factory=list)
    params: list[Any] = field(default_factory=list)
    order_clause: str = DEFAULT_ORDER
    limit: int = DEFAULT_PER_PAGE
    offset: int = 0
    current_page: int = 1

    @property
    def where_clause(self) -> str:
        """``"WHERE a AND b"``, or ``""`` when nothing filters the list."""
        if not self.conditions:
            return ""
        return "WHERE " + " AND ".join(self.conditions)


def parse_int(value: Any) -> Optional[int]:
    """Read a leading integer the way query strings are usually read.

    ``"2"`` -> 2, ``"3abc"`` -> 3, ``"1.9"`` -> 1, ``"abc"`` / ``None`` -> ``None``.
    """
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else None
    match = _LEADING_INT.match(str(value))
    return int(match.group(1)) if match else None


def build_order_clause(sort: Optional[str]) -> str:
    """``"-updated_at"`` sorts newest-updated first; unknown columns are ignored."""
    if not sort:
        return DEFAULT_ORDER
    descending = sort.startswith("-")
    column = sort[1:] if descending else sort
    if column not in SORTABLE_COLUMNS:
        return DEFAULT_ORDER
    direction = "DESC" if descending else "ASC"
    if column == "id":
        return f"ORDER BY e.id {direction}"
    return f"ORDER BY e.{column} {direction}, e.id {direction}"


def build_query(
    status: Optional[str] = None,
    filters: Optional[Mapping[str, Any]] = None,
    sort: Optional[str] = None,
    page: Any = None,
    per_page: Any = None,
) -> BuiltQuery:
    """Build predicates, ordering and paging for an entry list read.

    Args:
        status: Only keep entries with this status.
        filters: ``{field_name: value}`` equality filters on entry data.
            Values are bound as given, and from a query string that means
            TEXT.  ``json_extract`` yields INTEGER/REAL for number and boolean
            fields, so ``filter.price=129`` or ``filter.in_stock=true`` match
            nothing; filters are only useful on string-valued fields.
        sort: Column to sort by, ``-`` prefixed for descending.
        page: 1-based page number; anything below 1 or non-numeric means 1.
        per_page: Page size, default 20, clamped to ``[1, 100]``.

    Raises:
        ValidationError: A filter name is not a plain identifier.
    """
    query = BuiltQuery()

    if status:
        query.conditions.append("e.status = ?")
        query.params.append(status)

    if filters:
        errors = ErrorCollector()
        for name, value in filters.items():
            if not isinstance(name, str) or not _FILTER_NAME.fullmatch(name):
                errors.add(
                    f"filter.{name}",
                    "Filter field names may only contain letters, digits and underscores",
                )
                continue
            query.conditions.append(f"json_extract(e.data, '$.{name}') = ?")
            query.params.append(value)
        errors.raise_if_any("Invalid filter")

    query.order_clause = build_order_clause(sort)

    query.current_page = max(1, parse_int(page) or 1)
    size = parse_int(per_page)
    query.limit = min(MAX_PER_PAGE, max(1, DEFAULT_PER_PAGE if size is None else size))
    query.offset = (query.current_page - 1) * query.limit
    return query
