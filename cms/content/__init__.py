"""Schema-driven content core: field types, validators and the list-query builder.

Public re-exports so callers can write::

    from cms.content import build_query, validate_entry_data
"""

from cms.content.query import BuiltQuery, build_query
from cms.content.schema import VALID_TYPES, validate_field_definitions
from cms.content.validation import validate_entry_data

__all__ = [
    "BuiltQuery",
    "VALID_TYPES",
    "build_query",
    "validate_entry_data",
    "validate_field_definitions",
]
