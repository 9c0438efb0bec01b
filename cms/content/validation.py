"""Validation and coercion of entry data against a collection's field list."""

from __future__ import annotations

from typing import Any, Mapping, Sequence

from cms.content.fields import FieldDef, MISSING, is_blank, parse_field
from cms.errors import ErrorCollector, ValidationError


def validate_entry_data(
    fields: Sequence[Mapping[str, Any] | FieldDef],
    data: Any,
) -> dict[str, Any]:
    """Return the cleaned form of *data* for the given field definitions.

    Fields are processed in list order.  Blank optional values get the field's
    default (or ``False`` / ``""``), present values are checked and coerced by
    the field's type, and keys that no field names are dropped.

    Args:
        fields: Stored field definition dicts (or already parsed variants).
        data: The submitted ``{field_name: value}`` object.

    Returns:
        A new dict keyed by field name.

    Raises:
        ValidationError: ``"Validation failed"`` with every field-level problem
            found; nothing is returned when any field fails.
    """
    if not isinstance(data, Mapping):
        raise ValidationError("Entry data must be an object")

    errors = ErrorCollector()
    cleaned: dict[str, Any] = {}

    for definition in fields:
        spec = definition if isinstance(definition, FieldDef) else parse_field(definition)
        value = data.get(spec.name, MISSING)

        if is_blank(value):
            if spec.required:
                errors.add(spec.name, f"{spec.display_name} is required")
            elif spec.has_default:
                cleaned[spec.name] = spec.default
            else:
                cleaned[spec.name] = spec.empty_value()
            continue

        before = len(errors)
        result = spec.clean(value, errors)
        if len(errors) == before:
            cleaned[spec.name] = result

    errors.raise_if_any("Validation failed")
    return cleaned
