"""Validation of a collection's field-definition list."""

from __future__ import annotations

from typing import Any, Mapping

from cms.errors import ErrorCollector, ValidationError

VALID_TYPES: tuple[str, ...] = (
    "string",
    "text",
    "number",
    "boolean",
    "select",
    "date",
    "markdown",
)


def validate_field_definitions(fields: Any) -> None:
    """Check a proposed field list, reporting every problem at once.

    Raises:
        ValidationError: ``"Fields must be a list"`` (no details) when *fields*
            is not a list, otherwise ``"Invalid field definitions"`` with one
            detail per violation, in input order.
    """
    if not isinstance(fields, list):
        raise ValidationError("Fields must be a list")

    errors = ErrorCollector()
    seen: set[str] = set()

    for i, definition in enumerate(fields):
        if not isinstance(definition, Mapping):
            errors.add(f"fields[{i}]", "Field definition must be an object")
            continue

        name = definition.get("name")
        if not isinstance(name, str) or not name.strip():
            errors.add(f"fields[{i}].name", "Field name is required")
        elif name in seen:
            errors.add(f"fields[{i}].name", f'Duplicate field name "{name}"')
        else:
            seen.add(name)

        field_type = definition.get("type")
        if field_type not in VALID_TYPES:
            errors.add(
                f"fields[{i}].type",
                f"Invalid type. Must be one of: {', '.join(VALID_TYPES)}",
            )

        if field_type == "select":
            options = definition.get("options")
            if not isinstance(options, list) or not options:
                errors.add(
                    f"fields[{i}].options",
                    "Select fields must have at least one option",
                )

    errors.raise_if_any("Invalid field definitions")
