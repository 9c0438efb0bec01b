"""Typed field definitions.

A collection stores its field list as plain JSON.  :func:`parse_field` turns
one of those dicts into a frozen dataclass for its ``type``; every variant
carries its own constraints and knows how to check and coerce a submitted
value via :meth:`FieldDef.clean`.

Adding a type means adding a subclass and registering it in ``FIELD_TYPES``.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, ClassVar, Mapping, Optional

from dateutil import parser as date_parser

from cms.errors import ErrorCollector

# Marker for "no default configured" (``None`` is a legitimate default).
MISSING: Any = object()

_ISO_DATE = re.compile(r"\d{4}-\d{2}-\d{2}")


def is_blank(value: Any) -> bool:
    """Return ``True`` for values that count as "not supplied"."""
    return value is None or value is MISSING or (isinstance(value, str) and value == "")


# ---------------------------------------------------------------------------
# Coercion helpers
# ---------------------------------------------------------------------------

def to_number(value: Any) -> Optional[int | float]:
    """Coerce *value* to a finite number, or return ``None`` if it is not one.

    Numeric strings are parsed (``"12"`` -> ``12``, ``"1.5"`` -> ``1.5``,
    ``"1e3"`` -> ``1000.0``) and booleans become ``0`` / ``1``.  Only decimal
    notation counts: hex, binary and octal literals (``"0x1F"``, ``"0b101"``,
    ``"0o17"``) are rejected, as are ``"Infinity"``, ``"NaN"`` and
    underscore-separated digits.
    """
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, (int, float)):
        return value if math.isfinite(value) else None
    if not isinstance(value, str):
        return None

    text = value.strip()
    if not text:
        return 0
    if "_" in text:
        return None
    try:
        return int(text)
    except ValueError:
        pass
    try:
        number = float(text)
    except ValueError:
        return None
    return number if math.isfinite(number) else None


def is_date_string(value: Any) -> bool:
    """``True`` if *value* is a string holding a calendar date or datetime.

    ISO-8601 strings are judged strictly (``"2025-13-01"`` is not a date).
    Anything else goes through :func:`dateutil.parser.parse`, which accepts
    forms like ``"January 15, 2025"``, ``"2025/01/15"`` and RFC 2822.
    """
    if not isinstance(value, str):
        return False
    candidate = value.strip()
    if not candidate:
        return False
    if _ISO_DATE.match(candidate):
        if candidate[-1:] in ("Z", "z"):
            candidate = candidate[:-1] + "+00:00"
        try:
            datetime.fromisoformat(candidate)
        except ValueError:
            return False
        return True
    try:
        date_parser.parse(candidate)
    except (ValueError, OverflowError):
        return False
    return True


# ---------------------------------------------------------------------------
# Variants
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class FieldDef:
    name: str
    label: Optional[str] = None
    required: bool = False
    default: Any = MISSING

    type_name: ClassVar[str] = ""

    @property
    def display_name(self) -> str:
        return self.label or self.name

    @property
    def has_default(self) -> bool:
        return self.default is not MISSING

    def empty_value(self) -> Any:
        """Value stored for an optional field left blank with no default."""
        return ""

    def clean(self, value: Any, errors: ErrorCollector) -> Any:
        """Validate a present *value*, recording problems on *errors*.

        Returns the coerced value.  When anything was recorded the return
        value is meaningless and the caller must not store it.
        """
        return value

    def _require_string(self, value: Any, errors: ErrorCollector) -> bool:
        if isinstance(value, str):
            return True
        errors.add(self.name, f"{self.display_name} must be a string")
        return False


@dataclass(frozen=True)
class StringField(FieldDef):
    max_length: Optional[int] = None

    type_name: ClassVar[str] = "string"

    def clean(self, value: Any, errors: ErrorCollector) -> Any:
        if not self._require_string(value, errors):
            return value
        if self.max_length and len(value) > self.max_length:
            errors.add(
                self.name,
                f"{self.display_name} must be at most {self.max_length} characters",
            )
        return value


@dataclass(frozen=True)
class TextField(FieldDef):
    type_name: ClassVar[str] = "text"

    def clean(self, value: Any, errors: ErrorCollector) -> Any:
        self._require_string(value, errors)
        return value


@dataclass(frozen=True)
class MarkdownField(TextField):
    type_name: ClassVar[str] = "markdown"


@dataclass(frozen=True)
class NumberField(FieldDef):
    min: Optional[int | float] = None
    max: Optional[int | float] = None

    type_name: ClassVar[str] = "number"

    def clean(self, value: Any, errors: ErrorCollector) -> Any:
        number = to_number(value)
        if number is None:
            errors.add(self.name, f"{self.display_name} must be a number")
            return value
        if self.min is not None and number < self.min:
            errors.add(self.name, f"{self.display_name} must be at least {self.min}")
        if self.max is not None and number > self.max:
            errors.add(self.name, f"{self.display_name} must be at most {self.max}")
        return number


@dataclass(frozen=True)
class BooleanField(FieldDef):
    type_name: ClassVar[str] = "boolean"

    def empty_value(self) -> Any:
        return False

    def clean(self, value: Any, errors: ErrorCollector) -> Any:
        return bool(value)


@dataclass(frozen=True)
class SelectField(FieldDef):
    options: tuple[str, ...] = field(default_factory=tuple)

    type_name: ClassVar[str] = "select"

    def clean(self, value: Any, errors: ErrorCollector) -> Any:
        if not any(value == option and type(value) is type(option) for option in self.options):
            allowed = ", ".join(str(o) for o in self.options)
            errors.add(self.name, f"{self.display_name} must be one of: {allowed}")
        return value


@dataclass(frozen=True)
class DateField(FieldDef):
    type_name: ClassVar[str] = "date"

    def clean(self, value: Any, errors: ErrorCollector) -> Any:
        # Stored as submitted; parsing only proves it is a date.
        if not is_date_string(value):
            errors.add(self.name, f"{self.display_name} must be a valid date")
        return value


@dataclass(frozen=True)
class UnknownField(FieldDef):
    """Field whose ``type`` is not recognised; values pass through untouched."""

    raw_type: Any = None


FIELD_TYPES: dict[str, type[FieldDef]] = {
    cls.type_name: cls
    for cls in (
        StringField,
        TextField,
        NumberField,
        BooleanField,
        SelectField,
        DateField,
        MarkdownField,
    )
}


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------

def _limit(value: Any) -> Optional[int | float]:
    # Non-numeric limits in a stored definition are ignored.
    if value is None or isinstance(value, bool) or value == "":
        return None
    return to_number(value)


def parse_field(definition: Mapping[str, Any]) -> FieldDef:
    """Build the typed variant for one stored field definition dict."""
    common: dict[str, Any] = {
        "name": definition.get("name") or "",
        "label": definition.get("label") or None,
        "required": bool(definition.get("required", False)),
        "default": definition.get("default", MISSING),
    }
    field_type = definition.get("type")
    cls = FIELD_TYPES.get(field_type) if isinstance(field_type, str) else None

    if cls is StringField:
        return StringField(**common, max_length=_limit(definition.get("maxLength")))
    if cls is NumberField:
        return NumberField(
            **common,
            min=_limit(definition.get("min")),
            max=_limit(definition.get("max")),
        )
    if cls is SelectField:
        options = definition.get("options")
        return SelectField(
            **common,
            options=tuple(options) if isinstance(options, (list, tuple)) else (),
        )
    if cls is None:
        return UnknownField(**common, raw_type=field_type)
    return cls(**common)
