"""Tests for entry-data validation and coercion."""

from __future__ import annotations

from typing import Any

import pytest

from cms.content.fields import (
    BooleanField,
    NumberField,
    SelectField,
    StringField,
    UnknownField,
    is_date_string,
    parse_field,
    to_number,
)
from cms.content.validation import validate_entry_data
from cms.errors import ValidationError


def _errors(fields: list[dict[str, Any]], data: Any) -> list[dict[str, str]]:
    with pytest.raises(ValidationError) as exc_info:
        validate_entry_data(fields, data)
    assert exc_info.value.message == "Validation failed"
    return exc_info.value.details


# ---------------------------------------------------------------------------
# Field parsing
# ---------------------------------------------------------------------------

class TestParseField:
    def test_string_constraints(self) -> None:
        spec = parse_field({"name": "title", "type": "string", "maxLength": 10})
        assert isinstance(spec, StringField)
        assert spec.max_length == 10

    def test_number_bounds(self) -> None:
        spec = parse_field({"name": "price", "type": "number", "min": 0, "max": 5})
        assert isinstance(spec, NumberField)
        assert (spec.min, spec.max) == (0, 5)

    def test_select_options_become_tuple(self) -> None:
        spec = parse_field({"name": "c", "type": "select", "options": ["a", "b"]})
        assert isinstance(spec, SelectField)
        assert spec.options == ("a", "b")

    def test_unknown_type(self) -> None:
        spec = parse_field({"name": "x", "type": "geo"})
        assert isinstance(spec, UnknownField)
        assert spec.raw_type == "geo"

    def test_label_fallback(self) -> None:
        assert parse_field({"name": "x", "type": "text"}).display_name == "x"
        assert parse_field({"name": "x", "type": "text", "label": "Ex"}).display_name == "Ex"

    def test_boolean_empty_value(self) -> None:
        assert BooleanField(name="b").empty_value() is False


class TestCoercionHelpers:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [(5, 5), (2.5, 2.5), ("12", 12), (" 1.5 ", 1.5), (True, 1), ("1e3", 1000.0)],
    )
    def test_to_number_accepts(self, raw, expected) -> None:
        assert to_number(raw) == expected

    @pytest.mark.parametrize(
        "raw",
        ["abc", "1_000", "nan", "inf", "Infinity", "0x1F", "0b101", "0o17", [1], {"a": 1}, float("nan")],
    )
    def test_to_number_rejects(self, raw) -> None:
        assert to_number(raw) is None

    @pytest.mark.parametrize("raw", ["2025-01-15", "2025-01-15T10:30:00", "2025-01-15T10:30:00Z"])
    def test_dates_accepted(self, raw) -> None:
        assert is_date_string(raw)

    @pytest.mark.parametrize(
        "raw",
        ["January 15, 2025", "2025/01/15", "Wed, 15 Jan 2025 10:00:00 GMT"],
    )
    def test_non_iso_dates_accepted(self, raw) -> None:
        assert is_date_string(raw)
        fields = [{"name": "d", "type": "date"}]
        assert validate_entry_data(fields, {"d": raw}) == {"d": raw}

    @pytest.mark.parametrize("raw", ["tomorrow", "2025-13-01", "2025-02-30T10:00", "   ", 20250115, None])
    def test_dates_rejected(self, raw) -> None:
        assert not is_date_string(raw)


# ---------------------------------------------------------------------------
# Required / optional handling
# ---------------------------------------------------------------------------

class TestRequiredAndDefaults:
    @pytest.mark.parametrize("data", [{}, {"title": None}, {"title": ""}])
    def test_required_missing(self, data) -> None:
        fields = [{"name": "title", "type": "string", "required": True, "label": "Title"}]
        assert _errors(fields, data) == [{"field": "title", "message": "Title is required"}]

    def test_required_uses_name_without_label(self) -> None:
        fields = [{"name": "title", "type": "string", "required": True}]
        assert _errors(fields, {})[0]["message"] == "title is required"

    def test_boolean_defaults_to_false(self) -> None:
        assert validate_entry_data([{"name": "active", "type": "boolean"}], {}) == {"active": False}

    def test_other_types_default_to_empty_string(self) -> None:
        fields = [{"name": n, "type": t} for n, t in [("a", "string"), ("b", "number"), ("c", "date")]]
        assert validate_entry_data(fields, {}) == {"a": "", "b": "", "c": ""}

    def test_configured_default_wins(self) -> None:
        fields = [
            {"name": "in_stock", "type": "boolean", "default": True},
            {"name": "qty", "type": "number", "default": 1},
        ]
        assert validate_entry_data(fields, {"qty": ""}) == {"in_stock": True, "qty": 1}

    def test_false_and_zero_count_as_present(self) -> None:
        fields = [
            {"name": "flag", "type": "boolean", "required": True},
            {"name": "n", "type": "number", "required": True},
        ]
        assert validate_entry_data(fields, {"flag": False, "n": 0}) == {"flag": False, "n": 0}


# ---------------------------------------------------------------------------
# Type validation
# ---------------------------------------------------------------------------

class TestTypes:
    def test_string_max_length(self) -> None:
        fields = [{"name": "title", "type": "string", "required": True, "maxLength": 5}]
        assert _errors(fields, {"title": "toolong"}) == [
            {"field": "title", "message": "title must be at most 5 characters"}
        ]

    def test_string_within_limit(self) -> None:
        fields = [{"name": "title", "type": "string", "maxLength": 5}]
        assert validate_entry_data(fields, {"title": "short"}) == {"title": "short"}

    @pytest.mark.parametrize("field_type", ["string", "text", "markdown"])
    def test_strings_reject_other_types(self, field_type) -> None:
        fields = [{"name": "body", "type": field_type, "label": "Body"}]
        assert _errors(fields, {"body": 42}) == [{"field": "body", "message": "Body must be a string"}]

    def test_markdown_has_no_length_limit(self) -> None:
        body = "# Title\n\n" + "x" * 10_000
        assert validate_entry_data([{"name": "body", "type": "markdown"}], {"body": body}) == {"body": body}

    def test_number_coerced_from_string(self) -> None:
        assert validate_entry_data([{"name": "price", "type": "number"}], {"price": "19.5"}) == {
            "price": 19.5
        }

    def test_number_rejects_text(self) -> None:
        fields = [{"name": "price", "type": "number", "label": "Price"}]
        assert _errors(fields, {"price": "cheap"}) == [
            {"field": "price", "message": "Price must be a number"}
        ]

    def test_number_bounds(self) -> None:
        fields = [{"name": "n", "type": "number", "min": 1, "max": 10}]
        assert _errors(fields, {"n": 0}) == [{"field": "n", "message": "n must be at least 1"}]
        assert _errors(fields, {"n": "11"}) == [{"field": "n", "message": "n must be at most 10"}]
        assert validate_entry_data(fields, {"n": 10}) == {"n": 10}

    @pytest.mark.parametrize(("raw", "expected"), [(1, True), ("yes", True), (0, False), ("false", True)])
    def test_boolean_truthiness(self, raw, expected) -> None:
        assert validate_entry_data([{"name": "b", "type": "boolean"}], {"b": raw}) == {"b": expected}

    def test_select_exact_match(self) -> None:
        fields = [{"name": "c", "type": "select", "options": ["tech", "news"], "label": "Category"}]
        assert validate_entry_data(fields, {"c": "tech"}) == {"c": "tech"}
        assert _errors(fields, {"c": "Tech"}) == [
            {"field": "c", "message": "Category must be one of: tech, news"}
        ]

    def test_select_is_type_strict(self) -> None:
        fields = [{"name": "c", "type": "select", "options": ["1"]}]
        assert _errors(fields, {"c": 1})[0]["field"] == "c"

    def test_date_kept_verbatim(self) -> None:
        fields = [{"name": "d", "type": "date"}]
        assert validate_entry_data(fields, {"d": "2025-01-15"}) == {"d": "2025-01-15"}

    def test_date_rejects_garbage(self) -> None:
        fields = [{"name": "d", "type": "date", "label": "Publish Date"}]
        assert _errors(fields, {"d": "someday"}) == [
            {"field": "d", "message": "Publish Date must be a valid date"}
        ]

    def test_unknown_type_passes_through(self) -> None:
        value = {"lat": 1.0, "lng": 2.0}
        assert validate_entry_data([{"name": "loc", "type": "geo"}], {"loc": value}) == {"loc": value}


# ---------------------------------------------------------------------------
# Whole-object behaviour
# ---------------------------------------------------------------------------

BLOG_FIELDS = [
    {"name": "title", "type": "string", "required": True, "maxLength": 200},
    {"name": "category", "type": "select", "required": True, "options": ["tech", "news"]},
    {"name": "views", "type": "number", "min": 0},
    {"name": "featured", "type": "boolean"},
    {"name": "publish_date", "type": "date"},
]


class TestWholeObject:
    def test_unknown_keys_dropped(self) -> None:
        cleaned = validate_entry_data(BLOG_FIELDS, {"title": "Hi", "category": "tech", "extra": 1})
        assert "extra" not in cleaned
        assert list(cleaned) == ["title", "category", "views", "featured", "publish_date"]

    def test_errors_accumulate_across_fields(self) -> None:
        details = _errors(BLOG_FIELDS, {"category": "sports", "views": -1, "publish_date": "x"})
        assert [d["field"] for d in details] == ["title", "category", "views", "publish_date"]

    def test_input_not_mutated(self) -> None:
        data = {"title": "Hi", "category": "tech", "views": "3"}
        validate_entry_data(BLOG_FIELDS, data)
        assert data == {"title": "Hi", "category": "tech", "views": "3"}

    @pytest.mark.parametrize(
        "data",
        [
            {"title": "Hi", "category": "tech"},
            {"title": "Hi", "category": "news", "views": "12", "featured": 1, "publish_date": "2025-02-01"},
            {"title": "Hi", "category": "news", "views": 0, "featured": False, "publish_date": ""},
        ],
    )
    def test_cleaning_is_idempotent(self, data) -> None:
        cleaned = validate_entry_data(BLOG_FIELDS, data)
        assert validate_entry_data(BLOG_FIELDS, cleaned) == cleaned

    @pytest.mark.parametrize("data", [None, ["title"], "title=Hi"])
    def test_non_object_data(self, data) -> None:
        with pytest.raises(ValidationError, match="Entry data must be an object"):
            validate_entry_data(BLOG_FIELDS, data)

    def test_accepts_parsed_field_variants(self) -> None:
        fields = [parse_field(f) for f in BLOG_FIELDS]
        assert validate_entry_data(fields, {"title": "Hi", "category": "tech"})["title"] == "Hi"
