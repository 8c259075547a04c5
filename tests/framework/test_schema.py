"""
Tests for operant.framework.contracts.schema.

Tests cover:
- Property definition (payload key, required)
- Schema collection and help text
- Coercion of decoded values to declared types
"""

from datetime import date, datetime
from typing import Any

import pytest

from operant.framework.contracts.schema import CoercionError, Property, Schema, coerce
from operant.framework.contracts.validators import length, presence


class TestProperty:
    def test_defaults(self):
        prop = Property("body")
        assert prop.type is str
        assert prop.rules == ()
        assert prop.payload_key == "body"
        assert not prop.required

    def test_rules_list_becomes_tuple(self):
        prop = Property("body", rules=[presence()])
        assert isinstance(prop.rules, tuple)
        assert prop.required

    def test_payload_key_override(self):
        assert Property("published_on", date, key="publishedOn").payload_key == "publishedOn"

    def test_validate_collects_messages(self):
        prop = Property("title", rules=[presence(), length(minimum=3)])
        assert prop.validate("") == ["can't be blank", "is too short (minimum is 3 characters)"]
        assert prop.validate("Hello") == []


class TestSchema:
    def test_order_and_lookup(self):
        schema = Schema([Property("title"), Property("body")])
        assert schema.names == ["title", "body"]
        assert "body" in schema
        assert "missing" not in schema
        assert schema.get("title").name == "title"
        assert schema.get("missing") is None
        assert len(schema) == 2

    def test_duplicate_names_rejected(self):
        with pytest.raises(ValueError, match="body"):
            Schema([Property("body"), Property("body", int)])

    def test_extend_returns_new_schema(self):
        base = Schema([Property("body")])
        extended = base.extend(Property("title"))
        assert base.names == ["body"]
        assert extended.names == ["body", "title"]

    def test_help_text(self):
        schema = Schema(
            [
                Property("body", str, rules=[presence()], description="Post text"),
                Property("rating", int, default=3),
            ],
            description="A blog post.",
            examples=["operant run posts.create -d '{\"body\": \"hi\"}'"],
        )
        text = schema.get_help_text()
        assert text.startswith("A blog post.")
        assert "Required Properties:\n  body (str): Post text" in text
        assert "Optional Properties:\n  rating (int) [default: 3]" in text
        assert "Examples:" in text

    def test_empty_help_text(self):
        assert Schema().get_help_text() == ""


class TestCoerce:
    @pytest.mark.parametrize(
        ("value", "type_", "expected"),
        [
            ("hello", str, "hello"),
            (5, str, "5"),
            (True, str, "true"),
            ("5", int, 5),
            (" 7 ", int, 7),
            ("5.0", int, 5),
            (5.0, int, 5),
            ("2.5", float, 2.5),
            (3, float, 3.0),
            ("yes", bool, True),
            ("off", bool, False),
            (1, bool, True),
            ("2024-03-01", date, date(2024, 3, 1)),
            (datetime(2024, 3, 1, 12, 0), date, date(2024, 3, 1)),
            ("a", list, ["a"]),
            (("a", "b"), list, ["a", "b"]),
            ({"k": 1}, dict, {"k": 1}),
            ({"anything": [1]}, Any, {"anything": [1]}),
        ],
    )
    def test_casts(self, value, type_, expected):
        assert coerce(value, type_) == expected

    @pytest.mark.parametrize("type_", [int, float, bool, date])
    def test_empty_string_is_none_for_scalars(self, type_):
        assert coerce("", type_) is None

    def test_empty_string_stays_for_str(self):
        assert coerce("", str) == ""

    @pytest.mark.parametrize(("type_", "expected"), [(list, []), (dict, {})])
    def test_blank_string_is_empty_collection(self, type_, expected):
        assert coerce("", type_) == expected
        assert coerce("  ", type_) == expected

    def test_none_passes_through(self):
        assert coerce(None, int) is None

    @pytest.mark.parametrize(
        ("value", "type_", "message"),
        [
            ("abc", int, "is not a number"),
            ("1.5", int, "is not an integer"),
            (1.5, int, "is not an integer"),
            (True, int, "is not a number"),
            ("abc", float, "is not a number"),
            ("maybe", bool, "is not a boolean"),
            (2, bool, "is not a boolean"),
            ("03/01/2024", date, "is not a valid date"),
            ({"a": 1}, list, "is invalid"),
            ("text", dict, "is invalid"),
            (["a"], str, "is invalid"),
        ],
    )
    def test_failures(self, value, type_, message):
        with pytest.raises(CoercionError, match=message):
            coerce(value, type_)

    def test_coercion_error_is_value_error(self):
        assert issubclass(CoercionError, ValueError)
