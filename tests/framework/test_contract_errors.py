"""Tests for the field-keyed Errors set."""

from operant.framework.contracts.errors import BASE, Errors


class TestErrors:
    def test_empty(self):
        errors = Errors()
        assert not errors
        assert len(errors) == 0
        assert errors["body"] == []
        assert errors.to_dict() == {}

    def test_add_keeps_order_and_deduplicates(self):
        errors = Errors()
        errors.add("title", "is too short (minimum is 3 characters)")
        errors.add("body", "can't be blank")
        errors.add("body", "can't be blank")
        assert errors.keys() == ["title", "body"]
        assert errors["body"] == ["can't be blank"]
        assert len(errors) == 2
        assert "body" in errors

    def test_item_access_returns_copy(self):
        errors = Errors({"body": ["can't be blank"]})
        errors["body"].append("mutated")
        assert errors["body"] == ["can't be blank"]

    def test_clear(self):
        errors = Errors({"body": ["can't be blank"]})
        errors.clear()
        assert not errors

    def test_equality(self):
        errors = Errors({"body": ["can't be blank"]})
        assert errors == {"body": ["can't be blank"]}
        assert errors == Errors({"body": ["can't be blank"]})
        assert errors != {"body": ["is invalid"]}

    def test_full_messages(self):
        errors = Errors()
        errors.add("published_on", "is not a valid date")
        errors.add(BASE, "payload is malformed (Expecting value)")
        assert errors.full_messages() == [
            "Published on is not a valid date",
            "Payload is malformed (Expecting value)",
        ]

    def test_items(self):
        errors = Errors({"body": ["can't be blank"]})
        assert errors.items() == [("body", ["can't be blank"])]
        assert list(errors) == ["body"]
