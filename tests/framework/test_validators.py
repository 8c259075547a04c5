"""Tests for operant.framework.contracts.validators."""

import re

import pytest

from operant.framework.contracts.validators import (
    Rule,
    exclusion,
    format,
    inclusion,
    is_blank,
    length,
    numericality,
    presence,
    satisfies,
)


class TestIsBlank:
    @pytest.mark.parametrize("value", [None, "", "   ", [], {}, ()])
    def test_blank(self, value):
        assert is_blank(value)

    @pytest.mark.parametrize("value", ["x", 0, False, [0], {"a": 1}])
    def test_not_blank(self, value):
        assert not is_blank(value)


class TestPresence:
    def test_blank_values(self):
        rule = presence()
        assert rule(None) == "can't be blank"
        assert rule("  ") == "can't be blank"
        assert rule("hello") is None

    def test_custom_message(self):
        assert presence("is required")(None) == "is required"


class TestNoneSkipping:
    @pytest.mark.parametrize(
        "rule",
        [length(minimum=1), format(r"\d+"), inclusion(["a"]), exclusion([None]), numericality(greater_than=0)],
    )
    def test_rules_skip_none(self, rule):
        assert rule(None) is None


class TestLength:
    def test_bounds(self):
        rule = length(minimum=2, maximum=4)
        assert rule("a") == "is too short (minimum is 2 characters)"
        assert rule("abcde") == "is too long (maximum is 4 characters)"
        assert rule("abc") is None

    def test_exactly(self):
        assert length(exactly=3)("ab") == "is the wrong length (should be 3 characters)"

    def test_unsized_value(self):
        assert length(maximum=3)(42) == "is invalid"

    def test_description(self):
        assert str(length(minimum=1, maximum=80)) == "length >=1 <=80"


class TestFormat:
    def test_fullmatch(self):
        rule = format(r"[a-z]+")
        assert rule("abc") is None
        assert rule("abc1") == "is invalid"

    def test_compiled_pattern_and_message(self):
        rule = format(re.compile(r"\d{4}"), message="must be a year")
        assert rule("20x4") == "must be a year"

    def test_non_string(self):
        assert format(r"\d+")(12) == "is invalid"


class TestInclusionExclusion:
    def test_inclusion(self):
        rule = inclusion(["draft", "published"])
        assert rule("draft") is None
        assert rule("archived") == "is not included in the list"

    def test_exclusion(self):
        rule = exclusion(["admin", "root"])
        assert rule("admin") == "is reserved"
        assert rule("alice") is None


class TestNumericality:
    def test_not_a_number(self):
        assert numericality()("5") == "is not a number"
        assert numericality()(True) == "is not a number"

    def test_bounds(self):
        rule = numericality(greater_than_or_equal_to=1, less_than_or_equal_to=5)
        assert rule(0) == "must be greater than or equal to 1"
        assert rule(6) == "must be less than or equal to 5"
        assert rule(3) is None

    def test_strict_bounds(self):
        assert numericality(greater_than=0)(0) == "must be greater than 0"
        assert numericality(less_than=10)(10) == "must be less than 10"

    def test_only_integer(self):
        rule = numericality(only_integer=True)
        assert rule(2.5) == "must be an integer"
        assert rule(2.0) is None


class TestSatisfies:
    def test_predicate(self):
        def even(value):
            return value % 2 == 0

        rule = satisfies(even, message="must be even")
        assert rule(3) == "must be even"
        assert rule(4) is None
        assert str(rule) == "even"

    def test_raising_predicate_reports_exception_text(self):
        def explode(value):
            raise ValueError("is not parseable")

        assert satisfies(explode)("x") == "is not parseable"


class TestRule:
    def test_custom_rule(self):
        rule = Rule("upper", lambda v: None if v.isupper() else "must be uppercase")
        assert rule("abc") == "must be uppercase"
        assert rule(None) is None
        assert str(rule) == "upper"
