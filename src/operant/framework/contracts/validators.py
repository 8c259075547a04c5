"""Declarative validation rules for Contract properties.

Manifesto:
    Contracts must validate inputs before domain logic runs. Rules are
    small, named, reusable checks so every Contract reports failures with
    the same messages.

Each factory returns a :class:`Rule`. A rule inspects the value the
Contract wrote onto the Backing Model and returns an error message, or
``None`` when the value passes. Every rule except :func:`presence` skips
``None`` so optional properties only need ``presence()`` when required.

Tags:
    operant, contracts, validation, rules

Doc-Types:
    api-reference
"""

import re
from collections.abc import Callable, Collection
from dataclasses import dataclass
from typing import Any

__all__ = [
    "Rule",
    "presence",
    "length",
    "format",
    "inclusion",
    "exclusion",
    "numericality",
    "satisfies",
    "is_blank",
]


@dataclass(frozen=True)
class Rule:
    """A named check over one property value."""

    name: str
    check: Callable[[Any], str | None]
    description: str = ""
    skip_none: bool = True

    def __call__(self, value: Any) -> str | None:
        if value is None and self.skip_none:
            return None
        return self.check(value)

    def __str__(self) -> str:
        return self.description or self.name


def is_blank(value: Any) -> bool:
    """``None``, whitespace-only strings and empty collections are blank."""
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple, set, dict)):
        return not value
    return False


# =============================================================================
# Built-in Rules
# =============================================================================


def presence(message: str = "can't be blank") -> Rule:
    """Require a non-blank value."""
    return Rule(
        "presence",
        lambda value: message if is_blank(value) else None,
        description="required",
        skip_none=False,
    )


def length(
    minimum: int | None = None,
    maximum: int | None = None,
    exactly: int | None = None,
) -> Rule:
    """Bound the length of a string or collection."""

    def check(value: Any) -> str | None:
        try:
            size = len(value)
        except TypeError:
            return "is invalid"
        if exactly is not None and size != exactly:
            return f"is the wrong length (should be {exactly} characters)"
        if minimum is not None and size < minimum:
            return f"is too short (minimum is {minimum} characters)"
        if maximum is not None and size > maximum:
            return f"is too long (maximum is {maximum} characters)"
        return None

    bounds = []
    if exactly is not None:
        bounds.append(f"={exactly}")
    if minimum is not None:
        bounds.append(f">={minimum}")
    if maximum is not None:
        bounds.append(f"<={maximum}")
    return Rule("length", check, description=f"length {' '.join(bounds)}".strip())


def format(pattern: str | re.Pattern[str], message: str = "is invalid") -> Rule:  # noqa: A001
    """Require a string matching *pattern* (``re.fullmatch``)."""
    compiled = re.compile(pattern) if isinstance(pattern, str) else pattern

    def check(value: Any) -> str | None:
        if not isinstance(value, str) or compiled.fullmatch(value) is None:
            return message
        return None

    return Rule("format", check, description=f"matches {compiled.pattern}")


def inclusion(choices: Collection[Any], message: str = "is not included in the list") -> Rule:
    """Require the value to be one of *choices*."""
    allowed = tuple(choices)
    return Rule(
        "inclusion",
        lambda value: None if value in allowed else message,
        description=f"one of {', '.join(map(str, allowed))}",
    )


def exclusion(choices: Collection[Any], message: str = "is reserved") -> Rule:
    """Reject values in *choices*."""
    reserved = tuple(choices)
    return Rule(
        "exclusion",
        lambda value: message if value in reserved else None,
        description=f"not one of {', '.join(map(str, reserved))}",
    )


def numericality(
    greater_than: float | None = None,
    greater_than_or_equal_to: float | None = None,
    less_than: float | None = None,
    less_than_or_equal_to: float | None = None,
    only_integer: bool = False,
) -> Rule:
    """Bound a numeric value."""

    def check(value: Any) -> str | None:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return "is not a number"
        if only_integer and not (isinstance(value, int) or float(value).is_integer()):
            return "must be an integer"
        if greater_than is not None and not value > greater_than:
            return f"must be greater than {greater_than}"
        if greater_than_or_equal_to is not None and not value >= greater_than_or_equal_to:
            return f"must be greater than or equal to {greater_than_or_equal_to}"
        if less_than is not None and not value < less_than:
            return f"must be less than {less_than}"
        if less_than_or_equal_to is not None and not value <= less_than_or_equal_to:
            return f"must be less than or equal to {less_than_or_equal_to}"
        return None

    return Rule("numericality", check, description="numeric")


def satisfies(predicate: Callable[[Any], bool], message: str = "is invalid") -> Rule:
    """
    Wrap a custom predicate.

    A predicate that raises reports the exception text as the message.
    """

    def check(value: Any) -> str | None:
        try:
            return None if predicate(value) else message
        except Exception as e:
            return str(e) or message

    name = getattr(predicate, "__name__", "satisfies")
    return Rule("satisfies", check, description=name)
