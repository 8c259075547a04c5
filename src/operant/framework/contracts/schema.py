"""Property schema for Contracts.

Manifesto:
    A Contract's schema is declared once and shared by every payload
    format. Declarative properties keep population, coercion and
    validation consistent and self-documenting.

Tags:
    operant, contracts, schema, coercion

Doc-Types:
    api-reference
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any

from operant.framework.contracts.validators import Rule

_TRUE = frozenset({"true", "t", "1", "yes", "y", "on"})
_FALSE = frozenset({"false", "f", "0", "no", "n", "off"})


class CoercionError(ValueError):
    """A payload value cannot be cast to the declared property type."""


@dataclass(frozen=True)
class Property:
    """Definition of a Contract property."""

    name: str
    type: Any = str
    rules: tuple[Rule, ...] = field(default_factory=tuple)
    default: Any = None
    description: str = ""
    key: str | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.rules, tuple):
            object.__setattr__(self, "rules", tuple(self.rules))

    @property
    def payload_key(self) -> str:
        """Key read from the decoded payload."""
        return self.key or self.name

    @property
    def required(self) -> bool:
        return any(rule.name == "presence" for rule in self.rules)

    def coerce(self, value: Any) -> Any:
        """Cast a decoded payload value to this property's type."""
        return coerce(value, self.type)

    def validate(self, value: Any) -> list[str]:
        """Run every rule, returning the error messages."""
        messages = []
        for rule in self.rules:
            message = rule(value)
            if message:
                messages.append(message)
        return messages


class Schema:
    """Ordered, immutable collection of Contract properties."""

    def __init__(
        self,
        properties: Iterable[Property] = (),
        description: str | None = None,
        examples: list[str] | None = None,
    ):
        props = tuple(properties)
        names = [p.name for p in props]
        duplicates = sorted({n for n in names if names.count(n) > 1})
        if duplicates:
            raise ValueError(f"Duplicate schema properties: {', '.join(duplicates)}")
        self._properties = props
        self._by_name = {p.name: p for p in props}
        self.description = description
        self.examples = list(examples or [])

    @property
    def properties(self) -> tuple[Property, ...]:
        return self._properties

    @property
    def names(self) -> list[str]:
        return [p.name for p in self._properties]

    def get(self, name: str) -> Property | None:
        return self._by_name.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._by_name

    def __iter__(self):
        return iter(self._properties)

    def __len__(self) -> int:
        return len(self._properties)

    def extend(self, *properties: Property) -> "Schema":
        """Return a new schema with extra properties appended."""
        return Schema(self._properties + properties, self.description, self.examples)

    def get_help_text(self) -> str:
        """Generate help text describing the schema."""
        lines = []

        if self.description:
            lines.append(self.description)
            lines.append("")

        required = [p for p in self._properties if p.required]
        optional = [p for p in self._properties if not p.required]

        if required:
            lines.append("Required Properties:")
            for prop in required:
                lines.append(_describe(prop))
            lines.append("")

        if optional:
            lines.append("Optional Properties:")
            for prop in optional:
                lines.append(_describe(prop))
            lines.append("")

        if self.examples:
            lines.append("Examples:")
            for example in self.examples:
                lines.append(f"  {example}")

        return "\n".join(lines).rstrip()


def _describe(prop: Property) -> str:
    type_name = getattr(prop.type, "__name__", str(prop.type))
    rules = ", ".join(str(r) for r in prop.rules if r.name != "presence")
    text = f"  {prop.name} ({type_name})"
    if prop.description:
        text += f": {prop.description}"
    if rules:
        text += f" [{rules}]"
    if prop.default is not None:
        text += f" [default: {prop.default}]"
    return text


# =============================================================================
# Coercion
# =============================================================================


def coerce(value: Any, type_: Any) -> Any:
    """
    Cast a decoded payload value to *type_*.

    Form parameters and XML text arrive as strings; JSON and YAML arrive
    typed. Casting both to the declared type is what makes equivalent
    payloads in different formats produce equal model state.

    Raises:
        CoercionError: with the user-facing message.
    """
    if value is None or type_ is Any or type_ is None:
        return value

    if type_ is str:
        if isinstance(value, str):
            return value
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, (int, float, date)):
            return value.isoformat() if isinstance(value, date) else str(value)
        raise CoercionError("is invalid")

    if type_ is bool:
        if isinstance(value, bool):
            return value
        if isinstance(value, int) and value in (0, 1):
            return bool(value)
        if isinstance(value, str):
            text = value.strip().lower()
            if not text:
                return None
            if text in _TRUE:
                return True
            if text in _FALSE:
                return False
        raise CoercionError("is not a boolean")

    if type_ is int:
        if isinstance(value, bool):
            raise CoercionError("is not a number")
        if isinstance(value, int):
            return value
        if isinstance(value, float):
            if value.is_integer():
                return int(value)
            raise CoercionError("is not an integer")
        if isinstance(value, str):
            text = value.strip()
            if not text:
                return None
            try:
                return int(text)
            except ValueError:
                pass
            try:
                number = float(text)
            except ValueError:
                raise CoercionError("is not a number") from None
            if number.is_integer():
                return int(number)
            raise CoercionError("is not an integer")
        raise CoercionError("is not a number")

    if type_ is float:
        if isinstance(value, bool):
            raise CoercionError("is not a number")
        if isinstance(value, (int, float)):
            return float(value)
        if isinstance(value, str):
            text = value.strip()
            if not text:
                return None
            try:
                return float(text)
            except ValueError:
                raise CoercionError("is not a number") from None
        raise CoercionError("is not a number")

    if type_ is date:
        if isinstance(value, datetime):
            return value.date()
        if isinstance(value, date):
            return value
        if isinstance(value, str):
            text = value.strip()
            if not text:
                return None
            try:
                return date.fromisoformat(text)
            except ValueError:
                raise CoercionError("is not a valid date") from None
        raise CoercionError("is not a valid date")

    # An empty XML element or form field decodes to "" and means an empty collection.
    if type_ is list:
        if isinstance(value, (list, tuple)):
            return list(value)
        if isinstance(value, Mapping):
            raise CoercionError("is invalid")
        if isinstance(value, str) and not value.strip():
            return []
        return [value]

    if type_ is dict:
        if isinstance(value, Mapping):
            return dict(value)
        if isinstance(value, str) and not value.strip():
            return {}
        raise CoercionError("is invalid")

    if isinstance(type_, type):
        if isinstance(value, type_):
            return value
        raise CoercionError("is invalid")

    return value
