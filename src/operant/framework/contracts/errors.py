"""Field-keyed error set for Contracts."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from typing import Any

BASE = "base"


class Errors:
    """
    Insertion-ordered mapping of field name to error messages.

    Deserialization failures and rule failures share this one taxonomy;
    errors that belong to no single property are filed under ``"base"``.

    Examples:
        >>> errors = Errors()
        >>> errors.add("body", "can't be blank")
        >>> errors.to_dict()
        {'body': ["can't be blank"]}
        >>> errors.full_messages()
        ["Body can't be blank"]
    """

    __slots__ = ("_messages",)

    def __init__(self, messages: Mapping[str, list[str]] | None = None) -> None:
        self._messages: dict[str, list[str]] = {}
        for field_name, field_messages in (messages or {}).items():
            for message in field_messages:
                self.add(field_name, message)

    def add(self, field_name: str, message: str) -> None:
        bucket = self._messages.setdefault(field_name, [])
        if message not in bucket:
            bucket.append(message)

    def clear(self) -> None:
        self._messages.clear()

    def __getitem__(self, field_name: str) -> list[str]:
        return list(self._messages.get(field_name, []))

    def __contains__(self, field_name: object) -> bool:
        return field_name in self._messages

    def __iter__(self) -> Iterator[str]:
        return iter(self._messages)

    def __len__(self) -> int:
        return sum(len(messages) for messages in self._messages.values())

    def __bool__(self) -> bool:
        return bool(self._messages)

    def keys(self) -> list[str]:
        return list(self._messages)

    def items(self) -> list[tuple[str, list[str]]]:
        return [(k, list(v)) for k, v in self._messages.items()]

    def to_dict(self) -> dict[str, list[str]]:
        return {k: list(v) for k, v in self._messages.items()}

    def full_messages(self) -> list[str]:
        """Human-readable messages, prefixed with the humanized field name."""
        messages = []
        for field_name, field_messages in self._messages.items():
            for message in field_messages:
                if field_name == BASE:
                    messages.append(message[:1].upper() + message[1:])
                else:
                    messages.append(f"{_humanize(field_name)} {message}")
        return messages

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, Errors):
            return self._messages == other._messages
        if isinstance(other, Mapping):
            return self._messages == {k: list(v) for k, v in other.items()}
        return NotImplemented

    def __repr__(self) -> str:
        return f"Errors({self._messages!r})"


def _humanize(field_name: str) -> str:
    text = field_name.replace("_", " ").strip()
    return text[:1].upper() + text[1:]
