"""
Payload format adapters.

A format adapter swaps only the deserialization strategy of a Contract: it
turns one raw payload shape into a plain ``dict`` that the Contract's schema
then populates from. The schema, coercion and rules are shared by every
format, so a keyed map and its JSON, XML or YAML rendition validate the
same way.

Built-in formats:
    mapping  - any ``Mapping`` (form / query parameters, already-decoded data)
    json     - JSON text with an object root
    xml      - XML text; the root element's children become keys
    yaml     - YAML text with a mapping root

Usage:
    from operant.framework.contracts.formats import Document, get_format

    get_format("json").decode('{"body": "hello"}')   # {'body': 'hello'}
    Document.xml("<post><body>hello</body></post>")   # tagged payload

Adapters raise ``MalformedPayloadError``; ``Contract.validate`` converts it
into a ``"base"`` validation error so callers never see it raised.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any, Protocol, runtime_checkable
from xml.etree import ElementTree as ET

import yaml

from operant.core.errors import MalformedPayloadError, UnknownFormatError
from operant.core.logging import get_logger

logger = get_logger(__name__)


class PayloadFormat(str, Enum):
    """Names of the built-in formats."""

    MAPPING = "mapping"
    JSON = "json"
    XML = "xml"
    YAML = "yaml"


@runtime_checkable
class FormatAdapter(Protocol):
    """Decodes one raw payload shape into a plain dict."""

    name: str

    def decode(self, raw: Any) -> dict[str, Any]:
        """Decode *raw*, raising ``MalformedPayloadError`` when it cannot be read."""
        ...


@dataclass(frozen=True, slots=True)
class Document:
    """A serialized payload tagged with its format."""

    text: str | bytes
    format: str

    @classmethod
    def json(cls, text: str | bytes) -> Document:
        return cls(text, PayloadFormat.JSON.value)

    @classmethod
    def xml(cls, text: str | bytes) -> Document:
        return cls(text, PayloadFormat.XML.value)

    @classmethod
    def yaml(cls, text: str | bytes) -> Document:
        return cls(text, PayloadFormat.YAML.value)


def _malformed(format_name: str, reason: str) -> MalformedPayloadError:
    error = MalformedPayloadError(f"Malformed {format_name} payload: {reason}", reason=reason)
    error.with_context(format=format_name)
    return error


def _text(raw: Any, format_name: str) -> str:
    if isinstance(raw, bytes):
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise _malformed(format_name, f"not valid UTF-8 ({e.reason})") from e
    if isinstance(raw, str):
        return raw
    raise _malformed(format_name, f"expected text, got {type(raw).__name__}")


def _unwrap(data: Any, root: str | None, format_name: str, kind: str) -> dict[str, Any]:
    if not isinstance(data, Mapping):
        raise _malformed(format_name, f"expected {kind}")
    if root is None:
        return dict(data)
    inner = data.get(root)
    if not isinstance(inner, Mapping):
        raise _malformed(format_name, f"expected {kind} under key {root!r}")
    return dict(inner)


# =============================================================================
# Built-in adapters
# =============================================================================


class MappingFormat:
    """Keyed maps (form parameters, query strings, decoded dicts)."""

    name = PayloadFormat.MAPPING.value

    def decode(self, raw: Any) -> dict[str, Any]:
        if not isinstance(raw, Mapping):
            raise _malformed(self.name, f"expected a mapping, got {type(raw).__name__}")
        return dict(raw)


class JsonFormat:
    """JSON documents with an object root, optionally wrapped in *root*."""

    def __init__(self, root: str | None = None, name: str = PayloadFormat.JSON.value) -> None:
        self.root = root
        self.name = name

    def decode(self, raw: Any) -> dict[str, Any]:
        text = _text(raw, self.name)
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise _malformed(self.name, f"{e.msg} at line {e.lineno} column {e.colno}") from e
        return _unwrap(data, self.root, self.name, "a JSON object")


class YamlFormat:
    """YAML documents with a mapping root, loaded with ``safe_load``."""

    def __init__(self, root: str | None = None, name: str = PayloadFormat.YAML.value) -> None:
        self.root = root
        self.name = name

    def decode(self, raw: Any) -> dict[str, Any]:
        text = _text(raw, self.name)
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as e:
            reason = str(getattr(e, "problem", None) or e).strip()
            raise _malformed(self.name, reason) from e
        return _unwrap(data, self.root, self.name, "a YAML mapping")


class XmlFormat:
    """
    XML documents.

    The root element's children become keys. Leaf elements decode to their
    stripped text (``""`` when empty), elements with children decode to
    dicts, and repeated sibling tags decode to lists.
    """

    def __init__(self, root: str | None = None, name: str = PayloadFormat.XML.value) -> None:
        self.root = root
        self.name = name

    def decode(self, raw: Any) -> dict[str, Any]:
        if isinstance(raw, str):
            raw = raw.encode("utf-8")
        elif not isinstance(raw, bytes):
            raise _malformed(self.name, f"expected text, got {type(raw).__name__}")
        try:
            element = ET.fromstring(raw)
        except ET.ParseError as e:
            raise _malformed(self.name, str(e)) from e
        if self.root is not None and element.tag != self.root:
            raise _malformed(self.name, f"expected root element <{self.root}>, got <{element.tag}>")
        return self._children(element)

    def _children(self, element: ET.Element) -> dict[str, Any]:
        result: dict[str, Any] = {}
        for child in element:
            value = self._value(child)
            if child.tag in result:
                existing = result[child.tag]
                if isinstance(existing, list):
                    existing.append(value)
                else:
                    result[child.tag] = [existing, value]
            else:
                result[child.tag] = value
        return result

    def _value(self, element: ET.Element) -> Any:
        if len(element):
            return self._children(element)
        return (element.text or "").strip()


# =============================================================================
# Registry
# =============================================================================

_formats: dict[str, FormatAdapter] = {}


def register_format(adapter: FormatAdapter, *, replace: bool = False) -> FormatAdapter:
    """Register an adapter under its ``name``."""
    if adapter.name in _formats and not replace:
        raise ValueError(f"Format '{adapter.name}' is already registered")
    _formats[adapter.name] = adapter
    logger.debug("format_registered", name=adapter.name, cls=type(adapter).__name__)
    return adapter


def get_format(name: str | FormatAdapter) -> FormatAdapter:
    """Resolve a format name (or pass an adapter instance through)."""
    if not isinstance(name, str):
        if isinstance(name, FormatAdapter):
            return name
        raise UnknownFormatError(repr(name), list_formats())
    adapter = _formats.get(name.lower())
    if adapter is None:
        raise UnknownFormatError(name, list_formats())
    return adapter


def list_formats() -> list[str]:
    return sorted(_formats)


def unregister_format(name: str) -> None:
    """Remove a registered adapter (for testing)."""
    _formats.pop(name, None)


for _adapter in (MappingFormat(), JsonFormat(), XmlFormat(), YamlFormat()):
    register_format(_adapter)
