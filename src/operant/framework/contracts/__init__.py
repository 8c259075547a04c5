"""
Contracts - schema-driven validation and deserialization.

Use:
    from operant.framework.contracts import Contract, Schema, Property, presence
"""

from operant.framework.contracts.base import Contract
from operant.framework.contracts.errors import BASE, Errors
from operant.framework.contracts.formats import (
    Document,
    FormatAdapter,
    JsonFormat,
    MappingFormat,
    PayloadFormat,
    XmlFormat,
    YamlFormat,
    get_format,
    list_formats,
    register_format,
)
from operant.framework.contracts.schema import Property, Schema
from operant.framework.contracts.validators import (
    Rule,
    exclusion,
    format,
    inclusion,
    length,
    numericality,
    presence,
    satisfies,
)

__all__ = [
    "Contract",
    "Errors",
    "BASE",
    "Property",
    "Schema",
    "Rule",
    "presence",
    "length",
    "format",
    "inclusion",
    "exclusion",
    "numericality",
    "satisfies",
    "Document",
    "FormatAdapter",
    "PayloadFormat",
    "MappingFormat",
    "JsonFormat",
    "XmlFormat",
    "YamlFormat",
    "register_format",
    "get_format",
    "list_formats",
]
