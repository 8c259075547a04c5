"""
operant core - primitives shared by the framework.

- errors: typed error hierarchy
- settings: environment-driven configuration
- protocols: Backing Model / Model Provider shapes
- models: in-memory Record and MemoryStore
"""

from operant.core.errors import (
    ConfigError,
    ContractNotValidatedError,
    ErrorCategory,
    ErrorContext,
    InvalidConfigError,
    MalformedPayloadError,
    MissingConfigError,
    OperantError,
    OperationError,
    OperationNotFoundError,
    RecordNotFoundError,
    StorageError,
    UnknownFormatError,
    ValidationError,
    ValidationFailure,
)
from operant.core.models import MemoryStore, Record
from operant.core.protocols import BackingModel, ModelProvider
from operant.core.settings import OperantSettings, get_settings, reset_settings

__all__ = [
    "ErrorCategory",
    "ErrorContext",
    "OperantError",
    "ValidationError",
    "ValidationFailure",
    "MalformedPayloadError",
    "ConfigError",
    "MissingConfigError",
    "InvalidConfigError",
    "UnknownFormatError",
    "OperationError",
    "OperationNotFoundError",
    "ContractNotValidatedError",
    "StorageError",
    "RecordNotFoundError",
    "Record",
    "MemoryStore",
    "BackingModel",
    "ModelProvider",
    "OperantSettings",
    "get_settings",
    "reset_settings",
]
