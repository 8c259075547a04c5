"""
Structured error types for operant.

Every error raised by the execution core carries a category, an explicit
retry flag, structured context and an optional chained cause, so callers
(controllers, background dispatchers, CLIs) can branch on the *kind* of
failure without parsing messages.

Manifesto:
    - **Typed Error Hierarchy:** Validation, configuration and operation
      failures are distinct types
    - **Explicit Retry Semantics:** Each error knows if it's retryable
    - **Rich Context:** Errors carry metadata for logging
    - **Error Chaining:** Preserve original exceptions while adding context

Architecture:
    ::

        ┌──────────────────────────────────────────────────────────────┐
        │                        OperantError                           │
        │  (category, retryable, retry_after, context, cause)          │
        ├──────────────────────────────────────────────────────────────┤
        │                                                               │
        │  ValidationError          ConfigError        OperationError   │
        │  (VALIDATION)             (CONFIG)           (OPERATION)      │
        │       │                        │                   │          │
        │  MalformedPayloadError    MissingConfigError  OperationNotFound│
        │  (PARSE, never escapes    InvalidConfigError  ContractNot-     │
        │   Contract.validate)      UnknownFormatError  ValidatedError   │
        │                                                               │
        │  StorageError (STORAGE) ── RecordNotFoundError                │
        └──────────────────────────────────────────────────────────────┘

Examples:
    >>> error = ValidationError("Body can't be blank", errors={"body": ["can't be blank"]})
    >>> error.errors
    {'body': ["can't be blank"]}
    >>> error.retryable
    False

Tags:
    error-handling, exception-hierarchy, operant, validation

Doc-Types:
    - API Reference
    - Error Handling Guide
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from operant.framework.contracts.base import Contract


class ErrorCategory(str, Enum):
    """
    Standard error categories for classification and routing.

    Attributes:
        VALIDATION: Payload failed declared schema rules
        PARSE: Payload could not be deserialized
        CONFIG: Missing or invalid settings
        OPERATION: Operation lookup or lifecycle failures
        STORAGE: Backing model persistence failures
        INTERNAL: Bugs, unexpected state
        UNKNOWN: Uncategorized errors
    """

    VALIDATION = "VALIDATION"
    PARSE = "PARSE"
    CONFIG = "CONFIG"
    OPERATION = "OPERATION"
    STORAGE = "STORAGE"
    INTERNAL = "INTERNAL"
    UNKNOWN = "UNKNOWN"


@dataclass
class ErrorContext:
    """
    Structured metadata context for errors.

    Typed fields cover the invocation (operation, contract, invocation and
    execution ids, format); anything else goes into ``metadata``.
    ``to_dict()`` serializes only the fields that were set.

    Examples:
        >>> ctx = ErrorContext(operation="posts.create", format="json")
        >>> ctx.to_dict()
        {'operation': 'posts.create', 'format': 'json'}
    """

    operation: str | None = None
    contract: str | None = None
    invocation_id: str | None = None
    execution_id: str | None = None
    format: str | None = None

    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        result = {}
        for key in ["operation", "contract", "invocation_id", "execution_id", "format"]:
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        if self.metadata:
            result.update(self.metadata)
        return result


class OperantError(Exception):
    """
    Base exception for all operant errors.

    Subclasses set ``default_category`` and ``default_retryable`` so the
    common case needs only a message.

    Examples:
        >>> error = OperantError("Something went wrong")
        >>> error.category
        <ErrorCategory.INTERNAL: 'INTERNAL'>
        >>> error.with_context(operation="posts.create").context.operation
        'posts.create'
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL
    default_retryable: bool = False

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        retryable: bool | None = None,
        retry_after: int | None = None,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.retryable = retryable if retryable is not None else self.default_retryable
        self.retry_after = retry_after
        self.context = context or ErrorContext()
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **kwargs: Any) -> OperantError:
        """
        Add context to this error (fluent API).

        Usage:
            raise OperationError("Failed").with_context(operation="posts.create")
        """
        for key, value in kwargs.items():
            if hasattr(self.context, key):
                setattr(self.context, key, value)
            else:
                self.context.metadata[key] = value
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        result = {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.value,
            "retryable": self.retryable,
        }
        if self.retry_after is not None:
            result["retry_after"] = self.retry_after
        if self.context:
            context_dict = self.context.to_dict()
            if context_dict:
                result["context"] = context_dict
        if self.cause is not None:
            result["cause"] = str(self.cause)
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, category={self.category.value})"


# =============================================================================
# VALIDATION ERRORS
# =============================================================================


class ValidationError(OperantError):
    """
    Input failed declared validation.

    Raised by the call protocol when the Contract ends an invocation in an
    invalid state. Carries the field-keyed error set and the invalid Contract
    so the caller can inspect it exactly as the flow protocol would have
    returned it.

    Never retryable - the input must be fixed.
    """

    default_category = ErrorCategory.VALIDATION
    default_retryable = False

    def __init__(
        self,
        message: str,
        *,
        errors: dict[str, list[str]] | None = None,
        contract: Contract | None = None,
        **kwargs: Any,
    ):
        super().__init__(message, **kwargs)
        self.errors = errors or {}
        self.contract = contract

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        if self.errors:
            result["errors"] = self.errors
        return result


# The name used for the error kind in the call protocol.
ValidationFailure = ValidationError


class MalformedPayloadError(ValidationError):
    """
    Payload could not be deserialized.

    Raised by format adapters and converted by ``Contract.validate`` into a
    ``"base"`` entry of the error set; it never reaches callers.
    """

    default_category = ErrorCategory.PARSE

    def __init__(self, message: str, *, reason: str | None = None, **kwargs: Any):
        super().__init__(message, **kwargs)
        self.reason = reason or message


# =============================================================================
# CONFIGURATION ERRORS
# =============================================================================


class ConfigError(OperantError):
    """
    Configuration error.

    Never retryable - configuration must be fixed.
    """

    default_category = ErrorCategory.CONFIG
    default_retryable = False


class MissingConfigError(ConfigError):
    """Required configuration is missing."""

    def __init__(self, key: str, message: str | None = None):
        self.key = key
        super().__init__(message or f"Missing required configuration: {key}")


class InvalidConfigError(ConfigError):
    """Configuration value is invalid."""

    def __init__(self, key: str, value: Any, message: str | None = None):
        self.key = key
        self.value = value
        super().__init__(message or f"Invalid configuration for {key}: {value!r}")


class UnknownFormatError(ConfigError):
    """No format adapter is registered under the requested name."""

    def __init__(self, name: str, available: list[str] | None = None):
        self.format_name = name
        self.available = available or []
        listing = ", ".join(self.available) or "none"
        super().__init__(f"Unknown payload format: {name!r} (available: {listing})")


# =============================================================================
# OPERATION ERRORS
# =============================================================================


class OperationError(OperantError):
    """Operation lookup or lifecycle error."""

    default_category = ErrorCategory.OPERATION
    default_retryable = False


class OperationNotFoundError(OperationError):
    """Operation not found in registry."""

    def __init__(self, name: str):
        self.operation_name = name
        super().__init__(f"Operation not found: {name}")


class ContractNotValidatedError(OperationError):
    """The domain procedure finished without building a Contract."""

    def __init__(self, name: str):
        self.operation_name = name
        super().__init__(f"Operation {name} returned without building a contract")


# =============================================================================
# STORAGE ERRORS
# =============================================================================


class StorageError(OperantError):
    """Backing model persistence error."""

    default_category = ErrorCategory.STORAGE
    default_retryable = False


class RecordNotFoundError(StorageError):
    """No stored model matches the identifier."""

    def __init__(self, identifier: Any):
        self.identifier = identifier
        super().__init__(f"Record not found: {identifier!r}")


# =============================================================================
# UTILITY FUNCTIONS
# =============================================================================


def is_retryable(error: Exception) -> bool:
    """Check if an error is retryable."""
    if isinstance(error, OperantError):
        return error.retryable
    retryable_types = (
        ConnectionError,
        BrokenPipeError,
        TimeoutError,
    )
    return isinstance(error, retryable_types)


def categorize_error(error: Exception) -> ErrorCategory:
    """Get the category of an error."""
    if isinstance(error, OperantError):
        return error.category
    if isinstance(error, ValueError):
        return ErrorCategory.VALIDATION
    if isinstance(error, (KeyError, AttributeError)):
        return ErrorCategory.CONFIG
    return ErrorCategory.UNKNOWN


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
    "is_retryable",
    "categorize_error",
]
