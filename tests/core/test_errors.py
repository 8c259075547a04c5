"""
Tests for operant.core.errors module.

Tests cover:
- Hierarchy and categories
- Fluent context and serialization
- ValidationError payload (errors, contract)
- Retry / category helpers
"""

import pytest

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
    categorize_error,
    is_retryable,
)


class TestHierarchy:
    """Every error is an OperantError with the right category."""

    @pytest.mark.parametrize(
        ("error", "base", "category"),
        [
            (ValidationError("bad"), OperantError, ErrorCategory.VALIDATION),
            (MalformedPayloadError("bad json"), ValidationError, ErrorCategory.PARSE),
            (MissingConfigError("models"), ConfigError, ErrorCategory.CONFIG),
            (InvalidConfigError("max_workers", 0), ConfigError, ErrorCategory.CONFIG),
            (UnknownFormatError("toml", ["json"]), ConfigError, ErrorCategory.CONFIG),
            (OperationNotFoundError("x"), OperationError, ErrorCategory.OPERATION),
            (ContractNotValidatedError("x"), OperationError, ErrorCategory.OPERATION),
            (RecordNotFoundError(7), StorageError, ErrorCategory.STORAGE),
        ],
    )
    def test_category_and_base(self, error, base, category):
        assert isinstance(error, base)
        assert isinstance(error, OperantError)
        assert error.category is category
        assert error.retryable is False

    def test_validation_failure_alias(self):
        assert ValidationFailure is ValidationError

    def test_base_defaults_to_internal(self):
        assert OperantError("boom").category is ErrorCategory.INTERNAL


class TestOperantError:
    def test_message_is_str(self):
        error = OperantError("Something went wrong")
        assert str(error) == "Something went wrong"
        assert error.message == "Something went wrong"

    def test_with_context_sets_typed_fields_and_metadata(self):
        error = OperationError("failed").with_context(operation="posts.create", store="memory")
        assert error.context.operation == "posts.create"
        assert error.context.metadata == {"store": "memory"}

    def test_with_context_returns_same_instance(self):
        error = OperationError("failed")
        assert error.with_context(format="json") is error

    def test_cause_is_chained(self):
        cause = ValueError("root")
        error = OperantError("wrapped", cause=cause)
        assert error.__cause__ is cause
        assert error.to_dict()["cause"] == "root"

    def test_to_dict(self):
        error = OperationNotFoundError("posts.create").with_context(invocation_id="abc")
        data = error.to_dict()
        assert data["error_type"] == "OperationNotFoundError"
        assert data["category"] == "OPERATION"
        assert data["retryable"] is False
        assert data["context"] == {"invocation_id": "abc"}

    def test_to_dict_omits_empty_context(self):
        assert "context" not in OperantError("x").to_dict()

    def test_error_context_to_dict(self):
        ctx = ErrorContext(operation="posts.create", format="json", metadata={"attempt": 2})
        assert ctx.to_dict() == {"operation": "posts.create", "format": "json", "attempt": 2}


class TestValidationError:
    def test_carries_errors_and_contract(self):
        sentinel = object()
        error = ValidationError("Body can't be blank", errors={"body": ["can't be blank"]}, contract=sentinel)
        assert error.errors == {"body": ["can't be blank"]}
        assert error.contract is sentinel
        assert error.to_dict()["errors"] == {"body": ["can't be blank"]}

    def test_errors_default_empty(self):
        assert ValidationError("x").errors == {}

    def test_malformed_reason(self):
        error = MalformedPayloadError("Malformed json payload: Expecting value", reason="Expecting value")
        assert error.reason == "Expecting value"
        assert MalformedPayloadError("plain").reason == "plain"


class TestSpecificErrors:
    def test_operation_not_found_stores_name(self):
        error = OperationNotFoundError("my.operation")
        assert error.operation_name == "my.operation"
        assert "my.operation" in str(error)

    def test_unknown_format_lists_available(self):
        error = UnknownFormatError("toml", ["json", "xml"])
        assert error.format_name == "toml"
        assert "json, xml" in str(error)

    def test_missing_config_key(self):
        error = MissingConfigError("models")
        assert error.key == "models"
        assert "models" in str(error)

    def test_invalid_config_value(self):
        error = InvalidConfigError("dispatcher_backend", "celery")
        assert error.value == "celery"
        assert "'celery'" in str(error)

    def test_record_not_found(self):
        assert RecordNotFoundError(42).identifier == 42


class TestHelpers:
    def test_is_retryable(self):
        assert is_retryable(OperantError("x", retryable=True))
        assert not is_retryable(ValidationError("x"))
        assert is_retryable(ConnectionError())
        assert not is_retryable(RuntimeError())

    def test_categorize_error(self):
        assert categorize_error(ValidationError("x")) is ErrorCategory.VALIDATION
        assert categorize_error(ValueError()) is ErrorCategory.VALIDATION
        assert categorize_error(KeyError("k")) is ErrorCategory.CONFIG
        assert categorize_error(RuntimeError()) is ErrorCategory.UNKNOWN
