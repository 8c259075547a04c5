"""
Logging context management using contextvars.

Invocation-aware context that automatically attaches to all log entries.
Context is propagated through the call stack without explicit parameter
passing, which is what makes nested Operations attributable: each
invocation pushes its own ``operation``/``parent_operation``/``depth`` and
restores the caller's context when it returns or raises.

Context lives in a ContextVar. Worker threads start from an empty context,
so background executions never inherit a submitter's invocation fields.
"""

import uuid
from contextvars import ContextVar, Token
from dataclasses import asdict, dataclass
from typing import Any

from operant.core.logging import get_logger

__all__ = [
    "LogContext",
    "get_context",
    "set_context",
    "bind_context",
    "clear_context",
    "push_context",
    "add_context_processor",
    "get_logger",
    "new_invocation_id",
]


def new_invocation_id() -> str:
    """Generate a short invocation ID (12 hex chars)."""
    return uuid.uuid4().hex[:12]


@dataclass
class LogContext:
    """
    Invocation context attached to all log entries.

    Invocation:
        invocation_id: Unique id of the current Operation invocation
        operation: Operation identifier currently executing
        parent_operation: Operation that invoked the current one (nesting)
        depth: Nesting depth (0 for a top-level invocation)
        contract: Contract type bound to the current invocation

    Dispatch:
        execution_id: Background execution record id
        backend: Dispatcher backend ("sync", "thread")

    Tracing (for nested timing blocks):
        span_id: Current span identifier
        parent_span_id: Parent span for nested steps
        step: Current step name
    """

    invocation_id: str | None = None
    operation: str | None = None
    parent_operation: str | None = None
    depth: int = 0
    contract: str | None = None

    execution_id: str | None = None
    backend: str | None = None

    span_id: str | None = None
    parent_span_id: str | None = None
    step: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Return non-None fields as dict (excludes depth=0 default)."""
        result = {}
        for k, v in asdict(self).items():
            if v is None:
                continue
            if k == "depth" and v == 0:
                continue
            result[k] = v
        return result

    def merge(self, **kwargs) -> "LogContext":
        """Create new context with merged values."""
        current = asdict(self)
        current.update({k: v for k, v in kwargs.items() if v is not None})
        return LogContext(**current)


_log_context: ContextVar[LogContext] = ContextVar("operant_log_context")  # noqa: B039


def get_context() -> LogContext:
    """Get the current log context."""
    return _log_context.get(LogContext())


def set_context(**kwargs) -> LogContext:
    """
    Set the current log context.

    This replaces the current context. Use bind_context() to add to existing.
    """
    ctx = LogContext(**kwargs)
    _log_context.set(ctx)
    return ctx


def bind_context(**kwargs) -> LogContext:
    """Merge values into the current context."""
    updated = get_context().merge(**kwargs)
    _log_context.set(updated)
    return updated


def clear_context() -> None:
    """Clear the current context (reset to empty)."""
    _log_context.set(LogContext())


class _ContextToken:
    """Token for restoring context after a scoped block."""

    def __init__(self, token: Token):
        self._token = token

    def restore(self) -> None:
        """Restore the previous context."""
        _log_context.reset(self._token)


def push_context(**kwargs) -> _ContextToken:
    """
    Push new context values, returning a token to restore later.

    Usage:
        token = push_context(step="populate")
        try:
            do_work()
        finally:
            token.restore()
    """
    updated = get_context().merge(**kwargs)
    return _ContextToken(_log_context.set(updated))


def add_context_processor(
    logger: Any,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """
    Structlog processor that adds invocation context to every log entry.

    Explicit event keys win over context keys.
    """
    for key, value in get_context().to_dict().items():
        if key not in event_dict:
            event_dict[key] = value
    return event_dict
