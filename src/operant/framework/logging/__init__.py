"""
operant framework logging - structured, invocation-aware logging.

This module provides:
- Structured logging with structlog
- Invocation context propagation via contextvars
- Timing utilities for performance tracking
- Settings-based configuration

Usage:
    from operant.framework.logging import get_logger, configure_logging, log_step

    configure_logging()
    log = get_logger(__name__)

    with log_step("contract.validate", contract="PostContract"):
        contract.validate(payload)
"""

from operant.framework.logging.config import configure_logging, is_configured, is_debug_enabled
from operant.framework.logging.context import (
    LogContext,
    bind_context,
    clear_context,
    get_context,
    get_logger,
    new_invocation_id,
    push_context,
    set_context,
)
from operant.framework.logging.timing import StepTimer, log_step, timed_block

__all__ = [
    "configure_logging",
    "is_configured",
    "is_debug_enabled",
    "get_logger",
    "set_context",
    "clear_context",
    "get_context",
    "bind_context",
    "push_context",
    "new_invocation_id",
    "LogContext",
    "log_step",
    "timed_block",
    "StepTimer",
]
