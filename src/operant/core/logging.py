"""
Logger access for core primitives.

Core modules only need a logger; configuration (processors, renderers,
context propagation) lives in ``operant.framework.logging`` and is applied
once at application startup.

    >>> from operant.core.logging import get_logger
    >>> logger = get_logger(__name__)
    >>> logger.info("event_happened", key="value")
"""

from typing import Any

import structlog


def get_logger(name: str | None = None) -> Any:
    """Get a structured logger.

    Args:
        name: Logger name (usually __name__)

    Returns:
        structlog BoundLogger
    """
    return structlog.get_logger(name)
