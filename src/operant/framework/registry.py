"""Operation registry for registering and discovering operations.

Manifesto:
    Background dispatchers and CLIs receive an operation *identifier*, not
    a live instance. A central registry maps identifiers to Operation
    declarations without import-time coupling.

Tags:
    operant, framework, registry, operation-discovery, lookup

Doc-Types:
    api-reference
"""

import importlib
from collections.abc import Callable, Iterable
from typing import TYPE_CHECKING

from operant.core.logging import get_logger

if TYPE_CHECKING:
    from operant.framework.operations import Operation

logger = get_logger(__name__)

# Written while modules are imported, read-only afterwards.
_registry: dict[str, type["Operation"]] = {}


def register_operation(name: str | None = None) -> Callable[[type["Operation"]], type["Operation"]]:
    """Decorator to register an operation class (defaults to its ``name`` attribute)."""

    def decorator(cls: type["Operation"]) -> type["Operation"]:
        key = name or cls.operation_name()
        if key in _registry:
            raise ValueError(f"Operation '{key}' is already registered")
        _registry[key] = cls
        logger.debug(
            "operation_registered",
            name=key,
            cls=cls.__name__,
            contract=cls.contract.__name__,
        )
        return cls

    return decorator


def get_operation(name: str) -> type["Operation"]:
    """Get an operation class by name."""
    if name not in _registry:
        available = ", ".join(sorted(_registry)) or "none"
        raise KeyError(f"Operation '{name}' not found. Available: {available}")
    return _registry[name]


def list_operations() -> list[str]:
    """List all registered operation names."""
    return sorted(_registry.keys())


def load_operations(modules: Iterable[str]) -> list[str]:
    """
    Import modules so their ``@register_operation`` decorators run.

    Returns:
        The registered names after loading.
    """
    for module in modules:
        importlib.import_module(module)
        logger.debug("operation_module_loaded", module=module)
    return list_operations()


def clear_registry() -> None:
    """Clear registry (for testing)."""
    _registry.clear()
