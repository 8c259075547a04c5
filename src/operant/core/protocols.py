"""
Structural protocols for the collaborators the execution core consumes.

The core never owns persistence. A Backing Model is any object a Contract
can populate by attribute assignment; if it also exposes ``save()`` and
``errors`` the Contract delegates persistence to it. A Model Provider is
anything with ``find_or_new(identifier)``.

    protocols.py
    ├── BackingModel   - populated by Contracts, mutated by domain procedures
    └── ModelProvider  - constructs ("new") or locates ("found") models

Any store satisfying these shapes is acceptable; ``operant.core.models``
ships an in-memory pair for tests and examples.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class BackingModel(Protocol):
    """A persistable data holder."""

    def save(self) -> Any:
        """Persist the model's current state."""
        ...


@runtime_checkable
class ModelProvider(Protocol):
    """Builds or locates Backing Models for an invocation."""

    def find_or_new(self, identifier: Any = None) -> Any:
        """Return the stored model for *identifier*, or a new one when it is ``None``."""
        ...
