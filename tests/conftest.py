"""
Shared pytest fixtures for operant tests.

This module provides:
- Registry, settings and logging-context cleanup for test isolation
- An in-memory Model Provider

Usage:
    Fixtures are auto-discovered by pytest.

    def test_create(store):
        post = store.find_or_new()
"""

import os

import pytest

from operant.core.models import MemoryStore
from operant.core.settings import reset_settings
from operant.framework.logging import clear_context
from operant.framework.registry import clear_registry


@pytest.fixture(autouse=True)
def clean_state(monkeypatch: pytest.MonkeyPatch):
    """Isolate every test from registry entries, cached settings and log context."""
    for key in list(os.environ):
        if key.startswith("OPERANT_"):
            monkeypatch.delenv(key, raising=False)
    reset_settings()
    clear_registry()
    clear_context()
    yield
    clear_registry()
    reset_settings()
    clear_context()


@pytest.fixture
def store() -> MemoryStore:
    """Fresh in-memory Model Provider."""
    return MemoryStore("test")
