"""Environment-driven settings for operant.

Configuration should be explicit, validated, and environment-driven. All
knobs the execution core reads (log level and renderer, the format used for
untagged serialized payloads, the background dispatcher backend) live here
and are read from ``OPERANT_*`` environment variables or a ``.env`` file.

Examples:
    >>> from operant.core.settings import get_settings
    >>> get_settings().default_format
    'json'

Tags:
    settings, configuration, pydantic, environment, operant

Doc-Types:
    - API Reference
    - Configuration Guide
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class OperantSettings(BaseSettings):
    """Settings shared by the execution core, dispatcher and CLI.

    Fields
    ──────
    log_level          : Structlog log level
    log_format         : ``console`` for development, ``json`` for aggregation
    default_format     : Format used for bare ``str``/``bytes`` payloads
    dispatcher_backend : ``sync`` (inline) or ``thread`` (worker pool)
    max_workers        : Worker pool size for the ``thread`` backend
    retain_executions  : Finished executions a dispatcher remembers (0 keeps all)
    """

    model_config = SettingsConfigDict(
        env_prefix="OPERANT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Observability ────────────────────────────────────────────
    log_level: str = "INFO"
    log_format: Literal["console", "json"] = "console"

    # ── Contracts ────────────────────────────────────────────────
    default_format: str = "json"

    # ── Dispatch ─────────────────────────────────────────────────
    dispatcher_backend: str = "sync"
    max_workers: int = Field(default=4, ge=1, description="Thread backend pool size")
    retain_executions: int = Field(default=1000, ge=0, description="Finished executions kept per dispatcher")


@lru_cache(maxsize=1)
def get_settings() -> OperantSettings:
    """Return the process-wide settings, loading them on first use."""
    return OperantSettings()


def reset_settings() -> None:
    """Drop cached settings so the next ``get_settings()`` re-reads the environment."""
    get_settings.cache_clear()
