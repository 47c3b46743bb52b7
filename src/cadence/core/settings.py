"""Scheduler settings.

``SchedulerSettings`` collects the knobs that change how the run loop
behaves and how it reports, read from ``CADENCE_*`` environment variables or
a ``.env`` file.

Examples:
    >>> from cadence.core.settings import SchedulerSettings
    >>> SchedulerSettings(raise_on_empty=True).raise_on_empty
    True

    Environment override::

        CADENCE_LOG_LEVEL=DEBUG CADENCE_RAISE_ON_EMPTY=true cadence run --job tick=100
"""

from __future__ import annotations

import logging

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class SchedulerSettings(BaseSettings):
    """Settings for a ``Scheduler`` and the CLI that drives it.

    Fields
    ──────
    log_level        : Structlog log level
    json_logs        : JSON log output; ``None`` auto-detects from the tty
    raise_on_empty   : Raise ``EmptyRegistryError`` instead of returning when
                       the registry is empty at selection time
    warn_on_overrun  : Log a warning when a job is selected past its due time
    """

    model_config = SettingsConfigDict(
        env_prefix="CADENCE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Observability ────────────────────────────────────────────
    log_level: str = "INFO"
    json_logs: bool | None = None

    # ── Run loop ─────────────────────────────────────────────────
    raise_on_empty: bool = Field(
        default=False,
        description="Raise EmptyRegistryError when no job is left to select",
    )
    warn_on_overrun: bool = True

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        level = value.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"unknown log level {value!r}")
        return level
