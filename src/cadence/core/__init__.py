"""Core primitives: errors, logging, settings and the scheduler."""

from cadence.core.errors import (
    CadenceError,
    ClockError,
    ConfigError,
    EmptyRegistryError,
    ErrorCategory,
    ErrorContext,
    InvalidIntervalError,
    JobNotCurrentError,
    SchedulerError,
    UnknownHandleError,
)
from cadence.core.scheduling import (
    JobHandle,
    JobRegistry,
    ManualTimeSource,
    MonotonicTimeSource,
    Scheduler,
    SchedulerState,
    TimeSource,
    create_scheduler,
)
from cadence.core.settings import SchedulerSettings

__all__ = [
    "CadenceError",
    "ClockError",
    "ConfigError",
    "EmptyRegistryError",
    "ErrorCategory",
    "ErrorContext",
    "InvalidIntervalError",
    "JobNotCurrentError",
    "SchedulerError",
    "UnknownHandleError",
    "JobHandle",
    "JobRegistry",
    "ManualTimeSource",
    "MonotonicTimeSource",
    "Scheduler",
    "SchedulerState",
    "TimeSource",
    "create_scheduler",
    "SchedulerSettings",
]
