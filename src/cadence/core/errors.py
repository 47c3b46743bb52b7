"""
Structured error types for the cadence scheduler.

Every failure the scheduler reports is a ``CadenceError`` carrying a
category, structured context (which job, which slot, which interval) and an
optional chained cause. Errors are raised to the caller of the public
scheduler operations; nothing is swallowed.

Architecture:
    ::

        ┌─────────────────────────────────────────────────────────────────┐
        │                       CadenceError                               │
        │  (category, context, cause)                                      │
        ├─────────────────────────────────────────────────────────────────┤
        │                                                                  │
        │  SchedulerError (ORCHESTRATION)           ConfigError (CONFIG)   │
        │       │                                                          │
        │  EmptyRegistryError     UnknownHandleError                       │
        │  InvalidIntervalError   JobNotCurrentError                       │
        │  (VALIDATION)           ClockError                               │
        └─────────────────────────────────────────────────────────────────┘

Examples:
    >>> error = InvalidIntervalError(0)
    >>> error.category
    <ErrorCategory.VALIDATION: 'VALIDATION'>
    >>> error.to_dict()["interval"]
    0

    Adding context:

    >>> SchedulerError("stuck").with_context(job="draw_board").context.job
    'draw_board'

Guardrails:
    ❌ DON'T: Raise bare ValueError/KeyError from scheduler operations
    ✅ DO: Use the matching CadenceError subclass

    ❌ DON'T: Wrap exceptions raised by job actions
    ✅ DO: Let action faults propagate unchanged out of ``Scheduler.run()``
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """Standard error categories for classification and routing."""

    VALIDATION = "VALIDATION"  # Bad intervals, malformed job specs
    CONFIG = "CONFIG"  # Invalid settings
    ORCHESTRATION = "ORCHESTRATION"  # Scheduler state/protocol violations
    INTERNAL = "INTERNAL"  # Bugs, unexpected state
    UNKNOWN = "UNKNOWN"  # Uncategorized errors


@dataclass
class ErrorContext:
    """
    Structured metadata attached to an error.

    Only fields that are set appear in ``to_dict()``; anything that does not
    have a dedicated field goes into ``metadata``.

    Attributes:
        job: Name of the job involved
        slot: Registry slot of the job handle
        generation: Generation of the job handle
        interval: Interval (ms) that was requested or in effect
        state: Scheduler state when the error was raised
        metadata: Additional key-value pairs
    """

    job: str | None = None
    slot: int | None = None
    generation: int | None = None
    interval: Any = None
    state: str | None = None

    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        result = {}
        for key in ["job", "slot", "generation", "interval", "state"]:
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        if self.metadata:
            result.update(self.metadata)
        return result


class CadenceError(Exception):
    """
    Base exception for all cadence errors.

    Subclasses set ``default_category`` to classify themselves; callers may
    override it per instance.

    Examples:
        >>> error = CadenceError("Something went wrong")
        >>> error.category
        <ErrorCategory.INTERNAL: 'INTERNAL'>
        >>> error.to_dict()["error_type"]
        'CadenceError'
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.context = context or ErrorContext()
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **kwargs: Any) -> CadenceError:
        """
        Add context to this error (fluent API).

        Usage:
            raise SchedulerError("Failed").with_context(job="update_worm")
        """
        for key, value in kwargs.items():
            if hasattr(self.context, key) and key != "metadata":
                setattr(self.context, key, value)
            else:
                self.context.metadata[key] = value
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        result = {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.value,
        }

        context_dict = self.context.to_dict()
        if context_dict:
            result["context"] = context_dict

        if self.cause is not None:
            result["cause"] = str(self.cause)

        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, category={self.category.value})"


# =============================================================================
# CONFIGURATION ERRORS
# =============================================================================


class ConfigError(CadenceError):
    """Configuration error. The configuration must be fixed."""

    default_category = ErrorCategory.CONFIG


# =============================================================================
# SCHEDULER ERRORS
# =============================================================================


class SchedulerError(CadenceError):
    """Scheduler state or protocol error."""

    default_category = ErrorCategory.ORCHESTRATION


class EmptyRegistryError(SchedulerError):
    """The scheduler was asked to select a job but none are registered."""

    def __init__(self, message: str = "No jobs registered", **kwargs: Any):
        super().__init__(message, **kwargs)


class InvalidIntervalError(SchedulerError):
    """A job interval is not a positive integer number of milliseconds."""

    default_category = ErrorCategory.VALIDATION

    def __init__(self, interval: Any, message: str | None = None, **kwargs: Any):
        self.interval = interval
        super().__init__(
            message or f"Interval must be a positive integer (ms), got {interval!r}",
            **kwargs,
        )
        self.context.interval = interval

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result["interval"] = self.interval
        return result


class UnknownHandleError(SchedulerError):
    """The handle does not refer to a job in the registry."""

    def __init__(self, handle: Any, message: str | None = None, **kwargs: Any):
        self.handle = handle
        super().__init__(message or f"Job not found: {handle!r}", **kwargs)
        _record_handle(self.context, handle)


class JobNotCurrentError(SchedulerError):
    """A running action tried to mutate a job other than its own."""

    def __init__(self, handle: Any, current: Any, message: str | None = None, **kwargs: Any):
        self.handle = handle
        self.current = current
        super().__init__(
            message
            or f"Only the executing job may be mutated while running (got {handle!r}, current {current!r})",
            **kwargs,
        )
        _record_handle(self.context, handle)
        if current is not None:
            self.context.metadata["current"] = str(current)


class ClockError(SchedulerError):
    """Invalid request to a time source."""


def _record_handle(context: ErrorContext, handle: Any) -> None:
    slot = getattr(handle, "slot", None)
    generation = getattr(handle, "generation", None)
    if isinstance(slot, int) and isinstance(generation, int):
        context.slot = slot
        context.generation = generation


# =============================================================================
# UTILITY FUNCTIONS
# =============================================================================


def categorize_error(error: Exception) -> ErrorCategory:
    """Get the category of an error."""
    if isinstance(error, CadenceError):
        return error.category
    if isinstance(error, (ValueError, TypeError)):
        return ErrorCategory.VALIDATION
    return ErrorCategory.UNKNOWN


__all__ = [
    "ErrorCategory",
    "ErrorContext",
    "CadenceError",
    "ConfigError",
    "SchedulerError",
    "EmptyRegistryError",
    "InvalidIntervalError",
    "UnknownHandleError",
    "JobNotCurrentError",
    "ClockError",
    "categorize_error",
]
