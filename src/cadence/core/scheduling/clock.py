"""Time sources consumed by the scheduler.

┌──────────────────────────────────────────────────────────────────────────────┐
│  TIME SOURCE PROTOCOL                                                         │
│                                                                               │
│  The scheduler never reads the clock or sleeps directly. It asks a           │
│  TimeSource for "now" and to block, which keeps the run loop                 │
│  deterministic under test.                                                   │
│                                                                               │
│   ┌──────────────────────┐   now_ms() / sleep_ms()   ┌──────────────────┐    │
│   │ MonotonicTimeSource  │ ◄───────────────────────  │    Scheduler     │    │
│   │ (wall clock, real    │                           │                  │    │
│   │  blocking sleep)     │                           └──────────────────┘    │
│   └──────────────────────┘                                    │              │
│   ┌──────────────────────┐                                    │              │
│   │ ManualTimeSource     │ ◄──────────────────────────────────┘              │
│   │ (virtual clock,      │                                                   │
│   │  sleep advances it)  │                                                   │
│   └──────────────────────┘                                                   │
└──────────────────────────────────────────────────────────────────────────────┘
"""

from __future__ import annotations

import time
from typing import Protocol, runtime_checkable

from cadence.core.errors import ClockError


@runtime_checkable
class TimeSource(Protocol):
    """Protocol for the scheduler's clock.

    Example (custom time source):
        >>> class FrameClock:
        ...     def now_ms(self) -> int:
        ...         return engine.frame_time_ms()
        ...
        ...     def sleep_ms(self, duration: int) -> None:
        ...         engine.wait(duration)
    """

    def now_ms(self) -> int:
        """Return a monotonically non-decreasing timestamp in milliseconds."""
        ...

    def sleep_ms(self, duration: int) -> None:
        """Block the calling thread for approximately ``duration`` ms (>= 0)."""
        ...


def _check_duration(duration: int) -> None:
    if duration < 0:
        raise ClockError(f"Sleep duration must be >= 0 ms, got {duration}").with_context(
            duration_ms=duration
        )


class MonotonicTimeSource:
    """Wall-clock time source backed by ``time.monotonic_ns``."""

    name = "monotonic"

    def now_ms(self) -> int:
        return time.monotonic_ns() // 1_000_000

    def sleep_ms(self, duration: int) -> None:
        _check_duration(duration)
        if duration:
            time.sleep(duration / 1000)


class ManualTimeSource:
    """Virtual clock for tests and simulated runs.

    ``sleep_ms`` returns immediately after moving the clock forward, and
    records every requested duration in ``sleeps``. Actions can call
    ``advance`` to simulate how long they take.

    Example:
        >>> clock = ManualTimeSource()
        >>> clock.sleep_ms(50)
        >>> clock.advance(5)
        >>> clock.now_ms(), clock.sleeps
        (55, [50])
    """

    name = "manual"

    def __init__(self, start_ms: int = 0) -> None:
        self._now = start_ms
        self.sleeps: list[int] = []

    def now_ms(self) -> int:
        return self._now

    def sleep_ms(self, duration: int) -> None:
        _check_duration(duration)
        self.sleeps.append(duration)
        self._now += duration

    def advance(self, duration: int) -> None:
        """Move the virtual clock forward by ``duration`` ms."""
        _check_duration(duration)
        self._now += duration
