"""Periodic job scheduling.

┌──────────────────────────────────────────────────────────────────────────────┐
│  CADENCE SCHEDULER - cooperative, soonest-deadline-first periodic jobs        │
│                                                                               │
│   ┌──────────────┐  now_ms / sleep_ms  ┌──────────────────────────────┐      │
│   │ TimeSource   │ ◄────────────────── │   Scheduler                  │      │
│   │ (clock)      │                     │   select → wait → run →      │      │
│   └──────────────┘                     │   advance                    │      │
│                                        │        │                     │      │
│                                        │  ┌─────▼──────┐              │      │
│                                        │  │ JobRegistry│              │      │
│                                        │  │ (handles)  │              │      │
│                                        │  └────────────┘              │      │
│                                        └──────────────────────────────┘      │
│                                                                               │
│  Quick Start:                                                                 │
│      scheduler = create_scheduler()                                           │
│      scheduler.add_job(draw_board, 33)                                        │
│      scheduler.add_job(read_input, 150)                                       │
│      scheduler.run()                                                          │
└──────────────────────────────────────────────────────────────────────────────┘

Guardrails:
    ❌ Mutating another job from inside an action
    ✅ ``scheduler.update_job_interval(scheduler.current_job, ms)``
    ❌ Calling ``time.sleep()`` inside an action to delay the next run
    ✅ Change the job's interval instead
"""

from __future__ import annotations

from cadence.core.logging import configure_logging
from cadence.core.settings import SchedulerSettings

from .clock import ManualTimeSource, MonotonicTimeSource, TimeSource
from .registry import Job, JobHandle, JobRegistry, RegistryView
from .scheduler import (
    Iteration,
    Scheduler,
    SchedulerHealth,
    SchedulerState,
    SchedulerStats,
)

__all__ = [
    # Time sources
    "TimeSource",
    "MonotonicTimeSource",
    "ManualTimeSource",
    # Registry
    "Job",
    "JobHandle",
    "JobRegistry",
    "RegistryView",
    # Scheduler
    "Scheduler",
    "SchedulerState",
    "SchedulerStats",
    "SchedulerHealth",
    "Iteration",
    "create_scheduler",
]


def create_scheduler(
    settings: SchedulerSettings | None = None,
    *,
    simulate: bool = False,
    configure_logs: bool = True,
) -> Scheduler:
    """Factory function to create a scheduler wired to its settings.

    Args:
        settings: Scheduler settings (default: read from the environment)
        simulate: Use a virtual clock so runs complete without real waiting
        configure_logs: Apply ``settings.log_level``/``json_logs`` to logging

    Returns:
        Configured Scheduler

    Example:
        >>> scheduler = create_scheduler(simulate=True)
        >>> scheduler.time_source.name
        'manual'
    """
    settings = settings or SchedulerSettings()
    if configure_logs:
        configure_logging(level=settings.log_level, json_format=settings.json_logs)

    time_source: TimeSource = ManualTimeSource() if simulate else MonotonicTimeSource()
    return Scheduler(time_source, settings=settings)
