"""Cooperative periodic scheduler.

┌──────────────────────────────────────────────────────────────────────────────┐
│  RUN LOOP                                                                     │
│                                                                               │
│   IDLE ──run()──► SELECTING ──► WAITING ──► RUNNING ──► ADVANCING ──┐        │
│                      ▲  │                                            │        │
│                      │  └── registry empty ──► STOPPED               │        │
│                      └──────────── stop() not requested ◄────────────┘        │
│                                    stop() requested ──► STOPPED               │
│                                                                               │
│   SELECTING  job = registry.least_remaining()                                 │
│   WAITING    wait_ms = max(0, job.time_remaining); clock.sleep_ms(wait_ms)    │
│   RUNNING    run_time = now() after action - now() before action              │
│   ADVANCING  registry.advance_all(wait_ms + run_time); registry.reset(job)    │
│                                                                               │
│  One thread of control: while a job waits or runs, nothing else does.        │
│  An action may stop the scheduler, or update/remove its OWN job; the         │
│  handle it passes must equal ``Scheduler.current_job``.                       │
└──────────────────────────────────────────────────────────────────────────────┘

Example:
    >>> from cadence.core.scheduling import ManualTimeSource, Scheduler
    >>> scheduler = Scheduler(ManualTimeSource())
    >>> ticks = []
    >>> def tick():
    ...     ticks.append(scheduler.time_source.now_ms())
    ...     if len(ticks) == 3:
    ...         scheduler.stop()
    >>> _ = scheduler.add_job(tick, 100)
    >>> scheduler.run()
    >>> ticks
    [100, 200, 300]
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from cadence.core.errors import EmptyRegistryError, JobNotCurrentError, SchedulerError
from cadence.core.logging import LogContext, get_logger
from cadence.core.scheduling.clock import MonotonicTimeSource, TimeSource
from cadence.core.scheduling.registry import Action, JobHandle, JobRegistry, RegistryView
from cadence.core.settings import SchedulerSettings

logger = get_logger(__name__)


class SchedulerState(str, Enum):
    IDLE = "idle"
    SELECTING = "selecting"
    WAITING = "waiting"
    RUNNING = "running"
    ADVANCING = "advancing"
    STOPPED = "stopped"


@dataclass
class SchedulerStats:
    """Counters accumulated across runs of a scheduler."""

    iterations: int = 0
    jobs_run: int = 0
    overruns: int = 0
    failures: int = 0
    total_wait_ms: int = 0
    total_run_ms: int = 0
    runs_by_job: dict[str, int] = field(default_factory=dict)
    last_job: str | None = None
    last_error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "iterations": self.iterations,
            "jobs_run": self.jobs_run,
            "overruns": self.overruns,
            "failures": self.failures,
            "total_wait_ms": self.total_wait_ms,
            "total_run_ms": self.total_run_ms,
            "runs_by_job": dict(self.runs_by_job),
            "last_job": self.last_job,
            "last_error": self.last_error,
        }


@dataclass(frozen=True)
class Iteration:
    """Timing of one completed select/wait/run/advance cycle."""

    handle: JobHandle
    job: str
    wait_ms: int
    run_time: int

    @property
    def delta(self) -> int:
        return self.wait_ms + self.run_time


@dataclass
class SchedulerHealth:
    """Health status for a scheduler."""

    healthy: bool
    state: SchedulerState
    jobs: int
    time_source: str
    stats: SchedulerStats = field(default_factory=SchedulerStats)

    def to_dict(self) -> dict[str, Any]:
        return {
            "healthy": self.healthy,
            "state": self.state.value,
            "jobs": self.jobs,
            "time_source": self.time_source,
            "stats": self.stats.to_dict(),
        }


class Scheduler:
    """Runs registered periodic jobs, soonest deadline first.

    Lifecycle::

        scheduler = Scheduler()
        handle = scheduler.add_job(draw_board, 33)
        scheduler.run()        # blocks until stop() or the registry empties

    Introspection::

        scheduler.state        # SchedulerState
        scheduler.current_job  # JobHandle of the executing action, else None
        scheduler.stats        # SchedulerStats counters
        scheduler.health()     # SchedulerHealth
    """

    def __init__(
        self,
        time_source: TimeSource | None = None,
        *,
        settings: SchedulerSettings | None = None,
        registry: JobRegistry | None = None,
    ) -> None:
        self._clock = time_source or MonotonicTimeSource()
        self._settings = settings or SchedulerSettings()
        self._registry = registry if registry is not None else JobRegistry()
        self._state = SchedulerState.IDLE
        self._current: JobHandle | None = None
        self._stop_requested = False
        self._added_this_iteration: list[JobHandle] = []
        self._stats = SchedulerStats()
        self.last_iteration: Iteration | None = None

    # ── Properties ───────────────────────────────────────────────

    @property
    def state(self) -> SchedulerState:
        return self._state

    @property
    def current_job(self) -> JobHandle | None:
        """Handle of the job selected in the current iteration."""
        return self._current

    @property
    def registry(self) -> RegistryView:
        """Read-only view of the registered jobs."""
        return RegistryView(self._registry)

    @property
    def time_source(self) -> TimeSource:
        return self._clock

    @property
    def stats(self) -> SchedulerStats:
        return self._stats

    @property
    def is_running(self) -> bool:
        return self._state not in (SchedulerState.IDLE, SchedulerState.STOPPED)

    # ── Job management ───────────────────────────────────────────

    def add_job(self, action: Action, interval_ms: int, *, name: str | None = None) -> JobHandle:
        """Register ``action`` to run every ``interval_ms`` milliseconds."""
        handle = self._registry.add(action, interval_ms, name=name)
        if self._state is SchedulerState.RUNNING:
            self._added_this_iteration.append(handle)
        logger.debug(
            "job_added",
            job=self._registry.get(handle).name,
            handle=str(handle),
            interval_ms=interval_ms,
        )
        return handle

    def remove_job(self, handle: JobHandle) -> None:
        """Remove a job. While running, only the executing job may remove itself."""
        self._require_current(handle, "remove_job")
        job = self._registry.remove(handle)
        logger.info("job_removed", job=job.name, handle=str(handle), remaining_jobs=len(self._registry))

    def update_job_interval(self, handle: JobHandle, interval_ms: int) -> None:
        """Change a job's period; takes effect when the job is next reset."""
        self._require_current(handle, "update_job_interval")
        self._registry.update_interval(handle, interval_ms)
        logger.debug("job_interval_updated", handle=str(handle), interval_ms=interval_ms)

    def _require_current(self, handle: JobHandle, operation: str) -> None:
        if self.is_running and handle != self._current:
            job = self._registry.get(handle).name if handle in self._registry else None
            raise JobNotCurrentError(handle, self._current).with_context(
                job=job, state=self._state.value, operation=operation
            )

    # ── Run loop ─────────────────────────────────────────────────

    def stop(self) -> None:
        """Stop after the in-flight action (if any) returns."""
        self._stop_requested = True
        logger.debug("scheduler_stop_requested", state=self._state.value)

    stop_scheduler = stop

    def run(self) -> None:
        """Run jobs until ``stop()`` is called or no job is left.

        Raises:
            EmptyRegistryError: no job to select and ``raise_on_empty`` is set
            SchedulerError: ``run()`` called while already running
            Exception: whatever a job action raised, unchanged
        """
        if self.is_running:
            raise SchedulerError("Scheduler is already running").with_context(state=self._state.value)

        logger.info(
            "scheduler_started",
            jobs=len(self._registry),
            time_source=getattr(self._clock, "name", type(self._clock).__name__),
        )
        try:
            while not self._stop_requested:
                if not self._run_iteration():
                    break
        finally:
            self._state = SchedulerState.STOPPED
            self._current = None
            self._stop_requested = False
            self._added_this_iteration.clear()

        logger.info(
            "scheduler_stopped",
            iterations=self._stats.iterations,
            jobs=len(self._registry),
        )

    run_scheduler = run

    def _run_iteration(self) -> bool:
        """One select/wait/run/advance cycle. False when nothing is left to run."""
        self._state = SchedulerState.SELECTING
        handle = self._registry.least_remaining()
        if handle is None:
            logger.info("registry_empty", iterations=self._stats.iterations)
            if self._settings.raise_on_empty:
                raise EmptyRegistryError().with_context(state=self._state.value)
            return False

        job = self._registry.get(handle)
        self._current = handle

        if job.time_remaining < 0:
            self._stats.overruns += 1
            if self._settings.warn_on_overrun:
                logger.warning("job_overrun", job=job.name, late_ms=-job.time_remaining)

        self._state = SchedulerState.WAITING
        wait_ms = max(0, job.time_remaining)
        logger.debug("job_selected", job=job.name, handle=str(handle), wait_ms=wait_ms)
        self._clock.sleep_ms(wait_ms)

        self._state = SchedulerState.RUNNING
        start = self._clock.now_ms()
        try:
            with LogContext(job=job.name):
                job.action()
        except Exception as exc:
            self._stats.failures += 1
            self._stats.last_error = f"{job.name}: {exc!r}"
            logger.exception("job_failed", job=job.name, handle=str(handle))
            raise
        run_time = self._clock.now_ms() - start

        self._state = SchedulerState.ADVANCING
        self._registry.advance_all(wait_ms + run_time)
        # The executing job, and any job its action added, restart a full interval.
        for fresh in [handle, *self._added_this_iteration]:
            if fresh in self._registry:
                self._registry.reset(fresh)
        self._added_this_iteration.clear()

        self._stats.iterations += 1
        self._stats.jobs_run += 1
        self._stats.total_wait_ms += wait_ms
        self._stats.total_run_ms += run_time
        self._stats.runs_by_job[job.name] = self._stats.runs_by_job.get(job.name, 0) + 1
        self._stats.last_job = job.name
        self.last_iteration = Iteration(handle=handle, job=job.name, wait_ms=wait_ms, run_time=run_time)
        self._current = None
        return True

    # ── Health ───────────────────────────────────────────────────

    def health(self) -> SchedulerHealth:
        return SchedulerHealth(
            healthy=self._stats.failures == 0,
            state=self._state,
            jobs=len(self._registry),
            time_source=getattr(self._clock, "name", type(self._clock).__name__),
            stats=self._stats,
        )

    def __repr__(self) -> str:
        return f"Scheduler(state={self._state.value}, jobs={len(self._registry)})"
