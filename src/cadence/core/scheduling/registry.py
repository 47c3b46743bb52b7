"""Job registry — the set of periodic jobs a scheduler can pick from.

┌──────────────────────────────────────────────────────────────────────────────┐
│  JOB REGISTRY                                                                 │
│                                                                               │
│   add() ──► slot arena ──► JobHandle(slot, generation)                        │
│                                                                               │
│   slots:        [ Job | None, Job | None, ... ]                               │
│   generations:  [ int,        int,        ... ]   bumped on slot reuse        │
│   order:        { handle: None }                  insertion order, read       │
│                                                   newest-first (LIFO)         │
│                                                                               │
│  A handle is only valid while its generation matches the slot, so a stale    │
│  handle kept after remove() can never reach a newer job in the same slot.    │
└──────────────────────────────────────────────────────────────────────────────┘

Examples:
    >>> registry = JobRegistry()
    >>> fast = registry.add(lambda: None, 50)
    >>> slow = registry.add(lambda: None, 100)
    >>> registry.least_remaining() == fast
    True
    >>> registry.advance_all(30)
    >>> registry.get(slow).time_remaining
    70
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from dataclasses import dataclass
from typing import Any

from cadence.core.errors import InvalidIntervalError, UnknownHandleError

Action = Callable[[], None]


@dataclass(frozen=True, slots=True)
class JobHandle:
    """Stable identity of a registered job."""

    slot: int
    generation: int

    def __str__(self) -> str:
        return f"{self.slot}:{self.generation}"


@dataclass
class Job:
    """One registered periodic action.

    ``time_remaining`` is signed: it goes negative when the previous cycle
    overran this job's period.
    """

    handle: JobHandle
    action: Action
    interval: int
    time_remaining: int
    name: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "handle": str(self.handle),
            "name": self.name,
            "interval": self.interval,
            "time_remaining": self.time_remaining,
        }


def validate_interval(interval: Any, *, job: str | None = None) -> int:
    """Return ``interval`` if it is a positive integer, else raise."""
    if isinstance(interval, bool) or not isinstance(interval, int) or interval <= 0:
        raise InvalidIntervalError(interval).with_context(job=job)
    return interval


def _action_name(action: Action) -> str:
    return getattr(action, "__name__", None) or type(action).__name__


class JobRegistry:
    """Unordered collection of periodic jobs addressed by ``JobHandle``.

    Traversal order is newest first, which is also the tie-break order used
    by ``least_remaining``.
    """

    def __init__(self) -> None:
        self._slots: list[Job | None] = []
        self._generations: list[int] = []
        self._free: list[int] = []
        self._order: dict[JobHandle, None] = {}

    # ── Mutation ─────────────────────────────────────────────────

    def add(self, action: Action, interval: int, *, name: str | None = None) -> JobHandle:
        """Register ``action`` to run every ``interval`` ms.

        The job starts with ``time_remaining == interval``.
        """
        if not callable(action):
            raise TypeError(f"Job action must be callable, got {action!r}")
        name = name or _action_name(action)
        interval = validate_interval(interval, job=name)

        if self._free:
            slot = self._free.pop()
            self._generations[slot] += 1
        else:
            slot = len(self._slots)
            self._slots.append(None)
            self._generations.append(0)

        handle = JobHandle(slot, self._generations[slot])
        self._slots[slot] = Job(
            handle=handle,
            action=action,
            interval=interval,
            time_remaining=interval,
            name=name,
        )
        self._order[handle] = None
        return handle

    def remove(self, handle: JobHandle) -> Job:
        """Delete the job behind ``handle`` and return it."""
        job = self.get(handle)
        self._slots[handle.slot] = None
        self._free.append(handle.slot)
        del self._order[handle]
        return job

    def update_interval(self, handle: JobHandle, interval: int) -> None:
        """Change the period of a job.

        ``time_remaining`` is untouched; the new interval applies from the
        job's next reset.
        """
        job = self.get(handle)
        job.interval = validate_interval(interval, job=job.name)

    def reset(self, handle: JobHandle) -> None:
        """Set a job's ``time_remaining`` back to its current interval."""
        job = self.get(handle)
        job.time_remaining = job.interval

    def advance_all(self, delta: int) -> None:
        """Subtract ``delta`` ms from every job's ``time_remaining``."""
        for job in self:
            job.time_remaining -= delta

    # ── Queries ──────────────────────────────────────────────────

    def get(self, handle: JobHandle) -> Job:
        if not isinstance(handle, JobHandle) or not 0 <= handle.slot < len(self._slots):
            raise UnknownHandleError(handle)
        job = self._slots[handle.slot]
        if job is None or self._generations[handle.slot] != handle.generation:
            raise UnknownHandleError(handle)
        return job

    def least_remaining(self) -> JobHandle | None:
        """Return the job with the smallest ``time_remaining``.

        Scans newest first and only replaces the candidate on a strictly
        smaller value, so the most recently added job wins ties. Returns
        ``None`` when the registry is empty.
        """
        best: Job | None = None
        for job in self:
            if best is None or job.time_remaining < best.time_remaining:
                best = job
        return best.handle if best is not None else None

    def snapshot(self) -> list[dict[str, Any]]:
        """Jobs as plain dicts, in traversal order."""
        return [job.to_dict() for job in self]

    def __iter__(self) -> Iterator[Job]:
        # Copy the keys so that callers may mutate the registry mid-iteration.
        for handle in reversed(list(self._order)):
            job = self._slots[handle.slot]
            if job is not None and job.handle == handle:
                yield job

    def __len__(self) -> int:
        return len(self._order)

    def __contains__(self, handle: object) -> bool:
        return handle in self._order

    def __repr__(self) -> str:
        return f"JobRegistry(jobs={len(self)})"


class RegistryView:
    """Read-only view of a ``JobRegistry``.

    Exposes lookups and traversal only; jobs are added, retimed and removed
    through the owning ``Scheduler`` so its current-job rule applies.
    """

    __slots__ = ("_registry",)

    def __init__(self, registry: JobRegistry) -> None:
        self._registry = registry

    def get(self, handle: JobHandle) -> Job:
        return self._registry.get(handle)

    def least_remaining(self) -> JobHandle | None:
        return self._registry.least_remaining()

    def snapshot(self) -> list[dict[str, Any]]:
        return self._registry.snapshot()

    def __iter__(self) -> Iterator[Job]:
        return iter(self._registry)

    def __len__(self) -> int:
        return len(self._registry)

    def __contains__(self, handle: object) -> bool:
        return handle in self._registry

    def __repr__(self) -> str:
        return f"RegistryView(jobs={len(self)})"
