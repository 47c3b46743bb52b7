"""
Shared pytest fixtures and configuration for cadence tests.

This module provides:
- Logging isolation (structlog is reset after every test)
- A deterministic virtual clock and a scheduler bound to it
- Auto-marking of tests by location

Usage:
    def test_something(scheduler, clock):
        scheduler.add_job(lambda: clock.advance(5), 50)
        ...
"""

import os
import sys
from pathlib import Path
from typing import Generator

import pytest
import structlog

# Ensure cadence package is importable
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from cadence.core.logging import clear_context
from cadence.core.scheduling import ManualTimeSource, Scheduler
from cadence.core.settings import SchedulerSettings


# =============================================================================
# Test Markers Configuration
# =============================================================================


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Auto-mark tests based on their location."""
    for item in items:
        test_path = Path(item.fspath).relative_to(Path(__file__).parent)

        if "cli" in test_path.parts:
            item.add_marker(pytest.mark.integration)

        markers = {mark.name for mark in item.iter_markers()}
        if not markers.intersection({"unit", "integration", "slow"}):
            item.add_marker(pytest.mark.unit)


# =============================================================================
# Isolation Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def reset_logging() -> Generator[None, None, None]:
    """
    Restore structlog defaults after each test.

    ``configure_logging`` binds the current stderr into the logger factory;
    under a CLI runner that stream is closed once the invocation ends.
    """
    yield
    clear_context()
    structlog.reset_defaults()


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Keep developer CADENCE_* variables and .env files out of tests."""
    for key in list(os.environ):
        if key.startswith("CADENCE_"):
            monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)


# =============================================================================
# Scheduler Fixtures
# =============================================================================


@pytest.fixture
def clock() -> ManualTimeSource:
    """Virtual clock starting at 0 ms."""
    return ManualTimeSource()


@pytest.fixture
def settings() -> SchedulerSettings:
    return SchedulerSettings()


@pytest.fixture
def scheduler(clock: ManualTimeSource, settings: SchedulerSettings) -> Scheduler:
    """Scheduler driven by the virtual ``clock``."""
    return Scheduler(clock, settings=settings)
