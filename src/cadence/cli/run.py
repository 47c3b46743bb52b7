"""
CLI: ``cadence run`` — run printing jobs on a schedule, then report stats.
"""

from __future__ import annotations

import typer
from pydantic import ValidationError

from cadence.cli.utils import console, fail, output_json, parse_job_spec, print_dict, print_table
from cadence.core.errors import CadenceError, ConfigError
from cadence.core.scheduling import Scheduler, create_scheduler
from cadence.core.settings import SchedulerSettings


def _printer(scheduler: Scheduler, name: str, quiet: bool):
    def fire() -> None:
        if not quiet:
            console.print(f"[dim]t={scheduler.time_source.now_ms():>7}ms[/dim]  {name}")

    fire.__name__ = name
    return fire


def _load_settings(log_level: str | None) -> SchedulerSettings:
    overrides = {"log_level": log_level} if log_level else {}
    try:
        return SchedulerSettings(**overrides)
    except ValidationError as exc:
        raise ConfigError(f"Invalid settings: {exc.errors()[0]['msg']}", cause=exc) from exc


def run_jobs(
    jobs: list[str] = typer.Option(..., "--job", "-j", help="Job as NAME=INTERVAL_MS (repeatable)"),
    duration: int = typer.Option(1000, "--duration", "-t", help="Stop after this many ms"),
    simulate: bool = typer.Option(False, "--simulate", help="Use a virtual clock (no real waiting)"),
    log_level: str | None = typer.Option(None, "--log-level", help="Override CADENCE_LOG_LEVEL"),
    json_out: bool = typer.Option(False, "--json"),
) -> None:
    """Run one printing job per --job until --duration elapses."""
    try:
        settings = _load_settings(log_level)
        specs = [parse_job_spec(spec) for spec in jobs]

        scheduler = create_scheduler(settings, simulate=simulate)
        # Registered first so that user jobs due at the same moment still fire.
        scheduler.add_job(scheduler.stop, duration, name="stop")
        for name, interval in specs:
            scheduler.add_job(_printer(scheduler, name, quiet=json_out), interval, name=name)

        scheduler.run()
    except CadenceError as exc:
        fail(exc)

    stats = scheduler.stats
    if json_out:
        output_json(
            {
                "health": scheduler.health().to_dict(),
                "jobs": scheduler.registry.snapshot(),
            }
        )
        return

    console.print()
    print_table(
        [
            {"job": name, "runs": runs}
            for name, runs in sorted(stats.runs_by_job.items())
            if name != "stop"
        ],
        title="Runs",
    )
    print_dict(
        {
            "iterations": stats.iterations,
            "overruns": stats.overruns,
            "waited_ms": stats.total_wait_ms,
            "ran_ms": stats.total_run_ms,
        },
        title="Scheduler",
    )
