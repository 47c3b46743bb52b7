"""
CLI utility helpers — output formatting and job spec parsing.
"""

from __future__ import annotations

import json
from typing import Any

import typer
from rich.console import Console
from rich.table import Table

from cadence.core.errors import CadenceError, ConfigError

console = Console()
err_console = Console(stderr=True)


# ── Input helpers ────────────────────────────────────────────────────────


def parse_job_spec(spec: str) -> tuple[str, int]:
    """Parse ``NAME=INTERVAL_MS`` into ``(name, interval)``.

    Interval positivity is left to the registry so the CLI reports the same
    error a library caller would get.
    """
    name, sep, raw = spec.partition("=")
    name = name.strip()
    if not sep or not name:
        raise ConfigError(f"Job spec must look like NAME=INTERVAL_MS, got {spec!r}")
    try:
        interval = int(raw.strip())
    except ValueError as exc:
        raise ConfigError(f"Job interval must be an integer number of ms, got {raw!r}", cause=exc) from exc
    return name, interval


def fail(error: CadenceError) -> None:
    """Print a cadence error and exit with status 1."""
    err_console.print(f"[bold red]Error[/bold red] ({error.category.value}): {error.message}")
    raise typer.Exit(code=1)


# ── Output helpers ───────────────────────────────────────────────────────


def output_json(payload: dict[str, Any]) -> None:
    console.print_json(json.dumps(payload, default=str))


def print_table(rows: list[dict[str, Any]], *, title: str = "") -> None:
    """Render a list of dicts as a Rich table."""
    if not rows:
        console.print("[dim]No items.[/dim]")
        return
    table = Table(title=title or None, show_lines=False, pad_edge=False)
    for col in rows[0]:
        table.add_column(col, overflow="fold")
    for row in rows:
        table.add_row(*(str(v) for v in row.values()))
    console.print(table)


def print_dict(data: dict[str, Any], *, title: str = "") -> None:
    """Render a single dict as key-value pairs."""
    if title:
        console.print(f"[bold]{title}[/bold]")
    for k, v in data.items():
        console.print(f"  [cyan]{k}[/cyan]: {v}")
