"""
Root Typer application for the cadence CLI.
"""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as pkg_version

import typer
from typer import Typer

app = Typer(
    name="cadence",
    help="cadence — cooperative periodic job scheduler.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


# ── Version callback ─────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        try:
            v = pkg_version("cadence-core")
        except PackageNotFoundError:
            from cadence import __version__ as v
        typer.echo(f"cadence {v}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(  # noqa: UP007
        None,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """cadence CLI — run periodic jobs and inspect scheduler stats."""


# ── Command registration ─────────────────────────────────────────────────

from cadence.cli.run import run_jobs  # noqa: E402

app.command("run")(run_jobs)
