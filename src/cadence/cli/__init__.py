"""
CLI layer for cadence.

Provides a Typer application that drives a ``Scheduler`` from the terminal.
Scheduling logic lives in ``cadence.core``; this package handles only
terminal transport: argument parsing, coloured output, and table formatting.

Entry point::

    cadence --help
"""

from cadence.cli.app import app

__all__ = ["app"]
