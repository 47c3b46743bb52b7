"""Allow ``python -m cadence``."""

from cadence.cli import app

app()
