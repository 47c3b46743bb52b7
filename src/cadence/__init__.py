"""
Cadence - a cooperative periodic task scheduler.

Jobs are zero-argument callables with a fixed period in milliseconds. The
scheduler repeatedly picks the job closest to its due time, waits for it,
runs it, and charges the elapsed time to every job's countdown.
"""

__version__ = "0.1.0"

from cadence.core import *  # noqa
