"""Interval scheduling primitives."""

from .clock import Clock, ManualClock, SystemClock
from .interval import (
    Cadence,
    IntervalScheduler,
    SchedulerState,
    WaitCancelled,
    resolve_timezone,
)
from .units import Unit

__all__ = [
    "Cadence",
    "Clock",
    "IntervalScheduler",
    "ManualClock",
    "SchedulerState",
    "SystemClock",
    "Unit",
    "WaitCancelled",
    "resolve_timezone",
]
