"""Interval based scheduling primitive with a small hosting loop."""

from .cli import main as cli_main
from .config_loader import load_config
from .scheduling import (
    Cadence,
    Clock,
    IntervalScheduler,
    ManualClock,
    SchedulerState,
    SystemClock,
    Unit,
    WaitCancelled,
)
from .services import IntervalRunner, ScheduledTask

__all__ = [
    "cli_main",
    "load_config",
    "Cadence",
    "Clock",
    "IntervalScheduler",
    "ManualClock",
    "SchedulerState",
    "SystemClock",
    "Unit",
    "WaitCancelled",
    "IntervalRunner",
    "ScheduledTask",
    "config",
    "scheduling",
    "services",
]
