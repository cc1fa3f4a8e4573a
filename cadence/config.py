"""Configuration schema for a hosted interval scheduler.

These dataclasses describe what the command line host needs to build an
:class:`~cadence.scheduling.IntervalScheduler` and drive it.  The scheduler
itself takes plain arguments and never reads configuration.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from cadence.scheduling import Unit


@dataclass(slots=True)
class IntervalConfig:
    """Cadence and timezone of the schedule."""

    frequency: int = 1
    unit: Unit = Unit.MINUTE
    timezone: Optional[str] = None


@dataclass(slots=True)
class RunnerConfig:
    """Behaviour of the hosting loop."""

    run_immediately: bool = False
    max_runs: Optional[int] = None


@dataclass(slots=True)
class LoggingConfig:
    level: str = "INFO"
    json_format: Optional[bool] = None


@dataclass(slots=True)
class CadenceConfig:
    """Top-level configuration bundle."""

    interval: IntervalConfig = field(default_factory=IntervalConfig)
    runner: RunnerConfig = field(default_factory=RunnerConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
