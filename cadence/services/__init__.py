"""Service orchestration helpers."""

from .runner import IntervalRunner, ScheduledTask

__all__ = ["IntervalRunner", "ScheduledTask"]
