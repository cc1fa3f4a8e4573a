"""Time sources used by the scheduler.

The scheduler never reads the wall clock directly.  It is handed a
:class:`Clock` so tests (and dry runs) can drive time deterministically and
several schedulers can run against independent clocks at once.
"""
from __future__ import annotations

import threading
import time
from datetime import datetime, timedelta, timezone, tzinfo
from typing import Optional, Protocol


class Clock(Protocol):
    """Source of the current time and of the blocking sleep."""

    def now(self, tz: tzinfo) -> datetime:
        """Return the current time as an aware datetime in ``tz``."""
        ...

    def sleep(self, seconds: float, stop_event: Optional[threading.Event] = None) -> bool:
        """Block for ``seconds``; return ``True`` if ``stop_event`` interrupted it."""
        ...


class SystemClock:
    """Wall-clock time backed by the operating system timer."""

    def now(self, tz: tzinfo) -> datetime:
        return datetime.now(tz)

    def sleep(self, seconds: float, stop_event: Optional[threading.Event] = None) -> bool:
        seconds = max(0.0, seconds)
        if stop_event is None:
            time.sleep(seconds)
            return False
        return stop_event.wait(seconds)


class ManualClock:
    """Clock whose time only moves when told to.

    ``sleep`` advances the clock by the requested amount instead of blocking,
    which makes a full wait cycle instantaneous and reproducible.
    """

    def __init__(self, start: datetime) -> None:
        if start.tzinfo is None:
            raise ValueError("ManualClock requires a timezone-aware start time")
        self._current = start.astimezone(timezone.utc)
        self.sleeps: list[float] = []

    def now(self, tz: tzinfo) -> datetime:
        return self._current.astimezone(tz)

    def sleep(self, seconds: float, stop_event: Optional[threading.Event] = None) -> bool:
        if stop_event is not None and stop_event.is_set():
            return True
        self.sleeps.append(seconds)
        self.advance(timedelta(seconds=max(0.0, seconds)))
        return False

    def advance(self, delta: timedelta) -> datetime:
        self._current = self._current + delta
        return self._current

    def set(self, moment: datetime) -> None:
        if moment.tzinfo is None:
            raise ValueError("ManualClock requires timezone-aware datetimes")
        self._current = moment.astimezone(timezone.utc)
