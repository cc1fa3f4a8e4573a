"""Interval based scheduling.

An :class:`IntervalScheduler` holds a cadence such as "every 5 seconds" or
"every 2 years", computes the next due time from "now" and offers a blocking
wait that returns once that time has been reached.  It is meant to be driven
by a caller owned loop, see :mod:`cadence.services.runner`.
"""
from __future__ import annotations

import re
import threading
from dataclasses import dataclass
from datetime import datetime, timezone as _utc_zone, tzinfo
from enum import Enum
from typing import Optional, Union
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dateutil import tz as _dateutil_tz

from cadence.log import get_logger
from cadence.scheduling.clock import Clock, SystemClock
from cadence.scheduling.units import Unit

logger = get_logger(__name__)

TimezoneLike = Union[tzinfo, str, None]

_EXPRESSION_PATTERN = re.compile(
    r"^\s*(?:every\s+)?(?P<count>[+-]?\d+)?\s*\*?\s*(?P<unit>[^\d\s*]+)\s*$",
    re.IGNORECASE,
)


class WaitCancelled(RuntimeError):
    """Raised when a wait is interrupted through its stop event."""

    def __init__(self, next_run: Optional[datetime]) -> None:
        super().__init__(f"wait for {next_run.isoformat() if next_run else 'unarmed schedule'} was cancelled")
        self.next_run = next_run


class SchedulerState(str, Enum):
    UNARMED = "unarmed"
    ARMED = "armed"
    DUE = "due"


@dataclass(frozen=True)
class Cadence:
    """How often a scheduler fires: ``frequency`` times ``unit``.

    A non-positive frequency is coerced to 1 instead of being rejected.
    """

    frequency: int
    unit: Unit

    def __post_init__(self) -> None:
        frequency = int(self.frequency)
        object.__setattr__(self, "frequency", frequency if frequency > 0 else 1)
        object.__setattr__(self, "unit", Unit.parse(self.unit))

    def __str__(self) -> str:
        return f"{self.frequency} * {self.unit.value}"

    @classmethod
    def parse(cls, expression: str) -> "Cadence":
        """Build a cadence from ``"5sec"``, ``"5 * sec"`` or ``"every 2 years"``.

        The count defaults to 1 when omitted (``"month"``).
        """

        match = _EXPRESSION_PATTERN.match(expression)
        if match is None:
            raise ValueError(f"malformed cadence expression: {expression!r}")
        count = match.group("count")
        return cls(int(count) if count is not None else 1, Unit.parse(match.group("unit")))


def _instant(moment: datetime) -> datetime:
    return moment.astimezone(_utc_zone.utc)


def resolve_timezone(value: TimezoneLike) -> tzinfo:
    """Return a tzinfo for ``value``; ``None`` means the process local zone."""

    if value is None:
        return _dateutil_tz.tzlocal()
    if isinstance(value, tzinfo):
        return value
    name = str(value).strip()
    if name.upper() == "UTC":
        return _utc_zone.utc
    if name.lower() == "local":
        return _dateutil_tz.tzlocal()
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ValueError(f"unknown timezone: {value!r}") from exc


class IntervalScheduler:
    """Compute and wait for the next occurrence of a fixed cadence.

    Instances are not thread-safe: a single owner is expected to call
    :meth:`compute_next` and :meth:`wait_until_next`.  The only suspension
    point is inside :meth:`wait_until_next`.

    A cadence whose next run falls outside the range of :class:`datetime` is
    rejected with :class:`ValueError` at construction.
    """

    def __init__(
        self,
        frequency: int,
        unit: Union[Unit, str],
        timezone: TimezoneLike = None,
        clock: Optional[Clock] = None,
    ) -> None:
        self._cadence = Cadence(frequency, unit)
        self._timezone = resolve_timezone(timezone)
        self._clock: Clock = clock if clock is not None else SystemClock()
        self._next_run: Optional[datetime] = None
        self._checked_add(self.now())

    @classmethod
    def from_cadence(
        cls, cadence: Cadence, timezone: TimezoneLike = None, clock: Optional[Clock] = None
    ) -> "IntervalScheduler":
        return cls(cadence.frequency, cadence.unit, timezone=timezone, clock=clock)

    # ------------------------------------------------------------------
    @property
    def cadence(self) -> Cadence:
        return self._cadence

    @property
    def timezone(self) -> tzinfo:
        return self._timezone

    @property
    def next_run(self) -> Optional[datetime]:
        return self._next_run

    @property
    def state(self) -> SchedulerState:
        if self._next_run is None:
            return SchedulerState.UNARMED
        if _instant(self.now()) >= _instant(self._next_run):
            return SchedulerState.DUE
        return SchedulerState.ARMED

    def frequency(self) -> str:
        """Render the cadence as ``"<frequency> * <unit-code>"``."""

        return str(self._cadence)

    def next_schedule(self) -> str:
        """Render the armed next run as ISO-8601, or ``"not scheduled"``."""

        if self._next_run is None:
            return "not scheduled"
        return self._next_run.isoformat()

    # ------------------------------------------------------------------
    def compute_next(self) -> "IntervalScheduler":
        """Arm the scheduler at ``now + frequency * unit``.

        Fixed units add an exact elapsed duration, calendar units add calendar
        fields on the local wall clock of the configured timezone.
        """

        self._arm()
        return self

    def wait_until_next(self, stop_event: Optional[threading.Event] = None) -> datetime:
        """Block until the next run and return the time the wait ended.

        The scheduler is (re)armed first when it was never armed or when the
        armed time has already been reached; missed intervals collapse into a
        single rearm anchored at "now".  Raises :class:`WaitCancelled` if
        ``stop_event`` is set before the target time is reached.
        """

        if stop_event is not None and stop_event.is_set():
            raise WaitCancelled(self._next_run)

        target = self._next_run
        if target is None:
            target = self._arm()
        elif _instant(self.now()) >= _instant(target):
            logger.debug("schedule_overdue", next_run=target.isoformat())
            target = self._arm()

        while True:
            now = self.now()
            if _instant(now) >= _instant(target):
                return now
            remaining = (_instant(target) - _instant(now)).total_seconds()
            if self._clock.sleep(remaining, stop_event):
                logger.debug("wait_cancelled", next_run=target.isoformat())
                raise WaitCancelled(target)

    def now(self) -> datetime:
        """Current time of the scheduler clock in the configured timezone."""

        return self._clock.now(self._timezone)

    # ------------------------------------------------------------------
    def _arm(self) -> datetime:
        now = self.now()
        next_run = self._checked_add(now)
        self._next_run = next_run
        logger.debug(
            "schedule_armed",
            frequency=self.frequency(),
            now=now.isoformat(),
            next_run=next_run.isoformat(),
        )
        return next_run

    def _checked_add(self, now: datetime) -> datetime:
        try:
            return self._add(now)
        except (OverflowError, ValueError) as exc:
            raise ValueError(
                f"cadence {self._cadence} exceeds the representable date range"
            ) from exc

    def _add(self, now: datetime) -> datetime:
        offset = self._cadence.unit.offset(self._cadence.frequency)
        if self._cadence.unit.is_calendar:
            # wall clock arithmetic, then normalised so the offset matches the new date
            return _instant(now + offset).astimezone(self._timezone)
        return (_instant(now) + offset).astimezone(self._timezone)

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(frequency={self._cadence.frequency}, "
            f"unit={self._cadence.unit.value!r}, next_run={self.next_schedule()!r})"
        )
