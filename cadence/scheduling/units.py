"""Time units understood by the interval scheduler."""
from __future__ import annotations

from datetime import timedelta
from enum import Enum
from typing import Union

from dateutil.relativedelta import relativedelta

Offset = Union[timedelta, relativedelta]


class Unit(str, Enum):
    """Granularity of a cadence.

    The values are the external string codes and must stay stable, they are
    what :func:`str` and the configuration files use.
    """

    NANOSECOND = "ns"
    MICROSECOND = "µs"
    MILLISECOND = "ms"
    SECOND = "sec"
    MINUTE = "min"
    HOUR = "hr"
    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"

    def __str__(self) -> str:
        return self.value

    @property
    def is_calendar(self) -> bool:
        return self in _CALENDAR_UNITS

    def offset(self, frequency: int) -> Offset:
        """Return the quantity ``frequency`` units amount to.

        Fixed units produce a :class:`~datetime.timedelta`; nanoseconds are
        rounded up to the microsecond resolution of :mod:`datetime`, so the
        offset is never zero.  Calendar units produce a
        :class:`~dateutil.relativedelta.relativedelta` so the addition respects
        month lengths and leap years.
        """

        if self is Unit.NANOSECOND:
            return timedelta(microseconds=max(1, -(-frequency // 1000)))
        if self is Unit.MICROSECOND:
            return timedelta(microseconds=frequency)
        if self is Unit.MILLISECOND:
            return timedelta(milliseconds=frequency)
        if self is Unit.SECOND:
            return timedelta(seconds=frequency)
        if self is Unit.MINUTE:
            return timedelta(minutes=frequency)
        if self is Unit.HOUR:
            return timedelta(hours=frequency)
        if self is Unit.DAY:
            return relativedelta(days=frequency)
        if self is Unit.WEEK:
            return relativedelta(days=frequency * 7)
        if self is Unit.MONTH:
            return relativedelta(months=frequency)
        return relativedelta(years=frequency)

    @classmethod
    def parse(cls, value: Union["Unit", str]) -> "Unit":
        """Resolve a unit from its code, member name or a common alias."""

        if isinstance(value, Unit):
            return value
        if not isinstance(value, str):
            raise ValueError(f"unsupported unit value: {value!r}")
        key = value.strip()
        if key in _BY_CODE:
            return _BY_CODE[key]
        lowered = key.lower()
        if lowered in _ALIASES:
            return _ALIASES[lowered]
        raise ValueError(f"unknown time unit: {value!r}")


_CALENDAR_UNITS = frozenset({Unit.DAY, Unit.WEEK, Unit.MONTH, Unit.YEAR})

_BY_CODE = {unit.value: unit for unit in Unit}

_ALIASES = {
    "nanosecond": Unit.NANOSECOND,
    "nanoseconds": Unit.NANOSECOND,
    "us": Unit.MICROSECOND,
    "microsecond": Unit.MICROSECOND,
    "microseconds": Unit.MICROSECOND,
    "millisecond": Unit.MILLISECOND,
    "milliseconds": Unit.MILLISECOND,
    "s": Unit.SECOND,
    "second": Unit.SECOND,
    "seconds": Unit.SECOND,
    "m": Unit.MINUTE,
    "minute": Unit.MINUTE,
    "minutes": Unit.MINUTE,
    "h": Unit.HOUR,
    "hour": Unit.HOUR,
    "hours": Unit.HOUR,
    "d": Unit.DAY,
    "days": Unit.DAY,
    "w": Unit.WEEK,
    "weeks": Unit.WEEK,
    "months": Unit.MONTH,
    "y": Unit.YEAR,
    "years": Unit.YEAR,
}
_ALIASES.update({unit.value.lower(): unit for unit in Unit})
_ALIASES.update({unit.name.lower(): unit for unit in Unit})
