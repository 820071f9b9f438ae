"""Day count conventions.

A day counter turns a pair of dates into a day count and a fraction of a
year.  Counters are stateless, so the module-level instances below can be
shared freely.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Dict

from .errors import InvalidParameter

__all__ = [
    "DayCounter",
    "Actual365Fixed",
    "Actual360",
    "Thirty360",
    "ActualActual",
    "get_day_counter",
    "register_day_counter",
]


@dataclass(frozen=True)
class DayCounter:
    """Base convention: actual days over a fixed year basis."""

    name: str = "ACT/365F"
    basis: float = 365.0

    def day_count(self, start: date, end: date) -> int:
        return (end - start).days

    def year_fraction(self, start: date, end: date) -> float:
        return self.day_count(start, end) / self.basis

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class Actual365Fixed(DayCounter):
    name: str = "ACT/365F"
    basis: float = 365.0


@dataclass(frozen=True)
class Actual360(DayCounter):
    name: str = "ACT/360"
    basis: float = 360.0


@dataclass(frozen=True)
class Thirty360(DayCounter):
    """30/360 bond basis.

    The start day is capped at 30; the end day is capped at 30 only when
    the (capped) start day is 30.
    """

    name: str = "30/360"
    basis: float = 360.0

    def day_count(self, start: date, end: date) -> int:
        d1, d2 = start.day, end.day
        if d1 == 31:
            d1 = 30
        if d2 == 31 and d1 == 30:
            d2 = 30
        return (
            360 * (end.year - start.year)
            + 30 * (end.month - start.month)
            + (d2 - d1)
        )


def _days_in_year(year: int) -> int:
    return (date(year + 1, 1, 1) - date(year, 1, 1)).days


@dataclass(frozen=True)
class ActualActual(DayCounter):
    """Actual/Actual (ISDA): each calendar year's share is weighted by its length."""

    name: str = "ACT/ACT"
    basis: float = 365.0

    def year_fraction(self, start: date, end: date) -> float:
        if start == end:
            return 0.0
        if start > end:
            return -self.year_fraction(end, start)
        if start.year == end.year:
            return (end - start).days / _days_in_year(start.year)
        head = (date(start.year + 1, 1, 1) - start).days / _days_in_year(start.year)
        tail = (end - date(end.year, 1, 1)).days / _days_in_year(end.year)
        return head + (end.year - start.year - 1) + tail


_REGISTRY: Dict[str, DayCounter] = {
    "ACT/365F": Actual365Fixed(),
    "ACT/360": Actual360(),
    "30/360": Thirty360(),
    "ACT/ACT": ActualActual(),
}

_ALIASES = {
    "ACTUAL365FIXED": "ACT/365F",
    "ACT/365": "ACT/365F",
    "ACTUAL360": "ACT/360",
    "THIRTY360": "30/360",
    "ACTUALACTUAL": "ACT/ACT",
}


def get_day_counter(name: str) -> DayCounter:
    """Return the day counter registered under *name* (case-insensitive)."""
    key = name.strip().upper()
    key = _ALIASES.get(key, key)
    try:
        return _REGISTRY[key]
    except KeyError as exc:
        raise InvalidParameter(
            f"Unsupported day count convention: {name}", "day_counter"
        ) from exc


def register_day_counter(name: str, counter: DayCounter) -> None:
    """Register a custom convention under *name*."""
    key = name.strip().upper()
    if key in _REGISTRY:
        raise InvalidParameter(f"Day counter '{name}' already registered", "day_counter")
    _REGISTRY[key] = counter
