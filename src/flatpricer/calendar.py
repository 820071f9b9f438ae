"""Business-day calendars and date-rolling conventions.

Holiday schedules are not generated here: a calendar is a weekmask plus an
explicit holiday list supplied by the caller, evaluated with numpy's
business-day functions.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Iterable

import numpy as np

from .errors import coerce_enum

__all__ = [
    "BusinessDayConvention",
    "UNADJUSTED",
    "FOLLOWING",
    "MODIFIED_FOLLOWING",
    "PRECEDING",
    "MODIFIED_PRECEDING",
    "Calendar",
    "NullCalendar",
    "WeekendsOnly",
]


class BusinessDayConvention(str, Enum):
    """How a date falling on a non-business day is rolled."""

    UNADJUSTED = "unadjusted"
    FOLLOWING = "following"
    MODIFIED_FOLLOWING = "modifiedfollowing"
    PRECEDING = "preceding"
    MODIFIED_PRECEDING = "modifiedpreceding"


UNADJUSTED = BusinessDayConvention.UNADJUSTED
FOLLOWING = BusinessDayConvention.FOLLOWING
MODIFIED_FOLLOWING = BusinessDayConvention.MODIFIED_FOLLOWING
PRECEDING = BusinessDayConvention.PRECEDING
MODIFIED_PRECEDING = BusinessDayConvention.MODIFIED_PRECEDING


def _d64(d: date) -> np.datetime64:
    return np.datetime64(d, "D")


@dataclass(frozen=True)
class Calendar:
    """Weekmask + holiday list.

    Parameters
    ----------
    weekmask : str
        Seven characters, Monday first; ``"1"`` marks a working weekday.
    holidays : iterable of date
        Additional non-business days.
    name : str
        Label used in output.
    """

    weekmask: str = "1111100"
    holidays: tuple[date, ...] = ()
    name: str = "Calendar"
    _busdaycal: np.busdaycalendar = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "holidays", tuple(sorted(self.holidays)))
        object.__setattr__(
            self,
            "_busdaycal",
            np.busdaycalendar(
                weekmask=self.weekmask,
                holidays=[_d64(h) for h in self.holidays],
            ),
        )

    def is_business_day(self, d: date) -> bool:
        return bool(np.is_busday(_d64(d), busdaycal=self._busdaycal))

    def adjust(
        self, d: date, convention: BusinessDayConvention = FOLLOWING
    ) -> date:
        """Roll *d* onto a business day according to *convention*."""
        convention = coerce_enum(BusinessDayConvention, convention, "convention")
        if convention is UNADJUSTED:
            return d
        rolled = np.busday_offset(
            _d64(d), 0, roll=convention.value, busdaycal=self._busdaycal
        )
        return rolled.item()

    def advance(self, d: date, n: int) -> date:
        """Move *n* business days from *d*.

        ``n == 0`` returns *d* rolled forward to a business day.
        """
        roll = "following" if n >= 0 else "preceding"
        moved = np.busday_offset(_d64(d), n, roll=roll, busdaycal=self._busdaycal)
        return moved.item()

    def business_days_between(self, start: date, end: date) -> int:
        """Business days in ``[start, end)``."""
        return int(np.busday_count(_d64(start), _d64(end), busdaycal=self._busdaycal))

    def with_holidays(self, holidays: Iterable[date]) -> "Calendar":
        return Calendar(
            weekmask=self.weekmask,
            holidays=tuple(self.holidays) + tuple(holidays),
            name=self.name,
        )


def NullCalendar() -> Calendar:
    """Every day is a business day."""
    return Calendar(weekmask="1111111", name="NullCalendar")


def WeekendsOnly(holidays: Iterable[date] = ()) -> Calendar:
    """Saturdays and Sundays are holidays, plus any supplied dates."""
    return Calendar(weekmask="1111100", holidays=tuple(holidays), name="WeekendsOnly")
