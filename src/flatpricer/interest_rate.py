"""Interest rates with an explicit compounding convention."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import date
from enum import Enum, IntEnum

from .daycount import Actual365Fixed, DayCounter
from .errors import InvalidParameter, NumericalInstability, coerce_enum

__all__ = [
    "Compounding",
    "Frequency",
    "SIMPLE",
    "COMPOUNDED",
    "CONTINUOUS",
    "SIMPLE_THEN_COMPOUNDED",
    "InterestRate",
]


class Compounding(str, Enum):
    SIMPLE = "simple"
    COMPOUNDED = "compounded"
    CONTINUOUS = "continuous"
    SIMPLE_THEN_COMPOUNDED = "simple_then_compounded"


SIMPLE = Compounding.SIMPLE
COMPOUNDED = Compounding.COMPOUNDED
CONTINUOUS = Compounding.CONTINUOUS
SIMPLE_THEN_COMPOUNDED = Compounding.SIMPLE_THEN_COMPOUNDED


class Frequency(IntEnum):
    """Compounding periods per year."""

    ONCE = 0
    ANNUAL = 1
    SEMIANNUAL = 2
    QUARTERLY = 4
    MONTHLY = 12
    WEEKLY = 52
    DAILY = 365


_PERIODIC = (COMPOUNDED, SIMPLE_THEN_COMPOUNDED)


@dataclass(frozen=True)
class InterestRate:
    """A rate together with the rules needed to turn it into growth factors.

    Parameters
    ----------
    rate : float
        Annualised rate, e.g. ``0.05``.
    day_counter : DayCounter
        Used by the date-based methods.
    compounding : Compounding
        Simple, periodically compounded, continuous, or simple up to one
        period then compounded.
    frequency : Frequency
        Periods per year; must be positive for periodic compounding.
    """

    rate: float
    day_counter: DayCounter = field(default_factory=Actual365Fixed)
    compounding: Compounding = CONTINUOUS
    frequency: Frequency = Frequency.ANNUAL

    def __post_init__(self):
        if not math.isfinite(self.rate):
            raise InvalidParameter(f"rate must be finite, got {self.rate}", "rate")
        object.__setattr__(
            self, "compounding", coerce_enum(Compounding, self.compounding, "compounding")
        )
        object.__setattr__(
            self, "frequency", coerce_enum(Frequency, self.frequency, "frequency")
        )
        if self.compounding in _PERIODIC and not int(self.frequency) > 0:
            raise InvalidParameter(
                f"{self.compounding.value} compounding needs a positive frequency, "
                f"got {self.frequency}",
                "frequency",
            )

    def compound_factor(self, t: float) -> float:
        """Growth of one unit over *t* years."""
        if t < 0:
            raise InvalidParameter(f"time must be non-negative, got {t}", "t")
        r = self.rate
        if self.compounding is SIMPLE:
            return 1.0 + r * t
        if self.compounding is CONTINUOUS:
            return math.exp(r * t)
        f = int(self.frequency)
        if self.compounding is SIMPLE_THEN_COMPOUNDED and t <= 1.0 / f:
            return 1.0 + r * t
        base = 1.0 + r / f
        if base <= 0:
            raise NumericalInstability(
                f"compounding base 1 + r/m = {base} is not positive", "rate"
            )
        return base ** (f * t)

    def discount_factor(self, t: float) -> float:
        c = self.compound_factor(t)
        if not c > 0 or not math.isfinite(c):
            raise NumericalInstability(f"compound factor {c} cannot be inverted", "rate")
        return 1.0 / c

    def compound_factor_between(self, start: date, end: date) -> float:
        return self.compound_factor(self.day_counter.year_fraction(start, end))

    def discount_factor_between(self, start: date, end: date) -> float:
        return self.discount_factor(self.day_counter.year_fraction(start, end))

    @classmethod
    def implied_rate(
        cls,
        compound: float,
        day_counter: DayCounter,
        compounding: Compounding,
        frequency: Frequency,
        t: float,
    ) -> "InterestRate":
        """Rate that grows one unit into *compound* over *t* years."""
        if not compound > 0:
            raise InvalidParameter(
                f"compound factor must be positive, got {compound}", "compound"
            )
        compounding = coerce_enum(Compounding, compounding, "compounding")
        if compound == 1.0:
            return cls(0.0, day_counter, compounding, frequency)
        if not t > 0:
            raise InvalidParameter(f"time must be positive, got {t}", "t")
        f = int(frequency)
        if compounding is SIMPLE or (compounding is SIMPLE_THEN_COMPOUNDED and f > 0 and t <= 1.0 / f):
            r = (compound - 1.0) / t
        elif compounding is CONTINUOUS:
            r = math.log(compound) / t
        else:
            if not f > 0:
                raise InvalidParameter(
                    f"{compounding.value} compounding needs a positive frequency",
                    "frequency",
                )
            r = (compound ** (1.0 / (f * t)) - 1.0) * f
        return cls(r, day_counter, compounding, frequency)

    def equivalent_rate(
        self,
        compounding: Compounding,
        frequency: Frequency,
        t: float,
    ) -> "InterestRate":
        """Same growth over *t* years, expressed under another convention."""
        return self.implied_rate(
            self.compound_factor(t), self.day_counter, compounding, frequency, t
        )

    def __str__(self) -> str:
        label = self.compounding.value
        if self.compounding in _PERIODIC:
            label = f"{label} {self.frequency.name.lower()}"
        return f"{self.rate:.6%} {self.day_counter} {label}"
