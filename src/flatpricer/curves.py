"""Quotes and flat term structures.

A curve holds a reference to its ``MarketQuote``; several curves may share
one quote object.  Everything is immutable, so a new valuation with a moved
market means new quote and curve objects.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import date

from .daycount import Actual365Fixed, DayCounter
from .errors import InvalidParameter
from .interest_rate import CONTINUOUS, Compounding, Frequency, InterestRate

__all__ = ["MarketQuote", "FlatYieldCurve", "FlatVolatilityCurve"]


@dataclass(frozen=True)
class MarketQuote:
    """A single observable: a spot price, a flat rate or a flat vol."""

    value: float
    name: str = ""

    def __post_init__(self):
        if not math.isfinite(self.value):
            field_name = self.name or "quote"
            raise InvalidParameter(
                f"{field_name} must be finite, got {self.value}", field_name
            )

    def __float__(self) -> float:
        return float(self.value)


def _as_quote(value: MarketQuote | float, name: str) -> MarketQuote:
    if isinstance(value, MarketQuote):
        return value
    return MarketQuote(float(value), name)


@dataclass(frozen=True)
class FlatYieldCurve:
    """Same zero rate for every date.

    Parameters
    ----------
    reference_date : date
        Date at which discount factors equal one.
    quote : MarketQuote or float
        The flat rate.
    day_counter : DayCounter
        Converts dates into year fractions.
    compounding, frequency
        Convention under which the quoted rate is expressed.
    """

    reference_date: date
    quote: MarketQuote
    day_counter: DayCounter = field(default_factory=Actual365Fixed)
    compounding: Compounding = CONTINUOUS
    frequency: Frequency = Frequency.ANNUAL

    def __post_init__(self):
        object.__setattr__(self, "quote", _as_quote(self.quote, "rate"))
        # validates compounding/frequency up front
        self.interest_rate()

    def interest_rate(self) -> InterestRate:
        return InterestRate(
            self.quote.value, self.day_counter, self.compounding, self.frequency
        )

    def zero_rate(self) -> float:
        return self.quote.value

    def discount_factor(self, start: date, end: date) -> float:
        return self.interest_rate().discount_factor_between(start, end)

    def discount(self, d: date) -> float:
        """Discount factor from the reference date to *d*."""
        return self.discount_factor(self.reference_date, d)


@dataclass(frozen=True)
class FlatVolatilityCurve:
    """Same Black volatility for every date and strike."""

    reference_date: date
    quote: MarketQuote
    day_counter: DayCounter = field(default_factory=Actual365Fixed)

    def __post_init__(self):
        object.__setattr__(self, "quote", _as_quote(self.quote, "volatility"))
        if self.quote.value < 0:
            raise InvalidParameter(
                f"volatility must be non-negative, got {self.quote.value}",
                "volatility",
            )

    def black_vol(self, d: date | None = None) -> float:
        return self.quote.value

    def black_variance(self, d: date) -> float:
        t = self.day_counter.year_fraction(self.reference_date, d)
        return self.quote.value ** 2 * t
