"""Discounting of deterministic cash flows under a flat yield.

Covers discount factors between two dates, zero coupon bond NPV, the
present value of a level annuity, and day counting.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional, Union

from .calendar import FOLLOWING, BusinessDayConvention, Calendar
from .curves import FlatYieldCurve
from .daycount import DayCounter, get_day_counter
from .errors import (
    InvalidParameter, coerce_enum, require_non_negative, require_positive,
)
from .interest_rate import InterestRate

__all__ = [
    "ZeroCouponBond",
    "discount_factor",
    "settlement_date",
    "redemption_date",
    "zero_coupon_bond_npv",
    "annuity_pv",
    "day_count",
]


@dataclass(frozen=True)
class ZeroCouponBond:
    """Bond paying a single redemption amount at maturity.

    Parameters
    ----------
    face_amount : float
        Notional.
    maturity : date
        Unadjusted redemption date.
    issue_date : date
    settlement_days : int
        Business days between trade and settlement.
    redemption : float
        Redemption price in percent of face (100 = par).
    convention : BusinessDayConvention
        Rolling rule for the redemption date.
    """

    face_amount: float
    maturity: date
    issue_date: date
    settlement_days: int = 2
    redemption: float = 100.0
    convention: BusinessDayConvention = FOLLOWING

    def __post_init__(self):
        require_positive(self.face_amount, "face_amount")
        require_non_negative(self.redemption, "redemption")
        if self.settlement_days < 0:
            raise InvalidParameter(
                f"settlement_days must be non-negative, got {self.settlement_days}",
                "settlement_days",
            )
        if self.maturity < self.issue_date:
            raise InvalidParameter(
                f"maturity {self.maturity} precedes issue date {self.issue_date}",
                "maturity",
            )
        object.__setattr__(
            self, "convention",
            coerce_enum(BusinessDayConvention, self.convention, "convention"),
        )

    @property
    def redemption_amount(self) -> float:
        return self.face_amount * self.redemption / 100.0


def discount_factor(curve: FlatYieldCurve, from_date: date, to_date: date) -> float:
    """Discount factor between two dates under the curve's own convention.

    ``exp(-r t)`` for continuous, ``(1 + r/m)**(-m t)`` for compounded and
    ``1 / (1 + r t)`` for simple compounding, where ``t`` is the curve day
    counter's year fraction.
    """
    if from_date > to_date:
        raise InvalidParameter(
            f"from_date {from_date} is after to_date {to_date}", "from_date"
        )
    if from_date == to_date:
        return 1.0
    return curve.discount_factor(from_date, to_date)


def settlement_date(
    bond: ZeroCouponBond, calendar: Calendar, trade_date: Optional[date] = None
) -> date:
    """Trade date (the issue date by default) plus the settlement lag in business days."""
    start = bond.issue_date if trade_date is None else trade_date
    return max(calendar.advance(start, bond.settlement_days), bond.issue_date)


def redemption_date(bond: ZeroCouponBond, calendar: Calendar) -> date:
    return calendar.adjust(bond.maturity, bond.convention)


def zero_coupon_bond_npv(
    bond: ZeroCouponBond,
    curve: FlatYieldCurve,
    calendar: Calendar,
    trade_date: Optional[date] = None,
) -> float:
    """Redemption amount discounted from the redemption date to settlement.

    A bond that redeems on or before settlement is worth nothing.
    """
    settle = settlement_date(bond, calendar, trade_date)
    pay = redemption_date(bond, calendar)
    if pay <= settle:
        return 0.0
    return bond.redemption_amount * discount_factor(curve, settle, pay)


def annuity_pv(
    payment: float,
    rate: InterestRate,
    num_periods: int,
    *,
    include_initial: bool = False,
) -> float:
    """Present value of *payment* received at the end of each of *num_periods* years.

    Every period is discounted with the same ``InterestRate``.  With
    ``include_initial`` an extra undiscounted payment at time zero is added,
    i.e. the sum runs over ``i = 0 .. num_periods``.
    """
    if num_periods < 0:
        raise InvalidParameter(
            f"num_periods must be non-negative, got {num_periods}", "num_periods"
        )
    first = 0 if include_initial else 1
    return float(sum(payment * rate.discount_factor(i) for i in range(first, num_periods + 1)))


def day_count(
    from_date: date, to_date: date, convention: Union[DayCounter, str] = "ACT/365F"
) -> float:
    """Days between two dates under *convention* (an instance or a registered name)."""
    if isinstance(convention, str):
        convention = get_day_counter(convention)
    return float(convention.day_count(from_date, to_date))
