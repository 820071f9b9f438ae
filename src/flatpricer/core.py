from __future__ import annotations

import math
from dataclasses import asdict, dataclass
from datetime import date
from typing import Optional, Union

from .curves import FlatVolatilityCurve, FlatYieldCurve, MarketQuote
from .errors import InvalidParameter, require_non_negative, require_positive
from .interest_rate import CONTINUOUS, Frequency

CALL = "call"
PUT  = "put"


# ---------------------------------------------------------------------------
# Scalar inputs consumed by the pricing kernels
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class OptionSpec:
    """Resolved numerical inputs of one vanilla option.

    Built from an ``OptionContract`` by ``OptionContract.to_spec``; the
    kernels in ``black_scholes``, ``barone_adesi_whaley``, ``binomial`` and
    ``pde`` only ever see this.
    """
    S0: float
    K: float
    T: float          # years
    r: float          # continuous risk-free
    sigma: float
    q: float = 0.0    # continuous dividend yield

    def __post_init__(self):
        for name in ("S0", "K", "T", "r", "sigma", "q"):
            v = getattr(self, name)
            if not math.isfinite(v):
                raise InvalidParameter(f"{name} must be finite, got {v}", name)
        require_positive(self.S0, "S0")
        require_positive(self.K, "K")
        require_non_negative(self.T, "T")
        require_non_negative(self.sigma, "sigma")


# ---------------------------------------------------------------------------
# Contract terms
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class Payoff:
    """Plain vanilla payoff: ``max(S-K, 0)`` for calls, ``max(K-S, 0)`` for puts."""
    kind: str
    strike: float

    def __post_init__(self):
        if self.kind not in (CALL, PUT):
            raise InvalidParameter(
                f"kind must be 'call' or 'put', got {self.kind!r}", "kind"
            )
        require_positive(self.strike, "strike")

    def __call__(self, price: float) -> float:
        if self.kind == CALL:
            return max(price - self.strike, 0.0)
        return max(self.strike - price, 0.0)


@dataclass(frozen=True)
class EuropeanExercise:
    maturity: date


@dataclass(frozen=True)
class AmericanExercise:
    """Exercise allowed on any date in ``[earliest, maturity]``."""
    earliest: date
    maturity: date

    def __post_init__(self):
        if self.earliest > self.maturity:
            raise InvalidParameter(
                f"earliest exercise {self.earliest} is after maturity {self.maturity}",
                "earliest",
            )


Exercise = Union[EuropeanExercise, AmericanExercise]


@dataclass(frozen=True)
class OptionContract:
    """Payoff + exercise + the market it is valued in.

    Parameters
    ----------
    payoff : Payoff
    exercise : EuropeanExercise or AmericanExercise
    spot : MarketQuote
        Underlying price.
    risk_free : FlatYieldCurve
    volatility : FlatVolatilityCurve
    valuation_date : date
        Every time-to-maturity is measured from here.
    dividend : FlatYieldCurve, optional
        Continuous dividend / carry yield; none means zero.
    """
    payoff: Payoff
    exercise: Exercise
    spot: MarketQuote
    risk_free: FlatYieldCurve
    volatility: FlatVolatilityCurve
    valuation_date: date
    dividend: Optional[FlatYieldCurve] = None

    def __post_init__(self):
        if not isinstance(self.spot, MarketQuote):
            object.__setattr__(self, "spot", MarketQuote(float(self.spot), "spot"))
        require_positive(self.spot.value, "spot")
        if self.exercise.maturity < self.valuation_date:
            raise InvalidParameter(
                f"maturity {self.exercise.maturity} precedes valuation date "
                f"{self.valuation_date}",
                "maturity",
            )

    @property
    def kind(self) -> str:
        return self.payoff.kind

    @property
    def is_american(self) -> bool:
        return isinstance(self.exercise, AmericanExercise)

    def time_to_maturity(self) -> float:
        return self.volatility.day_counter.year_fraction(
            self.valuation_date, self.exercise.maturity
        )

    def to_spec(self) -> OptionSpec:
        """Resolve curves and dates into continuous-rate scalar inputs."""
        T = self.time_to_maturity()
        r = _continuous_rate(self.risk_free, self.valuation_date, self.exercise.maturity, T)
        q = 0.0
        if self.dividend is not None:
            q = _continuous_rate(self.dividend, self.valuation_date, self.exercise.maturity, T)
        return OptionSpec(
            S0=self.spot.value,
            K=self.payoff.strike,
            T=T,
            r=r,
            sigma=self.volatility.black_vol(self.exercise.maturity),
            q=q,
        )


def _continuous_rate(curve: FlatYieldCurve, start: date, end: date, T: float) -> float:
    if T > 0:
        return -math.log(curve.discount_factor(start, end)) / T
    if curve.compounding == CONTINUOUS:
        return curve.zero_rate()
    return curve.interest_rate().equivalent_rate(CONTINUOUS, Frequency.ANNUAL, 1.0).rate


# ---------------------------------------------------------------------------
# Output
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class PricingResult:
    """Value plus whatever sensitivities the pricing method provides.

    Theta is per year of calendar time, vega per unit of volatility and rho
    per unit of rate.
    """
    value: float
    delta: Optional[float] = None
    gamma: Optional[float] = None
    theta: Optional[float] = None
    vega: Optional[float] = None
    rho: Optional[float] = None
    method: str = ""

    @property
    def has_greeks(self) -> bool:
        return self.delta is not None

    def as_dict(self) -> dict:
        return asdict(self)
