# flatpricer: vanilla option pricing and flat-curve discounting
# Public API

# Errors
from .errors import PricingError, InvalidParameter, NumericalInstability

# Dates and conventions
from .daycount import (
    DayCounter, Actual365Fixed, Actual360, Thirty360, ActualActual,
    get_day_counter, register_day_counter,
)
from .calendar import (
    BusinessDayConvention, Calendar, NullCalendar, WeekendsOnly,
    UNADJUSTED, FOLLOWING, MODIFIED_FOLLOWING, PRECEDING, MODIFIED_PRECEDING,
)
from .interest_rate import (
    Compounding, Frequency, InterestRate,
    SIMPLE, COMPOUNDED, CONTINUOUS, SIMPLE_THEN_COMPOUNDED,
)

# Market data
from .curves import MarketQuote, FlatYieldCurve, FlatVolatilityCurve

# Option data model
from .core import (
    OptionSpec, CALL, PUT,
    Payoff, EuropeanExercise, AmericanExercise, OptionContract, PricingResult,
)

# Option pricing
from .black_scholes import price as bs_price, greeks as bs_greeks
from .barone_adesi_whaley import price as baw_price, critical_price
from .binomial import crr, crr_converged
from .pde import fd_price
from .risk import numerical_greeks
from .pricer import (
    Analytic, Approximation, Lattice, FiniteDifference, PricingMethod,
    price, price_european, price_american, price_spec, method_from_name,
)

# Fixed income
from .fixed_income import (
    ZeroCouponBond, discount_factor, settlement_date, redemption_date,
    zero_coupon_bond_npv, annuity_pv, day_count,
)

__all__ = [
    # Errors
    "PricingError", "InvalidParameter", "NumericalInstability",
    # Dates and conventions
    "DayCounter", "Actual365Fixed", "Actual360", "Thirty360", "ActualActual",
    "get_day_counter", "register_day_counter",
    "BusinessDayConvention", "Calendar", "NullCalendar", "WeekendsOnly",
    "UNADJUSTED", "FOLLOWING", "MODIFIED_FOLLOWING", "PRECEDING",
    "MODIFIED_PRECEDING",
    "Compounding", "Frequency", "InterestRate",
    "SIMPLE", "COMPOUNDED", "CONTINUOUS", "SIMPLE_THEN_COMPOUNDED",
    # Market data
    "MarketQuote", "FlatYieldCurve", "FlatVolatilityCurve",
    # Option data model
    "OptionSpec", "CALL", "PUT",
    "Payoff", "EuropeanExercise", "AmericanExercise", "OptionContract",
    "PricingResult",
    # Option pricing
    "bs_price", "bs_greeks", "baw_price", "critical_price",
    "crr", "crr_converged", "fd_price", "numerical_greeks",
    "Analytic", "Approximation", "Lattice", "FiniteDifference", "PricingMethod",
    "price", "price_european", "price_american", "price_spec",
    "method_from_name",
    # Fixed income
    "ZeroCouponBond", "discount_factor", "settlement_date", "redemption_date",
    "zero_coupon_bond_npv", "annuity_pv", "day_count",
]

__version__ = "0.1.0"
