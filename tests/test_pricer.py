"""Tests for contract resolution and the pricing entry point."""

import math
from concurrent.futures import ThreadPoolExecutor
from datetime import date

import pytest
from flatpricer import (
    CALL, PUT, Actual360, Analytic, Approximation, AmericanExercise,
    EuropeanExercise, FiniteDifference, FlatVolatilityCurve, FlatYieldCurve,
    InvalidParameter, Lattice, MarketQuote, OptionContract, Payoff,
    Frequency, COMPOUNDED, method_from_name, price, price_american,
    price_european,
)

TODAY = date(2023, 8, 2)
MATURITY = date(2023, 8, 15)
RATE = MarketQuote(0.05, "rate")
VOL = MarketQuote(0.2, "volatility")


def _contract(exercise=None, *, kind=CALL, strike=95.0, spot=100.0, rate=RATE,
              vol=VOL, valuation_date=TODAY, dividend=None):
    return OptionContract(
        payoff=Payoff(kind, strike),
        exercise=exercise or EuropeanExercise(MATURITY),
        spot=MarketQuote(spot, "spot"),
        risk_free=FlatYieldCurve(TODAY, rate),
        volatility=FlatVolatilityCurve(TODAY, vol),
        valuation_date=valuation_date,
        dividend=dividend,
    )


def _ref_call(S, K, T, r, sigma):
    N = lambda x: 0.5 * (1.0 + math.erf(x / math.sqrt(2.0)))
    d1 = (math.log(S / K) + (r + 0.5 * sigma ** 2) * T) / (sigma * math.sqrt(T))
    return S * N(d1) - K * math.exp(-r * T) * N(d1 - sigma * math.sqrt(T))


class TestScenario:
    def test_european_matches_reference(self):
        res = price_european(_contract())
        assert abs(res.value - _ref_call(100, 95, 13 / 365, 0.05, 0.2)) < 1e-6
        assert res.method == "analytic"
        assert res.has_greeks

    def test_american_geq_european(self):
        eu = price_european(_contract())
        am = price_american(_contract(AmericanExercise(TODAY, MATURITY)))
        assert am.value >= eu.value
        assert am.method == "baw"
        for key in ("delta", "gamma", "theta", "vega", "rho"):
            assert getattr(am, key) is not None

    def test_dispatch_on_exercise(self):
        assert price(_contract()).method == "analytic"
        assert price(_contract(AmericanExercise(TODAY, MATURITY))).method == "baw"

    def test_shared_quote_between_curves(self):
        shared = MarketQuote(0.05, "rate")
        c = _contract(rate=shared, dividend=FlatYieldCurve(TODAY, shared))
        assert c.risk_free.quote is c.dividend.quote
        spec = c.to_spec()
        assert abs(spec.r - spec.q) < 1e-15


class TestResolution:
    def test_time_uses_vol_day_counter(self):
        c = OptionContract(
            payoff=Payoff(CALL, 100.0),
            exercise=EuropeanExercise(date(2024, 8, 2)),
            spot=MarketQuote(100.0),
            risk_free=FlatYieldCurve(TODAY, RATE),
            volatility=FlatVolatilityCurve(TODAY, VOL, Actual360()),
            valuation_date=TODAY,
        )
        assert abs(c.to_spec().T - 366 / 360) < 1e-15

    def test_compounded_curve_converted_to_continuous(self):
        curve = FlatYieldCurve(TODAY, RATE, compounding=COMPOUNDED,
                               frequency=Frequency.ANNUAL)
        c = OptionContract(Payoff(CALL, 100.0), EuropeanExercise(date(2024, 8, 1)),
                           MarketQuote(100.0), curve, FlatVolatilityCurve(TODAY, VOL),
                           TODAY)
        assert abs(c.to_spec().r - math.log(1.05)) < 1e-12

    def test_expiry_today(self):
        c = _contract(EuropeanExercise(TODAY))
        assert price(c).value == 5.0

    def test_dividend_lowers_call(self):
        q = FlatYieldCurve(TODAY, MarketQuote(0.03, "dividend"))
        assert price(_contract(dividend=q)).value < price(_contract()).value


class TestMethods:
    def test_lattice_european_close_to_analytic(self):
        c = _contract(strike=100.0, exercise=EuropeanExercise(date(2024, 8, 2)))
        tree = price(c, Lattice(steps=400))
        assert abs(tree.value - price(c).value) < 0.02
        assert abs(tree.delta - price(c).delta) < 0.02

    def test_fd_american_put_close_to_baw(self):
        c = _contract(AmericanExercise(TODAY, date(2024, 2, 2)), kind=PUT, strike=100.0)
        fd = price(c, FiniteDifference(grid_points=200, time_steps=100))
        assert abs(fd.value - price(c).value) < 0.1

    def test_lattice_with_tolerance(self):
        c = _contract(AmericanExercise(TODAY, MATURITY), kind=PUT, strike=100.0)
        res = price(c, Lattice(steps=100, tolerance=1e-3))
        assert res.value > 0

    def test_analytic_rejects_american(self):
        with pytest.raises(InvalidParameter) as exc:
            price(_contract(AmericanExercise(TODAY, MATURITY)), Analytic())
        assert exc.value.field == "method"

    def test_approximation_rejects_european(self):
        with pytest.raises(InvalidParameter):
            price(_contract(), Approximation())

    def test_method_from_name(self):
        assert method_from_name("BAW") == Approximation()
        assert method_from_name("crr", steps=50) == Lattice(steps=50)
        with pytest.raises(InvalidParameter):
            method_from_name("monte-carlo")

    def test_concurrent_calls_agree(self):
        c = _contract(AmericanExercise(TODAY, MATURITY), kind=PUT, strike=105.0)
        expected = price(c)
        with ThreadPoolExecutor(max_workers=4) as pool:
            results = list(pool.map(lambda _: price(c), range(8)))
        assert all(r == expected for r in results)


class TestInvalidParameters:
    def test_non_positive_strike(self):
        with pytest.raises(InvalidParameter) as exc:
            _contract(strike=0.0)
        assert exc.value.field == "strike"

    def test_non_positive_spot(self):
        with pytest.raises(InvalidParameter) as exc:
            _contract(spot=-1.0)
        assert exc.value.field == "spot"

    def test_negative_vol(self):
        with pytest.raises(InvalidParameter) as exc:
            _contract(vol=MarketQuote(-0.2, "volatility"))
        assert exc.value.field == "volatility"

    def test_maturity_before_valuation(self):
        with pytest.raises(InvalidParameter) as exc:
            _contract(valuation_date=date(2023, 9, 1))
        assert exc.value.field == "maturity"

    def test_american_window(self):
        with pytest.raises(InvalidParameter):
            AmericanExercise(MATURITY, TODAY)

    def test_is_value_error(self):
        with pytest.raises(ValueError):
            Payoff("call", -5.0)


class TestPayoff:
    def test_call(self):
        assert Payoff(CALL, 95.0)(100.0) == 5.0
        assert Payoff(CALL, 95.0)(90.0) == 0.0

    def test_put(self):
        assert Payoff(PUT, 95.0)(90.0) == 5.0
