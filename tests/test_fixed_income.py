import math
from datetime import date

import pytest
from flatpricer import (
    COMPOUNDED, CONTINUOUS, SIMPLE, Actual360, Frequency, FlatYieldCurve,
    InterestRate, InvalidParameter, MarketQuote, NullCalendar, PricingError,
    Thirty360, WeekendsOnly, ZeroCouponBond, annuity_pv, day_count,
    discount_factor, redemption_date, settlement_date, zero_coupon_bond_npv,
)

ISSUE = date(2021, 12, 31)
MATURITY = date(2023, 12, 31)


def _curve(rate=0.05, **kw):
    return FlatYieldCurve(ISSUE, MarketQuote(rate, "yield"), **kw)


class TestDiscountFactor:
    @pytest.mark.parametrize("compounding", [SIMPLE, COMPOUNDED, CONTINUOUS])
    def test_same_date_is_one(self, compounding):
        curve = _curve(compounding=compounding, frequency=Frequency.QUARTERLY)
        assert discount_factor(curve, ISSUE, ISSUE) == 1.0

    def test_continuous(self):
        df = discount_factor(_curve(), date(2022, 1, 1), date(2023, 1, 1))
        assert abs(df - math.exp(-0.05)) < 1e-15

    def test_compounded(self):
        curve = _curve(compounding=COMPOUNDED, frequency=Frequency.SEMIANNUAL)
        df = discount_factor(curve, date(2022, 1, 1), date(2024, 1, 1))
        assert abs(df - 1.025 ** -4) < 1e-12

    def test_simple(self):
        curve = _curve(0.036, day_counter=Actual360(), compounding=SIMPLE)
        df = discount_factor(curve, date(2023, 1, 1), date(2023, 7, 20))
        assert abs(df - 1 / 1.02) < 1e-14

    def test_reversed_dates(self):
        with pytest.raises(InvalidParameter):
            discount_factor(_curve(), date(2023, 1, 1), date(2022, 1, 1))


class TestZeroCouponBond:
    def test_settlement_and_redemption_dates(self):
        bond = ZeroCouponBond(100.0, MATURITY, ISSUE)
        assert settlement_date(bond, WeekendsOnly()) == date(2022, 1, 4)
        assert redemption_date(bond, WeekendsOnly()) == date(2024, 1, 1)

    def test_npv(self):
        bond = ZeroCouponBond(100.0, MATURITY, ISSUE)
        days = (date(2024, 1, 1) - date(2022, 1, 4)).days
        npv = zero_coupon_bond_npv(bond, _curve(), WeekendsOnly())
        assert abs(npv - 100.0 * math.exp(-0.05 * days / 365)) < 1e-10

    def test_npv_with_null_calendar(self):
        bond = ZeroCouponBond(100.0, MATURITY, ISSUE)
        days = (MATURITY - date(2022, 1, 2)).days
        npv = zero_coupon_bond_npv(bond, _curve(), NullCalendar())
        assert abs(npv - 100.0 * math.exp(-0.05 * days / 365)) < 1e-10

    def test_redemption_percent_of_face(self):
        bond = ZeroCouponBond(1_000.0, MATURITY, ISSUE, redemption=101.0)
        assert bond.redemption_amount == 1_010.0
        par = ZeroCouponBond(1_000.0, MATURITY, ISSUE)
        ratio = (zero_coupon_bond_npv(bond, _curve(), WeekendsOnly())
                 / zero_coupon_bond_npv(par, _curve(), WeekendsOnly()))
        assert abs(ratio - 1.01) < 1e-12

    def test_trade_date_after_redemption(self):
        bond = ZeroCouponBond(100.0, MATURITY, ISSUE)
        assert zero_coupon_bond_npv(bond, _curve(), WeekendsOnly(),
                                    trade_date=date(2024, 1, 5)) == 0.0

    def test_settlement_never_before_issue(self):
        bond = ZeroCouponBond(100.0, MATURITY, ISSUE, settlement_days=0)
        assert settlement_date(bond, WeekendsOnly(), date(2021, 12, 1)) == ISSUE

    def test_invalid_bond(self):
        with pytest.raises(InvalidParameter) as exc:
            ZeroCouponBond(100.0, ISSUE, MATURITY)
        assert exc.value.field == "maturity"
        with pytest.raises(InvalidParameter):
            ZeroCouponBond(0.0, MATURITY, ISSUE)
        with pytest.raises(InvalidParameter):
            ZeroCouponBond(100.0, MATURITY, ISSUE, settlement_days=-1)

    def test_unknown_convention(self):
        with pytest.raises(PricingError) as exc:
            ZeroCouponBond(100.0, MATURITY, ISSUE, convention="nope")
        assert isinstance(exc.value, InvalidParameter)
        assert exc.value.field == "convention"

    def test_unknown_curve_compounding(self):
        with pytest.raises(InvalidParameter) as exc:
            _curve(compounding="weird")
        assert exc.value.field == "compounding"


class TestAnnuity:
    RATE = InterestRate(0.05, compounding=COMPOUNDED, frequency=Frequency.QUARTERLY)

    def test_with_initial_payment(self):
        expected = sum(1.0125 ** (-4 * i) for i in range(6))
        assert abs(annuity_pv(1.0, self.RATE, 5, include_initial=True) - expected) < 1e-12

    def test_ordinary(self):
        expected = sum(1.0125 ** (-4 * i) for i in range(1, 6))
        assert abs(annuity_pv(1.0, self.RATE, 5) - expected) < 1e-12

    def test_zero_periods(self):
        assert annuity_pv(100.0, self.RATE, 0) == 0.0
        assert annuity_pv(100.0, self.RATE, 0, include_initial=True) == 100.0

    def test_scales_with_payment(self):
        assert abs(annuity_pv(250.0, self.RATE, 10) - 250.0 * annuity_pv(1.0, self.RATE, 10)) < 1e-10

    def test_negative_periods(self):
        with pytest.raises(InvalidParameter) as exc:
            annuity_pv(1.0, self.RATE, -1)
        assert exc.value.field == "num_periods"


class TestDayCount:
    def test_default_convention(self):
        assert day_count(date(2023, 1, 1), date(2023, 12, 31)) == 364.0

    def test_named_convention(self):
        assert day_count(date(2023, 1, 31), date(2023, 2, 28), "30/360") == 28.0

    def test_instance(self):
        assert day_count(date(2023, 1, 30), date(2023, 3, 31), Thirty360()) == 60.0

    def test_same_date(self):
        assert day_count(ISSUE, ISSUE) == 0.0
