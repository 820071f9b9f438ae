from datetime import date

import pytest
from flatpricer import (
    FOLLOWING, MODIFIED_FOLLOWING, MODIFIED_PRECEDING, PRECEDING, UNADJUSTED,
    Calendar, InvalidParameter, NullCalendar, PricingError, WeekendsOnly,
)


class TestWeekendsOnly:
    def test_is_business_day(self):
        cal = WeekendsOnly()
        assert cal.is_business_day(date(2023, 8, 2))
        assert not cal.is_business_day(date(2023, 8, 5))
        assert not cal.is_business_day(date(2023, 8, 6))

    def test_advance_over_weekend(self):
        # Friday + 2 business days
        assert WeekendsOnly().advance(date(2021, 12, 31), 2) == date(2022, 1, 4)

    def test_advance_over_holiday(self):
        cal = WeekendsOnly([date(2022, 1, 3)])
        assert not cal.is_business_day(date(2022, 1, 3))
        assert cal.advance(date(2021, 12, 31), 2) == date(2022, 1, 5)

    def test_advance_backwards(self):
        assert WeekendsOnly().advance(date(2023, 8, 7), -1) == date(2023, 8, 4)

    def test_advance_zero_rolls_forward(self):
        assert WeekendsOnly().advance(date(2023, 8, 5), 0) == date(2023, 8, 7)

    def test_business_days_between(self):
        assert WeekendsOnly().business_days_between(date(2023, 7, 31), date(2023, 8, 7)) == 5

    def test_with_holidays(self):
        cal = WeekendsOnly().with_holidays([date(2023, 12, 25)])
        assert date(2023, 12, 25) in cal.holidays
        assert not cal.is_business_day(date(2023, 12, 25))


class TestAdjust:
    def test_following_crosses_year(self):
        assert WeekendsOnly().adjust(date(2023, 12, 31), FOLLOWING) == date(2024, 1, 1)

    def test_modified_following_stays_in_month(self):
        cal = WeekendsOnly()
        assert cal.adjust(date(2023, 9, 30), FOLLOWING) == date(2023, 10, 2)
        assert cal.adjust(date(2023, 9, 30), MODIFIED_FOLLOWING) == date(2023, 9, 29)

    def test_preceding(self):
        cal = WeekendsOnly()
        assert cal.adjust(date(2023, 10, 1), PRECEDING) == date(2023, 9, 29)
        assert cal.adjust(date(2023, 10, 1), MODIFIED_PRECEDING) == date(2023, 10, 2)

    def test_unadjusted(self):
        assert WeekendsOnly().adjust(date(2023, 12, 31), UNADJUSTED) == date(2023, 12, 31)

    def test_business_day_unchanged(self):
        assert WeekendsOnly().adjust(date(2023, 8, 2)) == date(2023, 8, 2)

    def test_convention_by_name(self):
        assert WeekendsOnly().adjust(date(2023, 12, 31), "following") == date(2024, 1, 1)

    def test_unknown_convention(self):
        with pytest.raises(PricingError) as exc:
            WeekendsOnly().adjust(date(2023, 12, 31), "nope")
        assert isinstance(exc.value, InvalidParameter)
        assert exc.value.field == "convention"


def test_null_calendar():
    cal = NullCalendar()
    assert cal.is_business_day(date(2023, 8, 5))
    assert cal.advance(date(2021, 12, 31), 2) == date(2022, 1, 2)
    assert cal.adjust(date(2023, 12, 31), FOLLOWING) == date(2023, 12, 31)


def test_custom_weekmask():
    # Friday/Saturday weekend
    cal = Calendar(weekmask="1111001")
    assert not cal.is_business_day(date(2023, 8, 4))
    assert cal.is_business_day(date(2023, 8, 6))
