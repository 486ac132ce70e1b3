"""Tests for the price calculator."""

from datetime import date
from decimal import Decimal

import pytest

from apps.bookings.domain.exceptions import InvalidDiscountError, InvalidRangeError
from apps.bookings.domain.pricing import PricingInput, calculate_days, calculate_price


def _price(rate="100", start=date(2024, 6, 1), end=date(2024, 6, 3), extras="0", discount="0"):
    return calculate_price(PricingInput(
        daily_rate=rate,
        start_date=start,
        end_date=end,
        extra_charges=extras,
        discount_percent=discount,
    ))


def test_days_times_rate():
    result = _price()

    assert result.days == 2
    assert result.subtotal.amount == Decimal("200")
    assert result.discount_amount.amount == Decimal("0")
    assert result.total.amount == Decimal("200")


def test_discount_applies_to_rate_and_extras():
    result = _price(extras="50", discount="10")

    assert result.subtotal.amount == Decimal("250")
    assert result.discount_amount.amount == Decimal("25")
    assert result.total.amount == Decimal("225")


def test_same_day_rental_is_charged_one_day():
    result = _price(start=date(2024, 6, 1), end=date(2024, 6, 1))

    assert result.days == 1
    assert result.total.amount == Decimal("100")


def test_calculate_days_ignores_time_of_day():
    assert calculate_days("2024-06-01T22:00:00", "2024-06-02T06:00:00") == 1
    assert calculate_days(date(2024, 6, 1), date(2024, 6, 11)) == 10


def test_calculate_days_rejects_reversed_range():
    with pytest.raises(InvalidRangeError):
        calculate_days(date(2024, 6, 3), date(2024, 6, 1))


@pytest.mark.parametrize("discount", ["-1", "100.01", "150"])
def test_discount_outside_bounds_raises(discount):
    with pytest.raises(InvalidDiscountError):
        _price(discount=discount)


def test_full_discount_is_free():
    assert _price(discount="100").total.amount == Decimal("0")


@pytest.mark.parametrize("rate", [None, "", "abc", float("nan"), Decimal("Infinity")])
def test_missing_or_non_numeric_rate_prices_at_zero(rate):
    result = _price(rate=rate)

    assert result.days == 2
    assert result.total.amount == Decimal("0")
    assert not result.total.amount.is_nan()


def test_missing_dates_price_at_zero():
    result = _price(start=None)

    assert result.days == 0
    assert result.total.amount == Decimal("0")


def test_negative_rate_is_rejected():
    with pytest.raises(ValueError):
        _price(rate="-10")


def test_total_never_decreases_with_more_days():
    totals = [
        _price(rate="45.50", extras="10", discount="15", end=date(2024, 6, day)).total.amount
        for day in range(1, 15)
    ]

    assert totals == sorted(totals)


def test_total_never_exceeds_subtotal():
    for discount in ("0", "12.5", "50", "99.99"):
        result = _price(rate="79.99", extras="20", discount=discount)
        assert Decimal("0") <= result.total.amount <= result.subtotal.amount


def test_amounts_are_not_rounded_until_quantized():
    result = _price(rate="33.33", start=date(2024, 6, 1), end=date(2024, 6, 4), discount="12.5")

    assert result.subtotal.amount == Decimal("99.99")
    assert result.discount_amount.amount == Decimal("12.49875")

    rounded = result.quantized()
    assert rounded.discount_amount.amount == Decimal("12.50")
    assert rounded.total.amount == Decimal("87.49")
    assert rounded.subtotal.amount - rounded.discount_amount.amount == rounded.total.amount


def test_to_dict_carries_breakdown():
    assert _price(extras="50", discount="10").quantized().to_dict() == {
        "days": 2,
        "subtotal": "250.00",
        "discount_amount": "25.00",
        "total": "225.00",
        "currency": "USD",
    }


@pytest.mark.parametrize("extras, discount", [("0", "0"), ("25", "10"), ("80", "99")])
def test_total_never_decreases_as_daily_rate_rises(extras, discount):
    totals = [
        _price(rate=rate, extras=extras, discount=discount).total.amount
        for rate in ("0", "0.01", "19.99", "50", "100", "250.50")
    ]

    assert totals == sorted(totals)


@pytest.mark.parametrize("rate, discount", [("0", "0"), ("45", "15"), ("100", "100")])
def test_total_never_decreases_as_extra_charges_rise(rate, discount):
    totals = [
        _price(rate=rate, extras=extras, discount=discount).total.amount
        for extras in ("0", "0.5", "10", "75.25", "300")
    ]

    assert totals == sorted(totals)


@pytest.mark.parametrize("rate, extras", [("0", "0"), ("60", "0"), ("99.99", "35")])
def test_total_never_increases_as_discount_rises(rate, extras):
    totals = [
        _price(rate=rate, extras=extras, discount=discount).total.amount
        for discount in ("0", "0.5", "10", "33.33", "50", "99.99", "100")
    ]

    assert totals == sorted(totals, reverse=True)
