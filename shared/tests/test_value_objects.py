from datetime import date, datetime, timezone
from decimal import Decimal

import pytest

from shared.domain.exceptions import DomainError, InvalidRangeError, UnsupportedCurrencyError
from shared.domain.value_objects import DateRange, Money, as_date


def test_as_date_accepts_dates_datetimes_and_iso_strings():
    assert as_date(date(2024, 6, 1)) == date(2024, 6, 1)
    assert as_date(datetime(2024, 6, 1, 23, 59)) == date(2024, 6, 1)
    assert as_date("2024-06-01") == date(2024, 6, 1)
    assert as_date("2024-06-01T10:30:00+00:00") == date(2024, 6, 1)
    assert as_date(datetime(2024, 6, 1, 8, tzinfo=timezone.utc)) == date(2024, 6, 1)


def test_as_date_rejects_other_types():
    with pytest.raises(TypeError):
        as_date(20240601)


def test_date_range_is_inclusive():
    rental = DateRange(date(2024, 6, 10), date(2024, 6, 15))

    assert rental.contains(date(2024, 6, 10))
    assert rental.contains("2024-06-15")
    assert not rental.contains(date(2024, 6, 16))
    assert len(list(rental.days())) == 6


def test_date_range_overlap_counts_shared_boundary_day():
    rental = DateRange(date(2024, 6, 10), date(2024, 6, 15))

    assert rental.overlaps_with(DateRange(date(2024, 6, 15), date(2024, 6, 18)))
    assert rental.overlaps_with(DateRange(date(2024, 6, 1), date(2024, 6, 30)))
    assert not rental.overlaps_with(DateRange(date(2024, 6, 16), date(2024, 6, 18)))


def test_date_range_rejects_reversed_bounds():
    with pytest.raises(InvalidRangeError) as excinfo:
        DateRange(date(2024, 6, 15), date(2024, 6, 10))

    assert excinfo.value.start_date == date(2024, 6, 15)
    assert isinstance(excinfo.value, ValueError)


def test_single_day_range_is_allowed():
    single = DateRange(date(2024, 6, 10), date(2024, 6, 10))
    assert list(single.days()) == [date(2024, 6, 10)]
    assert str(single) == "2024-06-10 - 2024-06-10"


def test_money_arithmetic_keeps_decimal_precision():
    rate = Money(Decimal("33.33"))

    assert (rate * 3).amount == Decimal("99.99")
    assert (3 * rate) == rate * 3
    assert (rate + Money("0.01")).amount == Decimal("33.34")
    assert (Money("10.005")).quantize().amount == Decimal("10.01")
    assert Money("19.99").to_minor_units() == 1999


def test_money_rejects_invalid_amounts():
    with pytest.raises(ValueError):
        Money(Decimal("-1"))
    with pytest.raises(ValueError):
        Money(Decimal("NaN"))
    with pytest.raises(ValueError):
        Money(Decimal("1"), currency="XXX")


def test_money_rejects_mixed_currencies():
    with pytest.raises(ValueError):
        Money("1", "USD") + Money("1", "EUR")


@pytest.mark.parametrize("currency", ["JPY", "KZT", "RUB"])
def test_unsupported_currency_is_a_domain_error(currency):
    with pytest.raises(UnsupportedCurrencyError) as excinfo:
        Money(Decimal("10"), currency=currency)

    assert excinfo.value.currency == currency
    assert isinstance(excinfo.value, DomainError)
