"""
Price Calculator

Deterministic rental pricing shared by every booking surface:

    days            = max(1, end - start in whole days)
    subtotal        = days * daily_rate + extra_charges
    discount_amount = subtotal * discount_percent / 100
    total           = subtotal - discount_amount

Amounts are Decimal and are not rounded along the way; PricingResult
.quantized() rounds once, at the display or persist boundary.
"""

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation

from shared.domain.value_objects import Money, as_date
from shared.domain.exceptions import InvalidRangeError
from apps.bookings.domain.exceptions import InvalidDiscountError

HUNDRED = Decimal('100')


def _finite_decimal(value) -> Decimal | None:
    """Decimal for the value, or None when it is missing, NaN or infinite"""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Money):
        return value.amount
    try:
        number = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return None
    return number if number.is_finite() else None


def calculate_days(start_date, end_date) -> int:
    """
    Billable days of a rental

    A same-day rental is charged one full day. Time of day is ignored.
    """
    start, end = as_date(start_date), as_date(end_date)
    if end < start:
        raise InvalidRangeError(start, end)
    return max(1, (end - start).days)


@dataclass(frozen=True)
class PricingInput:
    daily_rate: object
    start_date: object
    end_date: object
    extra_charges: object = Decimal('0')
    discount_percent: object = Decimal('0')
    currency: str = 'USD'


@dataclass(frozen=True)
class PricingResult:
    days: int
    subtotal: Money
    discount_amount: Money
    total: Money

    @classmethod
    def zero(cls, days: int = 0, currency: str = 'USD') -> 'PricingResult':
        nothing = Money.zero(currency)
        return cls(days=days, subtotal=nothing, discount_amount=nothing, total=nothing)

    @property
    def currency(self) -> str:
        return self.total.currency

    def quantized(self) -> 'PricingResult':
        """
        Round to minor units for display or storage

        Subtotal and discount are rounded and the total is derived from
        the rounded figures, so the stored breakdown still adds up.
        """
        subtotal = self.subtotal.quantize()
        discount_amount = self.discount_amount.quantize()
        return PricingResult(
            days=self.days,
            subtotal=subtotal,
            discount_amount=discount_amount,
            total=subtotal - discount_amount,
        )

    def to_dict(self) -> dict:
        return {
            'days': self.days,
            'subtotal': str(self.subtotal.amount),
            'discount_amount': str(self.discount_amount.amount),
            'total': str(self.total.amount),
            'currency': self.currency,
        }


def calculate_price(pricing_input: PricingInput) -> PricingResult:
    """
    Price a rental

    Never yields NaN: a missing or non-finite daily rate prices the rental
    at zero, and missing extras or discount count as zero.

    Raises:
        InvalidRangeError: end date before start date
        InvalidDiscountError: discount outside 0..100
        ValueError: negative rate or extras
    """
    currency = pricing_input.currency

    discount_percent = _finite_decimal(pricing_input.discount_percent)
    if discount_percent is None:
        discount_percent = Decimal('0')
    elif not Decimal('0') <= discount_percent <= HUNDRED:
        raise InvalidDiscountError(pricing_input.discount_percent)

    if pricing_input.start_date is None or pricing_input.end_date is None:
        return PricingResult.zero(currency=currency)

    days = calculate_days(pricing_input.start_date, pricing_input.end_date)

    daily_rate = _finite_decimal(pricing_input.daily_rate)
    if daily_rate is None:
        return PricingResult.zero(days=days, currency=currency)

    extras = _finite_decimal(pricing_input.extra_charges) or Decimal('0')

    subtotal = Money(daily_rate, currency) * days + Money(extras, currency)
    discount_amount = Money(subtotal.amount * discount_percent / HUNDRED, currency)
    total = subtotal - discount_amount

    return PricingResult(
        days=days,
        subtotal=subtotal,
        discount_amount=discount_amount,
        total=total,
    )


def coerce_amount(value) -> Decimal:
    """Decimal for a stored amount; missing or non-finite values become 0"""
    return _finite_decimal(value) or Decimal('0')
