"""
Common Value Objects

- Money: non-negative Decimal amount with a currency
- DateRange: calendar range, inclusive on both ends
- as_date: date normalization shared by availability and pricing
"""

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterator

from shared.domain.base import ValueObject
from shared.domain.exceptions import InvalidRangeError, UnsupportedCurrencyError

SUPPORTED_CURRENCIES = ('USD', 'EUR', 'GBP')
CURRENCY_CHOICES = [(code, code) for code in SUPPORTED_CURRENCIES]
MINOR_UNIT = Decimal('0.01')


def as_date(value) -> date:
    """
    Normalize a calendar value to a date (time of day is dropped)

    Accepts date, datetime and ISO strings, both 'YYYY-MM-DD' and full
    timestamps such as '2024-06-01T10:30:00+00:00'.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            return date.fromisoformat(text[:10])
        except ValueError:
            return datetime.fromisoformat(text.replace('Z', '+00:00')).date()
    raise TypeError(f"Cannot interpret {value!r} as a date")


@dataclass(frozen=True)
class Money(ValueObject):
    """
    Money value object

    Amounts are Decimal and never rounded implicitly; call quantize()
    at the display or persist boundary.
    """
    amount: Decimal
    currency: str = 'USD'

    def __post_init__(self):
        if not isinstance(self.amount, Decimal):
            object.__setattr__(self, 'amount', Decimal(str(self.amount)))
        if not self.amount.is_finite():
            raise ValueError(f"Amount must be finite, got {self.amount}")
        if self.amount < 0:
            raise ValueError("Amount cannot be negative")
        if not self.currency:
            raise ValueError("Currency is required")
        if self.currency not in SUPPORTED_CURRENCIES:
            raise UnsupportedCurrencyError(self.currency)

    @classmethod
    def zero(cls, currency: str = 'USD') -> 'Money':
        return cls(Decimal('0'), currency)

    def __add__(self, other: 'Money') -> 'Money':
        if not isinstance(other, Money):
            raise TypeError("Can only add Money to Money")
        if self.currency != other.currency:
            raise ValueError(f"Cannot add different currencies: {self.currency} and {other.currency}")
        return Money(self.amount + other.amount, self.currency)

    def __sub__(self, other: 'Money') -> 'Money':
        if not isinstance(other, Money):
            raise TypeError("Can only subtract Money from Money")
        if self.currency != other.currency:
            raise ValueError(f"Cannot subtract different currencies: {self.currency} and {other.currency}")
        return Money(self.amount - other.amount, self.currency)

    def __mul__(self, factor) -> 'Money':
        if isinstance(factor, bool) or not isinstance(factor, (int, float, Decimal)):
            raise TypeError("Can only multiply Money by number")
        return Money(self.amount * Decimal(str(factor)), self.currency)

    __rmul__ = __mul__

    def quantize(self) -> 'Money':
        """Round to the currency's minor unit (cents)"""
        return Money(self.amount.quantize(MINOR_UNIT, rounding=ROUND_HALF_UP), self.currency)

    def to_minor_units(self) -> int:
        return int(self.quantize().amount * 100)

    def __str__(self):
        return f"{self.amount:,.2f} {self.currency}"

    def __repr__(self):
        return f"Money({self.amount}, '{self.currency}')"


@dataclass(frozen=True)
class DateRange(ValueObject):
    """
    Date range value object

    Both start_date and end_date are inclusive: a rental from the 10th
    to the 15th occupies the 10th, the 15th and every day between.
    """
    start_date: date
    end_date: date

    def __post_init__(self):
        object.__setattr__(self, 'start_date', as_date(self.start_date))
        object.__setattr__(self, 'end_date', as_date(self.end_date))
        if self.end_date < self.start_date:
            raise InvalidRangeError(self.start_date, self.end_date)

    def overlaps_with(self, other: 'DateRange') -> bool:
        """
        Two inclusive ranges overlap if they share at least one day,
        so 10..15 and 15..18 overlap while 10..15 and 16..18 do not.
        """
        if not isinstance(other, DateRange):
            raise TypeError("Can only check overlap with another DateRange")
        return self.start_date <= other.end_date and other.start_date <= self.end_date

    def contains(self, check_date) -> bool:
        return self.start_date <= as_date(check_date) <= self.end_date

    def days(self) -> Iterator[date]:
        """Every calendar day in the range, in order"""
        current = self.start_date
        while current <= self.end_date:
            yield current
            current += timedelta(days=1)

    def __str__(self):
        return f"{self.start_date.isoformat()} - {self.end_date.isoformat()}"

    def __repr__(self):
        return f"DateRange({self.start_date}, {self.end_date})"
