"""Errors raised by shared value objects."""


class DomainError(Exception):
    """Base class for business-rule violations."""


class InvalidRangeError(DomainError, ValueError):
    """A date range ends before it starts."""

    def __init__(self, start_date, end_date, message: str | None = None):
        self.start_date = start_date
        self.end_date = end_date
        super().__init__(
            message or f"End date ({end_date}) must not be before start date ({start_date})"
        )


class UnsupportedCurrencyError(DomainError, ValueError):
    """Currency code the service does not price in."""

    def __init__(self, currency):
        self.currency = currency
        super().__init__(f"Unsupported currency: {currency}")
