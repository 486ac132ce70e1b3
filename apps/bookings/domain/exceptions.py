"""
Booking Domain Errors

All of them are raised synchronously to the immediate caller and never
retried by the engine. ConflictError is the one users are expected to see
in normal operation ("someone else booked those dates").
"""

from shared.domain.exceptions import DomainError, InvalidRangeError


class BookingError(DomainError):
    """Base class for booking engine errors."""


class InvalidDiscountError(BookingError, ValueError):
    """Discount percent outside 0..100."""

    def __init__(self, discount_percent):
        self.discount_percent = discount_percent
        super().__init__(f"Discount must be between 0 and 100 percent, got {discount_percent}")


class InvalidTransitionError(BookingError):
    """Status change not present in the lifecycle table."""

    def __init__(self, current_status, new_status):
        self.current_status = current_status
        self.new_status = new_status
        super().__init__(f"Cannot move booking from {current_status} to {new_status}")


class ConflictError(BookingError):
    """Requested range is no longer available for the vehicle."""

    def __init__(self, vehicle_id, start_date, end_date, conflicts=()):
        self.vehicle_id = vehicle_id
        self.start_date = start_date
        self.end_date = end_date
        self.conflicts = [(c.start_date, c.end_date) for c in conflicts]
        super().__init__(
            f"Vehicle {vehicle_id} is not available from {start_date} to {end_date}"
        )

    def to_dict(self) -> dict:
        return {
            'detail': str(self),
            'start_date': self.start_date.isoformat(),
            'end_date': self.end_date.isoformat(),
            'conflicts': [
                {'start_date': start.isoformat(), 'end_date': end.isoformat()}
                for start, end in self.conflicts
            ],
        }


class BookingNotFoundError(BookingError, LookupError):
    pass


class VehicleNotFoundError(BookingError, LookupError):
    pass


__all__ = [
    'BookingError',
    'BookingNotFoundError',
    'ConflictError',
    'InvalidDiscountError',
    'InvalidRangeError',
    'InvalidTransitionError',
    'VehicleNotFoundError',
]
