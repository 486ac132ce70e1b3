"""
Booking Domain Entities

Reservation is the aggregate root of the booking domain: one occupancy of
a vehicle over an inclusive date range, moving through the lifecycle in
apps.bookings.domain.lifecycle.
"""

from dataclasses import dataclass
from datetime import date
from typing import Any, Mapping

from shared.domain.base import Aggregate
from shared.domain.value_objects import DateRange, as_date
from apps.bookings.domain.events import BookingRescheduled, BookingStatusChanged
from apps.bookings.domain.lifecycle import (
    TERMINAL_STATUSES,
    ReservationStatus,
    coerce_status,
    ensure_transition_allowed,
)
from apps.bookings.domain.exceptions import InvalidTransitionError


@dataclass(eq=False, kw_only=True)
class Reservation(Aggregate):
    """
    Reservation Aggregate Root

    Key invariants:
    - end_date >= start_date (both inclusive, date-only)
    - status changes only along the lifecycle table
    - cancelled and completed reservations never occupy a date

    A candidate that is only being validated has id=None.
    """

    vehicle_id: Any
    start_date: date
    end_date: date
    status: ReservationStatus = ReservationStatus.PENDING

    def __post_init__(self):
        self.start_date = as_date(self.start_date)
        self.end_date = as_date(self.end_date)
        self.status = coerce_status(self.status)
        DateRange(self.start_date, self.end_date)

    @classmethod
    def from_record(cls, record: Mapping) -> 'Reservation':
        """Build from a `bookings` record of the record store"""
        return cls(
            id=record.get('id'),
            vehicle_id=record['vehicle_id'],
            start_date=record['start_date'],
            end_date=record['end_date'],
            status=record.get('status', ReservationStatus.PENDING),
        )

    @property
    def dates(self) -> DateRange:
        return DateRange(self.start_date, self.end_date)

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    def transition_to(self, new_status, note: str = '') -> ReservationStatus:
        """
        Move to `new_status` (see lifecycle.TRANSITIONS)

        Raises InvalidTransitionError and leaves the reservation untouched
        when the move is not allowed.
        Events: BookingStatusChanged
        """
        target = ensure_transition_allowed(self.status, new_status)
        old_status = self.status
        self.status = target

        self.add_event(BookingStatusChanged(
            aggregate_id=self.id,
            booking_id=self.id,
            vehicle_id=self.vehicle_id,
            old_status=old_status.value,
            new_status=target.value,
            note=note,
        ))
        return target

    def reschedule(self, start_date, end_date):
        """
        Change the dates of a pending or confirmed reservation

        Availability is checked by the caller, which knows the other
        reservations of the vehicle.
        Events: BookingRescheduled (emitted by the handler, which also
        knows the new price)
        """
        if self.is_terminal:
            raise InvalidTransitionError(self.status.value, 'rescheduled')
        new_dates = DateRange(start_date, end_date)
        old_dates = self.dates
        self.start_date = new_dates.start_date
        self.end_date = new_dates.end_date
        return old_dates

    def record_reschedule(self, old_dates: DateRange, total_price):
        self.add_event(BookingRescheduled(
            aggregate_id=self.id,
            booking_id=self.id,
            vehicle_id=self.vehicle_id,
            old_start_date=old_dates.start_date,
            old_end_date=old_dates.end_date,
            start_date=self.start_date,
            end_date=self.end_date,
            total_price=total_price,
        ))

    def __str__(self):
        return f"Reservation {self.id} ({self.status.value}) {self.dates}"

    def __repr__(self):
        return (
            f"Reservation(id={self.id}, vehicle_id={self.vehicle_id}, "
            f"status={self.status.value}, dates={self.dates!r})"
        )
