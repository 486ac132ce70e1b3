"""Entry points of the booking engine used by the API views and tasks."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import List

from django.conf import settings  # type: ignore

from shared.infrastructure.record_store import AbstractRecordStore, DjangoRecordStore

from .application.command_handlers import (
    CreateBookingCommand,
    CreateBookingHandler,
    RescheduleBookingCommand,
    RescheduleBookingHandler,
    TransitionBookingCommand,
    TransitionBookingHandler,
)
from .domain.availability import occupied_dates
from .domain.entities import Reservation
from .domain.pricing import PricingInput, PricingResult, calculate_price


def _clock(today: date | None):
    return (lambda: today) if today is not None else None


def _store(store: AbstractRecordStore | None) -> AbstractRecordStore:
    return store if store is not None else DjangoRecordStore()


def create_booking(
    vehicle_id,
    start_date,
    end_date,
    *,
    store: AbstractRecordStore | None = None,
    today: date | None = None,
    **options,
) -> dict:
    """Create a pending booking (or a confirmed one with confirm=True)."""

    command = CreateBookingCommand(vehicle_id=vehicle_id, start_date=start_date, end_date=end_date, **options)
    return CreateBookingHandler(_store(store), today=_clock(today)).handle(command)


def transition(
    reservation_id,
    new_status,
    note: str = "",
    *,
    store: AbstractRecordStore | None = None,
    today: date | None = None,
) -> dict:
    """Move a booking along its lifecycle, updating history and the vehicle flag."""

    command = TransitionBookingCommand(booking_id=reservation_id, new_status=new_status, note=note)
    return TransitionBookingHandler(_store(store), today=_clock(today)).handle(command)


def reschedule_booking(
    reservation_id,
    start_date,
    end_date,
    *,
    store: AbstractRecordStore | None = None,
    today: date | None = None,
    **changes,
) -> dict:
    """Change the dates and pricing inputs of an active booking."""

    command = RescheduleBookingCommand(
        booking_id=reservation_id, start_date=start_date, end_date=end_date, **changes
    )
    return RescheduleBookingHandler(_store(store), today=_clock(today)).handle(command)


def quote(
    daily_rate,
    start_date,
    end_date,
    extra_charges=Decimal("0"),
    discount_percent=Decimal("0"),
    currency: str | None = None,
) -> PricingResult:
    return calculate_price(
        PricingInput(
            daily_rate=daily_rate,
            start_date=start_date,
            end_date=end_date,
            extra_charges=extra_charges,
            discount_percent=discount_percent,
            currency=currency or settings.BOOKING_CURRENCY,
        )
    )


def vehicle_reservations(
    vehicle_id,
    window_start,
    window_end,
    *,
    store: AbstractRecordStore | None = None,
) -> List[Reservation]:
    records = _store(store).query_by_range_overlap(
        "bookings", "vehicle_id", vehicle_id, "start_date", "end_date", window_start, window_end
    )
    return [Reservation.from_record(record) for record in records]


def vehicle_calendar(
    vehicle_id,
    window_start,
    window_end,
    *,
    store: AbstractRecordStore | None = None,
) -> List[date]:
    """Days of the window on which the vehicle is already taken."""

    reservations = vehicle_reservations(vehicle_id, window_start, window_end, store=store)
    return occupied_dates(window_start, window_end, reservations)
