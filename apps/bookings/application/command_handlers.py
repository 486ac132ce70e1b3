"""
Booking Command Handlers

Use cases of the booking domain. Each one runs inside a single unit of work
so the booking row, its history entry and the vehicle flag are written
together or not at all.

Commands:
- CreateBookingCommand: storefront widget and admin create form
- TransitionBookingCommand: any lifecycle move (confirm, cancel, complete)
- RescheduleBookingCommand: admin and customer edit forms

Double booking prevention: the vehicle row is locked (SELECT ... FOR UPDATE)
before the overlapping bookings are re-read and re-checked, so concurrent
writers for one vehicle are serialized and the second of two overlapping
requests fails with ConflictError.
"""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Callable, List
import logging

from django.conf import settings
from django.utils import timezone

from shared.domain.value_objects import DateRange, as_date
from shared.domain.exceptions import InvalidRangeError
from shared.infrastructure.record_store import AbstractRecordStore
from apps.bookings.domain.availability import (
    booking_floor,
    find_conflicts,
    is_date_occupied,
    is_range_bookable,
)
from apps.bookings.domain.entities import Reservation
from apps.bookings.domain.events import BookingCreated
from apps.bookings.domain.exceptions import (
    BookingNotFoundError,
    ConflictError,
    InvalidTransitionError,
    VehicleNotFoundError,
)
from apps.bookings.domain.lifecycle import ReservationStatus, vehicle_status_after
from apps.bookings.domain.pricing import PricingInput, calculate_price, coerce_amount

logger = logging.getLogger(__name__)

BOOKINGS = 'bookings'
HISTORY = 'booking_history'
CARS = 'cars'


# ===== Commands =====

@dataclass
class CreateBookingCommand:
    """
    Command to create a new booking

    Bookings always start pending; `confirm=True` (admin only) confirms
    it within the same transaction.
    """
    vehicle_id: Any
    start_date: date
    end_date: date
    customer_id: Any = None
    extra_charges: Decimal = Decimal('0')
    discount_percent: Decimal = Decimal('0')
    pickup_location: str = ''
    return_location: str = ''
    notes: str = ''
    confirm: bool = False
    created_by: str = 'customer'


@dataclass
class TransitionBookingCommand:
    booking_id: Any
    new_status: Any
    note: str = ''


@dataclass
class RescheduleBookingCommand:
    """Fields left as None keep their stored values"""
    booking_id: Any
    start_date: date
    end_date: date
    daily_rate: Decimal | None = None
    extra_charges: Decimal | None = None
    discount_percent: Decimal | None = None
    note: str = ''


# ===== Command Handlers =====

class BookingHandler:
    """Shared plumbing: clock, history log and vehicle side effects"""

    def __init__(
        self,
        store: AbstractRecordStore,
        today: Callable[[], date] | None = None,
        now: Callable[[], datetime] | None = None,
    ):
        self.store = store
        self.today = today or timezone.localdate
        self.now = now or timezone.now

    def _vehicle(self, vehicle_id, *, lock: bool) -> dict:
        vehicle = self.store.get(CARS, vehicle_id, for_update=lock)
        if vehicle is None:
            raise VehicleNotFoundError(f"Vehicle {vehicle_id} not found")
        return vehicle

    def _booking(self, booking_id) -> dict:
        record = self.store.get(BOOKINGS, booking_id, for_update=True)
        if record is None:
            raise BookingNotFoundError(f"Booking {booking_id} not found")
        return record

    def _reservations_between(self, vehicle_id, start, end) -> List[Reservation]:
        records = self.store.query_by_range_overlap(
            BOOKINGS, 'vehicle_id', vehicle_id, 'start_date', 'end_date', start, end
        )
        return [Reservation.from_record(r) for r in records]

    def _append_history(self, booking_id, status, note: str):
        self.store.insert(HISTORY, {
            'booking_id': booking_id,
            'status': str(status),
            'note': note,
            'created_at': self.now(),
        })

    def _apply_transition(self, reservation: Reservation, new_status, note: str) -> dict:
        """Status update, history entry and vehicle flag, in the caller's unit of work"""
        old_status = reservation.status
        target = reservation.transition_to(new_status, note)
        record = self.store.update(BOOKINGS, reservation.id, {'status': target.value})
        self._append_history(reservation.id, target, note)
        self._sync_vehicle(reservation, target)
        logger.info(
            f"Booking {reservation.id} moved from {old_status.value} to {target.value}"
        )
        return record

    def _sync_vehicle(self, reservation: Reservation, new_status: ReservationStatus):
        vehicle = self._vehicle(reservation.vehicle_id, lock=True)
        today = self.today()
        others = [
            r for r in self._reservations_between(reservation.vehicle_id, today, today)
            if r.id != reservation.id
        ]
        target = vehicle_status_after(
            new_status,
            vehicle['availability_status'],
            still_in_use=is_date_occupied(today, others),
        )
        if target is None or target.value == vehicle['availability_status']:
            return
        self.store.update(CARS, vehicle['id'], {'availability_status': target.value})
        logger.info(
            f"Vehicle {vehicle['id']} availability "
            f"{vehicle['availability_status']} -> {target.value}"
        )

    @staticmethod
    def _price(daily_rate, start, end, extra_charges, discount_percent, currency):
        return calculate_price(PricingInput(
            daily_rate=daily_rate,
            start_date=start,
            end_date=end,
            extra_charges=extra_charges,
            discount_percent=discount_percent,
            currency=currency,
        )).quantized()

    @staticmethod
    def _pricing_fields(pricing) -> dict:
        return {
            'days': pricing.days,
            'subtotal': pricing.subtotal.amount,
            'discount_amount': pricing.discount_amount.amount,
            'total_price': pricing.total.amount,
        }


class CreateBookingHandler(BookingHandler):
    """
    Handler for CreateBooking command

    1. Validate the range and the start floor (today)
    2. Open a unit of work and lock the vehicle row
    3. Re-read overlapping bookings and re-check bookability
    4. Price with the vehicle's current rate
    5. Insert the pending booking and its history entry
    6. Optionally confirm it (vehicle becomes rented)
    """

    def handle(self, command: CreateBookingCommand) -> dict:
        dates = DateRange(command.start_date, command.end_date)
        start, end = dates.start_date, dates.end_date
        floor = booking_floor(self.today())
        if start < floor:
            raise InvalidRangeError(start, end, f"Start date {start} cannot be before {floor}")

        logger.info(
            f"Creating booking for vehicle {command.vehicle_id}, "
            f"dates {start} - {end}, by {command.created_by}"
        )

        with self.store.atomic() as uow:
            vehicle = self._vehicle(command.vehicle_id, lock=True)

            existing = self._reservations_between(vehicle['id'], start, end)
            if not is_range_bookable(start, end, existing, min_date=floor):
                conflicts = find_conflicts(start, end, existing)
                logger.info(
                    f"Vehicle {vehicle['id']} unavailable for {dates}: "
                    f"{len(conflicts)} overlapping booking(s)"
                )
                raise ConflictError(vehicle['id'], start, end, conflicts)

            currency = vehicle.get('currency') or settings.BOOKING_CURRENCY
            pricing = self._price(
                vehicle.get('daily_rate'), start, end,
                command.extra_charges, command.discount_percent, currency,
            )

            record = self.store.insert(BOOKINGS, {
                'vehicle_id': vehicle['id'],
                'customer_id': command.customer_id,
                'start_date': start,
                'end_date': end,
                'status': ReservationStatus.PENDING.value,
                'daily_rate': coerce_amount(vehicle.get('daily_rate')),
                'extra_charges': coerce_amount(command.extra_charges),
                'discount_percent': coerce_amount(command.discount_percent),
                'currency': currency,
                'pickup_location': command.pickup_location,
                'return_location': command.return_location,
                'notes': command.notes,
                **self._pricing_fields(pricing),
            })

            reservation = Reservation.from_record(record)
            reservation.add_event(BookingCreated(
                aggregate_id=reservation.id,
                booking_id=reservation.id,
                vehicle_id=reservation.vehicle_id,
                start_date=start,
                end_date=end,
                total_price=pricing.total,
            ))
            self._append_history(reservation.id, ReservationStatus.PENDING, self._creation_note(command))

            if command.confirm:
                record = self._apply_transition(
                    reservation, ReservationStatus.CONFIRMED, f"Confirmed on creation by {command.created_by}"
                )

            uow.collect_events(reservation)

        logger.info(f"Booking {record['id']} created ({record['status']}), total {pricing.total}")
        return record

    @staticmethod
    def _creation_note(command: CreateBookingCommand) -> str:
        note = f"Booking created by {command.created_by}"
        discount = coerce_amount(command.discount_percent)
        if discount > 0:
            note += f" with {discount.normalize():f}% discount"
        return note


class TransitionBookingHandler(BookingHandler):
    """Handler for lifecycle moves: confirm, cancel, complete"""

    def handle(self, command: TransitionBookingCommand) -> dict:
        logger.info(f"Transitioning booking {command.booking_id} to {command.new_status}")

        with self.store.atomic() as uow:
            reservation = Reservation.from_record(self._booking(command.booking_id))
            record = self._apply_transition(reservation, command.new_status, command.note)
            uow.collect_events(reservation)

        return record


class RescheduleBookingHandler(BookingHandler):
    """
    Handler for edits of an active booking

    The booking itself is left out of the conflict check, and a start date
    that changes may not be earlier than yesterday.
    """

    def __init__(self, store, today=None, now=None, grace_days: int | None = None):
        super().__init__(store, today=today, now=now)
        self.grace_days = settings.BOOKING_EDIT_GRACE_DAYS if grace_days is None else grace_days

    def handle(self, command: RescheduleBookingCommand) -> dict:
        dates = DateRange(command.start_date, command.end_date)
        start, end = dates.start_date, dates.end_date
        logger.info(f"Rescheduling booking {command.booking_id} to {dates}")

        with self.store.atomic() as uow:
            stored = self._booking(command.booking_id)
            reservation = Reservation.from_record(stored)
            if reservation.is_terminal:
                raise InvalidTransitionError(reservation.status.value, 'rescheduled')

            floor = None
            if start != as_date(stored['start_date']):
                floor = booking_floor(self.today(), editing=True, grace_days=self.grace_days)
                if start < floor:
                    raise InvalidRangeError(start, end, f"Start date {start} cannot be before {floor}")

            self._vehicle(reservation.vehicle_id, lock=True)
            others = [
                r for r in self._reservations_between(reservation.vehicle_id, start, end)
                if r.id != reservation.id
            ]
            if not is_range_bookable(start, end, others, min_date=floor):
                raise ConflictError(reservation.vehicle_id, start, end, find_conflicts(start, end, others))

            daily_rate = stored['daily_rate'] if command.daily_rate is None else command.daily_rate
            extra_charges = stored['extra_charges'] if command.extra_charges is None else command.extra_charges
            discount_percent = (
                stored['discount_percent'] if command.discount_percent is None else command.discount_percent
            )
            pricing = self._price(
                daily_rate, start, end, extra_charges, discount_percent,
                stored.get('currency') or settings.BOOKING_CURRENCY,
            )

            old_dates = reservation.reschedule(start, end)
            record = self.store.update(BOOKINGS, reservation.id, {
                'start_date': start,
                'end_date': end,
                'daily_rate': coerce_amount(daily_rate),
                'extra_charges': coerce_amount(extra_charges),
                'discount_percent': coerce_amount(discount_percent),
                **self._pricing_fields(pricing),
            })
            reservation.record_reschedule(old_dates, pricing.total)

            note = command.note or (
                f"Booking details updated: {old_dates} -> {dates}, "
                f"discount {coerce_amount(discount_percent).normalize():f}%"
            )
            self._append_history(reservation.id, reservation.status, note)
            uow.collect_events(reservation)

        return record
