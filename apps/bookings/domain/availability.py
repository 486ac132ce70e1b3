"""
Availability Checker

Pure functions deciding whether vehicle dates are occupied. Every booking
surface (storefront widget, admin create/edit forms, calendars) asks these
functions; none of them carries its own overlap logic.

Reservations are any objects with start_date, end_date and status
attributes (normally Reservation aggregates). Only pending and confirmed
ones count; the filtering happens here so callers cannot forget it.
"""

from datetime import date, timedelta
from typing import Iterable, List

from shared.domain.value_objects import DateRange, as_date
from apps.bookings.domain.lifecycle import is_active


def _active(reservations: Iterable) -> List:
    return [r for r in reservations if is_active(r.status)]


def is_date_occupied(day, reservations: Iterable) -> bool:
    """True if an active reservation covers `day` (inclusive on both ends)"""
    target = as_date(day)
    return any(
        as_date(r.start_date) <= target <= as_date(r.end_date)
        for r in _active(reservations)
    )


def find_conflicts(start_date, end_date, reservations: Iterable) -> List:
    """Active reservations sharing at least one day with the candidate range"""
    candidate = DateRange(start_date, end_date)
    return [
        r for r in _active(reservations)
        if DateRange(r.start_date, r.end_date).overlaps_with(candidate)
    ]


def is_range_bookable(start_date, end_date, reservations: Iterable, *, min_date) -> bool:
    """
    Whether [start_date, end_date] can be booked

    `min_date` is the earliest allowed start (today for new bookings,
    yesterday for edits, see booking_floor); None disables the floor.
    Raises InvalidRangeError when end_date is before start_date.
    """
    candidate = DateRange(start_date, end_date)
    if min_date is not None and candidate.start_date < as_date(min_date):
        return False
    return not find_conflicts(candidate.start_date, candidate.end_date, reservations)


def occupied_dates(window_start, window_end, reservations: Iterable) -> List[date]:
    """Per-day verdicts for a calendar window: the days that are taken"""
    active = _active(reservations)
    return [
        day for day in DateRange(window_start, window_end).days()
        if is_date_occupied(day, active)
    ]


def booking_floor(today, *, editing: bool = False, grace_days: int = 1) -> date:
    """Earliest start date a booking may have: today, or a bit earlier for edits"""
    today = as_date(today)
    return today - timedelta(days=grace_days) if editing else today
