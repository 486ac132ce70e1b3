"""
Booking Domain Events

Published on the message bus after the unit of work commits.
"""

from dataclasses import dataclass
from datetime import date
from typing import Any

from shared.domain.base import DomainEvent
from shared.domain.value_objects import Money


@dataclass
class BookingCreated(DomainEvent):
    """A pending booking was stored for a vehicle"""
    booking_id: Any
    vehicle_id: Any
    start_date: date
    end_date: date
    total_price: Money


@dataclass
class BookingStatusChanged(DomainEvent):
    """
    A lifecycle transition happened

    Consumers: audit log, customer notifications.
    """
    booking_id: Any
    vehicle_id: Any
    old_status: str
    new_status: str
    note: str = ''


@dataclass
class BookingRescheduled(DomainEvent):
    """Dates or pricing of an active booking were edited"""
    booking_id: Any
    vehicle_id: Any
    old_start_date: date
    old_end_date: date
    start_date: date
    end_date: date
    total_price: Money
