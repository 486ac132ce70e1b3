"""Message bus subscribers for booking events."""

from __future__ import annotations

import logging

from shared.application.message_bus import message_bus

from .domain.events import BookingCreated, BookingRescheduled, BookingStatusChanged

logger = logging.getLogger("apps.bookings.audit")


def log_booking_event(event) -> None:
    """Write committed booking events to the audit logger."""

    logger.info("booking_event", extra={"event": event.to_dict()})


def register_handlers(bus=message_bus) -> None:
    for event_type in (BookingCreated, BookingStatusChanged, BookingRescheduled):
        bus.register_event_handler(event_type, log_booking_event)
