"""
Booking Lifecycle

Finite state machine for rental bookings:

    pending -> confirmed -> completed
       |           |
       +-----------+--> cancelled

completed and cancelled are terminal. Only pending and confirmed bookings
occupy vehicle dates.
"""

from enum import Enum

from apps.bookings.domain.exceptions import InvalidTransitionError


class ReservationStatus(str, Enum):
    PENDING = 'pending'          # Created by the storefront or an admin
    CONFIRMED = 'confirmed'      # Confirmed by an admin or a payment
    COMPLETED = 'completed'      # Vehicle returned
    CANCELLED = 'cancelled'      # Cancelled by the customer or an admin

    def __str__(self):
        return self.value


class VehicleAvailability(str, Enum):
    AVAILABLE = 'available'
    RENTED = 'rented'
    MAINTENANCE = 'maintenance'
    RESERVED = 'reserved'

    def __str__(self):
        return self.value


ACTIVE_STATUSES = frozenset({ReservationStatus.PENDING, ReservationStatus.CONFIRMED})
TERMINAL_STATUSES = frozenset({ReservationStatus.COMPLETED, ReservationStatus.CANCELLED})

TRANSITIONS = {
    ReservationStatus.PENDING: frozenset({ReservationStatus.CONFIRMED, ReservationStatus.CANCELLED}),
    ReservationStatus.CONFIRMED: frozenset({ReservationStatus.COMPLETED, ReservationStatus.CANCELLED}),
    ReservationStatus.COMPLETED: frozenset(),
    ReservationStatus.CANCELLED: frozenset(),
}

# Transitions that hand the vehicle back are conditional; see
# vehicle_status_after().
RELEASING_STATUSES = frozenset({ReservationStatus.CANCELLED, ReservationStatus.COMPLETED})
RELEASABLE_VEHICLE_STATUSES = frozenset({VehicleAvailability.RENTED, VehicleAvailability.RESERVED})


def coerce_status(value) -> ReservationStatus:
    """Accept a ReservationStatus or its string value"""
    if isinstance(value, ReservationStatus):
        return value
    try:
        return ReservationStatus(str(value).lower())
    except ValueError:
        raise InvalidTransitionError('unknown', value) from None


def allowed_transitions(current) -> frozenset:
    return TRANSITIONS[coerce_status(current)]


def can_transition(current, new) -> bool:
    try:
        return coerce_status(new) in allowed_transitions(current)
    except InvalidTransitionError:
        return False


def ensure_transition_allowed(current, new) -> ReservationStatus:
    """Return the target status, or raise InvalidTransitionError"""
    current_status = coerce_status(current)
    try:
        new_status = coerce_status(new)
    except InvalidTransitionError:
        raise InvalidTransitionError(current_status.value, new) from None
    if new_status not in TRANSITIONS[current_status]:
        raise InvalidTransitionError(current_status.value, new_status.value)
    return new_status


def is_active(status) -> bool:
    try:
        return coerce_status(status) in ACTIVE_STATUSES
    except InvalidTransitionError:
        return False


def vehicle_status_after(new_status, current_vehicle_status, *, still_in_use: bool):
    """
    Vehicle availability implied by a booking entering `new_status`

    Returns None when the vehicle record must be left untouched:
    confirming always marks the vehicle rented, while cancelling or
    completing frees it only if it was rented/reserved and no other
    active booking covers today. Maintenance is never overridden.
    """
    new_status = coerce_status(new_status)
    if new_status == ReservationStatus.CONFIRMED:
        return VehicleAvailability.RENTED
    if new_status in RELEASING_STATUSES:
        if still_in_use:
            return None
        try:
            current = VehicleAvailability(current_vehicle_status)
        except ValueError:
            return None
        if current in RELEASABLE_VEHICLE_STATUSES:
            return VehicleAvailability.AVAILABLE
    return None
