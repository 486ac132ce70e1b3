from datetime import timedelta
from decimal import Decimal

import pytest
from django.utils import timezone

from apps.bookings.models import Booking
from apps.bookings.tasks import sync_vehicle_availability
from apps.fleet.models import Vehicle


def _vehicle(status, **kwargs):
    return Vehicle.objects.create(
        make="Ford",
        model="Focus",
        daily_rate=Decimal("45.00"),
        availability_status=status,
        **kwargs,
    )


def _booking(vehicle, status, start, end):
    return Booking.objects.create(vehicle=vehicle, status=status, start_date=start, end_date=end)


@pytest.mark.django_db
def test_releases_rented_vehicle_without_confirmed_booking():
    today = timezone.localdate()
    stale = _vehicle(Vehicle.AvailabilityStatus.RENTED)
    _booking(stale, Booking.Status.CANCELLED, today, today + timedelta(days=1))
    busy = _vehicle(Vehicle.AvailabilityStatus.RENTED)
    _booking(busy, Booking.Status.CONFIRMED, today, today + timedelta(days=1))
    in_service = _vehicle(Vehicle.AvailabilityStatus.MAINTENANCE)

    result = sync_vehicle_availability()

    assert result == {"released": 1, "overdue": 0}
    stale.refresh_from_db()
    busy.refresh_from_db()
    in_service.refresh_from_db()
    assert stale.availability_status == Vehicle.AvailabilityStatus.AVAILABLE
    assert busy.availability_status == Vehicle.AvailabilityStatus.RENTED
    assert in_service.availability_status == Vehicle.AvailabilityStatus.MAINTENANCE


@pytest.mark.django_db
def test_counts_overdue_confirmed_bookings():
    today = timezone.localdate()
    vehicle = _vehicle(Vehicle.AvailabilityStatus.RENTED)
    _booking(vehicle, Booking.Status.CONFIRMED, today - timedelta(days=5), today - timedelta(days=2))

    result = sync_vehicle_availability.delay().get()

    assert result == {"released": 0, "overdue": 1}
