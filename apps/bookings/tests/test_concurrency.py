"""Double booking prevention under concurrent requests."""

import threading
from datetime import date
from decimal import Decimal

import pytest
from django.db import connection

from apps.bookings import services
from apps.bookings.domain.exceptions import ConflictError
from shared.infrastructure.record_store import InMemoryRecordStore

TODAY = date(2024, 6, 1)


def _attempt(store, start, end, results, barrier):
    barrier.wait()
    try:
        results.append(services.create_booking(1, start, end, store=store, today=TODAY))
    except ConflictError as exc:
        results.append(exc)


@pytest.mark.parametrize("second_range", [
    (date(2024, 7, 10), date(2024, 7, 15)),
    (date(2024, 7, 15), date(2024, 7, 20)),
])
def test_only_one_of_concurrent_overlapping_requests_succeeds(second_range):
    store = InMemoryRecordStore()
    store.insert("cars", {"daily_rate": Decimal("60.00"), "currency": "USD", "availability_status": "available"})
    results = []
    barrier = threading.Barrier(2)
    threads = [
        threading.Thread(target=_attempt, args=(store, date(2024, 7, 10), date(2024, 7, 15), results, barrier)),
        threading.Thread(target=_attempt, args=(store, *second_range, results, barrier)),
    ]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=10)

    created = [r for r in results if isinstance(r, dict)]
    conflicts = [r for r in results if isinstance(r, ConflictError)]
    assert len(created) == 1
    assert len(conflicts) == 1
    assert conflicts[0].conflicts == [(created[0]["start_date"], created[0]["end_date"])]
    assert len(store.query_by_field("bookings", "vehicle_id", 1)) == 1


def test_many_concurrent_requests_yield_a_single_booking():
    store = InMemoryRecordStore()
    store.insert("cars", {"daily_rate": Decimal("60.00"), "currency": "USD", "availability_status": "available"})
    results = []
    barrier = threading.Barrier(8)
    threads = [
        threading.Thread(target=_attempt, args=(store, date(2024, 7, 1), date(2024, 7, 3), results, barrier))
        for _ in range(8)
    ]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=10)

    assert sum(isinstance(r, dict) for r in results) == 1
    assert sum(isinstance(r, ConflictError) for r in results) == 7


@pytest.mark.django_db
def test_second_overlapping_booking_is_rejected_by_the_database_store():
    from apps.bookings.models import Booking
    from apps.fleet.models import Vehicle

    vehicle = Vehicle.objects.create(make="Mazda", model="3", daily_rate=Decimal("55.00"))
    services.create_booking(vehicle.pk, date(2024, 7, 10), date(2024, 7, 15), today=TODAY)

    with pytest.raises(ConflictError) as excinfo:
        services.create_booking(vehicle.pk, date(2024, 7, 12), date(2024, 7, 13), today=TODAY)

    assert excinfo.value.conflicts == [(date(2024, 7, 10), date(2024, 7, 15))]
    assert Booking.objects.count() == 1


def _attempt_on_database(vehicle_id, results, barrier):
    barrier.wait()
    try:
        results.append(services.create_booking(vehicle_id, date(2024, 7, 10), date(2024, 7, 15), today=TODAY))
    except ConflictError as exc:
        results.append(exc)
    finally:
        connection.close()


@pytest.mark.django_db(transaction=True)
def test_concurrent_requests_on_the_database_store_yield_one_conflict():
    from apps.bookings.models import Booking, BookingHistory
    from apps.fleet.models import Vehicle

    vehicle = Vehicle.objects.create(make="Skoda", model="Octavia", daily_rate=Decimal("50.00"))
    results = []
    barrier = threading.Barrier(2)
    threads = [
        threading.Thread(target=_attempt_on_database, args=(vehicle.pk, results, barrier))
        for _ in range(2)
    ]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=30)

    assert sum(isinstance(r, dict) for r in results) == 1
    assert sum(isinstance(r, ConflictError) for r in results) == 1
    assert Booking.objects.count() == 1
    assert BookingHistory.objects.count() == 1
