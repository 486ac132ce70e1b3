from datetime import date
from decimal import Decimal

import pytest

from shared.infrastructure.record_store import (
    DjangoRecordStore,
    ImmutableRecordError,
    InMemoryRecordStore,
    RecordNotFoundError,
)


@pytest.fixture
def store():
    store = InMemoryRecordStore()
    store.insert("cars", {"daily_rate": Decimal("50"), "currency": "USD", "availability_status": "available"})
    return store


def _booking(vehicle_id, start, end, status="pending"):
    return {"vehicle_id": vehicle_id, "start_date": start, "end_date": end, "status": status}


def test_insert_assigns_ids_per_table(store):
    first = store.insert("bookings", _booking(1, date(2024, 6, 1), date(2024, 6, 3)))
    second = store.insert("bookings", _booking(1, date(2024, 6, 5), date(2024, 6, 6)))

    assert (first["id"], second["id"]) == (1, 2)
    assert store.get("cars", 1)["availability_status"] == "available"


def test_returned_records_are_copies(store):
    car = store.get("cars", 1)
    car["availability_status"] = "rented"

    assert store.get("cars", 1)["availability_status"] == "available"


def test_query_by_field(store):
    store.insert("bookings", _booking(1, date(2024, 6, 1), date(2024, 6, 3)))
    store.insert("bookings", _booking(2, date(2024, 6, 1), date(2024, 6, 3)))

    assert [r["vehicle_id"] for r in store.query_by_field("bookings", "vehicle_id", 2)] == [2]


def test_range_overlap_is_inclusive_and_scoped_to_vehicle(store):
    store.insert("bookings", _booking(1, date(2024, 6, 10), date(2024, 6, 15)))
    store.insert("bookings", _booking(2, date(2024, 6, 10), date(2024, 6, 15)))

    def overlap(start, end):
        return store.query_by_range_overlap(
            "bookings", "vehicle_id", 1, "start_date", "end_date", start, end
        )

    assert len(overlap(date(2024, 6, 15), date(2024, 6, 18))) == 1
    assert len(overlap(date(2024, 6, 1), date(2024, 6, 10))) == 1
    assert overlap(date(2024, 6, 16), date(2024, 6, 18)) == []


def test_update_merges_patch(store):
    updated = store.update("cars", 1, {"availability_status": "rented"})

    assert updated["availability_status"] == "rented"
    assert updated["daily_rate"] == Decimal("50")


def test_update_of_missing_record_raises(store):
    with pytest.raises(RecordNotFoundError):
        store.update("cars", 99, {"availability_status": "rented"})


def test_history_is_append_only(store):
    entry = store.insert("booking_history", {"booking_id": 1, "status": "pending", "note": ""})

    with pytest.raises(ImmutableRecordError):
        store.update("booking_history", entry["id"], {"note": "rewritten"})


def test_unit_of_work_rolls_back_every_write(store):
    with pytest.raises(RuntimeError):
        with store.atomic():
            store.insert("bookings", _booking(1, date(2024, 6, 1), date(2024, 6, 3)))
            store.update("cars", 1, {"availability_status": "rented"})
            raise RuntimeError("boom")

    assert store.query_by_field("bookings", "vehicle_id", 1) == []
    assert store.get("cars", 1)["availability_status"] == "available"


def test_nested_unit_of_work_rolls_back_with_outer(store):
    with pytest.raises(RuntimeError):
        with store.atomic():
            with store.atomic():
                store.insert("bookings", _booking(1, date(2024, 6, 1), date(2024, 6, 3)))
            raise RuntimeError("boom")

    assert store.query_by_field("bookings", "vehicle_id", 1) == []


@pytest.mark.django_db
def test_django_store_reads_and_writes_models():
    from apps.bookings.models import Booking
    from apps.fleet.models import Vehicle

    vehicle = Vehicle.objects.create(make="Toyota", model="Corolla", daily_rate=Decimal("40.00"))
    store = DjangoRecordStore()

    with store.atomic():
        record = store.insert("bookings", _booking(vehicle.pk, date(2024, 6, 10), date(2024, 6, 12)))
        store.update("cars", vehicle.pk, {"availability_status": "reserved"})

    assert Booking.objects.get(pk=record["id"]).vehicle == vehicle
    assert store.get("cars", vehicle.pk)["availability_status"] == "reserved"
    overlapping = store.query_by_range_overlap(
        "bookings", "vehicle_id", vehicle.pk, "start_date", "end_date", date(2024, 6, 12), date(2024, 6, 20)
    )
    assert [r["id"] for r in overlapping] == [record["id"]]


@pytest.mark.django_db
def test_django_store_rolls_back_on_error():
    from apps.bookings.models import Booking
    from apps.fleet.models import Vehicle

    vehicle = Vehicle.objects.create(make="Kia", model="Rio", daily_rate=Decimal("30.00"))
    store = DjangoRecordStore()

    with pytest.raises(RuntimeError):
        with store.atomic():
            store.insert("bookings", _booking(vehicle.pk, date(2024, 6, 10), date(2024, 6, 12)))
            raise RuntimeError("boom")

    assert not Booking.objects.exists()


@pytest.mark.django_db
def test_django_store_refuses_history_updates():
    store = DjangoRecordStore()
    with pytest.raises(ImmutableRecordError):
        store.update("booking_history", 1, {"note": "changed"})
