"""Tests for the vehicle catalogue and availability calendar API."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from apps.bookings.models import Booking
from apps.fleet.models import Vehicle


class VehicleCalendarAPITests(APITestCase):
    def setUp(self) -> None:
        self.vehicle = Vehicle.objects.create(
            make="Honda",
            model="Civic",
            year=2021,
            daily_rate=Decimal("70.00"),
        )
        Booking.objects.create(
            vehicle=self.vehicle,
            start_date=date(2024, 7, 10),
            end_date=date(2024, 7, 12),
            status=Booking.Status.CONFIRMED,
        )
        Booking.objects.create(
            vehicle=self.vehicle,
            start_date=date(2024, 7, 14),
            end_date=date(2024, 7, 14),
            status=Booking.Status.CANCELLED,
        )

    def _calendar_url(self, vehicle_id=None):
        return reverse("vehicle-calendar", args=[vehicle_id or self.vehicle.id])

    def test_vehicle_list_is_public(self) -> None:
        response = self.client.get(reverse("vehicle-list"))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data[0]["make"], "Honda")
        self.assertEqual(response.data[0]["availability_status"], "available")

    def test_calendar_lists_days_held_by_active_bookings(self) -> None:
        response = self.client.get(self._calendar_url(), {"start": "2024-07-09", "end": "2024-07-15"})

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(
            response.data["occupied_dates"],
            ["2024-07-10", "2024-07-11", "2024-07-12"],
        )
        self.assertEqual(response.data["availability_status"], "available")

    def test_calendar_window_edges_are_inclusive(self) -> None:
        response = self.client.get(self._calendar_url(), {"start": "2024-07-12", "end": "2024-07-12"})

        self.assertEqual(response.data["occupied_dates"], ["2024-07-12"])

    def test_calendar_rejects_reversed_window(self) -> None:
        response = self.client.get(self._calendar_url(), {"start": "2024-07-15", "end": "2024-07-01"})

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_calendar_rejects_oversized_window(self) -> None:
        response = self.client.get(self._calendar_url(), {"start": "2024-01-01", "end": "2025-06-01"})

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_calendar_of_unknown_vehicle_is_404(self) -> None:
        response = self.client.get(self._calendar_url(999), {"start": "2024-07-01", "end": "2024-07-02"})

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
