"""Vehicle catalogue models."""

from __future__ import annotations

from decimal import Decimal

from django.conf import settings  # type: ignore
from django.core.validators import MinValueValidator  # type: ignore
from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore

from apps.bookings.domain.lifecycle import VehicleAvailability
from shared.domain.value_objects import CURRENCY_CHOICES


class Vehicle(models.Model):
    """A car offered for rent."""

    class AvailabilityStatus(models.TextChoices):
        AVAILABLE = VehicleAvailability.AVAILABLE.value, _("Available")
        RENTED = VehicleAvailability.RENTED.value, _("Rented")
        MAINTENANCE = VehicleAvailability.MAINTENANCE.value, _("Maintenance")
        RESERVED = VehicleAvailability.RESERVED.value, _("Reserved")

    make = models.CharField(max_length=100)
    model = models.CharField(max_length=100)
    year = models.PositiveSmallIntegerField(null=True, blank=True)
    daily_rate = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[MinValueValidator(Decimal("0.00"))],
    )
    currency = models.CharField(max_length=3, choices=CURRENCY_CHOICES, default=settings.BOOKING_CURRENCY)
    availability_status = models.CharField(
        max_length=20,
        choices=AvailabilityStatus.choices,
        default=AvailabilityStatus.AVAILABLE,
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Vehicle")
        verbose_name_plural = _("Vehicles")
        ordering = ["make", "model", "id"]
        indexes = [
            models.Index(fields=["availability_status"], name="fleet_vehic_availab_4c1b2e_idx"),
        ]

    def __str__(self) -> str:
        label = f"{self.make} {self.model}"
        return f"{label} ({self.year})" if self.year else label
