"""Booking persistence models for the car-rental engine."""

from __future__ import annotations

from decimal import Decimal

from django.conf import settings  # type: ignore
from django.core.exceptions import ValidationError  # type: ignore
from django.core.validators import MaxValueValidator, MinValueValidator  # type: ignore
from django.db import models, transaction  # type: ignore
from django.utils import timezone  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore

from apps.bookings.domain.lifecycle import ReservationStatus
from shared.domain.exceptions import InvalidRangeError
from shared.domain.value_objects import CURRENCY_CHOICES, DateRange


class Booking(models.Model):
    """Rental of one vehicle over an inclusive date range."""

    class Status(models.TextChoices):
        PENDING = ReservationStatus.PENDING.value, _("Pending")
        CONFIRMED = ReservationStatus.CONFIRMED.value, _("Confirmed")
        COMPLETED = ReservationStatus.COMPLETED.value, _("Completed")
        CANCELLED = ReservationStatus.CANCELLED.value, _("Cancelled")

    vehicle = models.ForeignKey(
        "fleet.Vehicle",
        on_delete=models.PROTECT,
        related_name="bookings",
    )
    customer = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="car_bookings",
    )
    start_date = models.DateField()
    end_date = models.DateField()
    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.PENDING,
    )
    daily_rate = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=Decimal("0.00"),
        help_text=_("Vehicle rate captured when the booking was priced."),
    )
    extra_charges = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal("0.00"))
    discount_percent = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[MinValueValidator(Decimal("0")), MaxValueValidator(Decimal("100"))],
    )
    days = models.PositiveIntegerField(default=1)
    subtotal = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    discount_amount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    total_price = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    currency = models.CharField(max_length=3, choices=CURRENCY_CHOICES, default=settings.BOOKING_CURRENCY)
    pickup_location = models.CharField(max_length=255, blank=True)
    return_location = models.CharField(max_length=255, blank=True)
    notes = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Booking")
        verbose_name_plural = _("Bookings")
        ordering = ["-created_at", "-id"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(end_date__gte=models.F("start_date")),
                name="booking_valid_date_range",
            ),
            models.CheckConstraint(
                condition=models.Q(discount_percent__gte=0) & models.Q(discount_percent__lte=100),
                name="booking_discount_percent_range",
            ),
        ]
        indexes = [
            models.Index(fields=["vehicle", "start_date", "end_date"], name="bookings_bo_vehicle_8e5a1d_idx"),
            models.Index(fields=["status"], name="bookings_bo_status_3f2c7a_idx"),
        ]

    def __str__(self) -> str:
        return f"Booking #{self.pk} for vehicle {self.vehicle_id} ({self.start_date} - {self.end_date})"

    def clean(self) -> None:
        try:
            DateRange(self.start_date, self.end_date)
        except InvalidRangeError as exc:
            raise ValidationError({"end_date": str(exc)}) from exc

    def save(self, *args, **kwargs):  # type: ignore
        with transaction.atomic(using=kwargs.get("using")):
            self.clean()
            super().save(*args, **kwargs)


class BookingHistory(models.Model):
    """Append-only audit trail of booking status changes."""

    booking = models.ForeignKey(
        Booking,
        on_delete=models.CASCADE,
        related_name="history",
    )
    status = models.CharField(max_length=20)
    note = models.TextField(blank=True)
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        verbose_name = _("Booking history entry")
        verbose_name_plural = _("Booking history")
        ordering = ["created_at", "id"]

    def __str__(self) -> str:
        return f"Booking #{self.booking_id}: {self.status} at {self.created_at:%Y-%m-%d %H:%M}"

    def save(self, *args, **kwargs):  # type: ignore
        if not self._state.adding:
            raise ValidationError(_("Booking history entries cannot be modified."))
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):  # type: ignore
        raise ValidationError(_("Booking history entries cannot be deleted."))
