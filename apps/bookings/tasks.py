"""Celery tasks for the booking domain."""

from __future__ import annotations

import logging

from celery import shared_task  # type: ignore
from django.db import transaction  # type: ignore
from django.utils import timezone  # type: ignore

from apps.fleet.models import Vehicle

from .models import Booking

logger = logging.getLogger(__name__)


@shared_task(name="bookings.sync_vehicle_availability")
def sync_vehicle_availability() -> dict[str, int]:
    """
    Release vehicles whose `rented` flag no longer matches any booking.

    A vehicle stays rented while it has a confirmed booking. Rows removed
    through the admin for erroneous records can leave the flag behind;
    this task puts such vehicles back to available.

    Runs hourly through Celery Beat.

    Returns:
        dict: {"released": vehicles set back to available,
               "overdue": confirmed bookings past their return date}
    """
    today = timezone.localdate()
    released = 0

    for vehicle_id in Vehicle.objects.filter(
        availability_status=Vehicle.AvailabilityStatus.RENTED
    ).values_list("id", flat=True):
        try:
            with transaction.atomic():
                vehicle = Vehicle.objects.select_for_update().get(pk=vehicle_id)
                if vehicle.availability_status != Vehicle.AvailabilityStatus.RENTED:
                    continue
                if Booking.objects.filter(vehicle=vehicle, status=Booking.Status.CONFIRMED).exists():
                    continue
                vehicle.availability_status = Vehicle.AvailabilityStatus.AVAILABLE
                vehicle.save(update_fields=["availability_status", "updated_at"])
                released += 1
                logger.info(f"Vehicle {vehicle.pk} released: no confirmed bookings left")
        except Exception as e:
            logger.error(f"Error syncing availability of vehicle {vehicle_id}: {e}", exc_info=True)

    overdue = Booking.objects.filter(status=Booking.Status.CONFIRMED, end_date__lt=today).count()
    if overdue:
        logger.warning(f"{overdue} confirmed booking(s) are past their return date")

    return {"released": released, "overdue": overdue}
