"""Admin registration for the fleet."""

from __future__ import annotations

from django.contrib import admin

from .models import Vehicle


@admin.register(Vehicle)
class VehicleAdmin(admin.ModelAdmin):
    list_display = ("make", "model", "year", "daily_rate", "currency", "availability_status")
    list_filter = ("availability_status", "make")
    search_fields = ("make", "model")
