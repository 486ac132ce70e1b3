"""Serializers for the vehicle catalogue."""

from __future__ import annotations

from datetime import timedelta

from rest_framework import serializers  # type: ignore

from .models import Vehicle

MAX_CALENDAR_DAYS = 366


class VehicleSerializer(serializers.ModelSerializer):
    class Meta:
        model = Vehicle
        fields = ["id", "make", "model", "year", "daily_rate", "currency", "availability_status"]
        read_only_fields = fields


class CalendarQuerySerializer(serializers.Serializer):
    """Window of a vehicle availability calendar."""

    start = serializers.DateField()
    end = serializers.DateField()

    def validate(self, attrs):  # type: ignore
        if attrs["end"] < attrs["start"]:
            raise serializers.ValidationError({"end": "End must not be before start."})
        if attrs["end"] - attrs["start"] > timedelta(days=MAX_CALENDAR_DAYS):
            raise serializers.ValidationError(f"Calendar window is limited to {MAX_CALENDAR_DAYS} days.")
        return attrs
