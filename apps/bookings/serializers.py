"""Serializers for the booking API."""

from __future__ import annotations

from decimal import Decimal

from django.contrib.auth import get_user_model  # type: ignore
from rest_framework import serializers  # type: ignore

from apps.fleet.models import Vehicle

from .models import Booking, BookingHistory


def _validate_range(attrs):  # type: ignore
    if attrs["end_date"] < attrs["start_date"]:
        raise serializers.ValidationError({"end_date": "End date must not be before start date."})
    return attrs


class BookingSerializer(serializers.ModelSerializer):
    """Read-only representation of a booking."""

    vehicle_id = serializers.ReadOnlyField(source="vehicle.id")
    vehicle_name = serializers.StringRelatedField(source="vehicle")
    customer_id = serializers.ReadOnlyField(source="customer.id")

    class Meta:
        model = Booking
        fields = [
            "id",
            "vehicle_id",
            "vehicle_name",
            "customer_id",
            "start_date",
            "end_date",
            "status",
            "daily_rate",
            "extra_charges",
            "discount_percent",
            "days",
            "subtotal",
            "discount_amount",
            "total_price",
            "currency",
            "pickup_location",
            "return_location",
            "notes",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class BookingCreateSerializer(serializers.Serializer):
    """Input of the storefront widget and the admin create form."""

    vehicle = serializers.PrimaryKeyRelatedField(queryset=Vehicle.objects.all())
    customer = serializers.PrimaryKeyRelatedField(
        queryset=get_user_model().objects.all(), required=False, allow_null=True
    )
    start_date = serializers.DateField()
    end_date = serializers.DateField()
    extra_charges = serializers.DecimalField(
        max_digits=10, decimal_places=2, min_value=Decimal("0"), default=Decimal("0")
    )
    discount_percent = serializers.DecimalField(
        max_digits=5, decimal_places=2, min_value=Decimal("0"), max_value=Decimal("100"), default=Decimal("0")
    )
    pickup_location = serializers.CharField(max_length=255, required=False, allow_blank=True, default="")
    return_location = serializers.CharField(max_length=255, required=False, allow_blank=True, default="")
    notes = serializers.CharField(required=False, allow_blank=True, default="")
    confirm = serializers.BooleanField(required=False, default=False)

    def validate(self, attrs):  # type: ignore
        return _validate_range(attrs)


class QuoteSerializer(serializers.Serializer):
    """Price preview: either a vehicle or an explicit daily rate."""

    vehicle = serializers.PrimaryKeyRelatedField(queryset=Vehicle.objects.all(), required=False)
    daily_rate = serializers.DecimalField(
        max_digits=10, decimal_places=2, min_value=Decimal("0"), required=False, allow_null=True
    )
    start_date = serializers.DateField()
    end_date = serializers.DateField()
    extra_charges = serializers.DecimalField(
        max_digits=10, decimal_places=2, min_value=Decimal("0"), default=Decimal("0")
    )
    discount_percent = serializers.DecimalField(
        max_digits=5, decimal_places=2, min_value=Decimal("0"), max_value=Decimal("100"), default=Decimal("0")
    )

    def validate(self, attrs):  # type: ignore
        if attrs.get("vehicle") is None and "daily_rate" not in attrs:
            raise serializers.ValidationError("Either vehicle or daily_rate is required.")
        return _validate_range(attrs)


class TransitionSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Booking.Status.choices)
    note = serializers.CharField(required=False, allow_blank=True, default="")


class RescheduleSerializer(serializers.Serializer):
    start_date = serializers.DateField()
    end_date = serializers.DateField()
    daily_rate = serializers.DecimalField(
        max_digits=10, decimal_places=2, min_value=Decimal("0"), required=False
    )
    extra_charges = serializers.DecimalField(
        max_digits=10, decimal_places=2, min_value=Decimal("0"), required=False
    )
    discount_percent = serializers.DecimalField(
        max_digits=5, decimal_places=2, min_value=Decimal("0"), max_value=Decimal("100"), required=False
    )
    note = serializers.CharField(required=False, allow_blank=True, default="")

    def validate(self, attrs):  # type: ignore
        return _validate_range(attrs)


class BookingHistorySerializer(serializers.ModelSerializer):
    class Meta:
        model = BookingHistory
        fields = ["id", "booking", "status", "note", "created_at"]
        read_only_fields = fields
