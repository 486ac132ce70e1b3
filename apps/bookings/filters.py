"""FilterSet definitions for booking listings."""

from __future__ import annotations

import django_filters  # type: ignore

from .models import Booking


class BookingFilterSet(django_filters.FilterSet):
    """Admin/customer booking list filters: status, vehicle and a date window."""

    status = django_filters.ChoiceFilter(choices=Booking.Status.choices)
    vehicle = django_filters.NumberFilter(field_name="vehicle_id")
    starts_after = django_filters.DateFilter(field_name="start_date", lookup_expr="gte")
    ends_before = django_filters.DateFilter(field_name="end_date", lookup_expr="lte")
    active_on = django_filters.DateFilter(method="filter_active_on")

    class Meta:
        model = Booking
        fields = ["status", "vehicle"]

    def filter_active_on(self, queryset, name, value):  # type: ignore
        return queryset.filter(start_date__lte=value, end_date__gte=value)
