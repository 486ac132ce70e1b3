"""Admin registration for bookings."""

from __future__ import annotations

from django.contrib import admin

from .models import Booking, BookingHistory


class BookingHistoryInline(admin.TabularInline):
    model = BookingHistory
    extra = 0
    can_delete = False
    readonly_fields = ("status", "note", "created_at")

    def has_add_permission(self, request, obj=None):  # type: ignore
        return False


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "vehicle",
        "customer",
        "status",
        "start_date",
        "end_date",
        "total_price",
        "created_at",
    )
    list_filter = ("status", "start_date", "end_date")
    search_fields = ("vehicle__make", "vehicle__model", "customer__email", "notes")
    readonly_fields = (
        "status",
        "days",
        "subtotal",
        "discount_amount",
        "total_price",
        "created_at",
        "updated_at",
    )
    inlines = [BookingHistoryInline]


@admin.register(BookingHistory)
class BookingHistoryAdmin(admin.ModelAdmin):
    list_display = ("booking", "status", "created_at")
    list_filter = ("status",)
    readonly_fields = ("booking", "status", "note", "created_at")

    def has_change_permission(self, request, obj=None):  # type: ignore
        return False

    def has_delete_permission(self, request, obj=None):  # type: ignore
        return False
