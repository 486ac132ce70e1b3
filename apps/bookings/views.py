"""API views for the booking engine."""

from __future__ import annotations

import logging

from django_filters.rest_framework import DjangoFilterBackend  # type: ignore
from rest_framework import mixins, permissions, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.response import Response  # type: ignore

from shared.domain.exceptions import DomainError

from . import services
from .domain.exceptions import ConflictError
from .domain.lifecycle import ReservationStatus
from .filters import BookingFilterSet
from .models import Booking
from .serializers import (
    BookingCreateSerializer,
    BookingHistorySerializer,
    BookingSerializer,
    QuoteSerializer,
    RescheduleSerializer,
    TransitionSerializer,
)

logger = logging.getLogger(__name__)


def _is_staff(user) -> bool:  # type: ignore
    return bool(getattr(user, "is_staff", False) or getattr(user, "is_superuser", False))


def engine_error_response(exc: Exception) -> Response:
    """Map booking engine errors onto HTTP responses."""

    logger.info(f"Booking request rejected: {exc.__class__.__name__}: {exc}")
    if isinstance(exc, LookupError):
        return Response({"detail": str(exc)}, status=status.HTTP_404_NOT_FOUND)
    if isinstance(exc, ConflictError):
        return Response(exc.to_dict(), status=status.HTTP_409_CONFLICT)
    return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)


class IsBookingStakeholder(permissions.BasePermission):
    """Staff manage every booking; customers only their own."""

    def has_object_permission(self, request, view, obj: Booking):  # type: ignore
        user = request.user
        if not user.is_authenticated:
            return False
        if _is_staff(user):
            return True
        return obj.customer_id == user.id


class BookingViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet,
):
    """Bookings: list, detail, create, quote, lifecycle moves and edits."""

    queryset = Booking.objects.select_related("vehicle", "customer").all()
    serializer_class = BookingSerializer
    permission_classes = [permissions.IsAuthenticatedOrReadOnly, IsBookingStakeholder]
    filter_backends = [DjangoFilterBackend]
    filterset_class = BookingFilterSet

    def get_queryset(self):  # type: ignore
        user = self.request.user
        qs = super().get_queryset()
        if not user.is_authenticated:
            return qs.none()
        if _is_staff(user):
            return qs
        return qs.filter(customer=user)

    def _read(self, record: dict) -> Response:
        booking = Booking.objects.select_related("vehicle", "customer").get(pk=record["id"])
        return Response(BookingSerializer(booking, context=self.get_serializer_context()).data)

    def create(self, request, *args, **kwargs):  # type: ignore
        serializer = BookingCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        staff = _is_staff(request.user)

        customer = data.get("customer") if staff else request.user
        try:
            record = services.create_booking(
                data["vehicle"].pk,
                data["start_date"],
                data["end_date"],
                customer_id=customer.pk if customer else None,
                extra_charges=data["extra_charges"],
                discount_percent=data["discount_percent"] if staff else 0,
                pickup_location=data["pickup_location"],
                return_location=data["return_location"],
                notes=data["notes"],
                confirm=data["confirm"] and staff,
                created_by="admin" if staff else "customer",
            )
        except DomainError as exc:
            return engine_error_response(exc)

        response = self._read(record)
        response.status_code = status.HTTP_201_CREATED
        return response

    @action(detail=False, methods=["post"], permission_classes=[permissions.AllowAny])
    def quote(self, request):  # type: ignore
        serializer = QuoteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        vehicle = data.get("vehicle")
        daily_rate = data["daily_rate"] if "daily_rate" in data else vehicle.daily_rate
        try:
            pricing = services.quote(
                daily_rate,
                data["start_date"],
                data["end_date"],
                extra_charges=data["extra_charges"],
                discount_percent=data["discount_percent"],
                currency=vehicle.currency if vehicle else None,
            )
        except DomainError as exc:
            return engine_error_response(exc)
        return Response(pricing.quantized().to_dict())

    @action(detail=True, methods=["post"])
    def transition(self, request, pk=None):  # type: ignore
        booking: Booking = self.get_object()  # type: ignore
        serializer = TransitionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        new_status = serializer.validated_data["status"]

        if not _is_staff(request.user) and new_status != ReservationStatus.CANCELLED.value:
            return Response(
                {"detail": "Customers can only cancel their bookings."},
                status=status.HTTP_403_FORBIDDEN,
            )

        note = serializer.validated_data["note"] or (
            f"Status changed to {new_status} by {'admin' if _is_staff(request.user) else 'customer'}"
        )
        try:
            record = services.transition(booking.pk, new_status, note)
        except DomainError as exc:
            return engine_error_response(exc)
        return self._read(record)

    @action(detail=True, methods=["post"])
    def reschedule(self, request, pk=None):  # type: ignore
        booking: Booking = self.get_object()  # type: ignore
        serializer = RescheduleSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = dict(serializer.validated_data)

        if not _is_staff(request.user):
            # Customers may move their dates; prices stay under staff control.
            for field in ("daily_rate", "extra_charges", "discount_percent"):
                data.pop(field, None)
        try:
            record = services.reschedule_booking(booking.pk, data.pop("start_date"), data.pop("end_date"), **data)
        except DomainError as exc:
            return engine_error_response(exc)
        return self._read(record)

    @action(detail=True, methods=["get"])
    def history(self, request, pk=None):  # type: ignore
        booking: Booking = self.get_object()  # type: ignore
        entries = booking.history.all()
        return Response(BookingHistorySerializer(entries, many=True).data)
