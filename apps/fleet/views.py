"""API views for the vehicle catalogue."""

from __future__ import annotations

from rest_framework import permissions, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.response import Response  # type: ignore

from apps.bookings import services

from .models import Vehicle
from .serializers import CalendarQuerySerializer, VehicleSerializer


class VehicleViewSet(viewsets.ReadOnlyModelViewSet):
    """Browse vehicles and their booked days."""

    queryset = Vehicle.objects.all()
    serializer_class = VehicleSerializer
    permission_classes = [permissions.AllowAny]

    @action(detail=True, methods=["get"])
    def calendar(self, request, pk=None):  # type: ignore
        vehicle: Vehicle = self.get_object()  # type: ignore
        query = CalendarQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        start, end = query.validated_data["start"], query.validated_data["end"]

        booked = services.vehicle_calendar(vehicle.pk, start, end)
        return Response(
            {
                "vehicle_id": vehicle.pk,
                "start": start.isoformat(),
                "end": end.isoformat(),
                "availability_status": vehicle.availability_status,
                "occupied_dates": [day.isoformat() for day in booked],
            }
        )
