"""URL configuration for the booking service."""
from django.contrib import admin  # type: ignore
from django.urls import path, include  # type: ignore

urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/v1/fleet/', include('apps.fleet.urls')),
    path('api/v1/bookings/', include('apps.bookings.urls')),
]
