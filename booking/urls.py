# booking/urls.py
#
# Purpose:
# - Expose REST API endpoints for the booking app via DRF router.
#
# Notes for developers:
# - BookingViewSet adds extra routes through @action:
#     /bookings/availability/, /bookings/next-available/,
#     /bookings/{id}/status/, /bookings/{id}/payment-confirmed/

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from .views import BookingViewSet, ServiceViewSet, StaffViewSet

# --------------------------
# DRF Router registrations
# --------------------------
router = DefaultRouter()
router.register(r"services", ServiceViewSet, basename="service")
router.register(r"staff", StaffViewSet, basename="staff")
router.register(r"bookings", BookingViewSet, basename="booking")

urlpatterns = [
    path("", include(router.urls)),
]
