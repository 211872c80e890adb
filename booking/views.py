# booking/views.py
#
# Purpose:
# - API boundary for the booking core: catalog CRUD, availability,
#   booking admission, status changes and calendar listing.
# - Permissions:
#   * Service/Staff writes are staff-only (IsStaffOrReadOnly).
#   * Availability and booking creation require NO login.
#   * Authentication itself is delegated to the host (session auth).
#
# Notes for developers:
# - Views only validate/translate payloads. All booking rules live in
#   services/booking_manager.py and services/availability_engine.py.
# - Errors raised by the core (booking.exceptions.BookingError) are rendered
#   by booking.exceptions.api_exception_handler as {"kind", "detail"}.
#
from django.db.models import ProtectedError
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import BasePermission
from rest_framework.response import Response

from .exceptions import RecordInUse
from .models import Service, Staff
from .serializers import (
    AvailabilityQuerySerializer,
    BookingCreateSerializer,
    BookingFilterSerializer,
    BookingSerializer,
    BookingStatusSerializer,
    NextAvailableQuerySerializer,
    PaymentConfirmationSerializer,
    ServiceSerializer,
    StaffSerializer,
)
from .services.availability_engine import AvailabilityEngine
from .services.booking_manager import BookingManager
from .services.booking_store import BookingStore
from .services.slot_utils import minutes_to_hhmm


# -------------------- Permissions --------------------
class IsStaffOrReadOnly(BasePermission):
    """
    Read: anyone
    Write: staff only
    """
    def has_permission(self, request, view):
        if request.method in ("GET", "HEAD", "OPTIONS"):
            return True
        return bool(request.user and request.user.is_staff)


class ProtectedDestroyMixin:
    """
    Services and staff with bookings are protected (on_delete=PROTECT).
    Deleting one answers 409 in_use instead of a server error.
    """
    def perform_destroy(self, instance):
        try:
            instance.delete()
        except ProtectedError:
            raise RecordInUse(f"{instance} has bookings and cannot be deleted. Mark it inactive instead.")


# -------------------- ViewSets --------------------
class ServiceViewSet(ProtectedDestroyMixin, viewsets.ModelViewSet):
    """
    Service catalog:
    - Anyone can list active services.
    - Only staff can create/update/delete services.
    - Editing a price never touches existing bookings (they hold a snapshot).
    """
    serializer_class = ServiceSerializer
    permission_classes = [IsStaffOrReadOnly]

    def get_queryset(self):
        """
        Staff can see all services; public sees only active services.
        """
        user = getattr(self.request, "user", None)
        qs = Service.objects.all().order_by("category", "name")
        if user and user.is_authenticated and user.is_staff:
            return qs
        return qs.filter(active=True)


class StaffViewSet(ProtectedDestroyMixin, viewsets.ModelViewSet):
    serializer_class = StaffSerializer
    permission_classes = [IsStaffOrReadOnly]

    def get_queryset(self):
        user = getattr(self.request, "user", None)
        qs = Staff.objects.all().order_by("name")
        if user and user.is_authenticated and user.is_staff:
            return qs
        return qs.filter(active=True)


class BookingViewSet(mixins.ListModelMixin, mixins.RetrieveModelMixin, viewsets.GenericViewSet):
    """
    Endpoints:
    - GET    /api/bookings/?staff_id=&date_from=&date_to=&status=   bookings in range
    - POST   /api/bookings/                                         create (admission)
    - POST   /api/bookings/{id}/status/                             status change
    - POST   /api/bookings/{id}/payment-confirmed/                  payment hook
    - GET    /api/bookings/availability/?staff_id=&date=&duration=  free start times
    - GET    /api/bookings/next-available/?staff_id=&service_id=    first free slot

    There is no PUT/PATCH/DELETE: bookings change only through the status
    machine, and are only created through admission.
    """
    serializer_class = BookingSerializer
    store = BookingStore()
    manager = BookingManager(store=store)
    engine = AvailabilityEngine(bookings=store)

    def get_queryset(self):
        filters = BookingFilterSerializer(data=self.request.query_params)
        filters.is_valid(raise_exception=True)
        return self.store.find(**filters.validated_data)

    def get_object(self):
        return self.store.get(self.kwargs["pk"])

    def create(self, request, *args, **kwargs):
        """
        Admit a booking. On success the booking is pending/unpaid and the
        response carries the upfront fee for the external payment step.
        """
        serializer = BookingCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        result = self.manager.create_booking(serializer.to_request())
        return Response(
            {
                "booking_id": result.booking_id,
                "upfront_fee": str(result.upfront_fee),
                "status": result.status,
                "payment_status": result.payment_status,
            },
            status=status.HTTP_201_CREATED,
        )

    @action(detail=True, methods=["post"], url_path="status")
    def set_status(self, request, pk=None):
        serializer = BookingStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        booking = self.manager.set_status(
            pk,
            serializer.validated_data["status"],
            serializer.validated_data.get("payment_status"),
        )
        return Response(BookingSerializer(booking).data)

    @action(detail=True, methods=["post"], url_path="payment-confirmed")
    def payment_confirmed(self, request, pk=None):
        """
        Called by the payment integration after the upfront fee is captured.
        Moves pending -> confirmed with payment_status=paid.
        """
        serializer = PaymentConfirmationSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        booking = self.manager.confirm_payment(pk, serializer.validated_data["payment_reference"])
        return Response(BookingSerializer(booking).data)

    @action(detail=False, methods=["get", "post"], url_path="availability")
    def availability(self, request):
        """
        GET /api/bookings/availability/?staff_id=ID&date=YYYY-MM-DD&duration=MIN
        (service_id may replace duration). A closed or fully booked day
        returns an empty list, not an error.
        """
        data = request.query_params if request.method == "GET" else request.data
        query = AvailabilityQuerySerializer(data=data)
        query.is_valid(raise_exception=True)
        params = query.validated_data

        slots = self.engine.available_times(params["staff_id"], params["date"], params["duration"])
        return Response({
            "staff_id": params["staff_id"],
            "date": params["date"].isoformat(),
            "duration": params["duration"],
            "slots": slots,
        })

    @action(detail=False, methods=["get"], url_path="next-available")
    def next_available(self, request):
        query = NextAvailableQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        params = query.validated_data

        found = self.engine.next_available_slot(params["staff_id"], params["duration"])
        if found is None:
            return Response({"date": None, "time": None})
        day, minute = found
        return Response({"date": day.isoformat(), "time": minutes_to_hhmm(minute)})
