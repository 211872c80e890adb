from rest_framework import viewsets
from rest_framework.permissions import BasePermission

from .models import WorkingDay, WorkingHoursException
from .serializers import WorkingDaySerializer, WorkingHoursExceptionSerializer


class IsStaffOnly(BasePermission):
    def has_permission(self, request, view):
        return bool(request.user and request.user.is_staff)


class _StaffFilterMixin:
    """Optional ?staff_id= filter."""
    def get_queryset(self):
        qs = super().get_queryset()
        staff_id = self.request.query_params.get("staff_id")
        if staff_id and staff_id.isdigit():
            qs = qs.filter(staff_id=int(staff_id))
        return qs


class WorkingDayViewSet(_StaffFilterMixin, viewsets.ModelViewSet):
    queryset = WorkingDay.objects.all().order_by("staff_id", "weekday")
    serializer_class = WorkingDaySerializer
    permission_classes = [IsStaffOnly]


class WorkingHoursExceptionViewSet(_StaffFilterMixin, viewsets.ModelViewSet):
    queryset = WorkingHoursException.objects.all().order_by("staff_id", "date")
    serializer_class = WorkingHoursExceptionSerializer
    permission_classes = [IsStaffOnly]
