# reports/views.py

from rest_framework import serializers
from rest_framework.permissions import BasePermission
from rest_framework.response import Response
from rest_framework.views import APIView

from configmgr.utils import currency_code

from .stats import booking_stats


class IsStaffOnly(BasePermission):
    """
    Only allow requests from logged-in staff users.
    """
    def has_permission(self, request, view):
        return bool(request.user and request.user.is_staff)


class StatsQuerySerializer(serializers.Serializer):
    date_from = serializers.DateField(required=False)
    date_to = serializers.DateField(required=False)
    staff_id = serializers.IntegerField(min_value=1, required=False)


class ReportsView(APIView):
    """
    GET /api/reports/summary?date_from=YYYY-MM-DD&date_to=YYYY-MM-DD&staff_id=ID

    Returns JSON with:
    - total, pending, confirmed, completed, cancelled: booking counts
    - revenue: sum of total_amount over completed bookings (decimal string)
    - currency: configured currency code

    Only accessible by staff users.
    """
    permission_classes = [IsStaffOnly]

    def get(self, request):
        query = StatsQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)

        stats = booking_stats(**query.validated_data)
        stats["revenue"] = f"{stats['revenue']:.2f}"
        stats["currency"] = currency_code()
        return Response(stats)
