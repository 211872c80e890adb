"""
stats.py
--------
Booking statistics for the dashboard: totals per status and revenue.
Revenue counts completed bookings only, using the snapshotted total_amount.
"""

from decimal import Decimal

from django.db.models import Count, Sum

from booking.models import Booking


def booking_stats(date_from=None, date_to=None, staff_id=None) -> dict:
    qs = Booking.objects.in_range(staff_id=staff_id, date_from=date_from, date_to=date_to)

    stats = {status: 0 for status, _label in Booking.STATUS_CHOICES}
    for row in qs.order_by().values("status").annotate(count=Count("id")):
        stats[row["status"]] = row["count"]
    stats["total"] = sum(stats[status] for status, _label in Booking.STATUS_CHOICES)

    revenue = qs.filter(status=Booking.STATUS_COMPLETED).aggregate(total=Sum("total_amount"))["total"]
    stats["revenue"] = revenue if revenue is not None else Decimal("0.00")
    return stats
