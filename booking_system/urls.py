# booking_system/urls.py
#
# Purpose:
# - Project URL router.
# - JSON APIs live under /api/; the Django admin under /admin/.
#
from django.contrib import admin
from django.urls import include, path

urlpatterns = [
    # Django admin
    path("admin/", admin.site.urls),

    # =====
    # API's
    # =====
    path("api/", include("booking.urls")),
    path("api/schedules/", include("staff.urls")),
    path("api/reports/", include("reports.urls")),
]
