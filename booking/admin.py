from django.contrib import admin, messages

from .exceptions import BookingError
from .models import Booking, DayLock, Service, Staff
from .services.booking_manager import BookingManager
from .services.slot_utils import minutes_to_hhmm


@admin.register(Service)
class ServiceAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "category", "price", "upfront_fee", "duration_minutes", "active")
    list_filter = ("active", "category")
    search_fields = ("name",)


@admin.register(Staff)
class StaffAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "email", "phone", "active", "is_owner")
    list_filter = ("active", "is_owner")
    search_fields = ("name", "email")


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    """
    Bookings are admitted through the API and change status only through
    BookingManager, so the scheduling and lifecycle fields are read-only
    here. Status changes go through the actions below.
    """
    list_display = ("id", "client_name", "service", "staff", "booking_date", "start", "status", "payment_status")
    list_filter = ("status", "payment_status", "service", "staff")
    search_fields = ("client_name", "client_email", "service__name")
    readonly_fields = (
        "service", "staff", "booking_date", "booking_time", "duration_minutes",
        "total_amount", "upfront_fee", "status", "payment_status", "payment_reference",
        "created_at", "updated_at",
    )
    actions = ("confirm_selected", "complete_selected", "cancel_selected")
    manager = BookingManager()

    @admin.display(description="Start", ordering="booking_time")
    def start(self, obj):
        return minutes_to_hhmm(obj.booking_time)

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        # Cancel instead; the lifecycle keeps cancelled rows.
        return False

    def _apply_status(self, request, queryset, new_status):
        changed, refused = 0, []
        for booking in queryset:
            try:
                self.manager.set_status(booking.pk, new_status)
                changed += 1
            except BookingError as exc:
                refused.append(f"#{booking.pk}: {exc.message}")
        if changed:
            self.message_user(request, f"{changed} booking(s) marked {new_status}.")
        if refused:
            self.message_user(request, "Not changed: " + "; ".join(refused), level=messages.ERROR)

    @admin.action(description="Mark selected bookings confirmed")
    def confirm_selected(self, request, queryset):
        self._apply_status(request, queryset, Booking.STATUS_CONFIRMED)

    @admin.action(description="Mark selected bookings completed")
    def complete_selected(self, request, queryset):
        self._apply_status(request, queryset, Booking.STATUS_COMPLETED)

    @admin.action(description="Cancel selected bookings")
    def cancel_selected(self, request, queryset):
        self._apply_status(request, queryset, Booking.STATUS_CANCELLED)


@admin.register(DayLock)
class DayLockAdmin(admin.ModelAdmin):
    list_display = ("staff", "date")
    list_filter = ("staff",)
