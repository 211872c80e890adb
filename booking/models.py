# booking/models.py
#
# Purpose:
# - Core domain models for the booking system.
#
# Design highlights:
# - Service: Validates duration and fees; "active" flag controls bookability.
# - Staff: Identity of a stylist/therapist; unique email for admin clarity.
#   Weekly working hours live in the staff app (staff.models.WorkingDay).
# - Booking:
#   • Snapshots duration, total_amount and upfront_fee from the Service at
#     creation time, so later service edits never change existing bookings.
#   • booking_time is minute-of-day (0..1439); rendered as HH:MM by the API.
#   • status: pending -> confirmed -> completed, or cancelled from any
#     non-terminal state (see services/booking_manager.py).
# - DayLock: One row per (staff, date). Admission locks it with
#   select_for_update() to serialize check-then-insert for that day.
#
# Notes for developers:
# - Do not create Booking rows directly from views. Go through
#   BookingManager.create_booking so the overlap re-check runs under the lock.
#

from decimal import Decimal

from django.core.exceptions import ValidationError
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models

MINUTES_PER_DAY = 24 * 60


# -------------------------
# Service catalog item
# -------------------------
class Service(models.Model):
    """
    A service offered by the salon.

    Rules:
    - duration_minutes must be > 0
    - 0 <= upfront_fee <= price
    - active controls visibility and bookability
    """
    name = models.CharField(max_length=100)
    description = models.TextField(blank=True)
    duration_minutes = models.PositiveIntegerField(
        validators=[MinValueValidator(1)]  # duration must be >= 1 minute
    )
    price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.00"))],
    )
    upfront_fee = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[MinValueValidator(Decimal("0.00"))],
    )
    category = models.CharField(max_length=50, blank=True)
    active = models.BooleanField(default=True)

    def __str__(self):
        return f"{self.name} (R{self.price})"

    def clean(self):
        if self.price is not None and self.upfront_fee is not None and self.upfront_fee > self.price:
            raise ValidationError({"upfront_fee": "Upfront fee cannot exceed the service price."})


# -------------------------
# Staff member / Stylist
# -------------------------
class Staff(models.Model):
    """
    A stylist or therapist who can be booked.
    A default weekly schedule is created for new staff (staff/signals.py).
    """
    name = models.CharField(max_length=100)
    email = models.EmailField(unique=True)
    phone = models.CharField(max_length=20, blank=True)
    specialties = models.JSONField(default=list, blank=True)
    active = models.BooleanField(default=True)
    is_owner = models.BooleanField(default=False)

    class Meta:
        verbose_name_plural = "staff"

    def __str__(self):
        return self.name


# -------------------------
# Booking record
# -------------------------
class BookingQuerySet(models.QuerySet):
    def active(self):
        """Bookings that reserve time (cancelled ones do not)."""
        return self.filter(status__in=Booking.ACTIVE_STATUSES)

    def for_staff_day(self, staff_id, booking_date):
        return self.filter(staff_id=staff_id, booking_date=booking_date)

    def in_range(self, staff_id=None, date_from=None, date_to=None, status=None):
        qs = self
        if staff_id is not None:
            qs = qs.filter(staff_id=staff_id)
        if date_from is not None:
            qs = qs.filter(booking_date__gte=date_from)
        if date_to is not None:
            qs = qs.filter(booking_date__lte=date_to)
        if status:
            qs = qs.filter(status=status)
        return qs.order_by("booking_date", "booking_time", "id")

    def overlapping(self, start_minute: int, end_minute: int):
        """
        Rows overlapping [start_minute, end_minute):
            existing_start < new_end AND existing_end > new_start
        The end is derived from the snapshotted duration, so the check runs
        in Python over the (small) per-day result set.
        """
        return [
            b for b in self
            if b.booking_time < end_minute and b.end_minute > start_minute
        ]


class Booking(models.Model):
    """
    Appointment booking.

    Lifecycle:
    - created pending/unpaid by BookingManager.create_booking
    - confirmed/paid once the external payment step reports success
    - completed (after the appointment) or cancelled
    - completed and cancelled are terminal
    """
    STATUS_PENDING = "pending"
    STATUS_CONFIRMED = "confirmed"
    STATUS_COMPLETED = "completed"
    STATUS_CANCELLED = "cancelled"
    STATUS_CHOICES = [
        (STATUS_PENDING, "Pending"),
        (STATUS_CONFIRMED, "Confirmed"),
        (STATUS_COMPLETED, "Completed"),
        (STATUS_CANCELLED, "Cancelled"),
    ]
    ACTIVE_STATUSES = (STATUS_PENDING, STATUS_CONFIRMED)

    PAYMENT_UNPAID = "unpaid"
    PAYMENT_PAID = "paid"
    PAYMENT_REFUNDED = "refunded"
    PAYMENT_STATUS_CHOICES = [
        (PAYMENT_UNPAID, "Unpaid"),
        (PAYMENT_PAID, "Paid"),
        (PAYMENT_REFUNDED, "Refunded"),
    ]

    client_name = models.CharField(max_length=100)
    client_email = models.EmailField()
    client_phone = models.CharField(max_length=20, blank=True)
    service = models.ForeignKey(Service, on_delete=models.PROTECT, related_name="bookings")
    staff = models.ForeignKey(Staff, on_delete=models.PROTECT, related_name="bookings")
    booking_date = models.DateField()
    booking_time = models.PositiveSmallIntegerField(
        validators=[MaxValueValidator(MINUTES_PER_DAY - 1)],
        help_text="Start as minute of day (0..1439).",
    )
    duration_minutes = models.PositiveIntegerField(
        validators=[MinValueValidator(1)],
        help_text="Copied from the service when the booking was made.",
    )
    total_amount = models.DecimalField(max_digits=10, decimal_places=2)
    upfront_fee = models.DecimalField(max_digits=10, decimal_places=2)
    status = models.CharField(
        max_length=10,
        choices=STATUS_CHOICES,
        default=STATUS_PENDING,
        help_text="Booking lifecycle status",
    )
    payment_status = models.CharField(
        max_length=10,
        choices=PAYMENT_STATUS_CHOICES,
        default=PAYMENT_UNPAID,
    )
    payment_reference = models.CharField(max_length=255, null=True, blank=True)
    notes = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = BookingQuerySet.as_manager()

    class Meta:
        ordering = ["booking_date", "booking_time", "id"]
        indexes = [
            models.Index(fields=["staff", "booking_date"], name="booking_staff_date_idx"),
            models.Index(fields=["status"], name="booking_status_idx"),
        ]

    @property
    def end_minute(self) -> int:
        return self.booking_time + self.duration_minutes

    @property
    def is_terminal(self) -> bool:
        return self.status in (self.STATUS_COMPLETED, self.STATUS_CANCELLED)

    def __str__(self):
        return f"{self.client_name} → {self.service.name} on {self.booking_date}"


# -------------------------
# Admission serialization point
# -------------------------
class DayLock(models.Model):
    """
    Lock row for one staff member's day.
    BookingStore.locked_day() selects it FOR UPDATE before re-checking
    overlaps, so two admissions for the same (staff, date) run one at a time.
    """
    staff = models.ForeignKey(Staff, on_delete=models.CASCADE, related_name="day_locks")
    date = models.DateField()

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["staff", "date"], name="uniq_daylock_staff_date"),
        ]

    def __str__(self):
        return f"lock {self.staff_id}@{self.date}"
