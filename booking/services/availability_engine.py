"""
availability_engine.py
----------------------
Computes the bookable start times for (staff, date, service duration).

Algorithm (per day):
1) Resolve the day's hours (date exception first, weekly template otherwise).
   Closed/disabled day -> no slots.
2) Working window minus break -> one or two open windows.
3) Subtract every non-cancelled booking's [start, start + duration) interval
   (interval subtraction, so a booking may split a window).
4) Quantize: starts at each remaining window's start, stepping by the slot
   interval, while start + duration fits in the window.
5) Drop starts earlier than now + minimum lead time, and whole days outside
   the booking window (past dates, or too far ahead).

Overlap logic runs on exact minutes; quantization happens last, so a
non-aligned booking never hides an adjacent slot that still fits.

Read-only: no locking. Admission re-checks under the day lock.
"""

import logging
from datetime import datetime, timedelta

from django.utils import timezone

from configmgr import utils as config
from staff.working_hours import WorkingHoursStore

from ..models import Staff
from .booking_store import BookingStore
from .slot_utils import generate_slot_starts, minutes_to_hhmm, subtract_intervals

logger = logging.getLogger(__name__)


def local_now(now=None) -> datetime:
    """
    Normalize 'now' to a naive datetime in the salon's timezone.
    Aware values are converted; naive values are taken as already local.
    """
    if now is None:
        now = timezone.now()
    if timezone.is_aware(now):
        now = timezone.localtime(now).replace(tzinfo=None)
    return now


class AvailabilityEngine:
    def __init__(self, working_hours=None, bookings=None):
        self.working_hours = working_hours or WorkingHoursStore()
        self.bookings = bookings or BookingStore()

    def is_within_booking_window(self, day, now=None) -> bool:
        today = local_now(now).date()
        if day < today:
            return False
        return day <= today + timedelta(days=config.booking_window_days())

    def open_windows(self, staff_id, day):
        """Open [start, end) minute windows after breaks and bookings are removed."""
        schedule = self.working_hours.resolve_day(staff_id, day)
        windows = schedule.windows()
        if not windows:
            return []
        busy = self.bookings.busy_intervals(staff_id, day)
        return subtract_intervals(windows, busy)

    def compute_slots(self, staff_id, day, duration_minutes: int, now=None):
        """
        Ascending minute-of-day start times for a booking of duration_minutes.

        Returns [] (never an error) when the day is closed, outside the booking
        window, fully booked, or the duration fits no open window.
        Raises NotFound for an unknown staff member.
        """
        if duration_minutes <= 0:
            raise ValueError("duration_minutes must be positive")

        now = local_now(now)
        windows = self.open_windows(staff_id, day)
        if not windows:
            return []
        if not Staff.objects.filter(pk=staff_id, active=True).exists():
            return []
        if not self.is_within_booking_window(day, now):
            return []

        candidates = generate_slot_starts(windows, duration_minutes, config.slot_interval_minutes())

        cutoff = now + timedelta(minutes=config.min_booking_lead_minutes())
        day_start = datetime(day.year, day.month, day.day)
        slots = [m for m in candidates if day_start + timedelta(minutes=m) >= cutoff]

        logger.debug(
            "compute_slots staff=%s date=%s duration=%s -> %d slot(s)",
            staff_id, day, duration_minutes, len(slots),
        )
        return slots

    def available_times(self, staff_id, day, duration_minutes: int, now=None):
        """compute_slots rendered as HH:MM strings (API boundary format)."""
        return [minutes_to_hhmm(m) for m in self.compute_slots(staff_id, day, duration_minutes, now)]

    def is_slot_available(self, staff_id, day, start_minute: int, duration_minutes: int, now=None) -> bool:
        return start_minute in self.compute_slots(staff_id, day, duration_minutes, now)

    def next_available_slot(self, staff_id, duration_minutes: int, now=None):
        """
        First (date, minute) with availability inside the booking window,
        scanning day by day from today. None if nothing is free.
        """
        now = local_now(now)
        today = now.date()
        for offset in range(config.booking_window_days() + 1):
            day = today + timedelta(days=offset)
            slots = self.compute_slots(staff_id, day, duration_minutes, now)
            if slots:
                return day, slots[0]
        return None
