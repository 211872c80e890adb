# booking/tests/utils.py
#
# Shared builders for booking tests.

from datetime import date, datetime
from decimal import Decimal

from booking.models import Booking, Service, Staff
from staff.working_hours import WorkingHoursStore

# Tuesday; all tests pass `now` explicitly so this date counts as "today".
DAY = date(2030, 1, 8)

BOOKING_DEFAULTS = {
    "SLOT_INTERVAL_MINUTES": 30,
    "MIN_BOOKING_LEAD_MINUTES": 60,
    "BOOKING_WINDOW_DAYS": 30,
    "CURRENCY_CODE": "ZAR",
}


def hm(hours, minutes=0):
    return hours * 60 + minutes


def at(hours, minutes=0, day=DAY):
    return datetime(day.year, day.month, day.day, hours, minutes)


def make_service(name="Gel Nails", duration=30, price="250.00", upfront_fee="50.00", active=True):
    return Service.objects.create(
        name=name,
        description="Test service",
        duration_minutes=duration,
        price=Decimal(price),
        upfront_fee=Decimal(upfront_fee),
        category="Nails",
        active=active,
    )


def make_staff(name="Thandi", email="thandi@example.com", active=True):
    return Staff.objects.create(name=name, email=email, phone="0531234567", active=active)


def set_week(staff, start=hm(9), end=hm(17), break_start=hm(12), break_end=hm(13)):
    """Same hours every day of the week (replaces the default schedule)."""
    store = WorkingHoursStore()
    for weekday in range(7):
        store.set_working_day(
            staff.pk, weekday, True,
            start_time=start, end_time=end,
            break_start=break_start, break_end=break_end,
        )


def add_booking(staff, service, start, duration=None, status=Booking.STATUS_CONFIRMED, day=DAY):
    """Insert a booking row directly (bypasses admission) to set up state."""
    return Booking.objects.create(
        client_name="Existing Client",
        client_email="existing@example.com",
        service=service,
        staff=staff,
        booking_date=day,
        booking_time=start,
        duration_minutes=duration or service.duration_minutes,
        total_amount=service.price,
        upfront_fee=service.upfront_fee,
        status=status,
    )
