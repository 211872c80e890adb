"""
booking_store.py
----------------
BookingStore: persistence and indexed lookup for Booking rows.

Responsibilities:
- Range queries ordered by date then time (availability + calendar views).
- Insert / status update.
- locked_day(): the atomic check-then-insert primitive. Inside the context
  the caller holds a row lock on DayLock(staff, date) within one database
  transaction; an exception inside the block rolls the whole unit back.

Database failures (lock timeouts, lost connections) surface as
StorageUnavailable. Nothing here retries.
"""

import logging
from contextlib import contextmanager

from django.db import DatabaseError, IntegrityError, transaction

from ..exceptions import NotFound, StorageUnavailable
from ..models import Booking, DayLock

logger = logging.getLogger(__name__)


@contextmanager
def storage_errors(operation: str):
    """Translate Django database errors into StorageUnavailable."""
    try:
        yield
    except IntegrityError:
        raise
    except DatabaseError as exc:
        logger.exception("Storage failure during %s", operation)
        raise StorageUnavailable() from exc


class BookingStore:
    def find_by_staff_and_date_range(self, staff_id, date_from, date_to, active_only=False):
        """Bookings for one staff member between two dates (inclusive), ordered."""
        with storage_errors("range query"):
            qs = Booking.objects.in_range(staff_id=staff_id, date_from=date_from, date_to=date_to)
            if active_only:
                qs = qs.active()
            return list(qs.select_related("service"))

    def find(self, staff_id=None, date_from=None, date_to=None, status=None):
        """Calendar/dashboard query; every filter is optional."""
        with storage_errors("booking search"):
            return list(
                Booking.objects.in_range(
                    staff_id=staff_id, date_from=date_from, date_to=date_to, status=status
                ).select_related("service", "staff")
            )

    def busy_intervals(self, staff_id, day):
        """[start, end) minute intervals reserved by non-cancelled bookings."""
        with storage_errors("busy interval query"):
            rows = Booking.objects.for_staff_day(staff_id, day).active().values_list(
                "booking_time", "duration_minutes"
            )
            return [(start, start + duration) for start, duration in rows]

    def get(self, booking_id, for_update=False) -> Booking:
        with storage_errors("booking lookup"):
            qs = Booking.objects.select_related("service", "staff")
            if for_update:
                qs = qs.select_for_update()
            try:
                return qs.get(pk=booking_id)
            except (Booking.DoesNotExist, ValueError, TypeError):
                # Non-numeric ids from the URL are unknown bookings too.
                raise NotFound(f"Booking {booking_id} was not found.")

    def insert(self, booking: Booking) -> int:
        with storage_errors("booking insert"):
            booking.save(force_insert=True)
        return booking.pk

    def update_status(self, booking_id, status, payment_status=None, payment_reference=None) -> Booking:
        with storage_errors("status update"):
            booking = self.get(booking_id)
            booking.status = status
            fields = ["status", "updated_at"]
            if payment_status is not None:
                booking.payment_status = payment_status
                fields.append("payment_status")
            if payment_reference is not None:
                booking.payment_reference = payment_reference
                fields.append("payment_reference")
            booking.save(update_fields=fields)
            return booking

    @contextmanager
    def locked_day(self, staff_id, day):
        """
        Serialize work on one staff member's day.

        Usage:
            with store.locked_day(staff_id, date):
                ... re-check overlaps, insert ...
        """
        with storage_errors("day lock"):
            with transaction.atomic():
                # get_or_create re-reads (and so waits on) the row if a
                # concurrent request inserted it first.
                DayLock.objects.select_for_update().get_or_create(staff_id=staff_id, date=day)
                yield
