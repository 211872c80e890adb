"""
booking_manager.py
------------------
Coordinates booking admission and the booking status lifecycle.

Admission (create_booking), fail-fast:
1) Service exists and is active              -> else InvalidService
2) Staff exists and is active                -> else InvalidStaff
3) Requested time is one of the slots the AvailabilityEngine returns
   right now (state may have changed since the client fetched slots)
                                             -> else SlotUnavailable
4) Under the (staff, date) day lock: re-check overlap against active
   bookings and insert pending/unpaid, snapshotting duration and prices.
   A concurrent admission that got there first -> SlotUnavailable.
   Nothing is inserted unless the whole unit commits.
5) Return booking id + upfront fee for the external payment step.

Status machine (set_status):
    pending   -> confirmed | cancelled
    confirmed -> completed | cancelled
    completed, cancelled: terminal
"""

import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional

from django.db import transaction

from ..exceptions import (
    InvalidService,
    InvalidStaff,
    InvalidTransition,
    SlotUnavailable,
)
from ..models import Booking, Service, Staff
from .availability_engine import AvailabilityEngine
from .booking_store import BookingStore, storage_errors
from .slot_utils import minutes_to_hhmm

logger = logging.getLogger(__name__)

ALLOWED_TRANSITIONS = {
    Booking.STATUS_PENDING: {Booking.STATUS_CONFIRMED, Booking.STATUS_CANCELLED},
    Booking.STATUS_CONFIRMED: {Booking.STATUS_COMPLETED, Booking.STATUS_CANCELLED},
    Booking.STATUS_COMPLETED: set(),
    Booking.STATUS_CANCELLED: set(),
}


@dataclass(frozen=True)
class BookingRequest:
    client_name: str
    client_email: str
    service_id: int
    staff_id: int
    booking_date: date
    booking_time: int
    client_phone: str = ""
    notes: str = ""


@dataclass(frozen=True)
class BookingResult:
    booking_id: int
    upfront_fee: Decimal
    status: str
    payment_status: str


class BookingManager:
    def __init__(self, store=None, availability=None):
        self.store = store or BookingStore()
        self.availability = availability or AvailabilityEngine(bookings=self.store)

    def _active_service(self, service_id) -> Service:
        with storage_errors("service lookup"):
            service = Service.objects.filter(pk=service_id).first()
        if service is None or not service.active:
            raise InvalidService()
        return service

    def _active_staff(self, staff_id) -> Staff:
        with storage_errors("staff lookup"):
            staff = Staff.objects.filter(pk=staff_id).first()
        if staff is None or not staff.active:
            raise InvalidStaff()
        return staff

    def create_booking(self, request: BookingRequest, now=None) -> BookingResult:
        """
        Admit a booking or raise a BookingError naming the reason.

        Args:
            request: BookingRequest (validated at the API boundary)
            now: optional datetime used for lead-time checks (tests pass a fixed one)
        """
        service = self._active_service(request.service_id)
        staff = self._active_staff(request.staff_id)

        duration = service.duration_minutes
        if not self.availability.is_slot_available(
            staff.pk, request.booking_date, request.booking_time, duration, now
        ):
            raise SlotUnavailable()

        start = request.booking_time
        end = start + duration
        with self.store.locked_day(staff.pk, request.booking_date):
            clashes = (
                Booking.objects.for_staff_day(staff.pk, request.booking_date)
                .active()
                .overlapping(start, end)
            )
            if clashes:
                logger.warning(
                    "Admission race lost: staff=%s date=%s time=%s overlaps booking(s) %s",
                    staff.pk, request.booking_date, minutes_to_hhmm(start),
                    [b.pk for b in clashes],
                )
                raise SlotUnavailable()

            booking = Booking(
                client_name=request.client_name,
                client_email=request.client_email,
                client_phone=request.client_phone or "",
                service=service,
                staff=staff,
                booking_date=request.booking_date,
                booking_time=start,
                duration_minutes=duration,
                total_amount=service.price,
                upfront_fee=service.upfront_fee,
                notes=request.notes or "",
            )
            booking_id = self.store.insert(booking)

        logger.info(
            "Booking %s admitted: staff=%s date=%s time=%s service=%s",
            booking_id, staff.pk, request.booking_date, minutes_to_hhmm(start), service.pk,
        )
        return BookingResult(
            booking_id=booking_id,
            upfront_fee=booking.upfront_fee,
            status=booking.status,
            payment_status=booking.payment_status,
        )

    def set_status(self, booking_id, new_status: str, payment_status: Optional[str] = None,
                   payment_reference: Optional[str] = None) -> Booking:
        """
        Apply a lifecycle transition.

        Raises:
            NotFound: unknown booking id
            InvalidTransition: transition not allowed from the current status
        """
        valid_statuses = dict(Booking.STATUS_CHOICES)
        if new_status not in valid_statuses:
            raise InvalidTransition(f"Unknown status '{new_status}'.")
        if payment_status is not None and payment_status not in dict(Booking.PAYMENT_STATUS_CHOICES):
            raise InvalidTransition(f"Unknown payment status '{payment_status}'.")

        with storage_errors("status transition"), transaction.atomic():
            booking = self.store.get(booking_id, for_update=True)
            if new_status not in ALLOWED_TRANSITIONS[booking.status]:
                raise InvalidTransition(
                    f"Cannot change a {booking.status} booking to {new_status}."
                )
            booking = self.store.update_status(
                booking_id, new_status, payment_status, payment_reference
            )

        logger.info("Booking %s -> %s (payment=%s)", booking_id, new_status, booking.payment_status)
        return booking

    def confirm_payment(self, booking_id, payment_reference: str) -> Booking:
        """Called once the external payment step has captured the upfront fee."""
        return self.set_status(
            booking_id,
            Booking.STATUS_CONFIRMED,
            payment_status=Booking.PAYMENT_PAID,
            payment_reference=payment_reference,
        )

    def cancel_booking(self, booking_id, payment_status: Optional[str] = None) -> Booking:
        return self.set_status(booking_id, Booking.STATUS_CANCELLED, payment_status)
