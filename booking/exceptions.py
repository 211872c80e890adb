"""
exceptions.py
-------------
Structured errors raised by the booking core, and the DRF exception handler
that renders them at the API boundary.

Every error carries:
- kind:    machine-readable identifier (e.g. "slot_unavailable")
- message: human-readable explanation

Views never catch these one by one; DRF calls api_exception_handler
(settings.REST_FRAMEWORK["EXCEPTION_HANDLER"]) and it maps kind -> HTTP status.
"""

from rest_framework import status
from rest_framework.exceptions import ValidationError as DRFValidationError
from rest_framework.response import Response
from rest_framework.views import exception_handler


class BookingError(Exception):
    kind = "booking_error"
    http_status = status.HTTP_400_BAD_REQUEST
    default_message = "The booking request could not be processed."

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def as_dict(self) -> dict:
        return {"kind": self.kind, "detail": self.message}


class InvalidService(BookingError):
    kind = "invalid_service"
    default_message = "The selected service does not exist or is not available."


class InvalidStaff(BookingError):
    kind = "invalid_staff"
    default_message = "The selected staff member does not exist or is not available."


class SlotUnavailable(BookingError):
    kind = "slot_unavailable"
    http_status = status.HTTP_409_CONFLICT
    default_message = "Selected time slot is no longer available."


class InvalidTransition(BookingError):
    kind = "invalid_transition"
    http_status = status.HTTP_409_CONFLICT
    default_message = "This status change is not allowed."


class RecordInUse(BookingError):
    kind = "in_use"
    http_status = status.HTTP_409_CONFLICT
    default_message = "This record is referenced by bookings and cannot be deleted. Mark it inactive instead."


class NotFound(BookingError):
    kind = "not_found"
    http_status = status.HTTP_404_NOT_FOUND
    default_message = "The requested record was not found."


class StorageUnavailable(BookingError):
    kind = "storage_unavailable"
    http_status = status.HTTP_503_SERVICE_UNAVAILABLE
    default_message = "Booking storage is temporarily unavailable. Please try again."


def api_exception_handler(exc, context):
    """
    DRF exception handler.
    - BookingError -> {"kind", "detail"} with the error's HTTP status.
    - DRF validation errors keep their field errors, tagged kind=validation_error.
    - Anything else falls through to DRF's default handling.
    """
    if isinstance(exc, BookingError):
        return Response(exc.as_dict(), status=exc.http_status)

    response = exception_handler(exc, context)
    if response is None:
        return None

    if isinstance(exc, DRFValidationError):
        response.data = {"kind": "validation_error", "detail": response.data}
    elif isinstance(response.data, dict):
        response.data.setdefault("kind", getattr(exc, "default_code", "error"))
    return response
