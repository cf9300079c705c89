"""
Custom exceptions for the application.
Following SOLID principles - centralized error handling.

Every booking error carries a machine-readable ``code`` and the HTTP status
the controllers answer with, so blueprints can map them in one place.
"""

from typing import List, Optional


class BookingError(Exception):
    """Base class for all typed booking/scheduling errors."""

    code = "booking_error"
    http_status = 500

    def __init__(self, message: str = ""):
        super().__init__(message or self.code)
        self.message = message or self.code


class ValidationError(BookingError):
    """Malformed or missing request fields. The caller can resubmit."""

    code = "validation_error"
    http_status = 400

    def __init__(self, message: str = "", errors: Optional[List[str]] = None):
        self.errors = list(errors or [])
        if not message:
            message = "; ".join(self.errors) or "Invalid request"
        super().__init__(message)


class DoctorNotFound(BookingError):
    code = "doctor_not_found"
    http_status = 404


class AppointmentNotFound(BookingError):
    code = "appointment_not_found"
    http_status = 404


class SpecialDateNotFound(BookingError):
    code = "special_date_not_found"
    http_status = 404


class SlotUnavailable(BookingError):
    """
    Requested time is not in the currently computed available set.
    Caller should re-fetch availability and retry.
    """

    code = "slot_unavailable"
    http_status = 400


class SlotAlreadyBooked(BookingError):
    """
    Storage rejected the insert because another active appointment holds
    the same (doctor, date, time).
    """

    code = "slot_already_booked"
    http_status = 409


class InvalidStatusTransition(BookingError):
    code = "invalid_status_transition"
    http_status = 400


class InvalidScheduleConfig(BookingError):
    """
    A weekly rule or special date is inconsistent (non-positive step,
    malformed break window, bad time format). Data-integrity error, never
    retried.
    """

    code = "invalid_schedule_config"
    http_status = 422


class StorageError(BookingError):
    """Unexpected failure talking to the relational store."""

    code = "storage_error"
    http_status = 500
