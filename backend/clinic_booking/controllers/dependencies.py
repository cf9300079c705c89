"""
Per-request wiring of repositories and services for the blueprints.

App-scoped collaborators (special-date cache, webhook notifier) live in
``current_app.extensions`` so every request shares them, while each request
gets its own SQLAlchemy session.
"""

from flask import Blueprint, current_app

from clinic_booking.core.api_utils import handle_booking_error, handle_unexpected_error
from clinic_booking.core.exceptions import BookingError
from clinic_booking.repositories import (
    AppointmentRepository,
    DoctorRepository,
    ScheduleRepository,
)
from clinic_booking.services.appointment_service import AppointmentService
from clinic_booking.services.availability_service import AvailabilityService
from clinic_booking.services.schedule_service import ScheduleService

SPECIAL_DATE_CACHE_KEY = "special_date_cache"
NOTIFIER_KEY = "booking_notifier"


def build_availability_service(db) -> AvailabilityService:
    return AvailabilityService(
        DoctorRepository(db),
        ScheduleRepository(db),
        AppointmentRepository(db),
        special_date_cache=current_app.extensions.get(SPECIAL_DATE_CACHE_KEY),
    )


def build_appointment_service(db) -> AppointmentService:
    return AppointmentService(
        DoctorRepository(db),
        AppointmentRepository(db),
        build_availability_service(db),
        notifier=current_app.extensions.get(NOTIFIER_KEY),
    )


def build_schedule_service(db) -> ScheduleService:
    return ScheduleService(
        DoctorRepository(db),
        ScheduleRepository(db),
        special_date_cache=current_app.extensions.get(SPECIAL_DATE_CACHE_KEY),
    )


def register_error_handlers(bp: Blueprint) -> None:
    bp.register_error_handler(BookingError, handle_booking_error)
    bp.register_error_handler(Exception, handle_unexpected_error)
