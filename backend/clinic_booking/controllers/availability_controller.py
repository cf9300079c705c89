"""
Availability controller - public slot lookup.

This controller:
- Handles HTTP concerns only (Single Responsibility)
- Delegates slot computation to AvailabilityService
"""

import logging

from flask import Blueprint, request

from clinic_booking.controllers.dependencies import (
    build_availability_service,
    register_error_handlers,
)
from clinic_booking.core.api_utils import api_response, parse_iso_date
from clinic_booking.core.exceptions import ValidationError
from clinic_booking.core.limiter_config import limiter
from clinic_booking.db.session import SessionLocal

logger = logging.getLogger(__name__)

availability_bp = Blueprint("availability", __name__, url_prefix="/api")
register_error_handlers(availability_bp)


@availability_bp.route("/availability", methods=["GET"])
@limiter.limit("120 per minute")
def get_availability():
    """
    Available slots for a doctor on a date.

    Query params:
        doctorId: required
        date: YYYY-MM-DD. When omitted, the response lists the disabled
              dates of the look-ahead window instead and ``slots`` is null.
    """
    doctor_id = (request.args.get("doctorId") or "").strip()
    if not doctor_id:
        raise ValidationError(errors=["doctorId: is required"])

    raw_date = request.args.get("date")
    db = SessionLocal()
    try:
        service = build_availability_service(db)

        if not raw_date:
            disabled = service.get_disabled_dates(doctor_id)
            disabled_dates = [d.isoformat() for d in disabled]
            return api_response(
                True,
                f"{len(disabled_dates)} disabled dates",
                {"doctorId": doctor_id, "disabledDates": disabled_dates},
                disabledDates=disabled_dates,
                slots=None,
            )

        on_date = parse_iso_date(raw_date, "date")
        slots = service.get_available_slots(doctor_id, on_date)
        return api_response(
            True,
            f"{len(slots)} slots available",
            {"doctorId": doctor_id, "date": on_date.isoformat(), "slots": slots},
            slots=slots,
        )
    finally:
        db.close()
