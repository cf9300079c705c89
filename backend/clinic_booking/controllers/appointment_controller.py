"""
Appointment controller for handling HTTP requests following SOLID principles.

This controller:
- Handles HTTP concerns only (Single Responsibility)
- Depends on service abstractions (Dependency Inversion)
"""

import logging

from flask import Blueprint, request

from clinic_booking.controllers.dependencies import (
    build_appointment_service,
    register_error_handlers,
)
from clinic_booking.core.api_utils import api_response, parse_iso_date
from clinic_booking.core.exceptions import ValidationError
from clinic_booking.core.limiter_config import limiter
from clinic_booking.db.session import SessionLocal
from clinic_booking.schemas.dtos import AppointmentCreateRequest

logger = logging.getLogger(__name__)

appointment_bp = Blueprint("appointments", __name__, url_prefix="/api/appointments")
register_error_handlers(appointment_bp)


def _json_body() -> dict:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError(errors=["body: must be a JSON object"])
    return data


@appointment_bp.route("", methods=["POST"])
@limiter.limit("30 per minute")
def create_appointment():
    """Book a slot. 201 with the appointment on success."""
    payload = AppointmentCreateRequest.from_payload(_json_body())
    db = SessionLocal()
    try:
        service = build_appointment_service(db)
        appointment = service.create_appointment(payload)
        return api_response(
            True,
            "Appointment created successfully",
            appointment.to_dict(),
            201,
        )
    finally:
        db.close()


@appointment_bp.route("", methods=["PATCH"])
@limiter.limit("60 per minute")
def update_appointment_status():
    """Change the status of an appointment: {appointmentId, status}."""
    data = _json_body()
    db = SessionLocal()
    try:
        service = build_appointment_service(db)
        appointment = service.update_appointment_status(
            data.get("appointmentId"), data.get("status")
        )
        return api_response(True, "Appointment status updated", appointment.to_dict())
    finally:
        db.close()


@appointment_bp.route("/<int:appointment_id>", methods=["GET"])
def get_appointment(appointment_id: int):
    db = SessionLocal()
    try:
        service = build_appointment_service(db)
        appointment = service.get_appointment(appointment_id)
        return api_response(True, "Appointment retrieved", appointment.to_dict())
    finally:
        db.close()


@appointment_bp.route("", methods=["GET"])
def list_appointments():
    """List a doctor's appointments: ?doctorId=&start=&end= (dates optional)."""
    doctor_id = (request.args.get("doctorId") or "").strip()
    if not doctor_id:
        raise ValidationError(errors=["doctorId: is required"])
    start = request.args.get("start")
    end = request.args.get("end")
    start_date = parse_iso_date(start, "start") if start else None
    end_date = parse_iso_date(end, "end") if end else None

    db = SessionLocal()
    try:
        service = build_appointment_service(db)
        appointments = service.list_appointments(doctor_id, start_date, end_date)
        return api_response(
            True,
            f"{len(appointments)} appointments",
            [a.to_dict() for a in appointments],
        )
    finally:
        db.close()
