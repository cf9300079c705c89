"""
Admin schedule controller - weekly schedules and special dates.
"""

import logging

from flask import Blueprint, request

from clinic_booking.controllers.dependencies import (
    build_schedule_service,
    register_error_handlers,
)
from clinic_booking.core.api_utils import api_response, parse_iso_date
from clinic_booking.core.exceptions import ValidationError
from clinic_booking.core.limiter_config import limiter
from clinic_booking.db.session import SessionLocal
from clinic_booking.schemas.dtos import (
    SpecialDateCreateRequest,
    WeeklyScheduleUpdateRequest,
    special_date_to_dict,
    weekly_rule_to_dict,
)

logger = logging.getLogger(__name__)

schedule_bp = Blueprint("admin_schedule", __name__, url_prefix="/api/admin")
register_error_handlers(schedule_bp)


def _json_body() -> dict:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError(errors=["body: must be a JSON object"])
    return data


@schedule_bp.route("/schedules/<doctor_id>", methods=["GET"])
def get_weekly_schedule(doctor_id: str):
    db = SessionLocal()
    try:
        service = build_schedule_service(db)
        rules = service.get_weekly_schedule(doctor_id)
        return api_response(
            True, "Weekly schedule retrieved", [weekly_rule_to_dict(r) for r in rules]
        )
    finally:
        db.close()


@schedule_bp.route("/schedules/<doctor_id>", methods=["PUT"])
@limiter.limit("20 per minute")
def replace_weekly_schedule(doctor_id: str):
    """Replace the whole weekly schedule: {"schedules": [{dayOfWeek, ...}]}."""
    update = WeeklyScheduleUpdateRequest.from_payload(doctor_id, _json_body())
    rules = update.to_rules()
    db = SessionLocal()
    try:
        service = build_schedule_service(db)
        saved = service.replace_weekly_schedule(doctor_id, rules)
        return api_response(
            True, "Weekly schedule updated", [weekly_rule_to_dict(r) for r in saved]
        )
    finally:
        db.close()


@schedule_bp.route("/special-dates", methods=["GET"])
def list_special_dates():
    """?doctorId=&start=&end= ; without doctorId only clinic-wide days are listed."""
    doctor_id = (request.args.get("doctorId") or "").strip() or None
    start = request.args.get("start")
    end = request.args.get("end")
    start_date = parse_iso_date(start, "start") if start else None
    end_date = parse_iso_date(end, "end") if end else None

    db = SessionLocal()
    try:
        service = build_schedule_service(db)
        specials = service.list_special_dates(doctor_id, start_date, end_date)
        return api_response(
            True,
            f"{len(specials)} special dates",
            [special_date_to_dict(s) for s in specials],
        )
    finally:
        db.close()


@schedule_bp.route("/special-dates", methods=["POST"])
@limiter.limit("30 per minute")
def create_special_date():
    payload = SpecialDateCreateRequest.from_payload(_json_body())
    db = SessionLocal()
    try:
        service = build_schedule_service(db)
        created = service.add_special_date(payload)
        return api_response(
            True, "Special date created", special_date_to_dict(created), 201
        )
    finally:
        db.close()


@schedule_bp.route("/special-dates/<int:special_date_id>", methods=["DELETE"])
@limiter.limit("30 per minute")
def delete_special_date(special_date_id: int):
    db = SessionLocal()
    try:
        service = build_schedule_service(db)
        removed = service.delete_special_date(special_date_id)
        return api_response(True, "Special date deleted", special_date_to_dict(removed))
    finally:
        db.close()
