"""
Data Transfer Objects (DTOs) and validation schemas.

Following SOLID principles:
- Single Responsibility: Each schema validates one specific data contract
- Open/Closed: Schemas can be extended without modification

Request DTOs collect every problem before raising, so a single
ValidationError lists all missing/malformed fields.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Dict, List, Optional

from clinic_booking.core.exceptions import InvalidScheduleConfig, ValidationError
from clinic_booking.core.validation import (
    ValidationResult,
    is_blank,
    is_valid_email,
    is_valid_time,
    normalize_hhmm,
    phone_digit_count,
)
from clinic_booking.domain.entities import (
    AppointmentStatus,
    SpecialDate,
    SpecialDateType,
    WeeklyScheduleRule,
)

MIN_PHONE_DIGITS = 10


def _coerce_date(value: Any, field_name: str, result: ValidationResult) -> Optional[date]:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if is_blank(value):
        result.add_error("is required", field_name)
        return None
    try:
        # Accept both "YYYY-MM-DD" and full ISO timestamps
        return datetime.strptime(str(value).strip()[:10], "%Y-%m-%d").date()
    except ValueError:
        result.add_error("must be an ISO date (YYYY-MM-DD)", field_name)
        return None


def _optional_text(value: Any, field_name: str, result: ValidationResult) -> Optional[str]:
    if is_blank(value):
        return None
    if not isinstance(value, str):
        result.add_error("must be a string", field_name)
        return None
    return value.strip()


def _optional_time(value: Any, field_name: str, result: ValidationResult) -> Optional[str]:
    if is_blank(value):
        return None
    if not is_valid_time(value):
        result.add_error("invalid time format - must be HH:MM", field_name)
        return None
    return normalize_hhmm(value)


@dataclass
class AppointmentCreateRequest:
    """DTO for appointment creation requests."""

    doctor_id: str
    date: Any
    time: str
    patient_name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    notes: Optional[str] = None
    customer_id: Optional[str] = None

    @classmethod
    def from_payload(cls, data: Dict[str, Any]) -> "AppointmentCreateRequest":
        """Build from the public JSON body (camelCase keys)."""
        return cls(
            doctor_id=data.get("doctorId"),
            date=data.get("date"),
            time=data.get("time"),
            patient_name=data.get("patientName"),
            email=data.get("email"),
            phone=data.get("phone"),
            notes=data.get("notes"),
            customer_id=data.get("customerId"),
        )

    def validate(self, required_contact: str = "either") -> None:
        """Validate and normalize the request data in place.

        Args:
            required_contact: one of email, phone, both, either, none

        Raises:
            ValidationError: listing every missing or malformed field
        """
        result = ValidationResult()

        if result.require(self.doctor_id, "doctor_id"):
            self.doctor_id = str(self.doctor_id).strip()

        self.date = _coerce_date(self.date, "date", result)

        if result.require(self.time, "time"):
            if is_valid_time(self.time):
                self.time = normalize_hhmm(self.time)
            else:
                result.add_error("invalid time format - must be HH:MM", "time")

        if result.require(self.patient_name, "patient_name"):
            if not isinstance(self.patient_name, str):
                result.add_error("must be a string", "patient_name")
            else:
                self.patient_name = self.patient_name.strip()
                if len(self.patient_name) < 2:
                    result.add_error("must be at least 2 characters", "patient_name")

        self.notes = _optional_text(self.notes, "notes", result)
        self.customer_id = _optional_text(self.customer_id, "customer_id", result)

        has_email = not is_blank(self.email)
        has_phone = not is_blank(self.phone)
        if has_email and not is_valid_email(self.email):
            result.add_error("invalid email address", "email")
        if has_phone and phone_digit_count(self.phone) < MIN_PHONE_DIGITS:
            result.add_error(
                f"phone number must have at least {MIN_PHONE_DIGITS} digits", "phone"
            )

        if required_contact in ("email", "both") and not has_email:
            result.add_error("is required", "email")
        if required_contact in ("phone", "both") and not has_phone:
            result.add_error("is required", "phone")
        if required_contact == "either" and not (has_email or has_phone):
            result.add_error("email or phone is required", "contact")

        result.raise_if_invalid("Invalid appointment data")


@dataclass
class AppointmentStatusUpdateRequest:
    """DTO for appointment status changes."""

    appointment_id: Any
    status: Any

    @classmethod
    def from_payload(cls, data: Dict[str, Any]) -> "AppointmentStatusUpdateRequest":
        return cls(appointment_id=data.get("appointmentId"), status=data.get("status"))

    def validate(self) -> None:
        result = ValidationResult()
        if result.require(self.appointment_id, "appointment_id"):
            try:
                self.appointment_id = int(self.appointment_id)
            except (TypeError, ValueError):
                result.add_error("must be an integer", "appointment_id")
        if result.require(self.status, "status"):
            try:
                self.status = AppointmentStatus.parse(self.status)
            except ValueError:
                allowed = ", ".join(s.value for s in AppointmentStatus)
                result.add_error(f"must be one of {allowed}", "status")
        result.raise_if_invalid("Invalid status update")


@dataclass
class WeeklyScheduleUpdateRequest:
    """DTO for the full replacement of a doctor's weekly schedule."""

    doctor_id: str
    schedules: List[Dict[str, Any]] = field(default_factory=list)

    @classmethod
    def from_payload(
        cls, doctor_id: str, data: Dict[str, Any]
    ) -> "WeeklyScheduleUpdateRequest":
        return cls(doctor_id=doctor_id, schedules=data.get("schedules") or [])

    def to_rules(self) -> List[WeeklyScheduleRule]:
        """Validate field formats then build the domain rules.

        Raises:
            ValidationError: missing fields / wrong types
            InvalidScheduleConfig: rules whose windows are inconsistent
        """
        result = ValidationResult()
        if not isinstance(self.schedules, list):
            result.add_error("must be a list", "schedules")
            result.raise_if_invalid("Invalid schedule data")

        for index, item in enumerate(self.schedules):
            prefix = f"schedules[{index}]"
            if not isinstance(item, dict):
                result.add_error("must be an object", prefix)
                continue
            day = item.get("dayOfWeek")
            if not isinstance(day, int) or isinstance(day, bool) or not 0 <= day <= 6:
                result.add_error("must be an integer between 0 and 6", f"{prefix}.dayOfWeek")
            for key in ("startTime", "endTime"):
                if not is_valid_time(item.get(key)):
                    result.add_error("invalid time format - must be HH:MM", f"{prefix}.{key}")
            for key in ("breakStart", "breakEnd"):
                if not is_blank(item.get(key)) and not is_valid_time(item.get(key)):
                    result.add_error("invalid time format - must be HH:MM", f"{prefix}.{key}")
            if not isinstance(item.get("isActive", True), bool):
                result.add_error("must be a boolean", f"{prefix}.isActive")
            for key, minimum in (("slotDuration", 1), ("bufferTime", 0)):
                value = item.get(key)
                if not isinstance(value, int) or isinstance(value, bool) or value < minimum:
                    result.add_error(f"must be an integer >= {minimum}", f"{prefix}.{key}")
        result.raise_if_invalid("Invalid schedule data")

        rules: List[WeeklyScheduleRule] = []
        problems: List[str] = []
        for index, item in enumerate(self.schedules):
            try:
                rules.append(
                    WeeklyScheduleRule(
                        doctor_id=self.doctor_id,
                        day_of_week=item["dayOfWeek"],
                        start_time=normalize_hhmm(item["startTime"]),
                        end_time=normalize_hhmm(item["endTime"]),
                        is_active=item.get("isActive", True),
                        slot_duration=item["slotDuration"],
                        buffer_time=item["bufferTime"],
                        break_start=(
                            None
                            if is_blank(item.get("breakStart"))
                            else normalize_hhmm(item["breakStart"])
                        ),
                        break_end=(
                            None
                            if is_blank(item.get("breakEnd"))
                            else normalize_hhmm(item["breakEnd"])
                        ),
                    )
                )
            except InvalidScheduleConfig as e:
                problems.append(f"schedules[{index}]: {e.message}")
        if problems:
            raise InvalidScheduleConfig("; ".join(problems))
        return rules


@dataclass
class SpecialDateCreateRequest:
    """DTO for creating a holiday or custom-hours day."""

    date: Any
    type: Any = SpecialDateType.HOLIDAY.value
    doctor_id: Optional[str] = None
    name: Optional[str] = None
    reason: Optional[str] = None
    break_start: Optional[str] = None
    break_end: Optional[str] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None

    @classmethod
    def from_payload(cls, data: Dict[str, Any]) -> "SpecialDateCreateRequest":
        return cls(
            date=data.get("date"),
            type=data.get("type") or SpecialDateType.HOLIDAY.value,
            doctor_id=data.get("doctorId"),
            name=data.get("name"),
            reason=data.get("reason"),
            break_start=data.get("breakStart"),
            break_end=data.get("breakEnd"),
            start_time=data.get("startTime"),
            end_time=data.get("endTime"),
        )

    def to_entity(self) -> SpecialDate:
        result = ValidationResult()
        on_date = _coerce_date(self.date, "date", result)
        try:
            kind = SpecialDateType(str(getattr(self.type, "value", self.type)).upper())
        except ValueError:
            kind = None
            allowed = ", ".join(t.value for t in SpecialDateType)
            result.add_error(f"must be one of {allowed}", "type")
        break_start = _optional_time(self.break_start, "break_start", result)
        break_end = _optional_time(self.break_end, "break_end", result)
        start_time = _optional_time(self.start_time, "start_time", result)
        end_time = _optional_time(self.end_time, "end_time", result)
        result.raise_if_invalid("Invalid special date data")

        return SpecialDate(
            date=on_date,
            type=kind,
            doctor_id=None if is_blank(self.doctor_id) else str(self.doctor_id),
            name=self.name or self.reason,
            reason=self.reason,
            break_start=break_start,
            break_end=break_end,
            start_time=start_time,
            end_time=end_time,
        )


@dataclass
class AppointmentResponse:
    """DTO for appointment API responses."""

    id: int
    doctor_id: str
    date: date
    time: str
    patient_name: str
    email: Optional[str]
    phone: Optional[str]
    notes: Optional[str]
    customer_id: Optional[str]
    status: str
    created_at: datetime
    updated_at: Optional[datetime] = None

    @classmethod
    def from_domain(cls, appointment) -> "AppointmentResponse":
        """Create response from domain entity."""
        return cls(
            id=appointment.id,
            doctor_id=appointment.doctor_id,
            date=appointment.date,
            time=appointment.time,
            patient_name=appointment.patient_name,
            email=appointment.email,
            phone=appointment.phone,
            notes=appointment.notes,
            customer_id=appointment.customer_id,
            status=AppointmentStatus.parse(appointment.status).value,
            created_at=appointment.created_at or datetime.now(),
            updated_at=appointment.updated_at,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "doctorId": self.doctor_id,
            "date": self.date.isoformat(),
            "time": self.time,
            "patientName": self.patient_name,
            "email": self.email,
            "phone": self.phone,
            "notes": self.notes,
            "customerId": self.customer_id,
            "status": self.status,
            "createdAt": self.created_at.isoformat(),
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }


def weekly_rule_to_dict(rule: WeeklyScheduleRule) -> Dict[str, Any]:
    return {
        "id": rule.id,
        "doctorId": rule.doctor_id,
        "dayOfWeek": rule.day_of_week,
        "startTime": rule.start_time,
        "endTime": rule.end_time,
        "isActive": rule.is_active,
        "slotDuration": rule.slot_duration,
        "bufferTime": rule.buffer_time,
        "breakStart": rule.break_start,
        "breakEnd": rule.break_end,
    }


def special_date_to_dict(special: SpecialDate) -> Dict[str, Any]:
    return {
        "id": special.id,
        "doctorId": special.doctor_id,
        "date": special.date.isoformat(),
        "type": special.type.value,
        "name": special.name,
        "reason": special.reason,
        "breakStart": special.break_start,
        "breakEnd": special.break_end,
        "startTime": special.start_time,
        "endTime": special.end_time,
    }


@dataclass
class ErrorResponse:
    """DTO for error responses."""

    error: str
    message: str
    details: Optional[dict] = None

    @classmethod
    def validation_error(
        cls, message: str, details: Optional[dict] = None
    ) -> "ErrorResponse":
        """Create validation error response."""
        return cls(error="validation_error", message=message, details=details)

    @classmethod
    def not_found(cls, resource: str) -> "ErrorResponse":
        """Create not found error response."""
        return cls(error="not_found", message=f"{resource} not found")

    @classmethod
    def server_error(cls, message: str = "Internal server error") -> "ErrorResponse":
        """Create server error response."""
        return cls(error="server_error", message=message)
