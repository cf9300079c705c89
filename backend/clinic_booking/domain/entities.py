"""
Domain entities - Pure business logic, no framework dependencies.

Following SOLID principles:
- Single Responsibility: Each entity represents one business concept
- Open/Closed: Entities can be extended without modification
"""

from dataclasses import dataclass
import datetime as dt
from enum import Enum
from typing import Optional

from clinic_booking.core.exceptions import InvalidScheduleConfig
from clinic_booking.core.validation import parse_hhmm


class AppointmentStatus(str, Enum):
    SCHEDULED = "SCHEDULED"
    CONFIRMED = "CONFIRMED"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"
    NO_SHOW = "NO_SHOW"

    @classmethod
    def parse(cls, value) -> "AppointmentStatus":
        """Accept enum members or case-insensitive strings."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            raise ValueError(f"Invalid appointment status: {value!r}")


# Statuses that no longer hold their slot
INACTIVE_STATUSES = frozenset({AppointmentStatus.CANCELLED, AppointmentStatus.NO_SHOW})

# Finite-state machine used when transition enforcement is on
ALLOWED_TRANSITIONS = {
    AppointmentStatus.SCHEDULED: frozenset(
        {
            AppointmentStatus.CONFIRMED,
            AppointmentStatus.COMPLETED,
            AppointmentStatus.CANCELLED,
            AppointmentStatus.NO_SHOW,
        }
    ),
    AppointmentStatus.CONFIRMED: frozenset(
        {
            AppointmentStatus.COMPLETED,
            AppointmentStatus.CANCELLED,
            AppointmentStatus.NO_SHOW,
        }
    ),
    AppointmentStatus.COMPLETED: frozenset(),
    AppointmentStatus.CANCELLED: frozenset(),
    AppointmentStatus.NO_SHOW: frozenset(),
}


class SpecialDateType(str, Enum):
    HOLIDAY = "HOLIDAY"
    BREAK = "BREAK"


def _minutes(value: str, field_name: str) -> int:
    try:
        return parse_hhmm(value)
    except ValueError as e:
        raise InvalidScheduleConfig(f"{field_name}: {e}")


@dataclass
class Doctor:
    """Domain entity for a doctor. Read-only to the booking core."""

    id: str = ""
    name: str = ""
    speciality: Optional[str] = None
    fee: Optional[float] = None
    is_active: bool = True


@dataclass
class WeeklyScheduleRule:
    """Recurring availability window for one doctor on one weekday.

    Times are "HH:MM" wall-clock strings in the clinic timezone and
    day_of_week follows the Sunday=0 convention.
    """

    doctor_id: str = ""
    day_of_week: int = 0
    start_time: str = "09:00"
    end_time: str = "17:00"
    is_active: bool = True
    slot_duration: int = 30
    buffer_time: int = 0
    break_start: Optional[str] = None
    break_end: Optional[str] = None
    id: Optional[int] = None
    created_at: Optional[dt.datetime] = None
    updated_at: Optional[dt.datetime] = None

    def __post_init__(self):
        """Validate schedule integrity rules."""
        if not 0 <= int(self.day_of_week) <= 6:
            raise InvalidScheduleConfig("day_of_week must be between 0 and 6")
        if self.slot_duration is None or self.slot_duration <= 0:
            raise InvalidScheduleConfig("slot_duration must be positive")
        if self.buffer_time is None or self.buffer_time < 0:
            raise InvalidScheduleConfig("buffer_time cannot be negative")

        start = _minutes(self.start_time, "start_time")
        end = _minutes(self.end_time, "end_time")
        if start >= end:
            raise InvalidScheduleConfig("start_time must be before end_time")

        if (self.break_start is None) != (self.break_end is None):
            raise InvalidScheduleConfig(
                "break_start and break_end must be provided together"
            )
        if self.break_start is not None:
            b_start = _minutes(self.break_start, "break_start")
            b_end = _minutes(self.break_end, "break_end")
            if not start <= b_start < b_end <= end:
                raise InvalidScheduleConfig(
                    "break window must satisfy start <= break_start < break_end <= end"
                )

    @property
    def step_minutes(self) -> int:
        """Distance between two consecutive bookable starts."""
        return self.slot_duration + self.buffer_time

    @property
    def has_break(self) -> bool:
        return self.break_start is not None and self.break_end is not None


@dataclass
class SpecialDate:
    """Calendar-date override for a doctor, or for the whole clinic when
    doctor_id is None."""

    date: Optional[dt.date] = None
    type: SpecialDateType = SpecialDateType.HOLIDAY
    doctor_id: Optional[str] = None
    name: Optional[str] = None
    reason: Optional[str] = None
    break_start: Optional[str] = None
    break_end: Optional[str] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    id: Optional[int] = None
    created_at: Optional[dt.datetime] = None
    updated_at: Optional[dt.datetime] = None

    def __post_init__(self):
        """Validate business rules."""
        if self.date is None:
            raise InvalidScheduleConfig("Special date requires a calendar date")
        if isinstance(self.date, dt.datetime):
            self.date = self.date.date()
        try:
            self.type = SpecialDateType(str(getattr(self.type, "value", self.type)).upper())
        except ValueError:
            raise InvalidScheduleConfig(f"Unknown special date type: {self.type!r}")

        if (self.break_start is None) != (self.break_end is None):
            raise InvalidScheduleConfig(
                "break_start and break_end must be provided together"
            )
        if self.break_start is not None and _minutes(
            self.break_start, "break_start"
        ) >= _minutes(self.break_end, "break_end"):
            raise InvalidScheduleConfig("break_start must be before break_end")

        if (self.start_time is None) != (self.end_time is None):
            raise InvalidScheduleConfig(
                "start_time and end_time must be provided together"
            )
        if self.start_time is not None and _minutes(
            self.start_time, "start_time"
        ) >= _minutes(self.end_time, "end_time"):
            raise InvalidScheduleConfig("start_time must be before end_time")

    @property
    def is_holiday(self) -> bool:
        return self.type == SpecialDateType.HOLIDAY

    @property
    def is_clinic_wide(self) -> bool:
        return self.doctor_id is None

    @property
    def has_break_window(self) -> bool:
        return self.break_start is not None and self.break_end is not None

    @property
    def has_custom_hours(self) -> bool:
        return self.start_time is not None and self.end_time is not None


@dataclass
class Appointment:
    """Domain entity for Appointment business logic."""

    doctor_id: str = ""
    date: Optional[dt.date] = None
    time: str = ""
    patient_name: str = ""
    email: Optional[str] = None
    phone: Optional[str] = None
    notes: Optional[str] = None
    customer_id: Optional[str] = None
    status: AppointmentStatus = AppointmentStatus.SCHEDULED
    id: Optional[int] = None
    created_at: Optional[dt.datetime] = None
    updated_at: Optional[dt.datetime] = None

    def __post_init__(self):
        """Validate business rules."""
        if not self.doctor_id:
            raise ValueError("doctor_id is required")
        if self.date is None:
            raise ValueError("date is required")
        if isinstance(self.date, dt.datetime):
            self.date = self.date.date()
        if not self.time:
            raise ValueError("time is required")
        self.status = AppointmentStatus.parse(self.status)

    @property
    def holds_slot(self) -> bool:
        """Whether this appointment still blocks its time slot."""
        return self.status not in INACTIVE_STATUSES
