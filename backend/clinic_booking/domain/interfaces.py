"""
Abstract interfaces for repositories following Interface Segregation Principle.

These interfaces define contracts without implementation details,
enabling dependency injection and easier testing.
"""

from abc import ABC, abstractmethod
from datetime import date
from typing import List, Optional, Sequence

from .entities import (
    Appointment,
    AppointmentStatus,
    Doctor,
    SpecialDate,
    WeeklyScheduleRule,
)


class IDoctorReader(ABC):
    """Interface for doctor lookups - the core only checks existence."""

    @abstractmethod
    def find_doctor(self, doctor_id: str) -> Optional[Doctor]:
        """Get doctor by ID."""
        pass


class IScheduleReader(ABC):
    """Interface for weekly rule and special date read operations."""

    @abstractmethod
    def find_weekly_rule(
        self, doctor_id: str, day_of_week: int
    ) -> Optional[WeeklyScheduleRule]:
        """Get the active weekly rule for a doctor on a weekday (Sunday=0)."""
        pass

    @abstractmethod
    def list_weekly_rules(self, doctor_id: str) -> List[WeeklyScheduleRule]:
        """Get all weekly rules for a doctor ordered by weekday."""
        pass

    @abstractmethod
    def find_special_date(
        self, doctor_id: Optional[str], on_date: date
    ) -> Optional[SpecialDate]:
        """Get the special date for a doctor (or the clinic when None) on a date."""
        pass

    @abstractmethod
    def list_special_dates(
        self,
        doctor_id: Optional[str],
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        include_clinic_wide: bool = False,
    ) -> List[SpecialDate]:
        """Get special dates in the inclusive range, ordered by date."""
        pass


class IScheduleWriter(ABC):
    """Interface for schedule write operations."""

    @abstractmethod
    def replace_weekly_rules(
        self, doctor_id: str, rules: Sequence[WeeklyScheduleRule]
    ) -> List[WeeklyScheduleRule]:
        """Delete every rule of the doctor, then insert the given set."""
        pass

    @abstractmethod
    def create_special_date(self, special_date: SpecialDate) -> SpecialDate:
        """Create a new special date."""
        pass

    @abstractmethod
    def delete_special_date(self, special_date_id: int) -> Optional[SpecialDate]:
        """Delete a special date, returning what was removed (None if missing)."""
        pass


class IScheduleRepository(IScheduleReader, IScheduleWriter):
    """Complete schedule repository interface."""

    pass


class IAppointmentReader(ABC):
    """Interface for appointment read operations."""

    @abstractmethod
    def get_by_id(self, appointment_id: int) -> Optional[Appointment]:
        """Get appointment by ID."""
        pass

    @abstractmethod
    def find_booked_times(self, doctor_id: str, on_date: date) -> List[str]:
        """Times held by active (not cancelled / no-show) appointments."""
        pass

    @abstractmethod
    def list_by_doctor(
        self,
        doctor_id: str,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> List[Appointment]:
        """Get appointments of a doctor in the inclusive date range."""
        pass


class IAppointmentWriter(ABC):
    """Interface for appointment write operations."""

    @abstractmethod
    def insert(self, appointment: Appointment) -> Appointment:
        """Persist a new appointment.

        Raises SlotAlreadyBooked when another active appointment holds
        the same (doctor, date, time).
        """
        pass

    @abstractmethod
    def update_status(
        self, appointment_id: int, status: AppointmentStatus
    ) -> Optional[Appointment]:
        """Set the status of an appointment (None if it does not exist)."""
        pass


class IAppointmentRepository(IAppointmentReader, IAppointmentWriter):
    """Complete appointment repository interface."""

    pass


class ISpecialDateCache(ABC):
    """Look-aside cache for special date lookups. Never authoritative."""

    @abstractmethod
    def get(self, key) -> tuple:
        """Return (hit, value)."""
        pass

    @abstractmethod
    def set(self, key, value) -> None:
        pass

    @abstractmethod
    def invalidate(self, doctor_id: Optional[str] = None) -> None:
        """Drop entries for one doctor, or everything when doctor_id is None."""
        pass


class INotifier(ABC):
    """Outbound booking notifications."""

    @abstractmethod
    def notify(self, event: str, data: dict) -> bool:
        """Deliver an event; returns False on failure, never raises."""
        pass
