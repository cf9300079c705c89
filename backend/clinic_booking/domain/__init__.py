"""
Domain package - Pure business logic layer.

This package contains:
- entities.py: Domain entities with business logic
- interfaces.py: Repository and collaborator contracts
"""

from .entities import (
    ALLOWED_TRANSITIONS,
    INACTIVE_STATUSES,
    Appointment,
    AppointmentStatus,
    Doctor,
    SpecialDate,
    SpecialDateType,
    WeeklyScheduleRule,
)
from .interfaces import (
    IAppointmentReader,
    IAppointmentRepository,
    IAppointmentWriter,
    IDoctorReader,
    INotifier,
    IScheduleReader,
    IScheduleRepository,
    IScheduleWriter,
    ISpecialDateCache,
)

__all__ = [
    # Domain entities
    "Doctor",
    "WeeklyScheduleRule",
    "SpecialDate",
    "SpecialDateType",
    "Appointment",
    "AppointmentStatus",
    "ALLOWED_TRANSITIONS",
    "INACTIVE_STATUSES",
    # Repository interfaces
    "IDoctorReader",
    "IScheduleRepository",
    "IAppointmentRepository",
    # Segregated interfaces
    "IScheduleReader",
    "IScheduleWriter",
    "IAppointmentReader",
    "IAppointmentWriter",
    # Collaborators
    "ISpecialDateCache",
    "INotifier",
]
