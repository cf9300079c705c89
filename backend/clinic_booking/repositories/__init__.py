from .appointment_repo import AppointmentRepository
from .doctor_repo import DoctorRepository
from .schedule_repo import ScheduleRepository

__all__ = ["AppointmentRepository", "DoctorRepository", "ScheduleRepository"]
