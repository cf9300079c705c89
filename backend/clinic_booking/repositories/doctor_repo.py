"""
Doctor repository implementation following SOLID principles.
"""

from typing import Optional

from clinic_booking.db.base import Doctor as DbDoctor
from clinic_booking.domain.entities import Doctor as DomainDoctor
from clinic_booking.domain.interfaces import IDoctorReader


class DoctorRepository(IDoctorReader):
    """Read-only access to doctors."""

    def __init__(self, db_session) -> None:
        self.db = db_session

    def find_doctor(self, doctor_id: str) -> Optional[DomainDoctor]:
        if not doctor_id:
            return None
        db_doctor = self.db.query(DbDoctor).filter_by(id=doctor_id).first()
        return self._to_domain(db_doctor) if db_doctor else None

    def _to_domain(self, db_doctor: DbDoctor) -> DomainDoctor:
        return DomainDoctor(
            id=db_doctor.id,
            name=db_doctor.name,
            speciality=db_doctor.speciality,
            fee=float(db_doctor.fee) if db_doctor.fee is not None else None,
            is_active=bool(db_doctor.is_active),
        )
