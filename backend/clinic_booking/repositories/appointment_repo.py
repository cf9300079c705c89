"""
Appointment repository implementation following SOLID principles.
"""

import logging
from datetime import date
from typing import List, Optional

from sqlalchemy.exc import IntegrityError

from clinic_booking.core.exceptions import SlotAlreadyBooked
from clinic_booking.db.base import Appointment as DbAppointment
from clinic_booking.domain.entities import (
    INACTIVE_STATUSES,
    Appointment as DomainAppointment,
    AppointmentStatus,
)
from clinic_booking.domain.interfaces import IAppointmentRepository

logger = logging.getLogger(__name__)

_INACTIVE_VALUES = [s.value for s in INACTIVE_STATUSES]


class AppointmentRepository(IAppointmentRepository):
    """Repository for Appointment persistence operations."""

    def __init__(self, db_session) -> None:
        self.db = db_session

    def get_by_id(self, appointment_id: int) -> Optional[DomainAppointment]:
        """Get appointment by ID."""
        db_appointment = self.db.query(DbAppointment).filter_by(id=appointment_id).first()
        return self._to_domain(db_appointment) if db_appointment else None

    def find_booked_times(self, doctor_id: str, on_date: date) -> List[str]:
        rows = (
            self.db.query(DbAppointment.time)
            .filter(
                DbAppointment.doctor_id == doctor_id,
                DbAppointment.date == on_date,
                DbAppointment.status.notin_(_INACTIVE_VALUES),
            )
            .all()
        )
        return [row[0] for row in rows]

    def list_by_doctor(
        self,
        doctor_id: str,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> List[DomainAppointment]:
        query = self.db.query(DbAppointment).filter(DbAppointment.doctor_id == doctor_id)
        if start_date is not None:
            query = query.filter(DbAppointment.date >= start_date)
        if end_date is not None:
            query = query.filter(DbAppointment.date <= end_date)
        rows = query.order_by(DbAppointment.date.asc(), DbAppointment.time.asc()).all()
        return [self._to_domain(r) for r in rows]

    def insert(self, appointment: DomainAppointment) -> DomainAppointment:
        """Create a new appointment.

        The partial unique index on (doctor_id, date, time) rejects a second
        active booking; that violation is reported as SlotAlreadyBooked.
        """
        db_appointment = DbAppointment(
            doctor_id=appointment.doctor_id,
            customer_id=appointment.customer_id,
            patient_name=appointment.patient_name,
            email=appointment.email,
            phone=appointment.phone,
            notes=appointment.notes,
            date=appointment.date,
            time=appointment.time,
            status=AppointmentStatus.parse(appointment.status).value,
        )
        try:
            self.db.add(db_appointment)
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            logger.warning(
                "Appointment insert rejected by unique slot index",
                extra={
                    "context": {
                        "doctor_id": appointment.doctor_id,
                        "date": appointment.date.isoformat(),
                        "time": appointment.time,
                    }
                },
            )
            raise SlotAlreadyBooked(
                f"Slot {appointment.date.isoformat()} {appointment.time} is already booked"
            ) from e
        except Exception:
            self.db.rollback()
            raise
        self.db.refresh(db_appointment)
        return self._to_domain(db_appointment)

    def update_status(
        self, appointment_id: int, status: AppointmentStatus
    ) -> Optional[DomainAppointment]:
        db_appointment = self.db.query(DbAppointment).filter_by(id=appointment_id).first()
        if not db_appointment:
            return None
        try:
            setattr(db_appointment, "status", AppointmentStatus.parse(status).value)
            self.db.commit()
        except IntegrityError as e:
            # Re-activating a freed slot that someone else booked meanwhile
            self.db.rollback()
            raise SlotAlreadyBooked(
                f"Slot {db_appointment.date.isoformat()} {db_appointment.time} is already booked"
            ) from e
        except Exception:
            self.db.rollback()
            raise
        self.db.refresh(db_appointment)
        return self._to_domain(db_appointment)

    def _to_domain(self, db_appointment: DbAppointment) -> DomainAppointment:
        """Convert database model to domain entity."""
        return DomainAppointment(
            id=db_appointment.id,
            doctor_id=db_appointment.doctor_id,
            customer_id=db_appointment.customer_id,
            patient_name=db_appointment.patient_name,
            email=db_appointment.email,
            phone=db_appointment.phone,
            notes=db_appointment.notes,
            date=db_appointment.date,
            time=db_appointment.time,
            status=db_appointment.status,
            created_at=db_appointment.created_at,
            updated_at=db_appointment.updated_at,
        )
