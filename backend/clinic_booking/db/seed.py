"""
Database seeding functions.

Creates a demo doctor with a Monday-Friday schedule so a fresh database can
answer availability queries straight away.
"""

import logging
from typing import Optional

from clinic_booking.db.base import Doctor, DoctorSchedule
from clinic_booking.db.session import SessionLocal

logger = logging.getLogger(__name__)

DEMO_DOCTOR_ID = "demo-doctor"


def ensure_doctor(
    doctor_id: str,
    name: str,
    speciality: Optional[str] = None,
    fee: Optional[float] = None,
) -> bool:
    """
    Create the doctor row if missing.

    This function is idempotent - it can be called multiple times safely.

    Returns:
        True when a row was created
    """
    with SessionLocal() as db:
        if db.get(Doctor, doctor_id) is not None:
            return False
        db.add(Doctor(id=doctor_id, name=name, speciality=speciality, fee=fee))
        db.commit()
        logger.info(
            "Doctor created",
            extra={"context": {"doctor_id": doctor_id, "doctor_name": name}},
        )
        return True


def seed_demo_data() -> None:
    """Demo doctor working 09:00-17:00 Monday-Friday with a lunch break."""
    ensure_doctor(DEMO_DOCTOR_ID, "Dr. Demo", speciality="General Practice", fee=50)
    with SessionLocal() as db:
        has_rules = (
            db.query(DoctorSchedule).filter_by(doctor_id=DEMO_DOCTOR_ID).first()
            is not None
        )
        if has_rules:
            logger.info(
                "Demo schedule already present",
                extra={"context": {"doctor_id": DEMO_DOCTOR_ID}},
            )
            return
        for day in range(1, 6):  # Monday..Friday with Sunday=0
            db.add(
                DoctorSchedule(
                    doctor_id=DEMO_DOCTOR_ID,
                    day_of_week=day,
                    start_time="09:00",
                    end_time="17:00",
                    slot_duration=30,
                    buffer_time=5,
                    break_start="13:00",
                    break_end="14:00",
                )
            )
        db.commit()
        logger.info(
            "Demo schedule created", extra={"context": {"doctor_id": DEMO_DOCTOR_ID}}
        )
