"""
Fixtures for the booking integration tests (real SQLAlchemy repositories on
the shared in-memory SQLite database).
"""

import pytest

from clinic_booking.db.base import Doctor, DoctorSchedule


@pytest.fixture
def doctor(db_session):
    """Doctor working Monday-Friday 09:00-17:00, 30 min slots + 5 min buffer."""
    db_doctor = Doctor(id="doc-1", name="Dr. House", speciality="Diagnostics")
    db_session.add(db_doctor)
    for day in range(1, 6):
        db_session.add(
            DoctorSchedule(
                doctor_id="doc-1",
                day_of_week=day,
                start_time="09:00",
                end_time="17:00",
                slot_duration=30,
                buffer_time=5,
            )
        )
    db_session.commit()
    return db_doctor
