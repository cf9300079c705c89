from __future__ import annotations

import datetime as dt
from decimal import Decimal
from typing import Optional

from sqlalchemy import (
    Boolean,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
    func,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column

from .session import Base

# SQL predicate shared by the partial unique index and the booked-times query
ACTIVE_STATUS_PREDICATE = "status NOT IN ('CANCELLED', 'NO_SHOW')"
CLINIC_WIDE_PREDICATE = "doctor_id IS NULL"


class Doctor(Base):
    """Doctor model. Only existence matters to the booking core."""

    __tablename__ = "doctors"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    speciality: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    fee: Mapped[Optional[Decimal]] = mapped_column(Numeric(10, 2), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[Optional[dt.datetime]] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    def __repr__(self):
        return f"<Doctor(id='{self.id}', name='{self.name}')>"


class DoctorSchedule(Base):
    """Weekly schedule rule: one row per (doctor, weekday)."""

    __tablename__ = "doctor_schedules"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    doctor_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("doctors.id", ondelete="CASCADE"), nullable=False
    )
    day_of_week: Mapped[int] = mapped_column(Integer, nullable=False)  # Sunday=0
    start_time: Mapped[str] = mapped_column(String(5), nullable=False)
    end_time: Mapped[str] = mapped_column(String(5), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    slot_duration: Mapped[int] = mapped_column(Integer, nullable=False, default=30)
    buffer_time: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    break_start: Mapped[Optional[str]] = mapped_column(String(5), nullable=True)
    break_end: Mapped[Optional[str]] = mapped_column(String(5), nullable=True)
    created_at: Mapped[Optional[dt.datetime]] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[Optional[dt.datetime]] = mapped_column(
        DateTime(timezone=True), onupdate=func.now()
    )

    __table_args__ = (
        UniqueConstraint("doctor_id", "day_of_week", name="uq_schedule_doctor_day"),
    )

    def __repr__(self):
        return (
            f"<DoctorSchedule(doctor_id='{self.doctor_id}', day={self.day_of_week}, "
            f"{self.start_time}-{self.end_time})>"
        )


class SpecialDate(Base):
    """Holiday or custom-hours day. NULL doctor_id means clinic-wide."""

    __tablename__ = "special_dates"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    doctor_id: Mapped[Optional[str]] = mapped_column(
        String(64), ForeignKey("doctors.id", ondelete="CASCADE"), nullable=True
    )
    date: Mapped[dt.date] = mapped_column(Date, nullable=False, index=True)
    type: Mapped[str] = mapped_column(String(20), nullable=False, default="HOLIDAY")
    name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    reason: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    break_start: Mapped[Optional[str]] = mapped_column(String(5), nullable=True)
    break_end: Mapped[Optional[str]] = mapped_column(String(5), nullable=True)
    start_time: Mapped[Optional[str]] = mapped_column(String(5), nullable=True)
    end_time: Mapped[Optional[str]] = mapped_column(String(5), nullable=True)
    created_at: Mapped[Optional[dt.datetime]] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[Optional[dt.datetime]] = mapped_column(
        DateTime(timezone=True), onupdate=func.now()
    )

    __table_args__ = (
        UniqueConstraint("doctor_id", "date", name="uq_special_date_doctor_date"),
        # NULLs are distinct in the constraint above
        Index(
            "uq_special_date_clinic_wide",
            "date",
            unique=True,
            sqlite_where=text(CLINIC_WIDE_PREDICATE),
            postgresql_where=text(CLINIC_WIDE_PREDICATE),
        ),
    )

    def __repr__(self):
        return f"<SpecialDate(doctor_id={self.doctor_id!r}, date={self.date}, type={self.type})>"


class Appointment(Base):
    """Appointment model.

    The partial unique index lets at most one active appointment hold a
    (doctor, date, time); cancelled / no-show rows free the slot.
    """

    __tablename__ = "appointments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    doctor_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("doctors.id"), nullable=False, index=True
    )
    customer_id: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    patient_name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    phone: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    time: Mapped[str] = mapped_column(String(5), nullable=False)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default="SCHEDULED"
    )
    created_at: Mapped[Optional[dt.datetime]] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[Optional[dt.datetime]] = mapped_column(
        DateTime(timezone=True), onupdate=func.now()
    )

    __table_args__ = (
        Index(
            "uq_appointment_active_slot",
            "doctor_id",
            "date",
            "time",
            unique=True,
            sqlite_where=text(ACTIVE_STATUS_PREDICATE),
            postgresql_where=text(ACTIVE_STATUS_PREDICATE),
        ),
        Index("ix_appointments_doctor_date", "doctor_id", "date"),
    )

    def __repr__(self):
        return (
            f"<Appointment(id={self.id}, doctor_id='{self.doctor_id}', "
            f"date={self.date}, time='{self.time}', status={self.status})>"
        )
