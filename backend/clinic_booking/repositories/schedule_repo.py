"""
Schedule repository implementation following SOLID principles.

Stores weekly rules (doctor_schedules) and calendar overrides
(special_dates). Weekly rules are only ever replaced as a whole set.
"""

import logging
from datetime import date
from typing import List, Optional, Sequence

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError

from clinic_booking.core.exceptions import ValidationError
from clinic_booking.db.base import DoctorSchedule as DbSchedule
from clinic_booking.db.base import SpecialDate as DbSpecialDate
from clinic_booking.domain.entities import SpecialDate, WeeklyScheduleRule
from clinic_booking.domain.interfaces import IScheduleRepository

logger = logging.getLogger(__name__)


class ScheduleRepository(IScheduleRepository):
    """Repository for weekly schedule and special date persistence."""

    def __init__(self, db_session) -> None:
        self.db = db_session

    # Weekly rules

    def find_weekly_rule(
        self, doctor_id: str, day_of_week: int
    ) -> Optional[WeeklyScheduleRule]:
        db_rule = (
            self.db.query(DbSchedule)
            .filter(
                DbSchedule.doctor_id == doctor_id,
                DbSchedule.day_of_week == day_of_week,
                DbSchedule.is_active.is_(True),
            )
            .first()
        )
        return self._rule_to_domain(db_rule) if db_rule else None

    def list_weekly_rules(self, doctor_id: str) -> List[WeeklyScheduleRule]:
        rows = (
            self.db.query(DbSchedule)
            .filter(DbSchedule.doctor_id == doctor_id)
            .order_by(DbSchedule.day_of_week.asc())
            .all()
        )
        return [self._rule_to_domain(r) for r in rows]

    def replace_weekly_rules(
        self, doctor_id: str, rules: Sequence[WeeklyScheduleRule]
    ) -> List[WeeklyScheduleRule]:
        try:
            self.db.query(DbSchedule).filter(
                DbSchedule.doctor_id == doctor_id
            ).delete(synchronize_session=False)
            for rule in rules:
                self.db.add(
                    DbSchedule(
                        doctor_id=doctor_id,
                        day_of_week=rule.day_of_week,
                        start_time=rule.start_time,
                        end_time=rule.end_time,
                        is_active=rule.is_active,
                        slot_duration=rule.slot_duration,
                        buffer_time=rule.buffer_time,
                        break_start=rule.break_start,
                        break_end=rule.break_end,
                    )
                )
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        logger.info(
            "Weekly schedule replaced",
            extra={"context": {"doctor_id": doctor_id, "rules": len(rules)}},
        )
        return self.list_weekly_rules(doctor_id)

    # Special dates

    def find_special_date(
        self, doctor_id: Optional[str], on_date: date
    ) -> Optional[SpecialDate]:
        query = self.db.query(DbSpecialDate).filter(DbSpecialDate.date == on_date)
        if doctor_id is None:
            query = query.filter(DbSpecialDate.doctor_id.is_(None))
        else:
            query = query.filter(DbSpecialDate.doctor_id == doctor_id)
        db_special = query.first()
        return self._special_to_domain(db_special) if db_special else None

    def list_special_dates(
        self,
        doctor_id: Optional[str],
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        include_clinic_wide: bool = False,
    ) -> List[SpecialDate]:
        query = self.db.query(DbSpecialDate)
        if doctor_id is None:
            query = query.filter(DbSpecialDate.doctor_id.is_(None))
        elif include_clinic_wide:
            query = query.filter(
                or_(
                    DbSpecialDate.doctor_id == doctor_id,
                    DbSpecialDate.doctor_id.is_(None),
                )
            )
        else:
            query = query.filter(DbSpecialDate.doctor_id == doctor_id)
        if start_date is not None:
            query = query.filter(DbSpecialDate.date >= start_date)
        if end_date is not None:
            query = query.filter(DbSpecialDate.date <= end_date)
        rows = query.order_by(DbSpecialDate.date.asc(), DbSpecialDate.id.asc()).all()
        return [self._special_to_domain(r) for r in rows]

    def create_special_date(self, special_date: SpecialDate) -> SpecialDate:
        db_special = DbSpecialDate(
            doctor_id=special_date.doctor_id,
            date=special_date.date,
            type=special_date.type.value,
            name=special_date.name,
            reason=special_date.reason,
            break_start=special_date.break_start,
            break_end=special_date.break_end,
            start_time=special_date.start_time,
            end_time=special_date.end_time,
        )
        try:
            self.db.add(db_special)
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise ValidationError(
                "Special date already exists",
                errors=[f"date: a special date already exists on {special_date.date.isoformat()}"],
            ) from e
        except Exception:
            self.db.rollback()
            raise
        self.db.refresh(db_special)
        return self._special_to_domain(db_special)

    def delete_special_date(self, special_date_id: int) -> Optional[SpecialDate]:
        db_special = self.db.query(DbSpecialDate).filter_by(id=special_date_id).first()
        if not db_special:
            return None
        removed = self._special_to_domain(db_special)
        try:
            self.db.delete(db_special)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        return removed

    # Mapping

    def _rule_to_domain(self, db_rule: DbSchedule) -> WeeklyScheduleRule:
        return WeeklyScheduleRule(
            id=db_rule.id,
            doctor_id=db_rule.doctor_id,
            day_of_week=db_rule.day_of_week,
            start_time=db_rule.start_time,
            end_time=db_rule.end_time,
            is_active=bool(db_rule.is_active),
            slot_duration=db_rule.slot_duration,
            buffer_time=db_rule.buffer_time,
            break_start=db_rule.break_start,
            break_end=db_rule.break_end,
            created_at=db_rule.created_at,
            updated_at=db_rule.updated_at,
        )

    def _special_to_domain(self, db_special: DbSpecialDate) -> SpecialDate:
        return SpecialDate(
            id=db_special.id,
            doctor_id=db_special.doctor_id,
            date=db_special.date,
            type=db_special.type,
            name=db_special.name,
            reason=db_special.reason,
            break_start=db_special.break_start,
            break_end=db_special.break_end,
            start_time=db_special.start_time,
            end_time=db_special.end_time,
            created_at=db_special.created_at,
            updated_at=db_special.updated_at,
        )
