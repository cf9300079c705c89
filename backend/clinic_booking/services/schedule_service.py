"""
Schedule administration service.

Weekly schedules are replaced as a whole set per doctor. Special dates are
added and removed one at a time; each change invalidates the special-date
cache shared with the availability service.
"""

import logging
from datetime import date
from typing import List, Optional, Sequence

from clinic_booking.core.exceptions import (
    DoctorNotFound,
    InvalidScheduleConfig,
    SpecialDateNotFound,
    ValidationError,
)
from clinic_booking.domain.entities import SpecialDate, WeeklyScheduleRule
from clinic_booking.domain.interfaces import (
    IDoctorReader,
    IScheduleRepository,
    ISpecialDateCache,
)
from clinic_booking.schemas.dtos import SpecialDateCreateRequest
from clinic_booking.services.storage_guard import guard_storage

logger = logging.getLogger(__name__)


class ScheduleService:
    """Application service for schedule and special-date administration."""

    def __init__(
        self,
        doctor_repo: IDoctorReader,
        schedule_repo: IScheduleRepository,
        special_date_cache: Optional[ISpecialDateCache] = None,
    ):
        self.doctor_repo = doctor_repo
        self.schedule_repo = schedule_repo
        self.special_date_cache = special_date_cache

    def replace_weekly_schedule(
        self, doctor_id: str, rules: Sequence[WeeklyScheduleRule]
    ) -> List[WeeklyScheduleRule]:
        """Delete every weekly rule of the doctor and store the given set.

        Raises:
            InvalidScheduleConfig: two rules for the same weekday
            DoctorNotFound: unknown doctor
        """
        seen = set()
        for rule in rules:
            if rule.day_of_week in seen:
                raise InvalidScheduleConfig(
                    f"More than one rule for day_of_week {rule.day_of_week}"
                )
            seen.add(rule.day_of_week)
            rule.doctor_id = doctor_id

        self._ensure_doctor(doctor_id)
        saved = guard_storage(
            "replace_weekly_rules",
            self.schedule_repo.replace_weekly_rules,
            doctor_id,
            list(rules),
        )
        logger.info(
            "Weekly schedule updated",
            extra={
                "context": {
                    "doctor_id": doctor_id,
                    "days": sorted(r.day_of_week for r in saved if r.is_active),
                }
            },
        )
        return saved

    def get_weekly_schedule(self, doctor_id: str) -> List[WeeklyScheduleRule]:
        self._ensure_doctor(doctor_id)
        return guard_storage(
            "list_weekly_rules", self.schedule_repo.list_weekly_rules, doctor_id
        )

    def add_special_date(self, request: SpecialDateCreateRequest) -> SpecialDate:
        """Create a holiday or custom-hours day.

        Only one special date may exist per (doctor, date); clinic-wide
        entries (no doctor) follow the same rule among themselves.
        """
        special = request.to_entity()
        if special.doctor_id is not None:
            self._ensure_doctor(special.doctor_id)

        existing = guard_storage(
            "find_special_date",
            self.schedule_repo.find_special_date,
            special.doctor_id,
            special.date,
        )
        if existing is not None:
            raise ValidationError(
                "Special date already exists",
                errors=[f"date: a special date already exists on {special.date.isoformat()}"],
            )

        created = guard_storage(
            "create_special_date", self.schedule_repo.create_special_date, special
        )
        self._invalidate(created.doctor_id)
        logger.info(
            "Special date created",
            extra={
                "context": {
                    "special_date_id": created.id,
                    "doctor_id": created.doctor_id,
                    "date": created.date.isoformat(),
                    "type": created.type.value,
                }
            },
        )
        return created

    def delete_special_date(self, special_date_id: int) -> SpecialDate:
        removed = guard_storage(
            "delete_special_date",
            self.schedule_repo.delete_special_date,
            special_date_id,
        )
        if removed is None:
            raise SpecialDateNotFound(f"Special date {special_date_id} not found")
        self._invalidate(removed.doctor_id)
        logger.info(
            "Special date deleted",
            extra={
                "context": {
                    "special_date_id": special_date_id,
                    "doctor_id": removed.doctor_id,
                }
            },
        )
        return removed

    def list_special_dates(
        self,
        doctor_id: Optional[str],
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> List[SpecialDate]:
        """Special dates in range; a doctor's list includes clinic-wide days."""
        if doctor_id is not None:
            self._ensure_doctor(doctor_id)
        return guard_storage(
            "list_special_dates",
            self.schedule_repo.list_special_dates,
            doctor_id,
            start_date,
            end_date,
            doctor_id is not None,
        )

    def _ensure_doctor(self, doctor_id: str) -> None:
        doctor = guard_storage("find_doctor", self.doctor_repo.find_doctor, doctor_id)
        if doctor is None:
            raise DoctorNotFound(f"Doctor '{doctor_id}' not found")

    def _invalidate(self, doctor_id: Optional[str]) -> None:
        if self.special_date_cache is None:
            return
        # A clinic-wide change affects every doctor's cached lookups
        self.special_date_cache.invalidate(doctor_id)
