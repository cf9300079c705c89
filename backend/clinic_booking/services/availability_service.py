"""
Availability service following SOLID principles.

Resolves which weekly rule and special date apply to a (doctor, date),
gathers the booked times and drives the pure slot generator. This is the
integration point between storage and the scheduling algorithm.
"""

import logging
from datetime import date, datetime, timedelta, tzinfo
from typing import Callable, Dict, List, Optional

from clinic_booking.core import config
from clinic_booking.core.exceptions import DoctorNotFound
from clinic_booking.core.validation import normalize_hhmm
from clinic_booking.domain.entities import SpecialDate
from clinic_booking.domain.interfaces import (
    IAppointmentReader,
    IDoctorReader,
    IScheduleReader,
    ISpecialDateCache,
)
from clinic_booking.services.slot_generator import generate_slots, local_now
from clinic_booking.services.storage_guard import guard_storage

logger = logging.getLogger(__name__)


def day_of_week(on_date: date) -> int:
    """Weekday with the Sunday=0 convention used by weekly rules."""
    return (on_date.weekday() + 1) % 7


class AvailabilityService:
    """Application service answering "which slots can be booked?".

    Read-only: safe to call repeatedly and concurrently. Collaborator
    failures surface as StorageError; a missing rule or special date is a
    normal empty result, never an error.
    """

    def __init__(
        self,
        doctor_repo: IDoctorReader,
        schedule_repo: IScheduleReader,
        appointment_repo: IAppointmentReader,
        special_date_cache: Optional[ISpecialDateCache] = None,
        clock: Optional[Callable[[], datetime]] = None,
        tz: Optional[tzinfo] = None,
        disabled_dates_range_days: Optional[int] = None,
    ):
        self.doctor_repo = doctor_repo
        self.schedule_repo = schedule_repo
        self.appointment_repo = appointment_repo
        self.special_date_cache = special_date_cache
        self.tz = tz or config.CLINIC_TZ
        self.clock = clock or (lambda: datetime.now(self.tz))
        self.disabled_dates_range_days = (
            disabled_dates_range_days or config.DISABLED_DATES_RANGE_DAYS
        )

    # ------------------------------------------------------------------
    # Public operations
    # ------------------------------------------------------------------

    def get_available_slots(self, doctor_id: str, on_date: date) -> List[str]:
        """Return the ordered "HH:MM" slots still bookable for the doctor.

        Raises:
            DoctorNotFound: unknown doctor id
            InvalidScheduleConfig: the applicable rule cannot produce slots
            StorageError: a repository call failed
        """
        self.ensure_doctor_exists(doctor_id)

        now = self.clock()
        if on_date < local_now(now, self.tz).date():
            logger.debug(
                "Requested date is in the past",
                extra={"context": {"doctor_id": doctor_id, "date": on_date.isoformat()}},
            )
            return []

        rule = guard_storage(
            "find_weekly_rule",
            self.schedule_repo.find_weekly_rule,
            doctor_id,
            day_of_week(on_date),
        )
        if rule is None or not rule.is_active:
            logger.debug(
                "No active weekly rule for date",
                extra={
                    "context": {
                        "doctor_id": doctor_id,
                        "date": on_date.isoformat(),
                        "day_of_week": day_of_week(on_date),
                    }
                },
            )
            return []

        override = self.resolve_special_date(doctor_id, on_date)
        booked_times = guard_storage(
            "find_booked_times",
            self.appointment_repo.find_booked_times,
            doctor_id,
            on_date,
        )

        slots = generate_slots(
            rule,
            override=override,
            booked_times=booked_times,
            reference_now=now,
            target_date=on_date,
            tz=self.tz,
        )

        logger.info(
            f"Generated {len(slots)} slots",
            extra={
                "context": {
                    "doctor_id": doctor_id,
                    "date": on_date.isoformat(),
                    "booked": len(booked_times or []),
                    "override": override.type.value if override else None,
                }
            },
        )
        return slots

    def is_slot_available(self, doctor_id: str, on_date: date, time: str) -> bool:
        """Re-derive availability and check one requested time."""
        try:
            wanted = normalize_hhmm(time)
        except ValueError:
            return False
        return wanted in self.get_available_slots(doctor_id, on_date)

    def get_disabled_dates(
        self,
        doctor_id: str,
        start_date: Optional[date] = None,
        days: Optional[int] = None,
    ) -> List[date]:
        """Dates in [start, start + days) on which the doctor cannot be booked.

        A date is disabled when the doctor has no active rule for its
        weekday or the applicable special date is a HOLIDAY.
        """
        self.ensure_doctor_exists(doctor_id)

        start = start_date or local_now(self.clock(), self.tz).date()
        span = days or self.disabled_dates_range_days
        end = start + timedelta(days=span - 1)

        rules = guard_storage(
            "list_weekly_rules", self.schedule_repo.list_weekly_rules, doctor_id
        )
        working_days = {rule.day_of_week for rule in rules if rule.is_active}

        special_dates = guard_storage(
            "list_special_dates",
            self.schedule_repo.list_special_dates,
            doctor_id,
            start,
            end,
            True,
        )
        by_date: Dict[date, SpecialDate] = {}
        for special in special_dates:
            # Doctor-specific entries win over clinic-wide ones on the same day
            current = by_date.get(special.date)
            if current is None or (current.is_clinic_wide and not special.is_clinic_wide):
                by_date[special.date] = special

        disabled: List[date] = []
        for offset in range(span):
            day = start + timedelta(days=offset)
            special = by_date.get(day)
            if day_of_week(day) not in working_days:
                disabled.append(day)
            elif special is not None and special.is_holiday:
                disabled.append(day)
        return disabled

    def resolve_special_date(
        self, doctor_id: str, on_date: date
    ) -> Optional[SpecialDate]:
        """Doctor-specific special date for the day, else the clinic-wide one."""
        cache_key = (doctor_id, on_date)
        if self.special_date_cache is not None:
            hit, cached = self.special_date_cache.get(cache_key)
            if hit:
                return cached

        special = guard_storage(
            "find_special_date",
            self.schedule_repo.find_special_date,
            doctor_id,
            on_date,
        )
        if special is None:
            special = guard_storage(
                "find_special_date",
                self.schedule_repo.find_special_date,
                None,
                on_date,
            )

        if self.special_date_cache is not None:
            self.special_date_cache.set(cache_key, special)
        return special

    def ensure_doctor_exists(self, doctor_id: str):
        doctor = guard_storage("find_doctor", self.doctor_repo.find_doctor, doctor_id)
        if doctor is None:
            raise DoctorNotFound(f"Doctor '{doctor_id}' not found")
        return doctor

