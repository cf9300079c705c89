"""
Unit tests for AvailabilityService.

This module tests:
- Rule / special date resolution and delegation to the slot generator
- Doctor existence and past-date handling
- Storage failures surfacing as StorageError
- Disabled dates for the calendar view
- Special date cache usage
"""

from datetime import date, datetime, timedelta, timezone
from unittest.mock import Mock

import pytest
from sqlalchemy.exc import OperationalError

from clinic_booking.core.exceptions import DoctorNotFound, StorageError
from clinic_booking.domain.entities import SpecialDateType
from clinic_booking.services.availability_service import (
    AvailabilityService,
    day_of_week,
)
from clinic_booking.services.special_date_cache import SpecialDateCache
from tests.factories.repository_factories import (
    AppointmentRepositoryFactory,
    DoctorRepositoryFactory,
    DomainFactory,
    ScheduleRepositoryFactory,
)

UTC = timezone.utc
MONDAY = date(2030, 1, 7)
NOW = datetime(2030, 1, 6, 12, 0, tzinfo=UTC)  # the Sunday before


@pytest.fixture
def mock_doctor_repo() -> Mock:
    return DoctorRepositoryFactory.create_mock_reader()


@pytest.fixture
def mock_schedule_repo() -> Mock:
    return ScheduleRepositoryFactory.create_mock_reader(DomainFactory.rule())


@pytest.fixture
def mock_appointment_repo() -> Mock:
    return AppointmentRepositoryFactory.create_mock_full()


@pytest.fixture
def service(mock_doctor_repo, mock_schedule_repo, mock_appointment_repo):
    """Initialize AvailabilityService with mocked repositories and a fixed clock."""
    return AvailabilityService(
        mock_doctor_repo,
        mock_schedule_repo,
        mock_appointment_repo,
        clock=lambda: NOW,
        tz=UTC,
    )


@pytest.mark.unit
@pytest.mark.services
@pytest.mark.availability
class TestGetAvailableSlots:
    def test_weekday_uses_sunday_zero(self):
        assert day_of_week(date(2030, 1, 6)) == 0  # Sunday
        assert day_of_week(MONDAY) == 1
        assert day_of_week(date(2030, 1, 12)) == 6  # Saturday

    def test_returns_generated_slots(self, service, mock_schedule_repo):
        slots = service.get_available_slots("doc-1", MONDAY)

        assert slots[:2] == ["09:00", "09:35"]
        mock_schedule_repo.find_weekly_rule.assert_called_once_with("doc-1", 1)

    def test_booked_times_are_excluded(self, service, mock_appointment_repo):
        mock_appointment_repo.find_booked_times.return_value = ["09:35"]

        slots = service.get_available_slots("doc-1", MONDAY)

        assert "09:35" not in slots
        mock_appointment_repo.find_booked_times.assert_called_once_with("doc-1", MONDAY)

    def test_unknown_doctor_raises(self, service, mock_doctor_repo):
        mock_doctor_repo.find_doctor.return_value = None

        with pytest.raises(DoctorNotFound):
            service.get_available_slots("ghost", MONDAY)

    def test_no_rule_for_weekday_is_empty(self, service, mock_schedule_repo):
        mock_schedule_repo.find_weekly_rule.return_value = None

        assert service.get_available_slots("doc-1", MONDAY) == []

    def test_past_date_is_empty(self, service, mock_schedule_repo):
        assert service.get_available_slots("doc-1", date(2029, 12, 31)) == []
        mock_schedule_repo.find_weekly_rule.assert_not_called()

    def test_doctor_holiday_blocks_day(self, service, mock_schedule_repo):
        mock_schedule_repo.find_special_date.return_value = DomainFactory.special_date(
            MONDAY
        )

        assert service.get_available_slots("doc-1", MONDAY) == []

    def test_clinic_wide_holiday_applies_when_doctor_has_none(
        self, service, mock_schedule_repo
    ):
        clinic_holiday = DomainFactory.special_date(MONDAY, doctor_id=None, name="New Year")
        mock_schedule_repo.find_special_date.side_effect = (
            lambda doctor_id, on_date: clinic_holiday if doctor_id is None else None
        )

        assert service.get_available_slots("doc-1", MONDAY) == []

    def test_doctor_entry_wins_over_clinic_wide(self, service, mock_schedule_repo):
        doctor_break = DomainFactory.special_date(
            MONDAY, type=SpecialDateType.BREAK, break_start="09:00", break_end="10:00"
        )
        clinic_holiday = DomainFactory.special_date(MONDAY, doctor_id=None)
        mock_schedule_repo.find_special_date.side_effect = (
            lambda doctor_id, on_date: clinic_holiday if doctor_id is None else doctor_break
        )

        slots = service.get_available_slots("doc-1", MONDAY)

        assert slots[0] == "10:10"

    def test_repository_failure_becomes_storage_error(self, service, mock_appointment_repo):
        mock_appointment_repo.find_booked_times.side_effect = OperationalError(
            "SELECT", {}, Exception("db down")
        )

        with pytest.raises(StorageError):
            service.get_available_slots("doc-1", MONDAY)

    def test_is_slot_available(self, service, mock_appointment_repo):
        mock_appointment_repo.find_booked_times.return_value = ["09:35"]

        assert service.is_slot_available("doc-1", MONDAY, "09:00") is True
        assert service.is_slot_available("doc-1", MONDAY, "9:00") is True
        assert service.is_slot_available("doc-1", MONDAY, "09:35") is False
        assert service.is_slot_available("doc-1", MONDAY, "09:10") is False
        assert service.is_slot_available("doc-1", MONDAY, "25:00") is False


@pytest.mark.unit
@pytest.mark.services
@pytest.mark.availability
class TestSpecialDateCaching:
    def test_lookups_are_served_from_cache(
        self, mock_doctor_repo, mock_schedule_repo, mock_appointment_repo
    ):
        cache = SpecialDateCache(ttl_seconds=300)
        service = AvailabilityService(
            mock_doctor_repo,
            mock_schedule_repo,
            mock_appointment_repo,
            special_date_cache=cache,
            clock=lambda: NOW,
            tz=UTC,
        )

        service.get_available_slots("doc-1", MONDAY)
        service.get_available_slots("doc-1", MONDAY)

        # doctor lookup + clinic-wide fallback, only on the first call
        assert mock_schedule_repo.find_special_date.call_count == 2
        assert len(cache) == 1

    def test_without_cache_repository_is_always_asked(self, service, mock_schedule_repo):
        service.get_available_slots("doc-1", MONDAY)
        service.get_available_slots("doc-1", MONDAY)

        assert mock_schedule_repo.find_special_date.call_count == 4


@pytest.mark.unit
@pytest.mark.services
@pytest.mark.availability
class TestDisabledDates:
    def test_non_working_days_and_holidays(self, service, mock_schedule_repo):
        mock_schedule_repo.list_weekly_rules.return_value = [
            DomainFactory.rule(day_of_week=d) for d in range(1, 6)
        ]
        wednesday = MONDAY + timedelta(days=2)
        mock_schedule_repo.list_special_dates.return_value = [
            DomainFactory.special_date(wednesday),
        ]

        disabled = service.get_disabled_dates("doc-1", start_date=MONDAY, days=7)

        assert disabled == [
            wednesday,
            MONDAY + timedelta(days=5),  # Saturday
            MONDAY + timedelta(days=6),  # Sunday
        ]
        mock_schedule_repo.list_special_dates.assert_called_once_with(
            "doc-1", MONDAY, MONDAY + timedelta(days=6), True
        )

    def test_doctor_break_overrides_clinic_holiday(self, service, mock_schedule_repo):
        mock_schedule_repo.list_weekly_rules.return_value = [DomainFactory.rule()]
        mock_schedule_repo.list_special_dates.return_value = [
            DomainFactory.special_date(MONDAY, doctor_id=None),
            DomainFactory.special_date(
                MONDAY, type=SpecialDateType.BREAK, break_start="12:00", break_end="13:00"
            ),
        ]

        disabled = service.get_disabled_dates("doc-1", start_date=MONDAY, days=1)

        assert disabled == []

    def test_defaults_to_today_and_configured_range(self, service, mock_schedule_repo):
        # no active rules at all -> every day in the window is disabled
        mock_schedule_repo.list_weekly_rules.return_value = []

        disabled = service.get_disabled_dates("doc-1")

        assert disabled[0] == NOW.date()
        assert len(disabled) == service.disabled_dates_range_days
