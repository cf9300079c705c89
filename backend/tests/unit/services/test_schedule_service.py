"""
Unit tests for ScheduleService.

This module tests:
- Full replacement of weekly schedules
- Special date creation / deletion and cache invalidation
"""

from datetime import date
from unittest.mock import Mock

import pytest

from clinic_booking.core.exceptions import (
    DoctorNotFound,
    InvalidScheduleConfig,
    SpecialDateNotFound,
    ValidationError,
)
from clinic_booking.domain.interfaces import ISpecialDateCache
from clinic_booking.schemas.dtos import SpecialDateCreateRequest
from clinic_booking.services.schedule_service import ScheduleService
from tests.factories.repository_factories import (
    DoctorRepositoryFactory,
    DomainFactory,
    ScheduleRepositoryFactory,
)

MONDAY = date(2030, 1, 7)


@pytest.fixture
def mock_doctor_repo() -> Mock:
    return DoctorRepositoryFactory.create_mock_reader()


@pytest.fixture
def mock_schedule_repo() -> Mock:
    return ScheduleRepositoryFactory.create_mock_full()


@pytest.fixture
def mock_cache() -> Mock:
    return Mock(spec=ISpecialDateCache)


@pytest.fixture
def service(mock_doctor_repo, mock_schedule_repo, mock_cache) -> ScheduleService:
    return ScheduleService(mock_doctor_repo, mock_schedule_repo, mock_cache)


@pytest.mark.unit
@pytest.mark.services
@pytest.mark.schedule
class TestWeeklySchedule:
    def test_replace_passes_whole_set(self, service, mock_schedule_repo):
        rules = [DomainFactory.rule(doctor_id="", day_of_week=d) for d in (1, 3, 5)]

        saved = service.replace_weekly_schedule("doc-1", rules)

        assert [r.day_of_week for r in saved] == [1, 3, 5]
        assert all(r.doctor_id == "doc-1" for r in saved)
        mock_schedule_repo.replace_weekly_rules.assert_called_once()

    def test_empty_set_clears_schedule(self, service, mock_schedule_repo):
        assert service.replace_weekly_schedule("doc-1", []) == []
        mock_schedule_repo.replace_weekly_rules.assert_called_once_with("doc-1", [])

    def test_duplicate_weekday_rejected(self, service, mock_schedule_repo):
        rules = [DomainFactory.rule(day_of_week=2), DomainFactory.rule(day_of_week=2)]

        with pytest.raises(InvalidScheduleConfig, match="day_of_week 2"):
            service.replace_weekly_schedule("doc-1", rules)
        mock_schedule_repo.replace_weekly_rules.assert_not_called()

    def test_unknown_doctor(self, service, mock_doctor_repo, mock_schedule_repo):
        mock_doctor_repo.find_doctor.return_value = None

        with pytest.raises(DoctorNotFound):
            service.replace_weekly_schedule("ghost", [DomainFactory.rule()])
        mock_schedule_repo.replace_weekly_rules.assert_not_called()

    def test_get_weekly_schedule(self, service, mock_schedule_repo):
        mock_schedule_repo.list_weekly_rules.return_value = [DomainFactory.rule()]

        assert len(service.get_weekly_schedule("doc-1")) == 1


@pytest.mark.unit
@pytest.mark.services
@pytest.mark.schedule
class TestSpecialDates:
    def test_add_holiday_invalidates_doctor_cache(self, service, mock_cache):
        request = SpecialDateCreateRequest(
            date="2030-01-07", type="holiday", doctor_id="doc-1", reason="Conference"
        )

        created = service.add_special_date(request)

        assert created.is_holiday
        assert created.date == MONDAY
        assert created.name == "Conference"
        mock_cache.invalidate.assert_called_once_with("doc-1")

    def test_clinic_wide_change_clears_whole_cache(
        self, service, mock_cache, mock_doctor_repo
    ):
        request = SpecialDateCreateRequest(date="2030-01-01", name="New Year")

        created = service.add_special_date(request)

        assert created.is_clinic_wide
        mock_cache.invalidate.assert_called_once_with(None)
        mock_doctor_repo.find_doctor.assert_not_called()

    def test_duplicate_special_date_rejected(self, service, mock_schedule_repo):
        mock_schedule_repo.find_special_date.return_value = DomainFactory.special_date(
            MONDAY
        )
        request = SpecialDateCreateRequest(date="2030-01-07", doctor_id="doc-1")

        with pytest.raises(ValidationError, match="already exists"):
            service.add_special_date(request)
        mock_schedule_repo.create_special_date.assert_not_called()

    def test_invalid_window_rejected(self, service):
        request = SpecialDateCreateRequest(
            date="2030-01-07",
            type="BREAK",
            doctor_id="doc-1",
            break_start="14:00",
            break_end="13:00",
        )

        with pytest.raises(InvalidScheduleConfig):
            service.add_special_date(request)

    def test_delete_special_date(self, service, mock_schedule_repo, mock_cache):
        mock_schedule_repo.delete_special_date.return_value = DomainFactory.special_date(
            MONDAY, id=4
        )

        removed = service.delete_special_date(4)

        assert removed.id == 4
        mock_cache.invalidate.assert_called_once_with("doc-1")

    def test_delete_missing_special_date(self, service, mock_cache):
        with pytest.raises(SpecialDateNotFound):
            service.delete_special_date(404)
        mock_cache.invalidate.assert_not_called()

    def test_list_for_doctor_includes_clinic_wide(self, service, mock_schedule_repo):
        service.list_special_dates("doc-1", MONDAY, None)

        mock_schedule_repo.list_special_dates.assert_called_once_with(
            "doc-1", MONDAY, None, True
        )
