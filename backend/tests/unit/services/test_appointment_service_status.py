"""
Unit tests for AppointmentService status change operations.

This module tests:
- Transitions allowed by the status state machine
- Terminal states and the permissive mode
- Unknown appointments and invalid status values
"""

from datetime import date
from unittest.mock import Mock

import pytest

from clinic_booking.core.exceptions import (
    AppointmentNotFound,
    InvalidStatusTransition,
    ValidationError,
)
from clinic_booking.domain.entities import AppointmentStatus
from clinic_booking.services.appointment_service import AppointmentService
from clinic_booking.services.availability_service import AvailabilityService
from tests.factories.repository_factories import (
    AppointmentRepositoryFactory,
    DoctorRepositoryFactory,
    DomainFactory,
)

MONDAY = date(2030, 1, 7)


@pytest.fixture
def mock_appointment_repo() -> Mock:
    repo = AppointmentRepositoryFactory.create_mock_full()
    repo.get_by_id.return_value = DomainFactory.appointment(MONDAY)
    repo.update_status.side_effect = lambda appointment_id, status: (
        DomainFactory.appointment(MONDAY, id=appointment_id, status=status)
    )
    return repo


def build_service(repo, enforce=True) -> AppointmentService:
    return AppointmentService(
        DoctorRepositoryFactory.create_mock_reader(),
        repo,
        Mock(spec=AvailabilityService),
        enforce_transitions=enforce,
    )


@pytest.fixture
def service(mock_appointment_repo) -> AppointmentService:
    return build_service(mock_appointment_repo)


@pytest.mark.unit
@pytest.mark.services
@pytest.mark.appointment
class TestAppointmentStatusChanges:
    def test_confirm_scheduled_appointment(self, service, mock_appointment_repo):
        response = service.update_appointment_status(1, "CONFIRMED")

        assert response.status == "CONFIRMED"
        mock_appointment_repo.update_status.assert_called_once_with(
            1, AppointmentStatus.CONFIRMED
        )

    def test_status_value_is_case_insensitive(self, service):
        assert service.update_appointment_status("1", "cancelled").status == "CANCELLED"

    @pytest.mark.parametrize(
        "current,target",
        [
            ("SCHEDULED", "COMPLETED"),
            ("SCHEDULED", "NO_SHOW"),
            ("CONFIRMED", "COMPLETED"),
            ("CONFIRMED", "CANCELLED"),
        ],
    )
    def test_allowed_transitions(self, service, mock_appointment_repo, current, target):
        mock_appointment_repo.get_by_id.return_value = DomainFactory.appointment(
            MONDAY, status=current
        )

        assert service.update_appointment_status(1, target).status == target

    @pytest.mark.parametrize(
        "current,target",
        [
            ("CANCELLED", "SCHEDULED"),
            ("COMPLETED", "CANCELLED"),
            ("NO_SHOW", "CONFIRMED"),
            ("CONFIRMED", "SCHEDULED"),
        ],
    )
    def test_rejected_transitions(self, service, mock_appointment_repo, current, target):
        mock_appointment_repo.get_by_id.return_value = DomainFactory.appointment(
            MONDAY, status=current
        )

        with pytest.raises(InvalidStatusTransition):
            service.update_appointment_status(1, target)
        mock_appointment_repo.update_status.assert_not_called()

    def test_same_status_is_a_no_op(self, service, mock_appointment_repo):
        response = service.update_appointment_status(1, "SCHEDULED")

        assert response.status == "SCHEDULED"
        mock_appointment_repo.update_status.assert_not_called()

    def test_permissive_mode_accepts_any_enum_value(self, mock_appointment_repo):
        mock_appointment_repo.get_by_id.return_value = DomainFactory.appointment(
            MONDAY, status="CANCELLED"
        )
        service = build_service(mock_appointment_repo, enforce=False)

        assert service.update_appointment_status(1, "SCHEDULED").status == "SCHEDULED"

    def test_unknown_appointment(self, service, mock_appointment_repo):
        mock_appointment_repo.get_by_id.return_value = None

        with pytest.raises(AppointmentNotFound):
            service.update_appointment_status(99, "CONFIRMED")

    def test_invalid_status_value(self, service, mock_appointment_repo):
        with pytest.raises(ValidationError, match="status"):
            service.update_appointment_status(1, "ARCHIVED")
        mock_appointment_repo.get_by_id.assert_not_called()

    def test_missing_fields(self, service):
        with pytest.raises(ValidationError) as exc_info:
            service.update_appointment_status(None, None)
        assert len(exc_info.value.errors) == 2


@pytest.mark.unit
@pytest.mark.services
@pytest.mark.appointment
class TestAppointmentQueries:
    def test_get_appointment(self, service):
        response = service.get_appointment(1)

        assert response.patient_name == "Jane Doe"
        assert response.to_dict()["date"] == "2030-01-07"

    def test_get_missing_appointment(self, service, mock_appointment_repo):
        mock_appointment_repo.get_by_id.return_value = None

        with pytest.raises(AppointmentNotFound):
            service.get_appointment(5)

    def test_list_appointments_in_range(self, service, mock_appointment_repo):
        mock_appointment_repo.list_by_doctor.return_value = [
            DomainFactory.appointment(MONDAY, id=1, time="09:00"),
            DomainFactory.appointment(MONDAY, id=2, time="09:35"),
        ]

        responses = service.list_appointments("doc-1", MONDAY, MONDAY)

        assert [r.id for r in responses] == [1, 2]
        mock_appointment_repo.list_by_doctor.assert_called_once_with(
            "doc-1", MONDAY, MONDAY
        )
