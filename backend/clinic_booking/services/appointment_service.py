"""
Appointment service following SOLID principles.

Creates bookings against freshly computed availability and manages the
status lifecycle of existing appointments.
"""

import logging
from datetime import date
from typing import List, Optional

from clinic_booking.core import config
from clinic_booking.core.exceptions import (
    AppointmentNotFound,
    DoctorNotFound,
    InvalidStatusTransition,
    SlotUnavailable,
)
from clinic_booking.domain.entities import (
    ALLOWED_TRANSITIONS,
    Appointment as DomainAppointment,
    AppointmentStatus,
)
from clinic_booking.domain.interfaces import (
    IAppointmentRepository,
    IDoctorReader,
    INotifier,
)
from clinic_booking.schemas.dtos import (
    AppointmentCreateRequest,
    AppointmentResponse,
    AppointmentStatusUpdateRequest,
)
from clinic_booking.services.availability_service import AvailabilityService
from clinic_booking.services.storage_guard import guard_storage

logger = logging.getLogger(__name__)

APPOINTMENT_CREATED_EVENT = "appointment.created"


class AppointmentService:
    """Application service for appointment-related use-cases.

    This service demonstrates:
    - Single Responsibility: Handles only appointment business logic
    - Dependency Inversion: Depends on interfaces, not concrete implementations
    """

    def __init__(
        self,
        doctor_repo: IDoctorReader,
        appointment_repo: IAppointmentRepository,
        availability_service: AvailabilityService,
        notifier: Optional[INotifier] = None,
        enforce_transitions: Optional[bool] = None,
        initial_status=None,
        required_contact: Optional[str] = None,
    ):
        self.doctor_repo = doctor_repo
        self.appointment_repo = appointment_repo
        self.availability_service = availability_service
        self.notifier = notifier
        self.enforce_transitions = (
            config.ENFORCE_STATUS_TRANSITIONS
            if enforce_transitions is None
            else enforce_transitions
        )
        self.initial_status = AppointmentStatus.parse(
            initial_status or config.APPOINTMENT_INITIAL_STATUS
        )
        self.required_contact = required_contact or config.APPOINTMENT_REQUIRED_CONTACT

    def create_appointment(
        self, request: AppointmentCreateRequest
    ) -> AppointmentResponse:
        """Create a new appointment with business rule validation.

        Business Rules:
        - Request fields must be present and well formed
        - Doctor must exist
        - Requested time must be in the currently available slots
        - Storage rejects a second active booking of the same slot

        Raises:
            ValidationError, DoctorNotFound, SlotUnavailable,
            SlotAlreadyBooked, StorageError
        """
        request.validate(self.required_contact)

        doctor = guard_storage("find_doctor", self.doctor_repo.find_doctor, request.doctor_id)
        if doctor is None:
            logger.warning(
                "Booking rejected: unknown doctor",
                extra={"context": {"doctor_id": request.doctor_id}},
            )
            raise DoctorNotFound(f"Doctor '{request.doctor_id}' not found")

        if not self.availability_service.is_slot_available(
            request.doctor_id, request.date, request.time
        ):
            logger.warning(
                "Booking rejected: slot not available",
                extra={
                    "context": {
                        "doctor_id": request.doctor_id,
                        "date": request.date.isoformat(),
                        "time": request.time,
                    }
                },
            )
            raise SlotUnavailable(
                f"{request.time} on {request.date.isoformat()} is not available"
            )

        appointment = DomainAppointment(
            doctor_id=request.doctor_id,
            date=request.date,
            time=request.time,
            patient_name=request.patient_name,
            email=request.email or None,
            phone=request.phone or None,
            notes=request.notes or None,
            customer_id=request.customer_id or None,
            status=self.initial_status,
        )

        # SlotAlreadyBooked from the unique index propagates unchanged
        created = guard_storage("insert", self.appointment_repo.insert, appointment)
        response = AppointmentResponse.from_domain(created)

        logger.info(
            "Appointment created",
            extra={
                "context": {
                    "appointment_id": created.id,
                    "doctor_id": created.doctor_id,
                    "date": created.date.isoformat(),
                    "time": created.time,
                    "status": response.status,
                }
            },
        )

        if self.notifier is not None:
            payload = response.to_dict()
            payload["doctorName"] = doctor.name
            self.notifier.notify(APPOINTMENT_CREATED_EVENT, payload)

        return response

    def update_appointment_status(
        self, appointment_id, new_status
    ) -> AppointmentResponse:
        """Move an appointment to a new status.

        Business Rules:
        - Unknown ids raise AppointmentNotFound
        - Values outside the status enum raise ValidationError
        - Setting the current status again is a no-op
        - With enforcement on, only forward transitions are accepted and
          COMPLETED / CANCELLED / NO_SHOW are terminal
        """
        request = AppointmentStatusUpdateRequest(
            appointment_id=appointment_id, status=new_status
        )
        request.validate()

        current = guard_storage(
            "get_by_id", self.appointment_repo.get_by_id, request.appointment_id
        )
        if current is None:
            raise AppointmentNotFound(f"Appointment {request.appointment_id} not found")

        if current.status == request.status:
            return AppointmentResponse.from_domain(current)

        if (
            self.enforce_transitions
            and request.status not in ALLOWED_TRANSITIONS[current.status]
        ):
            logger.warning(
                "Status transition rejected",
                extra={
                    "context": {
                        "appointment_id": current.id,
                        "from": current.status.value,
                        "to": request.status.value,
                    }
                },
            )
            raise InvalidStatusTransition(
                f"Cannot change status from {current.status.value} to {request.status.value}"
            )

        updated = guard_storage(
            "update_status",
            self.appointment_repo.update_status,
            request.appointment_id,
            request.status,
        )
        if updated is None:
            raise AppointmentNotFound(f"Appointment {request.appointment_id} not found")

        logger.info(
            "Appointment status updated",
            extra={
                "context": {
                    "appointment_id": updated.id,
                    "from": current.status.value,
                    "to": updated.status.value,
                }
            },
        )
        return AppointmentResponse.from_domain(updated)

    def get_appointment(self, appointment_id: int) -> AppointmentResponse:
        appointment = guard_storage(
            "get_by_id", self.appointment_repo.get_by_id, appointment_id
        )
        if appointment is None:
            raise AppointmentNotFound(f"Appointment {appointment_id} not found")
        return AppointmentResponse.from_domain(appointment)

    def list_appointments(
        self,
        doctor_id: str,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> List[AppointmentResponse]:
        """Get a doctor's appointments within an inclusive date range."""
        self.availability_service.ensure_doctor_exists(doctor_id)
        appointments = guard_storage(
            "list_by_doctor",
            self.appointment_repo.list_by_doctor,
            doctor_id,
            start_date,
            end_date,
        )
        return [AppointmentResponse.from_domain(apt) for apt in appointments]
