"""
Schemas package - DTOs for request validation and response formatting.
"""

from .dtos import (
    AppointmentCreateRequest,
    AppointmentResponse,
    AppointmentStatusUpdateRequest,
    ErrorResponse,
    SpecialDateCreateRequest,
    WeeklyScheduleUpdateRequest,
)

__all__ = [
    "AppointmentCreateRequest",
    "AppointmentResponse",
    "AppointmentStatusUpdateRequest",
    "ErrorResponse",
    "SpecialDateCreateRequest",
    "WeeklyScheduleUpdateRequest",
]
