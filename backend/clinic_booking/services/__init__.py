"""
Services package - application use-cases.

- slot_generator: pure slot computation
- availability_service: resolves rules/overrides and drives the generator
- appointment_service: booking creation and status lifecycle
- schedule_service: weekly schedule and special date administration
- notification_service: outbound webhook delivery
"""

from .appointment_service import AppointmentService
from .availability_service import AvailabilityService
from .notification_service import WebhookNotifier
from .schedule_service import ScheduleService
from .slot_generator import generate_slots
from .special_date_cache import SpecialDateCache

__all__ = [
    "AppointmentService",
    "AvailabilityService",
    "ScheduleService",
    "SpecialDateCache",
    "WebhookNotifier",
    "generate_slots",
]
