"""
Centralized configuration module for application-wide settings.

This module provides centralized configuration for clinic timezone handling,
booking policies and cache tuning, ensuring consistency across the
availability and appointment services.
"""

import logging
import os
from zoneinfo import ZoneInfo

logger = logging.getLogger(__name__)

# ===========================
# Timezone Configuration
# ===========================


def get_clinic_timezone() -> ZoneInfo:
    """
    Get the clinic timezone from environment variable.

    Returns:
        ZoneInfo: Clinic timezone (defaults to UTC if not configured)

    Environment Variables:
        CLINIC_TZ: Timezone identifier (e.g., 'Asia/Kolkata', 'UTC')
            Default: 'UTC' (safe fallback)

    All schedule times ("HH:MM") are wall-clock times in this timezone.
    """
    tz_name = os.getenv("CLINIC_TZ", "UTC")

    try:
        return ZoneInfo(tz_name)
    except Exception as e:
        logger.warning(
            f"Invalid timezone '{tz_name}' specified in CLINIC_TZ environment variable. "
            f"Falling back to UTC. Error: {e}"
        )
        return ZoneInfo("UTC")


# Global timezone instance - initialized once at import time
CLINIC_TZ = get_clinic_timezone()


def log_timezone_config():
    """Log the active clinic timezone at startup."""
    logger.info(
        "Timezone configuration initialized",
        extra={
            "context": {
                "timezone": str(CLINIC_TZ),
                "tz_env_var": os.getenv("CLINIC_TZ", "UTC"),
            }
        },
    )


# ===========================
# Availability Configuration
# ===========================


def _get_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except (TypeError, ValueError):
        logger.warning(
            f"Invalid integer '{raw}' for {name}; using default {default}"
        )
        return default


def _get_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("true", "1", "yes")


def get_special_date_cache_ttl() -> int:
    """
    Seconds a special-date lookup stays cached inside an AvailabilityService.

    Environment Variables:
        SPECIAL_DATE_CACHE_TTL: Default 300 (5 minutes). 0 disables caching.
    """
    return max(0, _get_int("SPECIAL_DATE_CACHE_TTL", 300))


SPECIAL_DATE_CACHE_TTL = get_special_date_cache_ttl()


def get_disabled_dates_range_days() -> int:
    """
    Number of days ahead scanned when listing a doctor's disabled dates.

    Environment Variables:
        DISABLED_DATES_RANGE_DAYS: Default 60.
    """
    return max(1, _get_int("DISABLED_DATES_RANGE_DAYS", 60))


DISABLED_DATES_RANGE_DAYS = get_disabled_dates_range_days()


# ===========================
# Booking Policy Configuration
# ===========================

REQUIRED_CONTACT_POLICIES = ("email", "phone", "both", "either", "none")


def get_required_contact_policy() -> str:
    """
    Which patient contact fields a booking request must carry.

    Environment Variables:
        APPOINTMENT_REQUIRED_CONTACT: one of email, phone, both, either, none
            Default: 'either'
    """
    policy = os.getenv("APPOINTMENT_REQUIRED_CONTACT", "either").strip().lower()
    if policy not in REQUIRED_CONTACT_POLICIES:
        logger.warning(
            f"Unknown APPOINTMENT_REQUIRED_CONTACT '{policy}'; falling back to 'either'"
        )
        return "either"
    return policy


APPOINTMENT_REQUIRED_CONTACT = get_required_contact_policy()


def get_initial_appointment_status() -> str:
    """
    Status given to freshly created appointments.

    Environment Variables:
        APPOINTMENT_INITIAL_STATUS: SCHEDULED (default) or CONFIRMED
    """
    status = os.getenv("APPOINTMENT_INITIAL_STATUS", "SCHEDULED").strip().upper()
    if status not in ("SCHEDULED", "CONFIRMED"):
        logger.warning(
            f"Unsupported APPOINTMENT_INITIAL_STATUS '{status}'; using SCHEDULED"
        )
        return "SCHEDULED"
    return status


APPOINTMENT_INITIAL_STATUS = get_initial_appointment_status()

# Truthy values: "true", "1", "yes" (case-insensitive)
ENFORCE_STATUS_TRANSITIONS = _get_bool("ENFORCE_STATUS_TRANSITIONS", True)


# ===========================
# Notification Configuration
# ===========================


def get_webhook_url() -> str | None:
    """
    Target for ``appointment.created`` notifications.

    Environment Variables:
        WEBHOOK_URL: http(s) URL. Notifications are disabled when unset.
    """
    url = os.getenv("WEBHOOK_URL", "").strip()
    return url or None


WEBHOOK_URL = get_webhook_url()


def log_booking_config():
    """
    Log the active booking configuration.

    Should be called during application startup to provide visibility
    into the booking policies (without exposing the webhook URL).
    """
    logger.info(
        "Booking configuration initialized",
        extra={
            "context": {
                "required_contact": APPOINTMENT_REQUIRED_CONTACT,
                "initial_status": APPOINTMENT_INITIAL_STATUS,
                "enforce_status_transitions": ENFORCE_STATUS_TRANSITIONS,
                "special_date_cache_ttl": SPECIAL_DATE_CACHE_TTL,
                "webhook_configured": WEBHOOK_URL is not None,
            }
        },
    )
