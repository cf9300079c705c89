"""
Common validation utilities for the clinic booking controllers and DTOs.

This module provides consistent validation patterns for request payloads
and schedule data, ensuring data integrity and proper error reporting.
"""

import logging
import re
from typing import Any, List, Optional

from clinic_booking.core.exceptions import ValidationError

logger = logging.getLogger(__name__)

# 24-hour wall clock, hour may be one digit ("9:05" is accepted)
TIME_PATTERN = re.compile(r"^([0-1]?[0-9]|2[0-3]):([0-5][0-9])$")
EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
MINUTES_PER_DAY = 24 * 60


def parse_hhmm(value: str) -> int:
    """
    Convert an "HH:MM" string into minutes since midnight.

    Raises:
        ValueError: if the value is not a valid 24-hour time
    """
    if not isinstance(value, str):
        raise ValueError(f"Invalid time value: {value!r}")
    match = TIME_PATTERN.match(value.strip())
    if not match:
        raise ValueError(f"Invalid time format '{value}' - must be HH:MM")
    return int(match.group(1)) * 60 + int(match.group(2))


def format_hhmm(minutes: int) -> str:
    """Format minutes since midnight as zero-padded "HH:MM"."""
    if minutes < 0 or minutes >= MINUTES_PER_DAY:
        raise ValueError(f"Minutes out of range for a day: {minutes}")
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def normalize_hhmm(value: str) -> str:
    """Return the canonical zero-padded form of a valid time ("9:05" -> "09:05")."""
    return format_hhmm(parse_hhmm(value))


def is_valid_time(value: Any) -> bool:
    return isinstance(value, str) and bool(TIME_PATTERN.match(value.strip()))


def is_valid_email(value: Any) -> bool:
    return isinstance(value, str) and bool(EMAIL_PATTERN.match(value.strip()))


def phone_digit_count(value: Any) -> int:
    if not isinstance(value, str):
        return 0
    return sum(1 for ch in value if ch.isdigit())


def is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and value.strip() == "")


class ValidationResult:
    """Container for validation results."""

    def __init__(self):
        self.errors: List[str] = []
        self.is_valid: bool = True

    def add_error(self, message: str, field: Optional[str] = None):
        """Add validation error."""
        error_msg = f"{field}: {message}" if field else message
        self.errors.append(error_msg)
        self.is_valid = False
        logger.debug(f"Validation error: {error_msg}")

    def require(self, value: Any, field: str) -> bool:
        """Record an error when a required field is missing or blank."""
        if is_blank(value):
            self.add_error("is required", field)
            return False
        return True

    def raise_if_invalid(self, message: str = "Invalid request data") -> None:
        if not self.is_valid:
            raise ValidationError(message, errors=self.errors)
