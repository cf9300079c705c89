"""
Common API utilities for consistent response formatting across all controllers.
"""

import logging
from datetime import date, datetime
from typing import Any, Optional

from flask import jsonify
from werkzeug.exceptions import HTTPException

from clinic_booking.core.exceptions import (
    BookingError,
    InvalidScheduleConfig,
    ValidationError,
)
from clinic_booking.schemas.dtos import ErrorResponse

logger = logging.getLogger(__name__)


def api_response(
    success: bool,
    message: str,
    data: Optional[Any] = None,
    status_code: int = 200,
    **fields: Any,
) -> tuple:
    """
    Standardized API response format for all endpoints.

    Args:
        success: Whether the operation was successful
        message: Human-readable message about the operation
        data: Optional data payload
        status_code: HTTP status code
        **fields: Extra top-level keys (e.g. "slots") kept for API clients

    Returns:
        Tuple of (json_response, status_code)
    """
    response = {"success": success, "message": message}

    if data is not None:
        response["data"] = data
    response.update(fields)

    return jsonify(response), status_code


def error_response(error: ErrorResponse, status_code: int) -> tuple:
    body = {"success": False, "error": error.error, "message": error.message}
    if error.details:
        body["details"] = error.details
    return jsonify(body), status_code


def handle_booking_error(exc: BookingError) -> tuple:
    """Blueprint error handler mapping the typed taxonomy onto HTTP."""
    if isinstance(exc, (ValidationError, InvalidScheduleConfig)):
        details = {"errors": exc.errors} if isinstance(exc, ValidationError) else None
        error = ErrorResponse(error=exc.code, message=exc.message, details=details)
    else:
        error = ErrorResponse(error=exc.code, message=exc.message)

    if exc.http_status >= 500:
        logger.error(
            "Request failed with internal booking error",
            extra={"context": {"code": exc.code, "error": exc.message}},
        )
    return error_response(error, exc.http_status)


def handle_unexpected_error(exc: Exception):
    """Last-resort handler: log with traceback and answer 500 without details."""
    if isinstance(exc, HTTPException):
        return exc
    logger.error(
        "Unhandled error while processing request",
        extra={"context": {"error": str(exc), "type": type(exc).__name__}},
        exc_info=True,
    )
    return error_response(ErrorResponse.server_error(), 500)


def parse_iso_date(value: Optional[str], field_name: str) -> date:
    """Parse a YYYY-MM-DD query/body value or raise ValidationError."""
    if not value:
        raise ValidationError(errors=[f"{field_name}: is required"])
    try:
        return datetime.strptime(value[:10], "%Y-%m-%d").date()
    except ValueError:
        raise ValidationError(
            errors=[f"{field_name}: must be a date in YYYY-MM-DD format"]
        )
