"""
Shared wrapper for repository calls made by application services.

Typed booking errors pass through untouched; anything else coming out of a
repository (SQLAlchemyError, driver errors) is logged with its traceback and
re-raised as StorageError so controllers answer with a clean 500.
"""

import logging

from clinic_booking.core.exceptions import BookingError, StorageError

logger = logging.getLogger(__name__)


def guard_storage(operation: str, fn, *args, **kwargs):
    """Call a repository method, turning unexpected failures into StorageError."""
    try:
        return fn(*args, **kwargs)
    except BookingError:
        raise
    except Exception as e:
        logger.error(
            f"Repository call {operation} failed",
            extra={"context": {"operation": operation, "error": str(e)}},
            exc_info=True,
        )
        raise StorageError(f"{operation} failed") from e
