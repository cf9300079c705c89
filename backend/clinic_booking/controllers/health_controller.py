"""
Health controller - health check endpoint for monitoring.
"""

import logging

from flask import Blueprint, jsonify
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from clinic_booking.db.session import SessionLocal

logger = logging.getLogger(__name__)

health_bp = Blueprint("health", __name__, url_prefix="/health")


@health_bp.route("", methods=["GET"])
def health_check():
    """
    Report service and database status.

    Status codes:
        200: database reachable
        503: database unreachable
    """
    db = SessionLocal()
    try:
        db.execute(text("SELECT 1"))
        return jsonify({"status": "healthy", "database": "ok"}), 200
    except SQLAlchemyError as e:
        logger.error(
            "Health check: database unreachable",
            extra={"context": {"endpoint": "/health", "error": str(e)}},
            exc_info=True,
        )
        return jsonify({"status": "unhealthy", "database": "error"}), 503
    finally:
        db.close()
