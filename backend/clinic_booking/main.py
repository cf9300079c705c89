import logging
import os

from dotenv import load_dotenv
from flask import Flask

# Only load from .env when DATABASE_URL is not already defined by the environment
if not os.getenv("DATABASE_URL"):
    load_dotenv()

logger = logging.getLogger(__name__)


def _env_flag(name: str, default: str = "") -> bool:
    return os.getenv(name, default).lower().strip() in ("true", "1", "yes")


def create_app(testing: bool = False) -> Flask:
    """Application factory: logging, rate limiting, shared collaborators,
    blueprints and tables."""
    app = Flask(__name__)

    if testing or _env_flag("TESTING"):
        app.config["TESTING"] = True
    is_production = os.getenv("FLASK_ENV", "development") == "production"

    # Configure structured logging (after app creation so we can register hooks)
    from clinic_booking.core.logging_config import setup_logging

    setup_logging(
        app=app,
        log_level=os.getenv("LOG_LEVEL", "INFO" if is_production else "DEBUG"),
        enable_sql_echo=_env_flag("SQL_ECHO"),
        log_to_file=_env_flag("LOG_TO_FILE", "1") and not app.config.get("TESTING"),
        use_json_format=is_production,
    )

    from clinic_booking.core.config import log_booking_config, log_timezone_config

    log_timezone_config()
    log_booking_config()

    # Rate limiting; RATE_LIMIT_ENABLED=0 turns it off (tests)
    from clinic_booking.core.limiter_config import is_rate_limit_enabled, limiter

    app.config["RATELIMIT_STORAGE_URI"] = os.getenv("LIMITER_STORAGE_URI", "memory://")
    app.config["RATELIMIT_ENABLED"] = is_rate_limit_enabled()
    limiter.init_app(app)
    if not app.config["RATELIMIT_ENABLED"]:
        limiter.enabled = False
        logger.info(
            "Rate limiting disabled", extra={"context": {"testing": app.testing}}
        )

    # App-scoped collaborators shared by every request
    from clinic_booking.controllers.dependencies import (
        NOTIFIER_KEY,
        SPECIAL_DATE_CACHE_KEY,
    )
    from clinic_booking.core import config
    from clinic_booking.services.notification_service import WebhookNotifier
    from clinic_booking.services.special_date_cache import SpecialDateCache

    app.extensions[SPECIAL_DATE_CACHE_KEY] = SpecialDateCache(
        ttl_seconds=config.SPECIAL_DATE_CACHE_TTL
    )
    app.extensions[NOTIFIER_KEY] = (
        WebhookNotifier(config.WEBHOOK_URL) if config.WEBHOOK_URL else None
    )

    from clinic_booking.controllers import (
        appointment_bp,
        availability_bp,
        health_bp,
        schedule_bp,
    )

    app.register_blueprint(availability_bp)
    app.register_blueprint(appointment_bp)
    app.register_blueprint(schedule_bp)
    app.register_blueprint(health_bp)

    # Idempotent on SQLite and PostgreSQL
    from clinic_booking.db.session import create_tables, get_engine

    create_tables()
    logger.info(
        "Database ready",
        extra={"context": {"dialect": get_engine().dialect.name}},
    )

    return app


if __name__ == "__main__":
    create_app().run(
        host=os.getenv("FLASK_HOST", "127.0.0.1"),
        port=int(os.getenv("FLASK_PORT", "5000")),
    )
