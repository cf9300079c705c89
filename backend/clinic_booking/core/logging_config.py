"""
Logging setup for the clinic booking backend.

Console output is coloured for development (JSON in production); files are
always JSON so they can be shipped to a log collector. Every record may carry
``extra={"context": {...}}`` which the JSON formatter emits as-is:

    logger = logging.getLogger(__name__)
    logger.info("Slots computed", extra={"context": {"doctor_id": "dr-1"}})
"""

import json
import logging
import logging.handlers
import sys
import time
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from flask import Flask, g, request
from sqlalchemy import event
from sqlalchemy.engine import Engine

LOG_FILE = "clinic_booking.log"
ERROR_LOG_FILE = "clinic_booking_errors.log"
MAX_LOG_BYTES = 10 * 1024 * 1024
LOG_BACKUPS = 5

# Requests slower than this are logged at WARNING instead of INFO.
SLOW_REQUEST_MS = 1000.0


class JSONFormatter(logging.Formatter):
    """One JSON object per line: timestamp, level, logger, message, context."""

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "location": f"{record.module}.{record.funcName}:{record.lineno}",
        }
        context = getattr(record, "context", None)
        if context:
            payload["context"] = context
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


class ConsoleFormatter(logging.Formatter):
    """Colours the level name; the record itself is left untouched."""

    LEVEL_COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        plain = record.levelname
        color = self.LEVEL_COLORS.get(plain, "")
        record.levelname = f"{color}{plain:8}{self.RESET}" if color else plain
        try:
            return super().format(record)
        finally:
            record.levelname = plain


def _resolve_level(log_level: Union[int, str]) -> int:
    if isinstance(log_level, int):
        return log_level
    return getattr(logging, str(log_level).upper(), logging.INFO)


def _console_handler(level: int, use_json_format: bool) -> logging.Handler:
    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    if use_json_format:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(
            ConsoleFormatter(
                "%(asctime)s | %(levelname)s | %(name)s | %(message)s",
                datefmt="%H:%M:%S",
            )
        )
    return handler


def _file_handlers(log_dir: Path, level: int) -> List[logging.Handler]:
    """Main log plus an errors-only log, both rotated. Raises OSError."""
    log_dir.mkdir(parents=True, exist_ok=True)
    handlers: List[logging.Handler] = []
    for filename, handler_level in ((LOG_FILE, level), (ERROR_LOG_FILE, logging.ERROR)):
        handler = logging.handlers.RotatingFileHandler(
            log_dir / filename,
            maxBytes=MAX_LOG_BYTES,
            backupCount=LOG_BACKUPS,
            encoding="utf-8",
        )
        handler.setLevel(handler_level)
        handler.setFormatter(JSONFormatter())
        handlers.append(handler)
    return handlers


def setup_logging(
    app: Optional[Flask] = None,
    log_level: Union[int, str] = "INFO",
    enable_sql_echo: bool = False,
    log_to_file: bool = True,
    use_json_format: bool = False,
    log_dir: Optional[Path] = None,
) -> None:
    """
    Configure the root logger. Safe to call more than once: previous
    handlers are closed and replaced.

    Args:
        app: when given, request/response logging hooks are installed on it
        log_level: level name or number
        enable_sql_echo: log every SQL statement with its duration
        log_to_file: also write JSON logs under ``log_dir``
        use_json_format: JSON on the console as well
        log_dir: defaults to ``backend/logs``
    """
    level = _resolve_level(log_level)
    root = logging.getLogger()
    root.setLevel(level)
    for old in list(root.handlers):
        root.removeHandler(old)
        old.close()

    root.addHandler(_console_handler(level, use_json_format))

    logger = logging.getLogger("clinic_booking")
    if log_to_file:
        target = log_dir or Path(__file__).resolve().parents[2] / "logs"
        try:
            for handler in _file_handlers(target, level):
                root.addHandler(handler)
        except OSError as exc:
            log_to_file = False
            logger.warning(
                "File logging unavailable, using console only",
                extra={"context": {"log_dir": str(target), "error": str(exc)}},
            )

    if enable_sql_echo:
        _register_sql_timing()
    if app is not None:
        _register_request_logging(app)

    for noisy in ("werkzeug", "urllib3"):
        logging.getLogger(noisy).setLevel(logging.WARNING)

    logger.info(
        "Logging configured",
        extra={
            "context": {
                "level": logging.getLevelName(level),
                "sql_echo": enable_sql_echo,
                "log_to_file": log_to_file,
                "json": use_json_format,
            }
        },
    )


def _register_sql_timing() -> None:
    if getattr(_register_sql_timing, "_registered", False):
        return
    sql_logger = logging.getLogger("clinic_booking.sql")

    @event.listens_for(Engine, "before_cursor_execute")
    def _start_timer(conn, cursor, statement, parameters, context, executemany):
        conn.info.setdefault("query_start_time", []).append(time.perf_counter())

    @event.listens_for(Engine, "after_cursor_execute")
    def _log_query(conn, cursor, statement, parameters, context, executemany):
        elapsed_ms = (time.perf_counter() - conn.info["query_start_time"].pop()) * 1000
        sql_logger.debug(
            "SQL %.2fms",
            elapsed_ms,
            extra={"context": {"statement": statement[:500], "duration_ms": round(elapsed_ms, 2)}},
        )

    _register_sql_timing._registered = True  # type: ignore[attr-defined]


def _register_request_logging(app: Flask) -> None:
    access_logger = logging.getLogger("clinic_booking.http")

    @app.before_request
    def _start_request():
        g.request_started = time.perf_counter()
        g.request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex[:12]

    @app.after_request
    def _log_response(response):
        started = g.get("request_started")
        if started is None:
            return response
        duration_ms = (time.perf_counter() - started) * 1000
        context = {
            "request_id": g.get("request_id"),
            "method": request.method,
            "path": request.path,
            "status_code": response.status_code,
            "duration_ms": round(duration_ms, 2),
        }
        doctor_id = request.args.get("doctorId")
        if doctor_id:
            context["doctor_id"] = doctor_id
        level = logging.WARNING if duration_ms >= SLOW_REQUEST_MS else logging.INFO
        access_logger.log(
            level,
            "%s %s %s",
            request.method,
            request.path,
            response.status_code,
            extra={"context": context},
        )
        response.headers["X-Request-ID"] = context["request_id"]
        return response
