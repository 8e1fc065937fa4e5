"""
Structured logging for the REST API.

Keyword arguments passed to a log call become the record's context::

    logger.info("Course updated", course_id=12, locales=["en", "fr"])

Production (or LOG_JSON=true) writes one JSON object per line; development
writes colored single lines. Every record carries the request correlation ID
when one is set.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

from shared.config.settings import settings


# Loggers that are chatty at INFO
_QUIET_LOGGERS = {
    "uvicorn.access": logging.WARNING,
    "httpx": logging.WARNING,
    "httpcore": logging.WARNING,
    "sqlalchemy.engine": logging.WARNING,
    "redis": logging.WARNING,
}


def _context(record: logging.LogRecord) -> dict[str, Any]:
    return getattr(record, "extra_data", None) or {}


def _request_id(record: logging.LogRecord) -> str | None:
    request_id = getattr(record, "request_id", None)
    return request_id if request_id and request_id != "-" else None


class StructuredFormatter(logging.Formatter):
    """One JSON object per record, for log aggregation."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        request_id = _request_id(record)
        if request_id:
            entry["request_id"] = request_id
        context = _context(record)
        if context:
            entry["data"] = context
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        if settings.debug:
            entry["source"] = f"{record.pathname}:{record.lineno}"
        return json.dumps(entry, default=str)


class DevelopmentFormatter(logging.Formatter):
    """Colored single-line output: ``12:00:01 INFO [ab12cd34] name: message (k=v)``."""

    COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET = "\033[0m"
    DIM = "\033[2m"

    def format(self, record: logging.LogRecord) -> str:
        color = self.COLORS.get(record.levelname, self.RESET)
        timestamp = datetime.fromtimestamp(record.created).strftime("%H:%M:%S")
        parts = [f"{color}{timestamp} {record.levelname:8}{self.RESET}"]

        request_id = _request_id(record)
        if request_id:
            parts.append(f"{self.DIM}[{request_id[:8]}]{self.RESET}")
        parts.append(f"{record.name}: {record.getMessage()}")

        context = _context(record)
        if context:
            parts.append("(" + ", ".join(f"{k}={v}" for k, v in context.items()) + ")")

        line = " ".join(parts)
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


class StructuredLogger(logging.Logger):
    """
    Logger accepting arbitrary keyword context.

    ``info(msg, **kwargs)`` and friends forward their keyword arguments to
    ``_log``; everything that is not a stdlib logging argument is collected
    into ``record.extra_data``.
    """

    def _log(
        self,
        level: int,
        msg: object,
        args: Any,
        exc_info: Any = None,
        extra: dict[str, Any] | None = None,
        stack_info: bool = False,
        stacklevel: int = 1,
        **context: Any,
    ) -> None:
        extra = dict(extra or {})
        extra["extra_data"] = context or None
        # one extra frame for this override
        super()._log(
            level,
            msg,
            args,
            exc_info=exc_info,
            extra=extra,
            stack_info=stack_info,
            stacklevel=stacklevel + 1,
        )


logging.setLoggerClass(StructuredLogger)


def setup_logging() -> None:
    """
    Configure the root logger. Call once at application startup.
    """
    from shared.infrastructure.correlation import CorrelationIdFilter

    level = logging.DEBUG if settings.debug else logging.getLevelName(settings.log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.addFilter(CorrelationIdFilter())
    if settings.environment == "production" or settings.log_json:
        handler.setFormatter(StructuredFormatter())
    else:
        handler.setFormatter(DevelopmentFormatter())

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()
    root.addHandler(handler)

    for name, quiet_level in _QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(quiet_level)


def get_logger(name: str) -> StructuredLogger:
    """
    Get a structured logger.

    Usage:
        from shared.config.logging import get_logger
        logger = get_logger(__name__)

        logger.info("Course updated", course_id=123, locale="en")
        logger.error("Cache unavailable", key="course:id:1", exc_info=True)
    """
    return logging.getLogger(name)  # type: ignore[return-value]


rest_api_logger = get_logger("rest_api")
