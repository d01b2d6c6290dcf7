"""Centralized logging configuration."""
from __future__ import annotations

import logging
from logging.config import dictConfig
from typing import Any, Dict

from lifecoach.core.context import get_request_id

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(request_id)s | %(message)s"

# Chatty third-party loggers capped regardless of the app level.
QUIET_LOGGERS = {
    "httpx": "WARNING",
    "apscheduler.executors.default": "WARNING",
    "sqlalchemy.engine": "WARNING",
}


class RequestIdFilter(logging.Filter):
    """Stamp every record with the active request id ("-" outside a request or job)."""

    def filter(self, record: logging.LogRecord) -> bool:  # pragma: no cover - minimal logic
        record.request_id = get_request_id() or "-"
        return True


def build_logging_config(log_level: str = "INFO") -> Dict[str, Any]:
    level = log_level.upper()
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {"default": {"format": LOG_FORMAT}},
        "filters": {"request_id": {"()": RequestIdFilter}},
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "default",
                "level": level,
                "filters": ["request_id"],
            }
        },
        "root": {"handlers": ["console"], "level": level},
        "loggers": {name: {"level": quiet} for name, quiet in QUIET_LOGGERS.items()},
    }


def configure_logging(*, log_level: str = "INFO") -> None:
    """Configure logging once per process (API app or scheduler worker)."""
    if getattr(configure_logging, "_configured", False):
        return

    dictConfig(build_logging_config(log_level))
    logging.getLogger(__name__).debug("Logging configured at %s", log_level)
    setattr(configure_logging, "_configured", True)
