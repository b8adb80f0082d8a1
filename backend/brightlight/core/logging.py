"""Process-wide logging setup."""
from __future__ import annotations

import logging
from logging.config import dictConfig
from typing import Any, Dict

from brightlight.core.context import get_request_id

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | rid=%(request_id)s | %(message)s"

# HTTP clients that log every exchange at INFO.
QUIET_LOGGERS = ("httpx", "httpcore", "openai")

_configured = False


class RequestIdFilter(logging.Filter):
    """Stamp each record with the id of the request being served, or "-" outside one."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = get_request_id() or "-"
        return True


def build_logging_config(log_level: str) -> Dict[str, Any]:
    level = log_level.upper()
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {"brightlight": {"format": LOG_FORMAT}},
        "filters": {"request_id": {"()": RequestIdFilter}},
        "handlers": {
            "stderr": {
                "class": "logging.StreamHandler",
                "formatter": "brightlight",
                "filters": ["request_id"],
                "level": level,
            }
        },
        "loggers": {name: {"level": "WARNING"} for name in QUIET_LOGGERS},
        "root": {"handlers": ["stderr"], "level": level},
    }


def configure_logging(*, log_level: str = "INFO") -> None:
    """Apply build_logging_config once; repeated calls (module reloads, alembic) are ignored."""
    global _configured
    if _configured:
        return
    dictConfig(build_logging_config(log_level))
    _configured = True
    logging.getLogger(__name__).debug("Logging configured at %s", log_level)
