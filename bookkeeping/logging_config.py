"""
Logging configuration.

Development gets human-readable console lines. Anything else
gets JSON lines on stdout, one object per record, so log
aggregators can index the extra fields the services attach
(transaction_id, account codes, totals).
"""

import json
import logging
import logging.config
from datetime import datetime, timezone

from bookkeeping.config import get_settings

# Attributes every LogRecord carries; anything else came in via extra=
_STANDARD_ATTRS = {
    "name", "msg", "args", "levelname", "levelno", "pathname",
    "filename", "module", "lineno", "funcName", "created",
    "msecs", "relativeCreated", "thread", "threadName",
    "processName", "process", "exc_info", "exc_text", "stack_info",
    "message", "taskName",
}


class JsonFormatter(logging.Formatter):
    """Render a log record as a single JSON line."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        extras = {
            key: value for key, value in record.__dict__.items()
            if key not in _STANDARD_ATTRS
        }
        if extras:
            log_entry["extra"] = extras

        # Decimals, dates and enums fall back to str()
        return json.dumps(log_entry, default=str)


def get_logging_config(level: str, log_format: str) -> dict:
    """Build a dictConfig mapping for the given level and format."""
    if log_format == "json":
        formatter = {"()": JsonFormatter}
    else:
        formatter = {
            "format": "[{asctime}] {levelname} {name} {message}",
            "style": "{",
        }

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {"default": formatter},
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "default",
                "stream": "ext://sys.stdout",
            },
        },
        "loggers": {
            "bookkeeping": {
                "handlers": ["console"],
                "level": level.upper(),
                "propagate": False,
            },
        },
    }


def setup_logging(level: str | None = None, log_format: str | None = None) -> None:
    """Configure the application loggers from settings unless overridden."""
    settings = get_settings()
    logging.config.dictConfig(get_logging_config(
        level or settings.LOG_LEVEL,
        log_format or settings.LOG_FORMAT,
    ))
