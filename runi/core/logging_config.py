"""
Structured logging configuration.

- console: human-readable lines for development
- json: one JSON object per line on stdout, for log aggregation

Controlled by settings.LOG_FORMAT and settings.LOG_LEVEL.
"""
from __future__ import annotations

import json
import logging
import logging.config
from datetime import datetime, timezone

from runi.core.config import Settings

_STANDARD_ATTRS = {
    "name", "msg", "args", "levelname", "levelno", "pathname",
    "filename", "module", "lineno", "funcName", "created",
    "msecs", "relativeCreated", "thread", "threadName",
    "processName", "process", "exc_info", "exc_text", "stack_info",
    "message", "taskName",
}


def get_logging_config(*, log_level: str, log_format: str) -> dict:
    level = (log_level or "INFO").upper()

    if log_format == "json":
        formatters = {"json": {"()": "runi.core.logging_config.JsonFormatter"}}
        formatter = "json"
    else:
        formatters = {
            "verbose": {
                "format": "[{asctime}] {levelname} {name} {message}",
                "style": "{",
            },
        }
        formatter = "verbose"

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": formatters,
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": formatter,
                "stream": "ext://sys.stdout",
            },
        },
        "loggers": {
            "": {"handlers": ["console"], "level": level},
            "runi": {"handlers": ["console"], "level": level, "propagate": False},
            "uvicorn.access": {"handlers": ["console"], "level": "WARNING", "propagate": False},
            "sqlalchemy.engine": {"handlers": ["console"], "level": "WARNING", "propagate": False},
        },
    }


def configure_logging(settings: Settings) -> None:
    logging.config.dictConfig(
        get_logging_config(log_level=settings.LOG_LEVEL, log_format=settings.LOG_FORMAT)
    )


class JsonFormatter(logging.Formatter):
    """
    JSON log formatter.

    Fields: timestamp, level, logger, message, plus "extra" for anything
    passed through logger.*(..., extra={...}).
    """

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        extras = {}
        for key, value in record.__dict__.items():
            if key in _STANDARD_ATTRS:
                continue
            try:
                json.dumps(value)
                extras[key] = value
            except (TypeError, ValueError):
                extras[key] = str(value)

        if extras:
            log_entry["extra"] = extras

        return json.dumps(log_entry, default=str)
