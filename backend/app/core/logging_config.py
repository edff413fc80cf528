# backend/app/core/logging_config.py
"""Logging setup: one stdout handler, text or json lines."""
import json
import logging
import logging.config
from typing import Any, Dict

from backend.app.core.config import Settings


class JsonFormatter(logging.Formatter):
    """One JSON object per line; quotes and newlines in messages are escaped."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "time": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


def setup_logging(settings: Settings) -> None:
    level = settings.LOG_LEVEL.upper()
    formatter = settings.LOG_FORMAT if settings.LOG_FORMAT in ("text", "json") else "text"

    config: Dict[str, Any] = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "text": {
                "format": "%(asctime)s [%(levelname)s] %(name)s - %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
            "json": {
                "()": JsonFormatter,
                "datefmt": "%Y-%m-%dT%H:%M:%S",
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "stream": "ext://sys.stdout",
                "formatter": formatter,
            },
        },
        "root": {
            "level": level,
            "handlers": ["console"],
        },
        "loggers": {
            "backend": {"level": level},
            "uvicorn": {"level": level},
            # SQL statements may carry encrypted blobs as parameters
            "sqlalchemy.engine": {"level": "WARNING"},
        },
    }

    logging.config.dictConfig(config)
