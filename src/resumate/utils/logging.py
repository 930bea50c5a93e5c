from __future__ import annotations

import json
import logging
import logging.config
from datetime import datetime, timezone
from typing import Any

from resumate.settings import get_settings


# Request-scoped fields callers attach with ``extra=``.
CONTEXT_FIELDS = ("user_id", "resource", "resource_id")


def log_context(user_id: str, resource: str | None = None, resource_id: str | None = None) -> dict[str, Any]:
    """Build the ``extra`` mapping for a log call about one user's record."""
    return {"user_id": user_id, "resource": resource, "resource_id": resource_id}


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        """Render a log record as a single JSON line.

        Args:
            record: The record to format.

        Returns:
            JSON string.
        """
        payload: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for field in CONTEXT_FIELDS:
            value = getattr(record, field, None)
            if value is not None:
                payload[field] = value
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


def configure_logging() -> None:
    """Configure root logging from settings."""
    settings = get_settings()
    formatter = "json" if settings.log_json else "standard"

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "standard": {
                    "format": "%(asctime)s %(levelname)s %(name)s %(message)s",
                },
                "json": {
                    "()": "resumate.utils.logging.JsonFormatter",
                },
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": formatter,
                }
            },
            "root": {
                "handlers": ["console"],
                "level": settings.log_level.upper(),
            },
            "loggers": {
                "uvicorn.access": {"level": "WARNING"},
            },
        }
    )
