from __future__ import annotations

import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any

from opentelemetry import trace

from rrs.api.middleware.request_id import get_request_id

# Attributes passed through ``extra=`` that make it into the JSON line.
CONTEXT_FIELDS = frozenset(
    {
        "method",
        "path",
        "status_code",
        "duration_ms",
        "reservation_id",
        "table_id",
        "waitlist_id",
        "status",
        "position",
        "channel",
        "receivers",
        "error_type",
        "error_code",
    }
)

_QUIET_LOGGERS = ("uvicorn.access", "sqlalchemy.engine")


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        line: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "request_id": get_request_id(),
        }

        span_context = trace.get_current_span().get_span_context()
        if span_context.is_valid:
            line["trace_id"] = format(span_context.trace_id, "032x")
            line["span_id"] = format(span_context.span_id, "016x")

        line.update(
            (name, value)
            for name, value in vars(record).items()
            if name in CONTEXT_FIELDS and value is not None
        )

        if record.exc_info:
            line["exception"] = self.formatException(record.exc_info)
        return json.dumps(line, default=str)


def _has_json_handler(logger: logging.Logger) -> bool:
    return any(isinstance(handler.formatter, JsonFormatter) for handler in logger.handlers)


def configure_logging() -> None:
    """Route every logger through one JSON stdout handler at ``LOG_LEVEL``."""
    root_logger = logging.getLogger()
    if _has_json_handler(root_logger):
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JsonFormatter())
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(os.getenv("LOG_LEVEL", "INFO").upper())

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
