"""Process-wide logging for ByTax.

Calculation logs pass the business and period through ``extra=``; the JSON
formatter lifts those keys into an ``extra`` object so log search can filter
on a single business or calculation.
"""
from __future__ import annotations

import json
import logging
import sys
from typing import Any

from bytax.core.config import settings

CALCULATION_CONTEXT_KEYS = ("business_id", "period_start", "period_end", "calculation_id", "regime")


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:  # pragma: no cover - formatting logic
        payload: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        context = {key: record.__dict__[key] for key in CALCULATION_CONTEXT_KEYS if key in record.__dict__}
        if context:
            payload["extra"] = context
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


def init_logging(level: int | None = None) -> None:
    root = logging.getLogger()
    if root.handlers:
        return
    effective_level = level or getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)
    handler = logging.StreamHandler(sys.stdout)
    if settings.LOG_FORMAT.lower() == "json":
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s | %(levelname)s | %(name)s | %(message)s"))
    root.setLevel(effective_level)
    root.addHandler(handler)
    # SQL echo only when explicitly debugging
    if effective_level > logging.DEBUG:
        logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
