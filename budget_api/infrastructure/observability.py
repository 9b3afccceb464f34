"""Structured Logging — one JSON object per line for the budget API.

Log shape:
    - Always: timestamp (UTC ISO-8601), level, logger, message
    - Row and request context when present: project_id, currency, error_code, path
    - Exchange-rate retries: attempt (1-based)
    - Conversion batch summary: matched, converted, failed
    - exception carries the formatted traceback when exc_info is set

Design Decisions:
    - JSONFormatter on stdlib logging: one line per record for log shippers
    - log_format other than "json" falls back to a plain text line for local runs
    - setup_logging called once on startup via lifespan
"""

import logging
import json
from datetime import datetime, timezone

_EXTRA_FIELDS = (
    "project_id", "currency", "error_code", "path", "attempt",
    "matched", "converted", "failed",
)


class JSONFormatter(logging.Formatter):
    """Format logs as JSON for structured logging in production."""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in _EXTRA_FIELDS:
            val = record.__dict__.get(key)
            if val is not None:
                log[key] = val
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False)


def setup_logging(level: str = "INFO", fmt: str = "json"):
    """Configure logging for the application."""
    handler = logging.StreamHandler()
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s — %(message)s",
        ))
    logging.root.addHandler(handler)
    logging.root.setLevel(getattr(logging, level.upper(), logging.INFO))
