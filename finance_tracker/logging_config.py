"""Structured JSON logging for the finance tracker.

Each line carries the record's own time, its level, the emitting logger and
the service name.  Callers may stamp every line of a run with the filter in
effect (``month``, ``search``) through ``static_fields``; per-call ``extra``
keys such as ``path``, ``records`` or ``section`` pass through unchanged.
"""

from __future__ import annotations

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from pythonjsonlogger import jsonlogger

from .config import LOG_LEVEL

SERVICE_NAME = "finance-tracker"


class TrackerJsonFormatter(jsonlogger.JsonFormatter):
    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.fromtimestamp(record.created, timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["logger"] = record.name
        log_record.setdefault("service", SERVICE_NAME)


def setup_logging(
    level: Optional[str] = None,
    stream=None,
    static_fields: Optional[Dict[str, Any]] = None,
) -> logging.Logger:
    """Configure the root logger to emit JSON lines.

    Existing handlers are replaced so repeated calls (tests, re-runs of the
    summary script) do not duplicate output.
    """
    logger = logging.getLogger()
    logger.setLevel((level or LOG_LEVEL).upper())
    logger.handlers.clear()

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(TrackerJsonFormatter("%(message)s", static_fields=dict(static_fields or {})))
    logger.addHandler(handler)
    return logger
