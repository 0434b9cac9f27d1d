"""Logging configuration for the landed-cost engine."""
from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone

from settings import SETTINGS


class JSONFormatter(logging.Formatter):
    """One JSON object per log line."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        if hasattr(record, "estimate_ref"):
            entry["estimate_ref"] = record.estimate_ref
        return json.dumps(entry)


def setup_logging(level: str | None = None, json_output: bool | None = None) -> logging.Logger:
    level = (level or SETTINGS.log_level).upper()
    json_output = SETTINGS.log_json if json_output is None else json_output

    root = logging.getLogger()
    root.setLevel(getattr(logging, level, logging.INFO))

    handler = logging.StreamHandler(sys.stdout)
    if json_output:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s [%(name)s] %(levelname)s: %(message)s"))
    root.handlers = [handler]
    return root
