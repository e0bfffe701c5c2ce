"""Logging utilities for the field builder.

Provides a structured JSON logging option alongside the console format.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional

__all__ = [
    "setup_logging",
    "JSONFormatter",
]

_RESERVED_ATTRS = frozenset(
    logging.LogRecord("", 0, "", 0, "", (), None).__dict__
) | {"message", "asctime"}


class JSONFormatter(logging.Formatter):
    """Formatter that outputs log records as one JSON object per line.

    A record logged with ``extra={"error": err.to_dict()}`` for a
    ``FieldConfigError`` has the failing field and error type lifted to the
    top level, so log searches can filter on ``field_id``.

    Example output:
        {"timestamp": "2025-01-15T10:30:00.123Z", "level": "DEBUG",
         "logger": "designfields", "message": "Command add-option rejected",
         "error_type": "InvalidInputError", "field_id": "field_color_1718000000000",
         "error": {...}}
    """

    def format(self, record: logging.LogRecord) -> str:
        """Format a log record as JSON."""
        log_data: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        error = getattr(record, "error", None)
        if isinstance(error, dict):
            log_data["error_type"] = error.get("error_type")
            if error.get("field_id"):
                log_data["field_id"] = error["field_id"]
            log_data["error"] = error

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        # Any other attributes set via extra=
        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS and key != "error":
                log_data.setdefault(key, value)

        return json.dumps(log_data, default=str)


def setup_logging(
    verbose: bool = False,
    json_format: bool = False,
    log_file: Optional[str] = None,
    level: Optional[str] = None,
) -> None:
    """Configure logging for the command line tool.

    Args:
        verbose: Enable debug-level logging (overrides ``level``)
        json_format: Use JSON output format
        log_file: Optional file path to write logs to
        level: Level name used when not verbose, INFO by default
    """
    if verbose:
        resolved = logging.DEBUG
    else:
        resolved = logging.getLevelName((level or "INFO").upper())
        if not isinstance(resolved, int):
            resolved = logging.INFO

    if json_format:
        formatter: logging.Formatter = JSONFormatter()
    else:
        formatter = logging.Formatter(
            "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    root_logger = logging.getLogger()
    root_logger.setLevel(resolved)

    # Remove existing handlers to avoid duplicates
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    # Logs go to stderr so command output on stdout stays parseable
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(resolved)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(resolved)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)
