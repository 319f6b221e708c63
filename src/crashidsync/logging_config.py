"""Logging setup for the crashidsync command line entry point."""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Optional, TextIO

TEXT_FORMAT: str = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
TEXT_DATEFMT: str = "%Y-%m-%d %H:%M:%S"
VALID_FORMATS: tuple[str, ...] = ("text", "json")


class JSONFormatter(logging.Formatter):
    """One JSON object per line, for log aggregation in scheduled jobs."""

    def format(self, record: logging.LogRecord) -> str:
        data: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            data["exception"] = self.formatException(record.exc_info)
        return json.dumps(data, default=str)


def configure_logging(
    level: str = "INFO",
    format_type: str = "text",
    stream: Optional[TextIO] = None,
) -> None:
    """
    Configure the root logger.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        format_type: "text" for humans, "json" for structured output.
        stream: Destination stream (defaults to stderr).
    """
    if format_type not in VALID_FORMATS:
        raise ValueError(f"format_type must be one of: {', '.join(VALID_FORMATS)}")

    handler = logging.StreamHandler(stream or sys.stderr)
    if format_type == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(TEXT_FORMAT, datefmt=TEXT_DATEFMT))

    root = logging.getLogger()
    for existing in list(root.handlers):
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    # Keep HTTP client chatter out of INFO output.
    logging.getLogger("urllib3").setLevel(logging.WARNING)
