"""
Diagnostics for bigfind runs.

The report owns stdout, so every diagnostic goes to stderr as one JSON
object per line. Per-entry problems (unreadable directories, vanished or
unreadable entries, future modification times) are logged at WARNING,
which is also the default level. Run start and completion records with
the walk counters are logged at INFO.
"""

import json
import logging
import sys
from typing import Any, Dict, Optional, TextIO


class JsonFormatter(logging.Formatter):
    """Render a record as a single JSON line with its context under ``extra_fields``."""

    def format(self, record: logging.LogRecord) -> str:
        log_obj: Dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "message": record.getMessage(),
            "logger": record.name,
        }

        if record.exc_info:
            log_obj["error"] = self.formatException(record.exc_info)
            log_obj["error_type"] = record.exc_info[0].__name__ if record.exc_info[0] else None

        if hasattr(record, "extra_fields"):
            log_obj["extra_fields"] = record.extra_fields

        # Paths, timestamps and errors in the context are not all JSON types
        return json.dumps(log_obj, default=str)


def setup_logging(
    logger_name: str = "bigfind", level: str = "WARNING", stream: Optional[TextIO] = None
) -> logging.Logger:
    """
    Attach the JSON handler to the bigfind logger and set its level.

    Calling it again only changes the level; the handler installed by the
    first call is kept.

    Args:
        logger_name: Name of the logger
        level: Level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        stream: Where records go (stderr by default)

    Returns:
        The configured logger

    Raises:
        ValueError: If ``level`` is not a logging level name
    """
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        raise ValueError(f"Unknown log level: {level}")

    logger = logging.getLogger(logger_name)
    logger.setLevel(numeric_level)

    if not logger.handlers:
        handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
        handler.setFormatter(JsonFormatter())
        logger.addHandler(handler)

    return logger


def log_with_context(
    logger: logging.Logger,
    level: str,
    message: str,
    extra: Optional[Dict[str, Any]] = None,
    error: Optional[BaseException] = None,
) -> None:
    """
    Log ``message`` with context fields, e.g. the path being processed.

    ``error``, when given, is recorded as ``error`` (its text) and
    ``error_type`` (its class name) next to the other fields.
    """
    fields = dict(extra) if extra else {}
    if error is not None:
        fields["error"] = str(error)
        fields["error_type"] = type(error).__name__

    log_method = getattr(logger, level.lower())
    log_method(message, extra={"extra_fields": fields})
