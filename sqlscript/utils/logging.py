"""Logging for sqlscript.

Loggers live under the ``sqlscript`` namespace. While a script is replayed the
runner stores the script name in :data:`correlation_id_var`, and every record
logged meanwhile carries it as ``correlation_id``. Records may attach an
``extra_fields`` mapping (script path, statement index, statement count) which
the structured formatter merges into its JSON output.
"""

from __future__ import annotations

import logging
import sys
from contextvars import ContextVar
from typing import TYPE_CHECKING, Any

from sqlscript._serialization import encode_json

if TYPE_CHECKING:
    from logging import LogRecord

__all__ = ("CorrelationIDFilter", "StructuredFormatter", "configure_logging", "correlation_id_var", "get_logger")

correlation_id_var: ContextVar[str | None] = ContextVar("correlation_id", default=None)

SIMPLE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class CorrelationIDFilter(logging.Filter):
    """Stamps records with the name of the script being replayed."""

    def filter(self, record: LogRecord) -> bool:
        record.correlation_id = correlation_id_var.get()  # type: ignore[attr-defined]
        return True


class StructuredFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        correlation_id = getattr(record, "correlation_id", None) or correlation_id_var.get()
        if correlation_id:
            entry["correlation_id"] = correlation_id
        entry.update(getattr(record, "extra_fields", {}))
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return encode_json(entry)


def get_logger(name: str | None = None) -> logging.Logger:
    """Get a logger under the ``sqlscript`` namespace.

    Args:
        name: Logger name, e.g. ``"splitter"``. If not provided, returns the root sqlscript logger.

    Returns:
        Logger with a :class:`CorrelationIDFilter` attached.
    """
    if name is None:
        return logging.getLogger("sqlscript")

    if not name.startswith("sqlscript"):
        name = f"sqlscript.{name}"

    logger = logging.getLogger(name)
    if not any(isinstance(f, CorrelationIDFilter) for f in logger.filters):
        logger.addFilter(CorrelationIDFilter())
    return logger


def configure_logging(level: str = "INFO", format_style: str = "structured") -> None:
    """Send sqlscript logs to stderr.

    The command line calls this; library code never does. Records go to stderr so
    stdout carries only extracted statements.

    Args:
        level: Logging level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        format_style: ``"structured"`` for JSON lines, ``"simple"`` for plain text.
    """
    root_logger = logging.getLogger("sqlscript")
    root_logger.setLevel(getattr(logging, level.upper()))
    for handler in root_logger.handlers:
        handler.close()
    root_logger.handlers.clear()

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(StructuredFormatter() if format_style == "structured" else logging.Formatter(SIMPLE_FORMAT))
    root_logger.addHandler(handler)
    root_logger.propagate = False
