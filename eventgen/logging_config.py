"""
Logging configuration for eventgen commands.

Logs always go to stderr: stdout carries the event stream. The default
level is WARNING so that a normal emitter run writes nothing to stderr
besides its WROTE lines.

Environment Variables:
    EVENTGEN_LOG_LEVEL: Log level (DEBUG, INFO, WARNING, ERROR) - default: WARNING
    EVENTGEN_LOG_FORMAT: Log format (json, text) - default: json

Usage:
    from eventgen.logging_config import setup_logging, get_logger

    setup_logging()
    logger = get_logger(__name__, label="ping")
    logger.info("Emitter started")
"""

import logging
import os
import sys
from typing import Optional

from pythonjsonlogger.json import JsonFormatter


def setup_logging() -> None:
    """
    Configure root logger.

    Reads configuration from environment variables:
    - EVENTGEN_LOG_LEVEL: DEBUG, INFO, WARNING, ERROR (default: WARNING)
    - EVENTGEN_LOG_FORMAT: json, text (default: json)
    """
    log_level = os.getenv("EVENTGEN_LOG_LEVEL", "WARNING").upper()
    log_format = os.getenv("EVENTGEN_LOG_FORMAT", "json").lower()

    level_map = {
        "DEBUG": logging.DEBUG,
        "INFO": logging.INFO,
        "WARNING": logging.WARNING,
        "ERROR": logging.ERROR,
        "CRITICAL": logging.CRITICAL,
    }
    level = level_map.get(log_level, logging.WARNING)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Remove existing handlers
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.addFilter(LabelFilter())

    if log_format == "json":
        formatter = JsonFormatter(
            "%(asctime)s %(name)s %(levelname)s %(message)s %(label)s",
            rename_fields={
                "asctime": "timestamp",
                "name": "logger",
                "levelname": "level",
            },
        )
    else:
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s [label=%(label)s]",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    handler.setFormatter(formatter)
    root_logger.addHandler(handler)


def get_logger(name: str, label: Optional[str] = None) -> logging.LoggerAdapter:
    """
    Get a logger carrying the emitter label for correlation.

    Args:
        name: Logger name (typically __name__)
        label: Emitter label, if any

    Returns:
        LoggerAdapter with label in extra fields
    """
    logger = logging.getLogger(name)
    return logging.LoggerAdapter(logger, {"label": label if label is not None else "N/A"})


class LabelFilter(logging.Filter):
    """
    Logging filter that adds label to all log records.

    Ensures the formatters always find a label field, even for records
    not logged through get_logger().
    """

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "label"):
            record.label = "N/A"  # type: ignore
        return True
