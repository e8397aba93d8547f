"""
Logging configuration for Taskboard.

Console output is colour coded per level during development; set
``LOG_JSON=true`` to emit one JSON object per line for log aggregation.
All application loggers live under the ``taskboard`` namespace.
"""

import json
import logging
import sys
from typing import Optional

from app.config import get_settings

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Third-party loggers that are too chatty at INFO
QUIET_LOGGERS = {
    "sqlalchemy.engine": logging.WARNING,
    "asyncpg": logging.WARNING,
    "aiosqlite": logging.WARNING,
    "passlib": logging.ERROR,
    "httpcore": logging.WARNING,
    "httpx": logging.WARNING,
}


class ColoredFormatter(logging.Formatter):
    """Formatter that wraps each record in the ANSI colour of its level."""

    RESET = "\x1b[0m"
    COLORS = {
        logging.DEBUG: "\x1b[38;20m",
        logging.INFO: "\x1b[32;20m",
        logging.WARNING: "\x1b[33;20m",
        logging.ERROR: "\x1b[31;20m",
        logging.CRITICAL: "\x1b[31;1m",
    }

    def __init__(self):
        super().__init__(LOG_FORMAT, datefmt=DATE_FORMAT)

    def format(self, record):
        color = self.COLORS.get(record.levelno, "")
        return f"{color}{super().format(record)}{self.RESET}"


class JsonFormatter(logging.Formatter):
    """One JSON document per record."""

    def format(self, record):
        payload = {
            "timestamp": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload)


def setup_logging(
    level: Optional[str] = None,
    json_format: Optional[bool] = None,
) -> None:
    """
    Configure the root logger.

    Args:
        level: Log level name; falls back to LOG_LEVEL, then DEBUG/INFO by debug flag
        json_format: Force JSON output on or off; falls back to LOG_JSON
    """
    settings = get_settings()

    log_level = level or settings.log_level or ("DEBUG" if settings.debug else "INFO")
    numeric_level = getattr(logging, log_level.upper(), logging.INFO)
    use_json = settings.log_json if json_format is None else json_format

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(numeric_level)
    console_handler.setFormatter(JsonFormatter() if use_json else ColoredFormatter())
    root_logger.addHandler(console_handler)

    for name, quiet_level in QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(quiet_level)

    logging.getLogger("taskboard").setLevel(numeric_level)


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger under the ``taskboard`` namespace.

    Usage:
        from app.logging_config import get_logger
        logger = get_logger(__name__)
    """
    if not name.startswith("taskboard"):
        name = f"taskboard.{name}"
    return logging.getLogger(name)
