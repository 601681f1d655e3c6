"""Logging for Kitchen Assistant.

The package logs under the ``kitchen_assistant`` logger and ships it with a
``NullHandler`` only, so an application embedding the client decides where
records go. ``configure_logging()`` sets up console output for the
command-line runner, reading:
- LOG_LEVEL: DEBUG, INFO, WARNING, ERROR (default: INFO)
- LOG_TYPE: text, json (default: text)
"""

import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any, Optional

PACKAGE_LOGGER = "kitchen_assistant"
CONSOLE_HANDLER = "kitchen_assistant.console"

# Transport libraries that log every connection at INFO/DEBUG
NOISY_LOGGERS = ("aiohttp",)


class JSONFormatter(logging.Formatter):
    """One JSON object per record, with the remote service name when known."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(timespec="milliseconds"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        service = getattr(record, "service", None)
        if service:
            entry["service"] = service

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)


class RichTextFormatter(logging.Formatter):
    """Single-line coloured text: icon, time, level, origin and message.

    The origin is the logger name, suffixed with ``[service]`` for records
    about a remote call.
    """

    LEVEL_STYLES = {
        logging.DEBUG: ("\033[36m", "🔍"),
        logging.INFO: ("\033[32m", "ℹ️"),
        logging.WARNING: ("\033[33m", "⚠️"),
        logging.ERROR: ("\033[31m", "❌"),
        logging.CRITICAL: ("\033[1;31m", "❌"),
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        color, icon = self.LEVEL_STYLES.get(record.levelno, ("", ""))
        service = getattr(record, "service", None)
        origin = f"{record.name}[{service}]" if service else record.name

        line = (
            f"{color}{icon} {self.formatTime(record, '%H:%M:%S')} "
            f"{record.levelname:<8} {origin}: {record.getMessage()}{self.RESET}"
        )
        if record.exc_info:
            line += f"\n{self.formatException(record.exc_info)}"
        return line


def get_logger(name: str = PACKAGE_LOGGER) -> logging.Logger:
    """Return a library logger that stays silent until the application configures logging."""
    logger_instance = logging.getLogger(name)
    if not any(isinstance(handler, logging.NullHandler) for handler in logger_instance.handlers):
        logger_instance.addHandler(logging.NullHandler())
    return logger_instance


def _resolve_level(level_name: str) -> int:
    level = logging.getLevelName(level_name.upper())
    return level if isinstance(level, int) else logging.INFO


def configure_logging(level: Optional[str] = None, log_type: Optional[str] = None) -> logging.Logger:
    """Send package logs to stdout. Intended for the command-line runner.

    Args:
        level: Log level name; defaults to ``LOG_LEVEL`` or INFO.
        log_type: ``text`` or ``json``; defaults to ``LOG_TYPE`` or text.

    Returns:
        The package logger. Calling again replaces the console handler
        instead of adding a second one.
    """
    log_level = _resolve_level(level or os.getenv("LOG_LEVEL", "INFO"))
    output = (log_type or os.getenv("LOG_TYPE", "text")).lower()

    package_logger = get_logger(PACKAGE_LOGGER)
    for handler in [h for h in package_logger.handlers if h.get_name() == CONSOLE_HANDLER]:
        package_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.set_name(CONSOLE_HANDLER)
    handler.setFormatter(JSONFormatter() if output == "json" else RichTextFormatter())
    package_logger.addHandler(handler)
    package_logger.setLevel(log_level)
    # Console output is ours; avoid a second copy through root handlers
    package_logger.propagate = False

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    return package_logger


logger = get_logger(PACKAGE_LOGGER)
