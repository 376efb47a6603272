# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Ourochronos Contributors

"""Structured logging configuration for registry trust scoring.

Provides:
- JSON formatter for production (machine-parseable)
- Standard formatter for development (human-readable)
- Scoring pass IDs so every record emitted during one batch of score
  computations can be grouped together
"""

from __future__ import annotations

import json
import logging
import sys
import uuid
from collections.abc import Generator
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import UTC, datetime
from typing import Any

_pass_id: ContextVar[str | None] = ContextVar("scoring_pass_id", default=None)


def get_pass_id() -> str | None:
    """Get the scoring pass ID of the current context, if any."""
    return _pass_id.get()


def set_pass_id(pass_id: str | None) -> None:
    """Set the scoring pass ID for the current context.

    Args:
        pass_id: The pass ID to set, or None to clear.
    """
    _pass_id.set(pass_id)


def generate_pass_id() -> str:
    """Generate a new unique scoring pass ID."""
    return str(uuid.uuid4())


@contextmanager
def scoring_pass(pass_id: str | None = None) -> Generator[str, None, None]:
    """Context manager scoping log records to one scoring pass.

    Args:
        pass_id: Optional pass ID to use. If None, generates a new one.

    Yields:
        The pass ID being used.

    Example:
        with scoring_pass() as pid:
            calculator.compute_all(graph)  # records carry pid
    """
    pid = pass_id or generate_pass_id()
    token = _pass_id.set(pid)
    try:
        yield pid
    finally:
        _pass_id.reset(token)


class JSONFormatter(logging.Formatter):
    """JSON log formatter for production environments."""

    def format(self, record: logging.LogRecord) -> str:
        """Format a log record as JSON.

        Args:
            record: LogRecord to format.

        Returns:
            JSON string with timestamp, level, logger, message, and the
            scoring pass ID when one is active.
        """
        log_data: dict[str, Any] = {
            "timestamp": datetime.now(UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        pass_id = get_pass_id()
        if pass_id:
            log_data["pass_id"] = pass_id

        if record.levelno >= logging.WARNING:
            log_data["source"] = {
                "file": record.pathname,
                "line": record.lineno,
                "function": record.funcName,
            }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        if hasattr(record, "extra_data"):
            log_data["extra"] = record.extra_data

        return json.dumps(log_data, default=str)


class StandardFormatter(logging.Formatter):
    """Human-readable formatter with optional colors for terminal output."""

    COLORS = {
        "DEBUG": "\033[36m",  # Cyan
        "INFO": "\033[32m",  # Green
        "WARNING": "\033[33m",  # Yellow
        "ERROR": "\033[31m",  # Red
        "CRITICAL": "\033[35m",  # Magenta
    }
    RESET = "\033[0m"
    PASS_COLOR = "\033[90m"  # Gray

    def __init__(self, use_colors: bool = True):
        super().__init__(
            fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        self.use_colors = use_colors and sys.stderr.isatty()

    def format(self, record: logging.LogRecord) -> str:
        # Copy so other handlers see the unmodified record
        record = logging.makeLogRecord(record.__dict__)

        pass_id = get_pass_id()
        if pass_id:
            short_pid = pass_id[:8]
            if self.use_colors:
                pid_str = f"{self.PASS_COLOR}[{short_pid}]{self.RESET} "
            else:
                pid_str = f"[{short_pid}] "
            record.msg = pid_str + str(record.msg)

        if self.use_colors:
            color = self.COLORS.get(record.levelname, "")
            record.levelname = f"{color}{record.levelname}{self.RESET}"

        return super().format(record)


def configure_logging(
    level: str | int | None = None,
    json_format: bool | None = None,
    log_file: str | None = None,
) -> None:
    """Configure logging for an application embedding trust scoring.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL); defaults
            to the configured REGISTRY_TRUST_LOG_LEVEL
        json_format: Use JSON format (auto-detect if None)
        log_file: Optional file to write logs to

    Environment variables:
        REGISTRY_TRUST_LOG_LEVEL: Default log level
        REGISTRY_TRUST_LOG_FORMAT: "json" or "text", auto-detect if unset
        REGISTRY_TRUST_LOG_FILE: Log file path
    """
    from .config import get_config

    config = get_config()

    if level is None:
        level = config.log_level
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)

    if json_format is None:
        format_env = config.log_format.lower()
        if format_env == "json":
            json_format = True
        elif format_env == "text":
            json_format = False
        else:
            # JSON unless attached to a terminal
            json_format = not sys.stderr.isatty()

    log_file = config.log_file if log_file is None else log_file

    formatter: logging.Formatter
    if json_format:
        formatter = JSONFormatter()
    else:
        formatter = StandardFormatter()

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        # File output is always JSON
        file_handler.setFormatter(JSONFormatter())
        root_logger.addHandler(file_handler)


def get_logger(name: str) -> logging.Logger:
    """Get a logger with the given name.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured logger
    """
    return logging.getLogger(name)
