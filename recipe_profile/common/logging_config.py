# recipe_profile/common/logging_config.py
# -*- coding: utf-8 -*-
"""
Centralized logging configuration for the recipe profile.

Provides a human-readable console format with level symbols for interactive
installs, and JSON-structured records for installs driven by automation.

Features:
- JSON-structured logging for easy parsing by log collectors
- Level symbols on console output
- Environment-aware configuration
- Performance logging decorator
"""

import functools
import json
import logging
import os
import sys
import time
from datetime import datetime, timezone
from typing import Any, Dict, Optional

SYMBOLS_DEFAULT: Dict[str, str] = {
    "success": "✅",
    "error": "❌",
    "warning": "⚠️",
    "info": "ℹ️",
    "step": "➡️",
    "gear": "⚙️",
    "package": "📦",
    "rocket": "🚀",
    "sparkles": "✨",
    "critical": "🔥",
    "debug": "🐛",
}

SIMPLE_LOG_FORMAT = (
    "%(asctime)s - %(levelname)s - %(symbol)s %(name)s - %(message)s"
)

# Attributes present on every LogRecord; anything else came in via `extra`.
_RESERVED_RECORD_KEYS = frozenset(
    [
        "name",
        "msg",
        "args",
        "levelname",
        "levelno",
        "pathname",
        "filename",
        "module",
        "lineno",
        "funcName",
        "created",
        "msecs",
        "relativeCreated",
        "thread",
        "threadName",
        "processName",
        "process",
        "taskName",
        "getMessage",
        "exc_info",
        "exc_text",
        "stack_info",
        "symbol",
        "message",
        "asctime",
    ]
)


class JSONFormatter(logging.Formatter):
    """
    Custom JSON formatter for structured logging.

    Formats log records as JSON with consistent structure including:
    - timestamp (ISO format)
    - level
    - service name
    - message
    - additional metadata
    """

    def __init__(self, service_name: str = "recipe-profile"):
        super().__init__()
        self.service_name = service_name
        self.hostname = os.environ.get("HOSTNAME", "unknown")

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_entry: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(
                record.created, tz=timezone.utc
            ).isoformat(),
            "level": record.levelname,
            "service": self.service_name,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
            "hostname": self.hostname,
        }

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        extra_fields = {
            key: value
            for key, value in record.__dict__.items()
            if key not in _RESERVED_RECORD_KEYS
        }
        if extra_fields:
            log_entry["extra"] = extra_fields

        return json.dumps(log_entry, ensure_ascii=False, default=str)


class SymbolFormatter(logging.Formatter):
    """
    A custom formatter that adds symbols to log messages based on the log level.
    """

    def __init__(self, fmt=None, datefmt=None, symbols=None):
        super().__init__(fmt or SIMPLE_LOG_FORMAT, datefmt)
        self.symbols = symbols or SYMBOLS_DEFAULT

    def format(self, record):
        if record.levelno == logging.DEBUG:
            record.symbol = self.symbols.get("debug", "🐛")
        elif record.levelno == logging.INFO:
            record.symbol = self.symbols.get("info", "ℹ️")
        elif record.levelno == logging.WARNING:
            record.symbol = self.symbols.get("warning", "⚠️")
        elif record.levelno == logging.ERROR:
            record.symbol = self.symbols.get("error", "❌")
        elif record.levelno == logging.CRITICAL:
            record.symbol = self.symbols.get("critical", "🔥")
        else:
            record.symbol = ""

        return super().format(record)


def setup_logging(
    service_name: str = "recipe-profile",
    log_level: Optional[str] = None,
    enable_console: bool = True,
    log_file_path: Optional[str] = None,
    json_output: Optional[bool] = None,
    log_prefix: Optional[str] = None,
    symbols: Optional[Dict[str, str]] = None,
) -> logging.Logger:
    """
    Set up logging for the profile.

    Args:
        service_name: Name used for the returned logger and in JSON records.
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
            Falls back to the LOG_LEVEL environment variable, then INFO.
        enable_console: Whether to log to stdout.
        log_file_path: If given, JSON records are also written to this file.
        json_output: Force JSON console output. Defaults to LOG_FORMAT=json.
        log_prefix: Optional prefix for human-readable console lines.
        symbols: Level symbols for console output.

    Returns:
        Configured logger instance
    """
    if log_level is None:
        log_level = os.environ.get("LOG_LEVEL", "INFO").upper()

    numeric_level = getattr(logging, log_level.upper(), None)
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO
        log_level = "INFO"

    if json_output is None:
        json_output = os.environ.get("LOG_FORMAT", "").lower() == "json"

    json_formatter = JSONFormatter(service_name)
    console_format = SIMPLE_LOG_FORMAT
    if log_prefix:
        console_format = f"{log_prefix} {SIMPLE_LOG_FORMAT}"
    console_formatter = SymbolFormatter(console_format, symbols=symbols)

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    if enable_console:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(numeric_level)
        console_handler.setFormatter(
            json_formatter if json_output else console_formatter
        )
        root_logger.addHandler(console_handler)

    if log_file_path:
        file_handler = logging.FileHandler(log_file_path, encoding="utf-8")
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(json_formatter)
        root_logger.addHandler(file_handler)

    logger = logging.getLogger(service_name)
    logger.debug(
        "Logging initialized",
        extra={
            "log_level": log_level,
            "console_enabled": enable_console,
            "file_enabled": bool(log_file_path),
            "json_output": json_output,
        },
    )

    return logger


def log_performance(func):
    """
    Decorator to log function performance metrics.

    Usage:
        @log_performance
        def my_function():
            pass
    """

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        logger = logging.getLogger(func.__module__)
        start_time = time.time()

        try:
            result = func(*args, **kwargs)
            duration = time.time() - start_time
            logger.debug(
                f"Function {func.__name__} completed successfully",
                extra={
                    "function_name": func.__name__,
                    "duration_seconds": round(duration, 3),
                    "status": "success",
                },
            )
            return result
        except Exception as e:
            duration = time.time() - start_time
            logger.debug(
                f"Function {func.__name__} failed",
                extra={
                    "function_name": func.__name__,
                    "duration_seconds": round(duration, 3),
                    "status": "error",
                    "error": str(e),
                },
            )
            raise

    return wrapper
