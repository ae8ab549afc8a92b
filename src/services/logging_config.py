"""
Logging Configuration for the CTA engine.

Provides structured logging with:
- JSON formatting for production
- Human-readable formatting for development
- Per-tab context (the browser tab a CTA decision was made for)
- Timing of store round-trips
"""

import inspect
import json
import logging
import sys
import time
from contextvars import ContextVar
from datetime import datetime, timezone
from functools import wraps
from pathlib import Path
from typing import Callable, Dict, Optional

from config.settings import LoggingSettings

# Browser tab the current refresh/lifecycle call belongs to
tab_id_var: ContextVar[Optional[str]] = ContextVar('tab_id', default=None)


class JsonFormatter(logging.Formatter):
    """
    JSON log formatter for structured logging.

    Outputs logs as JSON objects for easy parsing by log aggregators.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        tab_id = tab_id_var.get()
        if tab_id:
            log_data["tab_id"] = tab_id

        if hasattr(record, 'extra_data'):
            log_data.update(record.extra_data)

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


class ReadableFormatter(logging.Formatter):
    """Human-readable log formatter for development."""

    COLORS = {
        'DEBUG': '\033[36m',
        'INFO': '\033[32m',
        'WARNING': '\033[33m',
        'ERROR': '\033[31m',
        'CRITICAL': '\033[35m',
        'RESET': '\033[0m',
    }

    def format(self, record: logging.LogRecord) -> str:
        color = self.COLORS.get(record.levelname, self.COLORS['RESET'])
        reset = self.COLORS['RESET']

        timestamp = datetime.now().strftime('%H:%M:%S.%f')[:-3]
        level = f"{color}{record.levelname:8s}{reset}"
        tab = f" tab={tab_id_var.get()}" if tab_id_var.get() else ""

        message = f"{timestamp} {level} [{record.name}]{tab} {record.getMessage()}"

        if hasattr(record, 'extra_data') and record.extra_data:
            extras = ' | '.join(f"{k}={v}" for k, v in record.extra_data.items())
            message += f" | {extras}"

        if record.exc_info:
            message += "\n" + self.formatException(record.exc_info)

        return message


class ContextLogger(logging.LoggerAdapter):
    """Logger adapter that merges fixed context into every record's extra_data."""

    def process(self, msg: str, kwargs: Dict) -> tuple:
        extra = kwargs.get('extra', {})

        if 'extra_data' not in extra:
            extra['extra_data'] = {}
        extra['extra_data'].update(self.extra)

        tab_id = tab_id_var.get()
        if tab_id:
            extra['extra_data'].setdefault('tab_id', tab_id)

        kwargs['extra'] = extra
        return msg, kwargs


def configure_logging(
    level: str = "INFO",
    json_output: bool = False,
    log_file: Optional[Path] = None
) -> None:
    """
    Configure application logging.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_output: If True, output JSON formatted logs
        log_file: Optional file path for log output
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    formatter = JsonFormatter() if json_output else ReadableFormatter()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(JsonFormatter())  # Always JSON for files
        root_logger.addHandler(file_handler)

    # SQL echo is controlled by DB_ECHO_SQL, not the root level
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)


def configure_from_settings(settings: Optional[LoggingSettings] = None) -> None:
    """Configure logging from LOG_* environment settings."""
    settings = settings or LoggingSettings()
    configure_logging(level=settings.level, json_output=settings.json_output)


def get_logger(name: str, **extra) -> ContextLogger:
    """
    Get a context-aware logger.

    Args:
        name: Logger name (typically __name__)
        **extra: Additional context to include in all logs

    Returns:
        ContextLogger instance
    """
    return ContextLogger(logging.getLogger(name), extra)


def log_performance(name: Optional[str] = None) -> Callable:
    """
    Decorator to log how long a call took, at DEBUG level.

    Failures are logged at ERROR and re-raised.
    """
    def decorator(func: Callable) -> Callable:
        func_name = name or func.__name__

        def _completed(start: float) -> None:
            get_logger("performance").debug(
                f"{func_name} completed",
                extra={'extra_data': {'duration_ms': int((time.perf_counter() - start) * 1000)}}
            )

        def _failed(start: float, error: Exception) -> None:
            get_logger("performance").error(
                f"{func_name} failed",
                extra={'extra_data': {
                    'duration_ms': int((time.perf_counter() - start) * 1000),
                    'error': str(error),
                }}
            )

        @wraps(func)
        async def async_wrapper(*args, **kwargs):
            start = time.perf_counter()
            try:
                result = await func(*args, **kwargs)
            except Exception as e:
                _failed(start, e)
                raise
            _completed(start)
            return result

        @wraps(func)
        def sync_wrapper(*args, **kwargs):
            start = time.perf_counter()
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                _failed(start, e)
                raise
            _completed(start)
            return result

        if inspect.iscoroutinefunction(func):
            return async_wrapper
        return sync_wrapper

    return decorator
