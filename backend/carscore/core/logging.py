"""
Logging configuration for CarScore.

Provides:
- Structured JSON logging with request correlation
- Request ID tracking across one scoring request
- Performance timing for scoring operations
- Configurable log levels per module
"""

from __future__ import annotations

import logging
import os
import sys
import time
import traceback
import uuid
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import datetime, UTC
from functools import wraps
from typing import Any, Optional, TypeVar

from pythonjsonlogger import jsonlogger

from carscore.core.config import settings

# Context variable for correlating every log line of one scoring request
request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)

# Type variable for generic function decorator
F = TypeVar("F", bound=Callable[..., Any])


class StructuredJsonFormatter(jsonlogger.JsonFormatter):
    """
    JSON formatter with context fields.

    Adds:
    - Timestamp in ISO format
    - Log level with severity number
    - Logger name
    - Service name, version, and environment
    - Request ID from context
    - Source location
    - Exception info with stack trace when present
    """

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._hostname = os.uname().nodename if hasattr(os, "uname") else "unknown"
        self._pid = os.getpid()

    def add_fields(
        self,
        log_record: dict[str, Any],
        record: logging.LogRecord,
        message_dict: dict[str, Any],
    ) -> None:
        super().add_fields(log_record, record, message_dict)

        log_record["timestamp"] = datetime.now(UTC).isoformat()
        log_record["level"] = record.levelname
        log_record["level_num"] = record.levelno
        log_record["logger"] = record.name

        log_record["service"] = {
            "name": settings.PROJECT_NAME,
            "version": settings.VERSION,
            "environment": settings.ENVIRONMENT,
        }

        log_record["host"] = {
            "name": self._hostname,
            "pid": self._pid,
        }

        log_record["source"] = {
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        request_id = request_id_var.get()
        if request_id:
            log_record["request_id"] = request_id

        if record.exc_info and record.exc_info[0] is not None:
            exc_type, exc_value, exc_tb = record.exc_info
            log_record["error"] = {
                "type": exc_type.__name__,
                "message": str(exc_value),
                "module": exc_type.__module__,
                "stack_trace": self.formatException(record.exc_info),
                "frames": self._extract_stack_frames(exc_tb),
            }
            if exc_value.__cause__:
                log_record["error"]["cause"] = {
                    "type": type(exc_value.__cause__).__name__,
                    "message": str(exc_value.__cause__),
                }

        self._remove_none_values(log_record)

    def _extract_stack_frames(self, tb, limit: int = 10) -> list[dict[str, Any]]:
        """Extract structured stack frame information."""
        frames = []
        if tb is None:
            return frames

        for frame_info in traceback.extract_tb(tb, limit=limit):
            frames.append({
                "file": frame_info.filename,
                "line": frame_info.lineno,
                "function": frame_info.name,
                "code": frame_info.line,
            })
        return frames

    def _remove_none_values(self, d: dict[str, Any]) -> None:
        """Recursively remove None values from dictionary."""
        keys_to_remove = []
        for key, value in d.items():
            if value is None:
                keys_to_remove.append(key)
            elif isinstance(value, dict):
                self._remove_none_values(value)
        for key in keys_to_remove:
            del d[key]


class PerformanceLogger:
    """
    Context manager and decorator for logging operation timings.

    Usage as context manager:
        with PerformanceLogger("reliability_score", complaints=len(complaints)):
            score = calculate_reliability_score(complaints, recalls)

    Usage as decorator:
        @PerformanceLogger.track("vehicle_report")
        def build_vehicle_report(...):
            ...
    """

    def __init__(
        self,
        operation_name: str,
        logger_name: str = "carscore.performance",
        warn_threshold_ms: float = 250.0,
        error_threshold_ms: float = 2000.0,
        **extra_fields: Any,
    ):
        self.operation_name = operation_name
        self.logger = get_logger(logger_name)
        self.warn_threshold_ms = warn_threshold_ms
        self.error_threshold_ms = error_threshold_ms
        self.extra_fields = extra_fields
        self.start_time: float | None = None
        self.duration_ms: float = 0.0

    def __enter__(self) -> PerformanceLogger:
        self.start_time = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if self.start_time is not None:
            self.duration_ms = (time.perf_counter() - self.start_time) * 1000

        log_data = {
            "event": "performance_metric",
            "operation": self.operation_name,
            "duration_ms": round(self.duration_ms, 2),
            "success": exc_type is None,
            **self.extra_fields,
        }

        if exc_type:
            log_data["error_type"] = exc_type.__name__
            log_data["error_message"] = str(exc_val)
            self.logger.error(f"Operation failed: {self.operation_name}", extra=log_data)
        elif self.duration_ms >= self.error_threshold_ms:
            self.logger.error(f"Operation critically slow: {self.operation_name}", extra=log_data)
        elif self.duration_ms >= self.warn_threshold_ms:
            self.logger.warning(f"Operation slow: {self.operation_name}", extra=log_data)
        else:
            self.logger.debug(f"Operation completed: {self.operation_name}", extra=log_data)

    @classmethod
    def track(
        cls,
        operation_name: str,
        warn_threshold_ms: float = 250.0,
        error_threshold_ms: float = 2000.0,
    ) -> Callable[[F], F]:
        """Decorator for tracking function performance."""
        def decorator(func: F) -> F:
            @wraps(func)
            def wrapper(*args, **kwargs):
                with cls(
                    operation_name,
                    warn_threshold_ms=warn_threshold_ms,
                    error_threshold_ms=error_threshold_ms,
                ):
                    return func(*args, **kwargs)

            return wrapper  # type: ignore

        return decorator


# Logger configuration by module
LOGGER_CONFIG: dict[str, int] = {
    "carscore.performance": logging.INFO,
}


def setup_logging(level: str | None = None, log_format: str | None = None) -> None:
    """
    Configure application logging.

    JSON output when LOG_FORMAT is "json", human-readable otherwise.
    Explicit arguments override the configured settings.
    """
    root_logger = logging.getLogger()
    level_name = (level or settings.LOG_LEVEL).upper()
    root_logger.setLevel(getattr(logging, level_name, logging.INFO))

    root_logger.handlers = []

    console_handler = logging.StreamHandler(sys.stdout)

    if (log_format or settings.LOG_FORMAT) == "json":
        formatter = StructuredJsonFormatter(
            "%(timestamp)s %(level)s %(name)s %(message)s"
        )
    else:
        formatter = logging.Formatter(
            "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
        )

    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    for logger_name, logger_level in LOGGER_CONFIG.items():
        logging.getLogger(logger_name).setLevel(logger_level)


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger with the specified name.

    Args:
        name: Logger name, typically __name__ of the calling module

    Returns:
        Logger instance inheriting the root configuration
    """
    return logging.getLogger(name)


def log_event(
    logger: logging.Logger,
    level: int,
    event: str,
    message: str,
    **extra_fields: Any,
) -> None:
    """
    Log a structured event with additional context.

    Args:
        logger: Logger instance to use
        level: Log level
        event: Event type identifier
        message: Human-readable message
        **extra_fields: Additional fields to include in log
    """
    logger.log(
        level,
        message,
        extra={"event": event, **extra_fields}
    )


@contextmanager
def scoring_request(request_id: str | None = None) -> Iterator[str]:
    """Bind a request id to every log line emitted inside the block."""
    rid = request_id or uuid.uuid4().hex[:16]
    token = request_id_var.set(rid)
    try:
        yield rid
    finally:
        request_id_var.reset(token)
