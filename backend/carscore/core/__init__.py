# Core module
"""
Core module for CarScore.

This module provides:
- Configuration management (config.py)
- Custom exceptions (exceptions.py)
- Structured logging (logging.py)
"""

from carscore.core.config import settings, get_settings
from carscore.core.exceptions import (
    CarScoreException,
    ValidationException,
    InvalidInputException,
    UnknownFuelTypeException,
    ErrorCode,
    get_error_message,
)
from carscore.core.logging import (
    setup_logging,
    get_logger,
    log_event,
    scoring_request,
    PerformanceLogger,
)

__all__ = [
    # Config
    "settings",
    "get_settings",
    # Exceptions
    "CarScoreException",
    "ValidationException",
    "InvalidInputException",
    "UnknownFuelTypeException",
    "ErrorCode",
    "get_error_message",
    # Logging
    "setup_logging",
    "get_logger",
    "log_event",
    "scoring_request",
    "PerformanceLogger",
]
