"""
Custom exception classes for CarScore.

The engine defaults silently wherever it can. Only invalid cost inputs are
surfaced, and they all share the ``InvalidInput`` kind so a caller can map
them to a single client-facing error.

This module defines a hierarchy of exceptions with:
- Structured error payloads
- Error codes for client-side handling
- Default human-readable messages
"""

from enum import StrEnum
from typing import Any

# =============================================================================
# Error Codes Enum
# =============================================================================


class ErrorCode(StrEnum):
    """Standardized error codes for client-side handling."""

    # General errors (1xxx)
    INTERNAL_ERROR = "ERR_1000"
    VALIDATION_ERROR = "ERR_1001"

    # Input errors (4xxx)
    INVALID_INPUT = "ERR_4001"
    UNKNOWN_FUEL_TYPE = "ERR_4002"


# =============================================================================
# Error Messages
# =============================================================================


ERROR_MESSAGES: dict[ErrorCode, str] = {
    ErrorCode.INTERNAL_ERROR: "An internal error occurred while scoring the vehicle.",
    ErrorCode.VALIDATION_ERROR: "Invalid data. Please check the supplied values.",
    ErrorCode.INVALID_INPUT: "Price and annual mileage must be non-negative numbers.",
    ErrorCode.UNKNOWN_FUEL_TYPE: (
        "Fuel type must be one of: regular, premium, diesel, electric, hybrid."
    ),
}


def get_error_message(code: ErrorCode, fallback: str | None = None) -> str:
    """Get the default message for an error code."""
    return ERROR_MESSAGES.get(code, fallback or "Unknown error.")


# =============================================================================
# Base Exception Classes
# =============================================================================


class CarScoreException(Exception):
    """
    Base exception class for all CarScore exceptions.

    Attributes:
        message: Human-readable error message
        code: Machine-readable error code
        details: Additional error context
    """

    kind: str = "Internal"

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        details: dict[str, Any] | None = None,
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to a dictionary for JSON output."""
        return {
            "error": {
                "code": self.code.value,
                "kind": self.kind,
                "message": self.message,
                "default_message": get_error_message(self.code, self.message),
                "details": self.details,
            }
        }


# =============================================================================
# Validation Exceptions
# =============================================================================


class ValidationException(CarScoreException):
    """Exception for validation errors."""

    kind = "Validation"

    def __init__(
        self,
        message: str,
        field: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        error_details = details or {}
        if field:
            error_details["field"] = field

        super().__init__(
            message=message,
            code=ErrorCode.VALIDATION_ERROR,
            details=error_details,
        )
        self.field = field


class InvalidInputException(ValidationException):
    """Exception for non-numeric or negative cost inputs."""

    kind = "InvalidInput"

    def __init__(
        self,
        message: str,
        field: str | None = None,
        value: Any = None,
    ):
        details = {}
        if value is not None:
            details["value"] = repr(value)

        super().__init__(
            message=message,
            field=field,
            details=details,
        )
        self.code = ErrorCode.INVALID_INPUT


class UnknownFuelTypeException(InvalidInputException):
    """Exception for a fuel-type tag outside the controlled enumeration."""

    def __init__(self, fuel_type: Any):
        super().__init__(
            message=f"Unrecognized fuel type: {fuel_type!r}",
            field="fuel_type",
            value=fuel_type,
        )
        self.code = ErrorCode.UNKNOWN_FUEL_TYPE
