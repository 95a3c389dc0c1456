"""Exceptions raised by the appointment intake workflow."""

from typing import Optional


class AppointmentIntakeError(Exception):
    """Base exception for appointment intake errors."""

    kind = "intake_error"


class ValidationError(AppointmentIntakeError):
    """Raised when a required input is missing. Never raised after a store call."""

    kind = "validation_error"


class UpstreamError(AppointmentIntakeError):
    """Raised when the CRM store fails (transport, status, GraphQL errors, bad payload)."""

    kind = "upstream_error"

    def __init__(self, message: str, operation: Optional[str] = None, status_code: Optional[int] = None):
        super().__init__(message)
        self.operation = operation
        self.status_code = status_code


class ConfigurationError(AppointmentIntakeError):
    """Raised when the configured CRM store cannot be built."""

    kind = "configuration_error"
