import os
import time
import json
import logging
from contextlib import contextmanager
from typing import Dict, Any, Optional
from datetime import datetime, timezone

import sentry_sdk

logger = logging.getLogger(__name__)


class TimingContext:
    """Context manager for timing operations."""

    def __init__(self, operation_name: str):
        self.operation_name = operation_name
        self.start_time: Optional[float] = None
        self.duration_ms: Optional[float] = None

    def __enter__(self):
        self.start_time = time.time()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self.start_time is not None:
            self.duration_ms = (time.time() - self.start_time) * 1000

    def get_duration_ms(self) -> Optional[float]:
        """Get duration in milliseconds."""
        return self.duration_ms


@contextmanager
def timing(operation_name: str):
    """Context manager for timing operations."""
    context = TimingContext(operation_name)
    with context:
        yield context


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def mask_email(email: Optional[str]) -> Optional[str]:
    """
    Mask the local part of an email address for logging.

    Args:
        email: Email address to mask

    Returns:
        Email with only the first character of the local part kept, e.g. j***@x.com
    """
    if not email:
        return email
    if "@" not in email:
        return "[REDACTED]"
    local, domain = email.rsplit("@", 1)
    return f"{local[:1]}***@{domain}"


def log_stage(stage: str, duration_ms: Optional[float] = None, **kwargs) -> None:
    """
    Log a structured workflow stage entry.

    Args:
        stage: The stage name (e.g. 'received', 'person_resolved', 'event_created')
        duration_ms: Optional duration in milliseconds
        **kwargs: Additional fields; an 'email' field is masked
    """
    log_entry: Dict[str, Any] = {
        "timestamp": _timestamp(),
        "stage": stage,
    }

    if "email" in kwargs:
        kwargs["email"] = mask_email(kwargs["email"])

    if duration_ms is not None:
        log_entry["duration_ms"] = round(duration_ms, 2)

    log_entry.update(kwargs)

    logger.info(json.dumps(log_entry, separators=(',', ':')))


def init_sentry() -> bool:
    """
    Initialize Sentry if enabled and DSN is provided.

    Returns:
        True if Sentry was initialized, False otherwise
    """
    if not os.getenv("OBS_ENABLED", "false").lower() == "true":
        return False

    sentry_dsn = os.getenv("SENTRY_DSN")
    if not sentry_dsn:
        logger.info("Sentry DSN not provided, skipping Sentry initialization")
        return False

    try:
        from sentry_sdk.integrations.fastapi import FastApiIntegration
        from sentry_sdk.integrations.logging import LoggingIntegration

        sentry_sdk.init(
            dsn=sentry_dsn,
            integrations=[
                FastApiIntegration(),
                LoggingIntegration(
                    level=logging.INFO,
                    event_level=logging.ERROR
                ),
            ],
            traces_sample_rate=0.1,
            environment=os.getenv("ENVIRONMENT", "development"),
        )

        logger.info("Sentry initialized successfully")
        return True

    except Exception as e:
        logger.error(f"Failed to initialize Sentry: {e}")
        return False


def log_error(error: Exception, context: Dict[str, Any] = None) -> None:
    """
    Log an error with optional context.

    Args:
        error: The exception to log
        context: Optional context dictionary
    """
    log_entry = {
        "timestamp": _timestamp(),
        "level": "ERROR",
        "error": str(error),
        "error_type": type(error).__name__,
    }

    if context:
        log_entry.update(context)

    logger.error(json.dumps(log_entry, separators=(',', ':')))


def log_warning(message: str, context: Dict[str, Any] = None) -> None:
    """Log a warning with optional context."""
    log_entry = {
        "timestamp": _timestamp(),
        "level": "WARNING",
        "message": message,
    }

    if context:
        log_entry.update(context)

    logger.warning(json.dumps(log_entry, separators=(',', ':')))
