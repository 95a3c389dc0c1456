import os
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel

from app.core.application import APPLICATION
from app.core.errors import ConfigurationError


class AppConfig(BaseModel):
    crm_provider: str = "mock"
    twenty_api_url: Optional[str] = None
    twenty_api_key: Optional[str] = None
    twenty_timeout_seconds: float = float(APPLICATION.timeout_seconds)
    default_timezone: str = "UTC"
    serialize_person_resolution: bool = True
    crm_seed_path: Optional[str] = None


def validate_timezone(name: str) -> str:
    """Return `name` if it is a known IANA zone, else raise ConfigurationError."""
    try:
        ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ConfigurationError(f"Unknown DEFAULT_TIMEZONE: {name!r}") from exc
    return name


def load_config() -> AppConfig:
    timeout_str = os.getenv("TWENTY_TIMEOUT_SECONDS", "")
    try:
        timeout = float(timeout_str) if timeout_str else float(APPLICATION.timeout_seconds)
    except ValueError:
        timeout = float(APPLICATION.timeout_seconds)
    api_url = os.getenv("TWENTY_API_URL")
    return AppConfig(
        crm_provider=os.getenv("CRM_PROVIDER", "mock").lower(),
        twenty_api_url=api_url.rstrip("/") if api_url else None,
        twenty_api_key=os.getenv("TWENTY_API_KEY"),
        twenty_timeout_seconds=timeout,
        default_timezone=validate_timezone(os.getenv("DEFAULT_TIMEZONE", "UTC")),
        serialize_person_resolution=os.getenv("SERIALIZE_PERSON_RESOLUTION", "true").lower() == "true",
        crm_seed_path=os.getenv("CRM_SEED_PATH") or None,
    )
