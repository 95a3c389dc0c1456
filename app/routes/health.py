import os
from datetime import datetime, timezone
from typing import Dict, Any, Optional
from fastapi import APIRouter
from fastapi.responses import JSONResponse

from app.core.application import APPLICATION
from app.core.config import load_config
from app.core.errors import ConfigurationError

router = APIRouter()

# Global state for last run tracking
_last_run: Optional[Dict[str, Any]] = None


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def update_last_run(
    success: bool = True,
    person_id: Optional[str] = None,
    event_id: Optional[str] = None,
    participant_id: Optional[str] = None,
    duration_ms: Optional[float] = None,
    error: Optional[str] = None
) -> None:
    """
    Update the last appointment run information.

    Args:
        success: Whether the appointment was fully processed
        person_id: Resolved person id
        event_id: Created event id
        participant_id: Created participant id
        duration_ms: Optional duration in milliseconds
        error: Optional error message
    """
    global _last_run

    _last_run = {
        "time": _now_iso(),
        "success": success,
    }

    for key, value in (("person_id", person_id), ("event_id", event_id), ("participant_id", participant_id)):
        if value is not None:
            _last_run[key] = value

    if duration_ms is not None:
        _last_run["duration_ms"] = round(duration_ms, 2)

    if error is not None:
        _last_run["error"] = error


def get_last_run() -> Optional[Dict[str, Any]]:
    """Get the last run information."""
    return _last_run


@router.get("/healthz")
async def health_check() -> JSONResponse:
    """
    Health check endpoint with last run information.

    Returns:
        JSON response with status and last run metadata
    """
    response = {
        "status": "ok",
        "timestamp": _now_iso(),
        "application": APPLICATION.function_name,
    }

    last_run = get_last_run()
    if last_run:
        response["last_run"] = last_run

    obs_enabled = os.getenv("OBS_ENABLED", "false").lower() == "true"
    response["observability"] = {
        "enabled": obs_enabled,
        "sentry_configured": bool(os.getenv("SENTRY_DSN")),
    }

    return JSONResponse(status_code=200, content=response)


@router.get("/healthz/ready")
async def readiness_check() -> JSONResponse:
    """
    Readiness check: the configured CRM store must be usable.

    Returns:
        JSON response indicating if the service is ready to accept traffic
    """
    try:
        cfg = load_config()
    except ConfigurationError as exc:
        response = {
            "status": "not_ready",
            "timestamp": _now_iso(),
            "checks": {"configuration": str(exc)},
        }
        return JSONResponse(status_code=503, content=response)

    if cfg.crm_provider == "mock":
        crm_status = "ok"
    elif cfg.crm_provider == "twenty":
        crm_status = "ok" if cfg.twenty_api_url and cfg.twenty_api_key else "missing_configuration"
    else:
        crm_status = "unsupported_provider"

    checks = {
        "crm_store": crm_status,
    }

    all_healthy = all(status == "ok" for status in checks.values())

    response = {
        "status": "ready" if all_healthy else "not_ready",
        "timestamp": _now_iso(),
        "crm_provider": cfg.crm_provider,
        "checks": checks,
    }

    status_code = 200 if all_healthy else 503
    return JSONResponse(status_code=status_code, content=response)


@router.get("/healthz/live")
async def liveness_check() -> JSONResponse:
    """Liveness check endpoint for container orchestration."""
    response = {
        "status": "alive",
        "timestamp": _now_iso(),
    }

    return JSONResponse(status_code=200, content=response)
