from functools import lru_cache
from typing import Optional

from fastapi import APIRouter, Query
from fastapi.responses import JSONResponse

from app.core.config import load_config
from app.core.errors import AppointmentIntakeError, ConfigurationError, UpstreamError, ValidationError
from app.crm.store import select_crm_store
from app.intake.orchestrator import AppointmentProcessor
from app.observability.logger import timing
from app.routes.health import update_last_run
from app.schemas.appointment import AppointmentErrorResponse, AppointmentPayload


router = APIRouter()

ERROR_STATUS = {
    ValidationError: 400,
    UpstreamError: 502,
    ConfigurationError: 503,
}


@lru_cache(maxsize=1)
def get_appointment_processor() -> AppointmentProcessor:
    """Build the process-wide processor; its per-email locks must be shared across requests."""
    cfg = load_config()
    return AppointmentProcessor(
        store=select_crm_store(cfg),
        default_tz=cfg.default_timezone,
        serialize_person_resolution=cfg.serialize_person_resolution,
    )


@router.get("/process")
def get_process_appointment(
    name: Optional[str] = None,
    email: Optional[str] = None,
    title: Optional[str] = None,
    start_time: Optional[str] = Query(None, alias="startTime"),
    end_time: Optional[str] = Query(None, alias="endTime"),
    location: Optional[str] = None,
    description: Optional[str] = None,
):
    body = AppointmentPayload(
        name=name,
        email=email,
        title=title,
        start_time=start_time,
        end_time=end_time,
        location=location,
        description=description,
    )
    return _handle_process(body)


@router.post("/process")
def post_process_appointment(body: Optional[AppointmentPayload] = None):
    return _handle_process(body or AppointmentPayload())


def _handle_process(body: AppointmentPayload) -> JSONResponse:
    with timing("process_appointment") as t:
        try:
            processor = get_appointment_processor()
            result = processor.process(body)
        except AppointmentIntakeError as exc:
            status_code = ERROR_STATUS.get(type(exc), 500)
            update_last_run(success=False, error=f"{exc.kind}: {exc}")
            error = AppointmentErrorResponse(error=exc.kind, detail=str(exc))
            return JSONResponse(status_code=status_code, content=error.model_dump())

    update_last_run(
        success=True,
        person_id=result.person_id,
        event_id=result.event_id,
        participant_id=result.participant_id,
        duration_ms=t.get_duration_ms(),
    )
    return JSONResponse(status_code=200, content=result.model_dump(by_alias=True))
