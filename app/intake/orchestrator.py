"""
Appointment Intake Orchestrator

Runs the three-stage reconciliation for one booking:
ResolvePerson -> CreateEvent -> LinkParticipant.

A failing stage ends the run and its exception propagates unchanged. Writes
committed by earlier stages are not rolled back; the committed ids are
logged so a partial booking can be found and repaired by hand.
"""

import logging
from contextlib import nullcontext
from typing import Any, Dict, Optional, Union

from app.core.config import validate_timezone
from app.crm.store import CrmStore
from app.intake.events import Clock, EventCreator, utc_now
from app.intake.participants import ParticipantLinker
from app.intake.resolver import PersonResolver, require_email
from app.observability.logger import log_error, log_stage, log_warning, timing
from app.schemas.appointment import AppointmentPayload, AppointmentResult
from app.utils.locks import KeyedLock

logger = logging.getLogger(__name__)


class AppointmentProcessor:
    """Processes inbound appointments against a CRM store."""

    def __init__(
        self,
        store: CrmStore,
        clock: Clock = utc_now,
        default_tz: str = "UTC",
        serialize_person_resolution: bool = True,
    ):
        validate_timezone(default_tz)
        self.store = store
        self.person_resolver = PersonResolver(store)
        self.event_creator = EventCreator(store, clock=clock, default_tz=default_tz)
        self.participant_linker = ParticipantLinker(store)
        self._person_locks: Optional[KeyedLock] = KeyedLock() if serialize_person_resolution else None

    def _resolve_person(self, name: Optional[str], email: str) -> str:
        # Serialize find-or-create per email so concurrent bookings share one person
        guard = self._person_locks.hold(email.lower()) if self._person_locks else nullcontext()
        with guard:
            return self.person_resolver.resolve_person(name, email)

    def process(self, payload: Union[AppointmentPayload, Dict[str, Any]]) -> AppointmentResult:
        """
        Reconcile one booking.

        Args:
            payload: AppointmentPayload or a dict using the webhook field names

        Returns:
            AppointmentResult with the person, event and participant ids

        Raises:
            ValidationError: If email is missing (before any store call)
            UpstreamError: If any store call fails
        """
        if not isinstance(payload, AppointmentPayload):
            payload = AppointmentPayload.model_validate(payload)

        log_stage(
            "received",
            name=payload.name,
            email=payload.email,
            title=payload.title,
            start_time=payload.start_time,
        )

        email = require_email(payload.email)
        completed: Dict[str, str] = {}

        try:
            with timing("resolve_person") as t:
                person_id = self._resolve_person(payload.name, email)
            completed["person_id"] = person_id
            log_stage("person_resolved", duration_ms=t.get_duration_ms(), person_id=person_id)

            with timing("create_event") as t:
                event_id = self.event_creator.create_event(
                    title=payload.title,
                    start_time=payload.start_time,
                    end_time=payload.end_time,
                    location=payload.location,
                    description=payload.description,
                    context_email=email,
                )
            completed["event_id"] = event_id
            log_stage("event_created", duration_ms=t.get_duration_ms(), event_id=event_id)

            with timing("link_participant") as t:
                participant_id = self.participant_linker.link_participant(event_id, person_id)
            log_stage("participant_linked", duration_ms=t.get_duration_ms(), participant_id=participant_id)

        except Exception as e:
            log_error(e, {"stage": "process_appointment", **completed})
            if completed:
                log_warning("Appointment partially processed; committed records were not rolled back", completed)
            raise

        return AppointmentResult(
            success=True,
            person_id=person_id,
            event_id=event_id,
            participant_id=participant_id,
        )
