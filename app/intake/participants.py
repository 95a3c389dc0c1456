import logging

from app.crm.store import CrmStore
from app.crm.types import CalendarEventParticipantCreate
from app.intake.constants import PARTICIPANT_IS_ORGANIZER, PARTICIPANT_RESPONSE_STATUS

logger = logging.getLogger(__name__)


class ParticipantLinker:
    """Links a person to an event; a booking implies acceptance and never organizer."""

    def __init__(self, store: CrmStore):
        self.store = store

    def link_participant(self, event_id: str, person_id: str) -> str:
        participant = self.store.create_calendar_event_participant(
            CalendarEventParticipantCreate(
                calendar_event_id=event_id,
                person_id=person_id,
                response_status=PARTICIPANT_RESPONSE_STATUS,
                is_organizer=PARTICIPANT_IS_ORGANIZER,
            )
        )
        logger.info(f"Added participant: {participant.id}")
        return participant.id
