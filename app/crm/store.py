from typing import List, Optional, Protocol

from app.core.config import AppConfig, load_config
from app.core.errors import ConfigurationError
from app.crm.types import (
    CalendarEvent,
    CalendarEventCreate,
    CalendarEventParticipant,
    CalendarEventParticipantCreate,
    Person,
    PersonCreate,
)


class CrmStore(Protocol):
    """
    Query/mutation capability against the CRM entity graph.

    Every method raises UpstreamError on store failure.
    """

    def find_people_by_email(self, email: str, limit: int = 1) -> List[Person]:
        ...

    def create_person(self, data: PersonCreate) -> Person:
        ...

    def create_calendar_event(self, data: CalendarEventCreate) -> CalendarEvent:
        ...

    def create_calendar_event_participant(self, data: CalendarEventParticipantCreate) -> CalendarEventParticipant:
        ...


def select_crm_store(config: Optional[AppConfig] = None) -> CrmStore:
    """Factory function to select the CRM store based on CRM_PROVIDER."""
    cfg = config or load_config()
    provider = cfg.crm_provider

    if provider == "mock":
        from app.crm.memory_store import create_memory_store
        return create_memory_store(cfg)
    elif provider == "twenty":
        from app.crm.twenty_client import create_twenty_client
        return create_twenty_client(cfg)
    else:
        raise ConfigurationError(f"Unsupported CRM_PROVIDER: {provider}")
