import json
import threading
import uuid
from pathlib import Path
from typing import Dict, List, Optional

from app.core.config import AppConfig
from app.core.errors import ConfigurationError, UpstreamError
from app.crm.types import (
    CalendarEvent,
    CalendarEventCreate,
    CalendarEventParticipant,
    CalendarEventParticipantCreate,
    Emails,
    FullName,
    Person,
    PersonCreate,
)


def _new_id() -> str:
    return str(uuid.uuid4())


class InMemoryCrmStore:
    """Process-local CRM store used for local runs and tests."""

    def __init__(self, people: Optional[List[Person]] = None) -> None:
        self._lock = threading.Lock()
        self.people: Dict[str, Person] = {p.id: p for p in people or []}
        self.events: Dict[str, CalendarEvent] = {}
        self.participants: Dict[str, CalendarEventParticipant] = {}

    def find_people_by_email(self, email: str, limit: int = 1) -> List[Person]:
        with self._lock:
            matches = [p for p in self.people.values() if p.emails.primary_email == email]
        return matches[:limit]

    def create_person(self, data: PersonCreate) -> Person:
        person = Person(id=_new_id(), name=data.name, emails=data.emails)
        with self._lock:
            self.people[person.id] = person
        return person

    def create_calendar_event(self, data: CalendarEventCreate) -> CalendarEvent:
        event = CalendarEvent(id=_new_id(), **data.model_dump())
        with self._lock:
            self.events[event.id] = event
        return event

    def create_calendar_event_participant(self, data: CalendarEventParticipantCreate) -> CalendarEventParticipant:
        with self._lock:
            # Mirror the remote store's foreign keys
            if data.calendar_event_id not in self.events:
                raise UpstreamError(f"Unknown calendar event: {data.calendar_event_id}", operation="createCalendarEventParticipant")
            if data.person_id not in self.people:
                raise UpstreamError(f"Unknown person: {data.person_id}", operation="createCalendarEventParticipant")
            participant = CalendarEventParticipant(id=_new_id(), **data.model_dump())
            self.participants[participant.id] = participant
        return participant


def _load_seed_people(path: Path) -> List[Person]:
    """Read people from a JSON seed file shaped like {"people": [{"id", "name", "email"}]}."""
    raw = json.loads(path.read_text(encoding="utf-8"))
    people: List[Person] = []
    for p in raw.get("people", []):
        full_name = str(p.get("name", "")).split(maxsplit=1)
        people.append(
            Person(
                id=str(p.get("id") or _new_id()),
                name=FullName(
                    first_name=full_name[0] if full_name else "",
                    last_name=full_name[1] if len(full_name) > 1 else "",
                ),
                emails=Emails(primary_email=p.get("email")),
            )
        )
    return people


def create_memory_store(config: AppConfig) -> InMemoryCrmStore:
    if not config.crm_seed_path:
        return InMemoryCrmStore()

    path = Path(config.crm_seed_path)
    if not path.exists():
        raise ConfigurationError(f"CRM seed file not found: {path}")
    return InMemoryCrmStore(people=_load_seed_people(path))
