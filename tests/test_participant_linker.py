from unittest.mock import MagicMock

import pytest

from app.core.errors import UpstreamError
from app.crm.memory_store import InMemoryCrmStore
from app.crm.types import CalendarEventCreate, Emails, FullName, PersonCreate
from app.intake.participants import ParticipantLinker


def _seeded_store():
    store = InMemoryCrmStore()
    person = store.create_person(PersonCreate(name=FullName(first_name="Jane", last_name="Doe"),
                                              emails=Emails(primary_email="jane@x.com")))
    event = store.create_calendar_event(CalendarEventCreate(
        title="Checkup", starts_at="2025-01-15T14:30:00.000Z", ends_at="2025-01-15T15:30:00.000Z"))
    return store, person.id, event.id


class TestParticipantLinker:
    def test_link_is_accepted_and_not_organizer(self):
        store, person_id, event_id = _seeded_store()
        spy = MagicMock(wraps=store)
        linker = ParticipantLinker(spy)

        participant_id = linker.link_participant(event_id, person_id)

        assert spy.create_calendar_event_participant.call_count == 1
        data = spy.create_calendar_event_participant.call_args[0][0]
        assert data.calendar_event_id == event_id
        assert data.person_id == person_id
        assert data.response_status == "ACCEPTED"
        assert data.is_organizer is False
        assert store.participants[participant_id].person_id == person_id

    def test_unknown_event_fails_upstream(self):
        store, person_id, _ = _seeded_store()
        linker = ParticipantLinker(store)

        with pytest.raises(UpstreamError):
            linker.link_participant("missing-event", person_id)

        assert store.participants == {}
