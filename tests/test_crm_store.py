import json
import os
from unittest.mock import patch

import pytest

from app.core.config import AppConfig
from app.core.errors import ConfigurationError, UpstreamError
from app.crm.memory_store import InMemoryCrmStore, create_memory_store
from app.crm.store import select_crm_store
from app.crm.twenty_client import TwentyGraphQLClient
from app.crm.types import CalendarEventParticipantCreate, Emails, FullName, PersonCreate


class TestSelectCrmStore:
    def test_default_is_memory_store(self):
        with patch.dict(os.environ, {}, clear=True):
            assert isinstance(select_crm_store(), InMemoryCrmStore)

    def test_twenty_provider(self):
        cfg = AppConfig(crm_provider="twenty", twenty_api_url="https://crm.example.com", twenty_api_key="k")
        assert isinstance(select_crm_store(cfg), TwentyGraphQLClient)

    def test_unsupported_provider_raises(self):
        with pytest.raises(ConfigurationError):
            select_crm_store(AppConfig(crm_provider="salesforce"))


class TestInMemoryCrmStore:
    def test_find_respects_limit_and_exact_match(self):
        store = InMemoryCrmStore()
        for _ in range(2):
            store.create_person(PersonCreate(name=FullName(first_name="Jane"), emails=Emails(primary_email="jane@x.com")))
        store.create_person(PersonCreate(name=FullName(first_name="John"), emails=Emails(primary_email="john@x.com")))

        assert len(store.find_people_by_email("jane@x.com", limit=1)) == 1
        assert len(store.find_people_by_email("jane@x.com", limit=5)) == 2
        assert store.find_people_by_email("JANE@x.com") == []

    def test_participant_requires_existing_person(self):
        store = InMemoryCrmStore()

        with pytest.raises(UpstreamError):
            store.create_calendar_event_participant(
                CalendarEventParticipantCreate(calendar_event_id="e-1", person_id="p-1"))

    def test_seed_file_loads_people(self, tmp_path):
        seed = tmp_path / "seed.json"
        seed.write_text(json.dumps({"people": [
            {"id": "p-1", "name": "Jane Q Doe", "email": "jane@x.com"},
            {"name": "Solo", "email": "solo@x.com"},
        ]}), encoding="utf-8")

        store = create_memory_store(AppConfig(crm_seed_path=str(seed)))

        jane = store.find_people_by_email("jane@x.com")[0]
        assert jane.id == "p-1"
        assert jane.name.first_name == "Jane"
        assert jane.name.last_name == "Q Doe"
        solo = store.find_people_by_email("solo@x.com")[0]
        assert solo.id
        assert solo.name.last_name == ""

    def test_missing_seed_file_raises(self, tmp_path):
        with pytest.raises(ConfigurationError):
            create_memory_store(AppConfig(crm_seed_path=str(tmp_path / "missing.json")))
