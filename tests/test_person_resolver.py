"""
Tests for Person Resolver

Find-or-create of people keyed on primary email.
"""

from unittest.mock import MagicMock

import pytest

from app.core.errors import UpstreamError, ValidationError
from app.crm.memory_store import InMemoryCrmStore
from app.crm.types import Emails, FullName, Person
from app.intake.resolver import PersonResolver, require_email, split_name


def _spy_store(people=None) -> MagicMock:
    return MagicMock(wraps=InMemoryCrmStore(people=people))


class TestSplitName:
    """Test deterministic name splitting."""

    def test_two_tokens(self):
        assert split_name("Jane Doe") == ("Jane", "Doe")

    def test_single_token_has_empty_last_name(self):
        assert split_name("Cher") == ("Cher", "")

    def test_remaining_tokens_form_last_name(self):
        assert split_name("Mary Ann van der Berg") == ("Mary", "Ann van der Berg")

    def test_whitespace_is_trimmed_and_collapsed(self):
        assert split_name("  Jane   Q   Doe  ") == ("Jane", "Q Doe")

    def test_missing_name_uses_unknown(self):
        assert split_name(None) == ("Unknown", "")
        assert split_name("") == ("Unknown", "")
        assert split_name("   ") == ("Unknown", "")


class TestRequireEmail:
    def test_missing_email_raises(self):
        for value in (None, "", "   "):
            with pytest.raises(ValidationError):
                require_email(value)

    def test_email_is_trimmed(self):
        assert require_email("  jane@x.com ") == "jane@x.com"


class TestPersonResolver:
    """Test resolve_person against a spying store."""

    def test_missing_email_makes_no_store_calls(self):
        store = _spy_store()
        resolver = PersonResolver(store)

        with pytest.raises(ValidationError):
            resolver.resolve_person("Jane Doe", None)

        assert store.find_people_by_email.call_count == 0
        assert store.create_person.call_count == 0

    def test_existing_person_is_returned_without_creation(self):
        existing = Person(id="p-1", name=FullName(first_name="Jane", last_name="Doe"),
                          emails=Emails(primary_email="jane@x.com"))
        store = _spy_store([existing])
        resolver = PersonResolver(store)

        first = resolver.resolve_person(None, "jane@x.com")
        second = resolver.resolve_person("Someone Else", "jane@x.com")

        assert first == second == "p-1"
        assert store.create_person.call_count == 0
        store.find_people_by_email.assert_called_with("jane@x.com", limit=1)

    def test_new_email_creates_exactly_one_person(self):
        store = _spy_store()
        resolver = PersonResolver(store)

        person_id = resolver.resolve_person("Jane Doe", "jane@x.com")

        assert store.create_person.call_count == 1
        created = store.create_person.call_args[0][0]
        assert created.name.first_name == "Jane"
        assert created.name.last_name == "Doe"
        assert created.emails.primary_email == "jane@x.com"
        assert store.find_people_by_email("jane@x.com")[0].id == person_id

    def test_new_email_without_name_uses_unknown(self):
        store = _spy_store()
        resolver = PersonResolver(store)

        resolver.resolve_person(None, "anon@x.com")

        created = store.create_person.call_args[0][0]
        assert created.name.first_name == "Unknown"
        assert created.name.last_name == ""

    def test_second_call_after_creation_reuses_person(self):
        store = _spy_store()
        resolver = PersonResolver(store)

        first = resolver.resolve_person("Jane Doe", "jane@x.com")
        second = resolver.resolve_person("Jane Doe", "jane@x.com")

        assert first == second
        assert store.create_person.call_count == 1

    def test_upstream_error_propagates_unchanged(self):
        store = MagicMock()
        error = UpstreamError("boom", operation="people")
        store.find_people_by_email.side_effect = error
        resolver = PersonResolver(store)

        with pytest.raises(UpstreamError) as exc_info:
            resolver.resolve_person("Jane Doe", "jane@x.com")

        assert exc_info.value is error
        store.create_person.assert_not_called()
