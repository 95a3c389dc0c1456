"""
Person resolution.

Finds a CRM person by primary email, creating one when none exists.
Found people are never updated.
"""

import logging
from typing import Optional, Tuple

from app.core.errors import ValidationError
from app.crm.store import CrmStore
from app.crm.types import Emails, FullName, PersonCreate
from app.intake.constants import DEFAULT_PERSON_NAME

logger = logging.getLogger(__name__)


def split_name(name: Optional[str]) -> Tuple[str, str]:
    """
    Split a free-text display name into (first_name, last_name).

    The first whitespace-separated token is the first name; the remaining
    tokens, joined by single spaces, form the last name. A missing or blank
    name is treated as "Unknown".
    """
    full_name = (name or "").strip() or DEFAULT_PERSON_NAME
    tokens = full_name.split()
    return tokens[0], " ".join(tokens[1:])


def require_email(email: Optional[str]) -> str:
    """Return the trimmed email or raise ValidationError if it is missing."""
    cleaned = (email or "").strip()
    if not cleaned:
        raise ValidationError("Email is required to identify the person.")
    return cleaned


class PersonResolver:
    """Find-or-create of Person records keyed on primary email."""

    def __init__(self, store: CrmStore):
        self.store = store

    def resolve_person(self, name: Optional[str], email: Optional[str]) -> str:
        """
        Resolve the person id for an email.

        Args:
            name: Optional display name, only used when a person is created
            email: Primary email used as the lookup key

        Returns:
            Id of the existing or newly created person

        Raises:
            ValidationError: If email is missing (no store call is made)
            UpstreamError: If the store lookup or creation fails
        """
        email = require_email(email)

        existing = self.store.find_people_by_email(email, limit=1)
        if existing:
            person_id = existing[0].id
            logger.info(f"Found existing person: {person_id}")
            return person_id

        first_name, last_name = split_name(name)
        person = self.store.create_person(
            PersonCreate(
                name=FullName(first_name=first_name, last_name=last_name),
                emails=Emails(primary_email=email),
            )
        )
        logger.info(f"Created new person: {person.id}")
        return person.id
