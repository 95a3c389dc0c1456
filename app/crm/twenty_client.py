from typing import Any, Dict, List, Optional

import httpx

from app.core.config import AppConfig, load_config
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


PERSON_FIELDS = "id name { firstName lastName } emails { primaryEmail }"

FIND_PEOPLE_QUERY = f"""
query FindPeopleByEmail($filter: PersonFilterInput, $first: Int) {{
  people(filter: $filter, first: $first) {{
    edges {{ node {{ {PERSON_FIELDS} }} }}
  }}
}}
"""

CREATE_PERSON_MUTATION = f"""
mutation CreatePerson($data: PersonCreateInput!) {{
  createPerson(data: $data) {{ {PERSON_FIELDS} }}
}}
"""

CREATE_CALENDAR_EVENT_MUTATION = """
mutation CreateCalendarEvent($data: CalendarEventCreateInput!) {
  createCalendarEvent(data: $data) {
    id title startsAt endsAt isFullDay isCanceled location description
  }
}
"""

CREATE_PARTICIPANT_MUTATION = """
mutation CreateCalendarEventParticipant($data: CalendarEventParticipantCreateInput!) {
  createCalendarEventParticipant(data: $data) {
    id calendarEventId personId responseStatus isOrganizer
  }
}
"""


class TwentyGraphQLClient:
    """Twenty CRM GraphQL client implementing the CrmStore capability."""

    def __init__(self, api_url: str, api_key: str, timeout_seconds: float = 10.0):
        self.api_url = api_url.rstrip("/")
        self.api_key = api_key
        self.timeout_seconds = timeout_seconds

    @property
    def graphql_url(self) -> str:
        return f"{self.api_url}/graphql"

    def _execute(self, operation: str, query: str, variables: Dict[str, Any]) -> Dict[str, Any]:
        """POST a GraphQL document and return the `data` field for `operation`."""
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        payload = {"query": query, "variables": variables}

        try:
            with httpx.Client(timeout=self.timeout_seconds) as client:
                response = client.post(self.graphql_url, headers=headers, json=payload)
        except httpx.HTTPError as exc:
            raise UpstreamError(f"Twenty request failed: {exc}", operation=operation) from exc

        if response.status_code == 401:
            raise UpstreamError("Twenty authentication failed", operation=operation, status_code=401)
        if response.status_code == 403:
            raise UpstreamError("Twenty permission denied", operation=operation, status_code=403)
        if response.status_code >= 400:
            raise UpstreamError(
                f"Twenty returned HTTP {response.status_code}",
                operation=operation,
                status_code=response.status_code,
            )

        try:
            body = response.json()
        except ValueError as exc:
            raise UpstreamError("Twenty returned a non-JSON response", operation=operation,
                                status_code=response.status_code) from exc

        errors = body.get("errors")
        if errors:
            messages = "; ".join(str(e.get("message", e)) for e in errors)
            raise UpstreamError(f"Twenty GraphQL error: {messages}", operation=operation,
                                status_code=response.status_code)

        data = (body.get("data") or {}).get(operation)
        if data is None:
            raise UpstreamError(f"Twenty response missing '{operation}'", operation=operation,
                                status_code=response.status_code)
        return data

    @staticmethod
    def _to_person(node: Dict[str, Any]) -> Person:
        name = node.get("name") or {}
        emails = node.get("emails") or {}
        return Person(
            id=node["id"],
            name=FullName(first_name=name.get("firstName") or "", last_name=name.get("lastName") or ""),
            emails=Emails(primary_email=emails.get("primaryEmail")),
        )

    def find_people_by_email(self, email: str, limit: int = 1) -> List[Person]:
        variables = {
            "filter": {"emails": {"primaryEmail": {"eq": email}}},
            "first": limit,
        }
        data = self._execute("people", FIND_PEOPLE_QUERY, variables)
        try:
            return [self._to_person(edge["node"]) for edge in data.get("edges", [])]
        except (KeyError, TypeError, AttributeError, ValueError) as exc:
            raise UpstreamError(f"Malformed people response: {exc}", operation="people") from exc

    def create_person(self, data: PersonCreate) -> Person:
        variables = {
            "data": {
                "name": {"firstName": data.name.first_name, "lastName": data.name.last_name},
                "emails": {"primaryEmail": data.emails.primary_email},
            }
        }
        node = self._execute("createPerson", CREATE_PERSON_MUTATION, variables)
        try:
            return self._to_person(node)
        except (KeyError, TypeError, AttributeError, ValueError) as exc:
            raise UpstreamError(f"Malformed createPerson response: {exc}", operation="createPerson") from exc

    def create_calendar_event(self, data: CalendarEventCreate) -> CalendarEvent:
        variables = {
            "data": {
                "title": data.title,
                "startsAt": data.starts_at,
                "endsAt": data.ends_at,
                "isFullDay": data.is_full_day,
                "isCanceled": data.is_canceled,
                "location": data.location,
                "description": data.description,
            }
        }
        node = self._execute("createCalendarEvent", CREATE_CALENDAR_EVENT_MUTATION, variables)
        if not isinstance(node, dict) or "id" not in node:
            raise UpstreamError("Malformed createCalendarEvent response", operation="createCalendarEvent")
        return CalendarEvent(id=node["id"], **data.model_dump())

    def create_calendar_event_participant(self, data: CalendarEventParticipantCreate) -> CalendarEventParticipant:
        variables = {
            "data": {
                "calendarEventId": data.calendar_event_id,
                "personId": data.person_id,
                "responseStatus": data.response_status,
                "isOrganizer": data.is_organizer,
            }
        }
        node = self._execute("createCalendarEventParticipant", CREATE_PARTICIPANT_MUTATION, variables)
        if not isinstance(node, dict) or "id" not in node:
            raise UpstreamError("Malformed createCalendarEventParticipant response",
                                operation="createCalendarEventParticipant")
        return CalendarEventParticipant(id=node["id"], **data.model_dump())


def create_twenty_client(config: Optional[AppConfig] = None) -> TwentyGraphQLClient:
    """Factory function to create TwentyGraphQLClient from configuration."""
    cfg = config or load_config()
    if not cfg.twenty_api_url or not cfg.twenty_api_key:
        raise ConfigurationError("Twenty configuration missing: TWENTY_API_URL and TWENTY_API_KEY required")

    return TwentyGraphQLClient(
        api_url=cfg.twenty_api_url,
        api_key=cfg.twenty_api_key,
        timeout_seconds=cfg.twenty_timeout_seconds,
    )
