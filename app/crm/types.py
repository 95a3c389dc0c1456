from typing import Literal, Optional

from pydantic import BaseModel


ResponseStatus = Literal["NEEDS_ACTION", "ACCEPTED", "DECLINED", "TENTATIVE"]


class FullName(BaseModel):
    first_name: str = ""
    last_name: str = ""


class Emails(BaseModel):
    primary_email: Optional[str] = None


class Person(BaseModel):
    id: str
    name: FullName = FullName()
    emails: Emails = Emails()


class PersonCreate(BaseModel):
    name: FullName
    emails: Emails


class CalendarEventCreate(BaseModel):
    title: str
    starts_at: str  # canonical UTC ISO string, e.g. 2025-01-15T14:30:00.000Z
    ends_at: str
    is_full_day: bool = False
    is_canceled: bool = False
    location: str = ""
    description: str = ""


class CalendarEvent(CalendarEventCreate):
    id: str


class CalendarEventParticipantCreate(BaseModel):
    calendar_event_id: str
    person_id: str
    response_status: ResponseStatus = "ACCEPTED"
    is_organizer: bool = False


class CalendarEventParticipant(CalendarEventParticipantCreate):
    id: str
