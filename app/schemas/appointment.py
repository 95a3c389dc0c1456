from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class AppointmentPayload(BaseModel):
    """Inbound booking payload. Every field is optional at the schema level."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    name: Optional[str] = None
    email: Optional[str] = None
    title: Optional[str] = None
    start_time: Optional[str] = Field(default=None, alias="startTime")
    end_time: Optional[str] = Field(default=None, alias="endTime")
    location: Optional[str] = None
    description: Optional[str] = None


class AppointmentResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    person_id: str = Field(alias="personId")
    event_id: str = Field(alias="eventId")
    participant_id: str = Field(alias="participantId")


class AppointmentErrorResponse(BaseModel):
    success: bool = False
    error: str
    detail: str
