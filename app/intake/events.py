import logging
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional
from zoneinfo import ZoneInfo

from app.crm.store import CrmStore
from app.crm.types import CalendarEventCreate
from app.intake.constants import (
    DEFAULT_EVENT_DURATION_SECONDS,
    DEFAULT_EVENT_LOCATION,
    DEFAULT_EVENT_TITLE,
    DESCRIPTION_TEMPLATE,
)

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def to_canonical(dt: datetime) -> str:
    """Format an aware datetime as UTC ISO-8601 with milliseconds, e.g. 2025-01-15T14:30:00.000Z."""
    utc = dt.astimezone(timezone.utc)
    return utc.strftime("%Y-%m-%dT%H:%M:%S.") + f"{utc.microsecond // 1000:03d}Z"


def parse_timestamp(value: Optional[str], default_tz: str = "UTC") -> Optional[datetime]:
    """
    Parse an ISO-8601 date or datetime string.

    Naive values are interpreted in `default_tz`. Returns None for missing
    or unparsable input.
    """
    if not value or not value.strip():
        return None
    try:
        dt = datetime.fromisoformat(value.strip().replace("Z", "+00:00").replace("z", "+00:00"))
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=ZoneInfo(default_tz))
        # Instants outside datetime's range after conversion count as unparsable
        return dt.astimezone(timezone.utc)
    except (ValueError, OverflowError):
        return None


class EventCreator:
    """Creates one calendar event per call; events are never looked up or deduplicated."""

    def __init__(self, store: CrmStore, clock: Clock = utc_now, default_tz: str = "UTC"):
        self.store = store
        self.clock = clock
        self.default_tz = default_tz

    def build_event(
        self,
        title: Optional[str],
        start_time: Optional[str],
        end_time: Optional[str],
        location: Optional[str],
        description: Optional[str],
        context_email: str,
    ) -> CalendarEventCreate:
        now = self.clock()
        start = parse_timestamp(start_time, self.default_tz)
        end = parse_timestamp(end_time, self.default_tz)

        if start_time and start is None:
            logger.warning(f"Unparsable startTime {start_time!r}, defaulting to now")
        if end_time and end is None:
            logger.warning(f"Unparsable endTime {end_time!r}, defaulting to now + 1h")

        # The default end is anchored to the invocation time, not to the resolved start
        return CalendarEventCreate(
            title=title if title is not None else DEFAULT_EVENT_TITLE,
            starts_at=to_canonical(start or now),
            ends_at=to_canonical(end or now + timedelta(seconds=DEFAULT_EVENT_DURATION_SECONDS)),
            is_full_day=False,
            is_canceled=False,
            location=location if location is not None else DEFAULT_EVENT_LOCATION,
            description=description if description is not None else DESCRIPTION_TEMPLATE.format(email=context_email),
        )

    def create_event(
        self,
        title: Optional[str] = None,
        start_time: Optional[str] = None,
        end_time: Optional[str] = None,
        location: Optional[str] = None,
        description: Optional[str] = None,
        context_email: str = "",
    ) -> str:
        data = self.build_event(title, start_time, end_time, location, description, context_email)
        event = self.store.create_calendar_event(data)
        logger.info(f"Created calendar event: {event.id}")
        return event.id
