"""
Google Calendar Schemas - The parts of the Events API the assistant reads.

Reference: https://developers.google.com/calendar/api/v3/reference/events
"""

from datetime import datetime
from typing import Optional, List

from pydantic import BaseModel, ConfigDict, Field

from jarvis.environments.base import ExternalEvent


class EventTime(BaseModel):
    """
    Event start or end time.

    Google Calendar API returns times in one of two formats:
    - dateTime: For timed events (e.g., "2024-01-15T10:00:00-03:00")
    - date: For all-day events (e.g., "2024-01-15")
    """
    model_config = ConfigDict(populate_by_name=True)

    date_time: Optional[datetime] = Field(None, alias="dateTime")
    date: Optional[str] = Field(None)  # YYYY-MM-DD format for all-day events
    time_zone: Optional[str] = Field(None, alias="timeZone")

    def is_all_day(self) -> bool:
        return self.date is not None and self.date_time is None

    def get_datetime(self) -> Optional[datetime]:
        if self.date_time:
            return self.date_time
        if self.date:
            return datetime.strptime(self.date, "%Y-%m-%d")
        return None


class CalendarEvent(BaseModel):
    """A Google Calendar event (only the fields we map)."""
    model_config = ConfigDict(populate_by_name=True)

    id: str
    summary: Optional[str] = None
    status: Optional[str] = None
    start: Optional[EventTime] = None
    end: Optional[EventTime] = None

    def to_external_event(self) -> Optional[ExternalEvent]:
        """Project onto ExternalEvent; None when the event has no start."""
        start = self.start.get_datetime() if self.start else None
        if start is None:
            return None
        return ExternalEvent(
            id=self.id,
            title=self.summary or "",
            start_time=start,
            end_time=self.end.get_datetime() if self.end else None,
            is_all_day=self.start.is_all_day(),
        )


class CalendarEventsResponse(BaseModel):
    """Response body of events.list."""
    model_config = ConfigDict(populate_by_name=True)

    items: List[CalendarEvent] = Field(default_factory=list)
    next_page_token: Optional[str] = Field(None, alias="nextPageToken")
    time_zone: Optional[str] = Field(None, alias="timeZone")
