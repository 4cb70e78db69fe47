"""
Google Calendar integration.

Usage:
    from jarvis.environments.google.calendar import GoogleCalendarClient

    client = GoogleCalendarClient(access_token="ya29.xxx")
    events = await client.list_events()
"""

from jarvis.environments.google.calendar.client import GoogleCalendarClient
from jarvis.environments.google.calendar.schemas import (
    CalendarEvent,
    CalendarEventsResponse,
    EventTime,
)

__all__ = [
    "GoogleCalendarClient",
    "CalendarEvent",
    "CalendarEventsResponse",
    "EventTime",
]
