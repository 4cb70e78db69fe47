"""
Google Calendar API Client - The calendar collaborator backed by Google.

Maps the four CalendarCollaborator operations onto the Events API:

    list_events   → GET    /calendars/{id}/events
    create_event  → POST   /calendars/{id}/events
    update_event  → PATCH  /calendars/{id}/events/{eventId}
    delete_event  → DELETE /calendars/{id}/events/{eventId}

Payload fields (title, start_time, end_time, is_all_day) are translated
to Google's shape (summary, start.dateTime / start.date, ...).

API Reference:
==============
- Events API: https://developers.google.com/calendar/api/v3/reference/events

Usage Example:
==============
    client = GoogleCalendarClient(access_token="ya29.xxx")
    events = await client.list_events()
    result = await client.delete_event(events[0].id)
"""

import logging
from datetime import date, datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

import httpx

from jarvis.core.config import settings
from jarvis.environments.base import (
    APIError,
    CalendarCollaborator,
    CollaboratorResult,
    ExternalEvent,
)
from jarvis.environments.google.calendar.schemas import CalendarEvent, CalendarEventsResponse


logger = logging.getLogger("jarvis.environments.google.calendar")


class GoogleCalendarClient(CalendarCollaborator):
    """
    Google Calendar API client.

    Requires an access token with the calendar.events scope.

    Attributes:
        access_token: Google OAuth access token
        calendar_id: Calendar to operate on ("primary" by default)
    """

    required_scopes = [
        "https://www.googleapis.com/auth/calendar.events",
    ]

    BASE_URL = "https://www.googleapis.com/calendar/v3"

    # How far back list_events looks, so "cancel yesterday's meeting" still resolves
    LOOKBACK_DAYS = 30
    MAX_RESULTS = 250

    def __init__(
        self,
        access_token: str,
        calendar_id: str = None,
        timeout: float = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Build a client for one calendar.

        Args:
            access_token: Valid Google OAuth access token
            calendar_id: Calendar identifier (default: settings.GOOGLE_CALENDAR_ID)
            timeout: Seconds per HTTP call (default: settings.COLLABORATOR_TIMEOUT)
            transport: Optional httpx transport (tests pass a MockTransport)
        """
        self.access_token = access_token
        self.calendar_id = calendar_id or settings.GOOGLE_CALENDAR_ID
        self.timeout = timeout if timeout is not None else settings.COLLABORATOR_TIMEOUT
        self._transport = transport

    # -------------------------------------------------------------------------
    # HTTP
    # -------------------------------------------------------------------------

    # Statuses that mean the token itself is the problem
    AUTH_ERRORS = {
        401: "Unauthorized - Google token expired or revoked",
        403: "Forbidden - token lacks the calendar.events scope",
    }

    async def _make_request(
        self,
        method: str,
        endpoint: str,
        params: Optional[dict] = None,
        json_body: Optional[dict] = None,
    ) -> Optional[dict]:
        """
        Call the Events API and decode the JSON body.

        Returns:
            The decoded body, or None when Google sends no content (DELETE)

        Raises:
            APIError: network failure or any non-2xx status
        """
        headers = {"Authorization": f"Bearer {self.access_token}", "Accept": "application/json"}

        try:
            async with httpx.AsyncClient(transport=self._transport, timeout=self.timeout) as http:
                response = await http.request(
                    method,
                    self.BASE_URL + endpoint,
                    headers=headers,
                    params=params,
                    json=json_body,
                )
        except httpx.RequestError as e:
            logger.error(f"Google Calendar unreachable: {e}")
            raise APIError(f"Network error: {e}")

        status = response.status_code
        if status in self.AUTH_ERRORS:
            logger.error(f"Google Calendar rejected credentials ({status})")
            raise APIError(self.AUTH_ERRORS[status], status_code=status, response=response.text)
        if not response.is_success:
            logger.error(f"Google Calendar {method} {endpoint} failed: {status} {response.text}")
            raise APIError(
                f"Google Calendar request failed ({status}): {response.text}",
                status_code=status,
                response=response.text,
            )

        return response.json() if response.content else None

    # -------------------------------------------------------------------------
    # CALENDAR COLLABORATOR
    # -------------------------------------------------------------------------

    async def list_events(self) -> List[ExternalEvent]:
        """Events from LOOKBACK_DAYS ago onward, ordered by start time."""
        time_min = datetime.now(timezone.utc) - timedelta(days=self.LOOKBACK_DAYS)
        params = {
            "timeMin": time_min.isoformat(),
            "maxResults": self.MAX_RESULTS,
            "singleEvents": "true",
            "orderBy": "startTime",
        }

        data = await self._make_request("GET", f"/calendars/{self.calendar_id}/events", params=params)
        parsed = CalendarEventsResponse.model_validate(data or {})

        events = []
        for item in parsed.items:
            if item.status == "cancelled":
                continue
            event = item.to_external_event()
            if event is not None:
                events.append(event)

        logger.info(f"Fetched {len(events)} events from calendar '{self.calendar_id}'")
        return events

    async def create_event(self, fields: Dict[str, Any]) -> CollaboratorResult:
        body = {"summary": fields.get("title") or ""}
        body.update(self._time_body(fields))

        logger.info(f"Creating calendar event: {body['summary']}")
        data = await self._make_request(
            "POST",
            f"/calendars/{self.calendar_id}/events",
            json_body=body,
        )
        return CollaboratorResult(data=self._result_data(data))

    async def update_event(self, event_id: str, fields: Dict[str, Any]) -> CollaboratorResult:
        """PATCH only the supplied fields; Google keeps the rest."""
        body: Dict[str, Any] = {}
        if "title" in fields:
            body["summary"] = fields["title"]

        if fields.get("is_all_day"):
            # all-day events keep the `date` form; Google rejects a dateTime here
            if fields.get("start_time"):
                body.update(self._time_body(fields))
            elif fields.get("end_time"):
                end_day = date.fromisoformat(fields["end_time"][:10]) + timedelta(days=1)
                body["end"] = {"date": end_day.isoformat()}
        else:
            if fields.get("start_time"):
                body["start"] = {"dateTime": fields["start_time"]}
            if fields.get("end_time"):
                body["end"] = {"dateTime": fields["end_time"]}

        logger.info(f"Updating calendar event {event_id}: {sorted(body)}")
        data = await self._make_request(
            "PATCH",
            f"/calendars/{self.calendar_id}/events/{event_id}",
            json_body=body,
        )
        return CollaboratorResult(data=self._result_data(data))

    async def delete_event(self, event_id: str) -> CollaboratorResult:
        logger.info(f"Deleting calendar event {event_id}")
        await self._make_request("DELETE", f"/calendars/{self.calendar_id}/events/{event_id}")
        return CollaboratorResult(data={"id": event_id})

    # -------------------------------------------------------------------------
    # HELPERS
    # -------------------------------------------------------------------------

    @staticmethod
    def _time_body(fields: Dict[str, Any]) -> Dict[str, Any]:
        """
        Build start/end for a new event.

        All-day events use the `date` form with an exclusive end date,
        so a single-day event ends on the following day.
        """
        start = fields.get("start_time")
        end = fields.get("end_time")

        if fields.get("is_all_day"):
            start_day = date.fromisoformat(start[:10])
            end_day = date.fromisoformat(end[:10]) if end else start_day
            if end_day <= start_day:
                end_day = start_day + timedelta(days=1)
            return {
                "start": {"date": start_day.isoformat()},
                "end": {"date": end_day.isoformat()},
            }

        body = {"start": {"dateTime": start}}
        if end:
            body["end"] = {"dateTime": end}
        return body

    @staticmethod
    def _result_data(data: Optional[dict]) -> Optional[Dict[str, Any]]:
        if not data:
            return data
        event = CalendarEvent.model_validate(data).to_external_event()
        return event.to_dict() if event else data
