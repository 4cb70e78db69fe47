"""
Tests for GoogleCalendarClient against an httpx.MockTransport.

No network: each test installs a handler that inspects the outgoing
request and returns a canned Events API response.
"""

import json
from datetime import datetime

import httpx
import pytest

from jarvis.environments.base import APIError
from jarvis.environments.google.calendar import CalendarEvent, GoogleCalendarClient


def make_client(handler, calendar_id="primary"):
    return GoogleCalendarClient(
        access_token="ya29.test",
        calendar_id=calendar_id,
        transport=httpx.MockTransport(handler),
    )


class Recorder:
    """MockTransport handler that stores requests and replays one response."""

    def __init__(self, status_code=200, payload=None):
        self.status_code = status_code
        self.payload = payload
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.payload is None:
            return httpx.Response(self.status_code)
        return httpx.Response(self.status_code, json=self.payload)

    @property
    def body(self):
        return json.loads(self.requests[-1].content)


class TestListEvents:

    @pytest.mark.asyncio
    async def test_maps_items_and_skips_cancelled(self):
        recorder = Recorder(payload={
            "items": [
                {
                    "id": "g1",
                    "summary": "Dentista",
                    "status": "confirmed",
                    "start": {"dateTime": "2024-05-10T14:00:00-03:00"},
                    "end": {"dateTime": "2024-05-10T15:00:00-03:00"},
                },
                {"id": "g2", "summary": "Velho", "status": "cancelled",
                 "start": {"dateTime": "2024-05-09T10:00:00-03:00"}},
                {"id": "g3", "summary": "Feriado", "start": {"date": "2024-05-30"},
                 "end": {"date": "2024-05-31"}},
                {"id": "g4", "summary": "Sem início"},
            ],
        })

        events = await make_client(recorder).list_events()

        assert [e.id for e in events] == ["g1", "g3"]
        assert events[0].title == "Dentista"
        assert events[0].start_time.isoformat() == "2024-05-10T14:00:00-03:00"
        assert events[1].is_all_day is True
        assert events[1].start_time == datetime(2024, 5, 30)

    @pytest.mark.asyncio
    async def test_request_shape(self):
        recorder = Recorder(payload={"items": []})

        await make_client(recorder, calendar_id="family@group.calendar.google.com").list_events()

        request = recorder.requests[0]
        assert request.method == "GET"
        assert request.url.path == "/calendar/v3/calendars/family@group.calendar.google.com/events"
        assert request.url.params["singleEvents"] == "true"
        assert request.url.params["orderBy"] == "startTime"
        assert "timeMin" in request.url.params
        assert request.headers["Authorization"] == "Bearer ya29.test"


class TestMutations:

    @pytest.mark.asyncio
    async def test_create_timed_event(self):
        recorder = Recorder(payload={
            "id": "new-1",
            "summary": "Dentista",
            "start": {"dateTime": "2024-05-17T14:00:00-03:00"},
            "end": {"dateTime": "2024-05-17T15:00:00-03:00"},
        })

        result = await make_client(recorder).create_event({
            "title": "Dentista",
            "start_time": "2024-05-17T14:00:00-03:00",
            "end_time": "2024-05-17T15:00:00-03:00",
            "is_all_day": False,
        })

        assert result.ok
        assert result.data["id"] == "new-1"
        assert result.data["title"] == "Dentista"
        assert recorder.requests[0].method == "POST"
        assert recorder.body == {
            "summary": "Dentista",
            "start": {"dateTime": "2024-05-17T14:00:00-03:00"},
            "end": {"dateTime": "2024-05-17T15:00:00-03:00"},
        }

    @pytest.mark.asyncio
    async def test_create_all_day_uses_exclusive_end_date(self):
        recorder = Recorder(payload={"id": "new-2", "start": {"date": "2024-05-30"}})

        await make_client(recorder).create_event({
            "title": "Feriado",
            "start_time": "2024-05-30T00:00:00-03:00",
            "end_time": "2024-05-30T00:00:00-03:00",
            "is_all_day": True,
        })

        assert recorder.body["start"] == {"date": "2024-05-30"}
        assert recorder.body["end"] == {"date": "2024-05-31"}

    @pytest.mark.asyncio
    async def test_update_patches_only_given_fields(self):
        recorder = Recorder(payload={"id": "g1", "summary": "Novo", "start": {"dateTime": "2024-05-10T14:00:00-03:00"}})

        result = await make_client(recorder).update_event("g1", {"title": "Novo"})

        assert result.data["title"] == "Novo"
        assert recorder.requests[0].method == "PATCH"
        assert recorder.requests[0].url.path.endswith("/events/g1")
        assert recorder.body == {"summary": "Novo"}

    @pytest.mark.asyncio
    async def test_update_timed_event_uses_datetime(self):
        recorder = Recorder(payload={"id": "g1", "summary": "Dentista"})

        await make_client(recorder).update_event("g1", {
            "start_time": "2024-05-17T14:00:00-03:00",
            "end_time": "2024-05-17T15:00:00-03:00",
        })

        assert recorder.body == {
            "start": {"dateTime": "2024-05-17T14:00:00-03:00"},
            "end": {"dateTime": "2024-05-17T15:00:00-03:00"},
        }

    @pytest.mark.asyncio
    async def test_update_all_day_event_keeps_date_form(self):
        recorder = Recorder(payload={"id": "g3", "summary": "Feriado"})

        await make_client(recorder).update_event("g3", {
            "start_time": "2024-06-01T00:00:00-03:00",
            "is_all_day": True,
        })

        assert recorder.body == {
            "start": {"date": "2024-06-01"},
            "end": {"date": "2024-06-02"},
        }

    @pytest.mark.asyncio
    async def test_update_all_day_end_only_is_exclusive(self):
        recorder = Recorder(payload={"id": "g3", "summary": "Férias"})

        await make_client(recorder).update_event("g3", {
            "end_time": "2024-06-05T00:00:00-03:00",
            "is_all_day": True,
        })

        assert recorder.body == {"end": {"date": "2024-06-06"}}

    @pytest.mark.asyncio
    async def test_delete_handles_204(self):
        recorder = Recorder(status_code=204)

        result = await make_client(recorder).delete_event("g1")

        assert result.ok
        assert result.data == {"id": "g1"}
        assert recorder.requests[0].method == "DELETE"


class TestErrors:

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status_code", [401, 403, 404, 500])
    async def test_http_errors_raise_api_error(self, status_code):
        recorder = Recorder(status_code=status_code, payload={"error": {"message": "nope"}})

        with pytest.raises(APIError) as exc_info:
            await make_client(recorder).delete_event("g1")

        assert exc_info.value.status_code == status_code

    @pytest.mark.asyncio
    async def test_network_error_raises_api_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(APIError) as exc_info:
            await make_client(handler).list_events()

        assert "Network error" in str(exc_info.value)


def test_event_without_start_has_no_projection():
    assert CalendarEvent(id="x", summary="?").to_external_event() is None
