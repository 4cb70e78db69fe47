"""
Supabase Clients - Transactions and events over PostgREST.

The web app keeps its data in two Supabase tables:

    transactions  (type, amount, description, category, date,
                   payment_method, family_id, status, ...)
    events        (id, title, start_time, end_time, is_all_day, ...)

Both clients speak plain PostgREST through httpx, so no Supabase SDK is
needed:

    insert  → POST   /rest/v1/{table}              Prefer: return=representation
    select  → GET    /rest/v1/{table}?order=start_time.asc
    update  → PATCH  /rest/v1/{table}?id=eq.{id}
    delete  → DELETE /rest/v1/{table}?id=eq.{id}

Error Handling:
===============
- Network errors, 401/403 and 5xx raise APIError
- Other 4xx (constraint violations, bad columns) come back as
  CollaboratorResult(error=<PostgREST message>)
"""

import logging
from typing import Any, Dict, List, Optional

import httpx

from jarvis.core.config import settings
from jarvis.environments.base import (
    APIError,
    CalendarCollaborator,
    CollaboratorResult,
    ExternalEvent,
    FinanceCollaborator,
)


logger = logging.getLogger("jarvis.environments.supabase")


class SupabaseRestClient:
    """
    Shared PostgREST plumbing for the Supabase collaborators.

    Attributes:
        url: Project URL, e.g. https://xyz.supabase.co
        key: Service-role or anon key (sent as apikey and bearer token)
    """

    table: str = ""

    def __init__(
        self,
        url: str = None,
        key: str = None,
        timeout: float = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.url = (url or settings.SUPABASE_URL).rstrip("/")
        self.key = key or settings.SUPABASE_KEY
        self.timeout = timeout if timeout is not None else settings.COLLABORATOR_TIMEOUT
        self._transport = transport

    def _get_headers(self) -> dict:
        return {
            "apikey": self.key,
            "Authorization": f"Bearer {self.key}",
            "Accept": "application/json",
            "Prefer": "return=representation",
        }

    @property
    def _endpoint(self) -> str:
        return f"{self.url}/rest/v1/{self.table}"

    async def _make_request(
        self,
        method: str,
        params: Optional[dict] = None,
        json_body: Any = None,
    ) -> httpx.Response:
        """
        Make an authenticated PostgREST request against this client's table.

        Raises:
            APIError: On network failure, auth failure or server error
        """
        async with httpx.AsyncClient(transport=self._transport) as client:
            try:
                response = await client.request(
                    method=method,
                    url=self._endpoint,
                    headers=self._get_headers(),
                    params=params,
                    json=json_body,
                    timeout=self.timeout,
                )
            except httpx.RequestError as e:
                logger.error(f"Network error in Supabase API: {e}")
                raise APIError(f"Network error: {e}")

        if response.status_code in (401, 403):
            logger.error(f"Supabase API: access denied ({response.status_code})")
            raise APIError(
                "Access denied - check SUPABASE_KEY",
                status_code=response.status_code,
                response=response.text,
            )

        if response.status_code >= 500:
            logger.error(f"Supabase API error: {response.status_code} - {response.text}")
            raise APIError(
                f"API request failed: {response.text}",
                status_code=response.status_code,
                response=response.text,
            )

        return response

    @staticmethod
    def _to_result(response: httpx.Response) -> CollaboratorResult:
        """Map a PostgREST response to {data, error}."""
        body = response.json() if response.content else None

        if response.status_code >= 400:
            message = body.get("message") if isinstance(body, dict) else None
            message = message or response.text or f"HTTP {response.status_code}"
            logger.warning(f"Supabase rejected request: {message}")
            return CollaboratorResult(error=message)

        # return=representation gives back a list of affected rows
        if isinstance(body, list):
            body = body[0] if body else None
        return CollaboratorResult(data=body)


class SupabaseFinanceClient(SupabaseRestClient, FinanceCollaborator):
    """Inserts rows into the `transactions` table."""

    table = "transactions"

    async def create_transaction(self, fields: Dict[str, Any]) -> CollaboratorResult:
        row = {k: v for k, v in fields.items() if v is not None}
        logger.info(f"Inserting transaction: {row.get('type')} {row.get('amount')}")
        response = await self._make_request("POST", json_body=[row])
        return self._to_result(response)


class SupabaseCalendarClient(SupabaseRestClient, CalendarCollaborator):
    """Reads and writes the `events` table."""

    table = "events"

    async def list_events(self) -> List[ExternalEvent]:
        response = await self._make_request(
            "GET",
            params={"select": "*", "order": "start_time.asc"},
        )
        if response.status_code >= 400:
            raise APIError(
                f"Could not list events: {response.text}",
                status_code=response.status_code,
                response=response.text,
            )
        rows = response.json() or []
        return [ExternalEvent.from_dict(row) for row in rows if row.get("start_time")]

    async def create_event(self, fields: Dict[str, Any]) -> CollaboratorResult:
        logger.info(f"Inserting event: {fields.get('title')}")
        response = await self._make_request("POST", json_body=[fields])
        return self._to_result(response)

    async def update_event(self, event_id: str, fields: Dict[str, Any]) -> CollaboratorResult:
        logger.info(f"Updating event {event_id}: {sorted(fields)}")
        response = await self._make_request(
            "PATCH",
            params={"id": f"eq.{event_id}"},
            json_body=fields,
        )
        result = self._to_result(response)
        if result.ok and result.data is None:
            return CollaboratorResult(error="Event not found")
        return result

    async def delete_event(self, event_id: str) -> CollaboratorResult:
        logger.info(f"Deleting event {event_id}")
        response = await self._make_request("DELETE", params={"id": f"eq.{event_id}"})
        result = self._to_result(response)
        if result.ok and result.data is None:
            return CollaboratorResult(error="Event not found")
        return result
