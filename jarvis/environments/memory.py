"""
In-process collaborators.

Used when no Supabase/Google backend is configured (local development)
and as the default collaborators in tests. State lives only as long as
the instance.
"""

import logging
import uuid
from datetime import timezone
from typing import Any, Dict, List

from jarvis.environments.base import (
    CalendarCollaborator,
    CollaboratorResult,
    ExternalEvent,
    FinanceCollaborator,
)

logger = logging.getLogger("jarvis.environments.memory")


class InMemoryFinance(FinanceCollaborator):
    def __init__(self):
        self.transactions: List[Dict[str, Any]] = []

    async def create_transaction(self, fields: Dict[str, Any]) -> CollaboratorResult:
        record = {"id": str(uuid.uuid4()), "status": "completed", **fields}
        self.transactions.append(record)
        logger.info(f"Recorded transaction {record['id']} ({fields.get('type')} {fields.get('amount')})")
        return CollaboratorResult(data=record)


class InMemoryCalendar(CalendarCollaborator):
    def __init__(self, events: List[ExternalEvent] = None):
        self._events: Dict[str, ExternalEvent] = {e.id: e for e in (events or [])}

    async def list_events(self) -> List[ExternalEvent]:
        return sorted(self._events.values(), key=_sort_key)

    async def create_event(self, fields: Dict[str, Any]) -> CollaboratorResult:
        event_id = str(uuid.uuid4())
        event = ExternalEvent.from_dict({"id": event_id, **fields})
        self._events[event_id] = event
        return CollaboratorResult(data=event.to_dict())

    async def update_event(self, event_id: str, fields: Dict[str, Any]) -> CollaboratorResult:
        current = self._events.get(event_id)
        if current is None:
            return CollaboratorResult(error="Event not found")
        merged = {**current.to_dict(), **fields}
        self._events[event_id] = ExternalEvent.from_dict(merged)
        return CollaboratorResult(data=self._events[event_id].to_dict())

    async def delete_event(self, event_id: str) -> CollaboratorResult:
        if self._events.pop(event_id, None) is None:
            return CollaboratorResult(error="Event not found")
        return CollaboratorResult(data={"id": event_id})


def _sort_key(event: ExternalEvent) -> float:
    start = event.start_time
    # naive timestamps sort as UTC
    if start.tzinfo is None:
        start = start.replace(tzinfo=timezone.utc)
    return start.timestamp()
