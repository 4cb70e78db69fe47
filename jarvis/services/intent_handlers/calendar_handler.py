"""
Calendar Handler - Creates, deletes and updates calendar events.

Handles:
- EventCreateIntent: insert a new event
- EventDeleteIntent: resolve the reference, then delete
- EventUpdateIntent: resolve the reference, then PATCH only what changed

Delete/update flow:
===================
1. Candidates = caller snapshot, or calendar.list_events()
2. EventResolver picks one event by title substring
3. No match → EntityNotFound(reference) (the Dispatcher reports it)
4. Match → one collaborator call with that event's id
"""

import datetime as dt
import logging
from typing import Any, Dict, List, Optional, Tuple

from jarvis.ai.intent.event_resolver import event_resolver
from jarvis.ai.intent.schemas import (
    EventCreateIntent,
    EventDeleteIntent,
    EventUpdateIntent,
    IntentAction,
)
from jarvis.core.config import settings
from jarvis.core.errors import EntityNotFound
from jarvis.environments.base import ExternalEvent
from jarvis.services import messages
from jarvis.services.intent_handlers.base import HandlerContext, IntentHandler
from jarvis.services.intent_result import DispatchOutcome

logger = logging.getLogger("jarvis.services.intent_handlers.calendar")


class CalendarHandler(IntentHandler):
    """Handler for `event`, `delete_event` and `update_event` intents."""

    def __init__(self, resolver=None):
        self.resolver = resolver or event_resolver

    @property
    def handler_name(self) -> str:
        return "calendar"

    @property
    def supported_actions(self) -> List[str]:
        return [
            IntentAction.EVENT.value,
            IntentAction.DELETE_EVENT.value,
            IntentAction.UPDATE_EVENT.value,
        ]

    async def handle(self, intent: Any, context: HandlerContext) -> DispatchOutcome:
        self._log_entry(intent, context)

        if isinstance(intent, EventCreateIntent):
            outcome = await self._handle_create(intent, context)
        elif isinstance(intent, EventDeleteIntent):
            outcome = await self._handle_delete(intent, context)
        elif isinstance(intent, EventUpdateIntent):
            outcome = await self._handle_update(intent, context)
        else:
            outcome = DispatchOutcome(
                success=False,
                message="Unsupported intent type for CalendarHandler",
                action=intent.action.value,
            )

        self._log_exit(context, outcome)
        return outcome

    # -----------------------------------------------------------------------
    # CREATE
    # -----------------------------------------------------------------------

    async def _handle_create(self, intent: EventCreateIntent, context: HandlerContext) -> DispatchOutcome:
        window = self.event_window(intent, context)
        if window is None:
            return DispatchOutcome(
                success=False,
                message=messages.EVENT_MISSING_START,
                action=intent.action.value,
            )

        start, end = window
        if not intent.all_day and start > end:
            return DispatchOutcome(
                success=False,
                message=messages.EVENT_ENDS_BEFORE_START,
                action=intent.action.value,
            )

        fields = {
            "title": intent.title,
            "start_time": start.isoformat(),
            "end_time": end.isoformat(),
            "is_all_day": intent.all_day,
        }
        result = await context.collaborators.calendar.create_event(fields)
        return self._from_result(
            intent,
            result,
            messages.EVENT_CREATED.format(title=intent.title),
        )

    def event_window(
        self, intent: EventCreateIntent, context: HandlerContext
    ) -> Optional[Tuple[dt.datetime, dt.datetime]]:
        """
        Localized (start, end) for a new event, or None when a timed event has no start.

        - naive timestamps are read in the request zone
        - a missing end is start + DEFAULT_EVENT_DURATION_MINUTES
        - an all-day event with no start lands on today, at midnight
        """
        start = intent.start
        if start is None:
            if not intent.all_day:
                return None
            today = context.request_context.today()
            start = dt.datetime.combine(today, dt.time.min)
        start = context.localize(start)

        if intent.end is not None:
            end = context.localize(intent.end)
        elif intent.all_day:
            end = start
        else:
            end = start + dt.timedelta(minutes=settings.DEFAULT_EVENT_DURATION_MINUTES)

        return start, end

    # -----------------------------------------------------------------------
    # DELETE
    # -----------------------------------------------------------------------

    async def _handle_delete(self, intent: EventDeleteIntent, context: HandlerContext) -> DispatchOutcome:
        event = await self._resolve(intent.reference, intent.date_hint, context)

        result = await context.collaborators.calendar.delete_event(event.id)
        return self._from_result(
            intent,
            result,
            messages.EVENT_DELETED.format(title=event.title),
            entity_id=event.id,
        )

    # -----------------------------------------------------------------------
    # UPDATE
    # -----------------------------------------------------------------------

    async def _handle_update(self, intent: EventUpdateIntent, context: HandlerContext) -> DispatchOutcome:
        if not intent.has_changes:
            return DispatchOutcome(
                success=False,
                message=messages.EVENT_NOTHING_TO_CHANGE,
                action=intent.action.value,
            )

        new_start = context.localize(intent.new_start) if intent.new_start is not None else None
        new_end = context.localize(intent.new_end) if intent.new_end is not None else None
        if new_start is not None and new_end is not None and new_start > new_end:
            return DispatchOutcome(
                success=False,
                message=messages.EVENT_ENDS_BEFORE_START,
                action=intent.action.value,
            )

        event = await self._resolve(intent.reference, intent.date_hint, context)

        # partial payload: only what the user asked to change
        fields: Dict[str, Any] = {}
        if intent.new_title is not None:
            fields["title"] = intent.new_title
        if new_start is not None:
            fields["start_time"] = new_start.isoformat()
        if new_end is not None:
            fields["end_time"] = new_end.isoformat()
        if event.is_all_day and (new_start is not None or new_end is not None):
            fields["is_all_day"] = True

        result = await context.collaborators.calendar.update_event(event.id, fields)
        return self._from_result(
            intent,
            result,
            messages.EVENT_UPDATED.format(title=intent.new_title or event.title),
            entity_id=event.id,
        )

    # -----------------------------------------------------------------------
    # HELPERS
    # -----------------------------------------------------------------------

    async def _resolve(self, reference: str, date_hint, context: HandlerContext) -> ExternalEvent:
        candidates = await context.get_events()
        event = self.resolver.resolve(
            reference,
            candidates,
            date_hint=date_hint,
            zone=context.request_context.zone,
        )
        if event is None:
            raise EntityNotFound(reference)

        logger.info(f"[{context.request_id}] '{reference}' resolved to event {event.id}")
        return event
