"""
Intent handler contract.

Each handler owns one family of actions and turns a validated Intent into
at most one collaborator call. The Dispatcher asks every registered handler
`can_handle()` and runs the first that says yes:

    handler = CalendarHandler()
    if handler.can_handle(intent, context):
        outcome = await handler.handle(intent, context)

Handlers return DispatchOutcome for expected failures (backend rejected
the call, nothing to change). EntityNotFound and a raised
CollaboratorError propagate; the Dispatcher turns them into outcomes.
"""

import datetime as dt
import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import List, Optional

from jarvis.ai.intent.schemas import Intent, RequestContext
from jarvis.environments.base import CollaboratorResult, Collaborators, ExternalEvent
from jarvis.services.intent_result import DispatchOutcome

logger = logging.getLogger("jarvis.services.intent_handlers")


@dataclass
class HandlerContext:
    """
    Per-request state handed to every handler.

    Attributes:
        collaborators: Finance and calendar backends
        request_context: Caller's zone, "now" and family
        request_id: Correlation id for log lines
        events: Event snapshot from the client; None means "ask the calendar"
        start_time: When dispatch began, for the exit log
    """

    collaborators: Collaborators
    request_context: RequestContext = field(default_factory=RequestContext)
    request_id: str = ""
    events: Optional[List[ExternalEvent]] = None
    start_time: float = field(default_factory=time.time)

    async def get_events(self) -> List[ExternalEvent]:
        """The snapshot if one was supplied, else the calendar's current list."""
        if self.events is not None:
            return self.events
        return await self.collaborators.calendar.list_events()

    def localize(self, value: dt.datetime) -> dt.datetime:
        """Attach the request zone to naive timestamps; aware ones are kept."""
        if value.tzinfo is None:
            return value.replace(tzinfo=self.request_context.zone)
        return value


class IntentHandler(ABC):
    """
    One strategy per action family.

    Subclasses declare `supported_actions` and implement `handle`; they
    never parse model output and never see HTTP.
    """

    @property
    @abstractmethod
    def handler_name(self) -> str:
        """Short name used in log lines."""
        pass

    @property
    @abstractmethod
    def supported_actions(self) -> List[str]:
        """IntentAction values this handler can process."""
        pass

    def can_handle(self, intent: Intent, context: HandlerContext) -> bool:
        return intent.action.value in self.supported_actions

    @abstractmethod
    async def handle(self, intent: Intent, context: HandlerContext) -> DispatchOutcome:
        """
        Process the intent and return an outcome.

        Collaborator rejections come back as failure outcomes. A raised
        CollaboratorError is left for the Dispatcher to convert.
        """
        pass

    # -----------------------------------------------------------------------
    # SHARED HELPERS
    # -----------------------------------------------------------------------

    def _from_result(
        self,
        intent: Intent,
        result: CollaboratorResult,
        success_message: str,
        entity_id: Optional[str] = None,
    ) -> DispatchOutcome:
        """Turn a collaborator {data, error} pair into an outcome."""
        if not result.ok:
            return DispatchOutcome(
                success=False,
                message=result.error,
                action=intent.action.value,
                affected_entity_id=entity_id,
            )

        data = result.data if isinstance(result.data, dict) else None
        if entity_id is None and data and data.get("id") is not None:
            entity_id = str(data["id"])

        return DispatchOutcome(
            success=True,
            message=success_message,
            action=intent.action.value,
            affected_entity_id=entity_id,
            data=data,
        )

    def _log_entry(self, intent: Intent, context: HandlerContext) -> None:
        logger.info(
            f"[{context.request_id}] {self.handler_name} <- {intent.action.value}",
            extra={"handler": self.handler_name, "family_id": context.request_context.family_id},
        )

    def _log_exit(self, context: HandlerContext, outcome: DispatchOutcome) -> None:
        elapsed_ms = (time.time() - context.start_time) * 1000
        logger.info(
            f"[{context.request_id}] {self.handler_name} -> "
            f"{'ok' if outcome.success else 'failed'} in {elapsed_ms:.0f}ms",
            extra={"handler": self.handler_name, "success": outcome.success},
        )
