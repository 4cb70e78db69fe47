"""
Dispatcher - Routes a validated intent to the right collaborator call.

    transaction   → TransactionHandler → finance.create_transaction
    event         → CalendarHandler    → calendar.create_event
    delete_event  → CalendarHandler    → resolve, calendar.delete_event
    update_event  → CalendarHandler    → resolve, calendar.update_event
    task          → TaskHandler        → (nothing, informational)

Whatever happens, dispatch() returns a DispatchOutcome:
- EntityNotFound becomes 'Evento "<reference>" não encontrado.'
- CollaboratorError (APIError included) carries the backend's message
- Nothing is retried
"""

import logging
import uuid
from typing import List, Optional

from jarvis.ai.intent.schemas import Intent, RequestContext
from jarvis.ai.monitoring import AIMonitor, ai_monitor
from jarvis.core.config import settings
from jarvis.core.errors import CollaboratorError, EntityNotFound
from jarvis.environments.base import Collaborators, ExternalEvent
from jarvis.services import messages
from jarvis.services.intent_handlers import (
    CalendarHandler,
    HandlerContext,
    IntentHandler,
    TaskHandler,
    TransactionHandler,
)
from jarvis.services.intent_result import DispatchOutcome

logger = logging.getLogger("jarvis.services.dispatcher")


class Dispatcher:
    """
    Handler registry plus the confidence gate.

    Usage:
        dispatcher = Dispatcher()
        outcome = await dispatcher.dispatch(intent, collaborators, events=snapshot)
        print(outcome.success, outcome.message)
    """

    def __init__(
        self,
        handlers: Optional[List[IntentHandler]] = None,
        min_confidence: float = None,
        monitor: AIMonitor = None,
    ):
        self.handlers = handlers if handlers is not None else [
            TransactionHandler(),
            CalendarHandler(),
            TaskHandler(),
        ]
        self.min_confidence = (
            min_confidence if min_confidence is not None else settings.MIN_DISPATCH_CONFIDENCE
        )
        self.monitor = monitor or ai_monitor

    async def dispatch(
        self,
        intent: Intent,
        collaborators: Collaborators,
        events: Optional[List[ExternalEvent]] = None,
        request_context: Optional[RequestContext] = None,
        request_id: Optional[str] = None,
    ) -> DispatchOutcome:
        """
        Execute one intent.

        Args:
            intent: Validated intent
            collaborators: Finance and calendar backends
            events: Event snapshot for reference resolution (None = fetch)
            request_context: Caller's zone and family (defaults apply if None)
            request_id: Correlation id for logs

        Returns:
            DispatchOutcome (never raises for collaborator or lookup failures)
        """
        request_id = request_id or str(uuid.uuid4())
        action = intent.action.value

        if intent.confidence < self.min_confidence:
            logger.info(
                f"[{request_id}] {action} held for confirmation "
                f"(confidence {intent.confidence:.2f} < {self.min_confidence:.2f})"
            )
            return DispatchOutcome(
                success=False,
                message=messages.NEEDS_CONFIRMATION,
                action=action,
                requires_confirmation=True,
                data=intent.wire_data(),
            )

        context = HandlerContext(
            collaborators=collaborators,
            request_context=request_context or RequestContext(),
            request_id=request_id,
            events=events,
        )
        handler = self._find_handler(intent, context)

        try:
            outcome = await handler.handle(intent, context)
        except EntityNotFound as e:
            outcome = DispatchOutcome(
                success=False,
                message=messages.EVENT_NOT_FOUND.format(reference=e.reference),
                action=action,
            )
        except CollaboratorError as e:
            logger.error(f"[{request_id}] Collaborator failed for {action}: {e}")
            outcome = DispatchOutcome(success=False, message=str(e), action=action)

        self.monitor.track_dispatch(
            request_id=request_id,
            action=action,
            success=outcome.success,
            entity_id=outcome.affected_entity_id,
            error=None if outcome.success else outcome.message,
        )
        return outcome

    def _find_handler(self, intent: Intent, context: HandlerContext) -> IntentHandler:
        for handler in self.handlers:
            if handler.can_handle(intent, context):
                return handler
        # the action set is closed, so this only trips on a misconfigured registry
        raise LookupError(f"No handler registered for action {intent.action.value!r}")


# ---------------------------------------------------------------------------
# SINGLETON INSTANCE
# ---------------------------------------------------------------------------
dispatcher = Dispatcher()
