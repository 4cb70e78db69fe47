"""
Task Handler - Placeholder until a task backend exists.

Task intents are classified and returned to the caller but never
stored. The outcome is informational, not an error.
"""

from typing import List

from jarvis.ai.intent.schemas import IntentAction, TaskCreateIntent
from jarvis.services import messages
from jarvis.services.intent_handlers.base import HandlerContext, IntentHandler
from jarvis.services.intent_result import DispatchOutcome


class TaskHandler(IntentHandler):
    """Handler for `task` intents."""

    @property
    def handler_name(self) -> str:
        return "task"

    @property
    def supported_actions(self) -> List[str]:
        return [IntentAction.TASK.value]

    async def handle(self, intent: TaskCreateIntent, context: HandlerContext) -> DispatchOutcome:
        self._log_entry(intent, context)
        outcome = DispatchOutcome(
            success=False,
            message=messages.TASK_NOT_IMPLEMENTED,
            action=intent.action.value,
            data=intent.wire_data(),
        )
        self._log_exit(context, outcome)
        return outcome
