"""
Intent Handlers Package - Strategy pattern for intent dispatch.

One handler per family of actions:
- TransactionHandler: transaction
- CalendarHandler: event, delete_event, update_event
- TaskHandler: task (informational only)

Usage:
    from jarvis.services.intent_handlers import IntentHandler, HandlerContext

    class MyHandler(IntentHandler):
        @property
        def handler_name(self) -> str:
            return "my_handler"

        @property
        def supported_actions(self) -> List[str]:
            return ["my_action"]

        async def handle(self, intent, context) -> DispatchOutcome:
            ...
"""

from jarvis.services.intent_handlers.base import (
    IntentHandler,
    HandlerContext,
)
from jarvis.services.intent_handlers.transaction_handler import TransactionHandler
from jarvis.services.intent_handlers.calendar_handler import CalendarHandler
from jarvis.services.intent_handlers.task_handler import TaskHandler

__all__ = [
    "IntentHandler",
    "HandlerContext",
    "TransactionHandler",
    "CalendarHandler",
    "TaskHandler",
]
