"""
Transaction Handler - Records incomes and expenses.

Every transaction intent is an insert; the finance backend owns
balances, invoices and categories.
"""

import logging
from typing import Any, Dict, List

from jarvis.ai.intent.schemas import IntentAction, TransactionIntent
from jarvis.services import messages
from jarvis.services.intent_handlers.base import HandlerContext, IntentHandler
from jarvis.services.intent_result import DispatchOutcome

logger = logging.getLogger("jarvis.services.intent_handlers.transaction")


class TransactionHandler(IntentHandler):
    """Handler for `transaction` intents."""

    @property
    def handler_name(self) -> str:
        return "transaction"

    @property
    def supported_actions(self) -> List[str]:
        return [IntentAction.TRANSACTION.value]

    async def handle(self, intent: TransactionIntent, context: HandlerContext) -> DispatchOutcome:
        self._log_entry(intent, context)

        fields = self.build_fields(intent, context)
        result = await context.collaborators.finance.create_transaction(fields)
        outcome = self._from_result(intent, result, messages.TRANSACTION_CREATED)

        self._log_exit(context, outcome)
        return outcome

    @staticmethod
    def build_fields(intent: TransactionIntent, context: HandlerContext) -> Dict[str, Any]:
        """
        Row for the finance backend.

        amount, description and date are passed as the model produced
        them; a missing date means today in the caller's zone.
        """
        day = intent.date or context.request_context.today()
        family_id = context.request_context.family_id

        return {
            "type": intent.direction.value,
            "amount": intent.amount,
            "description": intent.description,
            "category": intent.category,
            "date": day.isoformat(),
            "payment_method": intent.payment_method.value if intent.payment_method else None,
            "family_id": family_id if family_id != "unknown" else None,
        }
