"""
Intent Parser - Validates model JSON into typed Intent objects.

The model is trusted to roughly follow the contract in the system
prompt, so validation is lenient field by field and strict only where it
matters:

1. Text must be a JSON object            → MalformedIntent otherwise
2. `action` must be one of five tags     → UnknownAction otherwise
3. `amount` on a transaction must be a positive number (numeric
   strings such as "50,90" are accepted) → MalformedIntent otherwise
4. Everything else is projected onto the variant; unknown keys are
   ignored, unparseable optional values are left unset.

Example:
    parser = IntentParser()
    intent = parser.validate('{"action": "transaction", "confidence": 0.9, '
                             '"data": {"type": "expense", "amount": 50, '
                             '"description": "Uber"}}')
    assert isinstance(intent, TransactionIntent)
"""

import datetime as dt
import json
import logging
import re
from typing import Optional, Dict, Any

from pydantic import ValidationError

from jarvis.core.errors import MalformedIntent, UnknownAction
from jarvis.ai.intent.extractor import extract_json
from jarvis.ai.intent.schemas import (
    Intent,
    IntentAction,
    TransactionIntent,
    EventCreateIntent,
    TaskCreateIntent,
    EventDeleteIntent,
    EventUpdateIntent,
    TransactionDirection,
    PaymentMethod,
)

logger = logging.getLogger("jarvis.ai.intent")

DEFAULT_EVENT_TITLE = "Sem título"

# Guesses the model produces for payment_method, normalized
PAYMENT_METHOD_ALIASES = {
    "credit_card": PaymentMethod.CREDIT_CARD,
    "credit": PaymentMethod.CREDIT_CARD,
    "card": PaymentMethod.CREDIT_CARD,
    "cartao": PaymentMethod.CREDIT_CARD,
    "cartão": PaymentMethod.CREDIT_CARD,
    "cash": PaymentMethod.CASH,
    "wallet": PaymentMethod.CASH,
    "dinheiro": PaymentMethod.CASH,
    "pix": PaymentMethod.PIX,
}

INCOME_ALIASES = {"income", "receita", "entrada"}

_NUMBER_JUNK_RE = re.compile(r"[^\d,.\-]")


class IntentParser:
    """
    Parses model output into structured intents.

    Usage:
        parser = IntentParser()
        intent = parser.parse_response(ai_response.content)

        if isinstance(intent, EventDeleteIntent):
            print(f"Delete: {intent.reference}")
    """

    def parse_response(self, raw: str) -> Intent:
        """Extract the JSON object from raw model text, then validate it."""
        return self.validate(extract_json(raw))

    def validate(self, json_text: str) -> Intent:
        """
        Validate a JSON document into an Intent variant.

        Raises:
            MalformedIntent: not JSON, not an object, bad amount, or a
                variant-level constraint failed (e.g. start after end)
            UnknownAction: action outside the five recognized tags
        """
        try:
            payload = json.loads(json_text)
        except (json.JSONDecodeError, TypeError) as e:
            logger.warning(f"Failed to parse intent JSON: {e}")
            raise MalformedIntent(f"Invalid JSON: {e}", raw=json_text) from e

        if not isinstance(payload, dict):
            raise MalformedIntent("Intent JSON must be an object", raw=json_text)

        confidence = self._coerce_confidence(payload.get("confidence"))
        action_value = payload.get("action")

        try:
            action = IntentAction(str(action_value).strip().lower())
        except ValueError:
            logger.info(f"Unrecognized action: {action_value!r}")
            raise UnknownAction(action_value, confidence)

        data = payload.get("data")
        if not isinstance(data, dict):
            # Some responses put the fields next to "action" instead of under "data"
            data = {k: v for k, v in payload.items() if k not in ("action", "confidence", "data")}

        try:
            intent = self._create_intent(action, data, confidence)
        except ValidationError as e:
            logger.warning(f"Intent failed validation: {e}")
            raise MalformedIntent(f"Invalid {action.value} fields: {e}", raw=json_text) from e

        logger.info(f"Parsed intent: {intent.action.value} (confidence={intent.confidence:.2f})")
        return intent

    # -----------------------------------------------------------------------
    # VARIANT BUILDERS
    # -----------------------------------------------------------------------

    def _create_intent(self, action: IntentAction, data: Dict[str, Any], confidence: float) -> Intent:
        if action == IntentAction.TRANSACTION:
            return self._create_transaction(data, confidence)
        elif action == IntentAction.EVENT:
            return self._create_event(data, confidence)
        elif action == IntentAction.TASK:
            return TaskCreateIntent(
                confidence=confidence,
                title=self._coerce_str(data.get("title")) or "",
                due_date=self._coerce_datetime(data.get("due_date") or data.get("dueDate")),
            )
        elif action == IntentAction.DELETE_EVENT:
            return EventDeleteIntent(
                confidence=confidence,
                reference=self._reference(data),
                date_hint=self._coerce_date(data.get("date")),
            )
        else:
            return EventUpdateIntent(
                confidence=confidence,
                reference=self._reference(data),
                new_title=self._coerce_str(data.get("new_title")),
                new_start=self._coerce_datetime(data.get("new_start")),
                new_end=self._coerce_datetime(data.get("new_end")),
                date_hint=self._coerce_date(data.get("date")),
            )

    def _create_transaction(self, data: Dict[str, Any], confidence: float) -> TransactionIntent:
        raw_amount = data.get("amount")
        try:
            amount = self._coerce_number(raw_amount)
        except (TypeError, ValueError) as e:
            raise MalformedIntent(f"Transaction amount is not a number: {raw_amount!r}") from e

        if amount <= 0:
            raise MalformedIntent(f"Transaction amount must be positive: {raw_amount!r}")

        kind = str(data.get("type") or "").strip().lower()
        direction = TransactionDirection.INCOME if kind in INCOME_ALIASES else TransactionDirection.EXPENSE

        method = str(data.get("payment_method") or data.get("paymentMethod") or "").strip().lower()

        return TransactionIntent(
            confidence=confidence,
            direction=direction,
            amount=amount,
            description=self._coerce_str(data.get("description")) or "",
            category=self._coerce_str(data.get("category")),
            date=self._coerce_date(data.get("date")),
            payment_method=PAYMENT_METHOD_ALIASES.get(method),
        )

    def _create_event(self, data: Dict[str, Any], confidence: float) -> EventCreateIntent:
        all_day = data.get("allDay", data.get("all_day", False))
        return EventCreateIntent(
            confidence=confidence,
            title=self._coerce_str(data.get("title")) or DEFAULT_EVENT_TITLE,
            start=self._coerce_datetime(data.get("start")),
            end=self._coerce_datetime(data.get("end")),
            all_day=self._coerce_bool(all_day),
        )

    def _reference(self, data: Dict[str, Any]) -> str:
        value = data.get("original_reference") or data.get("reference") or data.get("title")
        return self._coerce_str(value) or ""

    # -----------------------------------------------------------------------
    # COERCION HELPERS
    # -----------------------------------------------------------------------

    @staticmethod
    def _coerce_number(value: Any) -> float:
        """
        Accept 50, 50.9, "50", "50.90", "50,90", "R$ 1.234,56".

        Raises:
            ValueError / TypeError when no number can be read
        """
        if isinstance(value, bool) or value is None:
            raise TypeError(f"not a number: {value!r}")
        if isinstance(value, (int, float)):
            return float(value)

        text = _NUMBER_JUNK_RE.sub("", str(value))
        if "," in text and "." in text:
            # whichever separator comes last is the decimal one
            if text.rfind(",") > text.rfind("."):
                text = text.replace(".", "").replace(",", ".")
            else:
                text = text.replace(",", "")
        elif "," in text:
            text = text.replace(",", ".")
        return float(text)

    def _coerce_confidence(self, value: Any) -> float:
        try:
            confidence = self._coerce_number(value)
        except (TypeError, ValueError):
            return 0.0
        return min(max(confidence, 0.0), 1.0)

    @staticmethod
    def _coerce_str(value: Any) -> Optional[str]:
        if value is None:
            return None
        text = str(value).strip()
        return text or None

    @staticmethod
    def _coerce_bool(value: Any) -> bool:
        if isinstance(value, str):
            return value.strip().lower() in ("true", "1", "yes", "sim")
        return bool(value)

    @staticmethod
    def _coerce_datetime(value: Any) -> Optional[dt.datetime]:
        if not value:
            return None
        if isinstance(value, dt.datetime):
            return value
        try:
            return dt.datetime.fromisoformat(str(value).strip().replace("Z", "+00:00"))
        except ValueError:
            logger.warning(f"Ignoring unparseable timestamp: {value!r}")
            return None

    @staticmethod
    def _coerce_date(value: Any) -> Optional[dt.date]:
        if not value:
            return None
        if isinstance(value, dt.datetime):
            return value.date()
        try:
            # Accept both "2026-10-19" and "2026-10-19T10:00:00-03:00"
            return dt.date.fromisoformat(str(value).strip()[:10])
        except ValueError:
            logger.warning(f"Ignoring unparseable date: {value!r}")
            return None


# ---------------------------------------------------------------------------
# SINGLETON INSTANCE
# ---------------------------------------------------------------------------
intent_parser = IntentParser()
