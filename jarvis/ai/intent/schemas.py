"""
Intent Schemas - Pydantic models for commands and structured intents.

A CommandRequest is what the user sent (text or a photo plus context).
An Intent is what the model understood, as one of five closed variants:

    transaction   → TransactionIntent
    event         → EventCreateIntent
    task          → TaskCreateIntent
    delete_event  → EventDeleteIntent
    update_event  → EventUpdateIntent

The `action` field is the discriminator; IntentParser picks the class.
"""

import datetime as dt
from enum import Enum
from typing import Any, Dict, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError
import logging

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from jarvis.core.config import settings

logger = logging.getLogger("jarvis.ai.intent")


# ---------------------------------------------------------------------------
# REQUEST SIDE
# ---------------------------------------------------------------------------

class RequestKind(str, Enum):
    """How the user expressed the command."""
    TEXT = "text"
    IMAGE = "image"


class RequestContext(BaseModel):
    """
    Contextual metadata sent alongside the command.

    Accepts the wire names used by the web client (currentDate,
    timezone, familyId) as well as the python field names.
    """
    model_config = ConfigDict(populate_by_name=True)

    current_date: Optional[str] = Field(
        default=None,
        alias="currentDate",
        description="Client's notion of 'now', forwarded verbatim to the model",
    )
    timezone: Optional[str] = Field(default=None, description="IANA time zone name")
    family_id: str = Field(default="unknown", alias="familyId")

    @field_validator("family_id", mode="before")
    @classmethod
    def _default_family(cls, v):
        return v or "unknown"

    @property
    def timezone_name(self) -> str:
        """The effective zone name (request value if valid, else the default)."""
        return self.zone.key

    @property
    def zone(self) -> ZoneInfo:
        if self.timezone:
            try:
                return ZoneInfo(self.timezone)
            except (ZoneInfoNotFoundError, ValueError):
                logger.warning(f"Unknown timezone '{self.timezone}', using {settings.DEFAULT_TIMEZONE}")
        return ZoneInfo(settings.DEFAULT_TIMEZONE)

    def now(self) -> dt.datetime:
        """
        Current timestamp in the request zone.

        Uses currentDate when the client sent an ISO timestamp, otherwise
        the server clock.
        """
        if self.current_date:
            try:
                parsed = dt.datetime.fromisoformat(self.current_date)
                if parsed.tzinfo is None:
                    return parsed.replace(tzinfo=self.zone)
                return parsed.astimezone(self.zone)
            except ValueError:
                pass
        return dt.datetime.now(self.zone)

    def today(self) -> dt.date:
        return self.now().date()

    def display_now(self) -> str:
        """Human-readable 'now' for the prompt (pt-BR style when generated)."""
        if self.current_date:
            return self.current_date
        return self.now().strftime("%d/%m/%Y, %H:%M:%S")


class CommandRequest(BaseModel):
    """
    A single user interaction: free text (typed or dictated) or an image.

    Example:
        CommandRequest(kind="text", payload="Gastei 50 reais no Uber")
    """
    kind: RequestKind
    payload: str = Field(description="Raw text, or an image data URL / base64 blob")
    context: RequestContext = Field(default_factory=RequestContext)

    @field_validator("payload")
    @classmethod
    def _payload_not_empty(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("payload must not be empty")
        return v

    @property
    def is_image(self) -> bool:
        return self.kind == RequestKind.IMAGE


# ---------------------------------------------------------------------------
# INTENT SIDE
# ---------------------------------------------------------------------------

class IntentAction(str, Enum):
    """The five recognized action tags."""
    TRANSACTION = "transaction"
    EVENT = "event"
    TASK = "task"
    DELETE_EVENT = "delete_event"
    UPDATE_EVENT = "update_event"


class TransactionDirection(str, Enum):
    INCOME = "income"
    EXPENSE = "expense"


class PaymentMethod(str, Enum):
    CREDIT_CARD = "credit_card"
    CASH = "cash"
    PIX = "pix"


class Intent(BaseModel):
    """
    Base intent class - common fields for all intents.

    `confidence` is advisory: the dispatcher only looks at it when
    MIN_DISPATCH_CONFIDENCE is configured above zero.
    """
    action: IntentAction
    confidence: float = Field(default=0.0, ge=0.0, le=1.0, description="Confidence score 0-1")

    def wire_data(self) -> Dict[str, Any]:
        """Fields in the shape the web client expects under `data`."""
        raise NotImplementedError

    def to_wire(self) -> Dict[str, Any]:
        """Serialize to the {action, confidence, data} response shape."""
        return {
            "action": self.action.value,
            "confidence": self.confidence,
            "data": self.wire_data(),
        }


def _iso(value: Optional[Any]) -> Optional[str]:
    return value.isoformat() if value is not None else None


class TransactionIntent(Intent):
    """
    Income or expense to record.

    Example: "Gastei 50 reais no Uber" → expense, 50, "Uber", "Transporte"
    """
    action: IntentAction = IntentAction.TRANSACTION
    direction: TransactionDirection = TransactionDirection.EXPENSE
    amount: float = Field(gt=0)
    description: str = ""
    category: Optional[str] = None
    date: Optional[dt.date] = None
    payment_method: Optional[PaymentMethod] = None

    def wire_data(self) -> Dict[str, Any]:
        return {
            "type": self.direction.value,
            "amount": self.amount,
            "description": self.description,
            "category": self.category,
            "date": _iso(self.date),
            "payment_method": self.payment_method.value if self.payment_method else None,
        }


class EventCreateIntent(Intent):
    """New calendar event. Timestamps keep the offset the model produced."""
    action: IntentAction = IntentAction.EVENT
    title: str
    start: Optional[dt.datetime] = None
    end: Optional[dt.datetime] = None
    all_day: bool = False

    @model_validator(mode="after")
    def _start_before_end(self):
        # a naive value belongs to the request zone, unknown here; mixed
        # pairs are ordered by CalendarHandler once both are localized
        if self.start and self.end and not self.all_day:
            if (self.start.tzinfo is None) == (self.end.tzinfo is None) and self.start > self.end:
                raise ValueError("event start must not be after its end")
        return self

    def wire_data(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "start": _iso(self.start),
            "end": _iso(self.end),
            "allDay": self.all_day,
        }


class TaskCreateIntent(Intent):
    action: IntentAction = IntentAction.TASK
    title: str
    due_date: Optional[dt.datetime] = None

    def wire_data(self) -> Dict[str, Any]:
        return {"title": self.title, "due_date": _iso(self.due_date)}


class EventDeleteIntent(Intent):
    """Delete an existing event found by free-text reference."""
    action: IntentAction = IntentAction.DELETE_EVENT
    reference: str
    date_hint: Optional[dt.date] = None

    def wire_data(self) -> Dict[str, Any]:
        return {"original_reference": self.reference, "date": _iso(self.date_hint)}


class EventUpdateIntent(Intent):
    """Change title and/or times of an existing event found by reference."""
    action: IntentAction = IntentAction.UPDATE_EVENT
    reference: str
    new_title: Optional[str] = None
    new_start: Optional[dt.datetime] = None
    new_end: Optional[dt.datetime] = None
    date_hint: Optional[dt.date] = None

    @property
    def has_changes(self) -> bool:
        return any(v is not None for v in (self.new_title, self.new_start, self.new_end))

    def wire_data(self) -> Dict[str, Any]:
        data = {
            "original_reference": self.reference,
            "new_title": self.new_title,
            "new_start": _iso(self.new_start),
            "new_end": _iso(self.new_end),
        }
        if self.date_hint is not None:
            data["date"] = _iso(self.date_hint)
        return data


INTENT_CLASSES = {
    IntentAction.TRANSACTION: TransactionIntent,
    IntentAction.EVENT: EventCreateIntent,
    IntentAction.TASK: TaskCreateIntent,
    IntentAction.DELETE_EVENT: EventDeleteIntent,
    IntentAction.UPDATE_EVENT: EventUpdateIntent,
}
