"""
Intent Module - Natural Language Understanding for Jarvis.

Example Flow:
============
User says: "Cancelar reunião de amanhã"

Model answers (maybe wrapped in ```json fences):
{
    "action": "delete_event",
    "confidence": 0.9,
    "data": {"original_reference": "reunião", "date": "2024-05-11"}
}

extract_json + IntentParser produce:
EventDeleteIntent(reference="reunião", date_hint=date(2024, 5, 11))

EventResolver resolves:
"reunião" → ExternalEvent(id="evt-7", title="Reunião de equipe")
"""

from jarvis.ai.intent.schemas import (
    CommandRequest,
    RequestContext,
    RequestKind,
    Intent,
    IntentAction,
    TransactionIntent,
    EventCreateIntent,
    TaskCreateIntent,
    EventDeleteIntent,
    EventUpdateIntent,
)
from jarvis.ai.intent.extractor import extract_json
from jarvis.ai.intent.parser import IntentParser, intent_parser
from jarvis.ai.intent.event_resolver import EventResolver, event_resolver

__all__ = [
    "CommandRequest",
    "RequestContext",
    "RequestKind",
    "Intent",
    "IntentAction",
    "TransactionIntent",
    "EventCreateIntent",
    "TaskCreateIntent",
    "EventDeleteIntent",
    "EventUpdateIntent",
    "extract_json",
    "IntentParser",
    "intent_parser",
    "EventResolver",
    "event_resolver",
]
