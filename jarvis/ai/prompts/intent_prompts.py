"""
Intent Prompts - The fixed instruction that turns user input into one
of five structured actions.

The same instruction is sent to both providers. OpenAI receives it as
the system message; Gemini receives it merged into a single prompt
(see build_fallback_prompt) since the user turn carries the input.

Prompt Engineering Techniques:
=============================
1. Closed action set with exact per-action field contracts
2. Context injection (now, time zone, family) so relative dates resolve
3. Offset rule: timestamps carry the caller's UTC offset, never "Z"
   unless the user asked for UTC
4. Keyword hints for Portuguese verbs that separate create/update/delete
"""

from jarvis.ai.intent.schemas import CommandRequest, RequestContext


INTENT_SYSTEM_PROMPT = """You are a financial and personal assistant named Jarvis.
Analyze the user input and extract structured data to perform an action.

Current Context:
Date: {current_date}
Timezone: {timezone}
Family ID: {family_id}

Possible Actions:
1. 'transaction': For expenses, incomes, transfers.
2. 'event': For creating NEW calendar events.
3. 'task': For to-do items.
4. 'delete_event': For cancelling or removing existing events.
5. 'update_event': For rescheduling or changing event details.

Output JSON format only, no markdown:
{{
    "action": "transaction" | "event" | "task" | "delete_event" | "update_event",
    "confidence": number (0-1),
    "data": {{ ...specific fields... }}
}}

For 'transaction':
fields: type ('income'|'expense'), amount (number), description (string), category (string guess), date (ISO string YYYY-MM-DD), payment_method (guess: 'credit_card'|'cash'|'pix').

For 'event' (Create):
fields: title (string), start (ISO string with timezone offset, e.g. "2023-10-27T10:00:00-03:00"), end (ISO string with offset), allDay (boolean).
IMPORTANT: Use the Timezone from context to calculate the correct ISO offset. Do not return UTC (Z) unless the user asks for UTC.

For 'task':
fields: title (string), due_date (ISO string with timezone offset).

For 'delete_event':
fields: original_reference (string: title or description to find the event), date (optional ISO string YYYY-MM-DD if specified, helps disambiguate).

For 'update_event':
fields: original_reference (string), new_title (optional), new_start (optional ISO with offset), new_end (optional ISO with offset), date (optional YYYY-MM-DD of the existing event).

Logic Tips:
- "cancelar", "excluir", "apagar" -> delete_event
- "remarcar", "mudar", "alterar" -> update_event
- "agendar", "marcar" -> event (create)
- original_reference should be the shortest distinctive words of the event title (e.g. "reunião", "dentista"), without dates or articles.
"""

# Text that stands in for the input when the user sent a photo
IMAGE_PLACEHOLDER = "See attached image"


def build_intent_system_prompt(context: RequestContext) -> str:
    """Fill the fixed instruction with the request context."""
    return INTENT_SYSTEM_PROMPT.format(
        current_date=context.display_now(),
        timezone=context.timezone_name,
        family_id=context.family_id,
    )


def build_user_prompt(request: CommandRequest) -> str:
    """The user turn: raw text, or empty for images (the provider adds its own caption)."""
    return "" if request.is_image else request.payload


def build_fallback_prompt(request: CommandRequest) -> str:
    """
    Single-prompt form for providers without a distinct system role.

    Example:
        <system instruction>

        User Input: "Gastei 50 reais no Uber"
    """
    user_input = IMAGE_PLACEHOLDER if request.is_image else request.payload
    return f'{build_intent_system_prompt(request.context)}\n\nUser Input: "{user_input}"'
