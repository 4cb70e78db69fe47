"""
Jarvis Router - API endpoints for natural language commands.

Endpoints:
==========
POST /api/jarvis           text/image → intent wire object (the web client
                           decides what to do with it)
POST /api/jarvis/execute   text/image (+ event snapshot) → intent AND
                           dispatch outcome, in one round trip
GET  /api/jarvis/stats     AI usage statistics

This file does HTTP handling only; the pipeline lives in CommandSession.
"""

import datetime as dt
import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field, field_validator

from jarvis.ai.intent.schemas import CommandRequest, RequestContext, RequestKind
from jarvis.ai.monitoring import ai_monitor
from jarvis.core.config import settings
from jarvis.core.errors import MalformedIntent, ProviderUnavailable, UnknownAction
from jarvis.deps import get_command_session
from jarvis.environments.base import ExternalEvent
from jarvis.services.command_session import CommandSession


# ---------------------------------------------------------------------------
# LOGGER SETUP
# ---------------------------------------------------------------------------
logger = logging.getLogger("jarvis.routers.jarvis")


# ---------------------------------------------------------------------------
# ROUTER SETUP
# ---------------------------------------------------------------------------
router = APIRouter(prefix="/api/jarvis", tags=["jarvis"])

PROVIDER_ERROR = "Failed to process with Artificial Intelligence."
PARSE_ERROR = "Failed to parse AI response"
INTERNAL_ERROR = "Internal Server Error"


# ---------------------------------------------------------------------------
# REQUEST/RESPONSE SCHEMAS
# ---------------------------------------------------------------------------

class JarvisRequest(BaseModel):
    """
    Request schema for /api/jarvis.

    Example:
    {
        "type": "text",
        "content": "Gastei 50 reais no Uber",
        "context": {"currentDate": "2024-05-10T09:00:00-03:00",
                    "timezone": "America/Sao_Paulo", "familyId": "fam-1"}
    }
    """
    type: RequestKind = Field(description="'text' or 'image'")
    content: str = Field(..., min_length=1, description="Text, or image data URL / base64")
    context: RequestContext = Field(default_factory=RequestContext)

    @field_validator("content")
    @classmethod
    def _content_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("content must not be blank")
        return v

    def to_command(self) -> CommandRequest:
        return CommandRequest(kind=self.type, payload=self.content, context=self.context)


class EventSnapshot(BaseModel):
    """One existing event the client already has loaded."""
    id: str
    title: str = ""
    start_time: dt.datetime
    end_time: Optional[dt.datetime] = None
    is_all_day: bool = False

    def to_external(self) -> ExternalEvent:
        return ExternalEvent.from_dict(self.model_dump())


class ExecuteRequest(JarvisRequest):
    """
    Request schema for /api/jarvis/execute.

    `events` is optional; without it the configured calendar is queried
    when a delete/update needs to find its event.
    """
    events: Optional[List[EventSnapshot]] = Field(default=None)


class AIStatsResponse(BaseModel):
    """Response schema for /api/jarvis/stats."""
    total_requests: int
    successful_requests: int
    failed_requests: int
    fallback_requests: int
    success_rate: str
    total_tokens: int
    avg_latency_ms: float
    estimated_total_cost: str
    requests_by_provider: Dict[str, int]


# ---------------------------------------------------------------------------
# HELPER FUNCTIONS
# ---------------------------------------------------------------------------

def _error(message: str, exc: Optional[Exception] = None) -> JSONResponse:
    content: Dict[str, Any] = {"error": message}
    if settings.DEBUG and exc is not None:
        content["detail"] = str(exc)
    return JSONResponse(status_code=500, content=content)


# ---------------------------------------------------------------------------
# ENDPOINTS
# ---------------------------------------------------------------------------

@router.post("")
async def classify_command(
    request: JarvisRequest,
    session: CommandSession = Depends(get_command_session),
):
    """
    Classify a command into {action, confidence, data}.

    **Examples:**
    - "Gastei 50 reais no Uber"           → transaction
    - "Marcar dentista sexta às 14h"      → event
    - "Cancelar a reunião de amanhã"      → delete_event

    An unrecognized action still returns 200 with empty `data`, so the
    client can show its "didn't understand" message.
    """
    try:
        intent = await session.interpret(request.to_command())
        return intent.to_wire()

    except UnknownAction as e:
        logger.warning(f"Unknown action from model: {e.action!r}")
        return {"action": e.action, "confidence": e.confidence, "data": {}}

    except ProviderUnavailable as e:
        logger.error(f"All AI providers failed: {e.errors}")
        return _error(PROVIDER_ERROR, e)

    except MalformedIntent as e:
        logger.error(f"Could not parse AI response: {e}")
        return _error(PARSE_ERROR, e)

    except Exception as e:
        logger.error(f"Failed to process command: {e}", exc_info=True)
        return _error(INTERNAL_ERROR, e)


@router.post("/execute")
async def execute_command(
    request: ExecuteRequest,
    session: CommandSession = Depends(get_command_session),
):
    """
    Classify and execute a command.

    Always 200 for a valid body: failures are reported in `success` and
    `message`, ready to show as a toast.
    """
    events = [e.to_external() for e in request.events] if request.events is not None else None

    try:
        result = await session.run(request.to_command(), events=events)
        return result.to_dict()

    except Exception as e:
        logger.error(f"Failed to execute command: {e}", exc_info=True)
        return _error(INTERNAL_ERROR, e)


@router.get("/stats", response_model=AIStatsResponse)
async def get_ai_stats():
    """
    Get AI usage statistics.

    Returns aggregated metrics about AI usage including:
    - Total requests processed (and how many were fallbacks)
    - Success/failure rates
    - Token usage
    - Estimated costs
    """
    stats = ai_monitor.get_stats()
    return AIStatsResponse(
        total_requests=stats.total_requests,
        successful_requests=stats.successful_requests,
        failed_requests=stats.failed_requests,
        fallback_requests=stats.fallback_requests,
        success_rate=f"{stats.success_rate:.1f}%",
        total_tokens=stats.total_tokens,
        avg_latency_ms=round(stats.avg_latency_ms, 2),
        estimated_total_cost=f"${stats.estimated_total_cost:.4f}",
        requests_by_provider=stats.requests_by_provider,
    )
