"""
Command Session - One user interaction from input to outcome.

    CommandRequest (text or image + context)
        │
        ▼  ProviderClient.classify        → ProviderUnavailable
    raw model text
        │
        ▼  extract_json
    JSON candidate
        │
        ▼  IntentParser.validate          → MalformedIntent / UnknownAction
    Intent
        │
        ▼  Dispatcher.dispatch            (EntityNotFound, CollaboratorError
    DispatchOutcome                        already folded into the outcome)

run() never raises for these errors; each one becomes a Portuguese
message for the UI. interpret() stops after validation and lets them
propagate, for callers that only want the intent (POST /api/jarvis).
"""

import logging
import time
import uuid
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from jarvis.ai.intent.extractor import extract_json
from jarvis.ai.intent.parser import IntentParser, intent_parser
from jarvis.ai.intent.schemas import CommandRequest, Intent
from jarvis.ai.monitoring import AIMonitor, ai_monitor
from jarvis.ai.providers.base import AIResponse
from jarvis.ai.providers.fallback import ProviderClient, provider_client
from jarvis.core.errors import (
    CollaboratorError,
    EntityNotFound,
    MalformedIntent,
    ProviderUnavailable,
    UnknownAction,
)
from jarvis.environments.base import Collaborators, ExternalEvent
from jarvis.services import messages
from jarvis.services.dispatcher import Dispatcher, dispatcher as default_dispatcher
from jarvis.services.intent_result import DispatchOutcome

logger = logging.getLogger("jarvis.services.command_session")


@dataclass
class SessionResult:
    """
    What the UI gets back for one command.

    Attributes:
        success: True only when the collaborator call succeeded
        message: Toast text for the user
        intent: Wire form of the understood intent (None if none)
        outcome: Dispatch outcome (None if we never got to dispatch)
        provider: Which AI backend answered ("openai"/"gemini")
        error: Error class name when the pipeline stopped early
        request_id: Correlation id used in the logs
        processing_time_ms: End-to-end time
    """
    success: bool
    message: str
    intent: Optional[Dict[str, Any]] = None
    outcome: Optional[DispatchOutcome] = None
    provider: Optional[str] = None
    error: Optional[str] = None
    request_id: str = ""
    processing_time_ms: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "message": self.message,
            "intent": self.intent,
            "outcome": self.outcome.to_dict() if self.outcome else None,
            "provider": self.provider,
            "error": self.error,
            "request_id": self.request_id,
            "processing_time_ms": round(self.processing_time_ms, 2),
        }


class CommandSession:
    """
    Orchestrates classify → extract → validate → dispatch.

    Usage:
        session = CommandSession(collaborators=Collaborators(finance, calendar))
        result = await session.run(
            CommandRequest(kind="text", payload="Gastei 50 reais no Uber"),
        )
        print(result.message)
    """

    def __init__(
        self,
        collaborators: Collaborators,
        client: ProviderClient = None,
        parser: IntentParser = None,
        dispatcher: Dispatcher = None,
        monitor: AIMonitor = None,
    ):
        self.collaborators = collaborators
        self.client = client or provider_client
        self.parser = parser or intent_parser
        self.dispatcher = dispatcher or default_dispatcher
        self.monitor = monitor or ai_monitor

    async def interpret(self, request: CommandRequest, request_id: Optional[str] = None) -> Intent:
        """
        Classify a request into a validated Intent.

        Raises:
            ProviderUnavailable: no provider produced output
            MalformedIntent: output is not a usable intent
            UnknownAction: output names an action outside the five tags
        """
        request_id = request_id or str(uuid.uuid4())
        start_time = time.time()
        response = await self._classify(request, request_id)
        return self._validate(response, request_id, start_time)

    async def _classify(self, request: CommandRequest, request_id: str) -> AIResponse:
        response = await self.client.classify(request, request_id=request_id)
        logger.info(f"[{request_id}] Raw output from {response.provider.value}: {response.content}")
        return response

    def _validate(self, response: AIResponse, request_id: str, start_time: float) -> Intent:
        try:
            intent = self.parser.validate(extract_json(response.content))
        except (MalformedIntent, UnknownAction) as e:
            self.monitor.track_error(
                request_id=request_id,
                error=str(e),
                stage="validation",
                metadata={"provider": response.provider.value, "raw": response.content},
            )
            raise

        self.monitor.track_intent(
            request_id=request_id,
            action=intent.action.value,
            confidence=intent.confidence,
            processing_time_ms=(time.time() - start_time) * 1000,
        )
        return intent

    async def run(
        self,
        request: CommandRequest,
        events: Optional[List[ExternalEvent]] = None,
    ) -> SessionResult:
        """
        Process one command end to end.

        Args:
            request: The user's input and context
            events: Optional snapshot of existing events for delete/update

        Returns:
            SessionResult; taxonomy errors are reported, not raised
        """
        request_id = str(uuid.uuid4())
        start_time = time.time()
        provider = None

        def finish(**kwargs) -> SessionResult:
            return SessionResult(
                request_id=request_id,
                provider=provider,
                processing_time_ms=(time.time() - start_time) * 1000,
                **kwargs,
            )

        try:
            response = await self._classify(request, request_id)
        except ProviderUnavailable as e:
            logger.error(f"[{request_id}] No provider available: {e.errors}")
            return finish(success=False, message=messages.PROVIDER_UNAVAILABLE, error="ProviderUnavailable")

        provider = response.provider.value
        try:
            intent = self._validate(response, request_id, start_time)
        except UnknownAction as e:
            logger.warning(f"[{request_id}] {e}")
            return finish(success=False, message=messages.UNKNOWN_ACTION, error="UnknownAction")
        except MalformedIntent as e:
            logger.warning(f"[{request_id}] {e}")
            return finish(success=False, message=messages.MALFORMED_INTENT, error="MalformedIntent")

        try:
            outcome = await self.dispatcher.dispatch(
                intent,
                self.collaborators,
                events=events,
                request_context=request.context,
                request_id=request_id,
            )
        except EntityNotFound as e:
            # Dispatcher folds these into outcomes; kept for custom dispatchers
            return finish(
                success=False,
                message=messages.EVENT_NOT_FOUND.format(reference=e.reference),
                intent=intent.to_wire(),
                error="EntityNotFound",
            )
        except CollaboratorError as e:
            return finish(success=False, message=str(e), intent=intent.to_wire(), error="CollaboratorError")

        return finish(
            success=outcome.success,
            message=outcome.message,
            intent=intent.to_wire(),
            outcome=outcome,
        )
