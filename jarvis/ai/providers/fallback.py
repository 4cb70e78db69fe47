"""
Provider Client - OpenAI first, Gemini when OpenAI can't answer.

Attempt Order:
=============

┌──────────────────────────────────────────────────────────────┐
│                    CommandRequest                            │
│            "Gastei 50 reais no Uber" / photo                 │
└───────────────────────────┬──────────────────────────────────┘
                            │
                            ▼
┌──────────────────────────────────────────────────────────────┐
│  OpenAI (only if OPENAI_API_KEY is set)                      │
│    system = intent instruction, user = text or image         │
│    success + non-empty body → DONE                           │
└───────────────────────────┬──────────────────────────────────┘
                            │ error / timeout / empty body
                            ▼
┌──────────────────────────────────────────────────────────────┐
│  Gemini (only if GEMINI_API_KEY is set)                      │
│    single prompt = instruction + 'User Input: "..."'         │
│    success + non-empty body → DONE                           │
└───────────────────────────┬──────────────────────────────────┘
                            │
                            ▼
                  ProviderUnavailable

Each attempt gets its own AI_REQUEST_TIMEOUT. Providers don't raise,
so the decision to fall back only reads AIResponse.success.
"""

import asyncio
import logging
import time
import uuid
from typing import List, Optional

from jarvis.core.config import settings
from jarvis.core.errors import ProviderUnavailable
from jarvis.ai.intent.schemas import CommandRequest
from jarvis.ai.monitoring import AIMonitor, ai_monitor
from jarvis.ai.prompts.intent_prompts import (
    build_fallback_prompt,
    build_intent_system_prompt,
    build_user_prompt,
)
from jarvis.ai.providers.base import AIProvider, AIResponse, ImageInput
from jarvis.ai.providers.gemini import gemini_provider
from jarvis.ai.providers.openai_provider import openai_provider

logger = logging.getLogger("jarvis.ai.provider_client")


class ProviderClient:
    """
    Sends a command to the classifier backends with ordered fallback.

    Usage:
        client = ProviderClient()
        response = await client.classify(request)   # raises ProviderUnavailable
        print(response.provider, response.content)
    """

    def __init__(
        self,
        primary: AIProvider = None,
        fallback: AIProvider = None,
        timeout: float = None,
        monitor: AIMonitor = None,
    ):
        self.primary = primary or openai_provider
        self.fallback = fallback or gemini_provider
        self.timeout = timeout if timeout is not None else settings.AI_REQUEST_TIMEOUT
        self.monitor = monitor or ai_monitor

    async def classify(
        self,
        request: CommandRequest,
        request_id: Optional[str] = None,
    ) -> AIResponse:
        """
        Get raw classifier output for a request.

        Args:
            request: The user's text or image with its context
            request_id: Correlation id for logs (generated if omitted)

        Returns:
            The first successful, non-empty AIResponse

        Raises:
            ProviderUnavailable: both providers failed or neither is configured
        """
        request_id = request_id or str(uuid.uuid4())
        image = ImageInput.from_payload(request.payload) if request.is_image else None
        errors: List[str] = []

        if self.primary.is_configured:
            response = await self._attempt(
                self.primary,
                request_id,
                prompt=build_user_prompt(request),
                system_prompt=build_intent_system_prompt(request.context),
                image=image,
                is_fallback=False,
            )
            if response.success:
                return response
            errors.append(f"{response.provider.value}: {response.error}")
            logger.warning(f"Primary provider failed, trying fallback: {response.error}")
        else:
            logger.info("Primary provider not configured, skipping")

        if self.fallback.is_configured:
            response = await self._attempt(
                self.fallback,
                request_id,
                prompt=build_fallback_prompt(request),
                system_prompt=None,
                image=image,
                is_fallback=True,
            )
            if response.success:
                return response
            errors.append(f"{response.provider.value}: {response.error}")
        else:
            logger.info("Fallback provider not configured, skipping")

        if not errors:
            errors.append("No AI provider configured")

        self.monitor.track_error(
            request_id=request_id,
            error="; ".join(errors),
            stage="provider",
        )
        raise ProviderUnavailable("All AI providers failed", errors=errors)

    async def _attempt(
        self,
        provider: AIProvider,
        request_id: str,
        prompt: str,
        system_prompt: Optional[str],
        image: Optional[ImageInput],
        is_fallback: bool,
    ) -> AIResponse:
        """One provider call under the per-attempt timeout, tracked in the monitor."""
        self.monitor.track_request(
            request_id=request_id,
            prompt=prompt,
            provider=provider.provider_type.value,
            model=provider.model,
            metadata={"image": image is not None, "fallback": is_fallback},
        )

        start_time = time.time()
        try:
            response = await asyncio.wait_for(
                provider.generate_json(prompt, system_prompt=system_prompt, image=image),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError:
            response = provider._create_error_response(
                f"Timed out after {self.timeout}s",
                provider.model,
                provider._measure_latency(start_time),
            )

        if response.success and not response.content.strip():
            response.success = False
            response.error = "Empty response"

        self.monitor.track_response(request_id, response, is_fallback=is_fallback)
        return response


# ---------------------------------------------------------------------------
# SINGLETON INSTANCE
# ---------------------------------------------------------------------------
provider_client = ProviderClient()
