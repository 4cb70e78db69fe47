"""
OpenAI Provider - Chat Completions client, the primary classifier.

Tried first whenever OPENAI_API_KEY is set. JSON mode keeps the output
machine-readable and the system role keeps the intent contract apart
from whatever the user typed. Photos go in as an `image_url` part
carrying the data URL, next to a short text instruction.

API Documentation: https://platform.openai.com/docs/api-reference/chat
"""

import json
import logging
import time
from typing import Any, Dict, List, Optional

from openai import AsyncOpenAI

from jarvis.core.config import settings
from jarvis.ai.providers.base import (
    AIProvider,
    AIResponse,
    ImageInput,
    ProviderType,
    TokenUsage,
)

logger = logging.getLogger("jarvis.ai.openai")

# Text part that accompanies an uploaded image
IMAGE_INSTRUCTION = "Analyze this image for financial data or events."

JSON_TEMPERATURE = 0.2


class OpenAIProvider(AIProvider):
    """
    Usage:
        provider = OpenAIProvider()
        response = await provider.generate_json(
            "Gastei 50 reais no Uber",
            system_prompt=build_intent_system_prompt(context),
        )

        # photo of a receipt
        response = await provider.generate_json(
            "", system_prompt=..., image=ImageInput.from_payload(data_url),
        )
    """

    provider_type = ProviderType.OPENAI

    def __init__(self, model: str = None, api_key: str = None, client: Any = None):
        """
        Args:
            model: defaults to settings.OPENAI_MODEL
            api_key: defaults to settings.OPENAI_API_KEY
            client: ready-made AsyncOpenAI (tests pass a mock)
        """
        self.model = model or settings.OPENAI_MODEL
        self.api_key = api_key if api_key is not None else settings.OPENAI_API_KEY
        self._client = client

        if self._client is None and self.api_key:
            self._client = AsyncOpenAI(api_key=self.api_key)
            logger.info(f"OpenAI provider ready ({self.model})")
        elif self._client is None:
            logger.warning("OPENAI_API_KEY not set - primary provider disabled")

    @property
    def is_configured(self) -> bool:
        return self._client is not None

    async def generate(
        self,
        prompt: str,
        system_prompt: Optional[str] = None,
        temperature: float = 0.7,
        max_tokens: int = 1024,
        **kwargs
    ) -> AIResponse:
        messages: List[Dict[str, Any]] = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": prompt})

        return await self._complete(messages, temperature=temperature, max_tokens=max_tokens)

    async def generate_json(
        self,
        prompt: str,
        system_prompt: Optional[str] = None,
        image: Optional[ImageInput] = None,
        **kwargs
    ) -> AIResponse:
        """
        JSON-mode completion. Output that does not parse as JSON is
        reported as a failure so ProviderClient moves on to the fallback.
        """
        messages = [
            {"role": "system", "content": system_prompt or ""},
            {"role": "user", "content": self._user_content(prompt, image)},
        ]

        response = await self._complete(
            messages,
            temperature=JSON_TEMPERATURE,
            max_tokens=1024,
            response_format={"type": "json_object"},
        )
        if not response.success:
            return response

        try:
            json.loads(response.content)
        except json.JSONDecodeError as e:
            logger.warning(f"OpenAI JSON mode returned unparseable text: {e}")
            return self._create_error_response(f"Invalid JSON response: {e}", self.model, response.latency_ms)

        response.metadata["multimodal"] = image is not None
        return response

    async def _complete(self, messages: List[Dict[str, Any]], **options) -> AIResponse:
        """One chat.completions call; every failure comes back as an AIResponse."""
        start_time = time.time()
        if self._client is None:
            return self._create_error_response("OpenAI API key not configured", self.model)

        try:
            completion = await self._client.chat.completions.create(
                model=self.model,
                messages=messages,
                **options,
            )
        except Exception as e:
            return self._create_error_response(str(e), self.model, self._measure_latency(start_time))

        latency_ms = self._measure_latency(start_time)
        content = completion.choices[0].message.content or ""
        if not content.strip():
            return self._create_error_response("Empty response", self.model, latency_ms)

        usage = completion.usage
        token_usage = TokenUsage(
            prompt_tokens=usage.prompt_tokens if usage else 0,
            completion_tokens=usage.completion_tokens if usage else 0,
        )
        logger.info(f"OpenAI answered in {latency_ms:.0f}ms ({token_usage.total_tokens} tokens)")

        return AIResponse(
            content=content,
            provider=self.provider_type,
            model=self.model,
            usage=token_usage,
            latency_ms=latency_ms,
            raw_response=completion,
        )

    @staticmethod
    def _user_content(prompt: str, image: Optional[ImageInput]) -> Any:
        if image is None:
            return prompt
        return [
            {"type": "text", "text": prompt or IMAGE_INSTRUCTION},
            {"type": "image_url", "image_url": {"url": image.data_url}},
        ]


# ---------------------------------------------------------------------------
# SINGLETON INSTANCE
# ---------------------------------------------------------------------------
openai_provider = OpenAIProvider()
