"""
Gemini Provider - google-genai client, the fallback classifier.

Used when OpenAI is unconfigured or its attempt failed, and for the
monthly finance insights. Calls go through the SDK's async surface
(client.aio) so ProviderClient's per-attempt timeout can cancel them.

Gemini gets the intent instruction merged into the prompt text (see
build_fallback_prompt); photos ride along as an inline-bytes Part.
"""

import logging
import time
from typing import Any, List, Optional

from google import genai
from google.genai import types

from jarvis.core.config import settings
from jarvis.ai.providers.base import (
    AIProvider,
    AIResponse,
    ImageInput,
    ProviderType,
    TokenUsage,
)

logger = logging.getLogger("jarvis.ai.gemini")


class GeminiProvider(AIProvider):
    provider_type = ProviderType.GEMINI

    def __init__(self, model: str = None, api_key: str = None, client: Any = None):
        self.model = model or settings.GEMINI_MODEL
        self.api_key = api_key if api_key is not None else settings.GEMINI_API_KEY
        self._client = client

        if self._client is None and self.api_key:
            self._client = genai.Client(api_key=self.api_key)
            logger.info(f"Gemini provider ready ({self.model})")
        elif self._client is None:
            logger.warning("GEMINI_API_KEY not set - fallback provider and insights disabled")

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
        config = types.GenerateContentConfig(
            temperature=temperature,
            max_output_tokens=max_tokens,
            system_instruction=system_prompt,
        )
        return await self._call(prompt, config)

    async def generate_json(
        self,
        prompt: str,
        system_prompt: Optional[str] = None,
        image: Optional[ImageInput] = None,
        **kwargs
    ) -> AIResponse:
        """
        JSON completion via response_mime_type.

        The text is returned untouched (apart from surrounding whitespace);
        fence stripping belongs to extract_json.
        """
        config = types.GenerateContentConfig(
            temperature=0.2,
            max_output_tokens=1024,
            response_mime_type="application/json",
            system_instruction=system_prompt,
        )

        start_time = time.time()
        contents: List[Any] = [prompt]
        if image is not None:
            try:
                contents.append(types.Part.from_bytes(data=image.to_bytes(), mime_type=image.mime_type))
            except ValueError as e:
                return self._create_error_response(str(e), self.model, self._measure_latency(start_time))

        response = await self._call(contents, config)
        response.metadata["multimodal"] = image is not None
        return response

    async def _call(self, contents: Any, config: types.GenerateContentConfig) -> AIResponse:
        """One generate_content call; every failure comes back as an AIResponse."""
        start_time = time.time()
        if self._client is None:
            return self._create_error_response("Gemini API key not configured", self.model)

        try:
            result = await self._client.aio.models.generate_content(
                model=self.model,
                contents=contents,
                config=config,
            )
        except Exception as e:
            return self._create_error_response(str(e), self.model, self._measure_latency(start_time))

        latency_ms = self._measure_latency(start_time)
        content = (result.text or "").strip()
        if not content:
            return self._create_error_response("Empty response", self.model, latency_ms)

        # usage_metadata is None when the API doesn't report it
        meta = getattr(result, "usage_metadata", None)
        usage = TokenUsage(
            prompt_tokens=(meta.prompt_token_count or 0) if meta else 0,
            completion_tokens=(meta.candidates_token_count or 0) if meta else 0,
        )
        logger.info(f"Gemini answered in {latency_ms:.0f}ms ({usage.total_tokens} tokens)")

        return AIResponse(
            content=content,
            provider=self.provider_type,
            model=self.model,
            usage=usage,
            latency_ms=latency_ms,
            raw_response=result,
        )


# ---------------------------------------------------------------------------
# SINGLETON INSTANCE
# ---------------------------------------------------------------------------
gemini_provider = GeminiProvider()
