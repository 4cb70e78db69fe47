"""
Tests for AI Providers - Base classes and mocked SDK calls.

This module tests:
- TokenUsage / AIResponse dataclasses
- ImageInput data URL handling
- OpenAIProvider message building, JSON mode and failure reporting
- GeminiProvider prompt/image parts and failure reporting

SDK clients are replaced with mocks, so tests are:
- Fast (no network calls)
- Reliable (no API flakiness)
- Free (no token costs)
"""

import base64
import json
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from jarvis.ai.providers.base import (
    AIResponse,
    ImageInput,
    ProviderType,
    TokenUsage,
)
from jarvis.ai.providers.gemini import GeminiProvider
from jarvis.ai.providers.openai_provider import IMAGE_INSTRUCTION, OpenAIProvider


# ---------------------------------------------------------------------------
# HELPERS
# ---------------------------------------------------------------------------

def openai_completion(content, prompt_tokens=100, completion_tokens=20):
    return SimpleNamespace(
        choices=[SimpleNamespace(message=SimpleNamespace(content=content))],
        usage=SimpleNamespace(prompt_tokens=prompt_tokens, completion_tokens=completion_tokens),
    )


def openai_client(completion=None, error=None):
    client = MagicMock()
    client.chat.completions.create = AsyncMock(return_value=completion, side_effect=error)
    return client


def gemini_result(text, prompt_tokens=80, completion_tokens=15):
    return SimpleNamespace(
        text=text,
        usage_metadata=SimpleNamespace(
            prompt_token_count=prompt_tokens,
            candidates_token_count=completion_tokens,
        ),
    )


def gemini_client(result=None, error=None):
    client = MagicMock()
    client.aio.models.generate_content = AsyncMock(return_value=result, side_effect=error)
    return client


VALID_JSON = json.dumps({"action": "transaction", "confidence": 0.9, "data": {"amount": 50}})


# ---------------------------------------------------------------------------
# DATA CLASSES
# ---------------------------------------------------------------------------

class TestTokenUsage:
    """Tests for TokenUsage dataclass."""

    def test_auto_calculate_total(self):
        usage = TokenUsage(prompt_tokens=100, completion_tokens=50)

        assert usage.total_tokens == 150

    def test_explicit_total_is_kept(self):
        usage = TokenUsage(prompt_tokens=100, completion_tokens=50, total_tokens=200)

        assert usage.total_tokens == 200


class TestAIResponse:
    """Tests for AIResponse dataclass."""

    def test_defaults_to_success(self):
        response = AIResponse(content="{}", provider=ProviderType.OPENAI, model="gpt-4o")

        assert response.success is True
        assert response.error is None

    def test_to_dict_truncates_long_content(self):
        response = AIResponse(content="x" * 150, provider=ProviderType.GEMINI, model="gemini")

        data = response.to_dict()

        assert data["content"].endswith("...")
        assert len(data["content"]) == 103
        assert data["provider"] == "gemini"


class TestImageInput:
    """Tests for ImageInput parsing."""

    def test_data_url_keeps_mime_type(self):
        image = ImageInput.from_payload("data:image/png;base64,QUJD")

        assert image.mime_type == "image/png"
        assert image.base64_data == "QUJD"
        assert image.to_bytes() == b"ABC"

    def test_bare_base64_defaults_to_jpeg(self):
        image = ImageInput.from_payload("QUJD")

        assert image.mime_type == "image/jpeg"
        assert image.data_url == "data:image/jpeg;base64,QUJD"

    def test_invalid_base64_raises_value_error(self):
        image = ImageInput.from_payload("data:image/png;base64,not*base64")

        with pytest.raises(ValueError):
            image.to_bytes()


# ---------------------------------------------------------------------------
# OPENAI
# ---------------------------------------------------------------------------

class TestOpenAIProvider:
    """Tests for OpenAIProvider with a mocked AsyncOpenAI client."""

    def test_not_configured_without_key(self):
        provider = OpenAIProvider(api_key="")

        assert provider.is_configured is False

    @pytest.mark.asyncio
    async def test_unconfigured_returns_error_response(self):
        provider = OpenAIProvider(api_key="")

        response = await provider.generate_json("Gastei 50 reais", system_prompt="sys")

        assert response.success is False
        assert "not configured" in response.error

    @pytest.mark.asyncio
    async def test_text_request_uses_json_mode(self):
        client = openai_client(openai_completion(VALID_JSON))
        provider = OpenAIProvider(model="gpt-4o", client=client)

        response = await provider.generate_json("Gastei 50 reais no Uber", system_prompt="SYSTEM")

        assert response.success is True
        assert response.content == VALID_JSON
        assert response.provider == ProviderType.OPENAI
        assert response.usage.total_tokens == 120

        kwargs = client.chat.completions.create.call_args.kwargs
        assert kwargs["response_format"] == {"type": "json_object"}
        assert kwargs["messages"] == [
            {"role": "system", "content": "SYSTEM"},
            {"role": "user", "content": "Gastei 50 reais no Uber"},
        ]

    @pytest.mark.asyncio
    async def test_image_request_sends_text_and_image_parts(self, image_input):
        client = openai_client(openai_completion(VALID_JSON))
        provider = OpenAIProvider(client=client)

        await provider.generate_json("", system_prompt="SYSTEM", image=image_input)

        user_content = client.chat.completions.create.call_args.kwargs["messages"][1]["content"]
        assert user_content[0] == {"type": "text", "text": IMAGE_INSTRUCTION}
        assert user_content[1]["type"] == "image_url"
        assert user_content[1]["image_url"]["url"] == image_input.data_url

    @pytest.mark.asyncio
    async def test_empty_content_is_a_failure(self):
        provider = OpenAIProvider(client=openai_client(openai_completion("")))

        response = await provider.generate_json("hi", system_prompt="sys")

        assert response.success is False
        assert response.error == "Empty response"

    @pytest.mark.asyncio
    async def test_invalid_json_is_a_failure(self):
        provider = OpenAIProvider(client=openai_client(openai_completion("not json")))

        response = await provider.generate_json("hi", system_prompt="sys")

        assert response.success is False
        assert "Invalid JSON" in response.error

    @pytest.mark.asyncio
    async def test_sdk_exception_is_captured(self):
        provider = OpenAIProvider(client=openai_client(error=RuntimeError("rate limited")))

        response = await provider.generate_json("hi", system_prompt="sys")

        assert response.success is False
        assert response.error == "rate limited"


# ---------------------------------------------------------------------------
# GEMINI
# ---------------------------------------------------------------------------

class TestGeminiProvider:
    """Tests for GeminiProvider with a mocked genai client."""

    def test_not_configured_without_key(self):
        provider = GeminiProvider(api_key="")

        assert provider.is_configured is False

    @pytest.mark.asyncio
    async def test_generate_json_returns_text(self):
        client = gemini_client(gemini_result(f"  {VALID_JSON}\n"))
        provider = GeminiProvider(model="gemini-2.5-flash", client=client)

        response = await provider.generate_json('SYSTEM\n\nUser Input: "Gastei 50"')

        assert response.success is True
        assert response.content == VALID_JSON
        assert response.provider == ProviderType.GEMINI
        assert response.usage.total_tokens == 95

        kwargs = client.aio.models.generate_content.call_args.kwargs
        assert kwargs["model"] == "gemini-2.5-flash"
        assert kwargs["contents"] == ['SYSTEM\n\nUser Input: "Gastei 50"']
        assert kwargs["config"].response_mime_type == "application/json"

    @pytest.mark.asyncio
    async def test_image_is_sent_as_inline_bytes(self, image_input):
        client = gemini_client(gemini_result(VALID_JSON))
        provider = GeminiProvider(client=client)

        await provider.generate_json("prompt", image=image_input)

        contents = client.aio.models.generate_content.call_args.kwargs["contents"]
        assert len(contents) == 2
        image_part = contents[1]
        assert image_part.inline_data.mime_type == "image/png"
        assert image_part.inline_data.data == base64.b64decode(image_input.base64_data)

    @pytest.mark.asyncio
    async def test_missing_usage_metadata_counts_zero(self):
        result = SimpleNamespace(text=VALID_JSON, usage_metadata=None)
        provider = GeminiProvider(client=gemini_client(result))

        response = await provider.generate_json("prompt")

        assert response.success is True
        assert response.usage.total_tokens == 0

    @pytest.mark.asyncio
    async def test_empty_text_is_a_failure(self):
        provider = GeminiProvider(client=gemini_client(gemini_result(None)))

        response = await provider.generate_json("prompt")

        assert response.success is False
        assert response.error == "Empty response"

    @pytest.mark.asyncio
    async def test_sdk_exception_is_captured(self):
        provider = GeminiProvider(client=gemini_client(error=RuntimeError("quota")))

        response = await provider.generate_json("prompt")

        assert response.success is False
        assert response.error == "quota"
