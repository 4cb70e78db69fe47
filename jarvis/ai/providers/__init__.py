"""
AI Providers Module - Unified clients for the intent classifier backends.

- OpenAI (GPT-4o, primary)
- Google Gemini (gemini-flash, fallback and finance insights)

Each provider has the same interface, making them interchangeable:
    response = await provider.generate_json(prompt, system_prompt=..., image=...)

ProviderClient wraps both with ordered fallback and per-attempt timeouts.
"""

from jarvis.ai.providers.base import AIProvider, AIResponse, ImageInput, ProviderType
from jarvis.ai.providers.gemini import GeminiProvider, gemini_provider
from jarvis.ai.providers.openai_provider import OpenAIProvider, openai_provider
from jarvis.ai.providers.fallback import ProviderClient, provider_client

__all__ = [
    "AIProvider",
    "AIResponse",
    "ImageInput",
    "ProviderType",
    "GeminiProvider",
    "gemini_provider",
    "OpenAIProvider",
    "openai_provider",
    "ProviderClient",
    "provider_client",
]
