"""
Base AI Provider - The contract both classifier backends implement.

Design Pattern: Strategy Pattern
================================
ProviderClient holds an ordered pair of AIProvider instances and only
ever talks to this interface, so OpenAI and Gemini are interchangeable.

Result, not exceptions:
    Every call returns an AIResponse. `success` is the verdict for that
    single attempt; `content` is only meaningful when it is True. An empty
    model answer is a failure ("Empty response"), never a successful "".

Example:
    response = await provider.generate_json("Gastei 50 no Uber", system_prompt=...)
    if not response.success:
        logger.warning(response.error)
"""

import base64
import binascii
import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional

logger = logging.getLogger("jarvis.ai")

DATA_URL_PREFIX = "data:"
DEFAULT_IMAGE_MIME = "image/jpeg"


class ProviderType(str, Enum):
    OPENAI = "openai"
    GEMINI = "gemini"


@dataclass
class TokenUsage:
    """Token counts reported by the SDK (zeros when it reports none)."""
    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0

    def __post_init__(self):
        if not self.total_tokens:
            self.total_tokens = self.prompt_tokens + self.completion_tokens


@dataclass
class ImageInput:
    """
    A photo sent with the command.

    The browser sends a data URL (``data:image/png;base64,...``); older
    clients send bare base64. OpenAI consumes `data_url`, Gemini consumes
    `to_bytes()` plus `mime_type`.
    """
    base64_data: str
    mime_type: str = DEFAULT_IMAGE_MIME

    @classmethod
    def from_payload(cls, payload: str) -> "ImageInput":
        payload = payload.strip()
        if not payload.startswith(DATA_URL_PREFIX) or "," not in payload:
            return cls(base64_data=payload)

        header, body = payload.split(",", 1)
        # header looks like "data:image/png;base64"
        mime_type = header[len(DATA_URL_PREFIX):].partition(";")[0]
        return cls(base64_data=body, mime_type=mime_type or DEFAULT_IMAGE_MIME)

    @property
    def data_url(self) -> str:
        return f"{DATA_URL_PREFIX}{self.mime_type};base64,{self.base64_data}"

    def to_bytes(self) -> bytes:
        """
        Raises:
            ValueError: the body is not valid base64
        """
        try:
            return base64.b64decode(self.base64_data, validate=True)
        except (binascii.Error, ValueError) as e:
            raise ValueError(f"Invalid base64 image data: {e}") from e


@dataclass
class AIResponse:
    """
    Outcome of one provider attempt.

    Attributes:
        content: Model text (empty on failure)
        provider: Backend that produced it
        model: Model name used for the call
        usage: Token counts, for cost estimates
        latency_ms: Wall time of the call
        success: Verdict for this attempt
        error: Why the attempt failed, None on success
        raw_response: SDK object, kept for debugging only
        metadata: e.g. {"multimodal": True}
    """
    content: str
    provider: ProviderType
    model: str
    usage: TokenUsage = field(default_factory=TokenUsage)
    latency_ms: float = 0.0
    success: bool = True
    error: Optional[str] = None
    raw_response: Optional[Any] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Log-friendly view; long content is cut at 100 characters."""
        preview = self.content if len(self.content) <= 100 else f"{self.content[:100]}..."
        return {
            "content": preview,
            "provider": self.provider.value,
            "model": self.model,
            "tokens": self.usage.total_tokens,
            "latency_ms": round(self.latency_ms, 2),
            "success": self.success,
            "error": self.error,
        }


class AIProvider(ABC):
    """
    A text/JSON generation backend.

    Implementations must:
    - report missing credentials through `is_configured`
    - catch SDK errors and return them in AIResponse.error
    - treat a blank answer as a failure
    """

    provider_type: ProviderType
    model: str

    @property
    @abstractmethod
    def is_configured(self) -> bool:
        """Whether the API key (or an injected client) is present."""
        pass

    @abstractmethod
    async def generate(
        self,
        prompt: str,
        system_prompt: Optional[str] = None,
        temperature: float = 0.7,
        max_tokens: int = 1024,
        **kwargs
    ) -> AIResponse:
        """Free-text completion (used for finance insights)."""
        pass

    @abstractmethod
    async def generate_json(
        self,
        prompt: str,
        system_prompt: Optional[str] = None,
        image: Optional[ImageInput] = None,
        **kwargs
    ) -> AIResponse:
        """
        JSON-mode completion (used for intent classification).

        Args:
            prompt: User turn; may be empty when an image carries the input
            system_prompt: Intent contract, when the backend has a system role
            image: Optional photo for multimodal input
        """
        pass

    def _measure_latency(self, start_time: float) -> float:
        return (time.time() - start_time) * 1000

    def _create_error_response(self, error: str, model: str, latency_ms: float = 0.0) -> AIResponse:
        logger.error(f"[{self.provider_type.value}] attempt failed: {error}")
        return AIResponse(
            content="",
            provider=self.provider_type,
            model=model,
            latency_ms=latency_ms,
            success=False,
            error=error,
        )
