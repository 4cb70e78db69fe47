"""
Shared test doubles, importable from test modules.

Fixtures live in conftest.py; plain classes and constants live here so
tests can import them directly.
"""

import json
from datetime import datetime
from typing import Any, Dict, List, Optional, Union
from zoneinfo import ZoneInfo

from jarvis.ai.providers.base import AIProvider, AIResponse, ProviderType


SAO_PAULO = ZoneInfo("America/Sao_Paulo")

# Friday 10 May 2024, 09:00 in São Paulo
NOW = datetime(2024, 5, 10, 9, 0, tzinfo=SAO_PAULO)


class ScriptedProvider(AIProvider):
    """
    AIProvider that replays canned outputs and records every call.

    Each entry in `outputs` is either a string (a successful response
    with that content) or an AIResponse (returned as-is, e.g. a failure).
    """

    def __init__(
        self,
        provider_type: ProviderType,
        outputs: Optional[List[Union[str, AIResponse]]] = None,
        configured: bool = True,
    ):
        self.provider_type = provider_type
        self.model = f"{provider_type.value}-test"
        self.outputs = list(outputs or [])
        self.configured = configured
        self.calls: List[Dict[str, Any]] = []

    @property
    def is_configured(self) -> bool:
        return self.configured

    async def generate(self, prompt, system_prompt=None, temperature=0.7, max_tokens=1024, **kwargs):
        self.calls.append({"prompt": prompt, "system_prompt": system_prompt})
        return self._next()

    async def generate_json(self, prompt, system_prompt=None, image=None, **kwargs):
        self.calls.append({"prompt": prompt, "system_prompt": system_prompt, "image": image})
        return self._next()

    def _next(self) -> AIResponse:
        if not self.outputs:
            return self._create_error_response("no scripted output", self.model)
        item = self.outputs.pop(0)
        if isinstance(item, AIResponse):
            return item
        return AIResponse(content=item, provider=self.provider_type, model=self.model)

    def failure(self, error: str = "boom") -> AIResponse:
        return AIResponse(
            content="",
            provider=self.provider_type,
            model=self.model,
            success=False,
            error=error,
        )


def intent_json(action: str, data: Dict[str, Any], confidence: float = 0.95) -> str:
    return json.dumps({"action": action, "confidence": confidence, "data": data})
