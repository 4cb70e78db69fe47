"""
AI Monitor - Structured log lines plus running provider metrics.

Each pipeline step reports here once. Every report becomes a single
JSON log line on the "jarvis.ai" logger; provider attempts also feed the
in-memory counters served by GET /api/jarvis/stats.

    step                 method            log title          metrics
    provider call sent   track_request     AI Request         -
    provider answered    track_response    AI Response        yes
    intent validated     track_intent      Intent Parsed      -
    collaborator called  track_dispatch    Intent Dispatched  -
    anything failed      track_error       AI Error           -

Usage:
    from jarvis.ai.monitoring import ai_monitor

    ai_monitor.track_request(request_id, prompt, provider="openai", model="gpt-4o")
    ai_monitor.track_response(request_id, ai_response, is_fallback=False)
    print(ai_monitor.get_stats().success_rate)
"""

import json
import logging
import sys
from dataclasses import dataclass, field
from datetime import datetime, timezone
from threading import Lock
from typing import TYPE_CHECKING, Any, Dict, List, Optional

if TYPE_CHECKING:
    from jarvis.ai.providers.base import AIResponse


# ---------------------------------------------------------------------------
# LOGGING SETUP
# ---------------------------------------------------------------------------
logger = logging.getLogger("jarvis.ai")
logger.setLevel(logging.INFO)

if not logger.handlers:
    _stdout = logging.StreamHandler(sys.stdout)
    _stdout.setFormatter(logging.Formatter(
        "[%(asctime)s] %(levelname)s [%(name)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    ))
    logger.addHandler(_stdout)


# USD per 1M tokens, list prices of the default models
COST_PER_1M_TOKENS = {
    "openai": {"input": 2.50, "output": 10.0},
    "gemini": {"input": 0.30, "output": 2.50},
}


def estimate_cost(provider: str, prompt_tokens: int, completion_tokens: int) -> float:
    """Rough USD cost of one call; unknown providers cost nothing."""
    prices = COST_PER_1M_TOKENS.get(provider.lower())
    if prices is None:
        return 0.0
    return (prompt_tokens * prices["input"] + completion_tokens * prices["output"]) / 1_000_000


# ---------------------------------------------------------------------------
# METRICS
# ---------------------------------------------------------------------------

@dataclass
class RequestMetrics:
    """One provider attempt, as kept in the history buffer."""
    request_id: str
    provider: str
    model: str
    prompt_tokens: int
    completion_tokens: int
    latency_ms: float
    success: bool
    is_fallback: bool = False
    estimated_cost: float = 0.0
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def total_tokens(self) -> int:
        return self.prompt_tokens + self.completion_tokens


@dataclass
class AggregatedMetrics:
    """Running totals since process start or the last reset()."""
    total_requests: int = 0
    successful_requests: int = 0
    failed_requests: int = 0
    fallback_requests: int = 0
    total_tokens: int = 0
    total_latency_ms: float = 0.0
    estimated_total_cost: float = 0.0
    requests_by_provider: Dict[str, int] = field(default_factory=dict)

    def add(self, metrics: RequestMetrics) -> None:
        self.total_requests += 1
        if metrics.success:
            self.successful_requests += 1
        else:
            self.failed_requests += 1
        if metrics.is_fallback:
            self.fallback_requests += 1

        self.total_tokens += metrics.total_tokens
        self.total_latency_ms += metrics.latency_ms
        self.estimated_total_cost += metrics.estimated_cost
        self.requests_by_provider[metrics.provider] = self.requests_by_provider.get(metrics.provider, 0) + 1

    @property
    def avg_latency_ms(self) -> float:
        return self.total_latency_ms / self.total_requests if self.total_requests else 0.0

    @property
    def success_rate(self) -> float:
        """Percentage of attempts that succeeded (0-100)."""
        return 100.0 * self.successful_requests / self.total_requests if self.total_requests else 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_requests": self.total_requests,
            "successful_requests": self.successful_requests,
            "failed_requests": self.failed_requests,
            "fallback_requests": self.fallback_requests,
            "success_rate": f"{self.success_rate:.1f}%",
            "total_tokens": self.total_tokens,
            "avg_latency_ms": round(self.avg_latency_ms, 2),
            "estimated_total_cost": f"${self.estimated_total_cost:.4f}",
            "requests_by_provider": dict(self.requests_by_provider),
        }


# ---------------------------------------------------------------------------
# MONITOR
# ---------------------------------------------------------------------------

class AIMonitor:
    """
    Thread-safe sink for pipeline telemetry.

    The history buffer keeps the last `max_history` provider attempts;
    older entries are dropped, totals are not.
    """

    def __init__(self, max_history: int = 1000):
        self._max_history = max_history
        self._lock = Lock()
        self._history: List[RequestMetrics] = []
        self._totals = AggregatedMetrics()

    def track_request(
        self,
        request_id: str,
        prompt: str,
        provider: str,
        model: str,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> None:
        self._emit(
            "AI Request",
            logging.INFO,
            event="ai_request",
            request_id=request_id,
            provider=provider,
            model=model,
            prompt_length=len(prompt),
            metadata=metadata,
        )

    def track_response(
        self,
        request_id: str,
        response: "AIResponse",
        is_fallback: bool = False,
    ) -> None:
        """Record a provider attempt, successful or not."""
        provider = response.provider.value
        usage = response.usage
        metrics = RequestMetrics(
            request_id=request_id,
            provider=provider,
            model=response.model,
            prompt_tokens=usage.prompt_tokens,
            completion_tokens=usage.completion_tokens,
            latency_ms=response.latency_ms,
            success=response.success,
            is_fallback=is_fallback,
            estimated_cost=estimate_cost(provider, usage.prompt_tokens, usage.completion_tokens),
        )

        with self._lock:
            self._history.append(metrics)
            del self._history[:-self._max_history]
            self._totals.add(metrics)

        self._emit(
            "AI Response",
            logging.INFO if response.success else logging.WARNING,
            event="ai_response",
            request_id=request_id,
            provider=provider,
            model=response.model,
            fallback=is_fallback,
            success=response.success,
            latency_ms=round(response.latency_ms, 2),
            tokens={"prompt": usage.prompt_tokens, "completion": usage.completion_tokens},
            estimated_cost=f"${metrics.estimated_cost:.6f}",
            response_length=len(response.content),
            error=response.error,
        )

    def track_intent(
        self,
        request_id: str,
        action: str,
        confidence: float,
        processing_time_ms: float = 0.0,
    ) -> None:
        self._emit(
            "Intent Parsed",
            logging.INFO,
            event="intent_parsed",
            request_id=request_id,
            action=action,
            confidence=round(confidence, 3),
            processing_time_ms=round(processing_time_ms, 2),
        )

    def track_dispatch(
        self,
        request_id: str,
        action: str,
        success: bool,
        entity_id: Optional[str] = None,
        error: Optional[str] = None,
    ) -> None:
        self._emit(
            "Intent Dispatched",
            logging.INFO if success else logging.WARNING,
            event="intent_dispatched",
            request_id=request_id,
            action=action,
            success=success,
            entity_id=entity_id,
            error=error,
        )

    def track_error(
        self,
        request_id: str,
        error: str,
        stage: str,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Raw model output may go in metadata; it stays in the server log."""
        self._emit(
            "AI Error",
            logging.ERROR,
            event="ai_error",
            request_id=request_id,
            stage=stage,
            error=error,
            metadata=metadata,
        )

    def get_stats(self) -> AggregatedMetrics:
        with self._lock:
            return self._totals

    def get_recent_requests(self, limit: int = 10) -> List[RequestMetrics]:
        """Newest first."""
        with self._lock:
            return self._history[::-1][:limit]

    def reset(self) -> None:
        with self._lock:
            self._history = []
            self._totals = AggregatedMetrics()

    def _emit(self, title: str, level: int, **fields: Any) -> None:
        # None-valued optional fields are left out of the line
        record = {k: v for k, v in fields.items() if v is not None}
        record["timestamp"] = datetime.now(timezone.utc).isoformat()
        logger.log(level, f"{title}: {json.dumps(record, default=str, ensure_ascii=False)}")


# ---------------------------------------------------------------------------
# SINGLETON INSTANCE
# ---------------------------------------------------------------------------
ai_monitor = AIMonitor()
