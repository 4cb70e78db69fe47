"""
Monitoring Module - Logging and metrics tracking for AI operations.

Usage:
======
    from jarvis.ai.monitoring import ai_monitor

    ai_monitor.track_request(request_id, prompt, provider, model)
    ai_monitor.track_response(request_id, response)

    stats = ai_monitor.get_stats()
"""

from jarvis.ai.monitoring.monitor import AIMonitor, AggregatedMetrics, ai_monitor

__all__ = [
    "AIMonitor",
    "AggregatedMetrics",
    "ai_monitor",
]
