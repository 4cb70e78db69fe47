"""
Insights Service - Short monthly finance analysis from Gemini.

The dashboard sends the month's metrics and shows three texts. Every
failure mode still yields the three keys so the cards always render:

    no GEMINI_API_KEY      → "configure the key" texts
    provider error         → "could not generate" texts
    non-JSON model output  → whole cleaned text in expensesAnalysis
"""

import json
import logging
from typing import Any, Dict

from jarvis.ai.intent.extractor import strip_code_fences
from jarvis.ai.prompts.insight_prompts import build_insight_prompt
from jarvis.ai.providers.base import AIProvider
from jarvis.ai.providers.gemini import gemini_provider

logger = logging.getLogger("jarvis.services.insights")

INSIGHT_KEYS = ("expensesAnalysis", "incomeAnalysis", "overallAnalysis")

NOT_CONFIGURED = "Configure a chave de API do Gemini para ver análises."
NOT_GENERATED = "Não foi possível gerar análise."
ORACLE_ERROR = "Erro ao consultar o Oráculo."


class InsightsService:
    """
    Usage:
        insights = await insights_service.generate({"totalExpenses": 1200, ...})
        print(insights["overallAnalysis"])
    """

    def __init__(self, provider: AIProvider = None):
        self.provider = provider or gemini_provider

    async def generate(self, metrics: Dict[str, Any]) -> Dict[str, str]:
        if not self.provider.is_configured:
            return {key: NOT_CONFIGURED for key in INSIGHT_KEYS}

        response = await self.provider.generate(
            prompt=build_insight_prompt(metrics),
            temperature=0.7,
            max_tokens=512,
        )
        if not response.success:
            logger.error(f"Insight generation failed: {response.error}")
            return {
                "expensesAnalysis": NOT_GENERATED,
                "incomeAnalysis": NOT_GENERATED,
                "overallAnalysis": ORACLE_ERROR,
            }

        clean_text = strip_code_fences(response.content).strip()
        try:
            parsed = json.loads(clean_text)
        except json.JSONDecodeError:
            logger.warning("Insight output was not JSON, returning it as text")
            parsed = None

        if not isinstance(parsed, dict):
            return {"expensesAnalysis": clean_text, "incomeAnalysis": "", "overallAnalysis": ""}

        return {key: str(parsed.get(key) or "") for key in INSIGHT_KEYS}


# ---------------------------------------------------------------------------
# SINGLETON INSTANCE
# ---------------------------------------------------------------------------
insights_service = InsightsService()
