"""
Tests for InsightsService - monthly finance texts from Gemini.
"""

import pytest

from jarvis.ai.providers.base import ProviderType
from jarvis.services.insights_service import (
    NOT_CONFIGURED,
    NOT_GENERATED,
    ORACLE_ERROR,
    InsightsService,
)

from tests.helpers import ScriptedProvider


METRICS = {"totalIncome": 5000, "totalExpenses": 3200, "topCategory": "Alimentação"}


def service_with(*outputs, configured=True):
    provider = ScriptedProvider(ProviderType.GEMINI, outputs=list(outputs), configured=configured)
    return InsightsService(provider=provider), provider


@pytest.mark.asyncio
async def test_parses_json_answer():
    service, provider = service_with(
        '```json\n{"expensesAnalysis": "Alimentação pesou.", "incomeAnalysis": "Estável.", '
        '"overallAnalysis": "Sobrou 36% da renda."}\n```'
    )

    insights = await service.generate(METRICS)

    assert insights == {
        "expensesAnalysis": "Alimentação pesou.",
        "incomeAnalysis": "Estável.",
        "overallAnalysis": "Sobrou 36% da renda.",
    }
    assert "Alimentação" in provider.calls[0]["prompt"]


@pytest.mark.asyncio
async def test_missing_keys_become_empty():
    service, _ = service_with('{"overallAnalysis": "Ok."}')

    insights = await service.generate(METRICS)

    assert insights == {"expensesAnalysis": "", "incomeAnalysis": "", "overallAnalysis": "Ok."}


@pytest.mark.asyncio
async def test_plain_text_goes_to_expenses():
    service, _ = service_with("Você gastou bastante com mercado.")

    insights = await service.generate(METRICS)

    assert insights["expensesAnalysis"] == "Você gastou bastante com mercado."
    assert insights["incomeAnalysis"] == ""
    assert insights["overallAnalysis"] == ""


@pytest.mark.asyncio
async def test_provider_failure():
    provider = ScriptedProvider(ProviderType.GEMINI)
    provider.outputs = [provider.failure("quota")]
    service = InsightsService(provider=provider)

    insights = await service.generate(METRICS)

    assert insights == {
        "expensesAnalysis": NOT_GENERATED,
        "incomeAnalysis": NOT_GENERATED,
        "overallAnalysis": ORACLE_ERROR,
    }


@pytest.mark.asyncio
async def test_unconfigured_provider_is_not_called():
    service, provider = service_with(configured=False)

    insights = await service.generate(METRICS)

    assert set(insights.values()) == {NOT_CONFIGURED}
    assert provider.calls == []
