"""
Insights Router - Monthly finance analysis for the dashboard.

POST /api/insights   metrics dict → {expensesAnalysis, incomeAnalysis, overallAnalysis}
"""

import logging
from typing import Any, Dict

from fastapi import APIRouter, Body, Depends
from pydantic import BaseModel

from jarvis.deps import get_insights_service
from jarvis.services.insights_service import InsightsService


logger = logging.getLogger("jarvis.routers.insights")

router = APIRouter(prefix="/api/insights", tags=["insights"])


class InsightsResponse(BaseModel):
    expensesAnalysis: str
    incomeAnalysis: str
    overallAnalysis: str


@router.post("", response_model=InsightsResponse)
async def generate_insights(
    metrics: Dict[str, Any] = Body(...),
    service: InsightsService = Depends(get_insights_service),
):
    """
    Generate three short Portuguese texts about the month's finances.

    Never fails on AI problems: the texts explain what went wrong instead.
    """
    insights = await service.generate(metrics)
    return InsightsResponse(**insights)
