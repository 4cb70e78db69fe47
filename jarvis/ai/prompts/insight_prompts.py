"""
Insight Prompts - Monthly finance analysis written by Gemini.

The model gets the month's metrics as JSON and answers with three short
Portuguese texts. Word limits keep the dashboard cards readable.
"""

import json
from typing import Any, Dict


INSIGHT_PROMPT = """Atue como um analista financeiro pessoal (Jarvis).
Analise os seguintes dados financeiros do mês atual:
{metrics}

Forneça:
1. Uma breve análise das Despesas (foco em categorias altas ou aumento). Max 15 palavras.
2. Uma breve análise das Receitas. Max 15 palavras.
3. Um resumo geral do mês e uma dica rápida. Max 30 palavras.

Responda estritamente em formato JSON:
{{
  "expensesAnalysis": "...",
  "incomeAnalysis": "...",
  "overallAnalysis": "..."
}}
"""


def build_insight_prompt(metrics: Dict[str, Any]) -> str:
    return INSIGHT_PROMPT.format(metrics=json.dumps(metrics, ensure_ascii=False, default=str))
