"""
AI Module - Turns a user's text or photo into one structured intent.

Module Structure:
================
- providers/: OpenAI (primary) and Gemini (fallback) clients, plus ProviderClient
- prompts/: The intent instruction and the finance-insight prompt
- intent/: JSON extraction, intent schemas, validation, event resolution
- monitoring/: Logging, metrics, and usage tracking

Flow:
=====
1. User: "Gastei 50 reais no Uber"
2. ProviderClient: OpenAI, or Gemini if OpenAI fails → raw model text
3. extract_json: strip fences and prose → JSON candidate
4. IntentParser: JSON → TransactionIntent(amount=50, ...)
5. Dispatcher (services/): TransactionIntent → finance.create_transaction
"""
