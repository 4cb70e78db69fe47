"""
Prompt templates for Jarvis.

- intent_prompts: the instruction that maps input to one of five actions
- insight_prompts: the monthly finance analysis prompt
"""
