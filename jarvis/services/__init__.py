"""
Services Module - Intent dispatch and command orchestration.

- dispatcher: routes a validated intent to its handler
- command_session: classify → extract → validate → dispatch for one request
- insights_service: monthly finance analysis
"""
