"""
Configuration module - centralized settings for the entire application.
Uses pydantic-settings to load values from environment variables and .env file.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Pydantic-settings automatically:
    1. Reads from environment variables (highest priority)
    2. Falls back to .env file values
    3. Uses default values if neither exists

    To override in production, set environment variables:
        export OPENAI_API_KEY=sk-...
        export GEMINI_API_KEY=AIza...
    """

    # ---------------------------------------------------------------------------
    # PYDANTIC SETTINGS CONFIGURATION
    # ---------------------------------------------------------------------------
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ---------------------------------------------------------------------------
    # APPLICATION SETTINGS
    # ---------------------------------------------------------------------------
    # APP_NAME: Display name shown in API docs and logging
    APP_NAME: str = "Jarvis Assistant"

    # DEBUG: Expose exception details in 500 responses
    # Set to False in production so prompt internals never reach clients
    DEBUG: bool = False

    # ---------------------------------------------------------------------------
    # AI/LLM PROVIDER SETTINGS
    # ---------------------------------------------------------------------------
    # OPENAI_API_KEY: Primary provider. When empty the primary attempt is
    # skipped entirely and every request goes straight to Gemini.
    OPENAI_API_KEY: str = ""

    # GEMINI_API_KEY: Fallback provider, also used for finance insights
    GEMINI_API_KEY: str = ""

    OPENAI_MODEL: str = "gpt-4o"
    GEMINI_MODEL: str = "gemini-2.5-flash"

    # AI_REQUEST_TIMEOUT: Seconds allowed for EACH provider attempt.
    # A timeout counts as a provider failure (fallback or terminal error).
    AI_REQUEST_TIMEOUT: float = 10.0

    # ---------------------------------------------------------------------------
    # ASSISTANT BEHAVIOUR
    # ---------------------------------------------------------------------------
    # DEFAULT_TIMEZONE: Used when the client sends no (or an invalid) timezone
    DEFAULT_TIMEZONE: str = "America/Sao_Paulo"

    # DEFAULT_EVENT_DURATION_MINUTES: Applied when an event has a start but no end
    DEFAULT_EVENT_DURATION_MINUTES: int = 60

    # MIN_DISPATCH_CONFIDENCE: Intents below this confidence are returned for
    # confirmation instead of being executed. 0.0 disables the gate.
    MIN_DISPATCH_CONFIDENCE: float = 0.0

    # ---------------------------------------------------------------------------
    # COLLABORATORS
    # ---------------------------------------------------------------------------
    # SUPABASE_URL / SUPABASE_KEY: PostgREST backend for transactions and events
    # - Both must be set, otherwise in-memory collaborators are used
    SUPABASE_URL: str = ""
    SUPABASE_KEY: str = ""

    # GOOGLE_CALENDAR_TOKEN: OAuth access token with calendar.events scope.
    # When set, calendar intents go to Google Calendar instead of Supabase.
    GOOGLE_CALENDAR_TOKEN: str = ""
    GOOGLE_CALENDAR_ID: str = "primary"

    # COLLABORATOR_TIMEOUT: Seconds for each HTTP call to a collaborator
    COLLABORATOR_TIMEOUT: float = 30.0


# ---------------------------------------------------------------------------
# GLOBAL SETTINGS INSTANCE
# ---------------------------------------------------------------------------
# Usage: from jarvis.core.config import settings
settings = Settings()
