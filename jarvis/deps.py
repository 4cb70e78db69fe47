"""
Dependencies module - reusable FastAPI dependencies for route handlers.

Collaborator selection (from settings):
- SUPABASE_URL + SUPABASE_KEY      → Supabase transactions and events
- GOOGLE_CALENDAR_TOKEN            → Google Calendar for events (wins over Supabase)
- nothing configured               → in-memory backends (local development)

Tests replace these with app.dependency_overrides.
"""

import logging
from functools import lru_cache

from fastapi import Depends

from jarvis.core.config import settings
from jarvis.environments.base import CalendarCollaborator, Collaborators, FinanceCollaborator
from jarvis.environments.google.calendar import GoogleCalendarClient
from jarvis.environments.memory import InMemoryCalendar, InMemoryFinance
from jarvis.environments.supabase import SupabaseCalendarClient, SupabaseFinanceClient
from jarvis.services.command_session import CommandSession
from jarvis.services.insights_service import InsightsService, insights_service

logger = logging.getLogger("jarvis.deps")


def _supabase_configured() -> bool:
    return bool(settings.SUPABASE_URL and settings.SUPABASE_KEY)


def _build_finance() -> FinanceCollaborator:
    if _supabase_configured():
        return SupabaseFinanceClient()
    logger.warning("Supabase not configured - transactions are kept in memory")
    return InMemoryFinance()


def _build_calendar() -> CalendarCollaborator:
    if settings.GOOGLE_CALENDAR_TOKEN:
        return GoogleCalendarClient(access_token=settings.GOOGLE_CALENDAR_TOKEN)
    if _supabase_configured():
        return SupabaseCalendarClient()
    logger.warning("No calendar backend configured - events are kept in memory")
    return InMemoryCalendar()


@lru_cache
def get_collaborators() -> Collaborators:
    """
    Finance and calendar backends, built once per process.

    Cached so the in-memory fallback keeps its state between requests.
    """
    return Collaborators(finance=_build_finance(), calendar=_build_calendar())


def get_command_session(
    collaborators: Collaborators = Depends(get_collaborators),
) -> CommandSession:
    return CommandSession(collaborators=collaborators)


def get_insights_service() -> InsightsService:
    return insights_service
