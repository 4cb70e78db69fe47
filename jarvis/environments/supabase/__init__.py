"""Supabase (PostgREST) collaborators for transactions and events."""

from jarvis.environments.supabase.client import (
    SupabaseCalendarClient,
    SupabaseFinanceClient,
    SupabaseRestClient,
)

__all__ = [
    "SupabaseCalendarClient",
    "SupabaseFinanceClient",
    "SupabaseRestClient",
]
