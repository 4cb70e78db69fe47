"""
Environments Module - External collaborators.

The assistant stores nothing itself. Transactions and events are written
to whichever backend is configured:

environments/
├── base.py               # Collaborator contracts + ExternalEvent
├── memory.py             # In-process backends (dev and tests)
├── supabase/             # PostgREST: transactions + events tables
└── google/calendar/      # Google Calendar Events API
"""

from jarvis.environments.base import (
    APIError,
    CalendarCollaborator,
    CollaboratorResult,
    Collaborators,
    ExternalEvent,
    FinanceCollaborator,
)

__all__ = [
    "APIError",
    "CalendarCollaborator",
    "CollaboratorResult",
    "Collaborators",
    "ExternalEvent",
    "FinanceCollaborator",
]
