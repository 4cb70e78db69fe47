"""
Base classes and interfaces for external collaborators.

The assistant never owns persistence. Transactions and calendar events
live in external systems (Supabase, Google Calendar); this module defines
the contracts the dispatcher talks to.

Design Pattern: Strategy Pattern
================================
- FinanceCollaborator: records transactions
- CalendarCollaborator: lists, creates, updates and deletes events

Every operation returns a CollaboratorResult instead of raising for
expected backend rejections, mirroring the `{ data, error }` shape of the
web client's data hooks. Transport-level failures in the HTTP clients are
raised as APIError and converted by the dispatcher.
"""

import datetime as dt
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, List, Dict, Any

from jarvis.core.errors import CollaboratorError


# ---------------------------------------------------------------------------
# CUSTOM EXCEPTIONS
# ---------------------------------------------------------------------------

class APIError(CollaboratorError):
    """Raised when an HTTP call to a collaborator fails."""
    pass


# ---------------------------------------------------------------------------
# SHARED DATA SHAPES
# ---------------------------------------------------------------------------

@dataclass
class ExternalEvent:
    """
    Minimal projection of a calendar event, as the resolver needs it.

    Owned by the calendar collaborator; the assistant only reads a
    snapshot supplied per request.
    """
    id: str
    title: str
    start_time: dt.datetime
    end_time: Optional[dt.datetime] = None
    is_all_day: bool = False

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ExternalEvent":
        """
        Build from a row/JSON dict with `id`, `title`, `start_time`
        (ISO string or datetime) and optional `end_time`, `is_all_day`.
        """
        return cls(
            id=str(data["id"]),
            title=data.get("title") or "",
            start_time=_parse_timestamp(data["start_time"]),
            end_time=_parse_timestamp(data["end_time"]) if data.get("end_time") else None,
            is_all_day=bool(data.get("is_all_day", False)),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "start_time": self.start_time.isoformat(),
            "end_time": self.end_time.isoformat() if self.end_time else None,
            "is_all_day": self.is_all_day,
        }


def _parse_timestamp(value: Any) -> dt.datetime:
    if isinstance(value, dt.datetime):
        return value
    if isinstance(value, dt.date):
        return dt.datetime(value.year, value.month, value.day)
    return dt.datetime.fromisoformat(str(value).replace("Z", "+00:00"))


@dataclass
class CollaboratorResult:
    """
    Outcome of a collaborator call.

    Attributes:
        data: Created/updated record (dict) or None
        error: Backend error message, None on success
    """
    data: Optional[Any] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


# ---------------------------------------------------------------------------
# COLLABORATOR CONTRACTS
# ---------------------------------------------------------------------------

class FinanceCollaborator(ABC):
    """Records income/expense transactions for a family."""

    @abstractmethod
    async def create_transaction(self, fields: Dict[str, Any]) -> CollaboratorResult:
        """
        Insert one transaction.

        Args:
            fields: type, amount, description, category, date,
                payment_method, family_id
        """
        pass


class CalendarCollaborator(ABC):
    """Reads and mutates calendar events."""

    @abstractmethod
    async def list_events(self) -> List[ExternalEvent]:
        """Existing events, chronologically ordered."""
        pass

    @abstractmethod
    async def create_event(self, fields: Dict[str, Any]) -> CollaboratorResult:
        """
        Args:
            fields: title, start_time, end_time (ISO strings), is_all_day
        """
        pass

    @abstractmethod
    async def update_event(self, event_id: str, fields: Dict[str, Any]) -> CollaboratorResult:
        """
        Args:
            fields: partial payload, any of title, start_time, end_time
        """
        pass

    @abstractmethod
    async def delete_event(self, event_id: str) -> CollaboratorResult:
        pass


@dataclass
class Collaborators:
    """The pair of backends a dispatch may touch."""
    finance: FinanceCollaborator
    calendar: CalendarCollaborator
