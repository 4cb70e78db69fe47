"""
Event Resolver - Maps a free-text reference to an existing calendar event.

Users say things like:
- "cancelar a reunião de amanhã"      → reference "reunião"
- "remarcar o dentista para sexta"    → reference "dentista"

and we need the concrete ExternalEvent to delete or update.

Matching Strategy:
==================
1. Lower-case the reference and every candidate title
2. Keep candidates whose title CONTAINS the reference
3. If several match:
   a. an exact (case-insensitive) title match wins
   b. else, with a date hint, the start date nearest the hint wins
   c. else, the first match in the order supplied (usually chronological)

No edit-distance or semantic matching: "dentista" will not find
"Consulta odontológica". Callers must report a miss to the user.
"""

import datetime as dt
import logging
from typing import Optional, List, Sequence

from jarvis.environments.base import ExternalEvent

logger = logging.getLogger("jarvis.ai.event_resolver")


class EventResolver:
    """
    Resolves event references by case-insensitive substring match.

    Usage:
        resolver = EventResolver()
        events = await calendar.list_events()
        event = resolver.resolve("dentist", events)
        if event is None:
            ...  # tell the user nothing matched
    """

    def resolve(
        self,
        reference: str,
        candidates: Sequence[ExternalEvent],
        date_hint: Optional[dt.date] = None,
        zone: Optional[dt.tzinfo] = None,
    ) -> Optional[ExternalEvent]:
        """
        Find the best event for a reference.

        Args:
            reference: Free-text search key from the intent
            candidates: Snapshot of existing events, in caller order
            date_hint: Optional day the user mentioned, used to break ties
            zone: The user's zone; aware start times are converted to it
                before their day is compared with date_hint

        Returns:
            The matched event, or None when nothing contains the reference
        """
        matches = self.resolve_all(reference, candidates)
        if not matches:
            logger.info(f"No event matches '{reference}' among {len(candidates)} candidates")
            return None

        if len(matches) == 1:
            return matches[0]

        needle = self._normalize(reference)
        exact = [e for e in matches if self._normalize(e.title) == needle]
        if exact:
            chosen = exact[0]
        elif date_hint is not None:
            # min() keeps the first of equally distant events
            chosen = min(matches, key=lambda e: abs((self._local_day(e, zone) - date_hint).days))
        else:
            chosen = matches[0]

        logger.info(
            f"'{reference}' matched {len(matches)} events, chose '{chosen.title}' ({chosen.id})"
        )
        return chosen

    @staticmethod
    def _local_day(event: ExternalEvent, zone: Optional[dt.tzinfo]) -> dt.date:
        # all-day events and naive timestamps already carry the user's day
        start = event.start_time
        if zone is not None and start.tzinfo is not None and not event.is_all_day:
            start = start.astimezone(zone)
        return start.date()

    def resolve_all(
        self,
        reference: str,
        candidates: Sequence[ExternalEvent],
    ) -> List[ExternalEvent]:
        """All substring matches, in the order supplied."""
        needle = self._normalize(reference)
        if not needle:
            return []
        return [e for e in candidates if needle in self._normalize(e.title)]

    @staticmethod
    def _normalize(text: Optional[str]) -> str:
        return (text or "").strip().lower()


# ---------------------------------------------------------------------------
# SINGLETON INSTANCE
# ---------------------------------------------------------------------------
event_resolver = EventResolver()
