"""
Tests for EventResolver - free-text reference → existing event.
"""

from datetime import date, datetime, timezone

import pytest

from jarvis.ai.intent.event_resolver import EventResolver, event_resolver
from jarvis.environments.base import ExternalEvent

from tests.helpers import SAO_PAULO


def event(event_id, title, day):
    return ExternalEvent(id=event_id, title=title, start_time=datetime(2024, 5, day, 10, 0))


@pytest.fixture
def resolver():
    return EventResolver()


class TestResolve:

    def test_case_insensitive_substring(self, resolver, sample_events):
        match = resolver.resolve("reunião de PROJETO", sample_events)

        assert match.id == "evt-project"

    def test_no_match_returns_none(self, resolver, sample_events):
        assert resolver.resolve("academia", sample_events) is None

    def test_empty_reference_never_matches(self, resolver, sample_events):
        assert resolver.resolve("", sample_events) is None
        assert resolver.resolve("   ", sample_events) is None

    def test_no_candidates(self, resolver):
        assert resolver.resolve("dentista", []) is None

    def test_first_match_in_supplied_order(self, resolver, sample_events):
        match = resolver.resolve("reunião", sample_events)

        assert match.id == "evt-project"

    def test_exact_title_wins_over_order(self, resolver):
        candidates = [
            event("a", "Reunião de Projeto", 10),
            event("b", "Reunião", 12),
        ]

        assert resolver.resolve("reunião", candidates).id == "b"

    def test_date_hint_picks_nearest(self, resolver):
        candidates = [
            event("a", "Reunião de Projeto", 10),
            event("b", "Reunião de Família", 13),
        ]

        assert resolver.resolve("reunião", candidates, date_hint=date(2024, 5, 12)).id == "b"

    def test_date_hint_tie_keeps_supplied_order(self, resolver):
        candidates = [
            event("a", "Reunião A", 10),
            event("b", "Reunião B", 12),
        ]

        assert resolver.resolve("reunião", candidates, date_hint=date(2024, 5, 11)).id == "a"

    def test_date_hint_compares_days_in_user_zone(self, resolver):
        # 01:00Z on the 20th is still the 19th in São Paulo
        candidates = [
            ExternalEvent(id="late", title="Reunião A",
                          start_time=datetime(2026, 10, 20, 1, 0, tzinfo=timezone.utc)),
            ExternalEvent(id="next", title="Reunião B",
                          start_time=datetime(2026, 10, 20, 13, 0, tzinfo=timezone.utc)),
        ]

        match = resolver.resolve("reunião", candidates, date_hint=date(2026, 10, 19), zone=SAO_PAULO)

        assert match.id == "late"

    def test_all_day_event_keeps_its_own_day(self, resolver):
        candidates = [
            ExternalEvent(id="a", title="Feriado Municipal",
                          start_time=datetime(2026, 10, 21, tzinfo=timezone.utc), is_all_day=True),
            ExternalEvent(id="b", title="Feriado Nacional",
                          start_time=datetime(2026, 10, 20, tzinfo=timezone.utc), is_all_day=True),
        ]

        match = resolver.resolve("feriado", candidates, date_hint=date(2026, 10, 20), zone=SAO_PAULO)

        assert match.id == "b"

    def test_no_semantic_matching(self, resolver):
        candidates = [event("a", "Consulta odontológica", 10)]

        assert resolver.resolve("dentista", candidates) is None


class TestResolveAll:

    def test_all_matches_in_order(self, sample_events):
        matches = event_resolver.resolve_all("reunião", sample_events)

        assert [e.id for e in matches] == ["evt-project", "evt-family"]
