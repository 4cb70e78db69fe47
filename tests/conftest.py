"""
Test configuration and fixtures for pytest.

This module provides shared fixtures used across all tests:
- Request contexts pinned to a fixed "now"
- In-memory collaborators and a sample event snapshot
- Scripted AI providers (no network, no API keys)
- A FastAPI TestClient wired to those fakes
"""

from datetime import timedelta
from typing import List

import pytest
from fastapi.testclient import TestClient

from jarvis.ai.intent.schemas import CommandRequest, RequestContext
from jarvis.ai.monitoring import AIMonitor, ai_monitor
from jarvis.ai.providers.base import ImageInput, ProviderType
from jarvis.ai.providers.fallback import ProviderClient
from jarvis.deps import get_command_session
from jarvis.environments.base import Collaborators, ExternalEvent
from jarvis.environments.memory import InMemoryCalendar, InMemoryFinance
from jarvis.main import app
from jarvis.services.command_session import CommandSession
from jarvis.services.dispatcher import Dispatcher

from tests.helpers import NOW, ScriptedProvider


# ---------------------------------------------------------------------------
# CONTEXT FIXTURES
# ---------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def reset_monitor():
    """Each test starts with empty AI metrics."""
    ai_monitor.reset()
    yield
    ai_monitor.reset()


@pytest.fixture
def monitor() -> AIMonitor:
    return AIMonitor()


@pytest.fixture
def request_context() -> RequestContext:
    return RequestContext(
        currentDate=NOW.isoformat(),
        timezone="America/Sao_Paulo",
        familyId="fam-1",
    )


@pytest.fixture
def text_request(request_context):
    def _make(text: str) -> CommandRequest:
        return CommandRequest(kind="text", payload=text, context=request_context)
    return _make


# ---------------------------------------------------------------------------
# COLLABORATOR FIXTURES
# ---------------------------------------------------------------------------

@pytest.fixture
def sample_events() -> List[ExternalEvent]:
    """Events around NOW, in chronological order."""
    tomorrow = NOW + timedelta(days=1)
    return [
        ExternalEvent(
            id="evt-dentist",
            title="Dentista",
            start_time=NOW.replace(hour=14),
            end_time=NOW.replace(hour=15),
        ),
        ExternalEvent(
            id="evt-project",
            title="Reunião de Projeto",
            start_time=tomorrow.replace(hour=10),
            end_time=tomorrow.replace(hour=11),
        ),
        ExternalEvent(
            id="evt-family",
            title="Reunião de Família",
            start_time=(NOW + timedelta(days=3)).replace(hour=19),
            end_time=(NOW + timedelta(days=3)).replace(hour=20),
        ),
    ]


@pytest.fixture
def finance() -> InMemoryFinance:
    return InMemoryFinance()


@pytest.fixture
def calendar(sample_events) -> InMemoryCalendar:
    return InMemoryCalendar(events=sample_events)


@pytest.fixture
def collaborators(finance, calendar) -> Collaborators:
    return Collaborators(finance=finance, calendar=calendar)


# ---------------------------------------------------------------------------
# PROVIDER / SESSION FIXTURES
# ---------------------------------------------------------------------------

@pytest.fixture
def openai_fake() -> ScriptedProvider:
    return ScriptedProvider(ProviderType.OPENAI)


@pytest.fixture
def gemini_fake() -> ScriptedProvider:
    return ScriptedProvider(ProviderType.GEMINI)


@pytest.fixture
def provider_client(openai_fake, gemini_fake, monitor) -> ProviderClient:
    return ProviderClient(primary=openai_fake, fallback=gemini_fake, timeout=1.0, monitor=monitor)


@pytest.fixture
def session(collaborators, provider_client, monitor) -> CommandSession:
    return CommandSession(
        collaborators=collaborators,
        client=provider_client,
        dispatcher=Dispatcher(min_confidence=0.0, monitor=monitor),
        monitor=monitor,
    )


@pytest.fixture
def client(session):
    """TestClient whose command session uses the scripted providers."""
    app.dependency_overrides[get_command_session] = lambda: session
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def image_payload() -> str:
    # "fake-png-bytes" in base64
    return "data:image/png;base64,ZmFrZS1wbmctYnl0ZXM="


@pytest.fixture
def image_input(image_payload) -> ImageInput:
    return ImageInput.from_payload(image_payload)
