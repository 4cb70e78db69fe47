"""
Tests for the request models - CommandRequest and RequestContext.
"""

from datetime import datetime

import pytest
from pydantic import ValidationError

from jarvis.ai.intent.schemas import CommandRequest, RequestContext, RequestKind
from jarvis.core.config import settings


class TestRequestContext:

    def test_valid_zone_is_used(self):
        context = RequestContext(timezone="Europe/Lisbon")

        assert context.timezone_name == "Europe/Lisbon"

    @pytest.mark.parametrize("name", ["Mars/Olympus_Mons", "not a zone", "../etc/passwd"])
    def test_unknown_zone_falls_back_to_default(self, name):
        context = RequestContext(timezone=name)

        assert context.timezone_name == settings.DEFAULT_TIMEZONE

    def test_missing_zone_uses_default(self):
        assert RequestContext().timezone_name == settings.DEFAULT_TIMEZONE

    def test_now_is_converted_to_request_zone(self):
        context = RequestContext(currentDate="2024-05-10T12:00:00+00:00", timezone="America/Sao_Paulo")

        assert context.now().isoformat() == "2024-05-10T09:00:00-03:00"

    def test_now_with_bad_zone_uses_default_zone(self):
        context = RequestContext(currentDate="2024-05-10T09:00:00", timezone="Nowhere/City")

        assert context.now().tzinfo.key == settings.DEFAULT_TIMEZONE
        assert context.now().replace(tzinfo=None) == datetime(2024, 5, 10, 9, 0)

    def test_blank_family_becomes_unknown(self):
        assert RequestContext(familyId="").family_id == "unknown"


class TestCommandRequest:

    def test_text_request(self):
        request = CommandRequest(kind="text", payload="Gastei 50 reais no Uber")

        assert request.kind == RequestKind.TEXT
        assert request.is_image is False
        assert request.context.family_id == "unknown"

    @pytest.mark.parametrize("payload", ["", "   ", "\n\t"])
    def test_blank_payload_is_rejected(self, payload):
        with pytest.raises(ValidationError):
            CommandRequest(kind="text", payload=payload)

    def test_unknown_kind_is_rejected(self):
        with pytest.raises(ValidationError):
            CommandRequest(kind="audio", payload="x")
