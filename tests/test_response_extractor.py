"""
Tests for the Response Extractor - JSON isolation from raw model text.
"""

import json

from jarvis.ai.intent.extractor import extract_json, strip_code_fences


class TestExtractJson:
    """extract_json() on the shapes models actually return."""

    def test_compact_json_is_unchanged(self):
        raw = '{"action":"task","confidence":1,"data":{"title":"x"}}'

        assert extract_json(raw) == raw

    def test_idempotent(self):
        raw = '```json\n{"a": 1}\n```'

        once = extract_json(raw)

        assert extract_json(once) == once

    def test_strips_json_fence(self):
        raw = '```json\n{"action": "transaction"}\n```'

        assert extract_json(raw) == '{"action": "transaction"}'

    def test_strips_bare_and_uppercase_fences(self):
        assert extract_json('```\n{"a": 1}\n```') == '{"a": 1}'
        assert extract_json('```JSON\n{"a": 1}```') == '{"a": 1}'

    def test_drops_surrounding_prose(self):
        raw = 'Claro! Aqui está o resultado: {"action": "event", "data": {"title": "Dentista"}} Posso ajudar em algo mais?'

        result = extract_json(raw)

        assert json.loads(result) == {"action": "event", "data": {"title": "Dentista"}}

    def test_keeps_nested_objects(self):
        raw = 'text {"a": {"b": {"c": 1}}} text'

        assert extract_json(raw) == '{"a": {"b": {"c": 1}}}'

    def test_without_braces_returns_stripped_text(self):
        assert extract_json("```\n  I could not understand  \n```") == "I could not understand"

    def test_empty_input(self):
        assert extract_json("") == ""


class TestStripCodeFences:

    def test_removes_every_fence(self):
        assert strip_code_fences("```json\nA\n```\n```js\nB\n```") == "A\n\n\nB"
