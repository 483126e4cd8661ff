"""
Tests for JSON extraction from LLM responses.
"""

import pytest

from klar.utils.json_extractor import extract_json_from_response


@pytest.mark.parametrize("raw", [
    '{"score": 1}',
    '```json\n{"score": 1}\n```',
    '```\n{"score": 1}\n```',
    'Hier ist die Antwort: {"score": 1} Viel Erfolg!',
    '{"score": 1,}',
])
def test_extracts_object(raw):
    assert extract_json_from_response(raw) == {"score": 1}


@pytest.mark.parametrize("raw", ["", "keine Daten", "[1, 2]", "{kaputt"])
def test_returns_none(raw):
    assert extract_json_from_response(raw) is None


def test_nested_object():
    raw = '{"a": {"b": [1, 2]}, "c": "x"}'

    assert extract_json_from_response(raw) == {"a": {"b": [1, 2]}, "c": "x"}
