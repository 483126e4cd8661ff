"""
Tests for settings and logging setup.
"""

import sys

import pytest
from loguru import logger

from klar.config.logging_config import setup_structured_logging
from klar.config.settings import Settings


def test_defaults():
    settings = Settings(_env_file=None)

    assert settings.ai_provider == "openai"
    assert settings.db_path.endswith("klar.sqlite")
    assert settings.database_url == f"sqlite:///{settings.db_path}"


def test_environment_prefix(monkeypatch):
    monkeypatch.setenv("KLAR_AI_PROVIDER", "OpenRouter")
    monkeypatch.setenv("KLAR_LOG_LEVEL", "debug")
    monkeypatch.setenv("KLAR_MOCK_AI", "true")

    settings = Settings(_env_file=None)

    assert settings.ai_provider == "openrouter"
    assert settings.log_level == "DEBUG"
    assert settings.mock_ai is True


def test_invalid_log_level():
    with pytest.raises(ValueError):
        Settings(_env_file=None, log_level="LOUD")


def test_log_file_sink(tmp_path):
    log_file = tmp_path / "logs" / "klar.log"

    setup_structured_logging(level="INFO", log_file=str(log_file))
    logger.info("Dokument gespeichert")
    logger.remove()
    logger.add(sys.stderr)

    assert "Dokument gespeichert" in log_file.read_text(encoding="utf-8")
