"""
Shared fixtures.
"""

import json
from collections import deque

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from klar.ai.base_provider import BaseProvider
from klar.api.app import create_app
from klar.config.settings import Settings
from klar.db.database import Base, create_db_engine
from klar.rendering import PageGeometry
from klar.storage.repository import DocumentRepository


class FakeProvider(BaseProvider):
    """Provider returning scripted responses; exceptions in the script are raised."""

    def __init__(self, responses=None):
        super().__init__(mock_mode=True)
        self.responses = deque(responses or [])
        self.prompts = []

    @property
    def name(self) -> str:
        return "fake"

    def queue(self, *responses):
        for response in responses:
            if isinstance(response, dict):
                response = json.dumps(response, ensure_ascii=False)
            self.responses.append(response)

    def call_text(self, prompt, system_prompt=None, response_format="text"):
        self.prompts.append((prompt, system_prompt))
        response = self.responses.popleft()
        if isinstance(response, Exception):
            raise response
        return response


def fixed_measure(text, font_size, bold=False):
    """Every character is half the font size wide."""
    return len(text) * font_size * 0.5


@pytest.fixture
def measure():
    return fixed_measure


@pytest.fixture
def small_page():
    """100x100 page, 10pt margins and lines: 16 characters wide, 8 lines high."""
    return PageGeometry(width=100, height=100, margin=10, font_size=10, line_height=10)


@pytest.fixture
def repository(tmp_path):
    engine = create_db_engine(f"sqlite:///{tmp_path / 'klar.sqlite'}")
    Base.metadata.create_all(bind=engine)
    yield DocumentRepository(sessionmaker(autocommit=False, autoflush=False, bind=engine))
    engine.dispose()


@pytest.fixture
def provider():
    return FakeProvider()


@pytest.fixture
def settings(tmp_path):
    return Settings(
        _env_file=None,
        mock_ai=True,
        db_path=str(tmp_path / "api.sqlite"),
        rate_limit_enabled=False,
    )


@pytest.fixture
def app(settings, provider):
    return create_app(settings=settings, provider=provider, configure_logging=False)


@pytest.fixture
def client(app):
    return TestClient(app)
