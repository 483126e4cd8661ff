"""
Configuration management for Klar.

Values come from KLAR_* environment variables or a .env file.
"""

from pathlib import Path
from typing import Optional
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import field_validator

from klar.config.constants import DATA_DIR, DB_FILENAME


class Settings(BaseSettings):
    """Runtime configuration of the API and the CLI."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="KLAR_",
        case_sensitive=False
    )

    # AI Provider
    ai_provider: str = "openai"  # "openai", "openrouter"
    model: Optional[str] = None

    # API Keys
    openai_api_key: str = ""
    openrouter_api_key: str = ""

    # Offline mode: canned AI responses, no API key needed
    mock_ai: bool = False

    # Storage
    db_path: str = str(Path(DATA_DIR) / DB_FILENAME)

    # Logging
    log_level: str = "INFO"
    log_file: Optional[str] = None
    log_json: bool = False

    # Error tracking
    sentry_dsn: str = ""
    sentry_environment: str = "development"
    sentry_traces_sample_rate: float = 0.1

    # Rate limit for endpoints calling the AI provider
    rate_limit_enabled: bool = True

    # CORS
    cors_origins: list[str] = ["http://localhost:3000", "http://127.0.0.1:3000"]

    @field_validator('ai_provider')
    @classmethod
    def validate_ai_provider(cls, v: str) -> str:
        valid_providers = ['openai', 'openrouter']
        if v.lower() not in valid_providers:
            raise ValueError(f"ai_provider must be one of: {', '.join(valid_providers)}")
        return v.lower()

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in ('TRACE', 'DEBUG', 'INFO', 'SUCCESS', 'WARNING', 'ERROR', 'CRITICAL'):
            raise ValueError(f"Unknown log level: {v}")
        return level

    @property
    def database_url(self) -> str:
        return f"sqlite:///{self.db_path}"


@lru_cache()
def get_settings() -> Settings:
    """Settings, read once per process."""
    return Settings()


def reload_settings() -> Settings:
    """Drop the cached settings and read the environment again."""
    get_settings.cache_clear()
    return get_settings()
