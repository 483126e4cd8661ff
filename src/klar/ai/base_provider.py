"""
Provider interface for the AI backend.

A provider turns a system prompt and a user message into the raw text of
the model's answer. Everything above that (JSON extraction, validation,
user-facing errors) lives in :mod:`klar.ai.review_service`.
"""

import json
import re
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional

from loguru import logger
from openai import RateLimitError

from klar.core.exceptions import ProviderError, APIResponseError, ParsingError

_SECRET_PATTERNS = [
    (re.compile(r'sk-[A-Za-z0-9_-]{20,}'), 'sk-[REDACTED]'),
    (re.compile(r'(Bearer\s+)[A-Za-z0-9._-]{20,}'), r'\1[REDACTED]'),
]


def _sanitize_for_logging(text: str) -> str:
    """Mask API keys and bearer tokens."""
    for pattern, replacement in _SECRET_PATTERNS:
        text = pattern.sub(replacement, text or "")
    return text


@dataclass
class AICallResult:
    """One provider call, kept for token accounting."""
    prompt_type: str
    input_summary: str
    response_summary: str
    duration_ms: float
    prompt_tokens: Optional[int] = None
    completion_tokens: Optional[int] = None


@dataclass
class TokenUsage:
    calls: int = 0
    prompt_tokens: int = 0
    completion_tokens: int = 0

    @property
    def total_tokens(self) -> int:
        return self.prompt_tokens + self.completion_tokens


class APIErrorContext:
    """
    Translate SDK and transport failures into ProviderError subclasses.

    Usage:
        with APIErrorContext("review", provider.name):
            raw = provider.call_text(...)

    ProviderErrors raised inside the block pass through unchanged.
    """

    def __init__(self, operation: str, provider_name: str = "unknown"):
        self.operation = operation
        self.provider_name = provider_name

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is None or issubclass(exc_type, ProviderError):
            return False
        if not issubclass(exc_type, Exception):
            return False

        logger.error(f"{self.provider_name} failed during {self.operation}: {exc_val}")

        if issubclass(exc_type, RateLimitError):
            raise APIResponseError(f"{self.operation}: rate limited by {self.provider_name}") from exc_val
        if issubclass(exc_type, (json.JSONDecodeError, UnicodeDecodeError)):
            raise ParsingError(f"{self.operation}: unreadable response") from exc_val
        raise ProviderError(f"{self.operation}: {exc_val}") from exc_val


class BaseProvider(ABC):
    """
    Base class of AI providers.

    Subclasses implement ``name`` and ``call_text`` and report each call
    through ``_log_call``.
    """

    def __init__(self, mock_mode: bool = False):
        self.mock_mode = mock_mode
        self.call_history: List[AICallResult] = []

    @property
    @abstractmethod
    def name(self) -> str:
        """Provider and model, for logs."""

    @abstractmethod
    def call_text(
        self,
        prompt: str,
        system_prompt: Optional[str] = None,
        response_format: str = "text"
    ) -> str:
        """
        Send one chat turn.

        Args:
            prompt: User message
            system_prompt: Optional system message
            response_format: "text", or "json" to request a JSON object

        Returns:
            Raw text of the answer
        """

    def _log_call(
        self,
        prompt_type: str,
        input_summary: str,
        response_summary: str,
        start_time: float,
        prompt_tokens: Optional[int] = None,
        completion_tokens: Optional[int] = None
    ) -> None:
        record = AICallResult(
            prompt_type=prompt_type,
            input_summary=_sanitize_for_logging(input_summary),
            response_summary=_sanitize_for_logging(response_summary),
            duration_ms=(time.time() - start_time) * 1000,
            prompt_tokens=prompt_tokens,
            completion_tokens=completion_tokens,
        )
        self.call_history.append(record)
        logger.debug(
            f"{self.name} {prompt_type}: {record.duration_ms:.0f} ms, "
            f"tokens {prompt_tokens}/{completion_tokens}"
        )

    def get_token_usage(self) -> TokenUsage:
        """Tokens consumed by all calls of this provider."""
        usage = TokenUsage(calls=len(self.call_history))
        for call in self.call_history:
            usage.prompt_tokens += call.prompt_tokens or 0
            usage.completion_tokens += call.completion_tokens or 0
        return usage
