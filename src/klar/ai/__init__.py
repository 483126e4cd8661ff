"""
AI provider implementations and the review service.

Usage:
    from klar.ai import create_ai_provider, ReviewService

    service = ReviewService(create_ai_provider())
    result = service.review(task, submission)
"""

from klar.ai.base_provider import BaseProvider
from klar.ai.openai_provider import OpenAIProvider
from klar.ai.provider_factory import create_ai_provider
from klar.ai.review_service import ReviewService

__all__ = [
    "BaseProvider",
    "OpenAIProvider",
    "create_ai_provider",
    "ReviewService",
]
