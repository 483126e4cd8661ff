"""
Review and exercise generation on top of an AI provider.

Each operation is a single request/response round-trip. Responses must be
JSON objects of the expected shape; anything else is rejected with a
generic error for the caller.
"""

import json
from typing import Type, TypeVar

from loguru import logger
from pydantic import BaseModel, ValidationError

from klar.ai.base_provider import APIErrorContext, BaseProvider
from klar.config.prompts import (
    REVIEW_SYSTEM_PROMPT,
    GENERATE_SYSTEM_PROMPT,
    build_generate_user_prompt,
)
from klar.core.exceptions import (
    ProviderError,
    ReviewError,
    ExerciseGenerationError,
)
from klar.core.models import GeneratedExercise, ReviewResult
from klar.utils.json_extractor import extract_json_from_response

ModelT = TypeVar("ModelT", bound=BaseModel)


class ReviewService:
    """
    AI operations used by the application.

    Args:
        provider: Any BaseProvider implementation
    """

    def __init__(self, provider: BaseProvider):
        self.provider = provider

    def review(self, task: str, submission: str) -> ReviewResult:
        """
        Score a submission and produce feedback plus a marked-up correction.

        Args:
            task: Exercise task text
            submission: The learner's text

        Returns:
            ReviewResult(score, feedback, correction)

        Raises:
            ReviewError: Provider failure or malformed response
        """
        payload = json.dumps({"taskContent": task, "contentText": submission}, ensure_ascii=False)
        try:
            return self._request(
                "review", payload, REVIEW_SYSTEM_PROMPT, ReviewResult,
            )
        except ProviderError as e:
            logger.error(f"Review failed: {e}")
            raise ReviewError("Failed to get review from AI provider") from e

    def generate_exercise(self, instructions: str = "") -> GeneratedExercise:
        """
        Generate a new exercise title and task.

        Args:
            instructions: Optional topic to steer the generation

        Raises:
            ExerciseGenerationError: Provider failure or malformed response
        """
        try:
            return self._request(
                "generate_exercise",
                build_generate_user_prompt(instructions.strip()),
                GENERATE_SYSTEM_PROMPT,
                GeneratedExercise,
            )
        except ProviderError as e:
            logger.error(f"Exercise generation failed: {e}")
            raise ExerciseGenerationError("Failed to generate exercise from AI provider") from e

    def _request(self, operation: str, prompt: str, system_prompt: str, model: Type[ModelT]) -> ModelT:
        with APIErrorContext(operation, self.provider.name):
            raw = self.provider.call_text(prompt, system_prompt=system_prompt, response_format="json")

        data = extract_json_from_response(raw)
        if data is None:
            raise ProviderError(f"Response of {operation} is not a JSON object", {"response": raw[:200]})

        try:
            return model.model_validate(data)
        except ValidationError as e:
            raise ProviderError(
                f"Invalid response shape for {operation}",
                {"errors": [err["loc"] for err in e.errors()]},
            ) from e
