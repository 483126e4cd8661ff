"""
Exercise workflows combining the store and the AI service.

- Generating an exercise creates a document from an AI-generated title.
  Title collisions are retried a bounded number of times.
- Reviewing a document stores score, feedback and correction next to the
  existing task and submission.
"""

from loguru import logger

from klar.ai.review_service import ReviewService
from klar.config.constants import MAX_TITLE_RETRIES
from klar.core.exceptions import DuplicateTitleError, NothingToReviewError
from klar.core.models import Content, ContentFields, Document, ReviewResult
from klar.storage.repository import DocumentRepository


class ExerciseService:
    """
    Generate and review exercises.

    Args:
        repository: Document store
        reviewer: AI review service
        max_title_retries: Generation attempts before giving up on collisions
    """

    def __init__(
        self,
        repository: DocumentRepository,
        reviewer: ReviewService,
        max_title_retries: int = MAX_TITLE_RETRIES
    ):
        if max_title_retries < 1:
            raise ValueError("max_title_retries must be at least 1")
        self.repository = repository
        self.reviewer = reviewer
        self.max_title_retries = max_title_retries

    def generate_document(self, instructions: str = "") -> Document:
        """
        Create a document with an AI-generated title and task.

        Raises:
            DuplicateTitleError: Every attempt produced an existing title
            ExerciseGenerationError: The AI provider failed
        """
        last_error = None
        for attempt in range(1, self.max_title_retries + 1):
            exercise = self.reviewer.generate_exercise(instructions)
            try:
                document = self.repository.create_document(exercise.title)
            except DuplicateTitleError as e:
                logger.warning(f"Generated title already exists (attempt {attempt}): {exercise.title!r}")
                last_error = e
                continue

            self.repository.upsert_content(document.id, ContentFields(task=exercise.task))
            return document

        raise last_error

    def review_document(self, document_id: str) -> ReviewResult:
        """
        Review the saved submission of a document and store the result.

        Raises:
            NothingToReviewError: No submission text saved
            ReviewError: The AI provider failed
        """
        content = self.repository.get_content(document_id)
        if content is None or not content.submission_text:
            raise NothingToReviewError(document_id)

        review = self.reviewer.review(content.task, content.submission_text)

        self.repository.upsert_content(document_id, _with_review(content, review))
        logger.info(f"Document reviewed: {document_id} (score={review.score})")
        return review


def _with_review(content: Content, review: ReviewResult) -> ContentFields:
    return ContentFields(
        task=content.task,
        submission_text=content.submission_text,
        review_score=review.score,
        review_feedback=review.feedback,
        correction=review.correction,
    )
