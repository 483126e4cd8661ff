"""
Exceptions raised by Klar.

``message`` is safe to show to users; ``details`` carries ids and other
context for logs.
"""

from typing import Optional


class KlarError(Exception):
    """Root of all Klar errors."""

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if not self.details:
            return self.message
        context = ", ".join(f"{key}={value!r}" for key, value in self.details.items())
        return f"{self.message} ({context})"


# ==================== Configuration Errors ====================

class ConfigurationError(KlarError):
    """Missing credentials or model, or an unknown provider."""
    pass


# ==================== Provider Errors ====================

class ProviderError(KlarError):
    """The AI provider failed or answered with something unusable."""
    pass


class APIResponseError(ProviderError):
    """The provider rejected the request (rate limits)."""
    pass


class ParsingError(ProviderError):
    """The provider's answer could not be decoded."""
    pass


class ReviewError(ProviderError):
    """Raised when a submission could not be reviewed."""
    pass


class ExerciseGenerationError(ProviderError):
    """Raised when no exercise could be generated."""
    pass


# ==================== Storage Errors ====================

class StorageError(KlarError):
    """The document store rejected an operation."""
    pass


class DuplicateTitleError(StorageError):
    """Raised when a document with the same title already exists."""

    def __init__(self, title: str):
        super().__init__("Document with this title already exists", {"title": title})
        self.title = title


class DocumentNotFoundError(StorageError):
    """Raised when a requested document doesn't exist."""

    def __init__(self, document_id: str):
        super().__init__("Document not found", {"document_id": document_id})
        self.document_id = document_id


class SnapshotValidationError(StorageError):
    """Raised when an imported backup does not have the expected shape."""
    pass


# ==================== Export Errors ====================

class ExportError(KlarError):
    """No documents to export, or the PDF backend failed."""
    pass


# ==================== Workflow Errors ====================

class NothingToReviewError(KlarError):
    """Raised when a review is requested for a document without submission text."""

    def __init__(self, document_id: str):
        super().__init__("No submission text found for review", {"document_id": document_id})
        self.document_id = document_id
