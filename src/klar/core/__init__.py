"""
Core module for Klar.

Contains the data models and the exception hierarchy.
"""

from klar.core.exceptions import (
    KlarError,
    ConfigurationError,
    ProviderError,
    APIResponseError,
    ParsingError,
    ReviewError,
    ExerciseGenerationError,
    StorageError,
    DuplicateTitleError,
    DocumentNotFoundError,
    SnapshotValidationError,
    ExportError,
    NothingToReviewError,
)
from klar.core.models import (
    Document,
    Content,
    ContentFields,
    DocumentWithContent,
    DocumentPage,
    DatabaseSnapshot,
    ReviewResult,
    GeneratedExercise,
)

__all__ = [
    'KlarError',
    'ConfigurationError',
    'ProviderError',
    'APIResponseError',
    'ParsingError',
    'ReviewError',
    'ExerciseGenerationError',
    'StorageError',
    'DuplicateTitleError',
    'DocumentNotFoundError',
    'SnapshotValidationError',
    'ExportError',
    'NothingToReviewError',
    'Document',
    'Content',
    'ContentFields',
    'DocumentWithContent',
    'DocumentPage',
    'DatabaseSnapshot',
    'ReviewResult',
    'GeneratedExercise',
]
