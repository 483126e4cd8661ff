"""
Pydantic schemas for API request/response validation.

Responses use camelCase keys, matching the stored backup format.
"""

from typing import Optional

from pydantic import Field

from klar.core.models import CamelModel, Document, DocumentPage


# ============================================================================
# Document Schemas
# ============================================================================

class CreateDocumentRequest(CamelModel):
    """Request to create a new document."""
    title: str = ""


class DocumentResponse(CamelModel):
    """A created document."""
    success: bool = True
    document: Document


class DocumentListResponse(DocumentPage):
    """Paginated document list."""
    pass


# ============================================================================
# Content Schemas
# ============================================================================

class SuccessResponse(CamelModel):
    """Generic acknowledgement."""
    success: bool = True
    message: Optional[str] = None


# ============================================================================
# AI Schemas
# ============================================================================

class GenerateExerciseRequest(CamelModel):
    """Request to generate a new exercise."""
    instructions: str = Field(default="", max_length=500)


class GenerateExerciseResponse(CamelModel):
    """Generated exercise document."""
    success: bool = True
    document_id: str
