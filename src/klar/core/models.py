"""
Core data models for Klar.

Pydantic models shared by the store, the AI service, the PDF export and
the API. The JSON form uses camelCase keys (``creationDate``,
``submissionText``...), which is also the layout of database backups.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, StrictFloat, StrictInt, StrictStr
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model serialised with camelCase keys."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class Document(CamelModel):
    """A writing exercise."""
    id: str
    title: str
    creation_date: datetime


class Content(CamelModel):
    """Task, submission and review attached to a document."""
    document_id: str
    task: str = ""
    submission_text: str = ""
    review_score: Optional[float] = None
    review_feedback: str = ""
    correction: str = ""


class ContentFields(CamelModel):
    """Writable content fields (everything except the document id)."""
    task: Optional[str] = None
    submission_text: Optional[str] = None
    review_score: Optional[float] = None
    review_feedback: Optional[str] = None
    correction: Optional[str] = None


class DocumentWithContent(Document):
    """Document flattened with its content, as used by the PDF export."""
    task: str = ""
    submission_text: str = ""
    review_score: Optional[float] = None
    review_feedback: str = ""
    correction: str = ""


class DocumentPage(CamelModel):
    """One page of the newest-first document listing."""
    documents: List[Document] = Field(default_factory=list)
    page: int = 1
    limit: int
    total_items: int = 0
    total_pages: int = 1


class DatabaseSnapshot(CamelModel):
    """Complete content of the store, used for JSON backup and restore."""
    documents: List[Document] = Field(default_factory=list)
    contents: List[Content] = Field(default_factory=list)


class ReviewResult(BaseModel):
    """Review returned by the AI provider."""
    score: Union[StrictInt, StrictFloat]
    feedback: StrictStr
    correction: StrictStr


class GeneratedExercise(BaseModel):
    """Exercise generated by the AI provider."""
    model_config = ConfigDict(str_strip_whitespace=True)

    title: StrictStr = Field(min_length=1)
    task: StrictStr = Field(min_length=1)
