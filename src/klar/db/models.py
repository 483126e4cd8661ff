"""Database models for Klar."""

import secrets
import string
import time
from datetime import datetime, timezone

from sqlalchemy import Column, String, Text, Float, DateTime, ForeignKey
from sqlalchemy.orm import relationship

from klar.config.constants import ID_RANDOM_LENGTH
from klar.db.database import Base

_BASE36 = string.digits + string.ascii_lowercase


def _to_base36(number: int) -> str:
    if number == 0:
        return "0"
    digits = []
    while number:
        number, remainder = divmod(number, 36)
        digits.append(_BASE36[remainder])
    return "".join(reversed(digits))


def generate_document_id() -> str:
    """Millisecond timestamp in base36 followed by a random suffix."""
    suffix = "".join(secrets.choice(_BASE36) for _ in range(ID_RANDOM_LENGTH))
    return _to_base36(int(time.time() * 1000)) + suffix


def utcnow() -> datetime:
    """Naive UTC timestamp, as stored by SQLite."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class DocumentRecord(Base):
    """A writing exercise."""
    __tablename__ = "documents"

    id = Column(String, primary_key=True, default=generate_document_id)
    title = Column(String, unique=True, nullable=False, index=True)
    creation_date = Column(DateTime, default=utcnow, nullable=False, index=True)

    content = relationship(
        "ContentRecord",
        back_populates="document",
        uselist=False,
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class ContentRecord(Base):
    """Task, submission and last review of a document (one row per document)."""
    __tablename__ = "contents"

    document_id = Column(
        String,
        ForeignKey("documents.id", ondelete="CASCADE"),
        primary_key=True
    )
    task = Column(Text, default="", nullable=False)
    submission_text = Column(Text, default="", nullable=False)
    review_score = Column(Float, nullable=True)
    review_feedback = Column(Text, default="", nullable=False)
    correction = Column(Text, default="", nullable=False)

    document = relationship("DocumentRecord", back_populates="content")
