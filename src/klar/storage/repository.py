"""
Document store.

CRUD over documents and their content, backed by SQLAlchemy:

    documents  (id, title UNIQUE, creation_date)
    contents   (document_id -> documents.id ON DELETE CASCADE,
                task, submission_text, review_score, review_feedback, correction)

Every public method runs in its own session and commits on success.
"""

import math
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Iterator, List, Optional, Union

from loguru import logger
from sqlalchemy import func, select, delete
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, sessionmaker

from klar.config.constants import DEFAULT_PAGE_SIZE
from klar.core.exceptions import (
    DuplicateTitleError,
    DocumentNotFoundError,
    SnapshotValidationError,
)
from klar.core.models import (
    Content,
    ContentFields,
    DatabaseSnapshot,
    Document,
    DocumentPage,
    DocumentWithContent,
)
from klar.db.database import SessionLocal
from klar.db.models import ContentRecord, DocumentRecord, utcnow


def _as_utc(value: datetime) -> datetime:
    """Attach UTC to a naive timestamp read from SQLite."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _to_naive_utc(value: datetime) -> datetime:
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def _document(record: DocumentRecord) -> Document:
    return Document(id=record.id, title=record.title, creation_date=_as_utc(record.creation_date))


def _content(record: ContentRecord) -> Content:
    return Content(
        document_id=record.document_id,
        task=record.task or "",
        submission_text=record.submission_text or "",
        review_score=record.review_score,
        review_feedback=record.review_feedback or "",
        correction=record.correction or "",
    )


class DocumentRepository:
    """
    Storage for documents and their content.

    Args:
        session_factory: SQLAlchemy session factory (default: the global
            one bound by ``init_db``)
    """

    def __init__(self, session_factory: sessionmaker = SessionLocal):
        self._session_factory = session_factory

    @contextmanager
    def _session(self) -> Iterator[Session]:
        session = self._session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    # ==================== DOCUMENTS ====================

    def get_document(self, document_id: str) -> Optional[Document]:
        """Get a document by id, or None."""
        with self._session() as session:
            record = session.get(DocumentRecord, document_id)
            return _document(record) if record else None

    def list_documents(self, page: int = 1, limit: int = DEFAULT_PAGE_SIZE) -> DocumentPage:
        """
        List documents newest first.

        Args:
            page: 1-based page number, clamped into the valid range
            limit: Page size (>= 1)

        Returns:
            The requested page with totals
        """
        if limit < 1:
            raise ValueError("limit must be at least 1")

        with self._session() as session:
            total_items = session.scalar(select(func.count()).select_from(DocumentRecord)) or 0
            total_pages = max(1, math.ceil(total_items / limit))
            safe_page = max(1, min(page, total_pages))

            records = session.scalars(
                select(DocumentRecord)
                .order_by(DocumentRecord.creation_date.desc(), DocumentRecord.id.desc())
                .offset((safe_page - 1) * limit)
                .limit(limit)
            ).all()

            return DocumentPage(
                documents=[_document(r) for r in records],
                page=safe_page,
                limit=limit,
                total_items=total_items,
                total_pages=total_pages,
            )

    def create_document(self, title: str) -> Document:
        """
        Create a document.

        Raises:
            DuplicateTitleError: A document with this title exists
        """
        try:
            with self._session() as session:
                exists = session.scalar(
                    select(DocumentRecord.id).where(DocumentRecord.title == title)
                )
                if exists:
                    raise DuplicateTitleError(title)

                record = DocumentRecord(title=title, creation_date=utcnow())
                session.add(record)
                session.flush()
                document = _document(record)
        except IntegrityError as e:
            # Concurrent insert of the same title
            raise DuplicateTitleError(title) from e

        logger.info(f"Document created: {document.id} ({title!r})")
        return document

    def delete_document(self, document_id: str) -> None:
        """
        Delete a document and its content.

        Raises:
            DocumentNotFoundError: Unknown id
        """
        with self._session() as session:
            record = session.get(DocumentRecord, document_id)
            if record is None:
                raise DocumentNotFoundError(document_id)
            session.delete(record)

        logger.info(f"Document deleted: {document_id}")

    # ==================== CONTENT ====================

    def get_content(self, document_id: str) -> Optional[Content]:
        """Get the content of a document, or None if nothing was saved yet."""
        with self._session() as session:
            record = session.get(ContentRecord, document_id)
            return _content(record) if record else None

    def upsert_content(self, document_id: str, fields: Union[ContentFields, dict]) -> Content:
        """
        Replace the content of a document.

        Fields that are not given are reset to their defaults.

        Raises:
            DocumentNotFoundError: Unknown document id
        """
        if isinstance(fields, dict):
            fields = ContentFields.model_validate(fields)

        with self._session() as session:
            if session.get(DocumentRecord, document_id) is None:
                raise DocumentNotFoundError(document_id)

            record = session.get(ContentRecord, document_id)
            if record is None:
                record = ContentRecord(document_id=document_id)
                session.add(record)

            record.task = fields.task or ""
            record.submission_text = fields.submission_text or ""
            record.review_score = fields.review_score
            record.review_feedback = fields.review_feedback or ""
            record.correction = fields.correction or ""
            session.flush()
            return _content(record)

    def get_all_documents_with_content(self) -> List[DocumentWithContent]:
        """All documents, newest first, flattened with their content."""
        with self._session() as session:
            records = session.scalars(
                select(DocumentRecord)
                .order_by(DocumentRecord.creation_date.desc(), DocumentRecord.id.desc())
            ).all()

            items = []
            for record in records:
                content = _content(record.content) if record.content else Content(document_id=record.id)
                items.append(DocumentWithContent(
                    id=record.id,
                    title=record.title,
                    creation_date=_as_utc(record.creation_date),
                    task=content.task,
                    submission_text=content.submission_text,
                    review_score=content.review_score,
                    review_feedback=content.review_feedback,
                    correction=content.correction,
                ))
            return items

    # ==================== BACKUP ====================

    def export_snapshot(self) -> DatabaseSnapshot:
        """Dump the whole store."""
        with self._session() as session:
            documents = session.scalars(
                select(DocumentRecord).order_by(DocumentRecord.creation_date, DocumentRecord.id)
            ).all()
            contents = session.scalars(
                select(ContentRecord).order_by(ContentRecord.document_id)
            ).all()
            return DatabaseSnapshot(
                documents=[_document(r) for r in documents],
                contents=[_content(r) for r in contents],
            )

    def import_snapshot(self, snapshot: DatabaseSnapshot) -> None:
        """
        Replace the whole store with a snapshot.

        Raises:
            SnapshotValidationError: Duplicate ids or titles, or content
                referencing an unknown document
        """
        _validate_snapshot(snapshot)

        with self._session() as session:
            session.execute(delete(ContentRecord))
            session.execute(delete(DocumentRecord))

            for document in snapshot.documents:
                session.add(DocumentRecord(
                    id=document.id,
                    title=document.title,
                    creation_date=_to_naive_utc(document.creation_date),
                ))
            session.flush()

            for content in snapshot.contents:
                session.add(ContentRecord(
                    document_id=content.document_id,
                    task=content.task,
                    submission_text=content.submission_text,
                    review_score=content.review_score,
                    review_feedback=content.review_feedback,
                    correction=content.correction,
                ))

        logger.info(
            f"Database imported: {len(snapshot.documents)} documents, "
            f"{len(snapshot.contents)} contents"
        )


def _validate_snapshot(snapshot: DatabaseSnapshot) -> None:
    ids = [d.id for d in snapshot.documents]
    if len(set(ids)) != len(ids):
        raise SnapshotValidationError("Duplicate document ids in backup")

    titles = [d.title for d in snapshot.documents]
    if len(set(titles)) != len(titles):
        raise SnapshotValidationError("Duplicate document titles in backup")

    known = set(ids)
    seen = set()
    for content in snapshot.contents:
        if content.document_id not in known:
            raise SnapshotValidationError(
                "Content references an unknown document",
                {"document_id": content.document_id},
            )
        if content.document_id in seen:
            raise SnapshotValidationError(
                "Several contents for one document",
                {"document_id": content.document_id},
            )
        seen.add(content.document_id)
