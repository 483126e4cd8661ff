"""
JSON API for documents, content, AI review and export.

All errors are answered as ``{"error": message}``.
"""

import json
from typing import Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, Response
from loguru import logger
from pydantic import ValidationError
from starlette.concurrency import run_in_threadpool

from klar.api.error_handler import error_response
from klar.api.rate_limit import limiter, AI_RATE_LIMIT
from klar.api.schemas import (
    CreateDocumentRequest,
    DocumentListResponse,
    DocumentResponse,
    GenerateExerciseRequest,
    GenerateExerciseResponse,
    SuccessResponse,
)
from klar.config.constants import (
    BACKUP_FILENAME,
    DEFAULT_PAGE_SIZE,
    MAX_IMPORT_SIZE,
    MAX_PAGE_SIZE,
    PDF_FILENAME,
)
from klar.core.exceptions import (
    DocumentNotFoundError,
    DuplicateTitleError,
    ExerciseGenerationError,
    ExportError,
    NothingToReviewError,
    ReviewError,
    SnapshotValidationError,
)
from klar.core.models import ContentFields, DatabaseSnapshot
from klar.export.pdf_export import PDFExporter
from klar.services.exercise_service import ExerciseService
from klar.storage.repository import DocumentRepository

router = APIRouter(prefix="/api")

HX_TRIGGER = "HX-Trigger"


def get_repository(request: Request) -> DocumentRepository:
    return request.app.state.repository


def get_exercise_service(request: Request) -> ExerciseService:
    return request.app.state.exercise_service


def get_exporter(request: Request) -> PDFExporter:
    return request.app.state.exporter


def _parse_int(value: Optional[str], default: int) -> int:
    """Lenient query integer: anything unparsable falls back to the default."""
    try:
        return int(value) if value is not None else default
    except ValueError:
        return default


# ==================== CONTENT ====================

@router.get("/data/{document_id}")
def get_content(document_id: str, repository: DocumentRepository = Depends(get_repository)):
    """Content of a document; ``{}`` when nothing was saved yet."""
    content = repository.get_content(document_id)
    return {"content": content.model_dump(mode="json", by_alias=True) if content else {}}


@router.post("/data/{document_id}", response_model=SuccessResponse)
def save_content(
    document_id: str,
    fields: ContentFields,
    repository: DocumentRepository = Depends(get_repository)
):
    """Create or replace the content of a document."""
    try:
        repository.upsert_content(document_id, fields)
    except DocumentNotFoundError as e:
        return error_response(404, e.message)
    return SuccessResponse()


# ==================== DOCUMENTS ====================

@router.get("/documents", response_model=DocumentListResponse)
def list_documents(
    page: Optional[str] = None,
    limit: Optional[str] = None,
    repository: DocumentRepository = Depends(get_repository)
):
    """List documents newest first."""
    page_number = max(1, _parse_int(page, 1))
    page_size = min(MAX_PAGE_SIZE, max(1, _parse_int(limit, DEFAULT_PAGE_SIZE)))
    result = repository.list_documents(page=page_number, limit=page_size)
    return DocumentListResponse.model_validate(result.model_dump())


@router.post("/documents", response_model=DocumentResponse)
def create_document(
    payload: CreateDocumentRequest,
    response: Response,
    repository: DocumentRepository = Depends(get_repository)
):
    """Create a document with a unique title."""
    title = payload.title.strip()
    if not title:
        return error_response(400, "Title is required to create a document")

    try:
        document = repository.create_document(title)
    except DuplicateTitleError as e:
        return error_response(400, e.message)

    response.headers[HX_TRIGGER] = "refreshList, documentCreated"
    return DocumentResponse(document=document)


@router.delete("/documents/{document_id}", response_model=SuccessResponse)
def delete_document(
    document_id: str,
    response: Response,
    repository: DocumentRepository = Depends(get_repository)
):
    """Delete a document and its content."""
    try:
        repository.delete_document(document_id)
    except DocumentNotFoundError as e:
        return error_response(404, e.message)

    response.headers[HX_TRIGGER] = "refreshList, documentDeleted"
    return SuccessResponse()


# ==================== AI ====================

@router.post("/exercises/generate", response_model=GenerateExerciseResponse)
@limiter.limit(AI_RATE_LIMIT)
def generate_exercise(
    request: Request,
    payload: Optional[GenerateExerciseRequest] = None,
    service: ExerciseService = Depends(get_exercise_service)
):
    """Generate an exercise and store it as a new document."""
    instructions = payload.instructions if payload else ""
    try:
        document = service.generate_document(instructions)
    except DuplicateTitleError:
        return error_response(409, "Titel existiert bereits. Bitte erneut versuchen.")
    except ExerciseGenerationError:
        return error_response(500, "Failed to generate exercise")

    return GenerateExerciseResponse(document_id=document.id)


@router.post("/content/review/{document_id}", response_model=SuccessResponse)
@limiter.limit(AI_RATE_LIMIT)
def review_content(
    request: Request,
    document_id: str,
    service: ExerciseService = Depends(get_exercise_service)
):
    """Review the saved submission of a document."""
    try:
        service.review_document(document_id)
    except NothingToReviewError as e:
        return error_response(400, e.message)
    except DocumentNotFoundError as e:
        return error_response(404, e.message)
    except ReviewError:
        return error_response(500, "Failed to review content")

    return SuccessResponse(message="AI review completed successfully")


# ==================== EXPORT ====================

@router.get("/export/pdf")
def export_pdf(
    repository: DocumentRepository = Depends(get_repository),
    exporter: PDFExporter = Depends(get_exporter)
):
    """Download all documents as one PDF."""
    items = repository.get_all_documents_with_content()
    if not items:
        return error_response(404, "Keine Daten zum Exportieren")

    try:
        pdf = exporter.generate(items)
    except ExportError as e:
        logger.error(f"Error generating PDF: {e}")
        return error_response(500, "PDF-Erstellung fehlgeschlagen")

    return Response(
        content=pdf,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{PDF_FILENAME}"'},
    )


@router.get("/db/export")
def export_database(repository: DocumentRepository = Depends(get_repository)):
    """Download the whole store as JSON."""
    snapshot = repository.export_snapshot()
    return JSONResponse(
        content=snapshot.model_dump(mode="json", by_alias=True),
        headers={"Content-Disposition": f'attachment; filename="{BACKUP_FILENAME}"'},
    )


@router.post("/db/import", response_model=SuccessResponse)
async def import_database(request: Request, repository: DocumentRepository = Depends(get_repository)):
    """Replace the whole store with an uploaded JSON backup."""
    body = await request.body()
    if len(body) > MAX_IMPORT_SIZE:
        return error_response(413, "Datei zu groß")

    try:
        data = json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError):
        return error_response(400, "Ungültiges Datenbankformat")

    if (
        not isinstance(data, dict)
        or not isinstance(data.get("documents"), list)
        or not isinstance(data.get("contents"), list)
    ):
        return error_response(400, "Ungültiges Datenbankformat")

    try:
        snapshot = DatabaseSnapshot.model_validate(data)
        await run_in_threadpool(repository.import_snapshot, snapshot)
    except (ValidationError, SnapshotValidationError) as e:
        logger.warning(f"Rejected database import: {e}")
        return error_response(400, "Ungültiges Datenbankformat")

    return SuccessResponse()
