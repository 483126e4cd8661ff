"""Database module for Klar."""

from klar.db.database import Base, SessionLocal, create_db_engine, init_db
from klar.db.models import DocumentRecord, ContentRecord, generate_document_id

__all__ = [
    "Base",
    "SessionLocal",
    "create_db_engine",
    "init_db",
    "DocumentRecord",
    "ContentRecord",
    "generate_document_id",
]
