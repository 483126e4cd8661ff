"""Database configuration and session management."""

from pathlib import Path
from typing import Optional

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, declarative_base

Base = declarative_base()

# Bound by init_db()
SessionLocal = sessionmaker(autocommit=False, autoflush=False)


def create_db_engine(database_url: str) -> Engine:
    """
    Create an engine, preparing the SQLite file location if needed.

    Args:
        database_url: SQLAlchemy URL, e.g. ``sqlite:///data/klar.sqlite``

    Returns:
        Engine with foreign keys enforced on SQLite
    """
    connect_args = {}
    if database_url.startswith("sqlite"):
        connect_args["check_same_thread"] = False  # SQLite specific
        db_file = database_url.split("///", 1)[-1]
        if db_file and db_file != ":memory:":
            Path(db_file).parent.mkdir(parents=True, exist_ok=True)

    engine = create_engine(database_url, connect_args=connect_args)

    if engine.dialect.name == "sqlite":
        @event.listens_for(engine, "connect")
        def _enable_foreign_keys(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    return engine


def init_db(database_url: Optional[str] = None) -> Engine:
    """
    Create tables and bind the global session factory.

    Args:
        database_url: Override for the configured database URL

    Returns:
        The bound engine
    """
    from klar.db.models import DocumentRecord, ContentRecord  # noqa: F401

    if database_url is None:
        from klar.config.settings import get_settings
        database_url = get_settings().database_url

    engine = create_db_engine(database_url)
    Base.metadata.create_all(bind=engine)
    SessionLocal.configure(bind=engine)
    return engine

