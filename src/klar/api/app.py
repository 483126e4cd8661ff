"""
FastAPI application for Klar.

Provides the JSON API used by the web frontend.
"""

import time
from typing import Optional

from asgi_correlation_id import CorrelationIdMiddleware, correlation_id
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger
from slowapi.errors import RateLimitExceeded
from sqlalchemy.orm import sessionmaker
from starlette.middleware.base import BaseHTTPMiddleware

from klar import __version__
from klar.ai.base_provider import BaseProvider
from klar.ai.provider_factory import create_ai_provider
from klar.ai.review_service import ReviewService
from klar.api.error_handler import (
    error_response,
    init_sentry,
    unhandled_exception_handler,
    validation_exception_handler,
)
from klar.api.health import router as health_router
from klar.api.rate_limit import limiter
from klar.api.routes import router as api_router
from klar.config.logging_config import setup_structured_logging
from klar.config.settings import Settings, get_settings
from klar.db.database import Base, create_db_engine
from klar.export.pdf_export import PDFExporter
from klar.services.exercise_service import ExerciseService
from klar.storage.repository import DocumentRepository


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log all requests with correlation ID, method, path, status, latency."""

    async def dispatch(self, request: Request, call_next):
        start_time = time.time()

        with logger.contextualize(correlation_id=correlation_id.get() or "unknown"):
            logger.info(f"{request.method} {request.url.path}")

            response = await call_next(request)

            latency_ms = (time.time() - start_time) * 1000
            logger.info(
                f"{request.method} {request.url.path} -> {response.status_code} "
                f"({latency_ms:.1f} ms)"
            )
            return response


# ============================================================================
# Application Factory
# ============================================================================

def create_app(
    settings: Optional[Settings] = None,
    provider: Optional[BaseProvider] = None,
    configure_logging: bool = True,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Settings to use (default: loaded from environment)
        provider: AI provider override (default: built from settings)
        configure_logging: Install the Loguru sinks

    Returns:
        FastAPI application instance
    """
    settings = settings or get_settings()

    if configure_logging:
        setup_structured_logging(
            level=settings.log_level,
            log_file=settings.log_file,
            serialize=settings.log_json,
        )
    init_sentry(
        dsn=settings.sentry_dsn,
        environment=settings.sentry_environment,
        sample_rate=settings.sentry_traces_sample_rate,
    )

    app = FastAPI(
        title="Klar",
        description="Deutsch-Schreibtraining mit KI-Feedback",
        version=__version__
    )

    # Storage
    engine = create_db_engine(settings.database_url)
    Base.metadata.create_all(bind=engine)
    session_factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    repository = DocumentRepository(session_factory)

    # AI
    reviewer = ReviewService(provider or create_ai_provider(settings=settings))

    app.state.settings = settings
    app.state.engine = engine
    app.state.repository = repository
    app.state.exercise_service = ExerciseService(repository, reviewer)
    app.state.exporter = PDFExporter()

    # Rate limiting
    limiter.enabled = settings.rate_limit_enabled
    app.state.limiter = limiter

    @app.exception_handler(RateLimitExceeded)
    async def rate_limit_handler(request: Request, exc: RateLimitExceeded):
        return error_response(429, "Zu viele Anfragen. Bitte später erneut versuchen.")

    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "HX-Request", "HX-Trigger", "X-Request-ID"],
        expose_headers=["HX-Trigger", "X-Request-ID"],
    )
    app.add_middleware(RequestLoggingMiddleware)
    # Outermost, so the id is set before request logging runs
    app.add_middleware(CorrelationIdMiddleware)

    app.include_router(health_router)
    app.include_router(api_router)

    @app.on_event("shutdown")
    def shutdown_event():
        engine.dispose()

    logger.info(f"Klar API ready (db={settings.db_path}, provider={reviewer.provider.name})")
    return app
