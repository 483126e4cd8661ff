"""
Error tracking and global exception handling for Klar.

Integrates Sentry for error aggregation when a DSN is configured.
"""

import logging

import sentry_sdk
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.logging import LoggingIntegration
from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger


def init_sentry(
    dsn: str,
    environment: str,
    sample_rate: float = 0.1,
) -> bool:
    """
    Initialize Sentry with FastAPI integration.

    Args:
        dsn: Sentry DSN, empty to disable
        environment: 'development' or 'production'
        sample_rate: Traces sample rate outside development

    Returns:
        True if Sentry was initialized
    """
    if not dsn:
        logger.info("SENTRY_DSN not configured - error tracking disabled")
        return False

    traces_sample_rate = 1.0 if environment == "development" else sample_rate

    sentry_sdk.init(
        dsn=dsn,
        environment=environment,
        traces_sample_rate=traces_sample_rate,
        integrations=[
            FastApiIntegration(),
            LoggingIntegration(
                level=logging.INFO,
                event_level=logging.ERROR
            )
        ],
        # Filter out health check noise
        before_send_transaction=lambda event, hint: None if event.get("transaction", "").startswith("/health") else event,
        # Submissions are personal texts
        send_default_pii=False,
    )

    logger.info(f"Sentry initialized: environment={environment}, traces_sample_rate={traces_sample_rate}")
    return True


def error_response(status_code: int, message: str, headers: dict = None) -> JSONResponse:
    """JSON error body used by all endpoints."""
    return JSONResponse(status_code=status_code, content={"error": message}, headers=headers)


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Report unexpected exceptions and answer with a generic 500.
    """
    logger.opt(exception=exc).error(f"Unhandled error on {request.method} {request.url.path}")
    sentry_sdk.capture_exception(exc)
    return error_response(500, "Internal server error")


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed request bodies are answered like every other client error."""
    fields = [".".join(str(part) for part in err["loc"]) for err in exc.errors()]
    logger.warning(f"Invalid request on {request.method} {request.url.path}: {fields}")
    return error_response(400, "Invalid request body")
