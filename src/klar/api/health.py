"""
Health check endpoint for Klar.
"""

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from loguru import logger

from klar import __version__

router = APIRouter()


@router.get("/health")
def health_check(request: Request):
    """
    Health check with database status.

    Returns:
        HTTP 200 if healthy, 503 if the database is unreachable.
    """
    health_status = {
        "status": "healthy",
        "version": __version__,
        "database": "unknown"
    }

    try:
        with request.app.state.engine.connect() as connection:
            connection.execute(text("SELECT 1"))
        health_status["database"] = "connected"
    except SQLAlchemyError as e:
        logger.error(f"Health check failed: {e}")
        health_status["status"] = "unhealthy"
        health_status["database"] = "disconnected"
        return JSONResponse(status_code=503, content=health_status)

    return health_status
