"""Liveness and readiness probes."""

import structlog
from fastapi import APIRouter
from fastapi.responses import ORJSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from taskboard.config import get_settings
from taskboard.db.session import DBSession

router = APIRouter()
logger = structlog.get_logger()
settings = get_settings()


@router.get("/health")
async def health_check() -> dict[str, str]:
    """Process is up; no dependencies are touched."""
    return {
        "status": "ok",
        "version": settings.app_version,
        "environment": settings.environment,
    }


@router.get("/health/ready")
async def readiness_check(db: DBSession) -> ORJSONResponse:
    """503 until the database answers a trivial query."""
    dialect = db.get_bind().dialect.name
    try:
        await db.execute(text("SELECT 1"))
    except SQLAlchemyError as exc:
        logger.warning("readiness_database_unavailable", dialect=dialect, error=str(exc))
        return ORJSONResponse(
            status_code=503,
            content={"status": "unavailable", "database": dialect},
        )

    return ORJSONResponse(content={"status": "ready", "database": dialect})
