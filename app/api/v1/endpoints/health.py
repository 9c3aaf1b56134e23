"""Liveness and readiness probes."""

import logging

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from app.domain.exceptions import SqlNotConfiguredException
from app.infrastructure.persistence import database
from app.schemas.health import HealthResponse, ReadinessErrorResponse, ReadinessResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=HealthResponse)
def health_check() -> HealthResponse:
    return HealthResponse()


async def _database_answers() -> bool:
    try:
        async for session in database.get_db():
            await session.execute(text("SELECT 1"))
    except SqlNotConfiguredException:
        logger.warning("Readiness: DATABASE_URL is not configured")
        return False
    except (SQLAlchemyError, OSError) as e:
        logger.warning("Readiness: database query failed: %s", e)
        return False
    return True


@router.get(
    "/ready",
    response_model=ReadinessResponse,
    responses={503: {"model": ReadinessErrorResponse}},
)
async def readiness_check() -> ReadinessResponse | JSONResponse:
    """200 once the database answers SELECT 1, else 503 with status not_ready."""
    if await _database_answers():
        return ReadinessResponse()
    body = ReadinessErrorResponse(message="Database unreachable")
    return JSONResponse(status_code=503, content=body.model_dump())
