"""Health check endpoint for service monitoring."""

from typing import Annotated

import structlog
from fastapi import APIRouter, Depends, Response
from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError

from wallet_ledger import __version__
from wallet_ledger.core.dependencies import get_database
from wallet_ledger.infrastructure.database import DatabaseSessionManager

logger = structlog.get_logger(__name__)

health_router = APIRouter()


class HealthResponse(BaseModel):
    status: str = "healthy"
    version: str
    database: str = "ok"


@health_router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health Check",
    description="Returns the service status and whether the database answers.",
    responses={503: {"model": HealthResponse, "description": "Database unreachable"}},
)
async def health_check(
    response: Response,
    database: Annotated[DatabaseSessionManager, Depends(get_database)],
) -> HealthResponse:
    try:
        await database.ping()
    except (RuntimeError, SQLAlchemyError) as e:
        logger.warning("health_database_unavailable", error=str(e))
        response.status_code = 503
        return HealthResponse(status="degraded", version=__version__, database="unavailable")

    return HealthResponse(status="healthy", version=__version__)
