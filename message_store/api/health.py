"""
Health check endpoints for liveness and readiness probes.
"""
from typing import Annotated

from fastapi import APIRouter, Depends, Response

from message_store.core.database import Database, get_database
from message_store.core.logging import get_logger
from message_store.core.migrations import is_up_to_date
from message_store.schemas.message import HealthResponse

logger = get_logger(__name__)

router = APIRouter(prefix="/health", tags=["Health"])


@router.get(
    "/live",
    response_model=HealthResponse,
    summary="Liveness probe",
    description="Always returns 200 to indicate the service is alive."
)
async def liveness() -> HealthResponse:
    return HealthResponse(status="ok")


@router.get(
    "/ready",
    response_model=HealthResponse,
    summary="Readiness probe",
    description="Returns 200 if the service is ready to handle traffic."
)
def readiness(
    response: Response,
    database: Annotated[Database, Depends(get_database)],
) -> HealthResponse:
    """
    Readiness probe - checks if the service can handle traffic.

    Checks:
    - Database is reachable
    - Schema is at the latest migration (startup migrations may have failed)
    """
    checks = {}
    is_ready = True

    db_ok = database.check_connection()
    checks["database"] = "ok" if db_ok else "failed"
    if not db_ok:
        is_ready = False
        logger.warning("Readiness check failed: database not reachable")

    schema_ok = db_ok and is_up_to_date(database.engine)
    checks["migrations"] = "ok" if schema_ok else "pending"
    if not schema_ok:
        is_ready = False
        logger.warning("Readiness check failed: migrations not applied")

    if is_ready:
        return HealthResponse(status="ok", checks=checks)
    else:
        response.status_code = 503
        return HealthResponse(status="not ready", checks=checks)
