"""
NoteShelf Backend — Health Check Route
========================================

What:  GET /api/healthchecker for monitoring and load balancer probes.
How:   Runs `SELECT 1` through the database handle. A reachable database gives
       200 with status "success"; an unreachable one gives 503 with status "fail".
"""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from app.database import Database, get_database
from app.schemas.note import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Health"])

MESSAGE = "NoteShelf notes API with FastAPI and SQLAlchemy"


@router.get(
    "/healthchecker",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_checker(database: Database = Depends(get_database)):
    try:
        await database.ping()
    except Exception as e:
        logger.warning("Health check: database unreachable: %s", str(e))
        return JSONResponse(
            status_code=503,
            content={"status": "fail", "message": "Database unreachable"},
        )

    return HealthResponse(status="success", message=MESSAGE)
