"""Health & Readiness Probes — for container orchestration and load balancers.

Invariants:
    - GET /api/v1/health/ answers 200 while the process is up (liveness)
    - GET /api/v1/health/ready answers 503 until the database answers SELECT 1

Design Decisions:
    - db_manager read from the module at call time: it is created in the lifespan,
      after this router is imported
"""

import logging

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from crudflow import __version__
from crudflow.infrastructure import database

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/health", tags=["health"])

SERVICE_NAME = "crudflow-api"


@router.get("/", status_code=status.HTTP_200_OK)
async def health_check():
    return {"status": "healthy", "service": SERVICE_NAME, "version": __version__}


@router.get("/ready")
async def readiness_check():
    manager = database.db_manager
    if manager is None or not await manager.health_check():
        logger.warning("Readiness check failed: database unavailable")
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "not_ready", "reason": "database_unavailable"},
        )
    return {"status": "ready", "checks": {"database": "healthy"}}
