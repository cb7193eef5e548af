"""Health Routes - liveness and readiness checks.

Invariants:
    - GET /health/ answers 200 whenever the process is up
    - GET /health/ready answers 503 until the database accepts queries
"""

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

import shopledger.infrastructure.database as db_module
from shopledger import __version__
from shopledger.config import get_settings

router = APIRouter(prefix="/api/v1/health", tags=["health"])


@router.get("/", status_code=status.HTTP_200_OK)
async def liveness():
    return {
        "status": "healthy",
        "service": "shopledger-api",
        "version": __version__,
        "currency": get_settings().currency_code,
    }


@router.get("/ready")
async def readiness():
    manager = db_module.db_manager
    if manager is None or not await manager.health_check():
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "not_ready", "reason": "database_unavailable"},
        )
    return {"status": "ready", "checks": {"database": "healthy"}}
