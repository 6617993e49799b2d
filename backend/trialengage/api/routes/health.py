"""Health & Readiness Checks — liveness, readiness and a tenant smoke check.

Invariants:
    - GET /health always returns 200 if process is up (liveness)
    - GET /health/ready returns 503 if database is unreachable (readiness)

Design Decisions:
    - Separate liveness/readiness: liveness restarts, readiness removes from
      the load balancer
    - db_manager resolved per call; it is created in the lifespan, after import
"""

import logging
from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from trialengage.infrastructure.database import get_db, get_db_manager
from trialengage.models.company import Company

logger = logging.getLogger(__name__)
router = APIRouter(tags=["health"])


@router.get("/health", status_code=status.HTTP_200_OK)
async def health_check():
    """Basic liveness check. Returns 200 if the process is up."""
    return {
        "status": "healthy",
        "service": "trialengage-api",
        "version": "1.0.0",
    }


@router.get("/health/ready")
async def readiness_check():
    """Readiness check — includes database connectivity."""
    manager = get_db_manager()
    db_ok = await manager.health_check() if manager else False
    if not db_ok:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "status": "not_ready",
                "reason": "database_unavailable",
            },
        )
    return {"status": "ready", "checks": {"database": "healthy"}}


@router.get("/api/test")
async def smoke_test(db: AsyncSession = Depends(get_db)):
    result = await db.execute(select(Company.id).order_by(Company.id))
    return {
        "success": True,
        "message": "Multi-tenant server is working",
        "companies": list(result.scalars().all()),
    }
