"""Backup Routes — platform-operator snapshot, emergency export and restore.

Invariants:
    - Every route requires the X-Admin-Key header (require_platform_admin)
    - Snapshots span all tenants; restore merges per tenant
"""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from trialengage.api.dependencies import require_platform_admin
from trialengage.config import Settings, get_settings
from trialengage.core.backup import snapshot_totals
from trialengage.infrastructure.database import get_db
from trialengage.schemas.backup import RestoreRequest
from trialengage.services.backup import (
    build_snapshot, restore_snapshot, restored_hospital_total, write_export,
)

logger = logging.getLogger(__name__)
router = APIRouter(
    prefix="/api", tags=["backup"], dependencies=[Depends(require_platform_admin)],
)


@router.get("/backup")
async def backup(db: AsyncSession = Depends(get_db)):
    companies = await build_snapshot(db)
    return {
        "success": True,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "companies": companies,
        "totals": snapshot_totals(companies),
    }


@router.get("/emergency-export")
async def emergency_export(
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    companies = await build_snapshot(db)
    path = write_export(companies, settings.backup_dir)
    return {
        "success": True,
        "message": "Emergency export created",
        "file": path.name,
        "companies": companies,
        "totals": snapshot_totals(companies),
    }


@router.post("/restore-data")
async def restore_data(body: RestoreRequest, db: AsyncSession = Depends(get_db)):
    restored = await restore_snapshot(db, body.companies)
    await db.commit()
    logger.warning(f"Data restored for {restored}")
    return {
        "success": True,
        "message": "Data restored successfully",
        "restored_companies": restored,
        "total_hospitals": restored_hospital_total(body.companies),
    }
