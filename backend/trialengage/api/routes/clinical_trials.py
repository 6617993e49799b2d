"""Clinical Trial Routes — the studies a tenant runs.

Invariants:
    - Investigators only see active trials; admins can ask for inactive ones too
    - Deleting a trial deactivates it; news and enrollments keep their link
    - updated_at is stamped on every edit
"""

import logging
from datetime import datetime, timezone
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from trialengage.api.dependencies import get_company_or_404, require_admin, require_member
from trialengage.core.errors import (
    ErrorContext, InvalidRequestError, ResourceNotFoundError,
)
from trialengage.infrastructure.database import get_db
from trialengage.infrastructure.tokens import Principal
from trialengage.models.clinical_trial import ClinicalTrial
from trialengage.models.company import Company
from trialengage.schemas.clinical_trial import (
    ClinicalTrialCreate, ClinicalTrialResponse, ClinicalTrialUpdate,
)
from trialengage.schemas.common import dump
from trialengage.services.clinical_trials import get_trial_or_404

logger = logging.getLogger(__name__)
router = APIRouter(
    prefix="/api/company/{company_id}/clinical-trials", tags=["clinical-trials"],
)


@router.get("")
async def list_trials(
    company: Company = Depends(get_company_or_404),
    principal: Principal = Depends(require_member),
    include_inactive: bool = Query(False),
    db: AsyncSession = Depends(get_db),
):
    query = select(ClinicalTrial).where(ClinicalTrial.company_id == company.id)
    if not (include_inactive and principal.is_admin):
        query = query.where(ClinicalTrial.is_active.is_(True))
    trials = (await db.execute(
        query.order_by(ClinicalTrial.created_at.desc()),
    )).scalars().all()
    return {"success": True, "trials": [dump(ClinicalTrialResponse, t) for t in trials]}


@router.get("/{trial_id}")
async def get_trial(
    trial_id: UUID,
    company: Company = Depends(get_company_or_404),
    principal: Principal = Depends(require_member),
    db: AsyncSession = Depends(get_db),
):
    trial = await get_trial_or_404(db, company.id, trial_id)
    if not trial.is_active and not principal.is_admin:
        raise ResourceNotFoundError(
            "Clinical trial", str(trial_id), ErrorContext(company_id=company.id),
        )
    return {"success": True, "trial": dump(ClinicalTrialResponse, trial)}


@router.post(
    "", status_code=status.HTTP_201_CREATED, dependencies=[Depends(require_admin)],
)
async def create_trial(
    body: ClinicalTrialCreate,
    company: Company = Depends(get_company_or_404),
    db: AsyncSession = Depends(get_db),
):
    trial = ClinicalTrial(company_id=company.id, **body.model_dump())
    db.add(trial)
    await db.commit()
    await db.refresh(trial)
    logger.info(f"Clinical trial created: {trial.trial_name}", extra={"company_id": company.id})
    return {
        "success": True,
        "message": "Clinical trial created successfully",
        "trial": dump(ClinicalTrialResponse, trial),
    }


@router.put("/{trial_id}", dependencies=[Depends(require_admin)])
async def update_trial(
    trial_id: UUID,
    body: ClinicalTrialUpdate,
    company: Company = Depends(get_company_or_404),
    db: AsyncSession = Depends(get_db),
):
    trial = await get_trial_or_404(db, company.id, trial_id)
    changes = body.model_dump(exclude_unset=True)
    for key, value in changes.items():
        if value is not None or key in ("start_date", "end_date"):
            setattr(trial, key, value)
    start, end = trial.start_date, trial.end_date
    if start and end and end < start:
        raise InvalidRequestError("end_date is before start_date", field="end_date")
    trial.updated_at = datetime.now(timezone.utc)
    await db.commit()
    await db.refresh(trial)
    return {
        "success": True,
        "message": "Clinical trial updated successfully",
        "trial": dump(ClinicalTrialResponse, trial),
    }


@router.delete("/{trial_id}", dependencies=[Depends(require_admin)])
async def delete_trial(
    trial_id: UUID,
    company: Company = Depends(get_company_or_404),
    db: AsyncSession = Depends(get_db),
):
    trial = await get_trial_or_404(db, company.id, trial_id)
    trial.is_active = False
    trial.updated_at = datetime.now(timezone.utc)
    await db.commit()
    logger.info(f"Clinical trial deactivated: {trial_id}", extra={"company_id": company.id})
    return {"success": True, "message": "Clinical trial deleted successfully"}
