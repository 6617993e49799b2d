"""Enrollment Routes — patient-level enrollment records behind the leaderboard counters.

Invariants:
    - Members record and update enrollments; only admins delete them
    - Hospital counters move in the same transaction as the enrollment row
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from trialengage.api.dependencies import get_company_or_404, require_admin, require_member
from trialengage.infrastructure.database import get_db
from trialengage.models.company import Company
from trialengage.models.enrollment import Enrollment
from trialengage.schemas.common import dump
from trialengage.schemas.enrollment import (
    EnrollmentCreate, EnrollmentResponse, EnrollmentUpdate,
)
from trialengage.services import enrollments as enrollment_service

logger = logging.getLogger(__name__)
router = APIRouter(
    prefix="/api/company/{company_id}/enrollments", tags=["enrollments"],
)


@router.get("", dependencies=[Depends(require_member)])
async def list_enrollments(
    company: Company = Depends(get_company_or_404),
    hospital_id: UUID | None = Query(None),
    db: AsyncSession = Depends(get_db),
):
    query = select(Enrollment).where(Enrollment.company_id == company.id)
    if hospital_id:
        query = query.where(Enrollment.hospital_id == hospital_id)
    rows = (await db.execute(query.order_by(Enrollment.created_at.desc()))).scalars().all()
    return {
        "success": True,
        "enrollments": [dump(EnrollmentResponse, e) for e in rows],
    }


@router.post(
    "", status_code=status.HTTP_201_CREATED, dependencies=[Depends(require_member)],
)
async def create_enrollment(
    body: EnrollmentCreate,
    company: Company = Depends(get_company_or_404),
    db: AsyncSession = Depends(get_db),
):
    enrollment = await enrollment_service.record_enrollment(
        db, company.id, body.hospital_id, body.patient_code,
        body.status, body.clinical_trial_id,
    )
    await db.commit()
    await db.refresh(enrollment)
    return {
        "success": True,
        "message": "Enrollment recorded",
        "enrollment": dump(EnrollmentResponse, enrollment),
    }


@router.patch("/{enrollment_id}", dependencies=[Depends(require_member)])
async def update_enrollment_status(
    enrollment_id: UUID,
    body: EnrollmentUpdate,
    company: Company = Depends(get_company_or_404),
    db: AsyncSession = Depends(get_db),
):
    enrollment = await enrollment_service.get_enrollment_or_404(
        db, company.id, enrollment_id,
    )
    await enrollment_service.change_status(db, enrollment, body.status)
    await db.commit()
    await db.refresh(enrollment)
    return {
        "success": True,
        "message": "Enrollment updated",
        "enrollment": dump(EnrollmentResponse, enrollment),
    }


@router.delete("/{enrollment_id}", dependencies=[Depends(require_admin)])
async def delete_enrollment(
    enrollment_id: UUID,
    company: Company = Depends(get_company_or_404),
    db: AsyncSession = Depends(get_db),
):
    enrollment = await enrollment_service.get_enrollment_or_404(
        db, company.id, enrollment_id,
    )
    await enrollment_service.remove_enrollment(db, enrollment)
    await db.commit()
    return {"success": True, "message": "Enrollment deleted"}
