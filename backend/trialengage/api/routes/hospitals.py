"""Hospital Routes — site CRUD plus the enrollment leaderboard views.

Invariants:
    - Hospitals are listed by name; leaderboards by rank (core/leaderboard.py)
    - Counter edits here overwrite aggregates directly; enrollment routes
      adjust them incrementally
    - A single site's rank is taken from the full board, ties included
    - my-rank matches the investigator's site to a hospital name, ignoring case
      and surrounding whitespace
"""

import logging
from datetime import datetime, timezone
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from trialengage.api.dependencies import (
    get_company_or_404, get_current_investigator, require_admin, require_member,
)
from trialengage.core.errors import ErrorContext, ResourceNotFoundError
from trialengage.core.leaderboard import Leaderboard, RankedHospital, build_leaderboard
from trialengage.infrastructure.database import get_db
from trialengage.models.company import Company
from trialengage.models.enrollment import Enrollment
from trialengage.models.hospital import Hospital
from trialengage.models.user import User
from trialengage.schemas.common import dump
from trialengage.schemas.hospital import (
    HospitalCreate, HospitalResponse, HospitalUpdate, LeaderboardEntry,
    LeaderboardSummary,
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/company/{company_id}", tags=["hospitals"])


async def get_hospital_or_404(
    company_id: str, hospital_id: UUID, db: AsyncSession,
) -> Hospital:
    result = await db.execute(
        select(Hospital).where(
            Hospital.id == hospital_id, Hospital.company_id == company_id,
        ),
    )
    hospital = result.scalar_one_or_none()
    if not hospital:
        raise ResourceNotFoundError(
            "Hospital", str(hospital_id), ErrorContext(company_id=company_id),
        )
    return hospital


async def _ranked(company_id: str, db: AsyncSession) -> Leaderboard[Hospital]:
    hospitals = (await db.execute(
        select(Hospital).where(Hospital.company_id == company_id),
    )).scalars().all()
    return build_leaderboard(hospitals)


def _entry(entry: RankedHospital[Hospital]) -> dict:
    return LeaderboardEntry(
        rank=entry.rank,
        **HospitalResponse.model_validate(entry.hospital).model_dump(),
    ).model_dump(mode="json")


def _entries(board: Leaderboard[Hospital]) -> list[dict]:
    return [_entry(entry) for entry in board.entries]


def _summary(board: Leaderboard[Hospital]) -> dict:
    return LeaderboardSummary(
        total_consented=board.total_consented,
        total_randomized=board.total_randomized,
        total_hospitals=board.total_hospitals,
    ).model_dump()


def _rank_response(board: Leaderboard[Hospital], entry: RankedHospital[Hospital]) -> dict:
    return {
        "success": True,
        "hospital": _entry(entry),
        "summary": _summary(board),
    }


@router.get("/hospitals", dependencies=[Depends(require_member)])
async def list_hospitals(
    company: Company = Depends(get_company_or_404),
    db: AsyncSession = Depends(get_db),
):
    hospitals = (await db.execute(
        select(Hospital).where(Hospital.company_id == company.id)
        .order_by(Hospital.name),
    )).scalars().all()
    return {
        "success": True,
        "hospitals": [dump(HospitalResponse, h) for h in hospitals],
    }


@router.get("/hospitals/{hospital_id}", dependencies=[Depends(require_member)])
async def get_hospital(
    hospital_id: UUID,
    company: Company = Depends(get_company_or_404),
    db: AsyncSession = Depends(get_db),
):
    hospital = await get_hospital_or_404(company.id, hospital_id, db)
    return {"success": True, "hospital": dump(HospitalResponse, hospital)}


@router.post(
    "/hospitals", status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
async def create_hospital(
    body: HospitalCreate,
    company: Company = Depends(get_company_or_404),
    db: AsyncSession = Depends(get_db),
):
    hospital = Hospital(company_id=company.id, **body.model_dump())
    db.add(hospital)
    await db.commit()
    await db.refresh(hospital)
    logger.info(f"Hospital added: {hospital.name}", extra={"company_id": company.id})
    return {
        "success": True,
        "message": "Hospital added successfully",
        "hospital": dump(HospitalResponse, hospital),
    }


@router.put("/hospitals/{hospital_id}", dependencies=[Depends(require_admin)])
async def update_hospital(
    hospital_id: UUID,
    body: HospitalUpdate,
    company: Company = Depends(get_company_or_404),
    db: AsyncSession = Depends(get_db),
):
    hospital = await get_hospital_or_404(company.id, hospital_id, db)
    for key, value in body.model_dump(exclude_unset=True, exclude_none=True).items():
        setattr(hospital, key, value)
    hospital.updated_at = datetime.now(timezone.utc)
    await db.commit()
    await db.refresh(hospital)
    return {
        "success": True,
        "message": "Hospital updated successfully",
        "hospital": dump(HospitalResponse, hospital),
    }


@router.delete("/hospitals/{hospital_id}", dependencies=[Depends(require_admin)])
async def delete_hospital(
    hospital_id: UUID,
    company: Company = Depends(get_company_or_404),
    db: AsyncSession = Depends(get_db),
):
    hospital = await get_hospital_or_404(company.id, hospital_id, db)
    await db.execute(delete(Enrollment).where(Enrollment.hospital_id == hospital.id))
    await db.delete(hospital)
    await db.commit()
    logger.info(f"Hospital deleted: {hospital_id}", extra={"company_id": company.id})
    return {"success": True, "message": "Hospital deleted successfully"}


@router.get("/leaderboard", dependencies=[Depends(require_member)])
async def leaderboard(
    company: Company = Depends(get_company_or_404),
    db: AsyncSession = Depends(get_db),
):
    board = await _ranked(company.id, db)
    return {
        "success": True,
        "hospitals": _entries(board),
        "summary": _summary(board),
    }


@router.get(
    "/leaderboard/hospitals/{hospital_id}", dependencies=[Depends(require_member)],
)
async def hospital_rank(
    hospital_id: UUID,
    company: Company = Depends(get_company_or_404),
    db: AsyncSession = Depends(get_db),
):
    board = await _ranked(company.id, db)
    entry = board.entry_for(lambda h: h.id == hospital_id)
    if not entry:
        raise ResourceNotFoundError(
            "Hospital", str(hospital_id), ErrorContext(company_id=company.id),
        )
    return _rank_response(board, entry)


@router.get("/leaderboard/my-rank")
async def my_rank(
    company: Company = Depends(get_company_or_404),
    user: User = Depends(get_current_investigator),
    db: AsyncSession = Depends(get_db),
):
    site = user.site.strip().casefold()
    board = await _ranked(company.id, db)
    entry = board.entry_for(lambda h: bool(site) and h.name.strip().casefold() == site)
    if not entry:
        raise ResourceNotFoundError(
            "Hospital", user.site or "(no site)", ErrorContext(company_id=company.id),
        )
    return _rank_response(board, entry)


@router.get("/mobile/leaderboard", dependencies=[Depends(require_member)])
async def mobile_leaderboard(
    company: Company = Depends(get_company_or_404),
    db: AsyncSession = Depends(get_db),
):
    board = await _ranked(company.id, db)
    return {
        "success": True,
        "hospitals": _entries(board),
        "total_consented": board.total_consented,
        "total_randomized": board.total_randomized,
        "last_updated": datetime.now(timezone.utc).isoformat(),
    }
