"""Clinical Trial Service — tenant-scoped trial lookups shared by several routes.

Invariants:
    - A trial is only visible inside its own company
    - News and enrollments may only link to an active trial of their company
"""

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from trialengage.core.domain_types import CompanyId
from trialengage.core.errors import (
    ErrorContext, InvalidRequestError, ResourceNotFoundError,
)
from trialengage.models.clinical_trial import ClinicalTrial


async def find_trial(
    db: AsyncSession, company_id: CompanyId, trial_id: UUID,
) -> ClinicalTrial | None:
    result = await db.execute(
        select(ClinicalTrial).where(
            ClinicalTrial.id == trial_id, ClinicalTrial.company_id == company_id,
        ),
    )
    return result.scalar_one_or_none()


async def get_trial_or_404(
    db: AsyncSession, company_id: CompanyId, trial_id: UUID,
) -> ClinicalTrial:
    trial = await find_trial(db, company_id, trial_id)
    if not trial:
        raise ResourceNotFoundError(
            "Clinical trial", str(trial_id), ErrorContext(company_id=company_id),
        )
    return trial


async def ensure_linkable(
    db: AsyncSession, company_id: CompanyId, trial_id: UUID | None,
) -> None:
    """Raise InvalidRequestError unless trial_id is None or an active trial here."""
    if trial_id is None:
        return
    trial = await find_trial(db, company_id, trial_id)
    if not trial or not trial.is_active:
        raise InvalidRequestError(
            "Unknown or inactive clinical trial",
            field="clinical_trial_id",
            context=ErrorContext(company_id=company_id),
        )
