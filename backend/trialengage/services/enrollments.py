"""Enrollment Service — records enrollments and keeps hospital counters in step.

Invariants:
    - The hospital must belong to the same tenant as the enrollment
    - A linked clinical trial must be active and belong to the same tenant
    - Every create, status change and delete applies counter_delta to the hospital
    - Counters are clamped at zero (apply_delta)
    - Caller commits; a failed commit rolls back enrollment and counters together
"""

import logging
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from trialengage.core.domain_types import CompanyId, EnrollmentStatus, HospitalId
from trialengage.core.enrollment_counters import apply_delta, counter_delta
from trialengage.core.errors import (
    DuplicateResourceError, ErrorContext, ResourceNotFoundError,
)
from trialengage.models.enrollment import Enrollment
from trialengage.models.hospital import Hospital
from trialengage.services.clinical_trials import ensure_linkable

logger = logging.getLogger(__name__)


async def _hospital(
    db: AsyncSession, company_id: CompanyId, hospital_id: HospitalId,
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


def _move_counters(
    hospital: Hospital,
    old: EnrollmentStatus | None,
    new: EnrollmentStatus | None,
) -> None:
    hospital.consented_patients, hospital.randomized_patients = apply_delta(
        hospital.consented_patients,
        hospital.randomized_patients,
        counter_delta(old, new),
    )


async def record_enrollment(
    db: AsyncSession,
    company_id: CompanyId,
    hospital_id: HospitalId,
    patient_code: str,
    status: EnrollmentStatus,
    clinical_trial_id: UUID | None = None,
) -> Enrollment:
    hospital = await _hospital(db, company_id, hospital_id)
    await ensure_linkable(db, company_id, clinical_trial_id)
    existing = await db.execute(
        select(Enrollment.id).where(
            Enrollment.company_id == company_id,
            Enrollment.patient_code == patient_code,
        ),
    )
    if existing.scalar_one_or_none():
        raise DuplicateResourceError(
            "Enrollment", patient_code, ErrorContext(company_id=company_id),
        )

    enrollment = Enrollment(
        company_id=company_id,
        hospital_id=hospital.id,
        patient_code=patient_code,
        status=status.value,
        clinical_trial_id=clinical_trial_id,
    )
    db.add(enrollment)
    _move_counters(hospital, None, status)
    logger.info(
        f"Enrollment {patient_code} recorded at {hospital.name} ({status.value})",
        extra={"company_id": company_id},
    )
    return enrollment


async def change_status(
    db: AsyncSession, enrollment: Enrollment, status: EnrollmentStatus,
) -> Enrollment:
    old = EnrollmentStatus(enrollment.status)
    if old == status:
        return enrollment
    hospital = await _hospital(db, enrollment.company_id, enrollment.hospital_id)
    enrollment.status = status.value
    _move_counters(hospital, old, status)
    logger.info(
        f"Enrollment {enrollment.patient_code}: {old.value} -> {status.value}",
        extra={"company_id": enrollment.company_id},
    )
    return enrollment


async def remove_enrollment(db: AsyncSession, enrollment: Enrollment) -> None:
    hospital = await _hospital(db, enrollment.company_id, enrollment.hospital_id)
    _move_counters(hospital, EnrollmentStatus(enrollment.status), None)
    await db.delete(enrollment)


async def get_enrollment_or_404(
    db: AsyncSession, company_id: CompanyId, enrollment_id: UUID,
) -> Enrollment:
    result = await db.execute(
        select(Enrollment).where(
            Enrollment.id == enrollment_id, Enrollment.company_id == company_id,
        ),
    )
    enrollment = result.scalar_one_or_none()
    if not enrollment:
        raise ResourceNotFoundError(
            "Enrollment", str(enrollment_id), ErrorContext(company_id=company_id),
        )
    return enrollment
