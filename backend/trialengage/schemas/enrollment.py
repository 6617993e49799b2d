"""Enrollment Schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from trialengage.core.domain_types import EnrollmentStatus
from trialengage.schemas.common import ORMResponse, strip_required


class EnrollmentCreate(BaseModel):
    hospital_id: UUID
    patient_code: str = Field(min_length=1, max_length=100)
    status: EnrollmentStatus = EnrollmentStatus.CONSENTED
    clinical_trial_id: UUID | None = None

    @field_validator("patient_code")
    @classmethod
    def strip_code(cls, v: str) -> str:
        return strip_required(v)


class EnrollmentUpdate(BaseModel):
    status: EnrollmentStatus


class EnrollmentResponse(ORMResponse):
    id: UUID
    company_id: str
    hospital_id: UUID
    patient_code: str
    status: EnrollmentStatus
    clinical_trial_id: UUID | None = None
    created_at: datetime
    updated_at: datetime | None = None
