"""Hospital Schemas — site CRUD and leaderboard rows.

Invariants:
    - Counters are non-negative integers; consent_rate is a non-negative float
    - Blank/null counters coerce to 0 (admin forms submit empty strings)
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from trialengage.schemas.common import ORMResponse, strip_required


def _blank_to_zero(v):
    if v is None or (isinstance(v, str) and not v.strip()):
        return 0
    return v


class HospitalCreate(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    location: str = Field(min_length=1, max_length=200)
    principal_investigator: str = Field("", max_length=200)
    consented_patients: int = Field(0, ge=0)
    randomized_patients: int = Field(0, ge=0)
    consent_rate: float = Field(0.0, ge=0)

    @field_validator("name", "location")
    @classmethod
    def strip_text(cls, v: str) -> str:
        return strip_required(v)

    @field_validator(
        "consented_patients", "randomized_patients", "consent_rate", mode="before",
    )
    @classmethod
    def coerce_blank(cls, v):
        return _blank_to_zero(v)


class HospitalUpdate(BaseModel):
    """Partial update — omitted fields keep their stored value."""
    name: str | None = Field(None, min_length=1, max_length=200)
    location: str | None = Field(None, min_length=1, max_length=200)
    principal_investigator: str | None = Field(None, max_length=200)
    consented_patients: int | None = Field(None, ge=0)
    randomized_patients: int | None = Field(None, ge=0)
    consent_rate: float | None = Field(None, ge=0)

    @field_validator("name", "location")
    @classmethod
    def strip_text(cls, v: str | None) -> str | None:
        return strip_required(v) if v is not None else v

    @field_validator(
        "consented_patients", "randomized_patients", "consent_rate", mode="before",
    )
    @classmethod
    def coerce_blank(cls, v):
        if v is None:
            return None
        return _blank_to_zero(v)


class HospitalResponse(ORMResponse):
    id: UUID
    company_id: str
    name: str
    location: str
    principal_investigator: str
    consented_patients: int
    randomized_patients: int
    consent_rate: float
    created_at: datetime
    updated_at: datetime | None = None


class LeaderboardEntry(HospitalResponse):
    rank: int


class LeaderboardSummary(BaseModel):
    total_consented: int
    total_randomized: int
    total_hospitals: int
