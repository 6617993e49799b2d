"""Clinical Trial Schemas.

Invariants:
    - trial_name is required on create and never blank; "name" is accepted as an alias
    - end_date is not before start_date when both are given
"""

from datetime import date, datetime
from uuid import UUID

from pydantic import AliasChoices, BaseModel, Field, field_validator, model_validator

from trialengage.schemas.common import ORMResponse, strip_required


class _DateRange(BaseModel):
    start_date: date | None = None
    end_date: date | None = None

    @model_validator(mode="after")
    def check_range(self):
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValueError("end_date is before start_date")
        return self


class ClinicalTrialCreate(_DateRange):
    trial_name: str = Field(
        min_length=1, max_length=300,
        validation_alias=AliasChoices("trial_name", "name"),
    )
    description: str = Field("", max_length=5000)
    status: str = Field("Active", min_length=1, max_length=50)
    is_active: bool = True

    @field_validator("trial_name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        return strip_required(v)


class ClinicalTrialUpdate(_DateRange):
    """Partial update — omitted fields keep their stored value."""
    trial_name: str | None = Field(
        None, min_length=1, max_length=300,
        validation_alias=AliasChoices("trial_name", "name"),
    )
    description: str | None = Field(None, max_length=5000)
    status: str | None = Field(None, min_length=1, max_length=50)
    is_active: bool | None = None

    @field_validator("trial_name")
    @classmethod
    def strip_name(cls, v: str | None) -> str | None:
        return strip_required(v) if v is not None else v


class ClinicalTrialResponse(ORMResponse):
    id: UUID
    company_id: str
    trial_name: str
    description: str
    status: str
    start_date: date | None = None
    end_date: date | None = None
    is_active: bool
    created_at: datetime
    updated_at: datetime | None = None
