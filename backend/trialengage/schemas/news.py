"""News Schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from trialengage.schemas.common import ORMResponse, strip_required


class NewsCreate(BaseModel):
    title: str = Field(min_length=1, max_length=300)
    content: str = Field(min_length=1, max_length=20_000)
    published: bool = False
    clinical_trial_id: UUID | None = None

    @field_validator("title", "content")
    @classmethod
    def strip_text(cls, v: str) -> str:
        return strip_required(v)


class NewsUpdate(BaseModel):
    """Partial update — omitted fields keep their stored value."""
    title: str | None = Field(None, min_length=1, max_length=300)
    content: str | None = Field(None, min_length=1, max_length=20_000)
    published: bool | None = None
    clinical_trial_id: UUID | None = None

    @field_validator("title", "content")
    @classmethod
    def strip_text(cls, v: str | None) -> str | None:
        return strip_required(v) if v is not None else v


class NewsResponse(ORMResponse):
    id: UUID
    company_id: str
    title: str
    content: str
    published: bool
    clinical_trial_id: UUID | None = None
    created_at: datetime
    updated_at: datetime | None = None
