"""Document Schemas — PDFs, training materials, study protocols."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from trialengage.core.domain_types import ProtocolType, TrainingMaterialType
from trialengage.schemas.common import ORMResponse, strip_required


class PdfResponse(ORMResponse):
    id: UUID
    company_id: str
    title: str
    description: str
    category: str
    filename: str
    original_name: str
    size_bytes: int
    size_label: str
    created_at: datetime


class TrainingMaterialCreate(BaseModel):
    title: str = Field(min_length=1, max_length=300)
    type: TrainingMaterialType
    description: str = Field("", max_length=5000)
    content: str = Field("", max_length=50_000)
    category: str = Field("General", min_length=1, max_length=100)

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: str) -> str:
        return strip_required(v)


class TrainingMaterialResponse(ORMResponse):
    id: UUID
    company_id: str
    title: str
    description: str
    type: str
    content: str
    category: str
    created_by: str
    created_at: datetime


class StudyProtocolCreate(BaseModel):
    title: str = Field(min_length=1, max_length=300)
    type: ProtocolType
    description: str = Field("", max_length=5000)
    content: str = Field("", max_length=50_000)
    version: str = Field("1.0", min_length=1, max_length=20)

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: str) -> str:
        return strip_required(v)


class StudyProtocolResponse(ORMResponse):
    id: UUID
    company_id: str
    title: str
    description: str
    type: str
    content: str
    version: str
    created_by: str
    created_at: datetime
