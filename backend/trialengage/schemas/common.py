"""Shared schema helpers."""

from typing import Annotated

from pydantic import BaseModel, BeforeValidator, ConfigDict, EmailStr


def _normalize_email(value):
    return value.strip().lower() if isinstance(value, str) else value


# Stored and compared lower-cased everywhere
NormalizedEmail = Annotated[EmailStr, BeforeValidator(_normalize_email)]


class ORMResponse(BaseModel):
    """Base for responses built from ORM rows."""
    model_config = ConfigDict(from_attributes=True)


def strip_required(value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError("cannot be empty or whitespace")
    return value


def dump(schema: type[BaseModel], obj) -> dict:
    """Validate an ORM row through a response schema into JSON-ready data."""
    return schema.model_validate(obj).model_dump(mode="json")
