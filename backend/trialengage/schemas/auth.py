"""Auth Schemas — admin login, investigator registration, and code login.

Invariants:
    - Emails are stripped and lower-cased before reaching route handlers
    - Codes are exactly six digits
"""

from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from trialengage.schemas.common import NormalizedEmail, strip_required


class _EmailMixin(BaseModel):
    email: NormalizedEmail


class ClientLoginRequest(BaseModel):
    username: str = Field(min_length=1, max_length=100)
    password: str = Field(min_length=1, max_length=200)


class CompanySummary(BaseModel):
    id: str
    name: str
    primary_color: str
    logo_url: str | None = None


class RegisterRequest(_EmailMixin):
    """Password-based registration (admin-dashboard era clients)."""
    company_id: str = Field(min_length=1, max_length=64)
    password: str = Field(min_length=8, max_length=200)
    first_name: str = Field(min_length=1, max_length=100)
    last_name: str = Field(min_length=1, max_length=100)
    site: str = Field("", max_length=200)
    role: str = Field("", max_length=100)

    @field_validator("first_name", "last_name")
    @classmethod
    def strip_names(cls, v: str) -> str:
        return strip_required(v)


class MobileRegisterRequest(_EmailMixin):
    """Code-login registration from the mobile app; no password."""
    first_name: str = Field(min_length=1, max_length=100)
    last_name: str = Field(min_length=1, max_length=100)
    site: str = Field(min_length=1, max_length=200)
    role: str = Field(min_length=1, max_length=100)
    company_id: str | None = Field(None, max_length=64)

    @field_validator("first_name", "last_name", "site", "role")
    @classmethod
    def strip_fields(cls, v: str) -> str:
        return strip_required(v)


class LoginRequest(_EmailMixin):
    company_id: str = Field(min_length=1, max_length=64)
    password: str = Field(min_length=1, max_length=200)


class RequestCodeRequest(_EmailMixin):
    pass


class VerifyCodeRequest(_EmailMixin):
    code: str = Field(pattern=r"^\s*\d{6}\s*$")


class AuthenticatedUser(BaseModel):
    id: UUID
    email: str
    first_name: str
    last_name: str
    company_id: str
    site: str | None = None
    role: str | None = None
    status: str | None = None
