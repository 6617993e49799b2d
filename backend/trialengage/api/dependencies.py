"""Request Dependencies — tenant resolution, bearer auth and shared services.

Invariants:
    - Unknown company_id → 404 before any auth decision is made
    - A principal may only act on its own tenant (403 otherwise)
    - Investigator principals count as members only while their user row is approved
    - Platform endpoints require the X-Admin-Key header

Design Decisions:
    - FastAPI caches dependencies per request, so get_db yields one session
      shared by the tenant lookup, the auth check and the handler
    - Login code book is a module-level singleton (single-process uvicorn;
      codes are lost on restart)
"""

import logging
import secrets
import uuid

from fastapi import Depends, Header
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from trialengage.config import Settings, get_settings
from trialengage.core.domain_types import UserStatus
from trialengage.core.errors import (
    AuthenticationError, ErrorContext, PermissionDeniedError, ResourceNotFoundError,
)
from trialengage.core.login_codes import LoginCodeBook
from trialengage.infrastructure.database import get_db
from trialengage.infrastructure.file_storage import DocumentStorage
from trialengage.infrastructure.tokens import Principal, TokenCodec
from trialengage.models.company import Company
from trialengage.models.user import User

logger = logging.getLogger(__name__)

_bearer = HTTPBearer(auto_error=False)

_code_book: LoginCodeBook | None = None


async def get_company_or_404(
    company_id: str, db: AsyncSession = Depends(get_db),
) -> Company:
    result = await db.execute(select(Company).where(Company.id == company_id))
    company = result.scalar_one_or_none()
    if not company:
        raise ResourceNotFoundError(
            "Company", company_id, ErrorContext(company_id=company_id),
        )
    return company


def get_token_codec(settings: Settings = Depends(get_settings)) -> TokenCodec:
    return TokenCodec(
        settings.jwt_secret, settings.jwt_algorithm, settings.jwt_expires_minutes,
    )


async def get_current_principal(
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer),
    codec: TokenCodec = Depends(get_token_codec),
) -> Principal:
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("Access token required")
    return codec.decode(credentials.credentials)


async def _load_investigator(
    principal: Principal, db: AsyncSession,
) -> User | None:
    try:
        user_id = uuid.UUID(principal.subject)
    except ValueError:
        return None
    result = await db.execute(
        select(User).where(
            User.id == user_id, User.company_id == principal.company_id,
        ),
    )
    return result.scalar_one_or_none()


async def require_member(
    company: Company = Depends(get_company_or_404),
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db),
) -> Principal:
    """Admin or approved investigator of this tenant."""
    context = ErrorContext(company_id=company.id, user_id=principal.subject)
    if principal.company_id != company.id:
        raise PermissionDeniedError("Access denied to this company", context)
    if principal.is_admin:
        return principal
    user = await _load_investigator(principal, db)
    if not user or user.status != UserStatus.APPROVED.value:
        raise PermissionDeniedError("Account is not active", context)
    return principal


async def require_admin(
    company: Company = Depends(get_company_or_404),
    principal: Principal = Depends(get_current_principal),
) -> Principal:
    context = ErrorContext(company_id=company.id, user_id=principal.subject)
    if principal.company_id != company.id:
        raise PermissionDeniedError("Access denied to this company", context)
    if not principal.is_admin:
        raise PermissionDeniedError("Admin access required", context)
    return principal


async def get_current_investigator(
    principal: Principal = Depends(require_member),
    db: AsyncSession = Depends(get_db),
) -> User:
    """The caller's own user row; admins have none."""
    if principal.is_admin:
        raise PermissionDeniedError(
            "Only investigators have a user profile",
            ErrorContext(company_id=principal.company_id),
        )
    user = await _load_investigator(principal, db)
    if not user:
        raise ResourceNotFoundError("User", principal.subject)
    return user


def get_login_code_book(settings: Settings = Depends(get_settings)) -> LoginCodeBook:
    global _code_book
    if _code_book is None:
        _code_book = LoginCodeBook(
            ttl_seconds=settings.login_code_ttl_seconds,
            max_attempts=settings.login_code_max_attempts,
        )
    return _code_book


def get_document_storage(settings: Settings = Depends(get_settings)) -> DocumentStorage:
    return DocumentStorage(settings.upload_dir)


async def require_platform_admin(
    x_admin_key: str | None = Header(None),
    settings: Settings = Depends(get_settings),
) -> None:
    if not x_admin_key:
        raise AuthenticationError("Admin key required")
    if not secrets.compare_digest(x_admin_key, settings.platform_admin_key):
        logger.warning("Rejected platform request with a wrong admin key")
        raise PermissionDeniedError("Invalid admin key")
