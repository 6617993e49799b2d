"""Auth Routes — tenant admin login, investigator registration and sign-in.

Invariants:
    - Admin tokens carry sub=admin_username; investigator tokens carry sub=user id
    - Emails are unique platform-wide; duplicates are 409
    - Only approved investigators receive tokens or login codes
    - Login codes are delivered through the notifier, never in the response

Design Decisions:
    - Two investigator flows coexist: password (web) and one-time code (mobile)
    - Registration honours the tenant's auto_approval setting
"""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from trialengage.api.dependencies import (
    get_current_principal, get_login_code_book, get_token_codec,
)
from trialengage.config import Settings, get_settings
from trialengage.core.domain_types import Role, UserStatus
from trialengage.core.errors import (
    AccountNotApprovedError, AuthenticationError, DuplicateResourceError,
    ErrorContext, InvalidRequestError, ResourceNotFoundError,
)
from trialengage.core.login_codes import LoginCodeBook
from trialengage.core.passwords import hash_password, verify_password
from trialengage.infrastructure.database import get_db
from trialengage.infrastructure.notifier import Notifier, get_notifier
from trialengage.infrastructure.tokens import Principal, TokenCodec
from trialengage.models.company import Company
from trialengage.models.user import User
from trialengage.schemas.auth import (
    AuthenticatedUser, ClientLoginRequest, CompanySummary, LoginRequest,
    MobileRegisterRequest, RegisterRequest, RequestCodeRequest, VerifyCodeRequest,
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/auth", tags=["auth"])


def company_summary(company: Company) -> dict:
    return CompanySummary(
        id=company.id,
        name=company.name,
        primary_color=company.primary_color,
        logo_url=company.logo_url,
    ).model_dump()


def _user_payload(user: User) -> dict:
    return AuthenticatedUser(
        id=user.id,
        email=user.email,
        first_name=user.first_name,
        last_name=user.last_name,
        company_id=user.company_id,
        site=user.site,
        role=user.role,
        status=user.status,
    ).model_dump(mode="json")


async def _company_or_400(company_id: str, db: AsyncSession) -> Company:
    company = await db.get(Company, company_id)
    if not company:
        raise InvalidRequestError("Invalid company", field="company_id")
    return company


async def _find_user_by_email(email: str, db: AsyncSession) -> User | None:
    result = await db.execute(select(User).where(User.email == email.lower()))
    return result.scalar_one_or_none()


async def _create_user(
    company: Company, db: AsyncSession, *, email: str, first_name: str,
    last_name: str, site: str, role: str, password_hash: str | None,
) -> User:
    if await _find_user_by_email(email, db):
        raise DuplicateResourceError(
            "User", email, ErrorContext(company_id=company.id),
        )
    auto_approve = bool((company.settings or {}).get("auto_approval"))
    now = datetime.now(timezone.utc)
    user = User(
        company_id=company.id,
        email=email.lower(),
        first_name=first_name,
        last_name=last_name,
        site=site,
        role=role,
        password_hash=password_hash,
        status=(UserStatus.APPROVED if auto_approve else UserStatus.PENDING).value,
        approved_at=now if auto_approve else None,
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)
    logger.info(
        f"Registered {user.email} ({user.status})",
        extra={"company_id": company.id, "user_id": str(user.id)},
    )
    return user


def _registration_message(user: User) -> str:
    if user.status == UserStatus.APPROVED.value:
        return "Registration successful"
    return "Registration successful. Awaiting admin approval."


@router.post("/client-login")
async def client_login(
    body: ClientLoginRequest,
    db: AsyncSession = Depends(get_db),
    codec: TokenCodec = Depends(get_token_codec),
):
    """Tenant admin login with the company's admin credentials."""
    result = await db.execute(
        select(Company).where(Company.admin_username == body.username),
    )
    company = result.scalar_one_or_none()
    if not company or not verify_password(body.password, company.admin_password_hash):
        logger.warning(f"Failed admin login for '{body.username}'")
        raise AuthenticationError()

    logger.info("Admin login", extra={"company_id": company.id})
    return {
        "success": True,
        "message": "Login successful",
        "company": company_summary(company),
        "token": codec.encode(company.admin_username, company.id, Role.ADMIN),
    }


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(body: RegisterRequest, db: AsyncSession = Depends(get_db)):
    """Password-based investigator registration."""
    company = await _company_or_400(body.company_id, db)
    user = await _create_user(
        company, db,
        email=body.email,
        first_name=body.first_name,
        last_name=body.last_name,
        site=body.site,
        role=body.role,
        password_hash=hash_password(body.password),
    )
    return {
        "success": True,
        "message": _registration_message(user),
        "user": _user_payload(user),
    }


@router.post("/login")
async def login(
    body: LoginRequest,
    db: AsyncSession = Depends(get_db),
    codec: TokenCodec = Depends(get_token_codec),
):
    """Password login for investigators of one tenant."""
    company = await _company_or_400(body.company_id, db)
    result = await db.execute(
        select(User).where(User.email == body.email, User.company_id == company.id),
    )
    user = result.scalar_one_or_none()
    if not user or not verify_password(body.password, user.password_hash):
        logger.warning(
            f"Failed login for {body.email}", extra={"company_id": company.id},
        )
        raise AuthenticationError()
    if user.status != UserStatus.APPROVED.value:
        raise AccountNotApprovedError(
            user.status, ErrorContext(company_id=company.id, user_id=str(user.id)),
        )

    return {
        "success": True,
        "message": "Login successful",
        "token": codec.encode(str(user.id), company.id, Role.INVESTIGATOR),
        "user": _user_payload(user),
    }


@router.post("/mobile/register", status_code=status.HTTP_201_CREATED)
async def mobile_register(
    body: MobileRegisterRequest,
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """Code-login registration; tenant defaults to the configured one."""
    company = await _company_or_400(
        body.company_id or settings.default_company_id, db,
    )
    user = await _create_user(
        company, db,
        email=body.email,
        first_name=body.first_name,
        last_name=body.last_name,
        site=body.site,
        role=body.role,
        password_hash=None,
    )
    return {
        "success": True,
        "message": _registration_message(user),
        "user": _user_payload(user),
    }


@router.post("/mobile/request-code")
async def request_code(
    body: RequestCodeRequest,
    db: AsyncSession = Depends(get_db),
    book: LoginCodeBook = Depends(get_login_code_book),
    notifier: Notifier = Depends(get_notifier),
):
    """Issue a one-time login code to an approved investigator."""
    user = await _find_user_by_email(body.email, db)
    if not user:
        raise ResourceNotFoundError("User", body.email)
    if user.status != UserStatus.APPROVED.value:
        raise AccountNotApprovedError(
            user.status, ErrorContext(company_id=user.company_id, user_id=str(user.id)),
        )

    code = book.issue(user.email)
    await notifier.send_login_code(user.email, code, max(1, int(book.ttl_seconds // 60)))
    return {
        "success": True,
        "message": "Login code sent to your email",
        "expires_in": int(book.ttl_seconds),
    }


@router.post("/mobile/verify-code")
async def verify_code(
    body: VerifyCodeRequest,
    db: AsyncSession = Depends(get_db),
    book: LoginCodeBook = Depends(get_login_code_book),
    codec: TokenCodec = Depends(get_token_codec),
):
    """Exchange a login code for a token."""
    book.verify(body.email, body.code)
    user = await _find_user_by_email(body.email, db)
    if not user:
        raise ResourceNotFoundError("User", body.email)
    if user.status != UserStatus.APPROVED.value:
        raise AccountNotApprovedError(user.status)

    logger.info(
        "Code login", extra={"company_id": user.company_id, "user_id": str(user.id)},
    )
    return {
        "success": True,
        "message": "Login successful",
        "token": codec.encode(str(user.id), user.company_id, Role.INVESTIGATOR),
        "user": _user_payload(user),
    }


@router.get("/verify")
async def verify_token(principal: Principal = Depends(get_current_principal)):
    return {
        "success": True,
        "principal": {
            "subject": principal.subject,
            "company_id": principal.company_id,
            "role": principal.role.value,
        },
    }
