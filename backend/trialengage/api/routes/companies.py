"""Company Routes — admin dashboard, tenant settings, user approval and usage tracking.

Invariants:
    - Every route is scoped to /api/company/{company_id}; the tenant must exist
    - User mutations only touch users of that tenant (other tenants' ids → 404)
    - Deleting a user deactivates it; rows are never removed here
    - Settings updates are shallow merges

Design Decisions:
    - Dashboard returns users and news together so the admin screen loads in one call
"""

import logging
from datetime import datetime, timezone
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from trialengage.api.dependencies import (
    get_company_or_404, get_current_investigator, require_admin, require_member,
)
from trialengage.api.routes.auth import company_summary
from trialengage.core.dashboard_stats import compute_dashboard_stats
from trialengage.core.domain_types import UserStatus
from trialengage.core.errors import ErrorContext, ResourceNotFoundError
from trialengage.core.usage_analytics import apply_event
from trialengage.infrastructure.database import get_db
from trialengage.infrastructure.notifier import Notifier, get_notifier
from trialengage.models.company import Company
from trialengage.models.news import News
from trialengage.models.user import User
from trialengage.schemas.common import dump
from trialengage.schemas.company import DashboardStats, SettingsUpdate
from trialengage.schemas.news import NewsResponse
from trialengage.schemas.user import TrackEventRequest, UserResponse

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/company/{company_id}", tags=["companies"])


async def get_user_or_404(
    company_id: str, user_id: UUID, db: AsyncSession,
) -> User:
    result = await db.execute(
        select(User).where(User.id == user_id, User.company_id == company_id),
    )
    user = result.scalar_one_or_none()
    if not user:
        raise ResourceNotFoundError(
            "User", str(user_id), ErrorContext(company_id=company_id),
        )
    return user


@router.get("/dashboard", dependencies=[Depends(require_admin)])
async def dashboard(
    company: Company = Depends(get_company_or_404),
    db: AsyncSession = Depends(get_db),
):
    users = (await db.execute(
        select(User).where(User.company_id == company.id)
        .order_by(User.created_at.desc()),
    )).scalars().all()
    news = (await db.execute(
        select(News).where(News.company_id == company.id)
        .order_by(News.created_at.desc()),
    )).scalars().all()

    return {
        "success": True,
        "company": {**company_summary(company), "settings": company.settings},
        "stats": DashboardStats(
            **compute_dashboard_stats([u.status for u in users], len(news)),
        ).model_dump(),
        "users": [dump(UserResponse, u) for u in users],
        "news": [dump(NewsResponse, n) for n in news],
    }


@router.get("/settings", dependencies=[Depends(require_member)])
async def get_company_settings(company: Company = Depends(get_company_or_404)):
    return {"success": True, "settings": company.settings}


@router.put("/settings", dependencies=[Depends(require_admin)])
async def update_company_settings(
    body: SettingsUpdate,
    company: Company = Depends(get_company_or_404),
    db: AsyncSession = Depends(get_db),
):
    """Shallow-merge the given keys into the tenant settings."""
    company.settings = {**(company.settings or {}), **body.settings}
    await db.commit()
    await db.refresh(company)
    logger.info(
        f"Settings updated: {sorted(body.settings)}", extra={"company_id": company.id},
    )
    return {
        "success": True,
        "message": "Settings updated successfully",
        "settings": company.settings,
    }


@router.get("/users", dependencies=[Depends(require_admin)])
async def list_users(
    company: Company = Depends(get_company_or_404),
    status_filter: UserStatus | None = Query(None, alias="status"),
    db: AsyncSession = Depends(get_db),
):
    query = select(User).where(User.company_id == company.id)
    if status_filter:
        query = query.where(User.status == status_filter.value)
    users = (await db.execute(query.order_by(User.created_at.desc()))).scalars().all()
    return {"success": True, "users": [dump(UserResponse, u) for u in users]}


@router.post("/users/{user_id}/approve", dependencies=[Depends(require_admin)])
async def approve_user(
    user_id: UUID,
    company: Company = Depends(get_company_or_404),
    db: AsyncSession = Depends(get_db),
    notifier: Notifier = Depends(get_notifier),
):
    user = await get_user_or_404(company.id, user_id, db)
    user.status = UserStatus.APPROVED.value
    user.approved_at = datetime.now(timezone.utc)
    await db.commit()
    await db.refresh(user)
    logger.info(
        f"Approved {user.email}",
        extra={"company_id": company.id, "user_id": str(user.id)},
    )
    await notifier.send_approval(user.email, user.full_name)
    return {
        "success": True,
        "message": "User approved successfully",
        "user": dump(UserResponse, user),
    }


@router.post("/users/{user_id}/reject", dependencies=[Depends(require_admin)])
async def reject_user(
    user_id: UUID,
    company: Company = Depends(get_company_or_404),
    db: AsyncSession = Depends(get_db),
):
    user = await get_user_or_404(company.id, user_id, db)
    user.status = UserStatus.REJECTED.value
    user.approved_at = None
    await db.commit()
    await db.refresh(user)
    return {
        "success": True,
        "message": "User rejected",
        "user": dump(UserResponse, user),
    }


@router.delete("/users/{user_id}", dependencies=[Depends(require_admin)])
async def deactivate_user(
    user_id: UUID,
    company: Company = Depends(get_company_or_404),
    db: AsyncSession = Depends(get_db),
):
    user = await get_user_or_404(company.id, user_id, db)
    user.status = UserStatus.DEACTIVATED.value
    await db.commit()
    logger.info(
        f"Deactivated {user.email}",
        extra={"company_id": company.id, "user_id": str(user.id)},
    )
    return {"success": True, "message": "User deactivated"}


@router.post("/analytics/track")
async def track_usage(
    body: TrackEventRequest,
    user: User = Depends(get_current_investigator),
    db: AsyncSession = Depends(get_db),
):
    """Fold one mobile usage event into the caller's analytics."""
    user.analytics = apply_event(
        user.analytics, body.event, datetime.now(timezone.utc), body.tab,
    )
    await db.commit()
    return {"success": True, "analytics": user.analytics}


@router.get("/analytics/summary", dependencies=[Depends(require_admin)])
async def analytics_summary(
    company: Company = Depends(get_company_or_404),
    db: AsyncSession = Depends(get_db),
):
    """Usage roll-up across the tenant's investigators."""
    users = [
        u for u in (await db.execute(
            select(User).where(User.company_id == company.id),
        )).scalars().all()
        if u.analytics
    ]
    tab_views: dict[str, int] = {}
    for u in users:
        for tab, count in (u.analytics.get("tab_views") or {}).items():
            tab_views[tab] = tab_views.get(tab, 0) + int(count or 0)
    approved = (await db.execute(
        select(func.count()).select_from(User).where(
            User.company_id == company.id,
            User.status == UserStatus.APPROVED.value,
        ),
    )).scalar_one()
    return {
        "success": True,
        "analytics": {
            "active_users": approved,
            "tracked_users": len(users),
            "total_app_opens": sum(
                int(u.analytics.get("total_app_opens") or 0) for u in users
            ),
            "tab_views": tab_views,
        },
    }
