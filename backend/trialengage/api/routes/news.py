"""News Routes — tenant announcements for the mobile news tab.

Invariants:
    - Newest first
    - Investigators only ever see published items; admins see drafts too
    - updated_at is stamped on every edit
    - A linked clinical trial must be an active trial of the same company
"""

import logging
from datetime import datetime, timezone
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from trialengage.api.dependencies import get_company_or_404, require_admin, require_member
from trialengage.core.errors import ErrorContext, ResourceNotFoundError
from trialengage.infrastructure.database import get_db
from trialengage.infrastructure.tokens import Principal
from trialengage.models.company import Company
from trialengage.models.news import News
from trialengage.schemas.common import dump
from trialengage.schemas.news import NewsCreate, NewsResponse, NewsUpdate
from trialengage.services.clinical_trials import ensure_linkable

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/company/{company_id}/news", tags=["news"])


async def get_news_or_404(company_id: str, news_id: UUID, db: AsyncSession) -> News:
    result = await db.execute(
        select(News).where(News.id == news_id, News.company_id == company_id),
    )
    news = result.scalar_one_or_none()
    if not news:
        raise ResourceNotFoundError(
            "News", str(news_id), ErrorContext(company_id=company_id),
        )
    return news


@router.get("")
async def list_news(
    company: Company = Depends(get_company_or_404),
    principal: Principal = Depends(require_member),
    db: AsyncSession = Depends(get_db),
):
    query = select(News).where(News.company_id == company.id)
    if not principal.is_admin:
        query = query.where(News.published.is_(True))
    items = (await db.execute(query.order_by(News.created_at.desc()))).scalars().all()
    return {"success": True, "news": [dump(NewsResponse, n) for n in items]}


@router.post(
    "", status_code=status.HTTP_201_CREATED, dependencies=[Depends(require_admin)],
)
async def create_news(
    body: NewsCreate,
    company: Company = Depends(get_company_or_404),
    db: AsyncSession = Depends(get_db),
):
    await ensure_linkable(db, company.id, body.clinical_trial_id)
    news = News(company_id=company.id, **body.model_dump())
    db.add(news)
    await db.commit()
    await db.refresh(news)
    logger.info(f"News created: {news.title}", extra={"company_id": company.id})
    return {
        "success": True,
        "message": "News created successfully",
        "news": dump(NewsResponse, news),
    }


@router.put("/{news_id}", dependencies=[Depends(require_admin)])
async def update_news(
    news_id: UUID,
    body: NewsUpdate,
    company: Company = Depends(get_company_or_404),
    db: AsyncSession = Depends(get_db),
):
    news = await get_news_or_404(company.id, news_id, db)
    await ensure_linkable(db, company.id, body.clinical_trial_id)
    for key, value in body.model_dump(exclude_unset=True, exclude_none=True).items():
        setattr(news, key, value)
    news.updated_at = datetime.now(timezone.utc)
    await db.commit()
    await db.refresh(news)
    return {
        "success": True,
        "message": "News updated successfully",
        "news": dump(NewsResponse, news),
    }


@router.delete("/{news_id}", dependencies=[Depends(require_admin)])
async def delete_news(
    news_id: UUID,
    company: Company = Depends(get_company_or_404),
    db: AsyncSession = Depends(get_db),
):
    news = await get_news_or_404(company.id, news_id, db)
    await db.delete(news)
    await db.commit()
    logger.info(f"News deleted: {news_id}", extra={"company_id": company.id})
    return {"success": True, "message": "News deleted successfully"}
