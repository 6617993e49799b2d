"""Model Base — declarative Base plus the columns every tenant-owned table shares.

Invariants:
    - All models inherit from Base; Base.metadata is the single schema source
    - Tenant-owned tables carry a UUID id, a company_id FK and created_at
    - Timestamps are timezone-aware UTC

Design Decisions:
    - TenantScoped as a mixin rather than an abstract table: backup/restore and
      the tenant guards rely on company_id being a plain column on every row
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, ForeignKey, String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass


class TenantScoped:
    """id / company_id / created_at for rows owned by one company."""

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    company_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("companies.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utc_now,
    )
