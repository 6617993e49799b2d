"""User ORM — investigators and site staff who use the mobile app.

Invariants:
    - email is stored lower-cased and is unique across all tenants
    - status: pending -> approved | rejected; any -> deactivated (soft delete)
    - password_hash is NULL for code-login (mobile) registrations

Design Decisions:
    - Soft delete via status: approval history and analytics survive removal
    - analytics as JSON: usage counters folded in by core/usage_analytics.py
"""

from datetime import datetime

from sqlalchemy import String, DateTime, JSON
from sqlalchemy.orm import Mapped, mapped_column

from trialengage.models.base import Base, TenantScoped


class User(TenantScoped, Base):
    """Investigator account within a tenant."""
    __tablename__ = "users"

    email: Mapped[str] = mapped_column(String(320), nullable=False, unique=True)
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    site: Mapped[str] = mapped_column(String(200), nullable=False, default="")
    role: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default="pending",
    )
    password_hash: Mapped[str | None] = mapped_column(String(255), nullable=True)
    analytics: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    approved_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()
