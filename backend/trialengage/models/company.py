"""Company ORM — the tenant boundary; every other table is scoped by company_id.

Invariants:
    - id is the tenant slug (e.g. "cerevasc"), used verbatim in URLs
    - admin_username is unique across tenants (client-login searches all tenants)
    - settings always holds notifications/auto_approval; extra keys are allowed

Design Decisions:
    - Slug primary key instead of UUID: URLs and mobile config carry it directly
    - JSON settings column: free-form tenant flags without schema churn
    - settings replaced wholesale on update (JSON columns do not track in-place mutation)
"""

from datetime import datetime

from sqlalchemy import String, DateTime, JSON
from sqlalchemy.orm import Mapped, mapped_column

from trialengage.models.base import Base, utc_now


def default_settings() -> dict:
    return {"notifications": True, "auto_approval": False}


class Company(Base):
    """Tenant — a sponsor running one or more trials."""
    __tablename__ = "companies"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    primary_color: Mapped[str] = mapped_column(
        String(20), nullable=False, default="#1976d2",
    )
    logo_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    admin_username: Mapped[str] = mapped_column(
        String(100), nullable=False, unique=True,
    )
    admin_password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    settings: Mapped[dict] = mapped_column(
        JSON, nullable=False, default=default_settings,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utc_now,
    )
