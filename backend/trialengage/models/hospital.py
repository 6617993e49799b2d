"""Hospital ORM — an enrollment site with aggregate patient counters.

Invariants:
    - Always belongs to a Company (company_id FK)
    - consented_patients and randomized_patients are never negative
    - Counters are either set by admins directly or moved by enrollments

Design Decisions:
    - Denormalized counters: the leaderboard reads one row per site, no aggregation query
"""

from datetime import datetime

from sqlalchemy import String, Integer, Float, DateTime, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column

from trialengage.models.base import Base, TenantScoped, utc_now


class Hospital(TenantScoped, Base):
    """Trial site ranked on the enrollment leaderboard."""
    __tablename__ = "hospitals"
    __table_args__ = (
        CheckConstraint("consented_patients >= 0", name="ck_hospitals_consented_nonneg"),
        CheckConstraint("randomized_patients >= 0", name="ck_hospitals_randomized_nonneg"),
    )

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    location: Mapped[str] = mapped_column(String(200), nullable=False)
    principal_investigator: Mapped[str] = mapped_column(
        String(200), nullable=False, default="",
    )
    consented_patients: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0,
    )
    randomized_patients: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0,
    )
    consent_rate: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    updated_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True, onupdate=utc_now,
    )
