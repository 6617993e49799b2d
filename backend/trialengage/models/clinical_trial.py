"""Clinical Trial ORM — a study a tenant runs; news and enrollments may point at one.

Invariants:
    - Scoped by company_id like every tenant row
    - Deleting a trial only clears is_active; rows referencing it keep the link
    - end_date, when both are set, is not before start_date (checked in schemas)
"""

from datetime import date, datetime

from sqlalchemy import String, Text, Boolean, Date, DateTime
from sqlalchemy.orm import Mapped, mapped_column

from trialengage.models.base import Base, TenantScoped


class ClinicalTrial(TenantScoped, Base):
    __tablename__ = "clinical_trials"

    trial_name: Mapped[str] = mapped_column(String(300), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    status: Mapped[str] = mapped_column(String(50), nullable=False, default="Active")
    start_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    end_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    updated_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
