"""Enrollment ORM — one patient's progress at one hospital.

Invariants:
    - Belongs to a Company and a Hospital of that same company
    - (company_id, patient_code) is unique
    - Every insert/status change moves the hospital counters (core/enrollment_counters.py)
    - clinical_trial_id, when set, names a trial of the same company
"""

import uuid
from datetime import datetime

from sqlalchemy import String, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from trialengage.models.base import Base, TenantScoped, utc_now


class Enrollment(TenantScoped, Base):
    __tablename__ = "enrollments"
    __table_args__ = (
        UniqueConstraint("company_id", "patient_code", name="uq_enrollments_patient"),
    )

    hospital_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("hospitals.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    patient_code: Mapped[str] = mapped_column(String(100), nullable=False)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default="consented",
    )
    clinical_trial_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), ForeignKey("clinical_trials.id", ondelete="SET NULL"),
        nullable=True,
    )
    updated_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True, onupdate=utc_now,
    )
