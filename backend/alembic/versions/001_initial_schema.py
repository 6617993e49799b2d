"""Initial schema — companies, users, hospitals, enrollments, news, documents.

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-17

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID

revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _company_fk() -> sa.Column:
    return sa.Column(
        "company_id", sa.String(64),
        sa.ForeignKey("companies.id", ondelete="CASCADE"), nullable=False, index=True,
    )


def _created_at() -> sa.Column:
    return sa.Column(
        "created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now(),
    )


def upgrade() -> None:
    op.create_table(
        "companies",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("primary_color", sa.String(20), nullable=False, server_default="#1976d2"),
        sa.Column("logo_url", sa.String(500), nullable=True),
        sa.Column("admin_username", sa.String(100), nullable=False, unique=True),
        sa.Column("admin_password_hash", sa.String(255), nullable=False),
        sa.Column("settings", sa.JSON, nullable=False),
        _created_at(),
    )

    op.create_table(
        "users",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        _company_fk(),
        sa.Column("email", sa.String(320), nullable=False, unique=True),
        sa.Column("first_name", sa.String(100), nullable=False),
        sa.Column("last_name", sa.String(100), nullable=False),
        sa.Column("site", sa.String(200), nullable=False, server_default=""),
        sa.Column("role", sa.String(100), nullable=False, server_default=""),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("password_hash", sa.String(255), nullable=True),
        sa.Column("analytics", sa.JSON, nullable=True),
        _created_at(),
        sa.Column("approved_at", sa.DateTime(timezone=True), nullable=True),
    )

    op.create_table(
        "hospitals",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        _company_fk(),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("location", sa.String(200), nullable=False),
        sa.Column("principal_investigator", sa.String(200), nullable=False, server_default=""),
        sa.Column("consented_patients", sa.Integer, nullable=False, server_default="0"),
        sa.Column("randomized_patients", sa.Integer, nullable=False, server_default="0"),
        sa.Column("consent_rate", sa.Float, nullable=False, server_default="0"),
        _created_at(),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint("consented_patients >= 0", name="ck_hospitals_consented_nonneg"),
        sa.CheckConstraint("randomized_patients >= 0", name="ck_hospitals_randomized_nonneg"),
    )

    op.create_table(
        "enrollments",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        _company_fk(),
        sa.Column(
            "hospital_id", UUID(as_uuid=True),
            sa.ForeignKey("hospitals.id", ondelete="CASCADE"), nullable=False, index=True,
        ),
        sa.Column("patient_code", sa.String(100), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="consented"),
        sa.Column("clinical_trial_id", sa.String(100), nullable=True),
        _created_at(),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.UniqueConstraint("company_id", "patient_code", name="uq_enrollments_patient"),
    )

    op.create_table(
        "news",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        _company_fk(),
        sa.Column("title", sa.String(300), nullable=False),
        sa.Column("content", sa.Text, nullable=False),
        sa.Column("published", sa.Boolean, nullable=False, server_default="false"),
        sa.Column("clinical_trial_id", sa.String(100), nullable=True),
        _created_at(),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    )

    op.create_table(
        "pdf_documents",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        _company_fk(),
        sa.Column("title", sa.String(300), nullable=False),
        sa.Column("description", sa.Text, nullable=False, server_default=""),
        sa.Column("category", sa.String(100), nullable=False, server_default="General"),
        sa.Column("filename", sa.String(300), nullable=False),
        sa.Column("original_name", sa.String(300), nullable=False),
        sa.Column("size_bytes", sa.Integer, nullable=False, server_default="0"),
        _created_at(),
    )

    op.create_table(
        "training_materials",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        _company_fk(),
        sa.Column("title", sa.String(300), nullable=False),
        sa.Column("description", sa.Text, nullable=False, server_default=""),
        sa.Column("type", sa.String(20), nullable=False),
        sa.Column("content", sa.Text, nullable=False, server_default=""),
        sa.Column("category", sa.String(100), nullable=False, server_default="General"),
        sa.Column("created_by", sa.String(100), nullable=False, server_default="Admin"),
        _created_at(),
    )

    op.create_table(
        "study_protocols",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        _company_fk(),
        sa.Column("title", sa.String(300), nullable=False),
        sa.Column("description", sa.Text, nullable=False, server_default=""),
        sa.Column("type", sa.String(20), nullable=False),
        sa.Column("content", sa.Text, nullable=False, server_default=""),
        sa.Column("version", sa.String(20), nullable=False, server_default="1.0"),
        sa.Column("created_by", sa.String(100), nullable=False, server_default="Admin"),
        _created_at(),
    )


def downgrade() -> None:
    for table in (
        "study_protocols", "training_materials", "pdf_documents", "news",
        "enrollments", "hospitals", "users", "companies",
    ):
        op.drop_table(table)
