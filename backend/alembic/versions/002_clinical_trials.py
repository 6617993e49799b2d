"""Clinical trials — per-company trial catalogue linked from news and enrollments.

Revision ID: 002_clinical_trials
Revises: 001_initial
Create Date: 2026-10-17

Free-text clinical_trial_id values cannot name a catalogue row, so they are
cleared before the columns become UUID foreign keys.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID

revision: str = "002_clinical_trials"
down_revision: Union[str, None] = "001_initial"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

_LINKED = ("news", "enrollments")


def upgrade() -> None:
    op.create_table(
        "clinical_trials",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "company_id", sa.String(64),
            sa.ForeignKey("companies.id", ondelete="CASCADE"), nullable=False, index=True,
        ),
        sa.Column("trial_name", sa.String(300), nullable=False),
        sa.Column("description", sa.Text, nullable=False, server_default=""),
        sa.Column("status", sa.String(50), nullable=False, server_default="Active"),
        sa.Column("start_date", sa.Date, nullable=True),
        sa.Column("end_date", sa.Date, nullable=True),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default="true"),
        sa.Column(
            "created_at", sa.DateTime(timezone=True), nullable=False,
            server_default=sa.func.now(),
        ),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    )

    for table in _LINKED:
        op.execute(f"UPDATE {table} SET clinical_trial_id = NULL")
        op.alter_column(
            table, "clinical_trial_id",
            type_=UUID(as_uuid=True), existing_type=sa.String(100),
            existing_nullable=True, postgresql_using="clinical_trial_id::uuid",
        )
        op.create_foreign_key(
            f"fk_{table}_clinical_trial", table, "clinical_trials",
            ["clinical_trial_id"], ["id"], ondelete="SET NULL",
        )


def downgrade() -> None:
    for table in _LINKED:
        op.drop_constraint(f"fk_{table}_clinical_trial", table, type_="foreignkey")
        op.alter_column(
            table, "clinical_trial_id",
            type_=sa.String(100), existing_type=UUID(as_uuid=True),
            existing_nullable=True, postgresql_using="clinical_trial_id::text",
        )
    op.drop_table("clinical_trials")
