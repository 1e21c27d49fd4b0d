"""create reports

Revision ID: 20261015_0002
Revises: 20261015_0001
Create Date: 2026-10-15
"""

from alembic import op
import sqlalchemy as sa


revision = "20261015_0002"
down_revision = "20261015_0001"
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "reports",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("ngo_id", sa.String(length=128), nullable=False),
        sa.Column("month", sa.String(length=7), nullable=False),
        sa.Column("people_helped", sa.Integer(), server_default=sa.text("0"), nullable=False),
        sa.Column("events_conducted", sa.Integer(), server_default=sa.text("0"), nullable=False),
        sa.Column("funds_utilized", sa.BigInteger(), server_default=sa.text("0"), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        # upsert target for (ngo_id, month)
        sa.UniqueConstraint("ngo_id", "month", name="uq_reports_ngo_month"),
    )
    op.create_index("ix_reports_month", "reports", ["month"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_reports_month", table_name="reports")
    op.drop_table("reports")
