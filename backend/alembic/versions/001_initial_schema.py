"""Templates and reports.

Revision ID: 001_initial
Revises:
Create Date: 2026-10-19
"""

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision = "001_initial"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "templates",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("file_path", sa.String(1024), nullable=False),
        sa.Column("sections", postgresql.JSONB, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    # template_id is a plain column: reports keep working if the template goes away.
    op.create_table(
        "reports",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("template_id", sa.String(64), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("fields", postgresql.JSONB, nullable=False),
        sa.Column("sections", postgresql.JSONB, nullable=False),
        sa.Column("narrative", postgresql.JSONB, nullable=False),
        sa.Column("line_items", postgresql.JSONB, nullable=False),
        sa.Column("cover_image_path", sa.String(1024), nullable=False, server_default=""),
        sa.Column("photos", postgresql.JSONB, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_reports_template_id", "reports", ["template_id"])


def downgrade() -> None:
    op.drop_index("ix_reports_template_id", table_name="reports")
    op.drop_table("reports")
    op.drop_table("templates")
