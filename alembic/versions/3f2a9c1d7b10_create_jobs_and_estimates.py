"""create jobs and estimates tables

Revision ID: 3f2a9c1d7b10
Revises:
Create Date: 2026-10-18 09:14:02.511873

Base schema. Idempotent: skips tables that Base.metadata.create_all()
already created on an earlier boot.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy import inspect


# revision identifiers, used by Alembic.
revision: str = '3f2a9c1d7b10'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _table_exists(table_name):
    """Check if a table exists."""
    bind = op.get_bind()
    insp = inspect(bind)
    return table_name in insp.get_table_names()


def upgrade() -> None:
    if not _table_exists("jobs"):
        op.create_table(
            "jobs",
            sa.Column("id", sa.Integer(), primary_key=True),
            sa.Column("name", sa.Text(), nullable=False),
            sa.Column("location", sa.Text(), nullable=False),
            sa.Column("client", sa.Text(), nullable=False),
            sa.Column("start_date", sa.Text(), nullable=True),
            sa.Column("status", sa.String(), nullable=False, server_default="pending"),
            sa.Column("notes", sa.Text(), nullable=True),
        )
        op.create_index("ix_jobs_id", "jobs", ["id"])

    if not _table_exists("estimates"):
        op.create_table(
            "estimates",
            sa.Column("id", sa.Integer(), primary_key=True),
            sa.Column("job_id", sa.Integer(), sa.ForeignKey("jobs.id"), nullable=False),
            sa.Column("description", sa.Text(), nullable=True),
            sa.Column("pipe_length", sa.Float(), nullable=False),
            sa.Column("trench_width", sa.Float(), nullable=False),
            sa.Column("trench_depth", sa.Float(), nullable=False),
            sa.Column("cubic_yards", sa.Float(), nullable=False),
            sa.Column("material_weight", sa.Float(), nullable=False, server_default="145"),
            sa.Column("import_unit_cost", sa.Float(), nullable=False, server_default="24.5"),
            sa.Column("estimated_hours", sa.Float(), nullable=True, server_default="0"),
            sa.Column("created_at", sa.DateTime(), nullable=True),
            sa.Column("notes", sa.Text(), nullable=True),
        )
        op.create_index("ix_estimates_id", "estimates", ["id"])
        op.create_index("ix_estimates_job_id", "estimates", ["job_id"])


def downgrade() -> None:
    op.drop_table("estimates")
    op.drop_table("jobs")
