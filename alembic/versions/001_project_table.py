"""Project table — one row per project budget record.

Revision ID: 001_project
Revises: None
Create Date: 2026-10-17

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001_project"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "project",
        sa.Column("projectId", sa.Integer, primary_key=True, autoincrement=False),
        sa.Column("projectName", sa.String(255), nullable=False),
        sa.Column("year", sa.Integer, nullable=False),
        sa.Column("currency", sa.String(3), nullable=False),
        sa.Column("initialBudgetLocal", sa.Float, nullable=True),
        sa.Column("budgetUsd", sa.Float, nullable=True),
        sa.Column("initialScheduleEstimateMonths", sa.Float, nullable=True),
        sa.Column("adjustedScheduleEstimateMonths", sa.Float, nullable=True),
        sa.Column("contingencyRate", sa.Float, nullable=True),
        sa.Column("escalationRate", sa.Float, nullable=True),
        sa.Column("finalBudgetUsd", sa.Float, nullable=True),
    )
    op.create_index("ix_project_year", "project", ["year"])


def downgrade() -> None:
    op.drop_index("ix_project_year", table_name="project")
    op.drop_table("project")
