"""Project ORM — one row per project budget record.

Invariants:
    - projectId is the primary key and is client-assigned (no autoincrement)
    - projectName, year, currency are non-nullable
    - budget, schedule and rate columns are nullable floats
    - Column names are camelCase to match the wire format; attributes are snake_case

Design Decisions:
    - Explicit column names over naming conventions: the table predates the ORM
      and is shared with reporting queries that use camelCase
"""

from sqlalchemy import Float, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from budget_api.db.base import Base


class Project(Base):
    """Project budget record."""
    __tablename__ = "project"

    project_id: Mapped[int] = mapped_column(
        "projectId", Integer, primary_key=True, autoincrement=False,
    )
    project_name: Mapped[str] = mapped_column(
        "projectName", String(255), nullable=False,
    )
    year: Mapped[int] = mapped_column(
        "year", Integer, nullable=False, index=True,
    )
    currency: Mapped[str] = mapped_column("currency", String(3), nullable=False)
    initial_budget_local: Mapped[float | None] = mapped_column(
        "initialBudgetLocal", Float, nullable=True,
    )
    budget_usd: Mapped[float | None] = mapped_column(
        "budgetUsd", Float, nullable=True,
    )
    initial_schedule_estimate_months: Mapped[float | None] = mapped_column(
        "initialScheduleEstimateMonths", Float, nullable=True,
    )
    adjusted_schedule_estimate_months: Mapped[float | None] = mapped_column(
        "adjustedScheduleEstimateMonths", Float, nullable=True,
    )
    contingency_rate: Mapped[float | None] = mapped_column(
        "contingencyRate", Float, nullable=True,
    )
    escalation_rate: Mapped[float | None] = mapped_column(
        "escalationRate", Float, nullable=True,
    )
    final_budget_usd: Mapped[float | None] = mapped_column(
        "finalBudgetUsd", Float, nullable=True,
    )
