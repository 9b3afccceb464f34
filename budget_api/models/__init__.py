"""ORM Models — SQLAlchemy declarative models for all domain entities.

Invariants:
    - All models inherit from Base (db/base.py)

Design Decisions:
    - All models imported here so Base.metadata is complete before create_all
      or Alembic autogenerate runs (ADR: standard SQLAlchemy pattern)
"""

from budget_api.models.project import Project  # noqa: F401
