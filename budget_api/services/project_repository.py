"""Project Repository — single-statement reads and writes on the project table.

Invariants:
    - Every write is one atomic statement: INSERT relies on the primary key,
      UPDATE/DELETE report existence through the affected-row count
    - Duplicate projectId on insert → ConflictError; zero rows on update/delete → ResourceNotFoundError
    - Name matching in find_by_name_and_year is case-sensitive on every backend

Design Decisions:
    - No SELECT-before-write: two round trips race under concurrent requests
    - LIKE pre-filter in SQL, exact substring check in Python: LIKE case-sensitivity
      depends on the backend collation (ADR: portable across PostgreSQL and SQLite)
"""

import logging

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from budget_api.core.errors import ConflictError, ErrorContext, ResourceNotFoundError
from budget_api.infrastructure.database import commit, run_statement
from budget_api.models.project import Project
from budget_api.schemas.project import ProjectCreate, ProjectUpdate

logger = logging.getLogger(__name__)

RESOURCE = "Project"


class ProjectRepository:
    """Persistence for Project rows, bound to one request's session."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(self, project_id: int) -> Project:
        result = await run_statement(
            self.db, select(Project).where(Project.project_id == project_id),
        )
        project = result.scalar_one_or_none()
        if project is None:
            raise ResourceNotFoundError(
                RESOURCE, str(project_id), ErrorContext(project_id=project_id),
            )
        return project

    async def create(self, data: ProjectCreate) -> int:
        try:
            self.db.add(Project(**data.model_dump()))
            await commit(self.db)
        except IntegrityError:
            raise ConflictError(
                RESOURCE, str(data.project_id),
                ErrorContext(project_id=data.project_id),
            )
        logger.info("Project created", extra={"project_id": data.project_id})
        return data.project_id

    async def replace(self, project_id: int, data: ProjectUpdate) -> int:
        """Overwrite every mutable column; absent optional fields become null."""
        result = await run_statement(
            self.db,
            update(Project)
            .where(Project.project_id == project_id)
            .values(_column_values(data))
            .execution_options(synchronize_session=False),
        )
        await self._require_affected(result.rowcount, project_id)
        logger.info("Project updated", extra={"project_id": project_id})
        return project_id

    async def delete(self, project_id: int) -> int:
        result = await run_statement(
            self.db,
            delete(Project)
            .where(Project.project_id == project_id)
            .execution_options(synchronize_session=False),
        )
        await self._require_affected(result.rowcount, project_id)
        logger.info("Project deleted", extra={"project_id": project_id})
        return project_id

    async def find_by_name_and_year(
        self, name_fragment: str, year: int,
    ) -> list[Project]:
        """Projects whose name contains name_fragment (case-sensitive) for the given year."""
        result = await run_statement(
            self.db,
            select(Project)
            .where(
                Project.year == year,
                Project.project_name.contains(name_fragment, autoescape=True),
            )
            .order_by(Project.project_id),
        )
        return [
            p for p in result.scalars().all() if name_fragment in p.project_name
        ]

    async def _require_affected(self, rowcount: int, project_id: int) -> None:
        if rowcount == 0:
            await self.db.rollback()
            raise ResourceNotFoundError(
                RESOURCE, str(project_id), ErrorContext(project_id=project_id),
            )
        await commit(self.db)


def _column_values(data: ProjectUpdate) -> dict:
    """Key by mapped attribute: column names are camelCase, attributes are not."""
    return {getattr(Project, key): value for key, value in data.model_dump().items()}
