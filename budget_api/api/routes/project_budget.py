"""Project Budget Routes — CRUD over project rows and the currency conversion lookup.

Invariants:
    - Path identifiers parsed by parse_identifier (400 on non-integers) before any store access
    - Bodies validated by core/validation before any store access
    - Routes never catch exceptions: domain errors and unexpected failures reach the
      global handlers (api/error_handlers.py) and become uniform JSON responses

Design Decisions:
    - Bodies accepted as raw JSON (Body) and validated explicitly: missing fields and type
      mismatches are reported as distinct error codes
    - /currency declared before /{project_id}: same prefix, literal path must win
"""

import logging
from typing import Any

from fastapi import APIRouter, Body, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from budget_api.config import get_settings
from budget_api.core.errors import ErrorContext, ResourceNotFoundError
from budget_api.core.validation import (
    parse_identifier, validate_conversion_body, validate_create_body,
    validate_update_body,
)
from budget_api.infrastructure.database import get_db
from budget_api.infrastructure.exchange_rates import (
    ExchangeRateClient, get_exchange_rate_client,
)
from budget_api.schemas.project import (
    CurrencyConversionResponse, ProjectMutationResponse, ProjectResponse,
)
from budget_api.services.currency_conversion import convert_projects
from budget_api.services.project_repository import ProjectRepository

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/project/budget", tags=["project-budget"])


def get_repository(db: AsyncSession = Depends(get_db)) -> ProjectRepository:
    return ProjectRepository(db)


@router.post(
    "/currency", response_model=CurrencyConversionResponse,
)
async def convert_currency(
    body: Any = Body(None),
    repo: ProjectRepository = Depends(get_repository),
    rates: ExchangeRateClient = Depends(get_exchange_rate_client),
):
    """Final budgets of projects matching name fragment and year, in the requested currency."""
    request = validate_conversion_body(body)
    projects = await repo.find_by_name_and_year(request.project_name, request.year)
    if not projects:
        raise ResourceNotFoundError(
            "Project", f"{request.project_name} ({request.year})",
            ErrorContext(currency=request.currency),
        )
    data = await convert_projects(
        projects, request.currency, rates,
        concurrency=get_settings().conversion_concurrency,
    )
    return CurrencyConversionResponse(currency=request.currency, data=data)


@router.get("/{project_id}", response_model=ProjectResponse)
async def get_project(
    project_id: str, repo: ProjectRepository = Depends(get_repository),
):
    """Full project row."""
    return await repo.get(parse_identifier(project_id))


@router.post(
    "", response_model=ProjectMutationResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_project(
    body: Any = Body(None),
    repo: ProjectRepository = Depends(get_repository),
):
    data = validate_create_body(body)
    project_id = await repo.create(data)
    return ProjectMutationResponse(
        message="Project created successfully", project_id=project_id,
    )


@router.put("/{project_id}", response_model=ProjectMutationResponse)
async def replace_project(
    project_id: str,
    body: Any = Body(None),
    repo: ProjectRepository = Depends(get_repository),
):
    """Full replacement — no partial patch semantics."""
    pid = parse_identifier(project_id)
    data = validate_update_body(body)
    await repo.replace(pid, data)
    return ProjectMutationResponse(
        message="Project updated successfully", project_id=pid,
    )


@router.delete("/{project_id}", response_model=ProjectMutationResponse)
async def delete_project(
    project_id: str, repo: ProjectRepository = Depends(get_repository),
):
    pid = parse_identifier(project_id)
    await repo.delete(pid)
    return ProjectMutationResponse(
        message="Project deleted successfully", project_id=pid,
    )
