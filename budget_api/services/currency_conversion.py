"""Currency Conversion — converts matched projects' final USD budgets with bounded fan-out.

Invariants:
    - Output order equals input order; one output row per input row
    - A failed row gets finalBudget<Currency> = null and a non-empty conversionError;
      it never aborts the batch, whatever the provider raises
    - At most `concurrency` rate lookups are in flight at once
    - Converted values are rounded to two decimal places

Design Decisions:
    - Field name is "finalBudget" + currency.capitalize() (EUR → finalBudgetEur): one casing
      rule for every currency, documented in the response schema
    - asyncio.Semaphore + gather over a hand-rolled worker queue: same bound, results
      collected in order without bookkeeping
"""

import asyncio
import logging
from typing import Any

from budget_api.core.errors import ErrorContext, ExchangeRateError
from budget_api.core.repository_protocols import ProjectLike, RateProvider
from budget_api.schemas.project import ProjectResponse

logger = logging.getLogger(__name__)

BASE_CURRENCY = "USD"
CONVERSION_ERROR_FIELD = "conversionError"


def converted_field_name(currency: str) -> str:
    """finalBudget + capitalized ISO code, e.g. finalBudgetEur."""
    return f"finalBudget{currency.strip().capitalize()}"


def convert_amount(amount_usd: float, rate: float) -> float:
    return round(amount_usd * rate, 2)


async def convert_projects(
    projects: list[ProjectLike],
    currency: str,
    provider: RateProvider,
    concurrency: int = 5,
) -> list[dict[str, Any]]:
    """Annotate each project with its final budget in `currency`."""
    semaphore = asyncio.Semaphore(max(1, concurrency))
    target = currency.upper()

    async def _bounded(project: ProjectLike) -> dict[str, Any]:
        async with semaphore:
            return await _convert_one(project, target, provider)

    rows = await asyncio.gather(*(_bounded(p) for p in projects))
    failed = sum(1 for r in rows if r[CONVERSION_ERROR_FIELD])
    logger.info(
        "Currency conversion batch finished",
        extra={
            "currency": target, "matched": len(rows),
            "converted": len(rows) - failed, "failed": failed,
        },
    )
    return list(rows)


async def _convert_one(
    project: ProjectLike, target: str, provider: RateProvider,
) -> dict[str, Any]:
    row = ProjectResponse.model_validate(project).model_dump(by_alias=True)
    field = converted_field_name(target)
    context = ErrorContext(project_id=project.project_id, currency=target)
    try:
        if project.final_budget_usd is None:
            raise ExchangeRateError(
                "finalBudgetUsd is not set", "missing_amount", context=context,
            )
        rate = await provider.get_rate(BASE_CURRENCY, target, context=context)
        row[field] = convert_amount(project.final_budget_usd, rate)
        row[CONVERSION_ERROR_FIELD] = None
    except ExchangeRateError as e:
        logger.warning(
            f"Conversion failed: {e.message}",
            extra={
                "project_id": project.project_id, "currency": target,
                "error_code": e.code,
            },
        )
        row[field] = None
        row[CONVERSION_ERROR_FIELD] = e.message
    except Exception as e:
        logger.error(
            f"Unexpected conversion failure: {e}",
            exc_info=True,
            extra={"project_id": project.project_id, "currency": target},
        )
        row[field] = None
        row[CONVERSION_ERROR_FIELD] = f"Unexpected conversion failure: {type(e).__name__}"
    return row
