"""Project Schemas — Pydantic models with field-level validation for API boundaries.

Invariants:
    - Wire format is camelCase (projectId, finalBudgetUsd); Python attributes are snake_case
    - projectId and year are strict 32-bit integers: strings, floats, booleans and
      values outside the INTEGER column range rejected
    - Budget/schedule/rate fields are numbers or null, never strings
    - currency is a 3-letter code, normalized to upper-case

Design Decisions:
    - alias_generator=to_camel over per-field aliases: one rule for every field
    - Strict number types over coercion: "2024" in a JSON body is a client bug, not a year
"""

from typing import Annotated, Any, Union

from pydantic import BaseModel, ConfigDict, Field, StrictFloat, StrictInt, field_validator
from pydantic.alias_generators import to_camel

INT32_MIN = -(2 ** 31)
INT32_MAX = 2 ** 31 - 1

Int32 = Annotated[StrictInt, Field(ge=INT32_MIN, le=INT32_MAX)]
Number = Union[StrictInt, StrictFloat]

CURRENCY_PATTERN = r"^[A-Za-z]{3}$"


class CamelModel(BaseModel):
    """Base for all project schemas — camelCase on the wire."""
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, from_attributes=True,
    )


class _CurrencyModel(CamelModel):
    """Normalizes currency codes to upper-case."""

    @field_validator("currency", check_fields=False)
    @classmethod
    def upper_currency(cls, v: str) -> str:
        return v.upper()


class ProjectCreate(_CurrencyModel):
    """Create body — all eleven fields present; budget fields may be null."""
    project_id: Int32
    project_name: str = Field(min_length=1, max_length=255)
    year: Int32
    currency: str = Field(pattern=CURRENCY_PATTERN)
    initial_budget_local: Number | None
    budget_usd: Number | None
    initial_schedule_estimate_months: Number | None
    adjusted_schedule_estimate_months: Number | None
    contingency_rate: Number | None
    escalation_rate: Number | None
    final_budget_usd: Number | None


class ProjectUpdate(_CurrencyModel):
    """Full replacement body — identity comes from the path, not the body."""
    project_name: str = Field(min_length=1, max_length=255)
    year: Int32
    currency: str = Field(pattern=CURRENCY_PATTERN)
    initial_budget_local: Number | None = None
    budget_usd: Number | None = None
    initial_schedule_estimate_months: Number | None = None
    adjusted_schedule_estimate_months: Number | None = None
    contingency_rate: Number | None = None
    escalation_rate: Number | None = None
    final_budget_usd: Number | None = None


class ProjectResponse(CamelModel):
    """Full project row as returned by GET."""
    project_id: int
    project_name: str
    year: int
    currency: str
    initial_budget_local: float | None = None
    budget_usd: float | None = None
    initial_schedule_estimate_months: float | None = None
    adjusted_schedule_estimate_months: float | None = None
    contingency_rate: float | None = None
    escalation_rate: float | None = None
    final_budget_usd: float | None = None


class ProjectMutationResponse(CamelModel):
    """Acknowledgement for create/update/delete."""
    success: bool = True
    message: str
    project_id: int


class CurrencyConversionRequest(_CurrencyModel):
    """Conversion lookup — projects matched by name substring and year."""
    year: Int32
    project_name: str = Field(min_length=1, max_length=255)
    currency: str = Field(pattern=CURRENCY_PATTERN)


class CurrencyConversionResponse(BaseModel):
    """Converted rows carry a dynamically named finalBudget<Currency> field."""
    success: bool = True
    currency: str
    data: list[dict[str, Any]]
