"""Request Validation — identifier parsing and body checks, raised as typed errors.

Invariants:
    - Validation runs before any store access
    - Path identifiers outside the 32-bit INTEGER range are invalid, not missing
    - Every absent required field is reported at once (MissingFieldsError), never one at a time
    - Presence is checked before type: a body missing fields never yields TypeMismatchError
    - Update applies the same type rules as create

Design Decisions:
    - Presence checked by hand, types delegated to Pydantic: "missing" must list fields
      by their wire name, and Pydantic reports missing/null/empty as three different errors
    - Pure functions, no IO — tested without a database
"""

import re
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from budget_api.core.errors import (
    InvalidIdentifierError, MissingFieldsError, TypeMismatchError,
)
from budget_api.schemas.project import (
    INT32_MAX, INT32_MIN, CurrencyConversionRequest, ProjectCreate, ProjectUpdate,
)

_IDENTIFIER_RE = re.compile(r"^-?\d+$")

# Must be present and non-empty
_CORE_CREATE_FIELDS = ("projectId", "projectName", "year", "currency")
_CORE_UPDATE_FIELDS = ("projectName", "year", "currency")
_CONVERSION_FIELDS = ("year", "projectName", "currency")

# Must be present as keys on create; null allowed
_BUDGET_FIELDS = (
    "initialBudgetLocal",
    "budgetUsd",
    "initialScheduleEstimateMonths",
    "adjustedScheduleEstimateMonths",
    "contingencyRate",
    "escalationRate",
    "finalBudgetUsd",
)

CREATE_FIELDS = _CORE_CREATE_FIELDS + _BUDGET_FIELDS

M = TypeVar("M", bound=BaseModel)


def parse_identifier(raw: str) -> int:
    """Parse a path segment as a base-10 integer or raise InvalidIdentifierError."""
    candidate = raw.strip() if isinstance(raw, str) else ""
    if not _IDENTIFIER_RE.match(candidate):
        raise InvalidIdentifierError(str(raw))
    value = int(candidate)
    if not INT32_MIN <= value <= INT32_MAX:
        raise InvalidIdentifierError(str(raw))
    return value


def validate_create_body(body: Any) -> ProjectCreate:
    """All eleven fields must be present; core fields non-empty."""
    _require_object(body)
    missing = _missing_core(body, _CORE_CREATE_FIELDS)
    missing += [f for f in _BUDGET_FIELDS if f not in body]
    if missing:
        raise MissingFieldsError(_in_order(missing, CREATE_FIELDS))
    return _parse(ProjectCreate, body)


def validate_update_body(body: Any) -> ProjectUpdate:
    """projectName, year and currency required; budget fields optional."""
    _require_object(body)
    missing = _missing_core(body, _CORE_UPDATE_FIELDS)
    if missing:
        raise MissingFieldsError(missing)
    # identity comes from the path
    payload = {k: v for k, v in body.items() if k != "projectId"}
    return _parse(ProjectUpdate, payload)


def validate_conversion_body(body: Any) -> CurrencyConversionRequest:
    """year, projectName and currency required."""
    _require_object(body)
    missing = _missing_core(body, _CONVERSION_FIELDS)
    if missing:
        raise MissingFieldsError(missing)
    return _parse(CurrencyConversionRequest, body)


# ─── Helpers ────────────────────────────────────────────────────

def _require_object(body: Any) -> None:
    if not isinstance(body, dict):
        raise TypeMismatchError([{
            "field": "body",
            "message": "Request body must be a JSON object",
            "type": "dict_type",
        }])


def _missing_core(body: dict, fields: tuple[str, ...]) -> list[str]:
    return [f for f in fields if body.get(f) is None or body.get(f) == ""]


def _in_order(fields: list[str], order: tuple[str, ...]) -> list[str]:
    return [f for f in order if f in fields]


def _parse(model: type[M], body: dict) -> M:
    try:
        return model.model_validate(body)
    except ValidationError as e:
        raise TypeMismatchError(_mismatch_details(e)) from e


def _mismatch_details(exc: ValidationError) -> list[dict]:
    """One entry per offending field (union errors report once per member)."""
    details: dict[str, dict] = {}
    for err in exc.errors():
        field = str(err["loc"][0]) if err["loc"] else "body"
        details.setdefault(field, {
            "field": field, "message": err["msg"], "type": err["type"],
        })
    return list(details.values())
