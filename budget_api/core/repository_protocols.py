"""Boundary Protocols — contracts between core/services and the IO shell.

Invariants:
    - Services depend on these Protocols, never on concrete clients
    - Implementations provided by the shell via dependency injection

Design Decisions:
    - Protocol over ABC: structural subtyping, test fakes need no inheritance
"""

from typing import Protocol

from budget_api.core.errors import ErrorContext


class ProjectLike(Protocol):
    """Structural contract for project rows passed to conversion."""
    project_id: int
    project_name: str
    year: int
    currency: str
    final_budget_usd: float | None


class RateProvider(Protocol):
    """Contract for exchange-rate lookup — implemented by infrastructure."""
    async def get_rate(
        self, base: str, target: str, context: ErrorContext | None = None,
    ) -> float: ...
