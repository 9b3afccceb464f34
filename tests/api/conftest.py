"""API test fixtures — async DB, fake rate provider, FastAPI test client.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - get_db dependency overridden to use the test DB
    - get_exchange_rate_client overridden with FakeRateProvider (no network)
    - db_manager patched so /health/ready sees the test engine

Design Decisions:
    - StaticPool: every session shares the one in-memory connection, so rows
      committed by a fixture are visible to the request handler
    - FakeRateProvider keyed by target currency: a missing key fails like the real client
"""

import pytest
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from sqlalchemy.pool import StaticPool
from httpx import ASGITransport, AsyncClient

from budget_api.core.errors import ExchangeRateError
from budget_api.db.base import Base
from budget_api.infrastructure.database import get_db, DatabaseSessionManager
from budget_api.infrastructure.exchange_rates import get_exchange_rate_client
from budget_api.models.project import Project
import budget_api.infrastructure.database as db_module
from budget_api.main import app


class FakeRateProvider:
    """Records every lookup; returns configured rates or raises ExchangeRateError."""

    def __init__(self, rates: dict[str, float] | None = None):
        self.rates = rates if rates is not None else {}
        self.calls: list[tuple[str, str]] = []

    async def get_rate(self, base, target, context=None):
        self.calls.append((base, target))
        if target not in self.rates:
            raise ExchangeRateError(
                f"No rate for {target}", "unknown_currency", context=context,
            )
        return self.rates[target]


def project_payload(**overrides) -> dict:
    """Complete, valid create body."""
    data = {
        "projectId": 10001,
        "projectName": "Humitas Hewlett Packard",
        "year": 2024,
        "currency": "EUR",
        "initialBudgetLocal": 316974.5,
        "budgetUsd": 233724.23,
        "initialScheduleEstimateMonths": 13,
        "adjustedScheduleEstimateMonths": 12,
        "contingencyRate": 2.19,
        "escalationRate": 3.46,
        "finalBudgetUsd": 247106.75,
    }
    data.update(overrides)
    return data


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False, poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
def rate_provider():
    return FakeRateProvider({"EUR": 0.9, "USD": 1.0, "GBP": 0.79})


@pytest.fixture
async def client(test_engine, test_session_factory, rate_provider):
    """FastAPI test client with DB and rate provider dependencies overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_exchange_rate_client] = lambda: rate_provider

    original_manager = db_module.db_manager
    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory
    db_module.db_manager = fake_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager


@pytest.fixture
async def seed_projects(test_db):
    """Insert projects directly into the test DB; returns a function taking payload dicts."""
    async def _seed(*payloads: dict) -> list[Project]:
        projects = [
            Project(
                project_id=p["projectId"],
                project_name=p["projectName"],
                year=p["year"],
                currency=p["currency"],
                final_budget_usd=p.get("finalBudgetUsd"),
                budget_usd=p.get("budgetUsd"),
            )
            for p in payloads
        ]
        test_db.add_all(projects)
        await test_db.commit()
        return projects
    return _seed


@pytest.fixture
def make_payload():
    return project_payload
