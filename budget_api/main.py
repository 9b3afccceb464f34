"""Project Budget API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map BudgetApiError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Database and exchange-rate client initialized on startup, closed on shutdown

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Error handlers live in api/error_handlers.py; main.py only wires them
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from budget_api import __version__
from budget_api.api.error_handlers import register_error_handlers
from budget_api.api.routes import health, project_budget, status
from budget_api.config import get_settings
from budget_api.infrastructure.database import close_db, init_db
from budget_api.infrastructure.exchange_rates import (
    close_exchange_rate_client, init_exchange_rate_client,
)
from budget_api.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    init_exchange_rate_client(
        settings.exchange_rate_api_key,
        settings.exchange_rate_api_url,
        timeout_seconds=settings.exchange_rate_timeout_seconds,
        max_retries=settings.exchange_rate_max_retries,
        base_delay_ms=settings.exchange_rate_base_delay_ms,
        max_delay_ms=settings.exchange_rate_max_delay_ms,
    )
    logger.info("Project Budget API started")
    yield
    await close_exchange_rate_client()
    await close_db()
    logger.info("Project Budget API shut down")


app = FastAPI(
    title="Project Budget API", version=__version__, lifespan=lifespan,
)

# CORS — configured from settings, not hardcoded
settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routes — explicit registration
app.include_router(health.router)
app.include_router(status.router)
app.include_router(project_budget.router)

register_error_handlers(app)
