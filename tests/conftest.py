"""Root conftest — shared test configuration."""

import os

# Ensure tests never hit the real exchange-rate provider or a real database
os.environ.setdefault("EXCHANGE_RATE_API_KEY", "test-fake-key")
os.environ.setdefault(
    "DATABASE_URL",
    "sqlite+aiosqlite:///test.db",
)
