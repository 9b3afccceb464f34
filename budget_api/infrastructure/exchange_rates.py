"""Resilient Exchange-Rate Client — wraps httpx.AsyncClient with retry, backoff, and error mapping.

Invariants:
    - Rate limits (429): exponential backoff with jitter, respects Retry-After header
    - Transient errors (5xx, connection, timeout): max_retries retries with exponential backoff
    - Client errors (4xx except 429): immediate failure, no retry
    - A 2xx payload without result == "success", without the target code, or with a
      non-finite or non-numeric rate is a failure
    - All failures mapped to ExchangeRateError (core/errors.py)

Design Decisions:
    - Wrapper over raw client: isolates retry logic from conversion (ADR: single responsibility)
    - ±25% jitter on backoff: prevents thundering herd when a batch retries together
    - Injectable http_client: tests pass an httpx.MockTransport-backed client
"""

import asyncio
import logging
import math
import random

import httpx

from budget_api.core.errors import ErrorContext, ExchangeRateError

logger = logging.getLogger(__name__)

_RATE_LIMITED = 429


class ExchangeRateClient:
    """Fetches latest rates for a base currency from the configured provider."""

    def __init__(
        self,
        api_key: str,
        base_url: str,
        timeout_seconds: float = 10.0,
        max_retries: int = 2,
        base_delay_ms: int = 250,
        max_delay_ms: int = 5_000,
        http_client: httpx.AsyncClient | None = None,
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.max_retries = max_retries
        self.base_delay_ms = base_delay_ms
        self.max_delay_ms = max_delay_ms
        self.client = http_client or httpx.AsyncClient(timeout=timeout_seconds)

    async def get_rate(
        self, base: str, target: str, context: ErrorContext | None = None,
    ) -> float:
        """Return how many units of target one unit of base buys."""
        rates = await self.latest(base, context=context)
        rate = rates.get(target.upper())
        if rate is None:
            raise ExchangeRateError(
                f"No rate for {target.upper()} in {base.upper()} table",
                "unknown_currency", context=context,
            )
        numeric = isinstance(rate, (int, float)) and not isinstance(rate, bool)
        if not numeric or not math.isfinite(rate):
            raise ExchangeRateError(
                f"Rate for {target.upper()} is not a finite number: {rate!r}",
                "bad_payload", context=context,
            )
        return float(rate)

    async def latest(
        self, base: str, context: ErrorContext | None = None,
    ) -> dict[str, float]:
        """GET /{api_key}/latest/{base} with automatic retry on transient failures."""
        url = f"{self.base_url}/{self.api_key}/latest/{base.upper()}"
        for attempt in range(self.max_retries + 1):
            try:
                response = await self.client.get(url)
            except httpx.TransportError as e:
                await self._handle_transient_error(e, attempt, context)
                continue

            if response.status_code == _RATE_LIMITED:
                await self._handle_rate_limit(response, attempt, context)
                continue
            if response.status_code >= 500:
                await self._handle_transient_error(
                    f"HTTP {response.status_code}", attempt, context,
                )
                continue
            if response.status_code >= 400:
                raise ExchangeRateError(
                    f"Provider returned HTTP {response.status_code}",
                    "client_error", context=context,
                )
            return self._parse_rates(response, context)

    def _parse_rates(
        self, response: httpx.Response, context: ErrorContext | None,
    ) -> dict[str, float]:
        try:
            payload = response.json()
        except ValueError:
            raise ExchangeRateError(
                "Provider returned invalid JSON", "bad_payload", context=context,
            )
        if not isinstance(payload, dict) or payload.get("result", "success") != "success":
            error_type = payload.get("error-type") if isinstance(payload, dict) else None
            raise ExchangeRateError(
                f"Provider reported failure: {error_type or 'unknown'}",
                "provider_error", context=context,
            )
        rates = payload.get("conversion_rates") or payload.get("rates")
        if not isinstance(rates, dict):
            raise ExchangeRateError(
                "Provider response has no rate table", "bad_payload", context=context,
            )
        logger.debug(
            "Exchange rates fetched",
            extra={"currency": payload.get("base_code")},
        )
        return rates

    async def _handle_rate_limit(
        self, response: httpx.Response, attempt: int, context: ErrorContext | None,
    ) -> None:
        """Handle rate limit response with retry or raise."""
        if attempt >= self.max_retries:
            raise ExchangeRateError(
                "Rate limit exceeded after retries", "rate_limit", context=context,
            )
        delay = self._extract_retry_after(response) or self._backoff(attempt)
        logger.warning(
            f"Exchange-rate rate limit hit, retry after {delay}ms",
            extra={"attempt": attempt + 1},
        )
        await asyncio.sleep(delay / 1000)

    async def _handle_transient_error(
        self, e: object, attempt: int, context: ErrorContext | None,
    ) -> None:
        """Handle transient errors with retry or raise."""
        if attempt >= self.max_retries:
            raise ExchangeRateError(
                f"Transient failure after {self.max_retries} retries: {e}",
                "connection_error", context=context,
            )
        delay = self._backoff(attempt)
        logger.warning(
            f"Exchange-rate transient error, retry after {delay}ms: {e}",
            extra={"attempt": attempt + 1},
        )
        await asyncio.sleep(delay / 1000)

    def _backoff(self, attempt: int) -> int:
        """Exponential backoff with ±25% jitter."""
        delay = min(self.max_delay_ms, (2 ** attempt) * self.base_delay_ms)
        return int(delay * random.uniform(0.75, 1.25))  # nosec B311

    def _extract_retry_after(self, response: httpx.Response) -> int | None:
        """Extract Retry-After header (returns milliseconds)."""
        val = response.headers.get("retry-after")
        if val and val.isdigit():
            return int(val) * 1000
        return None

    async def aclose(self) -> None:
        await self.client.aclose()


# Singleton (initialized on startup)
exchange_rate_client: ExchangeRateClient | None = None


def init_exchange_rate_client(api_key: str, base_url: str, **kwargs):
    global exchange_rate_client
    exchange_rate_client = ExchangeRateClient(api_key, base_url, **kwargs)


async def close_exchange_rate_client() -> None:
    global exchange_rate_client
    if exchange_rate_client:
        await exchange_rate_client.aclose()
        exchange_rate_client = None


def get_exchange_rate_client() -> ExchangeRateClient:
    """FastAPI dependency for the exchange-rate client."""
    if not exchange_rate_client:
        raise RuntimeError("Exchange-rate client not initialized")
    return exchange_rate_client
