"""
Binance public REST API client.

Only unauthenticated market-data endpoints are used. Responses are
validated against the schemas in fxdash.schemas.market; anything that
does not parse is reported as an upstream failure.
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Optional

import aiohttp
from pydantic import ValidationError as PydanticValidationError

from fxdash.schemas.market import BinanceKline, BinanceTicker, KLINE_INTERVALS
from fxdash.services.base import ExternalAPIError, RateLimitError, ValidationError

logger = logging.getLogger(__name__)

BINANCE_BASE_URL = "https://api.binance.com"

# 429 = request weight exceeded, 418 = IP auto-banned after repeated 429s
RATE_LIMIT_STATUSES = (429, 418)

MAX_KLINE_LIMIT = 1000


class BinanceClient:
    """
    Binance market data client.

    The aiohttp session is owned by the caller (the app lifespan) and
    passed in, so tests can hand in a fake.
    """

    def __init__(
        self,
        session: aiohttp.ClientSession,
        base_url: str = BINANCE_BASE_URL,
        max_retries: int = 3,
        backoff_seconds: float = 1.0,
        max_retry_after_seconds: float = 60.0,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self._session = session
        self.base_url = base_url.rstrip("/")
        self.max_retries = max_retries
        self.backoff_seconds = backoff_seconds
        self.max_retry_after_seconds = max_retry_after_seconds
        self._sleep = sleep

    @property
    def name(self) -> str:
        return "BinanceClient"

    def _retry_delay(self, retry_after: Optional[str], attempt: int) -> float:
        if retry_after:
            try:
                return max(float(retry_after), 0.0)
            except ValueError:
                pass
        return self.backoff_seconds * (2 ** attempt)

    async def _get(self, path: str, params: Optional[dict] = None) -> Any:
        """GET a JSON document, retrying while rate limited."""
        url = f"{self.base_url}{path}"

        for attempt in range(self.max_retries + 1):
            try:
                async with self._session.get(url, params=params) as resp:
                    if resp.status not in RATE_LIMIT_STATUSES:
                        if resp.status != 200:
                            body = await resp.text()
                            logger.error(f"Binance {path} returned HTTP {resp.status}: {body[:200]}")
                            raise ExternalAPIError(
                                self.name,
                                f"{path} returned HTTP {resp.status}",
                                {"status": resp.status, "body": body[:500]},
                            )
                        return await resp.json()

                    delay = self._retry_delay(resp.headers.get("Retry-After"), attempt)
            except (aiohttp.ClientError, asyncio.TimeoutError) as e:
                logger.error(f"Binance request to {path} failed: {e}")
                raise ExternalAPIError(self.name, f"Request to {path} failed: {e}") from e
            except ValueError as e:
                logger.error(f"Binance {path} returned invalid JSON: {e}")
                raise ExternalAPIError(self.name, f"{path} returned invalid JSON") from e

            if delay > self.max_retry_after_seconds:
                # 418 IP bans carry Retry-After values of hours
                logger.error(f"Binance asked to wait {delay:.0f}s on {path}, giving up")
                raise RateLimitError(
                    self.name,
                    f"Rate limited on {path}, retry after {delay:.0f}s",
                    {"path": path, "retry_after": delay},
                )
            if attempt == self.max_retries:
                break
            logger.warning(
                f"Binance rate limit on {path}, retrying in {delay:.1f}s "
                f"({attempt + 1}/{self.max_retries})"
            )
            await self._sleep(delay)

        raise RateLimitError(
            self.name,
            f"Rate limited on {path} after {self.max_retries} retries",
            {"path": path},
        )

    async def get_ticker(self, symbol: str) -> BinanceTicker:
        """24h rolling statistics for one symbol."""
        symbol = symbol.upper().strip()
        if not symbol:
            raise ValidationError(self.name, "Symbol is required")

        payload = await self._get("/api/v3/ticker/24hr", {"symbol": symbol})
        try:
            return BinanceTicker.model_validate(payload)
        except PydanticValidationError as e:
            logger.error(f"Malformed ticker payload for {symbol}: {e}")
            raise ExternalAPIError(self.name, f"Malformed ticker payload for {symbol}") from e

    async def get_klines(self, symbol: str, interval: str, limit: int = 500) -> list[BinanceKline]:
        """
        Fetch candlesticks for a symbol.

        Args:
            symbol: Trading pair (e.g., "BTCUSDT")
            interval: One of KLINE_INTERVALS
            limit: Number of candles, 1..1000

        Returns:
            Validated klines, oldest first
        """
        symbol = symbol.upper().strip()
        if not symbol:
            raise ValidationError(self.name, "Symbol is required")
        if interval not in KLINE_INTERVALS:
            raise ValidationError(self.name, f"Unsupported interval: {interval}", {"interval": interval})
        if not 1 <= limit <= MAX_KLINE_LIMIT:
            raise ValidationError(self.name, f"limit must be between 1 and {MAX_KLINE_LIMIT}", {"limit": limit})

        payload = await self._get(
            "/api/v3/klines",
            {"symbol": symbol, "interval": interval, "limit": limit},
        )
        if not isinstance(payload, list):
            raise ExternalAPIError(self.name, "Klines payload is not a list")

        try:
            return [BinanceKline.from_row(row) for row in payload]
        except ValueError as e:
            logger.error(f"Malformed kline payload for {symbol}: {e}")
            raise ExternalAPIError(self.name, f"Malformed kline payload for {symbol}") from e

    async def get_exchange_info(self) -> dict:
        """Exchange trading rules and symbol list."""
        payload = await self._get("/api/v3/exchangeInfo")
        if not isinstance(payload, dict) or not payload:
            raise ExternalAPIError(self.name, "No data returned from Binance API")
        return payload
