"""
Binance Market Data Client

RESPONSIBILITIES:
    - Fetch 24h tickers, klines and exchange info
    - Retry on rate limiting (HTTP 429 / 418)
    - Reject malformed upstream payloads
"""

from fxdash.services.binance.client import BinanceClient, RATE_LIMIT_STATUSES

__all__ = [
    "BinanceClient",
    "RATE_LIMIT_STATUSES",
]
