"""
Market Data API Endpoints

Proxies for the Binance public market-data API.
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import JSONResponse

from fxdash.api.dependencies import get_app_settings, get_binance_client
from fxdash.core.config import Settings
from fxdash.schemas.market import BinanceTicker
from fxdash.services.base import ExternalAPIError, RateLimitError, ValidationError
from fxdash.services.binance import BinanceClient

logger = logging.getLogger(__name__)

router = APIRouter()

DEFAULT_KLINE_LIMIT = 500


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _error(status_code: int, error: str, details: Optional[str] = None) -> JSONResponse:
    content = {"success": False, "error": error}
    if details is not None:
        content["details"] = details
    return JSONResponse(status_code=status_code, content=content)


@router.get("/klines")
async def get_klines(
    symbol: Optional[str] = Query(default=None, description="Trading pair, e.g. BTCUSDT"),
    interval: Optional[str] = Query(default=None, description="Kline interval, e.g. 1h"),
    limit: Optional[int] = Query(default=None, description="Number of candles (default 500)"),
    client: BinanceClient = Depends(get_binance_client),
    settings: Settings = Depends(get_app_settings),
):
    """
    Get candlesticks for a symbol.
    """
    if not symbol:
        return _error(400, "Symbol parameter is required")
    if not interval:
        return _error(400, "Interval parameter is required")

    limit = limit or DEFAULT_KLINE_LIMIT

    try:
        klines = await client.get_klines(symbol, interval, limit)
    except ValidationError as e:
        return _error(400, e.message)
    except ExternalAPIError as e:
        logger.error(f"Klines fetch failed for {symbol}: {e}")
        return _error(500, "Failed to fetch klines data", e.message if settings.debug else None)

    return {
        "success": True,
        "data": [k.model_dump(by_alias=True) for k in klines],
        "timestamp": _now(),
        "params": {"symbol": symbol, "interval": interval, "limit": limit},
    }


@router.get("/ticker/{symbol}", response_model=BinanceTicker)
async def get_ticker(
    symbol: str,
    client: BinanceClient = Depends(get_binance_client),
):
    """
    Get 24h ticker statistics for a symbol.
    """
    try:
        return await client.get_ticker(symbol)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=e.message)
    except RateLimitError as e:
        logger.warning(f"Ticker fetch rate limited for {symbol}: {e}")
        raise HTTPException(status_code=503, detail="Upstream rate limit, try again later")
    except ExternalAPIError as e:
        logger.error(f"Ticker fetch failed for {symbol}: {e}")
        raise HTTPException(status_code=502, detail=f"Failed to fetch ticker for {symbol}")


@router.get("/exchange-info")
async def get_exchange_info(
    client: BinanceClient = Depends(get_binance_client),
):
    """
    Get exchange trading rules and symbol information.
    """
    try:
        exchange_info = await client.get_exchange_info()
    except ExternalAPIError as e:
        logger.error(f"Exchange info fetch failed: {e}")
        return _error(500, e.message)

    return {
        "success": True,
        "data": exchange_info,
        "timestamp": _now(),
    }
