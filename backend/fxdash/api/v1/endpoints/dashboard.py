"""
Dashboard API Endpoints

Summary cards for the dashboard landing page.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Response

from fxdash.api.dependencies import NO_CACHE_HEADERS, get_price_repository
from fxdash.schemas.market import MarketData
from fxdash.services.base import DataAccessError
from fxdash.services.prices import PriceRepositoryInterface

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/market-data", response_model=list[MarketData])
async def get_market_data(
    response: Response,
    repository: PriceRepositoryInterface = Depends(get_price_repository),
):
    """
    Latest EUR/USD price with the change against the previous close.
    """
    try:
        latest_rows = await repository.get_latest(2)
    except DataAccessError as e:
        logger.error(f"Error fetching market data: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch market data")

    if not latest_rows:
        logger.error("No EUR/USD rows available for market data")
        raise HTTPException(status_code=500, detail="No EUR/USD data found")

    latest = latest_rows[0]
    previous = latest_rows[1] if len(latest_rows) > 1 else latest
    change = (latest.close - previous.close) / previous.close * 100 if previous.close else 0.0

    response.headers.update(NO_CACHE_HEADERS)
    return [
        MarketData(
            symbol="EUR/USD",
            symbol_db="eur-usd",
            price=latest.close,
            change24h=round(change, 2),
            high24h=latest.high,
            low24h=latest.low,
            volume=0,  # volume is not stored for FX rows
            last_updated=latest.date,
        )
    ]
