"""
Price History API Endpoints

Stored OHLC history for the dashboard charts.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response

from fxdash.api.dependencies import NO_CACHE_HEADERS, get_price_repository
from fxdash.schemas.market import OHLCRecord, Period
from fxdash.services.base import DataAccessError, UnknownTableError
from fxdash.services.prices import PriceRepositoryInterface

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=list[OHLCRecord])
async def get_price_history(
    response: Response,
    period: Optional[str] = Query(default="daily", description="daily / weekly / monthly / yearly"),
    limit: Optional[int] = Query(default=None, ge=1, le=10000),
    table: Optional[str] = Query(default=None, description="Price table (defaults to eur_usd)"),
    repository: PriceRepositoryInterface = Depends(get_price_repository),
):
    """
    Get OHLC history, oldest first.

    Unknown periods fall back to daily.
    """
    try:
        records = await repository.get_history(Period.parse(period), limit=limit, table=table)
    except UnknownTableError as e:
        raise HTTPException(status_code=404, detail=e.message)
    except DataAccessError as e:
        logger.error(f"Price history fetch failed: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch data")

    response.headers.update(NO_CACHE_HEADERS)
    return records
