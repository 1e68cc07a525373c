"""
Indicator API Endpoints

RSI / SMA / EMA series over the stored price history.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from fxdash.api.dependencies import get_indicator_service, get_price_repository
from fxdash.schemas.indicators import IndicatorSet
from fxdash.schemas.market import Period
from fxdash.services.base import DataAccessError, InsufficientDataError, UnknownTableError
from fxdash.services.indicators import IndicatorServiceInterface, SeriesOrderError
from fxdash.services.prices import PriceRepositoryInterface

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/indicators", response_model=IndicatorSet)
async def get_indicators(
    period: Optional[str] = Query(default="daily", description="daily / weekly / monthly / yearly"),
    limit: Optional[int] = Query(default=None, ge=1, le=10000),
    table: Optional[str] = Query(default=None, description="Price table (defaults to eur_usd)"),
    repository: PriceRepositoryInterface = Depends(get_price_repository),
    indicator_service: IndicatorServiceInterface = Depends(get_indicator_service),
):
    """
    Get indicator analysis for a price history.

    Returns:
        - rsi: Relative Strength Index (14, shortened for short histories)
        - sma: Simple Moving Average (20)
        - ema: Exponential Moving Average (20)
    """
    try:
        records = await repository.get_history(Period.parse(period), limit=limit, table=table)
    except UnknownTableError as e:
        raise HTTPException(status_code=404, detail=e.message)
    except DataAccessError as e:
        logger.error(f"Error calculating indicators: {e}")
        raise HTTPException(status_code=500, detail="Failed to calculate indicators")

    try:
        return indicator_service.calculate(records)
    except InsufficientDataError as e:
        raise HTTPException(status_code=400, detail=e.message)
    except SeriesOrderError as e:
        # Duplicate or out-of-order dates in the stored table
        logger.error(f"Error calculating indicators: {e}")
        raise HTTPException(status_code=500, detail="Failed to calculate indicators")
