"""
FXDash Schema Contracts

This module defines all JSON contracts between system components.
These are the authoritative interfaces - all modules must conform to these schemas.
"""

from fxdash.schemas.market import (
    Period,
    OHLCRecord,
    MarketData,
    BinanceTicker,
    BinanceKline,
    KLINE_INTERVALS,
)
from fxdash.schemas.indicators import (
    IndicatorPoint,
    IndicatorSet,
)

__all__ = [
    # Market
    "Period",
    "OHLCRecord",
    "MarketData",
    "BinanceTicker",
    "BinanceKline",
    "KLINE_INTERVALS",
    # Indicators
    "IndicatorPoint",
    "IndicatorSet",
]
