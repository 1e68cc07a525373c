"""
Indicator Engine Service

CONTRACT:
    Input:  list[OHLCRecord] (ascending by date)
    Output: IndicatorSet

RESPONSIBILITIES:
    - Calculate RSI, SMA and EMA series
    - Enforce the ascending-order contract on input
    - Clamp indicator periods for short histories

PURE PYTHON - No I/O.
Uses NumPy for calculations.
All math is deterministic and reproducible.
"""

from fxdash.services.indicators.interface import IndicatorServiceInterface
from fxdash.services.indicators.service import IndicatorService
from fxdash.services.indicators.calculations import (
    SeriesOrderError,
    compute_rsi,
    compute_sma,
    compute_ema,
    compute_indicators,
)

__all__ = [
    "IndicatorServiceInterface",
    "IndicatorService",
    "SeriesOrderError",
    "compute_rsi",
    "compute_sma",
    "compute_ema",
    "compute_indicators",
]
