"""
Indicator Engine Service Implementation

Applies the request-level rules around the pure calculations:
minimum history length and period clamping for short series.
"""

import logging
from typing import Optional

from fxdash.schemas.market import OHLCRecord
from fxdash.schemas.indicators import IndicatorSet
from fxdash.services.base import InsufficientDataError
from fxdash.services.indicators.interface import IndicatorServiceInterface
from fxdash.services.indicators.calculations import (
    DEFAULT_RSI_PERIOD,
    DEFAULT_SMA_PERIOD,
    DEFAULT_EMA_PERIOD,
    compute_indicators,
)

logger = logging.getLogger(__name__)

MIN_RECORDS = 20


class IndicatorService(IndicatorServiceInterface):
    """
    Indicator Engine Service.

    Calculates RSI, SMA and EMA for a price history.
    All calculations are deterministic and reproducible.
    """

    def __init__(
        self,
        min_records: int = MIN_RECORDS,
        rsi_period: int = DEFAULT_RSI_PERIOD,
        sma_period: int = DEFAULT_SMA_PERIOD,
        ema_period: int = DEFAULT_EMA_PERIOD,
    ):
        self.min_records = min_records
        self.rsi_period = rsi_period
        self.sma_period = sma_period
        self.ema_period = ema_period

    @property
    def name(self) -> str:
        return "IndicatorService"

    async def execute(self, input_data: list[OHLCRecord]) -> IndicatorSet:
        """Calculate indicators with the configured periods."""
        return self.calculate(input_data)

    def calculate(
        self,
        records: list[OHLCRecord],
        rsi_period: Optional[int] = None,
        sma_period: Optional[int] = None,
        ema_period: Optional[int] = None,
    ) -> IndicatorSet:
        """Calculate all indicators for a single price history."""
        count = len(records)
        if count < self.min_records:
            raise InsufficientDataError(
                self.name,
                "Insufficient data for indicator calculations",
                {"records": count, "required": self.min_records},
            )

        # Short histories shrink the windows instead of yielding nothing
        effective_rsi = min(self.rsi_period if rsi_period is None else rsi_period, count - 1)
        effective_sma = min(self.sma_period if sma_period is None else sma_period, count)
        effective_ema = min(self.ema_period if ema_period is None else ema_period, count)

        result = compute_indicators(
            records,
            rsi_period=effective_rsi,
            sma_period=effective_sma,
            ema_period=effective_ema,
        )

        logger.debug(
            f"Calculated indicators over {count} records: "
            f"rsi={len(result.rsi)} sma={len(result.sma)} ema={len(result.ema)}"
        )
        return result

    async def health_check(self) -> bool:
        return True
