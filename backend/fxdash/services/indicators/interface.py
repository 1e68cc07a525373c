"""
Indicator Engine Service Interface

Defines the contract for the indicator calculation layer.
"""

from abc import abstractmethod
from typing import Optional

from fxdash.services.base import BaseService
from fxdash.schemas.market import OHLCRecord
from fxdash.schemas.indicators import IndicatorSet


class IndicatorServiceInterface(BaseService[list[OHLCRecord], IndicatorSet]):
    """
    Indicator Engine Service Contract.

    INPUT: list[OHLCRecord]
        - ascending by date

    OUTPUT: IndicatorSet
        - rsi, sma, ema point series
    """

    @property
    def name(self) -> str:
        return "IndicatorService"

    @abstractmethod
    async def execute(self, input_data: list[OHLCRecord]) -> IndicatorSet:
        """Calculate indicators with the default periods."""
        pass

    @abstractmethod
    def calculate(
        self,
        records: list[OHLCRecord],
        rsi_period: Optional[int] = None,
        sma_period: Optional[int] = None,
        ema_period: Optional[int] = None,
    ) -> IndicatorSet:
        """
        Calculate indicators for one price history.

        Args:
            records: Ascending OHLC records
            rsi_period: RSI window (clamped to len(records) - 1)
            sma_period: SMA window (clamped to len(records))
            ema_period: EMA window (clamped to len(records))

        Returns:
            RSI, SMA and EMA series
        """
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """Indicator service is always healthy (pure computation)."""
        pass
