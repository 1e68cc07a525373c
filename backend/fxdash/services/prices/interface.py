"""
Price History Service Interface

Defines the contract for reading stored OHLC history.
"""

from abc import abstractmethod
from dataclasses import dataclass
from typing import Optional

from fxdash.services.base import BaseService
from fxdash.schemas.market import OHLCRecord, Period


@dataclass
class HistoryRequest:
    """Which table, bucket size and how many buckets to read."""

    period: Period = Period.DAILY
    limit: Optional[int] = None
    table: Optional[str] = None


class PriceRepositoryInterface(BaseService[HistoryRequest, list[OHLCRecord]]):
    """
    Price History Contract.

    INPUT: HistoryRequest
        - period: daily / weekly / monthly / yearly
        - limit: latest N buckets (all when None)
        - table: configured price table (default when None)

    OUTPUT: list[OHLCRecord]
        - ascending by date
    """

    @property
    def name(self) -> str:
        return "PriceRepository"

    @abstractmethod
    async def execute(self, input_data: HistoryRequest) -> list[OHLCRecord]:
        """Read history for the request."""
        pass

    @abstractmethod
    async def get_history(
        self,
        period: Period = Period.DAILY,
        limit: Optional[int] = None,
        table: Optional[str] = None,
    ) -> list[OHLCRecord]:
        """Latest `limit` buckets of `period`, ascending."""
        pass

    @abstractmethod
    async def get_latest(self, count: int = 2, table: Optional[str] = None) -> list[OHLCRecord]:
        """Most recent daily records, newest first."""
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """Check database connectivity."""
        pass
