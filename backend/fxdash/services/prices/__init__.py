"""
Price History Service

CONTRACT:
    Input:  HistoryRequest
    Output: list[OHLCRecord] (ascending)

RESPONSIBILITIES:
    - Read daily candles from the configured price tables
    - Bucket them into weekly / monthly / yearly history
    - Return every series in ascending date order
"""

from fxdash.services.prices.interface import HistoryRequest, PriceRepositoryInterface
from fxdash.services.prices.repository import PriceRepository
from fxdash.services.prices.aggregation import aggregate_ohlc, bucket_start

__all__ = [
    "HistoryRequest",
    "PriceRepositoryInterface",
    "PriceRepository",
    "aggregate_ohlc",
    "bucket_start",
]
