"""
CONTRACT 1: Market Data

Price history read from the database, the dashboard summary, and the
payloads ingested from the Binance public API.

Upstream payloads are validated here; malformed rows are rejected
instead of flowing through as NaN or missing values.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


# =============================================================================
# ENUMS
# =============================================================================


class Period(str, Enum):
    """Aggregation bucket for stored price history."""

    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"

    @classmethod
    def parse(cls, value: Optional[str]) -> "Period":
        """Unknown or missing values fall back to daily."""
        try:
            return cls((value or "").lower())
        except ValueError:
            return cls.DAILY


KLINE_INTERVALS = (
    "1s", "1m", "3m", "5m", "15m", "30m",
    "1h", "2h", "4h", "6h", "8h", "12h",
    "1d", "3d", "1w", "1M",
)


# =============================================================================
# PRICE HISTORY
# =============================================================================


class OHLCRecord(BaseModel):
    """Single open/high/low/close bucket."""

    date: datetime
    open: float = Field(..., ge=0, allow_inf_nan=False)
    high: float = Field(..., ge=0, allow_inf_nan=False)
    low: float = Field(..., ge=0, allow_inf_nan=False)
    close: float = Field(..., ge=0, allow_inf_nan=False)
    avg_price: Optional[float] = Field(default=None, ge=0, allow_inf_nan=False)

    @property
    def typical_price(self) -> float:
        return (self.high + self.low + self.close) / 3


class MarketData(BaseModel):
    """Dashboard summary card for one instrument."""

    model_config = ConfigDict(populate_by_name=True)

    symbol: str
    symbol_db: str
    price: float
    change24h: float
    high24h: float
    low24h: float
    volume: float = 0
    last_updated: datetime = Field(..., alias="lastUpdated")


# =============================================================================
# BINANCE PAYLOADS
# =============================================================================


class BinanceModel(BaseModel):
    """Binance sends camelCase keys and numbers as strings."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class BinanceTicker(BinanceModel):
    """24h rolling window statistics for a symbol."""

    symbol: str = Field(..., min_length=1)
    price_change: float = Field(..., allow_inf_nan=False)
    price_change_percent: float = Field(..., allow_inf_nan=False)
    weighted_avg_price: float = Field(..., ge=0, allow_inf_nan=False)
    prev_close_price: Optional[float] = Field(default=None, ge=0, allow_inf_nan=False)
    last_price: float = Field(..., ge=0, allow_inf_nan=False)
    last_qty: float = Field(..., ge=0, allow_inf_nan=False)
    bid_price: float = Field(..., ge=0, allow_inf_nan=False)
    bid_qty: float = Field(..., ge=0, allow_inf_nan=False)
    ask_price: float = Field(..., ge=0, allow_inf_nan=False)
    ask_qty: float = Field(..., ge=0, allow_inf_nan=False)
    open_price: float = Field(..., ge=0, allow_inf_nan=False)
    high_price: float = Field(..., ge=0, allow_inf_nan=False)
    low_price: float = Field(..., ge=0, allow_inf_nan=False)
    volume: float = Field(..., ge=0, allow_inf_nan=False)
    quote_volume: float = Field(..., ge=0, allow_inf_nan=False)
    open_time: int
    close_time: int
    first_id: int
    last_id: int
    count: int = Field(..., ge=0)


KLINE_FIELDS = (
    "open_time",
    "open",
    "high",
    "low",
    "close",
    "volume",
    "close_time",
    "quote_asset_volume",
    "number_of_trades",
    "taker_buy_base_asset_volume",
    "taker_buy_quote_asset_volume",
    "ignore",
)


class BinanceKline(BinanceModel):
    """One candlestick row from /api/v3/klines."""

    open_time: int
    open: float = Field(..., ge=0, allow_inf_nan=False)
    high: float = Field(..., ge=0, allow_inf_nan=False)
    low: float = Field(..., ge=0, allow_inf_nan=False)
    close: float = Field(..., ge=0, allow_inf_nan=False)
    volume: float = Field(..., ge=0, allow_inf_nan=False)
    close_time: int
    quote_asset_volume: float = Field(..., ge=0, allow_inf_nan=False)
    number_of_trades: int = Field(..., ge=0)
    taker_buy_base_asset_volume: float = Field(..., ge=0, allow_inf_nan=False)
    taker_buy_quote_asset_volume: float = Field(..., ge=0, allow_inf_nan=False)
    ignore: str = "0"

    @classmethod
    def from_row(cls, row: Any) -> "BinanceKline":
        """Build from the positional array Binance returns."""
        if not isinstance(row, (list, tuple)) or len(row) != len(KLINE_FIELDS):
            raise ValueError(f"Kline row must have {len(KLINE_FIELDS)} fields, got {row!r}")
        values = dict(zip(KLINE_FIELDS, row))
        values["ignore"] = str(values["ignore"])
        return cls.model_validate(values)

    def to_record(self) -> OHLCRecord:
        return OHLCRecord(
            date=datetime.fromtimestamp(self.open_time / 1000, tz=timezone.utc),
            open=self.open,
            high=self.high,
            low=self.low,
            close=self.close,
            avg_price=(self.high + self.low + self.close) / 3,
        )
