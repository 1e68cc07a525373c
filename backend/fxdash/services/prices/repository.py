"""
Price History Repository

Reads daily candles from the configured price tables and buckets them
into weekly / monthly / yearly series.
"""

import logging
from datetime import date, datetime, time
from typing import Iterable, Optional

from sqlalchemy import Table, select, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine

from fxdash.db.models import price_table
from fxdash.schemas.market import OHLCRecord, Period
from fxdash.services.base import DataAccessError, UnknownTableError
from fxdash.services.prices.aggregation import aggregate_ohlc
from fxdash.services.prices.interface import HistoryRequest, PriceRepositoryInterface

logger = logging.getLogger(__name__)


def _as_datetime(value) -> datetime:
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime.combine(value, time())
    raise TypeError(f"Unexpected date value: {value!r}")


class PriceRepository(PriceRepositoryInterface):
    """
    SQLAlchemy-backed price history.

    Table names come from a fixed whitelist and are never formatted
    into SQL text.
    """

    def __init__(
        self,
        engine: AsyncEngine,
        tables: Iterable[str] = ("eur_usd",),
        default_table: str = "eur_usd",
    ):
        self.engine = engine
        self.tables = set(tables) | {default_table}
        self.default_table = default_table

    def _table(self, name: Optional[str]) -> Table:
        name = name or self.default_table
        if name not in self.tables:
            raise UnknownTableError(self.name, f"Unknown price table: {name}", {"table": name})
        return price_table(name)

    async def _fetch(self, stmt) -> list[OHLCRecord]:
        try:
            async with self.engine.connect() as conn:
                result = await conn.execute(stmt)
                rows = result.mappings().all()
        except SQLAlchemyError as e:
            logger.error(f"Error querying price history: {e}")
            raise DataAccessError(self.name, "Failed to query price history", {"error": str(e)}) from e

        try:
            return [
                OHLCRecord(
                    date=_as_datetime(row["date"]),
                    open=float(row["open"]),
                    high=float(row["high"]),
                    low=float(row["low"]),
                    close=float(row["close"]),
                    avg_price=float(row["close"]),
                )
                for row in rows
            ]
        except (TypeError, ValueError) as e:
            # NULL, negative or non-finite prices in the stored rows
            logger.error(f"Invalid price row: {e}")
            raise DataAccessError(self.name, "Invalid price history row", {"error": str(e)}) from e

    def _select_daily(self, table: Table, limit: Optional[int]):
        stmt = select(
            table.c.date.label("date"),
            table.c.open.label("open"),
            table.c.high.label("high"),
            table.c.low.label("low"),
            table.c.close.label("close"),
        ).order_by(table.c.date.desc())
        if limit:
            stmt = stmt.limit(limit)
        return stmt

    async def execute(self, input_data: HistoryRequest) -> list[OHLCRecord]:
        return await self.get_history(input_data.period, input_data.limit, input_data.table)

    async def get_daily(self, limit: Optional[int] = None, table: Optional[str] = None) -> list[OHLCRecord]:
        """Latest `limit` daily records in ascending order."""
        records = await self._fetch(self._select_daily(self._table(table), limit))
        records.reverse()
        logger.debug(f"Fetched {len(records)} daily records from {table or self.default_table}")
        return records

    async def get_history(
        self,
        period: Period = Period.DAILY,
        limit: Optional[int] = None,
        table: Optional[str] = None,
    ) -> list[OHLCRecord]:
        if period == Period.DAILY:
            return await self.get_daily(limit, table)

        daily = await self._fetch(self._select_daily(self._table(table), None))
        buckets = aggregate_ohlc(daily, period)
        if limit:
            buckets = buckets[-limit:]
        logger.debug(f"Aggregated {len(daily)} daily records into {len(buckets)} {period.value} buckets")
        return buckets

    async def get_latest(self, count: int = 2, table: Optional[str] = None) -> list[OHLCRecord]:
        return await self._fetch(self._select_daily(self._table(table), count))

    async def health_check(self) -> bool:
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError as e:
            logger.warning(f"Database health check failed: {e}")
            return False
