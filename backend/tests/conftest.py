"""Pytest configuration and fixtures for FXDash testing."""

from datetime import datetime, timedelta
from typing import Optional

import pytest
import pytest_asyncio
from sqlalchemy import text

from fxdash.db.database import create_engine, init_db
from fxdash.db.models import price_table
from fxdash.schemas.market import OHLCRecord, Period
from fxdash.services.base import UnknownTableError
from fxdash.services.prices import PriceRepositoryInterface, aggregate_ohlc

START = datetime(2024, 1, 1)  # a Monday


def _make_series(closes, start: datetime = START) -> list[OHLCRecord]:
    return [
        OHLCRecord(
            date=start + timedelta(days=i),
            open=close,
            high=close,
            low=close,
            close=close,
            avg_price=close,
        )
        for i, close in enumerate(closes)
    ]


@pytest.fixture
def make_series():
    """Build an ascending daily series from a list of closes."""
    return _make_series


@pytest.fixture
def daily_rows() -> list[dict]:
    """30 daily candles starting Monday 2024-01-01, keyed by column key."""
    rows = []
    for i in range(30):
        close = round(1.10 + i * 0.001, 4)
        rows.append(
            {
                "date": START + timedelta(days=i),
                "open": close - 0.0005,
                "high": close + 0.002,
                "low": close - 0.002,
                "close": close,
            }
        )
    return rows


@pytest_asyncio.fixture
async def engine(daily_rows):
    """In-memory SQLite engine with a populated eur_usd table."""
    engine = create_engine("sqlite+aiosqlite:///:memory:")
    await init_db(engine, ["eur_usd"])
    async with engine.begin() as conn:
        await conn.execute(price_table("eur_usd").insert(), daily_rows)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def unconstrained_engine(daily_rows):
    """eur_usd without primary key or NOT NULL, like a hand-imported table."""
    engine = create_engine("sqlite+aiosqlite:///:memory:")
    async with engine.begin() as conn:
        await conn.execute(text(
            'CREATE TABLE eur_usd (fecha TIMESTAMP, "último" FLOAT, apertura FLOAT, "máximo" FLOAT, "mínimo" FLOAT)'
        ))
        await conn.execute(price_table("eur_usd").insert(), daily_rows)
    yield engine
    await engine.dispose()


class FakePriceRepository(PriceRepositoryInterface):
    """In-memory repository recording the requests it receives."""

    def __init__(self, records: list[OHLCRecord], error: Optional[Exception] = None, raw: bool = False):
        self.records = records
        self.error = error
        self.raw = raw
        self.calls = []

    async def execute(self, input_data):
        return await self.get_history(input_data.period, input_data.limit, input_data.table)

    async def get_history(self, period=Period.DAILY, limit=None, table=None):
        self.calls.append({"period": period, "limit": limit, "table": table})
        if self.error:
            raise self.error
        if table not in (None, "eur_usd"):
            raise UnknownTableError(self.name, f"Unknown price table: {table}")
        if self.raw:
            return self.records
        records = aggregate_ohlc(self.records, period)
        return records[-limit:] if limit else records

    async def get_latest(self, count=2, table=None):
        if self.error:
            raise self.error
        return list(reversed(self.records))[:count]

    async def health_check(self):
        return self.error is None


@pytest.fixture
def fake_repository_factory():
    return FakePriceRepository


class FakeResponse:
    """Minimal stand-in for aiohttp.ClientResponse."""

    def __init__(self, status: int = 200, payload=None, headers: Optional[dict] = None, text: str = ""):
        self.status = status
        self.payload = payload
        self.headers = headers or {}
        self._text = text

    async def json(self):
        if isinstance(self.payload, Exception):
            raise self.payload
        return self.payload

    async def text(self):
        return self._text

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        return False


class FakeSession:
    """Replays queued responses for session.get()."""

    def __init__(self, responses):
        self.responses = list(responses)
        self.calls = []

    def get(self, url, params=None):
        self.calls.append((url, params))
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


@pytest.fixture
def fake_session_factory():
    return FakeSession


@pytest.fixture
def response_factory():
    return FakeResponse


@pytest.fixture
def kline_row():
    """One raw kline row as Binance sends it."""
    return [
        1704067200000,
        "42283.58",
        "42554.57",
        "42261.02",
        "42475.23",
        "1271.68108",
        1704070799999,
        "53957248.97",
        47134,
        "682.57581",
        "28957416.82",
        "0",
    ]


@pytest.fixture
def ticker_payload():
    return {
        "symbol": "BTCUSDT",
        "priceChange": "-94.99",
        "priceChangePercent": "-0.224",
        "weightedAvgPrice": "42221.19",
        "prevClosePrice": "42366.91",
        "lastPrice": "42271.92",
        "lastQty": "0.00042",
        "bidPrice": "42271.91",
        "bidQty": "3.19",
        "askPrice": "42271.92",
        "askQty": "4.87",
        "openPrice": "42366.91",
        "highPrice": "42593.82",
        "lowPrice": "41837.62",
        "volume": "22361.47",
        "quoteVolume": "944136543.18",
        "openTime": 1704067200000,
        "closeTime": 1704153599999,
        "firstId": 3336010000,
        "lastId": 3336900000,
        "count": 890001,
    }
