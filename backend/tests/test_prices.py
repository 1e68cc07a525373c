"""
Tests for price history bucketing and the SQLAlchemy repository.
"""

from datetime import datetime

import pytest

from fxdash.db.models import price_table
from fxdash.schemas.market import OHLCRecord, Period
from fxdash.services.base import DataAccessError, UnknownTableError
from fxdash.services.indicators import IndicatorService, SeriesOrderError
from fxdash.services.prices import HistoryRequest, PriceRepository, aggregate_ohlc, bucket_start


class TestBucketStart:
    """Test cases for bucket_start."""

    def test_weekly_starts_monday(self):
        assert bucket_start(datetime(2024, 1, 10, 15, 30), Period.WEEKLY) == datetime(2024, 1, 8)
        assert bucket_start(datetime(2024, 1, 8), Period.WEEKLY) == datetime(2024, 1, 8)
        assert bucket_start(datetime(2024, 1, 7), Period.WEEKLY) == datetime(2024, 1, 1)

    def test_monthly_and_yearly(self):
        assert bucket_start(datetime(2024, 3, 17, 9), Period.MONTHLY) == datetime(2024, 3, 1)
        assert bucket_start(datetime(2024, 3, 17, 9), Period.YEARLY) == datetime(2024, 1, 1)

    def test_daily_truncates_time(self):
        assert bucket_start(datetime(2024, 3, 17, 9, 45), Period.DAILY) == datetime(2024, 3, 17)


class TestAggregateOHLC:
    """Test cases for aggregate_ohlc."""

    def test_weekly_buckets(self, daily_rows):
        records = [OHLCRecord(**row) for row in daily_rows]
        weeks = aggregate_ohlc(records, Period.WEEKLY)

        # Jan 1, 8, 15, 22, 29
        assert [w.date.day for w in weeks] == [1, 8, 15, 22, 29]

        first = weeks[0]
        week_rows = records[:7]
        assert first.open == week_rows[0].open
        assert first.close == week_rows[-1].close
        assert first.high == max(r.high for r in week_rows)
        assert first.low == min(r.low for r in week_rows)
        assert first.avg_price == pytest.approx(sum(r.typical_price for r in week_rows) / 7)

    def test_unordered_input_is_sorted(self, daily_rows):
        records = [OHLCRecord(**row) for row in reversed(daily_rows)]

        months = aggregate_ohlc(records, Period.MONTHLY)

        assert len(months) == 1
        assert months[0].open == daily_rows[0]["open"]
        assert months[0].close == daily_rows[-1]["close"]

    def test_daily_passthrough_sorted(self, daily_rows):
        records = [OHLCRecord(**row) for row in reversed(daily_rows)]

        result = aggregate_ohlc(records, Period.DAILY)

        assert [r.date for r in result] == sorted(r.date for r in records)

    def test_empty(self):
        assert aggregate_ohlc([], Period.YEARLY) == []


class TestPeriod:
    """Test cases for Period.parse."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("weekly", Period.WEEKLY),
            ("MONTHLY", Period.MONTHLY),
            ("yearly", Period.YEARLY),
            ("daily", Period.DAILY),
            ("hourly", Period.DAILY),
            (None, Period.DAILY),
        ],
    )
    def test_parse(self, value, expected):
        assert Period.parse(value) == expected


class TestPriceRepository:
    """Test cases for PriceRepository against SQLite."""

    @pytest.mark.asyncio
    async def test_daily_is_ascending(self, engine, daily_rows):
        repository = PriceRepository(engine)

        records = await repository.get_history(Period.DAILY)

        assert len(records) == 30
        assert [r.date for r in records] == [row["date"] for row in daily_rows]
        assert records[0].avg_price == records[0].close

    @pytest.mark.asyncio
    async def test_daily_limit_keeps_latest(self, engine, daily_rows):
        repository = PriceRepository(engine)

        records = await repository.get_daily(limit=5)

        assert [r.date for r in records] == [row["date"] for row in daily_rows[-5:]]

    @pytest.mark.asyncio
    async def test_weekly_history(self, engine):
        repository = PriceRepository(engine)

        weeks = await repository.get_history(Period.WEEKLY)
        last_two = await repository.get_history(Period.WEEKLY, limit=2)

        assert len(weeks) == 5
        assert last_two == weeks[-2:]

    @pytest.mark.asyncio
    async def test_execute(self, engine):
        repository = PriceRepository(engine)

        months = await repository.execute(HistoryRequest(period=Period.MONTHLY))

        assert len(months) == 1
        assert months[0].date == datetime(2024, 1, 1)

    @pytest.mark.asyncio
    async def test_latest_is_newest_first(self, engine, daily_rows):
        repository = PriceRepository(engine)

        latest = await repository.get_latest(2)

        assert [r.date for r in latest] == [daily_rows[-1]["date"], daily_rows[-2]["date"]]

    @pytest.mark.asyncio
    async def test_unknown_table(self, engine):
        repository = PriceRepository(engine)

        with pytest.raises(UnknownTableError):
            await repository.get_history(table="users")

    @pytest.mark.asyncio
    async def test_missing_table_raises_data_access_error(self, engine):
        repository = PriceRepository(engine, tables=["gbp_usd"])

        with pytest.raises(DataAccessError):
            await repository.get_history(table="gbp_usd")

    @pytest.mark.asyncio
    async def test_negative_price_raises_data_access_error(self, engine):
        async with engine.begin() as conn:
            await conn.execute(
                price_table("eur_usd").insert(),
                {"date": datetime(2024, 3, 1), "open": 1.1, "high": 1.1, "low": -1.0, "close": 1.1},
            )

        with pytest.raises(DataAccessError):
            await PriceRepository(engine).get_history(Period.DAILY)

    @pytest.mark.asyncio
    async def test_null_price_raises_data_access_error(self, unconstrained_engine):
        async with unconstrained_engine.begin() as conn:
            await conn.execute(
                price_table("eur_usd").insert(),
                {"date": datetime(2024, 3, 1), "open": 1.1, "high": 1.1, "low": None, "close": 1.1},
            )

        with pytest.raises(DataAccessError):
            await PriceRepository(unconstrained_engine).get_history(Period.DAILY)

    @pytest.mark.asyncio
    async def test_duplicate_dates_are_returned_as_stored(self, unconstrained_engine, daily_rows):
        async with unconstrained_engine.begin() as conn:
            await conn.execute(price_table("eur_usd").insert(), daily_rows[-1])

        records = await PriceRepository(unconstrained_engine).get_history(Period.DAILY)

        assert len(records) == 31
        with pytest.raises(SeriesOrderError):
            IndicatorService().calculate(records)

    @pytest.mark.asyncio
    async def test_health_check(self, engine):
        assert await PriceRepository(engine).health_check() is True

    @pytest.mark.asyncio
    async def test_indicators_over_repository_history(self, engine):
        records = await PriceRepository(engine).get_history(Period.DAILY)
        result = IndicatorService().calculate(records)

        assert len(result.sma) == 11
        assert result.rsi[0].value == 100.0

