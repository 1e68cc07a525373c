"""
Period bucketing for daily price history.

Buckets start where Postgres date_trunc would put them: ISO week start
(Monday), first day of month, first day of year.
"""

from datetime import datetime, timedelta
from itertools import groupby
from typing import Iterable

from fxdash.schemas.market import OHLCRecord, Period


def bucket_start(moment: datetime, period: Period) -> datetime:
    """Truncate a timestamp to the start of its bucket."""
    day = moment.replace(hour=0, minute=0, second=0, microsecond=0)
    if period == Period.WEEKLY:
        return day - timedelta(days=day.weekday())
    if period == Period.MONTHLY:
        return day.replace(day=1)
    if period == Period.YEARLY:
        return day.replace(month=1, day=1)
    return day


def aggregate_ohlc(records: Iterable[OHLCRecord], period: Period) -> list[OHLCRecord]:
    """
    Collapse daily records into one record per bucket.

    open is the first record's open, close the last record's close,
    high/low are the extremes and avg_price the mean typical price.
    Output is ascending by bucket start.
    """
    ordered = sorted(records, key=lambda r: r.date)
    if period == Period.DAILY:
        return ordered

    buckets = []
    for start, group in groupby(ordered, key=lambda r: bucket_start(r.date, period)):
        rows = list(group)
        buckets.append(
            OHLCRecord(
                date=start,
                open=rows[0].open,
                high=max(r.high for r in rows),
                low=min(r.low for r in rows),
                close=rows[-1].close,
                avg_price=sum(r.typical_price for r in rows) / len(rows),
            )
        )
    return buckets
