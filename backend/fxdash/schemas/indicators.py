"""
CONTRACT 2: Indicator Engine

Input: ascending list of OHLCRecord
Output: IndicatorSet

Pure Python/NumPy - no I/O. Every result is computed per request
and discarded after serialization.
"""

import math
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field, field_serializer


class IndicatorPoint(BaseModel):
    """One indicator value at the date of the record that produced it."""

    date: datetime
    value: Optional[float]

    @field_serializer("value", when_used="json")
    def serialize_value(self, value: Optional[float]) -> Optional[float]:
        # JSON has no NaN; a flat RSI seed window (0/0) is emitted as null
        if value is None or not math.isfinite(value):
            return None
        return value


class IndicatorSet(BaseModel):
    """
    RSI, SMA and EMA series for one price history.
    Returned by: Indicator Service
    Consumed by: indicators endpoint / charting UI
    """

    rsi: list[IndicatorPoint] = Field(default_factory=list)
    sma: list[IndicatorPoint] = Field(default_factory=list)
    ema: list[IndicatorPoint] = Field(default_factory=list)

    class Config:
        json_schema_extra = {
            "example": {
                "rsi": [{"date": "2024-02-05T00:00:00Z", "value": 54.2}],
                "sma": [{"date": "2024-02-05T00:00:00Z", "value": 1.0791}],
                "ema": [{"date": "2024-02-05T00:00:00Z", "value": 1.0788}],
            }
        }
