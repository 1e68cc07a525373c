"""
Technical Indicator Calculations

Pure Python/NumPy implementations of RSI, SMA and EMA over an
ascending OHLC series. Deterministic, no I/O, no shared state.

Insufficient data is not an error: every function returns an empty
list when the series is shorter than the indicator needs.
"""

from typing import Protocol, Sequence
from datetime import datetime

import numpy as np
from numpy.lib.stride_tricks import sliding_window_view

from fxdash.schemas.indicators import IndicatorPoint, IndicatorSet


DEFAULT_RSI_PERIOD = 14
DEFAULT_SMA_PERIOD = 20
DEFAULT_EMA_PERIOD = 20


class PriceBar(Protocol):
    date: datetime
    close: float


class SeriesOrderError(ValueError):
    """Series dates are not strictly increasing."""


# =============================================================================
# INPUT CHECKS
# =============================================================================


def _check_period(period: int) -> None:
    if isinstance(period, bool) or not isinstance(period, (int, np.integer)) or period < 1:
        raise ValueError(f"period must be a positive integer, got {period!r}")


def ensure_ascending(series: Sequence[PriceBar]) -> None:
    """Raise SeriesOrderError unless dates are strictly increasing."""
    for i in range(1, len(series)):
        if series[i].date <= series[i - 1].date:
            raise SeriesOrderError(
                f"series must be in strictly ascending date order: "
                f"{series[i - 1].date.isoformat()} is followed by {series[i].date.isoformat()}"
            )


def _closes(series: Sequence[PriceBar]) -> np.ndarray:
    return np.array([bar.close for bar in series], dtype=np.float64)


# =============================================================================
# MOVING AVERAGES
# =============================================================================


def compute_sma(series: Sequence[PriceBar], period: int = DEFAULT_SMA_PERIOD) -> list[IndicatorPoint]:
    """Simple Moving Average of closes over a trailing window."""
    _check_period(period)
    ensure_ascending(series)
    if len(series) < period:
        return []

    means = sliding_window_view(_closes(series), period).mean(axis=1)
    return [
        IndicatorPoint(date=series[i].date, value=float(value))
        for i, value in enumerate(means, start=period - 1)
    ]


def compute_ema(series: Sequence[PriceBar], period: int = DEFAULT_EMA_PERIOD) -> list[IndicatorPoint]:
    """Exponential Moving Average seeded with the SMA of the first window."""
    _check_period(period)
    ensure_ascending(series)
    if len(series) < period:
        return []

    closes = _closes(series)
    multiplier = 2 / (period + 1)

    ema = float(np.mean(closes[:period]))
    points = [IndicatorPoint(date=series[period - 1].date, value=ema)]

    for i in range(period, len(closes)):
        ema = (float(closes[i]) - ema) * multiplier + ema
        points.append(IndicatorPoint(date=series[i].date, value=ema))

    return points


# =============================================================================
# MOMENTUM INDICATORS
# =============================================================================


def _rsi_value(avg_gain: np.float64, avg_loss: np.float64) -> float:
    # avg_loss == 0 gives rs == inf and RSI == 100; 0/0 gives NaN
    rs = avg_gain / avg_loss
    return float(100 - 100 / (1 + rs))


def compute_rsi(series: Sequence[PriceBar], period: int = DEFAULT_RSI_PERIOD) -> list[IndicatorPoint]:
    """
    Relative Strength Index.

    The first window is a plain average of gains and losses; later
    points use the (avg * (period - 1) + current) / period smoothing.
    """
    _check_period(period)
    ensure_ascending(series)
    if len(series) < period + 1:
        return []

    deltas = np.diff(_closes(series))
    gains = np.where(deltas >= 0, deltas, 0.0)
    losses = np.where(deltas < 0, -deltas, 0.0)

    avg_gain = np.float64(gains[:period].sum() / period)
    avg_loss = np.float64(losses[:period].sum() / period)

    points = []
    with np.errstate(divide="ignore", invalid="ignore"):
        points.append(IndicatorPoint(date=series[period].date, value=_rsi_value(avg_gain, avg_loss)))

        for i in range(period, len(deltas)):
            avg_gain = (avg_gain * (period - 1) + gains[i]) / period
            avg_loss = (avg_loss * (period - 1) + losses[i]) / period
            points.append(IndicatorPoint(date=series[i + 1].date, value=_rsi_value(avg_gain, avg_loss)))

    return points


# =============================================================================
# BUNDLE
# =============================================================================


def compute_indicators(
    series: Sequence[PriceBar],
    rsi_period: int = DEFAULT_RSI_PERIOD,
    sma_period: int = DEFAULT_SMA_PERIOD,
    ema_period: int = DEFAULT_EMA_PERIOD,
) -> IndicatorSet:
    """Calculate the three independent indicator series."""
    return IndicatorSet(
        rsi=compute_rsi(series, rsi_period),
        sma=compute_sma(series, sma_period),
        ema=compute_ema(series, ema_period),
    )
