"""
Moving Averages and Trend Detection

SMA/EMA at the standard windows, trend direction from short-vs-long
comparisons and a bucketed trend strength.
"""

import logging
from typing import Optional

import numpy as np

from technicals.schemas.technical import (
    IndicatorParameters,
    MovingAverageCross,
    MovingAverageResult,
    TrendDirection,
    TrendResult,
    TrendStrength,
)
from technicals.services.base import InsufficientDataError, require_bars
from technicals.services.technical.calculations import ema, get_last_valid, sma
from technicals.services.technical.series import SeriesBuffer

logger = logging.getLogger(__name__)

SMA_WINDOWS = (20, 50, 200)
EMA_WINDOWS = (9, 21)

# (short, long) pairs compared for the trend label
SMA_TREND_PAIR = (20, 50)
EMA_TREND_PAIR = (9, 21)
CROSS_PAIR = (50, 200)

TREND_INTERPRETATIONS = {
    (TrendDirection.UPTREND, TrendStrength.STRONG): "Strong uptrend - consider buying on pullbacks",
    (TrendDirection.UPTREND, TrendStrength.MODERATE): "Uptrend confirmed - follow the trend",
    (TrendDirection.UPTREND, TrendStrength.WEAK): "Weak uptrend - wait for confirmation",
    (TrendDirection.DOWNTREND, TrendStrength.WEAK): "Weak downtrend - caution advised",
    (TrendDirection.DOWNTREND, TrendStrength.MODERATE): "Downtrend confirmed - avoid or reduce exposure",
    (TrendDirection.DOWNTREND, TrendStrength.STRONG): "Strong downtrend - strong sell signal",
}


def classify_trend(pairs: list[tuple[float, float]]) -> TrendDirection:
    """UPTREND/DOWNTREND only when every (short, long) pair agrees."""
    if all(short > long for short, long in pairs):
        return TrendDirection.UPTREND
    if all(short < long for short, long in pairs):
        return TrendDirection.DOWNTREND
    return TrendDirection.SIDEWAYS


def gap_percent(short: float, long: float) -> float:
    """Absolute gap between two averages as a percentage of the longer one."""
    if long == 0:
        return 0.0
    return abs(short - long) / abs(long) * 100


def classify_strength(gap: float, params: IndicatorParameters) -> TrendStrength:
    if gap < params.trend_weak_gap:
        return TrendStrength.WEAK
    if gap <= params.trend_strong_gap:
        return TrendStrength.MODERATE
    return TrendStrength.STRONG


def detect_cross(short_ma: np.ndarray, long_ma: np.ndarray) -> MovingAverageCross:
    """Golden/death cross between the previous and the latest bar."""
    if len(short_ma) < 2 or np.isnan(long_ma[-2]) or np.isnan(short_ma[-2]):
        return MovingAverageCross.NONE

    prev_short, prev_long = short_ma[-2], long_ma[-2]
    last_short, last_long = short_ma[-1], long_ma[-1]

    if last_short > last_long and prev_short <= prev_long:
        return MovingAverageCross.GOLDEN_CROSS
    if last_short < last_long and prev_short >= prev_long:
        return MovingAverageCross.DEATH_CROSS
    return MovingAverageCross.NONE


def _interpret(
    trend: TrendDirection, strength: TrendStrength, cross: MovingAverageCross
) -> str:
    if cross == MovingAverageCross.GOLDEN_CROSS:
        return "Golden cross: SMA50 moved above SMA200 - strong buy signal"
    if cross == MovingAverageCross.DEATH_CROSS:
        return "Death cross: SMA50 moved below SMA200 - strong sell signal"
    return TREND_INTERPRETATIONS.get((trend, strength), "No clear trend - wait for direction")


def analyze_moving_averages(
    series: SeriesBuffer, params: Optional[IndicatorParameters] = None
) -> MovingAverageResult:
    """
    Compute the moving averages and the trend derived from them.

    Individual averages are reported whenever their window fits; the trend
    needs at least one complete (short, long) pair.
    """
    params = params or IndicatorParameters()
    closes = series.closes

    sma_arrays = {w: sma(closes, w) for w in SMA_WINDOWS}
    smas = {w: get_last_valid(arr) for w, arr in sma_arrays.items()}
    emas = {w: get_last_valid(ema(closes, w)) for w in EMA_WINDOWS}

    values = {
        "sma20": smas[20],
        "sma50": smas[50],
        "sma200": smas[200],
        "ema9": emas[9],
        "ema21": emas[21],
    }

    try:
        require_bars(
            "Moving-average trend",
            min(EMA_TREND_PAIR[1], SMA_TREND_PAIR[1]),
            len(closes),
        )
    except InsufficientDataError as e:
        logger.debug(e.reason)
        return MovingAverageResult(available=False, reason=e.reason, **values)

    ema_pair = (emas[EMA_TREND_PAIR[0]], emas[EMA_TREND_PAIR[1]])
    sma_pair = (smas[SMA_TREND_PAIR[0]], smas[SMA_TREND_PAIR[1]])
    pairs = [pair for pair in (ema_pair, sma_pair) if None not in pair]

    trend = classify_trend(pairs)

    # Strength from the slower SMA pair when it exists
    strength_pair = sma_pair if None not in sma_pair else ema_pair
    gap = gap_percent(*strength_pair)
    strength = classify_strength(gap, params)

    cross = detect_cross(sma_arrays[CROSS_PAIR[0]], sma_arrays[CROSS_PAIR[1]])

    return MovingAverageResult(
        **values,
        trend=trend,
        trend_strength=strength,
        gap_percent=gap,
        cross=cross,
        interpretation=_interpret(trend, strength, cross),
    )


def trend_section(ma: MovingAverageResult) -> TrendResult:
    """Project the moving-average result onto the report's `trend` section."""
    return TrendResult(
        available=ma.available,
        reason=ma.reason,
        interpretation=ma.interpretation,
        trend=ma.trend,
        strength=ma.trend_strength,
        gap_percent=ma.gap_percent,
    )
