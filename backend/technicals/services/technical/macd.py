"""
MACD

MACD line, signal line, histogram and histogram-sign crossover.
"""

import logging
from typing import Optional

from technicals.schemas.technical import (
    Crossover,
    HistogramTrend,
    IndicatorParameters,
    MACDResult,
    SignalBias,
)
from technicals.services.base import InsufficientDataError, require_bars
from technicals.services.technical.calculations import (
    classify_crossover,
    get_last_two_valid,
    macd,
)
from technicals.services.technical.series import SeriesBuffer

logger = logging.getLogger(__name__)


def _bias(histogram: float) -> SignalBias:
    if histogram > 0:
        return SignalBias.BULLISH
    if histogram < 0:
        return SignalBias.BEARISH
    return SignalBias.NEUTRAL


def _histogram_trend(previous: float, current: float) -> HistogramTrend:
    if current > previous:
        return HistogramTrend.INCREASING
    if current < previous:
        return HistogramTrend.DECREASING
    return HistogramTrend.FLAT


def _interpret(crossover: Crossover, bias: SignalBias, trend: HistogramTrend) -> str:
    if crossover == Crossover.BULLISH:
        return "Bullish crossover - momentum turning positive"
    if crossover == Crossover.BEARISH:
        return "Bearish crossover - momentum turning negative"
    if bias == SignalBias.BULLISH and trend == HistogramTrend.INCREASING:
        return "Strong bullish momentum - trend strengthening"
    if bias == SignalBias.BULLISH and trend == HistogramTrend.DECREASING:
        return "Bullish but weakening - watch for reversal"
    if bias == SignalBias.BEARISH and trend == HistogramTrend.DECREASING:
        return "Strong bearish momentum - trend strengthening"
    if bias == SignalBias.BEARISH and trend == HistogramTrend.INCREASING:
        return "Bearish but weakening - potential reversal"
    return "Neutral momentum - no clear direction"


def analyze_macd(series: SeriesBuffer, params: Optional[IndicatorParameters] = None) -> MACDResult:
    """
    MACD(fast, slow, signal).

    Needs slow + signal bars: slow - 1 bars of slow-EMA warm-up, signal bars
    of MACD history for the signal line, and one more for the previous
    histogram value the crossover is measured against.
    """
    params = params or IndicatorParameters()
    try:
        require_bars("MACD", params.macd_slow + params.macd_signal, len(series))
    except InsufficientDataError as e:
        logger.debug(e.reason)
        return MACDResult(available=False, reason=e.reason)

    macd_line, signal_line, histogram = macd(
        series.closes, params.macd_fast, params.macd_slow, params.macd_signal
    )
    _, macd_val = get_last_two_valid(macd_line)
    _, signal_val = get_last_two_valid(signal_line)
    prev_hist, hist_val = get_last_two_valid(histogram)

    crossover = classify_crossover(prev_hist, hist_val)
    bias = _bias(hist_val)
    trend = _histogram_trend(prev_hist, hist_val)

    return MACDResult(
        value=macd_val,
        signal=signal_val,
        histogram=hist_val,
        crossover=crossover,
        bias=bias,
        histogram_trend=trend,
        interpretation=_interpret(crossover, bias, trend),
    )
