"""
Momentum Indicators

RSI (primary) and the stochastic oscillator (secondary).
"""

import logging
from typing import Optional

from technicals.schemas.technical import (
    Crossover,
    IndicatorParameters,
    MomentumDirection,
    MomentumResult,
    OscillatorSignal,
    RSIResult,
    StochasticResult,
)
from technicals.services.base import InsufficientDataError, require_bars
from technicals.services.technical.calculations import (
    classify_crossover,
    get_last_two_valid,
    rsi,
    stochastic,
)
from technicals.services.technical.series import SeriesBuffer

logger = logging.getLogger(__name__)

# RSI change (points) between consecutive bars that counts as a move
RSI_DIRECTION_STEP = 5.0
# Inner edges of the neutral zone used for "building"/"losing" momentum notes
RSI_WEAK_ZONE = 40.0
RSI_STRONG_ZONE = 60.0


def classify_oscillator(value: float, overbought: float, oversold: float) -> OscillatorSignal:
    """Strictly above overbought / strictly below oversold; boundaries are NEUTRAL."""
    if value > overbought:
        return OscillatorSignal.OVERBOUGHT
    if value < oversold:
        return OscillatorSignal.OVERSOLD
    return OscillatorSignal.NEUTRAL


def _rsi_direction(current: float, previous: float) -> MomentumDirection:
    if current > previous + RSI_DIRECTION_STEP:
        return MomentumDirection.INCREASING
    if current < previous - RSI_DIRECTION_STEP:
        return MomentumDirection.DECREASING
    return MomentumDirection.STABLE


def _rsi_interpretation(value: float, signal: OscillatorSignal, direction: MomentumDirection) -> str:
    if signal == OscillatorSignal.OVERSOLD:
        if direction == MomentumDirection.INCREASING:
            return "Strong buy signal - oversold and recovering"
        return "Potential buy - oversold but wait for confirmation"
    if signal == OscillatorSignal.OVERBOUGHT:
        if direction == MomentumDirection.DECREASING:
            return "Strong sell signal - overbought and declining"
        return "Potential sell - overbought but still strong"
    if value < RSI_WEAK_ZONE and direction == MomentumDirection.INCREASING:
        return "Building momentum - watch for entry"
    if value > RSI_STRONG_ZONE and direction == MomentumDirection.DECREASING:
        return "Losing momentum - watch for exit"
    return "Neutral momentum - no clear signal"


def analyze_rsi(series: SeriesBuffer, params: Optional[IndicatorParameters] = None) -> RSIResult:
    """RSI with zone classification; needs period + 1 closes."""
    params = params or IndicatorParameters()
    try:
        require_bars("RSI", params.rsi_period + 1, len(series))
    except InsufficientDataError as e:
        logger.debug(e.reason)
        return RSIResult(available=False, reason=e.reason)

    previous, current = get_last_two_valid(rsi(series.closes, params.rsi_period))
    if previous is None:
        previous = current

    signal = classify_oscillator(current, params.rsi_overbought, params.rsi_oversold)
    direction = _rsi_direction(current, previous)

    return RSIResult(
        value=current,
        previous=previous,
        signal=signal,
        direction=direction,
        interpretation=_rsi_interpretation(current, signal, direction),
    )


def _stochastic_interpretation(signal: OscillatorSignal, crossover: Crossover) -> str:
    if crossover == Crossover.BULLISH and signal == OscillatorSignal.OVERSOLD:
        return "Strong buy signal - bullish crossover in oversold zone"
    if crossover == Crossover.BEARISH and signal == OscillatorSignal.OVERBOUGHT:
        return "Strong sell signal - bearish crossover in overbought zone"
    if crossover == Crossover.BULLISH:
        return "Buy signal - bullish crossover detected"
    if crossover == Crossover.BEARISH:
        return "Sell signal - bearish crossover detected"
    if signal == OscillatorSignal.OVERSOLD:
        return "Watch for bullish reversal"
    if signal == OscillatorSignal.OVERBOUGHT:
        return "Watch for bearish reversal"
    return "No clear signal"


def analyze_stochastic(
    series: SeriesBuffer, params: Optional[IndicatorParameters] = None
) -> StochasticResult:
    """%K/%D with zone and %K-over-%D crossover; needs k + d - 1 bars."""
    params = params or IndicatorParameters()
    try:
        require_bars(
            "Stochastic",
            params.stochastic_k_period + params.stochastic_d_period - 1,
            len(series),
        )
    except InsufficientDataError as e:
        logger.debug(e.reason)
        return StochasticResult(available=False, reason=e.reason)

    k_arr, d_arr = stochastic(
        series.highs,
        series.lows,
        series.closes,
        params.stochastic_k_period,
        params.stochastic_d_period,
    )
    prev_k, k = get_last_two_valid(k_arr)
    prev_d, d = get_last_two_valid(d_arr)

    if k > params.stochastic_overbought and d > params.stochastic_overbought:
        signal = OscillatorSignal.OVERBOUGHT
    elif k < params.stochastic_oversold and d < params.stochastic_oversold:
        signal = OscillatorSignal.OVERSOLD
    else:
        signal = OscillatorSignal.NEUTRAL

    if prev_d is None:
        crossover = Crossover.NONE
    else:
        crossover = classify_crossover(prev_k - prev_d, k - d)

    return StochasticResult(
        k=k,
        d=d,
        signal=signal,
        crossover=crossover,
        interpretation=_stochastic_interpretation(signal, crossover),
    )


def analyze_momentum(
    series: SeriesBuffer, params: Optional[IndicatorParameters] = None
) -> MomentumResult:
    return MomentumResult(
        rsi=analyze_rsi(series, params),
        stochastic=analyze_stochastic(series, params),
    )
