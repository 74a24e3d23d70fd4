"""
Volatility Bands (Bollinger)

Middle band is the SMA of the window, bands sit k sample standard
deviations either side. A flat window collapses the bands onto the middle.
"""

import logging
from typing import Optional

from technicals.schemas.technical import (
    BandPosition,
    BollingerResult,
    IndicatorParameters,
    OscillatorSignal,
)
from technicals.services.base import InsufficientDataError, require_bars
from technicals.services.technical.calculations import bollinger_bands
from technicals.services.technical.series import SeriesBuffer

logger = logging.getLogger(__name__)

# Bandwidth (% of middle band) thresholds for the volatility notes
LOW_VOLATILITY_BANDWIDTH = 5.0
ACTIVE_BANDWIDTH = 10.0
HIGH_VOLATILITY_BANDWIDTH = 20.0

POSITION_SIGNALS = {
    BandPosition.ABOVE_UPPER: OscillatorSignal.OVERBOUGHT,
    BandPosition.BELOW_LOWER: OscillatorSignal.OVERSOLD,
}


def classify_position(close: float, upper: float, middle: float, lower: float) -> BandPosition:
    if upper == lower:
        return BandPosition.NEUTRAL
    if close >= upper:
        return BandPosition.ABOVE_UPPER
    if close <= lower:
        return BandPosition.BELOW_LOWER
    if close >= middle:
        return BandPosition.UPPER_HALF
    return BandPosition.LOWER_HALF


def _interpret(signal: OscillatorSignal, bandwidth: Optional[float]) -> str:
    if bandwidth is not None:
        if signal == OscillatorSignal.OVERSOLD and bandwidth > ACTIVE_BANDWIDTH:
            return "Potential buy opportunity - price at lower band with volatility"
        if signal == OscillatorSignal.OVERBOUGHT and bandwidth > ACTIVE_BANDWIDTH:
            return "Potential sell opportunity - price at upper band with volatility"
        if bandwidth < LOW_VOLATILITY_BANDWIDTH:
            return "Low volatility - expect breakout soon"
        if bandwidth > HIGH_VOLATILITY_BANDWIDTH:
            return "High volatility - proceed with caution"
    if signal == OscillatorSignal.OVERSOLD:
        return "Price below lower band - oversold"
    if signal == OscillatorSignal.OVERBOUGHT:
        return "Price above upper band - overbought"
    return "Price within normal range"


def analyze_bollinger(
    series: SeriesBuffer, params: Optional[IndicatorParameters] = None
) -> BollingerResult:
    """Bollinger Bands and the latest close's position relative to them."""
    params = params or IndicatorParameters()
    period = params.bollinger_period
    try:
        require_bars("Bollinger Bands", period, len(series))
    except InsufficientDataError as e:
        logger.debug(e.reason)
        return BollingerResult(available=False, reason=e.reason)

    upper_arr, middle_arr, lower_arr, sigma_arr = bollinger_bands(
        series.closes, period, params.bollinger_std_dev
    )
    upper = float(upper_arr[-1])
    middle = float(middle_arr[-1])
    lower = float(lower_arr[-1])
    close = series.last_close

    if sigma_arr[-1] == 0:
        return BollingerResult(
            upper_band=middle,
            middle_band=middle,
            lower_band=middle,
            bandwidth=0.0,
            percent_b=0.5,
            position=BandPosition.NEUTRAL,
            signal=OscillatorSignal.NEUTRAL,
            degenerate=True,
            interpretation=(
                f"Bands collapsed - price flat over the last {period} bars, no volatility signal"
            ),
        )

    bandwidth = (upper - lower) / abs(middle) * 100 if middle != 0 else None
    percent_b = (close - lower) / (upper - lower)
    position = classify_position(close, upper, middle, lower)
    signal = POSITION_SIGNALS.get(position, OscillatorSignal.NEUTRAL)

    return BollingerResult(
        upper_band=upper,
        middle_band=middle,
        lower_band=lower,
        bandwidth=bandwidth,
        percent_b=percent_b,
        position=position,
        signal=signal,
        interpretation=_interpret(signal, bandwidth),
    )
