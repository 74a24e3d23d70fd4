"""
Technical Indicator Calculations

Pure NumPy implementations of the indicator kernels.
Every function returns an array aligned with its input, NaN where the
indicator is still warming up. All math is deterministic.
"""

from typing import Optional

import numpy as np

from technicals.schemas.technical import Crossover

# Relative size below which a standard deviation counts as zero.
FLAT_TOLERANCE = 1e-12


# =============================================================================
# MOVING AVERAGES
# =============================================================================


def sma(data: np.ndarray, period: int) -> np.ndarray:
    """Simple Moving Average."""
    result = np.full(len(data), np.nan)
    if len(data) < period:
        return result

    for i in range(period - 1, len(data)):
        result[i] = np.mean(data[i - period + 1 : i + 1])
    return result


def ema(data: np.ndarray, period: int) -> np.ndarray:
    """
    Exponential Moving Average.

    Seeded with the SMA of the first `period` values. Leading NaNs (e.g. the
    warm-up of a MACD line) are skipped before seeding.
    """
    result = np.full(len(data), np.nan)
    valid = np.flatnonzero(~np.isnan(data))
    if len(valid) == 0:
        return result

    start = int(valid[0])
    if len(data) - start < period:
        return result

    multiplier = 2 / (period + 1)
    seed = start + period - 1

    # Start with SMA
    result[seed] = np.mean(data[start : seed + 1])

    # (close - prev) * k + prev keeps a constant series exactly constant
    for i in range(seed + 1, len(data)):
        result[i] = (data[i] - result[i - 1]) * multiplier + result[i - 1]

    return result


# =============================================================================
# MOMENTUM INDICATORS
# =============================================================================


def _rsi_from_averages(avg_gain: float, avg_loss: float) -> float:
    if avg_loss == 0:
        # No losses: pure uptrend, or no movement at all
        return 100.0 if avg_gain > 0 else 50.0
    rs = avg_gain / avg_loss
    return 100 - (100 / (1 + rs))


def rsi(closes: np.ndarray, period: int = 14) -> np.ndarray:
    """Relative Strength Index (Wilder smoothing)."""
    result = np.full(len(closes), np.nan)
    if len(closes) < period + 1:
        return result

    # Calculate price changes
    deltas = np.diff(closes)

    # Separate gains and losses
    gains = np.where(deltas > 0, deltas, 0.0)
    losses = np.where(deltas < 0, -deltas, 0.0)

    # First average
    avg_gain = float(np.mean(gains[:period]))
    avg_loss = float(np.mean(losses[:period]))
    result[period] = _rsi_from_averages(avg_gain, avg_loss)

    # Subsequent RSI values using smoothed averages
    for i in range(period, len(deltas)):
        avg_gain = (avg_gain * (period - 1) + gains[i]) / period
        avg_loss = (avg_loss * (period - 1) + losses[i]) / period
        result[i + 1] = _rsi_from_averages(avg_gain, avg_loss)

    return result


def stochastic(
    highs: np.ndarray,
    lows: np.ndarray,
    closes: np.ndarray,
    k_period: int = 14,
    d_period: int = 3,
) -> tuple[np.ndarray, np.ndarray]:
    """
    Stochastic Oscillator.

    The range includes the closes themselves, so bars whose close sits outside
    [low, high] cannot push %K beyond 0-100.

    Returns: (k, d)
    """
    k = np.full(len(closes), np.nan)
    if len(closes) < k_period:
        return k, np.full(len(closes), np.nan)

    for i in range(k_period - 1, len(closes)):
        window = slice(i - k_period + 1, i + 1)
        highest_high = max(np.max(highs[window]), np.max(closes[window]))
        lowest_low = min(np.min(lows[window]), np.min(closes[window]))

        if highest_high == lowest_low:
            k[i] = 50.0
        else:
            k[i] = ((closes[i] - lowest_low) / (highest_high - lowest_low)) * 100

    d = sma(k, d_period)

    return k, d


def macd(
    closes: np.ndarray,
    fast_period: int = 12,
    slow_period: int = 26,
    signal_period: int = 9,
) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    MACD (Moving Average Convergence Divergence).

    Returns: (macd_line, signal_line, histogram)
    """
    fast_ema = ema(closes, fast_period)
    slow_ema = ema(closes, slow_period)

    macd_line = fast_ema - slow_ema

    # Signal line is EMA of MACD line
    signal_line = ema(macd_line, signal_period)

    # Histogram
    histogram = macd_line - signal_line

    return macd_line, signal_line, histogram


# =============================================================================
# VOLATILITY INDICATORS
# =============================================================================


def bollinger_bands(
    closes: np.ndarray, period: int = 20, std_dev: float = 2.0
) -> tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray]:
    """
    Bollinger Bands with the sample standard deviation (ddof=1).

    Returns: (upper, middle, lower, sigma)
    """
    middle = sma(closes, period)

    sigma = np.full(len(closes), np.nan)
    for i in range(period - 1, len(closes)):
        s = float(np.std(closes[i - period + 1 : i + 1], ddof=1))
        if s <= FLAT_TOLERANCE * max(1.0, abs(middle[i])):
            s = 0.0
        sigma[i] = s

    upper = middle + (std_dev * sigma)
    lower = middle - (std_dev * sigma)

    return upper, middle, lower, sigma


# =============================================================================
# UTILITY FUNCTIONS
# =============================================================================


def get_last_valid(arr: np.ndarray) -> Optional[float]:
    """Get last non-NaN value from array."""
    valid = arr[~np.isnan(arr)]
    return float(valid[-1]) if len(valid) > 0 else None


def get_last_two_valid(arr: np.ndarray) -> tuple[Optional[float], Optional[float]]:
    """Get (previous, latest) non-NaN values; previous is None with a single value."""
    valid = arr[~np.isnan(arr)]
    if len(valid) == 0:
        return None, None
    if len(valid) == 1:
        return None, float(valid[-1])
    return float(valid[-2]), float(valid[-1])


def classify_crossover(previous: Optional[float], current: Optional[float]) -> Crossover:
    """
    Classify a sign change of a difference series (e.g. the MACD histogram).

    previous <= 0 < current is BULLISH, previous >= 0 > current is BEARISH.
    """
    if previous is None or current is None:
        return Crossover.NONE
    if current > 0 and previous <= 0:
        return Crossover.BULLISH
    if current < 0 and previous >= 0:
        return Crossover.BEARISH
    return Crossover.NONE


def crossover_series(diff: np.ndarray) -> list[Crossover]:
    """Crossover label for every bar of a difference series (NONE during warm-up)."""
    labels = [Crossover.NONE] * len(diff)
    for i in range(1, len(diff)):
        if np.isnan(diff[i]) or np.isnan(diff[i - 1]):
            continue
        labels[i] = classify_crossover(float(diff[i - 1]), float(diff[i]))
    return labels
