"""
Composite Signal Aggregator

Fuses the trend, momentum, MACD and volatility results into one score in
[-1, 1], a categorical signal, an agreement-based confidence and a
template-built interpretation.

Scoring rules (weights and thresholds live in ScoringProfile):

    Trend       UPTREND +1 / DOWNTREND -1, scaled by strength
                (WEAK 0.5, MODERATE 0.75, STRONG 1.0); SIDEWAYS 0
    Momentum    RSI zone (OVERSOLD +1, OVERBOUGHT -1, NEUTRAL 0), blended
                with the stochastic zone or, when neutral, its crossover (+-0.5)
    MACD        crossover +-1, otherwise histogram sign +-0.5
    Volatility  Bollinger OVERSOLD +1, OVERBOUGHT -1, otherwise 0

An oscillator extreme that agrees with an established trend (overbought in
an uptrend, oversold in a downtrend) contributes +-trend_confirmation in the
trend's direction instead of the contrarian -+1.

Unavailable families are dropped from both the weighted sum and the
normalizing weight total. With no family available the result is an explicit
INSUFFICIENT_DATA report with no score.
"""

import logging
from typing import Optional

from technicals.schemas.technical import (
    BollingerResult,
    CompositeResult,
    CompositeSignal,
    Crossover,
    IndicatorFamily,
    MACDResult,
    MomentumResult,
    MovingAverageResult,
    OscillatorSignal,
    ScoringProfile,
    TrendDirection,
    TrendStrength,
)

logger = logging.getLogger(__name__)

STRENGTH_SCALE = {
    TrendStrength.WEAK: 0.5,
    TrendStrength.MODERATE: 0.75,
    TrendStrength.STRONG: 1.0,
}
EXTREME_CONTRIBUTION = 1.0
HISTOGRAM_CONTRIBUTION = 0.5
STOCHASTIC_CROSSOVER_CONTRIBUTION = 0.5

# Contributions closer to zero than this count as neutral
NEUTRAL_EPSILON = 1e-9

FAMILY_LABELS = {
    IndicatorFamily.TREND: "Trend",
    IndicatorFamily.MOMENTUM: "Momentum",
    IndicatorFamily.MACD: "MACD",
    IndicatorFamily.VOLATILITY: "Bollinger Bands",
}

SIGNAL_DIRECTIONS = {
    CompositeSignal.STRONG_BUY: 1,
    CompositeSignal.BUY: 1,
    CompositeSignal.HOLD: 0,
    CompositeSignal.SELL: -1,
    CompositeSignal.STRONG_SELL: -1,
}


def _sign(value: float) -> int:
    if abs(value) < NEUTRAL_EPSILON:
        return 0
    return 1 if value > 0 else -1


# =============================================================================
# CONTRIBUTIONS
# =============================================================================


def oscillator_contribution(
    signal: Optional[OscillatorSignal],
    trend: Optional[TrendDirection],
    profile: ScoringProfile,
) -> float:
    """Contrarian reading of an oscillator zone, unless the zone confirms the trend."""
    if signal == OscillatorSignal.OVERSOLD:
        if trend == TrendDirection.DOWNTREND:
            return -profile.trend_confirmation
        return EXTREME_CONTRIBUTION
    if signal == OscillatorSignal.OVERBOUGHT:
        if trend == TrendDirection.UPTREND:
            return profile.trend_confirmation
        return -EXTREME_CONTRIBUTION
    return 0.0


def trend_contribution(ma: MovingAverageResult) -> Optional[float]:
    if not ma.available:
        return None
    if ma.trend == TrendDirection.UPTREND:
        return STRENGTH_SCALE[ma.trend_strength]
    if ma.trend == TrendDirection.DOWNTREND:
        return -STRENGTH_SCALE[ma.trend_strength]
    return 0.0


def momentum_contribution(
    momentum: MomentumResult,
    trend: Optional[TrendDirection],
    profile: ScoringProfile,
) -> Optional[float]:
    if not momentum.rsi.available:
        return None

    rsi_part = oscillator_contribution(momentum.rsi.signal, trend, profile)
    stoch = momentum.stochastic
    if not stoch.available:
        return rsi_part

    stoch_part = oscillator_contribution(stoch.signal, trend, profile)
    if stoch.signal == OscillatorSignal.NEUTRAL:
        if stoch.crossover == Crossover.BULLISH:
            stoch_part = STOCHASTIC_CROSSOVER_CONTRIBUTION
        elif stoch.crossover == Crossover.BEARISH:
            stoch_part = -STOCHASTIC_CROSSOVER_CONTRIBUTION

    share = profile.stochastic_share
    return (1 - share) * rsi_part + share * stoch_part


def macd_contribution(macd: MACDResult) -> Optional[float]:
    if not macd.available:
        return None
    if macd.crossover == Crossover.BULLISH:
        return EXTREME_CONTRIBUTION
    if macd.crossover == Crossover.BEARISH:
        return -EXTREME_CONTRIBUTION
    return HISTOGRAM_CONTRIBUTION * _sign(macd.histogram)


def volatility_contribution(
    bollinger: BollingerResult,
    trend: Optional[TrendDirection],
    profile: ScoringProfile,
) -> Optional[float]:
    if not bollinger.available:
        return None
    return oscillator_contribution(bollinger.signal, trend, profile)


def indicator_contributions(
    ma: MovingAverageResult,
    momentum: MomentumResult,
    macd: MACDResult,
    bollinger: BollingerResult,
    profile: ScoringProfile,
) -> dict[IndicatorFamily, Optional[float]]:
    """Per-family contribution in [-1, 1], None where the family is unavailable."""
    trend = ma.trend if ma.available else None
    return {
        IndicatorFamily.TREND: trend_contribution(ma),
        IndicatorFamily.MOMENTUM: momentum_contribution(momentum, trend, profile),
        IndicatorFamily.MACD: macd_contribution(macd),
        IndicatorFamily.VOLATILITY: volatility_contribution(bollinger, trend, profile),
    }


# =============================================================================
# SCORING
# =============================================================================


def composite_score(
    contributions: dict[IndicatorFamily, Optional[float]],
    profile: ScoringProfile,
) -> Optional[float]:
    """
    Weighted mean of the available contributions, clamped to [-1, 1].

    Returns None when no weighted family is available.
    """
    weights = profile.weights()
    available = {f: c for f, c in contributions.items() if c is not None}
    total_weight = sum(weights[f] for f in available)
    if total_weight <= 0:
        return None

    raw = sum(weights[f] * c for f, c in available.items()) / total_weight
    return max(-1.0, min(1.0, raw))


def classify_score(score: float, profile: ScoringProfile) -> CompositeSignal:
    if score >= profile.strong_threshold:
        return CompositeSignal.STRONG_BUY
    if score >= profile.buy_threshold:
        return CompositeSignal.BUY
    if score <= -profile.strong_threshold:
        return CompositeSignal.STRONG_SELL
    if score <= -profile.buy_threshold:
        return CompositeSignal.SELL
    return CompositeSignal.HOLD


def agreement_confidence(
    contributions: dict[IndicatorFamily, Optional[float]],
    signal: CompositeSignal,
) -> int:
    """
    Percentage of available families pointing the same way as the signal.

    For HOLD the direction is zero, so neutral families agree and any
    directional family counts against the confidence.
    """
    available = [c for c in contributions.values() if c is not None]
    if not available:
        return 0
    direction = SIGNAL_DIRECTIONS[signal]
    agreeing = sum(1 for c in available if _sign(c) == direction)
    return round(100 * agreeing / len(available))


# =============================================================================
# INTERPRETATION
# =============================================================================


def _join(phrases: list[str]) -> str:
    if len(phrases) == 1:
        return phrases[0]
    return ", ".join(phrases[:-1]) + " and " + phrases[-1]


def _family_phrase(
    family: IndicatorFamily,
    direction: int,
    momentum: MomentumResult,
    macd: MACDResult,
    bollinger: BollingerResult,
) -> str:
    bullish = direction > 0

    if family == IndicatorFamily.TREND:
        return "rising moving averages" if bullish else "falling moving averages"

    if family == IndicatorFamily.MOMENTUM:
        rsi_signal = momentum.rsi.signal
        if rsi_signal == OscillatorSignal.OVERSOLD:
            return "oversold RSI" if bullish else "persistently weak RSI"
        if rsi_signal == OscillatorSignal.OVERBOUGHT:
            return "strong RSI momentum" if bullish else "overbought RSI"
        if momentum.stochastic.crossover == Crossover.BULLISH and bullish:
            return "a bullish stochastic crossover"
        if momentum.stochastic.crossover == Crossover.BEARISH and not bullish:
            return "a bearish stochastic crossover"
        return "supportive stochastic readings" if bullish else "weak stochastic readings"

    if family == IndicatorFamily.MACD:
        if macd.crossover == Crossover.BULLISH:
            return "a positive MACD crossover"
        if macd.crossover == Crossover.BEARISH:
            return "a negative MACD crossover"
        return "positive MACD momentum" if bullish else "negative MACD momentum"

    if bollinger.signal == OscillatorSignal.OVERSOLD:
        return "price at the lower Bollinger band" if bullish else "price riding the lower Bollinger band"
    return "price riding the upper Bollinger band" if bullish else "price at the upper Bollinger band"


def _ranked(
    contributions: dict[IndicatorFamily, Optional[float]],
    profile: ScoringProfile,
    direction: int,
) -> list[IndicatorFamily]:
    """Families contributing in `direction`, heaviest weighted contribution first."""
    weights = profile.weights()
    families = [
        f for f, c in contributions.items() if c is not None and _sign(c) == direction
    ]
    return sorted(families, key=lambda f: weights[f] * abs(contributions[f]), reverse=True)


def build_interpretation(
    signal: CompositeSignal,
    contributions: dict[IndicatorFamily, Optional[float]],
    ma: MovingAverageResult,
    momentum: MomentumResult,
    macd: MACDResult,
    bollinger: BollingerResult,
    profile: ScoringProfile,
) -> str:
    """Template sentence keyed on which families dominate the score."""
    direction = SIGNAL_DIRECTIONS[signal]

    def phrases(families: list[IndicatorFamily], d: int) -> list[str]:
        return [_family_phrase(f, d, momentum, macd, bollinger) for f in families]

    if direction != 0:
        tone = "Bullish" if direction > 0 else "Bearish"
        drivers = _ranked(contributions, profile, direction)
        trend_sign = _sign(contributions[IndicatorFamily.TREND] or 0.0)

        if IndicatorFamily.TREND in drivers:
            # Lead with the trend itself, then the strongest confirmation
            others = [f for f in drivers if f != IndicatorFamily.TREND][:1]
            headline = f"{tone} trend confirmed by {_join(phrases([IndicatorFamily.TREND] + others, direction))}"
        elif trend_sign == -direction:
            trend_word = "downtrend" if direction > 0 else "uptrend"
            headline = f"{tone} reversal setup from {_join(phrases(drivers[:2], direction))} against the {trend_word}"
        else:
            headline = f"{tone} bias from {_join(phrases(drivers[:2], direction))}"
    else:
        up = _ranked(contributions, profile, 1)
        down = _ranked(contributions, profile, -1)
        if up and down:
            headline = (
                f"Mixed signals - {phrases(up[:1], 1)[0]} offset by {phrases(down[:1], -1)[0]}"
            )
        elif up:
            headline = f"Mild bullish lean from {phrases(up[:1], 1)[0]}, not enough for a buy signal"
        elif down:
            headline = f"Mild bearish lean from {phrases(down[:1], -1)[0]}, not enough for a sell signal"
        else:
            headline = "No clear direction - indicators are neutral"

    sentences = [headline]
    missing = [FAMILY_LABELS[f] for f, c in contributions.items() if c is None]
    if missing:
        sentences.append(f"{_join(missing)} unavailable (insufficient data)")
    if bollinger.degenerate:
        sentences.append("Volatility bands collapsed on a flat price, no volatility signal")
    return ". ".join(sentences) + "."


def build_factors(
    ma: MovingAverageResult,
    momentum: MomentumResult,
    macd: MACDResult,
    bollinger: BollingerResult,
) -> list[str]:
    """One short line per indicator for list-style renderers."""
    factors = []

    if ma.available:
        factors.append(f"Trend: {ma.trend.value} ({ma.trend_strength.value})")
    else:
        factors.append("Trend: unavailable")

    if momentum.rsi.available:
        factors.append(f"RSI: {momentum.rsi.value:.2f} ({momentum.rsi.signal.value})")
    else:
        factors.append("RSI: unavailable")

    if momentum.stochastic.available:
        factors.append(
            f"Stochastic: %K {momentum.stochastic.k:.2f} / %D {momentum.stochastic.d:.2f} "
            f"({momentum.stochastic.signal.value})"
        )

    if not macd.available:
        factors.append("MACD: unavailable")
    elif macd.crossover != Crossover.NONE:
        factors.append(f"MACD: {macd.crossover.value.capitalize()} crossover")
    else:
        factors.append(f"MACD: histogram {macd.histogram:+.4f} ({macd.bias.value})")

    if bollinger.available:
        factors.append(f"Bollinger: {bollinger.position.value} ({bollinger.signal.value})")
    else:
        factors.append("Bollinger: unavailable")

    return factors


# =============================================================================
# AGGREGATION
# =============================================================================


def aggregate(
    ma: MovingAverageResult,
    momentum: MomentumResult,
    macd: MACDResult,
    bollinger: BollingerResult,
    profile: Optional[ScoringProfile] = None,
) -> CompositeResult:
    """Fuse the four indicator families into one composite result."""
    profile = profile or ScoringProfile()
    contributions = indicator_contributions(ma, momentum, macd, bollinger, profile)
    factors = build_factors(ma, momentum, macd, bollinger)
    score = composite_score(contributions, profile)

    if score is None:
        computed = [FAMILY_LABELS[f] for f, c in contributions.items() if c is not None]
        if computed:
            reason = f"No weighted indicator: the scoring profile gives zero weight to {_join(computed)}"
            interpretation = "Computed indicators carry no weight in the scoring profile - no signal"
        else:
            reason = "Insufficient data: no indicator could be computed"
            interpretation = "Not enough price history for any indicator - no signal"
        logger.debug(f"Composite unavailable: {reason}")
        return CompositeResult(
            available=False,
            reason=reason,
            signal=CompositeSignal.INSUFFICIENT_DATA,
            contributions=contributions,
            factors=factors,
            interpretation=interpretation,
        )

    signal = classify_score(score, profile)
    return CompositeResult(
        score=score,
        signal=signal,
        confidence=agreement_confidence(contributions, signal),
        contributions=contributions,
        factors=factors,
        interpretation=build_interpretation(
            signal, contributions, ma, momentum, macd, bollinger, profile
        ),
    )


def build_summary(composite: CompositeResult, bars: int) -> str:
    if not composite.available:
        if any(c is not None for c in composite.contributions.values()):
            return f"No signal: {composite.interpretation}."
        return f"Insufficient data: {bars} bars is too short for any indicator - no signal."
    label = composite.signal.value.replace("_", " ")
    return (
        f"{label} (score {composite.score:+.2f}, confidence {composite.confidence}%): "
        f"{composite.interpretation}"
    )
