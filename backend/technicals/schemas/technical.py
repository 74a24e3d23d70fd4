"""
CONTRACT 2: Technical Report

Input: PriceSeries (see series.py)
Output: TechnicalReport

Consumed by the reporting UI, the order-assistant wizard and the AI decision
engine. Keys are serialized in camelCase. Every section is always present;
when an indicator lacks history its values are null and `reason` says why.
"""

from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


# =============================================================================
# ENUMS
# =============================================================================


class TrendDirection(str, Enum):
    UPTREND = "UPTREND"
    DOWNTREND = "DOWNTREND"
    SIDEWAYS = "SIDEWAYS"


class TrendStrength(str, Enum):
    WEAK = "WEAK"
    MODERATE = "MODERATE"
    STRONG = "STRONG"


class MovingAverageCross(str, Enum):
    GOLDEN_CROSS = "GOLDEN_CROSS"
    DEATH_CROSS = "DEATH_CROSS"
    NONE = "NONE"


class OscillatorSignal(str, Enum):
    OVERBOUGHT = "OVERBOUGHT"
    OVERSOLD = "OVERSOLD"
    NEUTRAL = "NEUTRAL"


class MomentumDirection(str, Enum):
    INCREASING = "INCREASING"
    DECREASING = "DECREASING"
    STABLE = "STABLE"


class Crossover(str, Enum):
    BULLISH = "BULLISH"
    BEARISH = "BEARISH"
    NONE = "NONE"


class SignalBias(str, Enum):
    BULLISH = "BULLISH"
    BEARISH = "BEARISH"
    NEUTRAL = "NEUTRAL"


class HistogramTrend(str, Enum):
    INCREASING = "INCREASING"
    DECREASING = "DECREASING"
    FLAT = "FLAT"


class BandPosition(str, Enum):
    ABOVE_UPPER = "ABOVE_UPPER"
    UPPER_HALF = "UPPER_HALF"
    LOWER_HALF = "LOWER_HALF"
    BELOW_LOWER = "BELOW_LOWER"
    NEUTRAL = "NEUTRAL"  # bands collapsed (zero deviation)


class CompositeSignal(str, Enum):
    STRONG_BUY = "STRONG_BUY"
    BUY = "BUY"
    HOLD = "HOLD"
    SELL = "SELL"
    STRONG_SELL = "STRONG_SELL"
    INSUFFICIENT_DATA = "INSUFFICIENT_DATA"


class IndicatorFamily(str, Enum):
    TREND = "TREND"
    MOMENTUM = "MOMENTUM"
    MACD = "MACD"
    VOLATILITY = "VOLATILITY"


# =============================================================================
# PARAMETERS
# =============================================================================


class IndicatorParameters(BaseModel):
    """Windows and zone thresholds for the indicator modules."""

    model_config = ConfigDict(frozen=True)

    rsi_period: int = Field(default=14, ge=2)
    rsi_overbought: float = Field(default=70.0, gt=0, lt=100)
    rsi_oversold: float = Field(default=30.0, gt=0, lt=100)
    stochastic_k_period: int = Field(default=14, ge=1)
    stochastic_d_period: int = Field(default=3, ge=1)
    stochastic_overbought: float = Field(default=80.0, gt=0, lt=100)
    stochastic_oversold: float = Field(default=20.0, gt=0, lt=100)
    macd_fast: int = Field(default=12, ge=1)
    macd_slow: int = Field(default=26, ge=2)
    macd_signal: int = Field(default=9, ge=1)
    bollinger_period: int = Field(default=20, ge=2)
    bollinger_std_dev: float = Field(default=2.0, gt=0)
    trend_weak_gap: float = Field(default=2.0, ge=0, description="% gap below which a trend is WEAK")
    trend_strong_gap: float = Field(default=5.0, ge=0, description="% gap above which a trend is STRONG")

    @model_validator(mode="after")
    def _check_ordering(self) -> "IndicatorParameters":
        if self.rsi_oversold >= self.rsi_overbought:
            raise ValueError("rsi_oversold must be below rsi_overbought")
        if self.stochastic_oversold >= self.stochastic_overbought:
            raise ValueError("stochastic_oversold must be below stochastic_overbought")
        if self.macd_fast >= self.macd_slow:
            raise ValueError("macd_fast must be shorter than macd_slow")
        if self.trend_weak_gap > self.trend_strong_gap:
            raise ValueError("trend_weak_gap must not exceed trend_strong_gap")
        return self


class ScoringProfile(BaseModel):
    """
    Weights and thresholds of the composite scorer.

    Weights need not sum to one: the score is normalized by the total weight
    of the families that were actually available.
    """

    model_config = ConfigDict(frozen=True)

    weight_trend: float = Field(default=0.30, ge=0)
    weight_momentum: float = Field(default=0.25, ge=0)
    weight_macd: float = Field(default=0.25, ge=0)
    weight_volatility: float = Field(default=0.20, ge=0)
    buy_threshold: float = Field(default=0.2, gt=0, le=1)
    strong_threshold: float = Field(default=0.6, gt=0, le=1)
    stochastic_share: float = Field(
        default=0.3, ge=0, le=1, description="Share of the momentum family given to the stochastic"
    )
    trend_confirmation: float = Field(
        default=0.5, ge=0, le=1, description="Contribution of an oscillator extreme that agrees with the trend"
    )

    @model_validator(mode="after")
    def _check_profile(self) -> "ScoringProfile":
        if sum(self.weights().values()) <= 0:
            raise ValueError("at least one family weight must be positive")
        if self.buy_threshold >= self.strong_threshold:
            raise ValueError("buy_threshold must be below strong_threshold")
        return self

    def weights(self) -> dict[IndicatorFamily, float]:
        return {
            IndicatorFamily.TREND: self.weight_trend,
            IndicatorFamily.MOMENTUM: self.weight_momentum,
            IndicatorFamily.MACD: self.weight_macd,
            IndicatorFamily.VOLATILITY: self.weight_volatility,
        }


# =============================================================================
# OUTPUT: Indicator Results
# =============================================================================


class ReportModel(BaseModel):
    """Immutable, camelCase-serialized report fragment."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class IndicatorSection(ReportModel):
    """Common availability fields of every indicator result."""

    available: bool = True
    reason: Optional[str] = Field(default=None, description="Why the indicator is unavailable")
    interpretation: Optional[str] = None


class MovingAverageResult(IndicatorSection):
    """SMA/EMA values and the trend derived from them."""

    sma20: Optional[float] = None
    sma50: Optional[float] = None
    sma200: Optional[float] = None
    ema9: Optional[float] = None
    ema21: Optional[float] = None
    trend: Optional[TrendDirection] = None
    trend_strength: Optional[TrendStrength] = None
    gap_percent: Optional[float] = Field(default=None, description="|short - long| / long in %")
    cross: MovingAverageCross = MovingAverageCross.NONE


class TrendResult(IndicatorSection):
    """Trend label and strength bucket."""

    trend: Optional[TrendDirection] = None
    strength: Optional[TrendStrength] = None
    gap_percent: Optional[float] = None


class RSIResult(IndicatorSection):
    value: Optional[float] = Field(default=None, ge=0, le=100)
    previous: Optional[float] = Field(default=None, ge=0, le=100)
    signal: Optional[OscillatorSignal] = None
    direction: Optional[MomentumDirection] = None


class StochasticResult(IndicatorSection):
    k: Optional[float] = Field(default=None, ge=0, le=100)
    d: Optional[float] = Field(default=None, ge=0, le=100)
    signal: Optional[OscillatorSignal] = None
    crossover: Optional[Crossover] = None


class MomentumResult(ReportModel):
    """RSI (primary) and stochastic (secondary) momentum readings."""

    rsi: RSIResult
    stochastic: StochasticResult

    @property
    def available(self) -> bool:
        return self.rsi.available


class MACDResult(IndicatorSection):
    value: Optional[float] = None
    signal: Optional[float] = Field(default=None, description="Signal line value")
    histogram: Optional[float] = None
    crossover: Optional[Crossover] = None
    bias: Optional[SignalBias] = None
    histogram_trend: Optional[HistogramTrend] = None


class BollingerResult(IndicatorSection):
    upper_band: Optional[float] = None
    middle_band: Optional[float] = None
    lower_band: Optional[float] = None
    bandwidth: Optional[float] = Field(default=None, ge=0, description="Band width as % of middle band")
    percent_b: Optional[float] = Field(default=None, description="Close position within the bands (0-1)")
    position: Optional[BandPosition] = None
    signal: Optional[OscillatorSignal] = None
    degenerate: bool = Field(default=False, description="Bands collapsed on a flat window")


class CompositeResult(IndicatorSection):
    """Fused decision. `score` is None only when no family was available."""

    score: Optional[float] = Field(default=None, ge=-1, le=1)
    signal: CompositeSignal
    confidence: Optional[int] = Field(default=None, ge=0, le=100)
    contributions: dict[IndicatorFamily, Optional[float]] = Field(default_factory=dict)
    factors: list[str] = Field(default_factory=list)


# =============================================================================
# OUTPUT: TechnicalReport (Complete Response)
# =============================================================================


class TechnicalReport(ReportModel):
    """
    Complete technical analysis for one series.
    Returned by: Technical Analysis Service
    Consumed by: Reporting UI, Order wizard, AI decision engine
    """

    symbol: Optional[str] = None
    bars: int = Field(..., ge=1)
    trend: TrendResult
    momentum: MomentumResult
    macd: MACDResult
    bollinger: BollingerResult
    moving_averages: MovingAverageResult
    composite: CompositeResult
    summary: str


class BatchAnalysisResult(ReportModel):
    """Reports keyed by symbol; series that failed validation land in `errors`."""

    reports: dict[str, TechnicalReport] = Field(default_factory=dict)
    errors: dict[str, str] = Field(default_factory=dict)
