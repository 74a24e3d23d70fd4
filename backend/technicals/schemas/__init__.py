"""
StockPro Technicals Schema Contracts

This module defines the JSON contracts between the analysis core and its
consumers. These are the authoritative interfaces.
"""

from technicals.schemas.series import (
    PriceBar,
    AnalysisRequest,
    BatchAnalysisRequest,
)
from technicals.schemas.technical import (
    TrendDirection,
    TrendStrength,
    OscillatorSignal,
    Crossover,
    BandPosition,
    CompositeSignal,
    IndicatorFamily,
    IndicatorParameters,
    ScoringProfile,
    MovingAverageResult,
    TrendResult,
    RSIResult,
    StochasticResult,
    MomentumResult,
    MACDResult,
    BollingerResult,
    CompositeResult,
    TechnicalReport,
    BatchAnalysisResult,
)

__all__ = [
    # Series
    "PriceBar",
    "AnalysisRequest",
    "BatchAnalysisRequest",
    # Vocabularies
    "TrendDirection",
    "TrendStrength",
    "OscillatorSignal",
    "Crossover",
    "BandPosition",
    "CompositeSignal",
    "IndicatorFamily",
    # Parameters
    "IndicatorParameters",
    "ScoringProfile",
    # Results
    "MovingAverageResult",
    "TrendResult",
    "RSIResult",
    "StochasticResult",
    "MomentumResult",
    "MACDResult",
    "BollingerResult",
    "CompositeResult",
    "TechnicalReport",
    "BatchAnalysisResult",
]
