"""
Technical Analysis Service

CONTRACT:
    Input:  AnalysisRequest (chronological OHLCV bars)
    Output: TechnicalReport

RESPONSIBILITIES:
    - Moving averages and trend direction/strength
    - RSI and stochastic momentum
    - MACD line, signal, histogram and crossover
    - Bollinger Bands and price position
    - Composite score, signal, confidence and interpretation

PURE PYTHON - no I/O, no cached state between calls.
Uses NumPy for calculations.
All math is deterministic and reproducible.
"""

from technicals.services.technical.interface import TechnicalAnalysisServiceInterface
from technicals.services.technical.series import SeriesBuffer
from technicals.services.technical.service import (
    TechnicalAnalysisService,
    get_technical_service,
)

__all__ = [
    "SeriesBuffer",
    "TechnicalAnalysisServiceInterface",
    "TechnicalAnalysisService",
    "get_technical_service",
]
