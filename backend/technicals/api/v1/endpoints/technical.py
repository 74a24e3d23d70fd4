"""
Technical Analysis API Endpoints

Endpoints for technical reports over caller-supplied price series.
"""

import logging

from fastapi import APIRouter, HTTPException

from technicals.schemas.series import AnalysisRequest, BatchAnalysisRequest
from technicals.schemas.technical import BatchAnalysisResult, TechnicalReport
from technicals.services.base import InvalidSeriesError
from technicals.services.technical import get_technical_service

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/analyze", response_model=TechnicalReport)
async def analyze_series(request: AnalysisRequest):
    """
    Get the complete technical report for one price series.

    Returns:
        - Trend and moving averages (SMA20/50/200, EMA9/21)
        - Momentum (RSI, Stochastic)
        - MACD line, signal, histogram and crossover
        - Bollinger Bands and price position
        - Composite score, signal, confidence and interpretation

    Indicators without enough history are returned as unavailable with a
    reason; only a structurally invalid series is an error.
    """
    service = get_technical_service()
    try:
        return await service.execute(request)
    except InvalidSeriesError as e:
        logger.error(f"Invalid series for {request.symbol or 'request'}: {e.message}")
        raise HTTPException(status_code=400, detail=e.message)


@router.post("/batch", response_model=BatchAnalysisResult)
async def analyze_batch(request: BatchAnalysisRequest):
    """
    Analyze several independent series in one call.

    Series that fail validation are listed under `errors`; the rest are
    returned under `reports`, keyed by symbol.
    """
    service = get_technical_service()
    return await service.execute_batch(request.series)


@router.get("/parameters")
async def get_parameters():
    """Active indicator parameters and composite scoring profile."""
    service = get_technical_service()
    return {
        "indicators": service.params.model_dump(),
        "scoring": service.profile.model_dump(),
    }
