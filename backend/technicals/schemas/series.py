"""
CONTRACT 1: Price Series Input

Input: AnalysisRequest / BatchAnalysisRequest
Consumed by: Technical Analysis Service

The market-data collaborator supplies daily bars, oldest first. The analysis
works on bar count, not calendar distance, so missing trading days are fine.
"""

from datetime import date
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class PriceBar(BaseModel):
    """
    Single daily bar.

    high >= low and low <= close <= high are NOT enforced: vendor data
    occasionally violates them and the indicators stay well-defined anyway.
    """

    timestamp: Optional[date] = None
    open: float = Field(..., allow_inf_nan=False)
    high: float = Field(..., allow_inf_nan=False)
    low: float = Field(..., allow_inf_nan=False)
    close: float = Field(..., allow_inf_nan=False)
    volume: float = Field(default=0.0, ge=0, allow_inf_nan=False)


class AnalysisRequest(BaseModel):
    """
    Request for a single-instrument technical report.
    Sent by: Reporting UI / Order wizard / AI decision engine
    Received by: Technical Analysis Service
    """

    symbol: Optional[str] = Field(
        default=None,
        max_length=32,
        description="Instrument label echoed back in the report (e.g. 'AAPL')",
    )
    bars: list[PriceBar] = Field(
        ...,
        min_length=1,
        description="Chronological daily bars, oldest first",
    )


class BatchAnalysisRequest(BaseModel):
    """Several independent series analyzed in one call."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "series": [
                    {
                        "symbol": "AAPL",
                        "bars": [
                            {
                                "timestamp": "2024-02-01",
                                "open": 184.0,
                                "high": 186.9,
                                "low": 183.8,
                                "close": 186.9,
                                "volume": 64885400,
                            }
                        ],
                    }
                ]
            }
        }
    )

    series: list[AnalysisRequest] = Field(..., min_length=1, max_length=50)
