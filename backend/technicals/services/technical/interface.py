"""
Technical Analysis Service Interface

Defines the contract for the technical analysis layer.
"""

from abc import abstractmethod
from collections.abc import Sequence
from typing import Optional, Union

from technicals.services.base import BaseService
from technicals.schemas.series import AnalysisRequest, PriceBar
from technicals.schemas.technical import BatchAnalysisResult, TechnicalReport
from technicals.services.technical.series import SeriesBuffer


class TechnicalAnalysisServiceInterface(BaseService[AnalysisRequest, TechnicalReport]):
    """
    Technical Analysis Service Contract.

    INPUT: AnalysisRequest
        - symbol: Optional label echoed in the report
        - bars: Chronological daily OHLCV bars

    OUTPUT: TechnicalReport
        - trend, momentum, macd, bollinger, movingAverages sections
        - composite signal with confidence and interpretation
    """

    @property
    def name(self) -> str:
        return "TechnicalAnalysisService"

    @abstractmethod
    def analyze(
        self,
        series: Union[SeriesBuffer, Sequence[PriceBar]],
        symbol: Optional[str] = None,
    ) -> TechnicalReport:
        """
        Run the full indicator pipeline synchronously.

        Raises:
            InvalidSeriesError: If the series is empty or not numeric
        """
        pass

    @abstractmethod
    async def execute(self, input_data: AnalysisRequest) -> TechnicalReport:
        """Analyze one series off the event loop."""
        pass

    @abstractmethod
    async def execute_batch(
        self, requests: Sequence[AnalysisRequest]
    ) -> BatchAnalysisResult:
        """Analyze independent series concurrently."""
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """Technical analysis is always healthy (pure computation)."""
        pass
