"""
Technical Analysis Service Implementation

Runs the indicator modules over one price series and fuses them into a
TechnicalReport. The pipeline itself is pure and synchronous; the async
entry points only move it off the event loop.
"""

import asyncio
import logging
from collections.abc import Sequence
from typing import Optional, Union

from technicals.core.config import settings
from technicals.schemas.series import AnalysisRequest, PriceBar
from technicals.schemas.technical import (
    BatchAnalysisResult,
    IndicatorParameters,
    ScoringProfile,
    TechnicalReport,
)
from technicals.services.base import InvalidSeriesError
from technicals.services.technical.composite import aggregate, build_summary
from technicals.services.technical.interface import TechnicalAnalysisServiceInterface
from technicals.services.technical.macd import analyze_macd
from technicals.services.technical.momentum import analyze_momentum
from technicals.services.technical.moving_averages import (
    analyze_moving_averages,
    trend_section,
)
from technicals.services.technical.series import SeriesBuffer
from technicals.services.technical.volatility import analyze_bollinger

logger = logging.getLogger(__name__)


class TechnicalAnalysisService(TechnicalAnalysisServiceInterface):
    """
    Technical Analysis Service.

    Holds only its (immutable) parameters, so one instance can serve any
    number of concurrent analyses.
    """

    def __init__(
        self,
        params: Optional[IndicatorParameters] = None,
        profile: Optional[ScoringProfile] = None,
        max_concurrency: int = 8,
    ):
        self.params = params or IndicatorParameters()
        self.profile = profile or ScoringProfile()
        self.max_concurrency = max(1, max_concurrency)

    def analyze(
        self,
        series: Union[SeriesBuffer, Sequence[PriceBar]],
        symbol: Optional[str] = None,
    ) -> TechnicalReport:
        """Calculate every indicator and the composite signal for one series."""
        if not isinstance(series, SeriesBuffer):
            series = SeriesBuffer.from_bars(series)

        moving_averages = analyze_moving_averages(series, self.params)
        momentum = analyze_momentum(series, self.params)
        macd = analyze_macd(series, self.params)
        bollinger = analyze_bollinger(series, self.params)

        composite = aggregate(moving_averages, momentum, macd, bollinger, self.profile)

        return TechnicalReport(
            symbol=symbol,
            bars=len(series),
            trend=trend_section(moving_averages),
            momentum=momentum,
            macd=macd,
            bollinger=bollinger,
            moving_averages=moving_averages,
            composite=composite,
            summary=build_summary(composite, len(series)),
        )

    async def execute(self, input_data: AnalysisRequest) -> TechnicalReport:
        """Analyze one request in a worker thread."""
        report = await asyncio.to_thread(self.analyze, input_data.bars, input_data.symbol)
        logger.info(
            f"Technical analysis for {input_data.symbol or 'series'}: "
            f"{report.composite.signal.value} over {report.bars} bars"
        )
        return report

    async def execute_batch(
        self, requests: Sequence[AnalysisRequest]
    ) -> BatchAnalysisResult:
        """
        Analyze many series concurrently.

        A series that fails validation is reported under `errors` and does
        not affect the others.
        """
        semaphore = asyncio.Semaphore(self.max_concurrency)

        async def run(request: AnalysisRequest) -> TechnicalReport:
            async with semaphore:
                return await asyncio.to_thread(self.analyze, request.bars, request.symbol)

        keys = []
        used = set()
        for i, request in enumerate(requests):
            base = request.symbol or f"series_{i}"
            key, suffix = base, i
            # A suffixed key can itself collide with a literal symbol
            while key in used:
                key = f"{base}_{suffix}"
                suffix += 1
            used.add(key)
            keys.append(key)

        outcomes = await asyncio.gather(
            *(run(request) for request in requests), return_exceptions=True
        )

        reports = {}
        errors = {}
        for key, outcome in zip(keys, outcomes):
            if isinstance(outcome, InvalidSeriesError):
                logger.warning(f"Skipping {key}: {outcome.message}")
                errors[key] = outcome.message
            elif isinstance(outcome, BaseException):
                raise outcome
            else:
                reports[key] = outcome

        logger.info(f"Batch analysis: {len(reports)} reports, {len(errors)} errors")
        return BatchAnalysisResult(reports=reports, errors=errors)

    async def health_check(self) -> bool:
        """Technical analysis is always healthy (pure computation)."""
        return True


# Singleton instance
_service_instance: Optional[TechnicalAnalysisService] = None


def get_technical_service() -> TechnicalAnalysisService:
    """Get or create technical analysis service instance."""
    global _service_instance
    if _service_instance is None:
        _service_instance = TechnicalAnalysisService(
            params=settings.indicator_parameters(),
            profile=settings.scoring_profile(),
            max_concurrency=settings.batch_max_concurrency,
        )
    return _service_instance
