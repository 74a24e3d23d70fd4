"""
End-to-end tests for TechnicalAnalysisService.

Covers the canonical scenarios (flat, rally, sell-off, too short), report
shape and serialization, and the async single/batch entry points.
"""

import copy

import numpy as np
import pytest

from technicals.schemas.series import AnalysisRequest, PriceBar
from technicals.schemas.technical import (
    BandPosition,
    CompositeSignal,
    Crossover,
    OscillatorSignal,
    TrendDirection,
    TrendStrength,
)
from technicals.services.base import InvalidSeriesError
from technicals.services.technical import TechnicalAnalysisService, get_technical_service


def make_bars(closes, spread: float = 0.5) -> list[dict]:
    return [
        {"open": c, "high": c + spread, "low": c - spread, "close": c, "volume": 1_000_000}
        for c in closes
    ]


@pytest.fixture
def service() -> TechnicalAnalysisService:
    return TechnicalAnalysisService()


class TestScenarios:
    def test_flat_series(self, service, constant_series):
        report = service.analyze(constant_series)

        assert report.bars == 60
        assert report.trend.trend == TrendDirection.SIDEWAYS
        assert report.trend.strength == TrendStrength.WEAK
        assert report.moving_averages.sma20 == 100.0
        assert report.moving_averages.sma50 == 100.0
        assert report.momentum.rsi.value == 50.0
        assert report.momentum.stochastic.k == 50.0
        assert report.macd.histogram == 0.0
        assert report.macd.crossover == Crossover.NONE
        assert report.bollinger.degenerate
        assert report.bollinger.position == BandPosition.NEUTRAL
        assert report.composite.signal == CompositeSignal.HOLD
        assert report.composite.confidence == 100
        assert "collapsed" in report.composite.interpretation

    def test_thirty_bar_rally(self, service, rising_series):
        report = service.analyze(rising_series)

        assert report.trend.trend == TrendDirection.UPTREND
        assert report.trend.strength == TrendStrength.STRONG
        assert report.momentum.rsi.value == 100.0
        assert report.momentum.rsi.signal == OscillatorSignal.OVERBOUGHT
        assert report.momentum.stochastic.signal == OscillatorSignal.OVERBOUGHT
        assert not report.macd.available
        assert "35" in report.macd.reason
        assert report.bollinger.position == BandPosition.UPPER_HALF

        assert report.composite.signal == CompositeSignal.BUY
        assert report.composite.score == pytest.approx(0.425 / 0.75)
        assert report.composite.confidence == 67
        assert report.summary == (
            "BUY (score +0.57, confidence 67%): Bullish trend confirmed by rising moving "
            "averages and strong RSI momentum. MACD unavailable (insufficient data)."
        )

    def test_thirty_bar_selloff(self, service, falling_series):
        report = service.analyze(falling_series)

        assert report.trend.trend == TrendDirection.DOWNTREND
        assert report.momentum.rsi.value == 0.0
        assert report.momentum.rsi.signal == OscillatorSignal.OVERSOLD
        assert report.composite.signal in (CompositeSignal.SELL, CompositeSignal.STRONG_SELL)
        assert report.composite.score < 0

    def test_too_short_for_anything(self, service, short_series):
        report = service.analyze(short_series)

        assert not report.trend.available
        assert not report.momentum.rsi.available
        assert not report.momentum.stochastic.available
        assert not report.macd.available
        assert not report.bollinger.available
        assert report.composite.signal == CompositeSignal.INSUFFICIENT_DATA
        assert report.composite.score is None
        assert report.summary.startswith("Insufficient data: 10 bars")

    def test_single_bar(self, service):
        report = service.analyze(make_bars([100.0]))
        assert report.bars == 1
        assert report.composite.signal == CompositeSignal.INSUFFICIENT_DATA

    def test_long_random_walk(self, service, random_walk):
        report = service.analyze(random_walk)

        assert report.moving_averages.sma200 is not None
        assert all(
            section.available
            for section in (report.trend, report.momentum, report.macd, report.bollinger, report.composite)
        )
        assert -1.0 <= report.composite.score <= 1.0
        assert 0 <= report.composite.confidence <= 100


class TestReport:
    def test_idempotent(self, service, random_walk):
        first = service.analyze(random_walk)
        second = service.analyze(random_walk)
        assert first.model_dump() == second.model_dump()

    def test_camel_case_serialization(self, service, random_walk):
        data = service.analyze(random_walk, symbol="AAPL").model_dump(by_alias=True, mode="json")

        assert data["symbol"] == "AAPL"
        assert "movingAverages" in data
        assert "trendStrength" in data["movingAverages"]
        assert "upperBand" in data["bollinger"]
        assert "percentB" in data["bollinger"]
        assert "histogramTrend" in data["macd"]
        assert set(data["composite"]["contributions"]) == {"TREND", "MOMENTUM", "MACD", "VOLATILITY"}

    def test_dict_and_model_bars_agree(self, service):
        closes = 100.0 + np.cumsum(np.tile([1.0, -0.5, 0.75], 20))
        bars = make_bars(closes)
        models = [PriceBar(**bar) for bar in bars]
        assert service.analyze(bars).model_dump() == service.analyze(models).model_dump()

    def test_input_not_mutated(self, service):
        bars = make_bars(np.linspace(100.0, 130.0, 40))
        snapshot = copy.deepcopy(bars)
        service.analyze(bars)
        assert bars == snapshot

    def test_invalid_series_raises(self, service):
        with pytest.raises(InvalidSeriesError):
            service.analyze([])


class TestAsync:
    @pytest.mark.asyncio
    async def test_execute(self, service):
        request = AnalysisRequest(symbol="AAPL", bars=make_bars(np.arange(100.0, 130.0)))
        report = await service.execute(request)

        assert report.symbol == "AAPL"
        assert report.composite.signal == CompositeSignal.BUY

    @pytest.mark.asyncio
    async def test_execute_batch(self, service):
        requests = [
            AnalysisRequest(symbol="UP", bars=make_bars(np.arange(100.0, 130.0))),
            AnalysisRequest(symbol="DOWN", bars=make_bars(np.arange(129.0, 99.0, -1.0))),
            AnalysisRequest.model_construct(symbol="BAD", bars=[]),
        ]
        result = await service.execute_batch(requests)

        assert set(result.reports) == {"UP", "DOWN"}
        assert result.reports["UP"].composite.signal == CompositeSignal.BUY
        assert result.reports["DOWN"].trend.trend == TrendDirection.DOWNTREND
        assert "empty" in result.errors["BAD"]

    @pytest.mark.asyncio
    async def test_batch_keys(self, service):
        bars = make_bars(np.arange(100.0, 130.0))
        requests = [
            AnalysisRequest(symbol="AAPL", bars=bars),
            AnalysisRequest(symbol="AAPL", bars=bars),
            AnalysisRequest(bars=bars),
        ]
        result = await service.execute_batch(requests)
        assert set(result.reports) == {"AAPL", "AAPL_1", "series_2"}

    @pytest.mark.asyncio
    async def test_batch_suffix_does_not_clobber_symbol(self, service):
        bars = make_bars(np.arange(100.0, 130.0))
        requests = [
            AnalysisRequest(symbol="A_2", bars=bars),
            AnalysisRequest(symbol="A", bars=bars),
            AnalysisRequest(symbol="A", bars=bars),
        ]
        result = await service.execute_batch(requests)

        assert len(result.reports) == 3
        assert result.reports["A_2"].symbol == "A_2"
        assert result.reports["A"].symbol == "A"
        assert result.reports["A_3"].symbol == "A"

    @pytest.mark.asyncio
    async def test_batch_matches_single(self, service):
        bars = make_bars(np.arange(100.0, 130.0))
        request = AnalysisRequest(symbol="AAPL", bars=bars)
        single = await service.execute(request)
        batch = await service.execute_batch([request])
        assert batch.reports["AAPL"] == single

    @pytest.mark.asyncio
    async def test_health_check(self, service):
        assert await service.health_check() is True


def test_singleton():
    assert get_technical_service() is get_technical_service()
