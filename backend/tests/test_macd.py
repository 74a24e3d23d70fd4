"""Tests for the MACD module."""

import numpy as np
import pytest

from technicals.schemas.technical import (
    Crossover,
    HistogramTrend,
    IndicatorParameters,
    SignalBias,
)
from technicals.services.technical.calculations import crossover_series, macd
from technicals.services.technical.macd import analyze_macd

from conftest import make_series


class TestAnalyzeMACD:
    def test_thirty_bars_unavailable(self, rising_series):
        result = analyze_macd(rising_series)

        assert not result.available
        assert result.reason == "Insufficient data: MACD needs 35 bars, got 30"
        assert result.histogram is None
        assert result.crossover is None

    def test_minimum_history(self):
        result = analyze_macd(make_series(np.linspace(100.0, 120.0, 35)))
        assert result.available
        assert result.histogram is not None

    def test_accelerating_rally_is_bullish(self, growth_series):
        result = analyze_macd(growth_series)

        assert result.value > 0
        assert result.histogram > 0
        assert result.histogram == pytest.approx(result.value - result.signal)
        assert result.bias == SignalBias.BULLISH

    def test_flat_series_has_no_signal(self, constant_series):
        result = analyze_macd(constant_series)

        assert result.value == 0.0
        assert result.histogram == 0.0
        assert result.crossover == Crossover.NONE
        assert result.bias == SignalBias.NEUTRAL
        assert result.histogram_trend == HistogramTrend.FLAT
        assert result.interpretation == "Neutral momentum - no clear direction"

    def test_crossover_matches_full_series(self, wave_series):
        """Each prefix reports the crossover of its own last bar."""
        closes = wave_series.closes
        _, _, hist = macd(closes)
        expected = crossover_series(hist)

        seen = set()
        for n in range(35, len(closes) + 1):
            result = analyze_macd(make_series(closes[:n]))
            assert result.crossover == expected[n - 1]
            seen.add(result.crossover)

        assert Crossover.BULLISH in seen
        assert Crossover.BEARISH in seen

    def test_crossover_interpretation(self, wave_series):
        closes = wave_series.closes
        _, _, hist = macd(closes)
        labels = crossover_series(hist)
        n = labels.index(Crossover.BULLISH) + 1

        result = analyze_macd(make_series(closes[:n]))
        assert result.interpretation == "Bullish crossover - momentum turning positive"

    def test_custom_windows(self, rising_series):
        params = IndicatorParameters(macd_fast=5, macd_slow=10, macd_signal=4)
        result = analyze_macd(rising_series, params)
        assert result.available
        assert result.value > 0
