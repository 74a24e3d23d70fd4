"""Tests for moving averages, trend direction and trend strength."""

import numpy as np
import pytest

from technicals.schemas.technical import (
    IndicatorParameters,
    MovingAverageCross,
    TrendDirection,
    TrendStrength,
)
from technicals.services.technical.moving_averages import (
    analyze_moving_averages,
    classify_strength,
    classify_trend,
    detect_cross,
    gap_percent,
    trend_section,
)

from conftest import make_series


class TestAnalyzeMovingAverages:
    def test_rising_series_is_uptrend(self, rising_series):
        result = analyze_moving_averages(rising_series)

        assert result.available
        assert result.trend == TrendDirection.UPTREND
        assert result.sma20 == pytest.approx(np.mean(np.arange(110.0, 130.0)))
        assert result.sma50 is None
        assert result.sma200 is None
        assert result.ema9 > result.ema21
        assert result.trend_strength in (TrendStrength.MODERATE, TrendStrength.STRONG)

    def test_falling_series_is_downtrend(self, falling_series):
        result = analyze_moving_averages(falling_series)
        assert result.trend == TrendDirection.DOWNTREND
        assert result.ema9 < result.ema21

    def test_constant_series_is_sideways(self, constant_series):
        result = analyze_moving_averages(constant_series)

        assert result.sma20 == 100.0
        assert result.sma50 == 100.0
        assert result.ema9 == 100.0
        assert result.ema21 == 100.0
        assert result.trend == TrendDirection.SIDEWAYS
        assert result.trend_strength == TrendStrength.WEAK
        assert result.gap_percent == 0.0

    def test_short_series_unavailable(self, short_series):
        result = analyze_moving_averages(short_series)

        assert not result.available
        assert "needs 21 bars, got 10" in result.reason
        assert result.trend is None
        assert result.trend_strength is None
        # EMA9 fits inside 10 bars and is still reported
        assert result.ema9 is not None
        assert result.sma20 is None

    def test_strength_uses_sma_pair_when_available(self, random_walk):
        result = analyze_moving_averages(random_walk)
        assert result.gap_percent == pytest.approx(gap_percent(result.sma20, result.sma50))

    def test_pure_function(self, random_walk):
        assert analyze_moving_averages(random_walk) == analyze_moving_averages(random_walk)


class TestClassification:
    def test_all_pairs_must_agree(self):
        assert classify_trend([(2.0, 1.0), (3.0, 2.0)]) == TrendDirection.UPTREND
        assert classify_trend([(1.0, 2.0), (2.0, 3.0)]) == TrendDirection.DOWNTREND
        assert classify_trend([(2.0, 1.0), (2.0, 3.0)]) == TrendDirection.SIDEWAYS
        assert classify_trend([(2.0, 2.0)]) == TrendDirection.SIDEWAYS

    @pytest.mark.parametrize(
        "gap,expected",
        [
            (0.0, TrendStrength.WEAK),
            (1.99, TrendStrength.WEAK),
            (2.0, TrendStrength.MODERATE),
            (5.0, TrendStrength.MODERATE),
            (5.01, TrendStrength.STRONG),
        ],
    )
    def test_strength_buckets(self, gap, expected):
        assert classify_strength(gap, IndicatorParameters()) == expected

    def test_custom_strength_thresholds(self):
        params = IndicatorParameters(trend_weak_gap=1.0, trend_strong_gap=3.0)
        assert classify_strength(3.5, params) == TrendStrength.STRONG

    def test_gap_percent(self):
        assert gap_percent(105.0, 100.0) == pytest.approx(5.0)
        assert gap_percent(95.0, 100.0) == pytest.approx(5.0)
        assert gap_percent(1.0, 0.0) == 0.0


class TestCross:
    def test_golden_cross(self):
        short = np.array([np.nan, 9.0, 11.0])
        long = np.array([np.nan, 10.0, 10.0])
        assert detect_cross(short, long) == MovingAverageCross.GOLDEN_CROSS

    def test_death_cross(self):
        short = np.array([11.0, 9.0])
        long = np.array([10.0, 10.0])
        assert detect_cross(short, long) == MovingAverageCross.DEATH_CROSS

    def test_no_cross_without_history(self):
        short = np.array([np.nan, 11.0])
        long = np.array([np.nan, 10.0])
        assert detect_cross(short, long) == MovingAverageCross.NONE

    def test_golden_cross_in_series(self):
        # 200 falling bars then a sharp rally pulls SMA50 above SMA200
        closes = np.concatenate([np.linspace(200.0, 100.0, 200), np.linspace(101.0, 400.0, 60)])
        labels = []
        for n in range(201, len(closes) + 1):
            labels.append(analyze_moving_averages(make_series(closes[:n])).cross)
        assert labels.count(MovingAverageCross.GOLDEN_CROSS) == 1


class TestTrendSection:
    def test_projection(self, rising_series):
        ma = analyze_moving_averages(rising_series)
        section = trend_section(ma)
        assert section.trend == ma.trend
        assert section.strength == ma.trend_strength
        assert section.available

    def test_projection_unavailable(self, short_series):
        section = trend_section(analyze_moving_averages(short_series))
        assert not section.available
        assert section.reason
