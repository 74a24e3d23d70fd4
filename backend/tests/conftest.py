"""Shared fixtures for the technical analysis test suite."""

import numpy as np
import pytest

from technicals.schemas.technical import IndicatorParameters, ScoringProfile
from technicals.services.technical.series import SeriesBuffer


def make_series(closes, spread: float = 0.5) -> SeriesBuffer:
    """Series whose highs/lows sit `spread` either side of the closes."""
    closes = np.asarray(closes, dtype=float)
    return SeriesBuffer.from_arrays(
        closes=closes,
        opens=closes,
        highs=closes + spread,
        lows=closes - spread,
        volumes=np.full(len(closes), 1_000_000.0),
    )


@pytest.fixture
def params() -> IndicatorParameters:
    return IndicatorParameters()


@pytest.fixture
def profile() -> ScoringProfile:
    return ScoringProfile()


@pytest.fixture
def constant_series() -> SeriesBuffer:
    """60 bars flat at 100."""
    return make_series(np.full(60, 100.0))


@pytest.fixture
def rising_series() -> SeriesBuffer:
    """30 bars rising one point a day, 100 -> 129."""
    return make_series(np.arange(100.0, 130.0))


@pytest.fixture
def falling_series() -> SeriesBuffer:
    """30 bars falling one point a day, 129 -> 100."""
    return make_series(np.arange(129.0, 99.0, -1.0))


@pytest.fixture
def short_series() -> SeriesBuffer:
    """10 bars: shorter than every indicator window."""
    return make_series(np.linspace(100.0, 105.0, 10))


@pytest.fixture
def growth_series() -> SeriesBuffer:
    """60 bars compounding 1% a day."""
    return make_series(100.0 * 1.01 ** np.arange(60))


@pytest.fixture
def wave_series() -> SeriesBuffer:
    """120 bars of a 40-bar sine cycle around 100."""
    i = np.arange(120)
    return make_series(100.0 + 10.0 * np.sin(2 * np.pi * i / 40))


@pytest.fixture
def random_walk() -> SeriesBuffer:
    """250 bars of a seeded random walk with noisy highs/lows."""
    rng = np.random.default_rng(42)
    closes = np.maximum(50.0, 100.0 + np.cumsum(rng.uniform(-2.0, 2.0, 250)))
    opens = closes + rng.uniform(-1.0, 1.0, 250)
    highs = np.maximum(closes, opens) + rng.uniform(0.0, 2.0, 250)
    lows = np.minimum(closes, opens) - rng.uniform(0.0, 2.0, 250)
    volumes = rng.integers(1_000_000, 6_000_000, 250).astype(float)
    return SeriesBuffer.from_arrays(
        closes=closes, opens=opens, highs=highs, lows=lows, volumes=volumes
    )
