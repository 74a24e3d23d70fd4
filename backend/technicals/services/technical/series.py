"""
SeriesBuffer

Validated OHLCV arrays for one instrument, oldest bar first.
"""

from collections.abc import Mapping, Sequence
from typing import Optional, Union

import numpy as np
from pydantic import ValidationError as PydanticValidationError

from technicals.schemas.series import PriceBar
from technicals.services.base import InvalidSeriesError

BarLike = Union[PriceBar, Mapping]


def _as_array(name: str, values, length: Optional[int] = None) -> np.ndarray:
    """Copy `values` into a read-only float64 array, rejecting junk."""
    try:
        arr = np.array(values, dtype=np.float64)
    except (TypeError, ValueError) as e:
        raise InvalidSeriesError(f"{name} contains non-numeric values", {"field": name}) from e

    if arr.ndim != 1:
        raise InvalidSeriesError(f"{name} must be one-dimensional", {"field": name, "shape": arr.shape})
    if len(arr) == 0:
        raise InvalidSeriesError(f"{name} is empty", {"field": name})
    if length is not None and len(arr) != length:
        raise InvalidSeriesError(
            f"{name} has {len(arr)} values, expected {length}",
            {"field": name, "length": len(arr), "expected": length},
        )
    if not np.all(np.isfinite(arr)):
        bad = int(np.flatnonzero(~np.isfinite(arr))[0])
        raise InvalidSeriesError(f"{name} has a non-finite value at bar {bad}", {"field": name, "index": bad})

    arr.setflags(write=False)
    return arr


class SeriesBuffer:
    """
    Immutable daily price series.

    The buffer owns private read-only copies of its arrays, so indicator code
    can slice freely without ever touching the caller's data.
    """

    __slots__ = ("opens", "highs", "lows", "closes", "volumes")

    def __init__(
        self,
        opens: np.ndarray,
        highs: np.ndarray,
        lows: np.ndarray,
        closes: np.ndarray,
        volumes: np.ndarray,
    ):
        self.closes = _as_array("closes", closes)
        n = len(self.closes)
        self.opens = _as_array("opens", opens, n)
        self.highs = _as_array("highs", highs, n)
        self.lows = _as_array("lows", lows, n)
        self.volumes = _as_array("volumes", volumes, n)

    @classmethod
    def from_bars(cls, bars: Sequence[BarLike]) -> "SeriesBuffer":
        """Build from PriceBar models or plain dicts with open/high/low/close/volume."""
        if bars is None or len(bars) == 0:
            raise InvalidSeriesError("Price series is empty")

        parsed: list[PriceBar] = []
        for i, bar in enumerate(bars):
            if isinstance(bar, PriceBar):
                parsed.append(bar)
                continue
            try:
                parsed.append(PriceBar.model_validate(bar))
            except PydanticValidationError as e:
                raise InvalidSeriesError(
                    f"Bar {i} is invalid: {e.errors()[0]['msg']}",
                    {"index": i, "errors": e.errors()},
                ) from e

        return cls(
            opens=[b.open for b in parsed],
            highs=[b.high for b in parsed],
            lows=[b.low for b in parsed],
            closes=[b.close for b in parsed],
            volumes=[b.volume for b in parsed],
        )

    @classmethod
    def from_arrays(
        cls,
        closes: Sequence[float],
        opens: Optional[Sequence[float]] = None,
        highs: Optional[Sequence[float]] = None,
        lows: Optional[Sequence[float]] = None,
        volumes: Optional[Sequence[float]] = None,
    ) -> "SeriesBuffer":
        """
        Build from parallel arrays.

        Only closes are mandatory: missing opens/highs/lows fall back to the
        closes and missing volumes to zero.
        """
        closes_arr = _as_array("closes", closes)
        return cls(
            opens=closes_arr if opens is None else opens,
            highs=closes_arr if highs is None else highs,
            lows=closes_arr if lows is None else lows,
            closes=closes_arr,
            volumes=np.zeros(len(closes_arr)) if volumes is None else volumes,
        )

    def __len__(self) -> int:
        return len(self.closes)

    def __repr__(self) -> str:
        return f"SeriesBuffer(bars={len(self)}, last_close={self.closes[-1]:.4f})"

    @property
    def last_close(self) -> float:
        return float(self.closes[-1])
