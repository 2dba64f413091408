"""
curves.state
============

Enumerations and index helpers shared by every fitter.

* :class:`UpdateState` – what changed since the previous ``update``.
* :class:`FittingQuality` – exact interpolation vs. best (least-squares) fit.
* :class:`BuildingDirection` – grid point an extrapolator is anchored at.
"""

from __future__ import annotations

from bisect import bisect_right
from enum import Enum, IntFlag
from typing import Sequence

import numpy as np

__all__ = [
    "UpdateState",
    "FittingQuality",
    "BuildingDirection",
    "non_last_nearest_index",
    "strided",
]


class UpdateState(IntFlag):
    """Bit flags describing the change of a grid point set."""

    NO_CHANGE = 0
    VALUES_CHANGED = 1
    ARGUMENTS_CHANGED = 2
    GRID_POINT_CHANGED = VALUES_CHANGED | ARGUMENTS_CHANGED


class FittingQuality(Enum):
    EXACT = "exact"
    BEST = "best"


class BuildingDirection(Enum):
    FIRST = "first"
    LAST = "last"


def non_last_nearest_index(x: float, arguments: Sequence[float], count: int | None = None) -> int:
    """Index ``j`` of the segment ``[t_j, t_{j+1})`` holding ``x``.

    Clamped to ``[0, count-2]`` so that the result is always a valid left
    segment index, even for points outside the grid or on its last point.
    """
    if count is None:
        count = len(arguments)
    j = bisect_right(arguments, x, 0, count) - 1
    return min(max(j, 0), count - 2)


def strided(source, start: int, step: int, count: int) -> np.ndarray:
    """``count`` entries of ``source`` from ``start`` with increment ``step``."""
    if count <= 0:
        return np.empty(0)
    arr = np.asarray(source, dtype=float)
    return arr[start : start + step * (count - 1) + 1 : step]
