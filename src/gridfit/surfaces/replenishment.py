"""
surfaces.replenishment
======================

Fill missing (``NaN``) cells of a :class:`~gridfit.surfaces.LabelMatrix`
before a surface is built.

Every missing cell is estimated from the nearest valid cells of its row
(x-axis) and/or column (y-axis): a two-point fit of the given interpolator
between the nearest valid neighbours on both sides, or the single valid
neighbour if only one side has one.  Estimates are computed against the
original matrix, so a filled cell never feeds another estimate.

Strategies
----------
x-axis     – along the row only
weighted   – ``(1 - weight) * along row + weight * along column``

>>> import numpy as np
>>> m = LabelMatrix.from_array([[1.0, np.nan, 3.0]], [0.0, 1.0, 2.0], [0.0])
>>> AlongXAxisReplenishment("linear").replenish(m)[0, 1]
2.0
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from types import MappingProxyType
from typing import Dict, List, Tuple, Type

import numpy as np

from ..curves import interpolators
from ..curves.base import CurveFit, Interpolator
from ..curves.state import UpdateState
from ..errors import REPLENISH, ReplenishmentError
from ..logger import get_logger
from .label_matrix import LabelMatrix

__all__ = [
    "MissingValueReplenishment",
    "AlongXAxisReplenishment",
    "WeightedNearestReplenishment",
    "get_replenishment",
    "available",
]

log = get_logger(__name__)


def _two_point_fit(interpolator: Interpolator | str) -> CurveFit:
    if isinstance(interpolator, str):
        interpolator = interpolators.create(interpolator)
    elif not isinstance(interpolator, Interpolator):
        raise TypeError(f"Expected an Interpolator or a tag, got {type(interpolator).__name__}.")
    if interpolator.min_points > 2:
        raise ValueError(f"{interpolator!r} needs {interpolator.min_points} points; replenishment fits two.")
    return interpolator.create()


def _nearest(line: np.ndarray, labels: np.ndarray, index: int, fit: CurveFit) -> float | None:
    """Estimate ``line[index]`` from its nearest valid neighbours, ``None`` if there are none."""
    valid = ~np.isnan(line)
    below = np.flatnonzero(valid[:index])
    above = np.flatnonzero(valid[index + 1 :]) + index + 1
    if below.size and above.size:
        lo, hi = below[-1], above[0]
        fit.update(2, labels[[lo, hi]], line[[lo, hi]], UpdateState.GRID_POINT_CHANGED)
        return fit.get_value(labels[index])
    if below.size:
        return float(line[below[-1]])
    if above.size:
        return float(line[above[0]])
    return None


class MissingValueReplenishment(ABC):
    """Strategy filling the ``NaN`` cells of a label matrix."""

    name: str = ""

    @abstractmethod
    def estimate(self, grid: np.ndarray, xs: np.ndarray, ys: np.ndarray, row: int, column: int) -> float:
        """Value for the missing ``grid[row, column]``."""

    def replenish(self, matrix: LabelMatrix) -> LabelMatrix:
        """Copy of ``matrix`` with every missing cell filled."""
        if matrix.is_completely_defined:
            return matrix
        grid = matrix.to_array()
        xs, ys = matrix.horizontal_double_labels, matrix.vertical_double_labels

        cells: List[Tuple[int, int]] = [tuple(ij) for ij in np.argwhere(np.isnan(grid))]
        estimates = [self.estimate(grid, xs, ys, i, j) for i, j in cells]
        for (i, j), value in zip(cells, estimates):
            grid[i, j] = value
        log.debug("%s replenished %d cell(s)", self.name, len(cells))

        return LabelMatrix.from_array(
            grid,
            matrix.horizontal_labels,
            matrix.vertical_labels,
            horizontal_double_labels=xs,
            vertical_double_labels=ys,
            corner_label=matrix.corner_label,
        )

    def __call__(self, matrix: LabelMatrix) -> LabelMatrix:
        return self.replenish(matrix)


class AlongXAxisReplenishment(MissingValueReplenishment):
    """Interpolate each missing cell between its nearest valid row neighbours."""

    name = "x-axis"

    def __init__(self, horizontal: Interpolator | str = "linear") -> None:
        self._fit = _two_point_fit(horizontal)

    def estimate(self, grid, xs, ys, row, column):
        value = _nearest(grid[row], xs, column, self._fit)
        if value is None:
            raise ReplenishmentError(REPLENISH.format(row=row, column=column, axis="the x-axis"))
        return value


class WeightedNearestReplenishment(MissingValueReplenishment):
    """Convex combination of the row and the column estimate.

    ``weight`` is the share of the column (y-axis) estimate.  When one axis
    has no valid neighbour at all the other axis alone is used.
    """

    name = "weighted"

    def __init__(
        self,
        horizontal: Interpolator | str = "linear",
        vertical: Interpolator | str = "linear",
        weight: float = 0.5,
    ) -> None:
        if not 0.0 <= weight <= 1.0:
            raise ValueError(f"`weight` must be in [0, 1], got {weight}.")
        self.weight = float(weight)
        self._x_fit = _two_point_fit(horizontal)
        self._y_fit = _two_point_fit(vertical)

    def estimate(self, grid, xs, ys, row, column):
        along_x = _nearest(grid[row], xs, column, self._x_fit)
        along_y = _nearest(grid[:, column], ys, row, self._y_fit)
        if along_x is None and along_y is None:
            raise ReplenishmentError(REPLENISH.format(row=row, column=column, axis="either axis"))
        if along_y is None:
            return along_x
        if along_x is None:
            return along_y
        return (1.0 - self.weight) * along_x + self.weight * along_y


# --------------------------------------------------------------------------- #
# registry
# --------------------------------------------------------------------------- #

_REGISTRY: Dict[str, Type[MissingValueReplenishment]] = {
    AlongXAxisReplenishment.name: AlongXAxisReplenishment,
    WeightedNearestReplenishment.name: WeightedNearestReplenishment,
}

available = MappingProxyType(_REGISTRY)


def get_replenishment(tag: str, **kwargs) -> MissingValueReplenishment:
    """Instantiate a replenishment by short name (``'x-axis'`` or ``'weighted'``)."""
    try:
        cls = _REGISTRY[tag]
    except KeyError as exc:
        raise KeyError(f"Unknown replenishment '{tag}'. Available: {list(_REGISTRY)}") from exc
    return cls(**kwargs)
