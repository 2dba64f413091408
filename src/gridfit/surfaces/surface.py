"""
surfaces.surface
================

Two-dimensional surfaces composed of two perpendicular 1-D fits.

* :class:`HorizontalVerticalSurface` – one curve per **row** (argument x),
  then a transversal fit in vertical direction (argument y).
* :class:`VerticalHorizontalSurface` – one curve per **column** (argument y),
  then a transversal fit in horizontal direction (argument x).

Both share :class:`TwoStageSurface`, which speaks of *lines* (the per-row or
per-column curves), the coordinate *along* the lines and the coordinate
*across* them.

Evaluation ``get_value(x, y)``
------------------------------
1. Select the relevant lines: all of them for a global transversal fit; for
   a local one the bracketing segment widened by the localness levels, or
   the extrapolator's dependency depth outside the grid, enlarged to the
   fit's minimum point count.
2. Evaluate those line curves at the *along* coordinate.
3. Update the transversal fit – ``VALUES_CHANGED`` if the relevant line set
   equals the one of the previous call, ``GRID_POINT_CHANGED`` otherwise.
4. Evaluate it (or its above/below extrapolation) at the *across* coordinate.

When every line fit is exact, values on a grid line are read straight from
the matrix (NaN cells skipped) instead of evaluating the line curves.

Missing values
--------------
With an incomplete matrix each line is built from its non-NaN cells; lines
with fewer points than the line fit needs are dropped and the kept lines are
tracked through :attr:`TwoStageSurface.label_mapping` (``None`` when nothing
was dropped).  Fewer than two kept lines is fatal.
Passing a :mod:`~gridfit.surfaces.replenishment` strategy to the factories
fills the missing cells beforehand instead.
"""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, Iterator, Union

import numpy as np

from ..curves.curve import CurveFactory, GridPointCurve
from ..curves.state import FittingQuality, UpdateState, non_last_nearest_index
from ..errors import (
    DEGENERATE,
    NOE_DOMAIN,
    NOT_OPERABLE_LINE,
    NOT_OPERABLE_TRANSVERSAL,
    DegenerateSurfaceError,
    NotOperableError,
    OutOfDomainError,
)
from ..logger import get_logger
from .label_matrix import LabelMatrix

if TYPE_CHECKING:
    from .replenishment import MissingValueReplenishment

log = get_logger(__name__)

__all__ = [
    "ConstructionOrder",
    "TwoStageSurface",
    "HorizontalVerticalSurface",
    "VerticalHorizontalSurface",
    "create_surface",
    "create_surface_from_lines",
]

LineFactory = Union[CurveFactory, Callable[[Any], CurveFactory]]


class ConstructionOrder(Enum):
    HORIZONTAL_VERTICAL = "horizontal-vertical"
    VERTICAL_HORIZONTAL = "vertical-horizontal"


# --------------------------------------------------------------------------- #
# transversal fits
# --------------------------------------------------------------------------- #


class _Transversal(ABC):
    """Reusable fit across the lines; remembers the last relevant line set."""

    def __init__(self, factory: CurveFactory) -> None:
        self.factory = factory
        self.fitting = factory.fitting
        self.fit = self.fitting.create()
        self.required = factory.min_points
        self._key: tuple | None = None

    def relevant(self, across: float, labels: np.ndarray) -> tuple[int, int]:
        return 0, len(labels) - 1

    def _update(self, count, labels, values, arg_start, key) -> None:
        if key == self._key and self.fit.is_operable:
            state = UpdateState.VALUES_CHANGED
        else:
            state = UpdateState.GRID_POINT_CHANGED
        self._key = None
        self.fit.update(count, labels, values, state, arg_start=arg_start)
        self._key = key

    @abstractmethod
    def evaluate(self, across, count, labels, values, arg_start, key) -> float: ...


class _TransversalInterpolation(_Transversal):
    def __init__(self, factory: CurveFactory) -> None:
        super().__init__(factory)
        self.above = factory.left.create(self.fit)
        self.below = factory.right.create(self.fit)

    def relevant(self, across, labels):
        n = len(labels)
        if not self.fitting.is_local:
            return 0, n - 1

        first, last = 0, n - 1
        if across < labels[0]:
            last = min(n - 1, self.factory.left.dependency_level(n))
        elif across > labels[n - 1]:
            first = max(0, n - self.factory.right.dependency_level(n) - 1)
        else:
            idx = non_last_nearest_index(across, labels, n)
            first = max(idx - self.fitting.left_localness(idx, n), 0)
            last = min(idx + self.fitting.right_localness(idx, n), n - 1)

        missing = self.required - (last - first + 1)
        if missing > 0:
            first = max(0, first - missing)
            last = min(n - 1, last + missing)
        return first, last

    def evaluate(self, across, count, labels, values, arg_start, key):
        self._update(count, labels, values, arg_start, key)
        if across < self.fit.lower_bound:
            self.above.update()
            return self.above.get_value(across)
        if across > self.fit.upper_bound:
            self.below.update()
            return self.below.get_value(across)
        return self.fit.get_value(across)


class _TransversalParametrization(_Transversal):
    def evaluate(self, across, count, labels, values, arg_start, key):
        self._update(count, labels, values, arg_start, key)
        lower, upper = self.fit.lower_bound, self.fit.upper_bound
        if across < lower or across > upper:
            raise OutOfDomainError(NOE_DOMAIN.format(x=across, lower=lower, upper=upper))
        return self.fit.get_value(across)


def _transversal(factory: CurveFactory) -> _Transversal:
    if factory.is_parametrization:
        return _TransversalParametrization(factory)
    return _TransversalInterpolation(factory)


# --------------------------------------------------------------------------- #
# common machinery
# --------------------------------------------------------------------------- #


class TwoStageSurface(ABC):
    """Curves along one axis plus one transversal fit along the other."""

    def __init__(self, matrix: LabelMatrix, line_factory: LineFactory, transversal: CurveFactory) -> None:
        if matrix is None:
            raise ValueError("`matrix` is required.")
        if line_factory is None:
            raise ValueError("`line_factory` is required.")
        if not isinstance(transversal, CurveFactory):
            raise TypeError("`transversal` must be a CurveFactory.")
        self.matrix = matrix

        if isinstance(line_factory, CurveFactory):
            factory_for = lambda label, _f=line_factory: _f  # noqa: E731
        else:
            factory_for = line_factory

        lines: list[GridPointCurve] = []
        kept: list[int] = []
        exact = True

        if matrix.is_completely_defined:
            along = self._along_labels()
            for j in range(self._line_count()):
                factory = factory_for(self._line_label(j))
                start, step = self._line_layout(j)
                curve = factory.create_from(len(along), along, matrix.data, value_start=start, value_step=step)
                if not curve.is_operable:
                    raise NotOperableError(NOT_OPERABLE_LINE.format(index=j))
                lines.append(curve)
                kept.append(j)
                exact &= factory.fitting_quality is FittingQuality.EXACT
            mapping = None
        else:
            mapping = {}
            for j in range(self._line_count()):
                factory = factory_for(self._line_label(j))
                curve = factory.create()
                for _, arg, value in self._line_cells(j):
                    if not math.isnan(value):
                        curve.add(arg, value)
                if curve.count < factory.min_points:
                    log.debug(
                        "dropping line %d (%r): %d valid point(s), %d required",
                        j, self._line_label(j), curve.count, factory.min_points,
                    )
                    continue
                curve.update()
                if not curve.is_operable:
                    raise NotOperableError(NOT_OPERABLE_LINE.format(index=j))
                mapping[j] = len(lines)
                lines.append(curve)
                kept.append(j)
                exact &= factory.fitting_quality is FittingQuality.EXACT

        if len(lines) < 2:
            raise DegenerateSurfaceError(DEGENERATE.format(count=len(lines)))

        self._transversal = _transversal(transversal)
        if len(lines) < self._transversal.required:
            raise DegenerateSurfaceError(
                NOT_OPERABLE_TRANSVERSAL.format(count=len(lines), required=self._transversal.required)
            )

        self._lines = tuple(lines)
        self._mapping = mapping
        self._across = np.asarray(self._across_labels()[kept], dtype=float)
        self._buffer = np.empty(len(lines))
        self.exact_fit = exact
        log.debug(
            "%s: %d of %d line(s) kept, exact fit = %s",
            type(self).__name__, len(lines), self._line_count(), exact,
        )

    # ------------------------------------------------------------------ #
    # axis specific hooks
    # ------------------------------------------------------------------ #

    @abstractmethod
    def _line_count(self) -> int: ...

    @abstractmethod
    def _line_label(self, index: int) -> Any: ...

    @abstractmethod
    def _line_layout(self, index: int) -> tuple[int, int]:
        """(start, step) of line ``index`` inside the column-major data."""

    @abstractmethod
    def _line_cells(self, index: int) -> Iterator[tuple[Any, float, float]]: ...

    @abstractmethod
    def _cross_cells(self, index: int) -> Iterator[tuple[Any, float, float]]:
        """Cells perpendicular to the lines through along-grid point ``index``."""

    @abstractmethod
    def _along_labels(self) -> np.ndarray: ...

    @abstractmethod
    def _across_labels(self) -> np.ndarray: ...

    # ------------------------------------------------------------------ #
    # properties
    # ------------------------------------------------------------------ #

    @property
    def is_operable(self) -> bool:
        return True

    @property
    def lines(self) -> tuple[GridPointCurve, ...]:
        return self._lines

    @property
    def label_mapping(self) -> dict[int, int] | None:
        """Original line index -> kept line index, ``None`` if no line was dropped."""
        return None if self._mapping is None else dict(self._mapping)

    @property
    def transversal_fit(self):
        return self._transversal.fit

    # ------------------------------------------------------------------ #
    # evaluation paths
    # ------------------------------------------------------------------ #

    def _value(self, along: float, across: float) -> float:
        first, last = self._transversal.relevant(across, self._across)
        count = last - first + 1
        buf = self._buffer
        for k in range(count):
            buf[k] = self._lines[first + k].get_value(along)
        return self._transversal.evaluate(across, count, self._across, buf, first, ("lines", first, count))

    def _value_on_grid(self, index: int, across: float) -> float:
        if not self.exact_fit:
            return self._value(float(self._along_labels()[index]), across)

        labels, values, valid = [], [], []
        for k, (_, arg, value) in enumerate(self._cross_cells(index)):
            if not math.isnan(value):
                labels.append(arg)
                values.append(value)
                valid.append(k)
        if len(values) < self._transversal.required:
            raise NotOperableError(
                NOT_OPERABLE_TRANSVERSAL.format(count=len(values), required=self._transversal.required)
            )
        return self._transversal.evaluate(across, len(values), labels, values, 0, ("grid", tuple(valid)))

    def _value_on_line(self, along: float, index: int) -> float:
        if self._mapping is None:
            return self._lines[index].get_value(along)
        kept = self._mapping.get(range(self._line_count())[index])
        if kept is not None:
            return self._lines[kept].get_value(along)
        return self._value(along, float(self._across_labels()[index]))

    # ------------------------------------------------------------------ #
    # public interface
    # ------------------------------------------------------------------ #

    @abstractmethod
    def get_value(self, x: float, y: float) -> float: ...

    @abstractmethod
    def value_at_column(self, column_index: int, y: float) -> float: ...

    @abstractmethod
    def value_at_row(self, x: float, row_index: int) -> float: ...

    def value_at_horizontal_label(self, label: Any, y: float) -> float:
        """Value on the column labelled ``label``; ``KeyError`` if unknown."""
        return self.value_at_column(self.matrix.horizontal_label_index(label), y)

    def value_at_vertical_label(self, x: float, label: Any) -> float:
        """Value on the row labelled ``label``; ``KeyError`` if unknown."""
        return self.value_at_row(x, self.matrix.vertical_label_index(label))

    def get_values(self, x, y) -> np.ndarray:
        """Element-wise :meth:`get_value` over broadcast ``x`` and ``y``."""
        xs, ys = np.broadcast_arrays(np.asarray(x, dtype=float), np.asarray(y, dtype=float))
        out = np.empty(xs.shape)
        for idx in np.ndindex(xs.shape):
            out[idx] = self.get_value(float(xs[idx]), float(ys[idx]))
        return out

    def __call__(self, x: float, y: float) -> float:
        return self.get_value(x, y)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.matrix!r}, lines={len(self._lines)})"


# --------------------------------------------------------------------------- #
# concrete strategies
# --------------------------------------------------------------------------- #


class HorizontalVerticalSurface(TwoStageSurface):
    """Row curves in x, transversal fit in y."""

    def _line_count(self):
        return self.matrix.row_count

    def _line_label(self, index):
        return self.matrix.vertical_labels[index]

    def _line_layout(self, index):
        return index, self.matrix.row_count

    def _line_cells(self, index):
        return self.matrix.row_with_labels(index)

    def _cross_cells(self, index):
        return self.matrix.column_with_labels(index)

    def _along_labels(self):
        return self.matrix.horizontal_double_labels

    def _across_labels(self):
        return self.matrix.vertical_double_labels

    def get_value(self, x: float, y: float) -> float:
        return self._value(x, y)

    def value_at_column(self, column_index: int, y: float) -> float:
        return self._value_on_grid(column_index, y)

    def value_at_row(self, x: float, row_index: int) -> float:
        return self._value_on_line(x, row_index)


class VerticalHorizontalSurface(TwoStageSurface):
    """Column curves in y, transversal fit in x."""

    def _line_count(self):
        return self.matrix.column_count

    def _line_label(self, index):
        return self.matrix.horizontal_labels[index]

    def _line_layout(self, index):
        return index * self.matrix.row_count, 1

    def _line_cells(self, index):
        return self.matrix.column_with_labels(index)

    def _cross_cells(self, index):
        return self.matrix.row_with_labels(index)

    def _along_labels(self):
        return self.matrix.vertical_double_labels

    def _across_labels(self):
        return self.matrix.horizontal_double_labels

    def get_value(self, x: float, y: float) -> float:
        return self._value(y, x)

    def value_at_column(self, column_index: int, y: float) -> float:
        return self._value_on_line(y, column_index)

    def value_at_row(self, x: float, row_index: int) -> float:
        return self._value_on_grid(row_index, x)


# --------------------------------------------------------------------------- #
# factory
# --------------------------------------------------------------------------- #


def _prepared(matrix: LabelMatrix, replenishment: MissingValueReplenishment | None) -> LabelMatrix:
    if replenishment is None or matrix.is_completely_defined:
        return matrix
    return replenishment.replenish(matrix)


def create_surface(
    matrix: LabelMatrix,
    horizontal: CurveFactory,
    vertical: CurveFactory,
    order: ConstructionOrder | str = ConstructionOrder.HORIZONTAL_VERTICAL,
    replenishment: MissingValueReplenishment | None = None,
) -> TwoStageSurface:
    """Surface with the same horizontal (x) and vertical (y) fits for every line.

    ``horizontal`` / ``vertical`` carry the interpolator and its
    left/above (``FIRST``) and right/below (``LAST``) extrapolators, or a
    parametrization.  A ``replenishment`` fills missing cells first, so no
    line is dropped.
    """
    order = ConstructionOrder(order)
    matrix = _prepared(matrix, replenishment)
    if order is ConstructionOrder.HORIZONTAL_VERTICAL:
        return HorizontalVerticalSurface(matrix, horizontal, vertical)
    return VerticalHorizontalSurface(matrix, vertical, horizontal)


def create_surface_from_lines(
    matrix: LabelMatrix,
    line_factory: LineFactory,
    transversal: CurveFactory,
    order: ConstructionOrder | str = ConstructionOrder.HORIZONTAL_VERTICAL,
    replenishment: MissingValueReplenishment | None = None,
) -> TwoStageSurface:
    """Surface with a per-line curve factory, called with each line's label.

    For ``HORIZONTAL_VERTICAL`` the lines are rows (labelled by vertical
    labels), otherwise columns (labelled by horizontal labels).
    """
    order = ConstructionOrder(order)
    matrix = _prepared(matrix, replenishment)
    if order is ConstructionOrder.HORIZONTAL_VERTICAL:
        return HorizontalVerticalSurface(matrix, line_factory, transversal)
    return VerticalHorizontalSurface(matrix, line_factory, transversal)
