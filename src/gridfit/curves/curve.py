"""
curves.curve
============

User-facing grid point curves.

:class:`GridPointCurve` owns a mutable, sorted grid point set and one fit plus
(for interpolation) a left and a right extrapolation.  Edits only record
*what* changed; :meth:`GridPointCurve.update` hands the accumulated
:class:`UpdateState` to the fit, so moving values on fixed arguments never
refactorizes a spline system.

:class:`CurveFactory` bundles a fitting approach with its extrapolators and
stamps out curves – the unit the surface layer works with.

Example
-------
>>> from gridfit.curves import CurveFactory, ConstantExtrapolator
>>> from gridfit.curves.interpolators import get
>>> factory = CurveFactory(get("linear")(), ConstantExtrapolator("first"), ConstantExtrapolator("last"))
>>> curve = factory.create_from(3, [0.0, 1.0, 2.0], [1.0, 3.0, 2.0])
>>> curve.get_value(0.5), curve.get_value(-1.0)
(2.0, 1.0)
"""

from __future__ import annotations

from bisect import bisect_left
from typing import Sequence

import numpy as np

from ..errors import BDE_LEFT, BDE_RIGHT, NOE_DOMAIN, BuildingDirectionError, OutOfDomainError
from .base import CurveFitting
from .extrapolators import Extrapolator, NoExtrapolation
from .parametrizations import Parametrization
from .state import BuildingDirection, FittingQuality, UpdateState, strided

__all__ = ["GridPointCurve", "CurveFactory"]


def _check_extrapolators(fitting: CurveFitting, left: Extrapolator | None, right: Extrapolator | None):
    if isinstance(fitting, Parametrization):
        if left is not None or right is not None:
            raise ValueError("A parametrization does not take extrapolators.")
        return None, None

    left = left if left is not None else NoExtrapolation(BuildingDirection.FIRST)
    right = right if right is not None else NoExtrapolation(BuildingDirection.LAST)
    if left.direction is not BuildingDirection.FIRST:
        raise BuildingDirectionError(BDE_LEFT.format(direction=left.direction.value))
    if right.direction is not BuildingDirection.LAST:
        raise BuildingDirectionError(BDE_RIGHT.format(direction=right.direction.value))
    return left, right


class GridPointCurve:
    """Sorted grid points + fit + extrapolation on both sides."""

    def __init__(
        self,
        fitting: CurveFitting,
        left: Extrapolator | None = None,
        right: Extrapolator | None = None,
    ) -> None:
        self.fitting = fitting
        self.left_extrapolator, self.right_extrapolator = _check_extrapolators(fitting, left, right)

        self._fit = fitting.create()
        self._left = self.left_extrapolator.create(self._fit) if self.left_extrapolator else None
        self._right = self.right_extrapolator.create(self._fit) if self.right_extrapolator else None

        self._arguments: list[float] = []
        self._values: list[float] = []
        self._state = UpdateState.GRID_POINT_CHANGED

    # ------------------------------------------------------------------ #
    # Grid point editing
    # ------------------------------------------------------------------ #

    def add(self, argument: float, value: float) -> int:
        """Insert a grid point, returns its index.

        Raises
        ------
        ValueError  if a grid point with the same argument exists.
        """
        argument = float(argument)
        idx = bisect_left(self._arguments, argument)
        if idx < len(self._arguments) and self._arguments[idx] == argument:
            raise ValueError(f"Grid point with argument {argument} already exists.")
        self._arguments.insert(idx, argument)
        self._values.insert(idx, float(value))
        self._state |= UpdateState.GRID_POINT_CHANGED
        return idx

    def extend(self, arguments: Sequence[float], values: Sequence[float]) -> None:
        if len(arguments) != len(values):
            raise ValueError("`arguments` and `values` length mismatch.")
        for t, y in zip(arguments, values):
            self.add(t, y)

    def remove(self, index: int) -> None:
        del self._arguments[index]
        del self._values[index]
        self._state |= UpdateState.GRID_POINT_CHANGED

    def set_value(self, index: int, value: float) -> None:
        self._values[index] = float(value)
        self._state |= UpdateState.VALUES_CHANGED

    def set_argument(self, index: int, argument: float) -> None:
        """Move a grid point; the ascending order must be preserved."""
        argument = float(argument)
        n = len(self._arguments)
        index = range(n)[index]
        if (index > 0 and self._arguments[index - 1] >= argument) or (
            index < n - 1 and self._arguments[index + 1] <= argument
        ):
            raise ValueError(f"Argument {argument} breaks the strictly increasing order at index {index}.")
        self._arguments[index] = argument
        self._state |= UpdateState.ARGUMENTS_CHANGED

    def update(self) -> None:
        """Refit after edits; no-op without pending changes or with too few points."""
        if self._state == UpdateState.NO_CHANGE:
            return
        n = len(self._arguments)
        if n < max(2, self.fitting.min_points):
            return
        self._fit.update(n, self._arguments, self._values, self._state)
        if self._left is not None:
            self._left.update()
            self._right.update()
        self._state = UpdateState.NO_CHANGE

    # ------------------------------------------------------------------ #
    # Properties
    # ------------------------------------------------------------------ #

    @property
    def count(self) -> int:
        return len(self._arguments)

    @property
    def arguments(self) -> np.ndarray:
        return np.array(self._arguments)

    @property
    def values(self) -> np.ndarray:
        return np.array(self._values)

    @property
    def state(self) -> UpdateState:
        """Changes not yet pushed into the fit."""
        return self._state

    @property
    def fit(self):
        return self._fit

    @property
    def lower_bound(self) -> float:
        return self._fit.lower_bound

    @property
    def upper_bound(self) -> float:
        return self._fit.upper_bound

    @property
    def is_operable(self) -> bool:
        if self._state != UpdateState.NO_CHANGE or len(self._arguments) < 2:
            return False
        if not self._fit.is_operable:
            return False
        if self._left is not None:
            return self._left.is_operable and self._right.is_operable
        return True

    # ------------------------------------------------------------------ #
    # Evaluation
    # ------------------------------------------------------------------ #

    def _out_of_domain(self, x: float):
        return OutOfDomainError(NOE_DOMAIN.format(x=x, lower=self.lower_bound, upper=self.upper_bound))

    def get_value(self, x: float) -> float:
        if x < self._fit.lower_bound:
            if self._left is None:
                raise self._out_of_domain(x)
            return self._left.get_value(x)
        if x > self._fit.upper_bound:
            if self._right is None:
                raise self._out_of_domain(x)
            return self._right.get_value(x)
        return self._fit.get_value(x)

    def get_derivative(self, x: float) -> float:
        if x < self._fit.lower_bound:
            if self._left is None:
                raise self._out_of_domain(x)
            return self._left.get_derivative(x)
        if x > self._fit.upper_bound:
            if self._right is None:
                raise self._out_of_domain(x)
            return self._right.get_derivative(x)
        return self._fit.get_derivative(x)

    def get_integral(self, lower: float, upper: float) -> float:
        """``∫_lower^upper f`` across left extrapolation, fit and right extrapolation."""
        if lower > upper:
            return -self.get_integral(upper, lower)
        lo, hi = self._fit.lower_bound, self._fit.upper_bound
        total = 0.0
        if lower < lo:
            if self._left is None:
                raise self._out_of_domain(lower)
            total += self._left.get_integral(lower, min(upper, lo))
        if upper > hi:
            if self._right is None:
                raise self._out_of_domain(upper)
            total += self._right.get_integral(max(lower, hi), upper)
        a, b = max(lower, lo), min(upper, hi)
        if a < b:
            total += self._fit.get_integral(a, b)
        return total

    def __call__(self, x: float) -> float:
        return self.get_value(x)

    def __len__(self) -> int:
        return len(self._arguments)

    def __repr__(self) -> str:
        return f"GridPointCurve({self.fitting!r}, count={self.count})"


class CurveFactory:
    """Fitting approach plus extrapolators; creates :class:`GridPointCurve` objects."""

    def __init__(
        self,
        fitting: CurveFitting,
        left: Extrapolator | None = None,
        right: Extrapolator | None = None,
    ) -> None:
        self.fitting = fitting
        self.left, self.right = _check_extrapolators(fitting, left, right)

    @property
    def fitting_quality(self) -> FittingQuality:
        return self.fitting.fitting_quality

    @property
    def min_points(self) -> int:
        return max(2, self.fitting.min_points)

    @property
    def is_parametrization(self) -> bool:
        return isinstance(self.fitting, Parametrization)

    def create(self) -> GridPointCurve:
        """Empty curve."""
        return GridPointCurve(self.fitting, self.left, self.right)

    def create_from(
        self,
        count: int,
        arguments,
        values,
        arg_start: int = 0,
        value_start: int = 0,
        arg_step: int = 1,
        value_step: int = 1,
    ) -> GridPointCurve:
        """Curve over ``count`` strided grid points, already updated."""
        curve = self.create()
        curve.extend(
            strided(arguments, arg_start, arg_step, count).tolist(),
            strided(values, value_start, value_step, count).tolist(),
        )
        curve.update()
        return curve

    def __repr__(self) -> str:
        return f"CurveFactory({self.fitting!r}, {self.left!r}, {self.right!r})"
