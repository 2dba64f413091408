"""
curves.base
===========

Abstract contracts of the 1-D fitting layer.

Two kinds of objects are involved:

* **factories** (:class:`CurveFitting` and its two families
  :class:`Interpolator`, :class:`~gridfit.curves.parametrizations.Parametrization`)
  – immutable descriptions of an approach (name, minimum point count,
  fitting quality, localness).  They are shared freely.
* **fits** (:class:`CurveFit`) – mutable, single-owner objects created by
  ``factory.create()`` and fed through :meth:`CurveFit.update`.

The surface layer only relies on these two interfaces.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

import numpy as np

from .evaluator import CubicSplineEvaluator
from .state import FittingQuality, UpdateState

__all__ = ["CurveFitting", "Interpolator", "CurveFit", "EvaluatorFit"]


class CurveFitting(ABC):
    """Factory describing a 1-D curve fitting approach."""

    #: short registry name
    name: str = ""

    def __init__(self, annotation: str = "") -> None:
        self.annotation = annotation or ""

    @property
    @abstractmethod
    def min_points(self) -> int:
        """Minimal number of grid points an operable fit needs."""

    @property
    @abstractmethod
    def fitting_quality(self) -> FittingQuality: ...

    @property
    @abstractmethod
    def is_local(self) -> bool:
        """``True`` if a value only depends on a few neighbouring grid points."""

    @abstractmethod
    def left_localness(self, index: int, count: int) -> int:
        """Number of grid points left of segment ``index`` that influence it."""

    @abstractmethod
    def right_localness(self, index: int, count: int) -> int:
        """Number of grid points right of segment ``index`` that influence it."""

    @abstractmethod
    def create(self) -> "CurveFit": ...

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r})"

    __str__ = __repr__


class Interpolator(CurveFitting):
    """Approach that reproduces every grid point."""

    @property
    def fitting_quality(self) -> FittingQuality:
        return FittingQuality.EXACT


class CurveFit(ABC):
    """A fitted curve on ``[lower_bound, upper_bound]``."""

    def __init__(self, factory: CurveFitting) -> None:
        self.factory = factory

    @abstractmethod
    def update(
        self,
        count: int,
        arguments,
        values,
        state: UpdateState = UpdateState.GRID_POINT_CHANGED,
        arg_start: int = 0,
        value_start: int = 0,
        arg_step: int = 1,
        value_step: int = 1,
    ) -> None:
        """Refit from ``count`` strided grid points after the change ``state``."""

    @property
    @abstractmethod
    def count(self) -> int: ...

    @property
    @abstractmethod
    def arguments(self) -> np.ndarray: ...

    @property
    @abstractmethod
    def values(self) -> np.ndarray: ...

    @property
    def lower_bound(self) -> float:
        return float(self.arguments[0])

    @property
    def upper_bound(self) -> float:
        return float(self.arguments[-1])

    @property
    def is_operable(self) -> bool:
        return self.count >= max(2, self.factory.min_points)

    @abstractmethod
    def get_value(self, x: float) -> float: ...

    @abstractmethod
    def get_derivative(self, x: float) -> float: ...

    @abstractmethod
    def get_integral(self, lower: float, upper: float) -> float: ...

    def __call__(self, x: float) -> float:
        return self.get_value(x)


class EvaluatorFit(CurveFit):
    """Fit whose result is a piece-wise cubic held by a :class:`CubicSplineEvaluator`."""

    def __init__(self, factory: CurveFitting) -> None:
        super().__init__(factory)
        self._evaluator = CubicSplineEvaluator()

    @property
    def evaluator(self) -> CubicSplineEvaluator:
        return self._evaluator

    @property
    def count(self) -> int:
        return self._evaluator.count

    @property
    def arguments(self) -> np.ndarray:
        return self._evaluator.arguments

    @property
    def values(self) -> np.ndarray:
        return self._evaluator.values

    @property
    def coefficients(self) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
        return self._evaluator.coefficients

    def get_value(self, x: float) -> float:
        return self._evaluator.get_value(x)

    def get_derivative(self, x: float) -> float:
        return self._evaluator.get_derivative(x)

    def get_integral(self, lower: float, upper: float) -> float:
        return self._evaluator.get_integral(lower, upper)
