"""
curves.parametrizations
=======================

Approximating (least-squares) curve fits.

A parametrization does not reproduce grid points exactly; its fitting quality
is :attr:`FittingQuality.BEST` and it is never a local approach.  Curves and
surfaces built on a parametrization do not extrapolate: evaluating outside
``[lower_bound, upper_bound]`` raises :class:`~gridfit.errors.OutOfDomainError`.

Implemented
-----------
polynomial – least-squares polynomial of fixed degree
"""

from __future__ import annotations

from types import MappingProxyType

import numpy as np
from numpy.polynomial import polynomial as P

from .base import CurveFit, CurveFitting
from .evaluator import reallocate
from .state import FittingQuality, UpdateState, strided

__all__ = ["Parametrization", "PolynomialParametrization", "get_parametrization", "available"]


class Parametrization(CurveFitting):
    """Base class of approximating fits."""

    @property
    def fitting_quality(self) -> FittingQuality:
        return FittingQuality.BEST

    @property
    def is_local(self) -> bool:
        return False

    def left_localness(self, index: int, count: int) -> int:
        return min(count - 1, max(0, index))

    def right_localness(self, index: int, count: int) -> int:
        return min(count - 1, max(0, count - index - 1))


class PolynomialParametrization(Parametrization):
    """Least-squares polynomial ``p(u) = Σ a_k u^k`` on arguments scaled to [-1, 1]."""

    name = "polynomial"

    def __init__(self, degree: int = 2, annotation: str = "") -> None:
        super().__init__(annotation)
        if degree < 0:
            raise ValueError("`degree` must be non-negative.")
        self.degree = int(degree)

    @property
    def min_points(self) -> int:
        return self.degree + 1

    def create(self) -> "PolynomialFit":
        return PolynomialFit(self)

    def __repr__(self) -> str:
        return f"PolynomialParametrization(degree={self.degree})"


class PolynomialFit(CurveFit):
    """Polynomial fit; the pseudo-inverse of the Vandermonde matrix is cached."""

    def __init__(self, factory: PolynomialParametrization) -> None:
        super().__init__(factory)
        self._count = 0
        self._t = np.empty(0)
        self._y = np.empty(0)
        self._pinv: np.ndarray | None = None
        self._coef = np.zeros(1)
        self._center = 0.0
        self._scale = 1.0

    @property
    def count(self) -> int:
        return self._count

    @property
    def arguments(self) -> np.ndarray:
        return self._t[: self._count]

    @property
    def values(self) -> np.ndarray:
        return self._y[: self._count]

    @property
    def coefficients(self) -> np.ndarray:
        """Power-series coefficients in the scaled variable (copy)."""
        return self._coef.copy()

    def update(
        self,
        count,
        arguments,
        values,
        state=UpdateState.GRID_POINT_CHANGED,
        arg_start=0,
        value_start=0,
        arg_step=1,
        value_step=1,
    ) -> None:
        self._count = count
        if state & UpdateState.ARGUMENTS_CHANGED:
            self._t = reallocate(self._t, count)
            self._t[:count] = strided(arguments, arg_start, arg_step, count)
        if state & UpdateState.VALUES_CHANGED:
            self._y = reallocate(self._y, count)
            self._y[:count] = strided(values, value_start, value_step, count)
        if count < self.factory.min_points:
            return

        if state & UpdateState.ARGUMENTS_CHANGED or self._pinv is None or self._pinv.shape[1] != count:
            t = self.arguments
            lo, hi = t[0], t[-1]
            self._center = 0.5 * (lo + hi)
            self._scale = 0.5 * (hi - lo) if hi > lo else 1.0
            vander = P.polyvander((t - self._center) / self._scale, self.factory.degree)
            self._pinv = np.linalg.pinv(vander)
        self._coef = self._pinv @ self.values

    # ------------------------------------------------------------------ #
    def _u(self, x: float) -> float:
        return (x - self._center) / self._scale

    def get_value(self, x: float) -> float:
        return float(P.polyval(self._u(x), self._coef))

    def get_derivative(self, x: float) -> float:
        return float(P.polyval(self._u(x), P.polyder(self._coef))) / self._scale

    def get_integral(self, lower: float, upper: float) -> float:
        prim = P.polyint(self._coef)
        return float(P.polyval(self._u(upper), prim) - P.polyval(self._u(lower), prim)) * self._scale


_REGISTRY = {PolynomialParametrization.name: PolynomialParametrization}

available = MappingProxyType(_REGISTRY)


def get_parametrization(tag: str, **kwargs) -> Parametrization:
    try:
        cls = _REGISTRY[tag]
    except KeyError as exc:
        raise KeyError(f"Unknown parametrization '{tag}'. Available: {list(_REGISTRY)}") from exc
    return cls(**kwargs)
