"""
curves.evaluator
================

Storage and evaluation primitive for piece-wise cubic polynomials.

:class:`CubicSplineEvaluator` owns the grid arrays, the per-segment
coefficients ``b, c, d`` and an :class:`IntegralCache`.  It does **not**
compute coefficients – a fitter calls :meth:`CubicSplineEvaluator.update` and
fills the returned views in place:

>>> ev = CubicSplineEvaluator()
>>> b, c, d = ev.update(3, [0.0, 1.0, 2.0], [0.0, 1.0, 0.0], UpdateState.GRID_POINT_CHANGED)
>>> b[:] = [1.0, -1.0]; c[:] = 0.0; d[:] = 0.0
>>> ev.get_value(0.5)
0.5

Notes
-----
* Backing arrays grow with spare capacity ``max(10, n // 5)`` and never
  shrink, so repeated updates with a slowly growing grid do not reallocate.
* Evaluation does not check bounds; callers (curves, extrapolators) do.
"""

from __future__ import annotations

import numpy as np

from .. import _core
from .state import UpdateState, strided

__all__ = ["IntegralCache", "CubicSplineEvaluator", "reallocate"]


def reallocate(arr: np.ndarray, size: int, spare: int | None = None) -> np.ndarray:
    """Return ``arr`` if it can hold ``size`` entries, else a larger buffer.

    The content of a new buffer is undefined.
    """
    if arr.size >= size:
        return arr
    if spare is None:
        spare = max(10, size // 5)
    return np.empty(size + spare)


class IntegralCache:
    """Prefix sums ``I[k] = ∫_{t_0}^{t_k} f`` with a dirty flag.

    Every coefficient mutation must call :meth:`invalidate`; :meth:`values`
    rebuilds lazily with one O(n) sweep.
    """

    def __init__(self) -> None:
        self._values = np.zeros(0)
        self._dirty = True

    @property
    def dirty(self) -> bool:
        return self._dirty

    def invalidate(self) -> None:
        self._dirty = True

    def values(self, t, y, b, c, d, n: int) -> np.ndarray:
        if self._dirty:
            self._values = reallocate(self._values, n, spare=5)
            _core.integral_sweep(t, y, b, c, d, n, self._values)
            self._dirty = False
        return self._values


class CubicSplineEvaluator:
    """Piece-wise cubic ``y_j + b_j dt + c_j dt² + d_j dt³`` on a grid."""

    def __init__(self) -> None:
        self._count = 0
        self._t = np.empty(0)
        self._y = np.empty(0)
        self._b = np.empty(0)
        self._c = np.empty(0)
        self._d = np.empty(0)
        self.integral_cache = IntegralCache()

    # ------------------------------------------------------------------ #
    # Properties
    # ------------------------------------------------------------------ #

    @property
    def count(self) -> int:
        return self._count

    @property
    def arguments(self) -> np.ndarray:
        """Grid arguments (view, length ``count``)."""
        return self._t[: self._count]

    @property
    def values(self) -> np.ndarray:
        """Grid values (view, length ``count``)."""
        return self._y[: self._count]

    @property
    def coefficients(self) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
        """Copies of ``(b, c, d)``, each of length ``count - 1``."""
        m = max(self._count - 1, 0)
        return self._b[:m].copy(), self._c[:m].copy(), self._d[:m].copy()

    @property
    def capacity(self) -> int:
        return int(self._t.size)

    @property
    def is_operable(self) -> bool:
        return self._count >= 2 and self._b.size >= self._count - 1

    # ------------------------------------------------------------------ #
    # Update
    # ------------------------------------------------------------------ #

    def update(
        self,
        count: int,
        arguments,
        values,
        state: UpdateState,
        arg_start: int = 0,
        value_start: int = 0,
        arg_step: int = 1,
        value_step: int = 1,
    ) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
        """Take over the grid and hand out coefficient views to be filled.

        Arguments are copied only if ``ARGUMENTS_CHANGED`` is set, values only
        if ``VALUES_CHANGED`` is set.
        """
        self._count = count
        if state & UpdateState.ARGUMENTS_CHANGED:
            self._t = reallocate(self._t, count)
            self._t[:count] = strided(arguments, arg_start, arg_step, count)
        if state & UpdateState.VALUES_CHANGED:
            self._y = reallocate(self._y, count)
            self._y[:count] = strided(values, value_start, value_step, count)

        m = max(count - 1, 0)
        self._b = reallocate(self._b, m)
        self._c = reallocate(self._c, m)
        self._d = reallocate(self._d, m)
        self.integral_cache.invalidate()
        return self._b[:m], self._c[:m], self._d[:m]

    # ------------------------------------------------------------------ #
    # Evaluation
    # ------------------------------------------------------------------ #

    def _left_index(self, x: float) -> int:
        j = int(np.searchsorted(self._t[: self._count], x, side="right")) - 1
        return min(max(j, 0), self._count - 1)

    def get_value(self, x: float) -> float:
        j = self._left_index(x)
        if j == self._count - 1:
            if x == self._t[j]:
                return float(self._y[j])
            j -= 1
        dt = x - self._t[j]
        return float(self._y[j] + dt * (self._b[j] + dt * (self._c[j] + dt * self._d[j])))

    def get_derivative(self, x: float) -> float:
        j = min(self._left_index(x), self._count - 2)
        dt = x - self._t[j]
        return float(self._b[j] + dt * (2.0 * self._c[j] + dt * 3.0 * self._d[j]))

    def get_segment_integral(self, lower: float, upper: float, j: int) -> float:
        """Closed-form ``∫_lower^upper f`` using the polynomial of segment ``j``."""
        t_j = self._t[j]
        a, b, c, d = self._y[j], self._b[j], self._c[j], self._d[j]
        return float(
            _core.antiderivative(upper - t_j, a, b, c, d) - _core.antiderivative(lower - t_j, a, b, c, d)
        )

    def _primitive(self, x: float, j: int, cache: np.ndarray) -> float:
        """``∫_{t_0}^x f`` for ``x`` located in segment ``j``."""
        if x == self._t[j]:
            return float(cache[j])
        if x == self._t[j + 1]:
            return float(cache[j + 1])
        return float(cache[j]) + self.get_segment_integral(self._t[j], x, j)

    def get_integral(self, lower: float, upper: float) -> float:
        """``∫_lower^upper f`` – cache differences plus segment-local terms."""
        n = self._count
        cache = self.integral_cache.values(self._t, self._y, self._b, self._c, self._d, n)

        i = min(self._left_index(lower), n - 2)
        k = min(self._left_index(upper), n - 2)
        if i == k and lower != self._t[i] and upper != self._t[k]:
            return self.get_segment_integral(lower, upper, i)
        return self._primitive(upper, k, cache) - self._primitive(lower, i, cache)

    # ------------------------------------------------------------------ #

    def __len__(self) -> int:
        return self._count
