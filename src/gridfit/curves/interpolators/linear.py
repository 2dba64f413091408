"""
curves.interpolators.linear
===========================

Piece-wise **linear** interpolation.

Stored as a degenerate cubic (``c = d = 0``) so that evaluation, derivative
and the cached integral share the spline evaluator.  Local approach: a
segment depends on its two end points only.
"""

from __future__ import annotations

import numpy as np

from ..base import EvaluatorFit
from ..base import Interpolator as InterpolatorBase
from ..state import UpdateState


class LinearInterpolation(InterpolatorBase):
    """C⁰ linear interpolation between neighbouring grid points."""

    name = "linear"

    @property
    def min_points(self) -> int:
        return 2

    @property
    def is_local(self) -> bool:
        return True

    def left_localness(self, index: int, count: int) -> int:
        return 0 if index == 0 else 1

    def right_localness(self, index: int, count: int) -> int:
        return 0 if index == count - 1 else 1

    def create(self) -> "LinearInterpolationFit":
        return LinearInterpolationFit(self)


class LinearInterpolationFit(EvaluatorFit):
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
        b, c, d = self._evaluator.update(
            count, arguments, values, state, arg_start, value_start, arg_step, value_step
        )
        t = self._evaluator.arguments
        y = self._evaluator.values
        b[:] = np.diff(y) / np.diff(t)
        c[:] = 0.0
        d[:] = 0.0


# ---------------------------------------------------------------------------
# Registry hook
# ---------------------------------------------------------------------------

Interpolator = LinearInterpolation
