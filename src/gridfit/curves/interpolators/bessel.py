"""
curves.interpolators.bessel
===========================

Local **Bessel (Hermite) cubic spline**.

The slope at an interior grid point is the derivative of the parabola through
the point and its two neighbours,

    b_j = [h_j (y_j - y_{j-1})/h_{j-1} + h_{j-1} (y_{j+1} - y_j)/h_j] / (t_{j+1} - t_{j-1}),

with the corresponding one-sided parabola slopes at both ends.  Each segment
is the Hermite cubic matching values and slopes at its end points – no linear
system, O(n) per update, C¹ but not C² in general.

A grid point only influences the two segments on either side, which is
reported through the localness levels and exploited by the surface layer.
"""

from __future__ import annotations

from ... import _core
from ..base import EvaluatorFit
from ..base import Interpolator as InterpolatorBase
from ..state import UpdateState


class BesselCubicSpline(InterpolatorBase):
    """Hermite cubic spline with Bessel slopes (needs three points)."""

    name = "bessel"

    @property
    def min_points(self) -> int:
        return 3

    @property
    def is_local(self) -> bool:
        return True

    def left_localness(self, index: int, count: int) -> int:
        if index == 0:
            return 0
        if index == 1:
            return 1
        return 2

    def right_localness(self, index: int, count: int) -> int:
        if index >= count - 1:
            return 0
        if index == count - 2:
            return 1
        return 2

    def create(self) -> "BesselCubicSplineFit":
        return BesselCubicSplineFit(self)


class BesselCubicSplineFit(EvaluatorFit):
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
        if count < 3:
            return
        _core.bessel_coefficients(self._evaluator.arguments, self._evaluator.values, count, b, c, d)


# ---------------------------------------------------------------------------
# Registry hook
# ---------------------------------------------------------------------------

Interpolator = BesselCubicSpline
