"""
curves.interpolators.cubic
==========================

Global ("common") **C² cubic spline** with a pluggable boundary condition.

The second-derivative unknowns ``c_j = f''(t_j)/2`` solve the tridiagonal
system

    h_{j-1} c_{j-1} + 2(h_{j-1}+h_j) c_j + h_j c_{j+1}
        = 3[(y_{j+1}-y_j)/h_j - (y_j-y_{j-1})/h_{j-1}],

closed by the two rows of a :class:`~gridfit.curves.boundary.BoundaryCondition`.

Implementation notes
--------------------
*  The matrix only depends on the grid *arguments*.  It is factorized with
   LAPACK ``dgttrf`` (LU with partial pivoting, extra super-diagonal band
   ``du2`` of length ``n-2``) whenever ``ARGUMENTS_CHANGED`` is set, and the
   cached factors are reused by ``dgttrs`` on value-only updates – e.g.
   repeated calibration passes over fixed abscissas.
*  Two-point grids have no interior row; their 2 x 2 boundary system goes
   through the dense ``dgetrf``/``dgetrs`` pair under the same caching rules.
*  ``b`` and ``d`` follow from ``c`` in one O(n) sweep.
*  The approach is global: any grid point may influence any output.

Example
-------
>>> from gridfit.curves.interpolators import get
>>> spline = get("cubic")(boundary="natural").create()
>>> spline.update(4, [0, 1, 2, 3], [0, 1, 0, 1])
>>> 0.0 < spline.get_value(0.5) < 1.0
True
"""

from __future__ import annotations

import numpy as np
from scipy.linalg import lapack

from ... import _core
from ...errors import SINGULAR, SingularSystemError
from ...logger import get_logger
from ..base import EvaluatorFit
from ..base import Interpolator as InterpolatorBase
from ..boundary import BoundaryCondition, NaturalBoundary, get_boundary
from ..state import UpdateState

log = get_logger(__name__)


class CommonCubicSpline(InterpolatorBase):
    """Cubic spline interpolation closed by a boundary condition."""

    name = "cubic"

    def __init__(self, boundary: BoundaryCondition | str | None = None, annotation: str = "", **boundary_kwargs) -> None:
        super().__init__(annotation)
        if boundary is None:
            boundary = NaturalBoundary()
        elif isinstance(boundary, str):
            boundary = get_boundary(boundary, **boundary_kwargs)
        elif not isinstance(boundary, BoundaryCondition):
            raise TypeError(f"`boundary` must be a BoundaryCondition or a tag, got {type(boundary).__name__}.")
        self.boundary = boundary

    @property
    def min_points(self) -> int:
        return max(2, self.boundary.min_points)

    @property
    def is_local(self) -> bool:
        return False

    def left_localness(self, index: int, count: int) -> int:
        return index

    def right_localness(self, index: int, count: int) -> int:
        return count - 1 - index

    def create(self) -> "CommonCubicSplineFit":
        return CommonCubicSplineFit(self)

    def __repr__(self) -> str:
        return f"CommonCubicSpline(boundary={self.boundary!r})"


class CommonCubicSplineFit(EvaluatorFit):
    """Mutable spline state: evaluator, boundary state and cached LU factors."""

    def __init__(self, factory: CommonCubicSpline) -> None:
        super().__init__(factory)
        self._boundary = factory.boundary.create()
        self._lu: tuple[np.ndarray, ...] | None = None
        self._lu_size = 0
        self.factorization_count = 0

    # ------------------------------------------------------------------ #
    def _factorize(self, t: np.ndarray, n: int) -> None:
        sub = np.empty(n - 1)
        diag = np.empty(n)
        sup = np.empty(n - 1)
        _core.tridiagonal_interior(t, n, sub, diag, sup)
        diag[0], sup[0], sub[n - 2], diag[n - 1] = self._boundary.matrix_rows(t, n)

        self._lu = None
        if n == 2:
            # dgttrf cannot size its du2 band for a 2 x 2 system
            a = np.array([[diag[0], sup[0]], [sub[0], diag[1]]])
            lu, piv, info = lapack.dgetrf(a)
            factors = (lu, piv)
        else:
            dl, d, du, du2, ipiv, info = lapack.dgttrf(sub, diag, sup)
            factors = (dl, d, du, du2, ipiv)
        if info != 0:
            raise SingularSystemError(SINGULAR.format(info=info))
        self._lu = factors
        self._lu_size = n
        self.factorization_count += 1
        log.debug("factorized %d x %d spline system", n, n)

    # ------------------------------------------------------------------ #
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
        n = count
        t = self._evaluator.arguments
        y = self._evaluator.values

        if state & UpdateState.ARGUMENTS_CHANGED or self._lu is None or self._lu_size != n:
            self._factorize(t, n)

        rhs = np.empty(n)
        _core.continuity_rhs(t, y, n, rhs)
        rhs[0], rhs[n - 1] = self._boundary.rhs(t, y, n)

        if n == 2:
            lu, piv = self._lu
            curvature, info = lapack.dgetrs(lu, piv, rhs)
        else:
            dl, dd, du, du2, ipiv = self._lu
            curvature, info = lapack.dgttrs(dl, dd, du, du2, ipiv, rhs)
        if info != 0:
            self._lu = None
            raise SingularSystemError(SINGULAR.format(info=info))
        _core.coefficients_from_curvature(t, y, curvature, n, b, c, d)


# ---------------------------------------------------------------------------
# Registry hook
# ---------------------------------------------------------------------------

Interpolator = CommonCubicSpline
