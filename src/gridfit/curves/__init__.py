"""
One-dimensional grid point curves.

Public interface
----------------
* **GridPointCurve**, **CurveFactory** – mutable curves and their factory.
* **CubicSplineEvaluator**, **IntegralCache** – piece-wise cubic primitive.
* **interpolators.get(name)** – ``linear``, ``cubic``, ``bessel``.
* **NaturalBoundary**, **ClampedBoundary**, **NotAKnotBoundary** – spline
  boundary conditions, also via ``get_boundary(name)``.
* **PolynomialParametrization** – least-squares fit.
* **ConstantExtrapolator**, **LinearExtrapolator**, **NoExtrapolation**.
* **UpdateState**, **FittingQuality**, **BuildingDirection**.
"""

from . import interpolators
from .base import CurveFit, CurveFitting, EvaluatorFit, Interpolator
from .boundary import (
    BoundaryCondition,
    ClampedBoundary,
    NaturalBoundary,
    NotAKnotBoundary,
    get_boundary,
)
from .curve import CurveFactory, GridPointCurve
from .evaluator import CubicSplineEvaluator, IntegralCache
from .extrapolators import (
    ConstantExtrapolator,
    Extrapolator,
    LinearExtrapolator,
    NoExtrapolation,
    get_extrapolator,
)
from .interpolators import BesselCubicSpline, CommonCubicSpline, LinearInterpolation
from .parametrizations import Parametrization, PolynomialParametrization, get_parametrization
from .state import BuildingDirection, FittingQuality, UpdateState, non_last_nearest_index

__all__ = [
    "interpolators",
    "CurveFit",
    "CurveFitting",
    "EvaluatorFit",
    "Interpolator",
    "BoundaryCondition",
    "NaturalBoundary",
    "ClampedBoundary",
    "NotAKnotBoundary",
    "get_boundary",
    "GridPointCurve",
    "CurveFactory",
    "CubicSplineEvaluator",
    "IntegralCache",
    "Extrapolator",
    "ConstantExtrapolator",
    "LinearExtrapolator",
    "NoExtrapolation",
    "get_extrapolator",
    "LinearInterpolation",
    "CommonCubicSpline",
    "BesselCubicSpline",
    "Parametrization",
    "PolynomialParametrization",
    "get_parametrization",
    "UpdateState",
    "FittingQuality",
    "BuildingDirection",
    "non_last_nearest_index",
]
