"""
Tests for the global cubic spline and its boundary conditions.

Reference values come from ``scipy.interpolate.CubicSpline`` with the
matching ``bc_type``; integrals are cross-checked with ``scipy.integrate.quad``.

Tolerances:
    against scipy       : rtol=1e-10
    continuity          : atol=1e-10
    quadrature          : atol=1e-6
"""
import numpy as np
import pytest
from scipy.integrate import quad
from scipy.interpolate import CubicSpline

from gridfit.curves import (
    ClampedBoundary,
    CommonCubicSpline,
    NaturalBoundary,
    NotAKnotBoundary,
    UpdateState,
    get_boundary,
)
from gridfit.curves.interpolators import cubic
from gridfit.errors import SingularSystemError

RTOL = 1e-10
ATOL = 1e-10
QUAD_TOL = 1e-6

T = np.array([0.0, 0.7, 1.5, 2.0, 3.2, 4.0, 5.5])
Y = np.array([1.0, -0.3, 0.8, 2.1, 1.7, -0.5, 0.4])


def _fit(boundary, t=T, y=Y):
    fit = CommonCubicSpline(boundary=boundary).create()
    fit.update(len(t), t, y, UpdateState.GRID_POINT_CHANGED)
    return fit


def _samples(t=T):
    return np.linspace(t[0], t[-1], 57)


# ===================================================================
# interpolation and smoothness
# ===================================================================


class TestInterpolation:
    @pytest.mark.parametrize("boundary", ["natural", "not-a-knot", ClampedBoundary(0.5, -1.0)])
    def test_reproduces_grid_values(self, boundary):
        fit = _fit(boundary)
        for t, y in zip(T, Y):
            assert fit.get_value(t) == pytest.approx(y, abs=ATOL)

    @pytest.mark.parametrize("boundary", ["natural", "not-a-knot", ClampedBoundary(0.5, -1.0)])
    def test_c1_c2_continuity(self, boundary):
        fit = _fit(boundary)
        b, c, d = fit.coefficients
        h = np.diff(T)
        slope_end = b[:-1] + 2.0 * c[:-1] * h[:-1] + 3.0 * d[:-1] * h[:-1] ** 2
        curv_end = c[:-1] + 3.0 * d[:-1] * h[:-1]
        np.testing.assert_allclose(slope_end, b[1:], atol=ATOL)
        np.testing.assert_allclose(curv_end, c[1:], atol=ATOL)

    def test_natural_ends(self):
        fit = _fit("natural")
        b, c, d = fit.coefficients
        h_last = T[-1] - T[-2]
        assert c[0] == pytest.approx(0.0, abs=ATOL)
        assert c[-1] + 3.0 * d[-1] * h_last == pytest.approx(0.0, abs=ATOL)

    def test_clamped_ends(self):
        fit = _fit(ClampedBoundary(first_derivative=0.5, last_derivative=-1.0))
        assert fit.get_derivative(T[0]) == pytest.approx(0.5, abs=ATOL)
        assert fit.get_derivative(T[-1]) == pytest.approx(-1.0, abs=ATOL)

    def test_not_a_knot_third_derivative(self):
        fit = _fit("not-a-knot")
        _, _, d = fit.coefficients
        assert d[0] == pytest.approx(d[1], abs=ATOL)
        assert d[-1] == pytest.approx(d[-2], abs=ATOL)


class TestAgainstScipy:
    @pytest.mark.parametrize(
        "boundary, bc_type",
        [
            (NaturalBoundary(), "natural"),
            (NotAKnotBoundary(), "not-a-knot"),
            (ClampedBoundary(0.5, -1.0), ((1, 0.5), (1, -1.0))),
        ],
    )
    def test_values_and_derivatives(self, boundary, bc_type):
        fit = _fit(boundary)
        ref = CubicSpline(T, Y, bc_type=bc_type)
        xs = _samples()
        np.testing.assert_allclose([fit.get_value(x) for x in xs], ref(xs), rtol=RTOL, atol=ATOL)
        np.testing.assert_allclose([fit.get_derivative(x) for x in xs], ref(xs, 1), rtol=RTOL, atol=ATOL)

    def test_integral(self):
        fit = _fit("natural")
        ref = CubicSpline(T, Y, bc_type="natural")
        assert fit.get_integral(0.3, 4.4) == pytest.approx(ref.integrate(0.3, 4.4), rel=RTOL)


class TestExactReproduction:
    @staticmethod
    def f(x):
        return x**3 - 2.0 * x + 1.0

    @pytest.mark.parametrize(
        "boundary",
        [NotAKnotBoundary(), ClampedBoundary(first_derivative=-2.0, last_derivative=3.0 * 5.5**2 - 2.0)],
    )
    def test_cubic_polynomial(self, boundary):
        fit = _fit(boundary, T, self.f(T))
        for x in _samples():
            assert fit.get_value(x) == pytest.approx(self.f(x), rel=1e-9, abs=1e-9)


# ===================================================================
# scenario: [(0,0), (1,1), (2,0), (3,1)] natural
# ===================================================================


class TestNaturalScenario:
    t = np.array([0.0, 1.0, 2.0, 3.0])
    y = np.array([0.0, 1.0, 0.0, 1.0])

    @pytest.fixture
    def fit(self):
        return _fit("natural", self.t, self.y)

    def test_value_between(self, fit):
        assert 0.0 < fit.get_value(0.5) < 1.0

    def test_integral_against_quadrature(self, fit):
        pieces = sum(quad(fit.get_value, lo, hi)[0] for lo, hi in zip(self.t[:-1], self.t[1:]))
        assert fit.get_integral(0.0, 3.0) == pytest.approx(pieces, abs=QUAD_TOL)

    def test_integral_reversed(self, fit):
        assert fit.get_integral(3.0, 0.0) == pytest.approx(-fit.get_integral(0.0, 3.0))


# ===================================================================
# factorization reuse
# ===================================================================


class TestFactorizationReuse:
    def test_values_changed_reuses_factors(self):
        fit = _fit("natural")
        assert fit.factorization_count == 1
        fit.update(len(T), T, 2.0 * Y, UpdateState.VALUES_CHANGED)
        assert fit.factorization_count == 1

    def test_reuse_equals_fresh_fit(self):
        fit = _fit("not-a-knot")
        y_new = np.cos(T)
        fit.update(len(T), T, y_new, UpdateState.VALUES_CHANGED)
        fresh = _fit("not-a-knot", T, y_new)
        for cached, direct in zip(fit.coefficients, fresh.coefficients):
            assert np.array_equal(cached, direct)
        assert fit.get_integral(T[0], T[-1]) == fresh.get_integral(T[0], T[-1])

    def test_arguments_changed_refactorizes(self):
        fit = _fit("natural")
        fit.update(len(T), T * 2.0, Y, UpdateState.ARGUMENTS_CHANGED)
        assert fit.factorization_count == 2
        fresh = _fit("natural", T * 2.0, Y)
        assert fit.get_value(3.3) == pytest.approx(fresh.get_value(3.3), abs=1e-12)

    def test_size_change_refactorizes(self):
        fit = _fit("natural")
        fit.update(5, T, Y, UpdateState.GRID_POINT_CHANGED)
        assert fit.factorization_count == 2
        assert fit.count == 5


# ===================================================================
# factory behaviour
# ===================================================================


class TestFactory:
    def test_default_boundary_is_natural(self):
        assert isinstance(CommonCubicSpline().boundary, NaturalBoundary)

    def test_boundary_from_tag(self):
        spline = CommonCubicSpline("clamped", first_derivative=1.0, last_derivative=2.0)
        assert isinstance(spline.boundary, ClampedBoundary)
        assert spline.boundary.last_derivative == 2.0

    def test_bad_boundary_type(self):
        with pytest.raises(TypeError):
            CommonCubicSpline(boundary=3)

    def test_unknown_boundary_tag(self):
        with pytest.raises(KeyError, match="Available"):
            get_boundary("periodic")

    def test_min_points_and_localness(self):
        assert CommonCubicSpline().min_points == 2
        assert CommonCubicSpline("not-a-knot").min_points == 4
        spline = CommonCubicSpline()
        assert not spline.is_local
        assert spline.left_localness(3, 10) == 3
        assert spline.right_localness(3, 10) == 6



# ===================================================================
# two-point grids
# ===================================================================


class TestTwoPoints:
    T2 = np.array([0.0, 2.0])
    Y2 = np.array([1.0, 3.0])

    def test_natural_is_linear(self):
        fit = _fit("natural", self.T2, self.Y2)
        assert fit.get_value(0.5) == pytest.approx(1.5, abs=ATOL)
        assert fit.get_derivative(1.7) == pytest.approx(1.0, abs=ATOL)

    def test_clamped_matches_scipy(self):
        fit = _fit(ClampedBoundary(0.5, -1.0), self.T2, self.Y2)
        ref = CubicSpline(self.T2, self.Y2, bc_type=((1, 0.5), (1, -1.0)))
        for x in np.linspace(0.0, 2.0, 9):
            assert fit.get_value(x) == pytest.approx(ref(x), rel=RTOL, abs=ATOL)
        assert fit.get_derivative(0.0) == pytest.approx(0.5, abs=ATOL)
        assert fit.get_derivative(2.0) == pytest.approx(-1.0, abs=ATOL)

    def test_factors_are_reused(self):
        fit = _fit("clamped", self.T2, self.Y2)
        fit.update(2, self.T2, -self.Y2, UpdateState.VALUES_CHANGED)
        assert fit.factorization_count == 1
        fresh = _fit("clamped", self.T2, -self.Y2)
        for cached, direct in zip(fit.coefficients, fresh.coefficients):
            assert np.array_equal(cached, direct)

    def test_growing_past_two_points(self):
        fit = _fit("natural", self.T2, self.Y2)
        fit.update(len(T), T, Y, UpdateState.GRID_POINT_CHANGED)
        assert fit.factorization_count == 2
        ref = CubicSpline(T, Y, bc_type="natural")
        assert fit.get_value(2.6) == pytest.approx(ref(2.6), rel=RTOL)


# ===================================================================
# singular systems
# ===================================================================


class TestSingularSystem:
    def test_failed_factorization_is_not_reused(self, monkeypatch):
        fit = _fit("natural")

        def singular(sub, diag, sup):
            n = diag.size
            return sub, diag, sup, np.zeros(n - 2), np.zeros(n, dtype=np.int32), 2

        with monkeypatch.context() as patch:
            patch.setattr(cubic.lapack, "dgttrf", singular)
            with pytest.raises(SingularSystemError, match="info = 2"):
                fit.update(len(T), T * 2.0, Y, UpdateState.ARGUMENTS_CHANGED)

        # same size, values only: the stale factors of T must not be used
        fit.update(len(T), T * 2.0, Y, UpdateState.VALUES_CHANGED)
        assert fit.factorization_count == 2
        fresh = _fit("natural", T * 2.0, Y)
        assert fit.get_value(3.3) == pytest.approx(fresh.get_value(3.3), abs=1e-12)
