"""
Tests for the least-squares polynomial parametrization.

Tolerances:
    exact polynomial data : abs=1e-10
"""
import numpy as np
import pytest

from gridfit.curves import FittingQuality, PolynomialParametrization, UpdateState, get_parametrization

ATOL = 1e-10

T = np.array([-1.0, 0.0, 0.5, 1.5, 2.0, 3.5])


def _fit(degree, t, y):
    fit = PolynomialParametrization(degree).create()
    fit.update(len(t), t, y, UpdateState.GRID_POINT_CHANGED)
    return fit


class TestPolynomialFit:
    def test_reproduces_polynomial(self):
        f = lambda x: 2.0 - x + 0.25 * x**2  # noqa: E731
        fit = _fit(2, T, f(T))
        for x in np.linspace(T[0], T[-1], 13):
            assert fit.get_value(x) == pytest.approx(f(x), abs=ATOL)

    def test_derivative_and_integral(self):
        fit = _fit(2, T, T**2)
        assert fit.get_derivative(1.5) == pytest.approx(3.0, abs=ATOL)
        assert fit.get_integral(0.0, 2.0) == pytest.approx(8.0 / 3.0, abs=ATOL)

    def test_least_squares_line(self):
        t = np.array([0.0, 1.0, 2.0, 3.0])
        y = np.array([0.0, 1.0, 1.0, 2.0])
        fit = _fit(1, t, y)
        slope, intercept = np.polyfit(t, y, 1)
        for x in t:
            assert fit.get_value(x) == pytest.approx(intercept + slope * x, abs=ATOL)

    def test_values_changed_reuses_pseudo_inverse(self):
        fit = _fit(2, T, np.sin(T))
        pinv = fit._pinv
        fit.update(len(T), T, np.cos(T), UpdateState.VALUES_CHANGED)
        assert fit._pinv is pinv
        fresh = _fit(2, T, np.cos(T))
        np.testing.assert_allclose(fit.coefficients, fresh.coefficients, atol=1e-12)

    def test_bounds_and_operability(self):
        fit = _fit(3, T, T)
        assert (fit.lower_bound, fit.upper_bound) == (-1.0, 3.5)
        assert fit.is_operable
        short = _fit(3, T[:3], T[:3])
        assert not short.is_operable


class TestPolynomialFactory:
    def test_properties(self):
        poly = PolynomialParametrization(degree=3)
        assert poly.min_points == 4
        assert poly.fitting_quality is FittingQuality.BEST
        assert not poly.is_local

    def test_localness_spans_grid(self):
        poly = PolynomialParametrization()
        assert poly.left_localness(2, 5) == 2
        assert poly.right_localness(2, 5) == 2
        assert poly.left_localness(0, 5) == 0
        assert poly.right_localness(4, 5) == 0

    def test_negative_degree(self):
        with pytest.raises(ValueError):
            PolynomialParametrization(-1)

    def test_registry(self):
        assert get_parametrization("polynomial", degree=4).degree == 4
        with pytest.raises(KeyError):
            get_parametrization("spline")
