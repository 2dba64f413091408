"""
Tests for the piece-wise cubic evaluator and its integral cache.

Tolerances:
    closed-form values   : abs=1e-14
    integral sums        : rel=1e-12
"""
import numpy as np
import pytest

from gridfit.curves import CubicSplineEvaluator, UpdateState
from gridfit.curves.evaluator import reallocate

ATOL = 1e-14
RTOL = 1e-12


@pytest.fixture
def hat():
    """Hat function through (0, 0), (1, 1), (2, 0) stored as linear segments."""
    ev = CubicSplineEvaluator()
    b, c, d = ev.update(3, [0.0, 1.0, 2.0], [0.0, 1.0, 0.0], UpdateState.GRID_POINT_CHANGED)
    b[:] = [1.0, -1.0]
    c[:] = 0.0
    d[:] = 0.0
    return ev


@pytest.fixture
def cubic():
    """Two cubic segments with non-trivial coefficients on [0, 1, 3]."""
    ev = CubicSplineEvaluator()
    b, c, d = ev.update(3, [0.0, 1.0, 3.0], [1.0, 2.0, -1.0], UpdateState.GRID_POINT_CHANGED)
    b[:] = [0.5, -0.25]
    c[:] = [0.3, -0.2]
    d[:] = [0.2, 0.05]
    return ev


# ===================================================================
# values and derivatives
# ===================================================================


class TestEvaluation:
    @pytest.mark.parametrize("x, expected", [(0.0, 0.0), (0.5, 0.5), (1.0, 1.0), (1.5, 0.5), (2.0, 0.0)])
    def test_hat_values(self, hat, x, expected):
        assert hat.get_value(x) == pytest.approx(expected, abs=ATOL)

    def test_last_point_returns_grid_value(self, cubic):
        assert cubic.get_value(3.0) == -1.0

    def test_horner_form(self, cubic):
        dt = 0.4
        expected = 1.0 + 0.5 * dt + 0.3 * dt**2 + 0.2 * dt**3
        assert cubic.get_value(dt) == pytest.approx(expected, abs=ATOL)

    def test_outside_uses_end_polynomials(self, hat):
        assert hat.get_value(-1.0) == pytest.approx(-1.0, abs=ATOL)
        assert hat.get_value(3.0) == pytest.approx(-1.0, abs=ATOL)

    def test_derivative(self, hat):
        assert hat.get_derivative(0.5) == pytest.approx(1.0)
        assert hat.get_derivative(1.5) == pytest.approx(-1.0)
        # last grid point belongs to the last segment
        assert hat.get_derivative(2.0) == pytest.approx(-1.0)

    def test_len_and_properties(self, cubic):
        assert len(cubic) == 3
        assert cubic.is_operable
        np.testing.assert_array_equal(cubic.arguments, [0.0, 1.0, 3.0])
        np.testing.assert_array_equal(cubic.values, [1.0, 2.0, -1.0])
        b, c, d = cubic.coefficients
        np.testing.assert_array_equal(c, [0.3, -0.2])
        b[0] = 99.0
        assert cubic.coefficients[0][0] == 0.5


# ===================================================================
# integrals
# ===================================================================


class TestIntegral:
    def test_hat_area(self, hat):
        assert hat.get_integral(0.0, 2.0) == pytest.approx(1.0, rel=RTOL)

    def test_segment_integral(self, hat):
        assert hat.get_segment_integral(0.0, 1.0, 0) == pytest.approx(0.5, rel=RTOL)
        assert hat.get_segment_integral(0.25, 0.75, 0) == pytest.approx(0.25, rel=RTOL)

    def test_same_segment_fast_path(self, hat):
        assert hat.get_integral(1.2, 1.6) == pytest.approx(0.4 * (0.8 + 0.4) / 2.0, rel=RTOL)

    def test_reversed_bounds(self, cubic):
        assert cubic.get_integral(2.5, 0.2) == pytest.approx(-cubic.get_integral(0.2, 2.5), rel=RTOL)

    @pytest.mark.parametrize("cuts", [(0.3, 1.7), (1.0, 2.0), (0.1, 0.9), (0.5, 1.0)])
    def test_additivity(self, cubic, cuts):
        a, b = cuts
        total = cubic.get_integral(0.0, 3.0)
        parts = cubic.get_integral(0.0, a) + cubic.get_integral(a, b) + cubic.get_integral(b, 3.0)
        assert parts == pytest.approx(total, rel=RTOL)

    def test_matches_polynomial_integration(self, cubic):
        b, c, d = cubic.coefficients
        first = np.polynomial.Polynomial([1.0, b[0], c[0], d[0]]).integ()
        second = np.polynomial.Polynomial([2.0, b[1], c[1], d[1]]).integ()
        expected = (first(1.0) - first(0.5)) + (second(1.5) - second(0.0))
        assert cubic.get_integral(0.5, 2.5) == pytest.approx(expected, rel=RTOL)


# ===================================================================
# cache and storage
# ===================================================================


class TestCache:
    def test_dirty_flag(self, hat):
        assert hat.integral_cache.dirty
        hat.get_integral(0.0, 2.0)
        assert not hat.integral_cache.dirty
        hat.integral_cache.invalidate()
        assert hat.integral_cache.dirty

    def test_update_invalidates(self, hat):
        hat.get_integral(0.0, 2.0)
        b, c, d = hat.update(3, None, [0.0, 2.0, 0.0], UpdateState.VALUES_CHANGED)
        assert hat.integral_cache.dirty
        b[:] = [2.0, -2.0]
        c[:] = 0.0
        d[:] = 0.0
        assert hat.get_integral(0.0, 2.0) == pytest.approx(2.0, rel=RTOL)

    def test_values_only_keeps_arguments(self, hat):
        hat.update(3, [5.0, 6.0, 7.0], [0.0, 2.0, 0.0], UpdateState.VALUES_CHANGED)
        np.testing.assert_array_equal(hat.arguments, [0.0, 1.0, 2.0])


class TestStorage:
    def test_spare_capacity(self):
        ev = CubicSplineEvaluator()
        ev.update(3, np.arange(3.0), np.zeros(3), UpdateState.GRID_POINT_CHANGED)
        assert ev.capacity == 13
        ev.update(12, np.arange(12.0), np.zeros(12), UpdateState.GRID_POINT_CHANGED)
        assert ev.capacity == 13
        ev.update(100, np.arange(100.0), np.zeros(100), UpdateState.GRID_POINT_CHANGED)
        assert ev.capacity == 120

    def test_never_shrinks(self):
        ev = CubicSplineEvaluator()
        ev.update(50, np.arange(50.0), np.zeros(50), UpdateState.GRID_POINT_CHANGED)
        cap = ev.capacity
        ev.update(4, np.arange(4.0), np.zeros(4), UpdateState.GRID_POINT_CHANGED)
        assert ev.capacity == cap
        assert len(ev.arguments) == 4

    def test_strided_input(self):
        data = np.arange(12.0)  # 3 x 4 column-major, row 1 = [1, 4, 7, 10]
        ev = CubicSplineEvaluator()
        ev.update(4, [0.0, 1.0, 2.0, 3.0], data, UpdateState.GRID_POINT_CHANGED, value_start=1, value_step=3)
        np.testing.assert_array_equal(ev.values, [1.0, 4.0, 7.0, 10.0])

    def test_reallocate(self):
        arr = np.zeros(5)
        assert reallocate(arr, 5) is arr
        assert reallocate(arr, 6).size == 16
        assert reallocate(arr, 6, spare=1).size == 7
