"""
Tests for the missing value replenishment of label matrices.
"""
import numpy as np
import pytest

from gridfit.config import SurfaceConfig
from gridfit.curves import PolynomialParametrization, interpolators
from gridfit.errors import ReplenishmentError
from gridfit.surfaces import (
    AlongXAxisReplenishment,
    ConstructionOrder,
    LabelMatrix,
    WeightedNearestReplenishment,
    create_surface,
    create_surface_from_lines,
    get_replenishment,
)

ATOL = 1e-12

XS = np.array([0.0, 1.0, 2.0, 3.0])
YS = np.array([0.0, 1.0, 2.0])
GRID = np.array(
    [
        [1.0, np.nan, np.nan, 7.0],
        [np.nan, 2.0, 4.0, np.nan],
        [0.0, 1.0, np.nan, 3.0],
    ]
)

# nearest valid neighbours of the original row, interpolated linearly
ALONG_X = {(0, 1): 3.0, (0, 2): 5.0, (1, 0): 2.0, (1, 3): 4.0, (2, 2): 2.0}


@pytest.fixture
def sparse():
    return LabelMatrix.from_array(GRID, XS, YS)


@pytest.fixture
def empty_row():
    values = np.array([[1.0, 2.0], [np.nan, np.nan], [3.0, 6.0]])
    return LabelMatrix.from_array(values, [0.0, 1.0], YS)


# ===================================================================
# along the x-axis
# ===================================================================


class TestAlongXAxis:
    @pytest.mark.parametrize("interpolator", ["linear", interpolators.create("cubic", boundary="natural")])
    def test_filled_cells(self, sparse, interpolator):
        filled = AlongXAxisReplenishment(interpolator).replenish(sparse)
        assert filled.is_completely_defined
        for (i, j), expected in ALONG_X.items():
            assert filled[i, j] == pytest.approx(expected, abs=ATOL)

    def test_matches_linear_interpolation(self, sparse):
        filled = AlongXAxisReplenishment().replenish(sparse)
        row = GRID[0]
        valid = ~np.isnan(row)
        np.testing.assert_allclose(filled.row(0), np.interp(XS, XS[valid], row[valid]), atol=ATOL)

    def test_valid_cells_and_labels_are_kept(self, sparse):
        filled = AlongXAxisReplenishment()(sparse)
        mask = ~np.isnan(GRID)
        np.testing.assert_array_equal(filled.to_array()[mask], GRID[mask])
        assert filled.horizontal_labels == sparse.horizontal_labels
        np.testing.assert_array_equal(filled.vertical_double_labels, YS)
        assert not sparse.is_completely_defined

    def test_complete_matrix_is_returned(self, plane_matrix):
        assert AlongXAxisReplenishment().replenish(plane_matrix) is plane_matrix

    def test_empty_row(self, empty_row):
        with pytest.raises(ReplenishmentError, match=r"\(1, 0\)"):
            AlongXAxisReplenishment().replenish(empty_row)

    def test_rejects_wide_interpolators(self):
        with pytest.raises(ValueError, match="needs 3 points"):
            AlongXAxisReplenishment("bessel")
        with pytest.raises(TypeError):
            AlongXAxisReplenishment(PolynomialParametrization(1))


# ===================================================================
# weighted nearest grid points
# ===================================================================


class TestWeightedNearest:
    def test_convex_combination(self, sparse):
        filled = WeightedNearestReplenishment(weight=0.25).replenish(sparse)
        # (0, 1): row gives 3, column [nan, 2, 1] gives 2
        assert filled[0, 1] == pytest.approx(0.75 * 3.0 + 0.25 * 2.0, abs=ATOL)
        # (2, 2): row gives 2, column [nan, 4, nan] gives 4
        assert filled[2, 2] == pytest.approx(0.75 * 2.0 + 0.25 * 4.0, abs=ATOL)

    def test_zero_weight_is_x_axis(self, sparse):
        weighted = WeightedNearestReplenishment(weight=0.0).replenish(sparse)
        along_x = AlongXAxisReplenishment().replenish(sparse)
        np.testing.assert_allclose(weighted.to_array(), along_x.to_array(), atol=ATOL)

    def test_falls_back_to_column(self, empty_row):
        filled = WeightedNearestReplenishment().replenish(empty_row)
        assert filled[1, 0] == pytest.approx(2.0, abs=ATOL)
        assert filled[1, 1] == pytest.approx(4.0, abs=ATOL)

    def test_nothing_to_interpolate(self):
        values = np.array([[np.nan, np.nan], [np.nan, 1.0]])
        matrix = LabelMatrix.from_array(values, [0.0, 1.0], [0.0, 1.0])
        with pytest.raises(ReplenishmentError, match="either axis"):
            WeightedNearestReplenishment().replenish(matrix)

    @pytest.mark.parametrize("weight", [-0.1, 1.5])
    def test_bad_weight(self, weight):
        with pytest.raises(ValueError):
            WeightedNearestReplenishment(weight=weight)


# ===================================================================
# surfaces and configuration
# ===================================================================


class TestSurfaceIntegration:
    @pytest.mark.parametrize("order", list(ConstructionOrder))
    def test_no_line_is_dropped(self, sparse, linear_constant, order):
        surface = create_surface(sparse, linear_constant, linear_constant, order, replenishment=AlongXAxisReplenishment())
        assert surface.label_mapping is None
        for (i, j), expected in ALONG_X.items():
            assert surface(XS[j], YS[i]) == pytest.approx(expected, abs=ATOL)

    def test_from_lines(self, sparse, linear_constant):
        surface = create_surface_from_lines(
            sparse, lambda label: linear_constant, linear_constant, replenishment=get_replenishment("x-axis")
        )
        assert surface(2.0, 0.0) == pytest.approx(5.0, abs=ATOL)

    def test_registry(self):
        assert isinstance(get_replenishment("weighted", weight=0.3), WeightedNearestReplenishment)
        with pytest.raises(KeyError, match="Available"):
            get_replenishment("kriging")

    def test_config(self, sparse):
        cfg = SurfaceConfig.from_mapping(
            {
                "horizontal": {"method": "linear"},
                "vertical": {"method": "linear"},
                "replenishment": "weighted",
                "replenishment_weight": 0.25,
            }
        )
        surface = cfg.build(sparse)
        assert surface.label_mapping is None
        assert surface(1.0, 0.0) == pytest.approx(2.75, abs=ATOL)
