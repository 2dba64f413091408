import numpy as np
import pytest

from gridfit.curves import (
    BuildingDirection,
    ConstantExtrapolator,
    CurveFactory,
    LinearExtrapolator,
)
from gridfit.curves.interpolators import get
from gridfit.surfaces import LabelMatrix


def _factory(tag, left=ConstantExtrapolator, right=ConstantExtrapolator, **kwargs):
    return CurveFactory(get(tag)(**kwargs), left(BuildingDirection.FIRST), right(BuildingDirection.LAST))


@pytest.fixture
def make_factory():
    """``make_factory("cubic", boundary="natural")`` with constant extrapolation."""
    return _factory


@pytest.fixture
def linear_constant():
    return _factory("linear")


@pytest.fixture
def linear_linear():
    return _factory("linear", LinearExtrapolator, LinearExtrapolator)


@pytest.fixture
def reference_matrix():
    """5 rows x 2 columns, values 1..10 stored column-major."""
    return LabelMatrix(5, 2, np.arange(1.0, 11.0), [1.1, 2.7], [1.4, 2.0, 3.7, 4.0, 5.0])


@pytest.fixture
def plane_matrix():
    """4 x 4 grid sampled from ``z = x + 10 y`` on uneven labels."""
    xs = np.array([0.0, 0.5, 1.5, 3.0])
    ys = np.array([1.0, 2.0, 2.5, 4.0])
    values = xs[None, :] + 10.0 * ys[:, None]
    return LabelMatrix.from_array(values, xs, ys)
