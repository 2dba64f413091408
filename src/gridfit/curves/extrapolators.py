"""
curves.extrapolators
====================

Values outside ``[lower_bound, upper_bound]`` of a fit.

An :class:`Extrapolator` is a factory carrying a :class:`BuildingDirection`
(the grid point it is anchored at) and the number of boundary grid points it
depends on; ``create(fit)`` binds it to a concrete fit.  The bound object must
be :meth:`~CurveExtrapolation.update`-d after every refit.

constant – flat continuation of the first/last fitted value  (1 point)
linear   – line through the first/last two grid points       (2 points)
none     – evaluation raises :class:`~gridfit.errors.OutOfDomainError`
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from types import MappingProxyType

from ..errors import NOE_EXTRAPOLATION, OutOfDomainError
from .base import CurveFit
from .state import BuildingDirection

__all__ = [
    "Extrapolator",
    "CurveExtrapolation",
    "ConstantExtrapolator",
    "LinearExtrapolator",
    "NoExtrapolation",
    "get_extrapolator",
    "available",
]


class CurveExtrapolation(ABC):
    """Extrapolation bound to one fit."""

    def __init__(self, factory: "Extrapolator", fit: CurveFit) -> None:
        self.factory = factory
        self.fit = fit

    @property
    def is_operable(self) -> bool:
        return True

    @abstractmethod
    def update(self) -> None:
        """Re-read the anchor grid point(s) from the fit."""

    @abstractmethod
    def get_value(self, x: float) -> float: ...

    @abstractmethod
    def get_derivative(self, x: float) -> float: ...

    @abstractmethod
    def get_integral(self, lower: float, upper: float) -> float: ...

    def _anchor_index(self) -> tuple[int, int]:
        """(anchor, neighbour) grid point indices on the building side."""
        if self.factory.direction is BuildingDirection.FIRST:
            return 0, 1
        n = self.fit.count
        return n - 1, n - 2


class Extrapolator(ABC):
    name: str = ""

    def __init__(self, direction: BuildingDirection | str, annotation: str = "") -> None:
        self.direction = BuildingDirection(direction)
        self.annotation = annotation or ""

    @abstractmethod
    def dependency_level(self, count: int) -> int:
        """Number of boundary grid points the extrapolation depends on."""

    @abstractmethod
    def create(self, fit: CurveFit) -> CurveExtrapolation: ...

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.direction.value!r})"


# --------------------------------------------------------------------------- #
# constant
# --------------------------------------------------------------------------- #


class _Constant(CurveExtrapolation):
    def __init__(self, factory, fit):
        super().__init__(factory, fit)
        self.value = float("nan")

    def update(self) -> None:
        anchor, _ = self._anchor_index()
        self.value = self.fit.get_value(float(self.fit.arguments[anchor]))

    def get_value(self, x):
        return self.value

    def get_derivative(self, x):
        return 0.0

    def get_integral(self, lower, upper):
        return self.value * (upper - lower)


class ConstantExtrapolator(Extrapolator):
    name = "constant"

    def dependency_level(self, count: int) -> int:
        return 1

    def create(self, fit):
        return _Constant(self, fit)


# --------------------------------------------------------------------------- #
# linear, slope through the two boundary grid points
# --------------------------------------------------------------------------- #


class _Linear(CurveExtrapolation):
    def __init__(self, factory, fit):
        super().__init__(factory, fit)
        self.reference = float("nan")
        self.reference_value = float("nan")
        self.slope = float("nan")

    def update(self) -> None:
        anchor, neighbour = self._anchor_index()
        t = self.fit.arguments
        y = self.fit.values
        self.reference = float(t[anchor])
        self.reference_value = self.fit.get_value(self.reference)
        self.slope = float((y[anchor] - y[neighbour]) / (t[anchor] - t[neighbour]))

    def get_value(self, x):
        return self.reference_value + self.slope * (x - self.reference)

    def get_derivative(self, x):
        return self.slope

    def get_integral(self, lower, upper):
        ref = self.reference
        return self.slope * (0.5 * (upper * upper - lower * lower) - ref * (upper - lower)) + self.reference_value * (
            upper - lower
        )


class LinearExtrapolator(Extrapolator):
    name = "linear"

    def dependency_level(self, count: int) -> int:
        return 2

    def create(self, fit):
        return _Linear(self, fit)


# --------------------------------------------------------------------------- #
# none
# --------------------------------------------------------------------------- #


class _None(CurveExtrapolation):
    def update(self) -> None:
        pass

    def _raise(self, x):
        raise OutOfDomainError(
            NOE_EXTRAPOLATION.format(x=x, lower=self.fit.lower_bound, upper=self.fit.upper_bound)
        )

    def get_value(self, x):
        self._raise(x)

    def get_derivative(self, x):
        self._raise(x)

    def get_integral(self, lower, upper):
        self._raise(lower if self.factory.direction is BuildingDirection.FIRST else upper)


class NoExtrapolation(Extrapolator):
    name = "none"

    def dependency_level(self, count: int) -> int:
        return 0

    def create(self, fit):
        return _None(self, fit)


# --------------------------------------------------------------------------- #
# registry
# --------------------------------------------------------------------------- #

_REGISTRY = {
    ConstantExtrapolator.name: ConstantExtrapolator,
    LinearExtrapolator.name: LinearExtrapolator,
    NoExtrapolation.name: NoExtrapolation,
}

available = MappingProxyType(_REGISTRY)


def get_extrapolator(tag: str, direction: BuildingDirection | str) -> Extrapolator:
    """Instantiate an extrapolator by short name, e.g. ``get_extrapolator('constant', 'first')``."""
    try:
        cls = _REGISTRY[tag]
    except KeyError as exc:
        raise KeyError(f"Unknown extrapolator '{tag}'. Available: {list(_REGISTRY)}") from exc
    return cls(direction)
