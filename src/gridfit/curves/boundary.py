"""
curves.boundary
===============

Boundary conditions closing the tridiagonal system of a *common* cubic spline.

The unknowns are ``c_j = f''(t_j) / 2``.  Interior rows are assembled by the
spline itself (:func:`gridfit._core.tridiagonal_interior`); a boundary
condition contributes exactly

* ``(diag[0], super[0])`` – first row,
* ``(sub[n-2], diag[n-1])`` – last row,
* ``rhs[0]`` and ``rhs[n-1]``.

A :class:`BoundaryCondition` is a shareable, annotatable factory; ``create()``
returns the per-fit :class:`BoundaryState` the spline talks to.

Implemented conditions
----------------------
natural     – f'' = 0 at both ends
clamped     – prescribed first derivative at both ends
not-a-knot  – f''' continuous at the second and the last-but-one point
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from types import MappingProxyType
from typing import Dict, Type

import numpy as np

__all__ = [
    "BoundaryCondition",
    "BoundaryState",
    "NaturalBoundary",
    "ClampedBoundary",
    "NotAKnotBoundary",
    "get_boundary",
    "available",
]


class BoundaryState(ABC):
    """Per-fit boundary rows of the spline system."""

    @abstractmethod
    def matrix_rows(self, t: np.ndarray, n: int) -> tuple[float, float, float, float]:
        """Return ``(diag[0], super[0], sub[n-2], diag[n-1])``."""

    @abstractmethod
    def rhs(self, t: np.ndarray, y: np.ndarray, n: int) -> tuple[float, float]:
        """Return ``(rhs[0], rhs[n-1])``."""


class BoundaryCondition(ABC):
    """Factory of :class:`BoundaryState` objects."""

    name: str = ""
    min_points: int = 2

    def __init__(self, annotation: str = "") -> None:
        self.annotation = annotation or ""

    @abstractmethod
    def create(self) -> BoundaryState: ...

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


# --------------------------------------------------------------------------- #
# natural
# --------------------------------------------------------------------------- #


class _NaturalState(BoundaryState):
    def matrix_rows(self, t, n):
        return 1.0, 0.0, 0.0, 1.0

    def rhs(self, t, y, n):
        return 0.0, 0.0


class NaturalBoundary(BoundaryCondition):
    """Vanishing second derivative at both end points."""

    name = "natural"

    def create(self) -> BoundaryState:
        return _NaturalState()


# --------------------------------------------------------------------------- #
# clamped
# --------------------------------------------------------------------------- #


class _ClampedState(BoundaryState):
    def __init__(self, first: float, last: float) -> None:
        self.first = first
        self.last = last

    def matrix_rows(self, t, n):
        h0 = t[1] - t[0]
        hl = t[n - 1] - t[n - 2]
        return 2.0 * h0, h0, hl, 2.0 * hl

    def rhs(self, t, y, n):
        h0 = t[1] - t[0]
        hl = t[n - 1] - t[n - 2]
        return (
            3.0 * ((y[1] - y[0]) / h0 - self.first),
            3.0 * (self.last - (y[n - 1] - y[n - 2]) / hl),
        )


class ClampedBoundary(BoundaryCondition):
    """Prescribed first derivatives ``f'(t_0)`` and ``f'(t_{n-1})``."""

    name = "clamped"

    def __init__(self, first_derivative: float = 0.0, last_derivative: float = 0.0, annotation: str = "") -> None:
        super().__init__(annotation)
        self.first_derivative = float(first_derivative)
        self.last_derivative = float(last_derivative)

    def create(self) -> BoundaryState:
        return _ClampedState(self.first_derivative, self.last_derivative)

    def __repr__(self) -> str:
        return f"ClampedBoundary({self.first_derivative!r}, {self.last_derivative!r})"


# --------------------------------------------------------------------------- #
# not-a-knot
# --------------------------------------------------------------------------- #


class _NotAKnotState(BoundaryState):
    # d_0 = d_1 (resp. d_{n-3} = d_{n-2}) with c_2 (resp. c_{n-3}) eliminated
    # through the neighbouring interior row; keeps the system tridiagonal.

    def matrix_rows(self, t, n):
        h0 = t[1] - t[0]
        h1 = t[2] - t[1]
        hl = t[n - 1] - t[n - 2]
        hp = t[n - 2] - t[n - 3]
        return h0 - h1, 2.0 * h0 + h1, 2.0 * hl + hp, hl - hp

    def rhs(self, t, y, n):
        h0 = t[1] - t[0]
        h1 = t[2] - t[1]
        hl = t[n - 1] - t[n - 2]
        hp = t[n - 2] - t[n - 3]
        r1 = 3.0 * ((y[2] - y[1]) / h1 - (y[1] - y[0]) / h0)
        rl = 3.0 * ((y[n - 1] - y[n - 2]) / hl - (y[n - 2] - y[n - 3]) / hp)
        return h0 * r1 / (h0 + h1), hl * rl / (hl + hp)


class NotAKnotBoundary(BoundaryCondition):
    """Continuous third derivative at the second and last-but-one point."""

    name = "not-a-knot"
    min_points = 4

    def create(self) -> BoundaryState:
        return _NotAKnotState()


# --------------------------------------------------------------------------- #
# registry
# --------------------------------------------------------------------------- #

_REGISTRY: Dict[str, Type[BoundaryCondition]] = {
    NaturalBoundary.name: NaturalBoundary,
    ClampedBoundary.name: ClampedBoundary,
    NotAKnotBoundary.name: NotAKnotBoundary,
}

available = MappingProxyType(_REGISTRY)


def get_boundary(tag: str, **kwargs) -> BoundaryCondition:
    """Instantiate a boundary condition by short name (e.g. ``'natural'``)."""
    try:
        cls = _REGISTRY[tag]
    except KeyError as exc:
        raise KeyError(f"Unknown boundary condition '{tag}'. Available: {list(_REGISTRY)}") from exc
    return cls(**kwargs)
